import pytest

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_config import _parse_http_status_level
from src.platform.logging.loguru_io_utils import (
    MASK,
    mask_sensitive,
    normalize_args_kwargs,
    should_mask_keyword,
    truncate_content,
)
from src.platform.logging.service_context import get_service_context


@pytest.mark.unit
class TestMasking:
    def test_masks_password_in_text(self):
        masked = mask_sensitive("postgresql password='hunter2' host=db")

        assert 'hunter2' not in masked
        assert MASK in masked
        assert 'host=db' in masked

    def test_leaves_plain_values_alone(self):
        value = {'pnr': 'AB12CD34'}

        assert mask_sensitive(value) is value

    def test_masks_sensitive_keyword(self):
        assert should_mask_keyword('Authorization', 'Bearer abc') == MASK
        assert should_mask_keyword('user_email', 'a@b.c') == 'a@b.c'

    def test_truncates_long_content(self):
        truncated = truncate_content('x' * 1500)

        assert truncated.startswith('x' * 1000)
        assert truncated.endswith('(truncated 500 chars)')


@pytest.mark.unit
class TestNormalizeArgsKwargs:
    def test_drops_unknown_kwargs_and_surplus_args(self):
        def target(a, *, b):
            return a, b

        args, kwargs = normalize_args_kwargs(target, 1, 2, b=3, c=4)

        assert args == (1,)
        assert kwargs == {'b': 3}


@pytest.mark.unit
class TestLoggerIo:
    async def test_async_wrapper_returns_and_reraises(self):
        @Logger.io
        async def lookup(*, pnr: str) -> str:
            if pnr == 'MISSING':
                raise NotFoundError('PNR not found')
            return pnr

        assert await lookup(pnr='AB12CD34') == 'AB12CD34'
        with pytest.raises(NotFoundError):
            await lookup(pnr='MISSING')

    def test_sync_wrapper_without_reraise(self):
        @Logger.io(reraise=False)
        def explode() -> int:
            raise RuntimeError('boom')

        assert explode() is None

    def test_service_context(self):
        assert '@' in get_service_context()


@pytest.mark.unit
@pytest.mark.parametrize(
    'message,expected',
    [
        ('127.0.0.1 - "POST /api/flight/booking/2 HTTP/1.1" - 201 - 14ms', 'SUCCESS'),
        ('127.0.0.1 - "GET /api/flight/ticket/NOPE HTTP/1.1" - 404 - 3ms', 'ERROR'),
        ('127.0.0.1 - "POST /api/flight/booking/2 HTTP/1.1" - 503 - 5ms', 'CRITICAL'),
        ('Application startup complete', None),
    ],
)
def test_access_log_status_maps_to_level(message, expected):
    assert _parse_http_status_level(message) == expected
