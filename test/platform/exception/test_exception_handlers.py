from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel
import pytest

from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.exception.exceptions import (
    ConflictError,
    CustomBaseError,
    ForbiddenError,
    InternalServerError,
    InvalidRequestError,
    NotFoundError,
    ServiceUnavailableError,
)


class _Payload(BaseModel):
    count: int


def _app(error: Exception) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get('/boom')
    async def boom() -> None:
        raise error

    @app.post('/payload')
    async def payload(body: _Payload) -> dict[str, int]:
        return {'count': body.count}

    return app


@pytest.mark.unit
class TestExceptionHandlers:
    @pytest.mark.parametrize(
        'error,status_code',
        [
            (InvalidRequestError('bad'), 400),
            (ForbiddenError('not yours'), 403),
            (NotFoundError('PNR not found'), 404),
            (ConflictError('Not enough seats available'), 409),
            (InternalServerError('Failed to save booking'), 500),
            (ServiceUnavailableError('Flight service unavailable. Try again later.'), 503),
            (CustomBaseError('teapot', 418), 418),
        ],
    )
    def test_custom_errors_keep_status_and_message(self, error: CustomBaseError, status_code):
        client = TestClient(_app(error))

        response = client.get('/boom')

        assert response.status_code == status_code
        assert response.json() == {'detail': error.message}

    def test_value_error_is_bad_request(self):
        response = TestClient(_app(ValueError('bad value'))).get('/boom')

        assert response.status_code == 400
        assert response.json() == {'detail': 'bad value'}

    def test_unhandled_error_is_opaque(self):
        client = TestClient(_app(KeyError('internal')), raise_server_exceptions=False)

        response = client.get('/boom')

        assert response.status_code == 500
        assert response.json() == {'detail': 'Internal server error'}

    def test_request_validation_is_bad_request(self):
        client = TestClient(_app(RuntimeError()))

        response = client.post('/payload', json={'count': 'many'})

        assert response.status_code == 400
        (error,) = response.json()['detail']
        assert error['loc'] == ['body', 'count']
        assert 'ctx' not in error
