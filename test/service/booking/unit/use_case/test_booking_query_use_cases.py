from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import NotFoundError
from src.service.booking.app.query.get_booking_use_case import GetBookingUseCase
from src.service.booking.app.query.list_booking_history_use_case import (
    ListBookingHistoryUseCase,
)
from test.service.booking.unit.test_helpers import BASE_TIME, OWNER_EMAIL, make_booking


@pytest.mark.unit
class TestGetBooking:
    async def test_found(self):
        booking = make_booking(pnr='PNR00005')
        repo = AsyncMock()
        repo.get_by_pnr = AsyncMock(return_value=booking)

        result = await GetBookingUseCase(booking_query_repo=repo).get_by_pnr('PNR00005')

        assert result == booking
        repo.get_by_pnr.assert_awaited_once_with(pnr='PNR00005')

    async def test_missing(self):
        repo = AsyncMock()
        repo.get_by_pnr = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError, match='PNR not found'):
            await GetBookingUseCase(booking_query_repo=repo).get_by_pnr('MISSING')


@pytest.mark.unit
class TestListBookingHistory:
    async def test_returns_newest_first(self):
        """
        Given: H1 (older) and H2 (newer) owned by u@t.com
        Then: [H2, H1]
        """
        h1 = make_booking(pnr='H1000000', user_email='u@t.com', created_at=BASE_TIME)
        h2 = make_booking(
            pnr='H2000000', user_email='u@t.com', created_at=BASE_TIME + timedelta(days=1)
        )
        repo = AsyncMock()
        repo.list_by_user_email = AsyncMock(return_value=[h2, h1])

        result = await ListBookingHistoryUseCase(booking_query_repo=repo).get_history_by_email(
            'u@t.com'
        )

        assert [b.pnr for b in result] == ['H2000000', 'H1000000']
        repo.list_by_user_email.assert_awaited_once_with(user_email='u@t.com')

    async def test_empty_history(self):
        repo = AsyncMock()
        repo.list_by_user_email = AsyncMock(return_value=[])

        result = await ListBookingHistoryUseCase(booking_query_repo=repo).get_history_by_email(
            OWNER_EMAIL
        )

        assert result == []
