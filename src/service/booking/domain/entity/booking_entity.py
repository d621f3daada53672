from datetime import datetime, timezone
from enum import StrEnum
from typing import List, Optional

import attrs

from src.platform.exception.exceptions import InvalidRequestError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.value_object.passenger import Passenger


class BookingStatus(StrEnum):
    ACTIVE = 'ACTIVE'
    CANCELLED = 'CANCELLED'


@attrs.define
class Booking:
    pnr: str
    flight_id: int
    user_email: str
    num_seats: int
    total_price: float
    passengers: List[Passenger] = attrs.field(factory=list)
    status: BookingStatus = BookingStatus.ACTIVE
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    id: Optional[int] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        pnr: str,
        flight_id: int,
        user_email: str,
        num_seats: int,
        total_price: float,
        passengers: List[Passenger],
    ) -> 'Booking':
        if not passengers:
            raise InvalidRequestError('passengers list is required and cannot be empty')
        if num_seats != len(passengers):
            raise InvalidRequestError('number of passengers must match numSeats')

        return cls(
            pnr=pnr,
            flight_id=flight_id,
            user_email=user_email,
            num_seats=num_seats,
            total_price=total_price,
            passengers=list(passengers),
            status=BookingStatus.ACTIVE,
            created_at=datetime.now(timezone.utc),
            cancelled_at=None,
            id=None,
        )

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED

    def is_owned_by(self, email: Optional[str]) -> bool:
        return email is not None and self.user_email.casefold() == email.casefold()

    @Logger.io
    def with_pnr(self, pnr: str) -> 'Booking':
        return attrs.evolve(self, pnr=pnr)

    @Logger.io
    def cancel(self) -> 'Booking':
        """ACTIVE -> CANCELLED; cancelling a cancelled booking returns it unchanged"""
        if self.is_cancelled:
            return self
        return attrs.evolve(
            self, status=BookingStatus.CANCELLED, cancelled_at=datetime.now(timezone.utc)
        )
