"""
Booking Command Repository Interface

Write side of the booking store. Runs on the session owned by the Unit of Work;
the caller commits.
"""

from abc import ABC, abstractmethod

from src.service.booking.domain.entity.booking_entity import Booking


class PnrCollisionError(Exception):
    """Raised when an insert hits the unique constraint on pnr"""

    def __init__(self, pnr: str):
        self.pnr = pnr
        super().__init__(f'PNR already exists: {pnr}')


class IBookingCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        """
        Insert a booking with its passengers

        Returns:
            Booking with store-assigned id

        Raises:
            PnrCollisionError: pnr is already taken; the session stays usable
        """
        pass

    @abstractmethod
    async def update_status(self, *, booking: Booking) -> Booking:
        """Persist status and cancelled_at of an existing booking"""
        pass

    @abstractmethod
    async def get_by_pnr(self, *, pnr: str) -> Booking | None:
        """Get single booking by PNR (for validation before command operations)"""
        pass
