from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.booking.domain.entity.booking_entity import Booking


class IBookingQueryRepo(ABC):
    """Repository interface for booking read operations"""

    @abstractmethod
    async def get_by_pnr(self, *, pnr: str) -> Optional[Booking]:
        pass

    @abstractmethod
    async def list_by_user_email(self, *, user_email: str) -> List[Booking]:
        """All bookings of one owner, newest first"""
        pass
