from abc import ABC, abstractmethod
from typing import Optional

from src.service.booking.domain.value_object.flight_snapshot import FlightSnapshot


class FlightServiceError(Exception):
    """Transport-level failure talking to the flight inventory service"""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class IFlightClient(ABC):
    """Port to the remote flight inventory service"""

    @abstractmethod
    async def get_flight_by_id(self, *, flight_id: int) -> Optional[FlightSnapshot]:
        """
        Fetch one flight with its seat map

        Returns:
            FlightSnapshot, or None when the flight service does not know the id

        Raises:
            FlightServiceError: on timeout, connection failure, unexpected status or body
        """
        pass
