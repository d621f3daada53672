from datetime import datetime
from typing import List, Optional

import attrs


AVAILABLE_SEAT_STATUS = 'AVAILABLE'


@attrs.define(frozen=True)
class SeatSnapshot:
    seat_number: Optional[str] = None
    status: Optional[str] = None

    @property
    def is_available(self) -> bool:
        return self.status is not None and self.status.upper() == AVAILABLE_SEAT_STATUS


@attrs.define(frozen=True)
class FlightSnapshot:
    """
    Read-only view of a flight as returned by the flight inventory service.

    Only used at booking time to check availability and compute price; never persisted.
    """

    id: int
    price: Optional[float] = None
    seats: List[SeatSnapshot] = attrs.field(factory=list)
    flight_number: Optional[str] = None
    airline_name: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    departure_time: Optional[datetime] = None
    arrival_time: Optional[datetime] = None
    trip_type: Optional[str] = None
    total_seats: Optional[int] = None

    @property
    def available_seat_count(self) -> int:
        return sum(1 for seat in self.seats if seat.is_available)

    def total_price_for(self, num_seats: int) -> float:
        return (self.price or 0.0) * num_seats
