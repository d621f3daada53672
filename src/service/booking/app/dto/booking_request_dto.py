from typing import List, Optional

import attrs

from src.service.booking.domain.value_object.passenger import Passenger


@attrs.define
class BookingRequestDto:
    """Booking input as received by the create-booking use case, not yet validated"""

    flight_id: Optional[int] = None
    user_email: Optional[str] = None
    num_seats: Optional[int] = None
    passengers: Optional[List[Passenger]] = None
