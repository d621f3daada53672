from typing import Optional

import attrs


@attrs.define(frozen=True)
class Passenger:
    """A traveller on a booking; lives and dies with its booking"""

    name: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = None
    seat_number: Optional[str] = None
    meal_preference: Optional[str] = None
