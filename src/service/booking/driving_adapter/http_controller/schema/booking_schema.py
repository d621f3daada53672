from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.value_object.passenger import Passenger


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PassengerSchema(CamelModel):
    name: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = None
    seat_number: Optional[str] = None
    meal_preference: Optional[str] = None

    def to_value_object(self) -> Passenger:
        return Passenger(
            name=self.name,
            gender=self.gender,
            age=self.age,
            seat_number=self.seat_number,
            meal_preference=self.meal_preference,
        )


class BookingCreateRequest(CamelModel):
    # All optional: missing fields are reported by the use case with its own messages
    flight_id: Optional[int] = None
    user_email: Optional[str] = None
    num_seats: Optional[int] = None
    passengers: Optional[List[PassengerSchema]] = None

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'flightId': 10,
                'userEmail': 'alice@example.com',
                'numSeats': 2,
                'passengers': [
                    {
                        'name': 'Alice',
                        'gender': 'F',
                        'age': 28,
                        'seatNumber': '1A',
                        'mealPreference': 'VEG',
                    },
                    {
                        'name': 'Bob',
                        'gender': 'M',
                        'age': 30,
                        'seatNumber': '1B',
                        'mealPreference': 'NON_VEG',
                    },
                ],
            }
        },
    )


class BookingResponse(CamelModel):
    pnr: str
    flight_id: int
    user_email: str
    num_seats: int
    total_price: float
    status: str
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    passengers: List[PassengerSchema] = []

    @classmethod
    def from_entity(cls, booking: Booking) -> 'BookingResponse':
        return cls(
            pnr=booking.pnr,
            flight_id=booking.flight_id,
            user_email=booking.user_email,
            num_seats=booking.num_seats,
            total_price=booking.total_price,
            status=booking.status.value,
            created_at=booking.created_at,
            cancelled_at=booking.cancelled_at,
            passengers=[
                PassengerSchema(
                    name=p.name,
                    gender=p.gender,
                    age=p.age,
                    seat_number=p.seat_number,
                    meal_preference=p.meal_preference,
                )
                for p in booking.passengers
            ],
        )


class CancelBookingResponse(CamelModel):
    message: str
    pnr: str
    status: str
    cancelled_at: Optional[datetime] = None
