"""Application layer interfaces (Ports)"""

from src.service.booking.app.interface.i_booking_command_repo import (
    IBookingCommandRepo,
    PnrCollisionError,
)
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.app.interface.i_flight_client import FlightServiceError, IFlightClient


__all__ = [
    'FlightServiceError',
    'IBookingCommandRepo',
    'IBookingQueryRepo',
    'IFlightClient',
    'PnrCollisionError',
]
