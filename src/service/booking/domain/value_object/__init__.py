from src.service.booking.domain.value_object.flight_snapshot import FlightSnapshot, SeatSnapshot
from src.service.booking.domain.value_object.passenger import Passenger
from src.service.booking.domain.value_object.pnr import generate_pnr


__all__ = ['FlightSnapshot', 'Passenger', 'SeatSnapshot', 'generate_pnr']
