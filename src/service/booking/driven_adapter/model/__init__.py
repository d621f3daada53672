"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.booking.driven_adapter.model.booking_model import BookingModel
from src.service.booking.driven_adapter.model.passenger_model import PassengerModel

__all__ = [
    'BookingModel',
    'PassengerModel',
]
