from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.db_setting import Base


if TYPE_CHECKING:
    from src.service.booking.driven_adapter.model.booking_model import BookingModel


class PassengerModel(Base):
    __tablename__ = 'passenger'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    booking_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('booking.id', ondelete='CASCADE'), nullable=False, index=True
    )
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    seat_number: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    meal_preference: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    booking: Mapped['BookingModel'] = relationship('BookingModel', back_populates='passengers')
