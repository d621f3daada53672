from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from src.platform.database.db_setting import Base


if TYPE_CHECKING:
    from src.service.booking.driven_adapter.model.passenger_model import PassengerModel


PNR_UNIQUE_CONSTRAINT = 'uq_booking_pnr'


class BookingModel(Base):
    __tablename__ = 'booking'
    __table_args__ = (UniqueConstraint('pnr', name=PNR_UNIQUE_CONSTRAINT),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pnr: Mapped[str] = mapped_column(String(16), nullable=False)
    flight_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    user_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    num_seats: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[str] = mapped_column(String(20), default='ACTIVE', nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    passengers: Mapped[List['PassengerModel']] = relationship(
        'PassengerModel',
        back_populates='booking',
        cascade='all, delete-orphan',
        order_by='PassengerModel.id',
        lazy='selectin',
    )
