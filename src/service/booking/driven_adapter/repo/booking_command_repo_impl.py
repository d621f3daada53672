"""
Booking Command Repository Implementation

Writes bookings and their passengers. Used through the Unit of Work, which
injects its session and owns commit/rollback.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncContextManager, AsyncIterator, Callable

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_command_repo import (
    IBookingCommandRepo,
    PnrCollisionError,
)
from src.service.booking.domain.entity.booking_entity import Booking, BookingStatus
from src.service.booking.domain.value_object.passenger import Passenger
from src.service.booking.driven_adapter.model.booking_model import (
    PNR_UNIQUE_CONSTRAINT,
    BookingModel,
)
from src.service.booking.driven_adapter.model.passenger_model import PassengerModel


class BookingCommandRepoImpl(IBookingCommandRepo):
    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ):
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        if self.session is not None:
            # Session injected by UoW - use directly (no context manager needed)
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
        else:
            raise RuntimeError('No session or session_factory available')

    @staticmethod
    def _to_model(booking: Booking) -> BookingModel:
        return BookingModel(
            pnr=booking.pnr,
            flight_id=booking.flight_id,
            user_email=booking.user_email,
            num_seats=booking.num_seats,
            total_price=booking.total_price,
            status=booking.status.value,
            created_at=booking.created_at or datetime.now(timezone.utc),
            cancelled_at=booking.cancelled_at,
            passengers=[
                PassengerModel(
                    name=p.name,
                    gender=p.gender,
                    age=p.age,
                    seat_number=p.seat_number,
                    meal_preference=p.meal_preference,
                )
                for p in booking.passengers
            ],
        )

    @staticmethod
    def _to_entity(db_booking: BookingModel) -> Booking:
        return Booking(
            id=db_booking.id,
            pnr=db_booking.pnr,
            flight_id=db_booking.flight_id,
            user_email=db_booking.user_email,
            num_seats=db_booking.num_seats,
            total_price=db_booking.total_price,
            status=BookingStatus(db_booking.status),
            created_at=db_booking.created_at,
            cancelled_at=db_booking.cancelled_at,
            passengers=[
                Passenger(
                    name=p.name,
                    gender=p.gender,
                    age=p.age,
                    seat_number=p.seat_number,
                    meal_preference=p.meal_preference,
                )
                for p in db_booking.passengers
            ],
        )

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        db_booking = self._to_model(booking)
        async with self._get_session() as session:
            try:
                # SAVEPOINT: a duplicate PNR must not poison the outer transaction
                async with session.begin_nested():
                    session.add(db_booking)
                    await session.flush()
            except IntegrityError as e:
                if PNR_UNIQUE_CONSTRAINT in str(e.orig):
                    raise PnrCollisionError(booking.pnr) from e
                raise

            return self._to_entity(db_booking)

    @Logger.io
    async def update_status(self, *, booking: Booking) -> Booking:
        async with self._get_session() as session:
            result = await session.execute(
                update(BookingModel)
                .where(BookingModel.pnr == booking.pnr)
                .values(status=booking.status.value, cancelled_at=booking.cancelled_at)
                .returning(BookingModel.id)
            )
            if result.scalar_one_or_none() is None:
                raise NotFoundError('PNR not found')

            return booking

    @Logger.io
    async def get_by_pnr(self, *, pnr: str) -> Booking | None:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookingModel)
                .options(selectinload(BookingModel.passengers))
                .where(BookingModel.pnr == pnr)
            )
            db_booking = result.scalar_one_or_none()

            if not db_booking:
                return None

            return self._to_entity(db_booking)
