from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.domain.entity.booking_entity import Booking, BookingStatus
from src.service.booking.domain.value_object.passenger import Passenger
from src.service.booking.driven_adapter.model.booking_model import BookingModel


class BookingQueryRepoImpl(IBookingQueryRepo):
    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ):
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        """
        Get session for query execution.

        If session is injected (from UoW), yield it directly without context management.
        Otherwise, use session_factory context manager.
        """
        if self.session is not None:
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
        else:
            raise RuntimeError('No session or session_factory available')

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
    async def get_by_pnr(self, *, pnr: str) -> Optional[Booking]:
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

    @Logger.io
    async def list_by_user_email(self, *, user_email: str) -> List[Booking]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookingModel)
                .options(selectinload(BookingModel.passengers))
                .where(BookingModel.user_email == user_email)
                .order_by(BookingModel.created_at.desc(), BookingModel.id.desc())
            )
            db_bookings = result.scalars().all()

            return [self._to_entity(db_booking) for db_booking in db_bookings]
