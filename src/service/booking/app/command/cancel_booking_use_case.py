from typing import Optional, Self

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.booking.domain.entity.booking_entity import Booking


class CancelBookingUseCase:
    """
    Cancel a booking on behalf of its owner.

    ACTIVE -> CANCELLED happens once; cancelling again returns the booking as is
    without touching the store. Bookings are never deleted.
    """

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def cancel_booking(self, *, pnr: str, caller_email: Optional[str]) -> Booking:
        async with self.uow:
            booking = await self.uow.booking_command_repo.get_by_pnr(pnr=pnr)
            if not booking:
                raise NotFoundError('PNR not found')

            if not booking.is_owned_by(caller_email):
                raise ForbiddenError('Only the booking owner can cancel this booking')

            if booking.is_cancelled:
                Logger.base.info(f'Booking already cancelled: pnr={pnr}')
                metrics.record_cancellation(result='already_cancelled')
                return booking

            cancelled = await self.uow.booking_command_repo.update_status(
                booking=booking.cancel()
            )
            await self.uow.commit()

        Logger.base.info(f'Booking cancelled: pnr={cancelled.pnr}, user={cancelled.user_email}')
        metrics.record_cancellation(result='cancelled')
        return cancelled
