from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Response, status
from opentelemetry import trace

from src.platform.exception.exceptions import InvalidRequestError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.dto.booking_request_dto import BookingRequestDto
from src.service.booking.app.query.get_booking_use_case import GetBookingUseCase
from src.service.booking.app.query.list_booking_history_use_case import (
    ListBookingHistoryUseCase,
)
from src.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreateRequest,
    BookingResponse,
    CancelBookingResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)

USER_EMAIL_HEADER = 'X-User-Email'


@router.post('/booking/{flight_id}', status_code=status.HTTP_201_CREATED)
@Logger.io
async def book_ticket(
    flight_id: int,
    response: Response,
    request: Optional[BookingCreateRequest] = None,
    user_email: Optional[str] = Header(default=None, alias=USER_EMAIL_HEADER),
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> BookingResponse:
    with tracer.start_as_current_span('controller.book_ticket') as span:
        span.set_attribute('flight_id', flight_id)

        booking_request = None
        if request is not None:
            if request.flight_id is not None and request.flight_id != flight_id:
                raise InvalidRequestError('Path flightId must match request flightId')
            booking_request = BookingRequestDto(
                flight_id=flight_id,
                user_email=request.user_email,
                num_seats=request.num_seats,
                passengers=(
                    [p.to_value_object() for p in request.passengers]
                    if request.passengers is not None
                    else None
                ),
            )

        booking = await use_case.create_booking(
            request=booking_request, caller_email=user_email
        )
        span.set_attribute('booking.pnr', booking.pnr)

        response.headers['Location'] = f'/api/flight/ticket/{booking.pnr}'
        return BookingResponse.from_entity(booking)


@router.get('/ticket/{pnr}')
@Logger.io
async def get_ticket(
    pnr: str,
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.get_by_pnr(pnr)
    return BookingResponse.from_entity(booking)


@router.get('/booking/history/{email}')
@Logger.io
async def get_booking_history(
    email: str,
    use_case: ListBookingHistoryUseCase = Depends(ListBookingHistoryUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.get_history_by_email(email)
    return [BookingResponse.from_entity(booking) for booking in bookings]


@router.delete('/booking/cancel/{pnr}')
@Logger.io
async def cancel_booking(
    pnr: str,
    user_email: Optional[str] = Header(default=None, alias=USER_EMAIL_HEADER),
    use_case: CancelBookingUseCase = Depends(CancelBookingUseCase.depends),
) -> CancelBookingResponse:
    booking = await use_case.cancel_booking(pnr=pnr, caller_email=user_email)
    return CancelBookingResponse(
        message='Booking cancelled successfully',
        pnr=booking.pnr,
        status=booking.status.value,
        cancelled_at=booking.cancelled_at,
    )
