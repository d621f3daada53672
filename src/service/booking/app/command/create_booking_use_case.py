from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import (
    CustomBaseError,
    ConflictError,
    InternalServerError,
    InvalidRequestError,
    NotFoundError,
    ServiceUnavailableError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.platform.resilience.circuit_breaker import CircuitBreaker
from src.service.booking.app.dto.booking_request_dto import BookingRequestDto
from src.service.booking.app.interface.i_booking_command_repo import PnrCollisionError
from src.service.booking.app.interface.i_flight_client import FlightServiceError, IFlightClient
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.value_object.flight_snapshot import FlightSnapshot
from src.service.booking.domain.value_object.pnr import generate_pnr


FLIGHT_SERVICE_UNAVAILABLE = 'Flight service unavailable. Try again later.'

_RESULT_BY_STATUS = {
    400: 'invalid',
    404: 'not_found',
    409: 'conflict',
    503: 'unavailable',
}


class CreateBookingUseCase:
    """
    Create booking use case

    Flow:
    1. Validate the request and reconcile the owner email with the caller
    2. Look up the flight through the circuit breaker (Fail Fast when open)
    3. Check seat availability and compute the total price
    4. Persist booking + passengers in one transaction, regenerating the PNR on collision

    Seats are only read, never held: two concurrent requests may both pass the
    availability check for the last seats of a flight.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        flight_client: IFlightClient,
        circuit_breaker: CircuitBreaker,
        pnr_max_attempts: int = 3,
    ) -> None:
        self.uow = uow
        self.flight_client = flight_client
        self.circuit_breaker = circuit_breaker
        self.pnr_max_attempts = max(pnr_max_attempts, 1)
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        flight_client: IFlightClient = Depends(Provide[Container.flight_client]),
        circuit_breaker: CircuitBreaker = Depends(Provide[Container.flight_circuit_breaker]),
        config: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            uow=uow,
            flight_client=flight_client,
            circuit_breaker=circuit_breaker,
            pnr_max_attempts=config.PNR_GENERATION_MAX_ATTEMPTS,
        )

    @Logger.io
    async def create_booking(
        self, *, request: Optional[BookingRequestDto], caller_email: Optional[str]
    ) -> Booking:
        """
        Raises:
            InvalidRequestError: malformed request or owner email mismatch
            NotFoundError: flight unknown to the flight service
            ConflictError: not enough AVAILABLE seats
            ServiceUnavailableError: flight service failing or circuit open
            InternalServerError: booking could not be stored
        """
        with self.tracer.start_as_current_span('use_case.create_booking') as span:
            if request is not None and request.flight_id is not None:
                span.set_attribute('booking.flight_id', request.flight_id)
            try:
                booking = await self._create_booking(request=request, caller_email=caller_email)
            except CustomBaseError as e:
                metrics.record_booking(result=_RESULT_BY_STATUS.get(e.status_code, 'error'))
                raise

            span.set_attribute('booking.pnr', booking.pnr)
            metrics.record_booking(result='created', seats=booking.num_seats)
            return booking

    async def _create_booking(
        self, *, request: Optional[BookingRequestDto], caller_email: Optional[str]
    ) -> Booking:
        user_email = self._validate(request=request, caller_email=caller_email)
        assert request is not None and request.flight_id is not None
        assert request.num_seats is not None and request.passengers is not None

        Logger.base.debug(
            f'📝 [CREATE-BOOKING] flightId={request.flight_id}, user={user_email}, '
            f'numSeats={request.num_seats}'
        )

        flight = await self.circuit_breaker.call(
            self._lookup_flight,
            flight_id=request.flight_id,
            fallback=self._flight_service_fallback,
        )
        if flight is None:
            raise NotFoundError(f'Flight not found: {request.flight_id}')

        available = flight.available_seat_count
        if available < request.num_seats:
            raise ConflictError(
                f'Not enough seats available: requested={request.num_seats}, available={available}'
            )

        booking = Booking.create(
            pnr=generate_pnr(),
            flight_id=request.flight_id,
            user_email=user_email,
            num_seats=request.num_seats,
            total_price=flight.total_price_for(request.num_seats),
            passengers=request.passengers,
        )

        try:
            async with self.uow:
                saved = await self._insert_with_unique_pnr(booking)
                await self.uow.commit()
        except CustomBaseError:
            raise
        except Exception as e:
            Logger.base.exception(f'❌ [CREATE-BOOKING] Failed to save booking {booking.pnr}: {e}')
            raise InternalServerError('Failed to save booking') from e

        Logger.base.info(
            f'Booking saved: pnr={saved.pnr}, flightId={saved.flight_id}, user={saved.user_email}'
        )
        return saved

    @staticmethod
    def _validate(*, request: Optional[BookingRequestDto], caller_email: Optional[str]) -> str:
        """Returns the email that will own the booking"""
        if request is None:
            raise InvalidRequestError('Request body is required')
        if not caller_email or not caller_email.strip():
            raise InvalidRequestError('X-User-Email header is required')
        if request.flight_id is None:
            raise InvalidRequestError('flightId is required')
        if request.num_seats is None or request.num_seats <= 0:
            raise InvalidRequestError('numSeats must be provided and > 0')
        if not request.passengers:
            raise InvalidRequestError('passengers list is required and cannot be empty')
        if len(request.passengers) != request.num_seats:
            raise InvalidRequestError('number of passengers must match numSeats')

        if not request.user_email or not request.user_email.strip():
            return caller_email
        if request.user_email.casefold() != caller_email.casefold():
            raise InvalidRequestError('Header user email must match request userEmail')
        return request.user_email

    async def _lookup_flight(self, *, flight_id: int) -> Optional[FlightSnapshot]:
        with metrics.flight_lookup_duration.time():
            try:
                return await self.flight_client.get_flight_by_id(flight_id=flight_id)
            except FlightServiceError as e:
                Logger.base.warning(f'⚠️ [FLIGHT-LOOKUP] flightId={flight_id} failed: {e}')
                raise

    async def _flight_service_fallback(self, error: Exception) -> Optional[FlightSnapshot]:
        Logger.base.warning(
            f'🔌 [FLIGHT-LOOKUP] Fallback ({type(error).__name__}): {FLIGHT_SERVICE_UNAVAILABLE}'
        )
        raise ServiceUnavailableError(FLIGHT_SERVICE_UNAVAILABLE)

    async def _insert_with_unique_pnr(self, booking: Booking) -> Booking:
        for attempt in range(1, self.pnr_max_attempts + 1):
            try:
                return await self.uow.booking_command_repo.create(booking=booking)
            except PnrCollisionError as e:
                Logger.base.warning(
                    f'🔁 [CREATE-BOOKING] {e} (attempt {attempt}/{self.pnr_max_attempts})'
                )
                booking = booking.with_pnr(generate_pnr())

        Logger.base.error(
            f'❌ [CREATE-BOOKING] No unique PNR after {self.pnr_max_attempts} attempts'
        )
        raise InternalServerError('Failed to save booking')
