"""
Flight Client (httpx)

GET {FLIGHT_SERVICE_BASE_URL}/api/flight/{flight_id}

404 means the flight does not exist and maps to None. Everything else that is
not a usable 2xx answer is a FlightServiceError, which the circuit breaker counts.
"""

from datetime import datetime
from typing import List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_flight_client import FlightServiceError, IFlightClient
from src.service.booking.domain.value_object.flight_snapshot import FlightSnapshot, SeatSnapshot


class _SeatPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    seat_number: Optional[str] = None
    status: Optional[str] = None


class _FlightPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    id: int
    flight_number: Optional[str] = None
    airline_name: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    departure_time: Optional[datetime] = None
    arrival_time: Optional[datetime] = None
    price: Optional[float] = None
    trip_type: Optional[str] = None
    total_seats: Optional[int] = None
    seats: Optional[List[_SeatPayload]] = None

    def to_snapshot(self) -> FlightSnapshot:
        return FlightSnapshot(
            id=self.id,
            price=self.price,
            seats=[
                SeatSnapshot(seat_number=seat.seat_number, status=seat.status)
                for seat in self.seats or []
            ],
            flight_number=self.flight_number,
            airline_name=self.airline_name,
            origin=self.origin,
            destination=self.destination,
            departure_time=self.departure_time,
            arrival_time=self.arrival_time,
            trip_type=self.trip_type,
            total_seats=self.total_seats,
        )


class FlightClientImpl(IFlightClient):
    def __init__(self, *, http_client: httpx.AsyncClient):
        self.http_client = http_client

    @Logger.io
    async def get_flight_by_id(self, *, flight_id: int) -> Optional[FlightSnapshot]:
        path = f'/api/flight/{flight_id}'
        try:
            response = await self.http_client.get(path)
        except httpx.TimeoutException as e:
            raise FlightServiceError(f'Flight service timed out on {path}') from e
        except httpx.HTTPError as e:
            raise FlightServiceError(f'Flight service request failed on {path}: {e!r}') from e

        if response.status_code == httpx.codes.NOT_FOUND:
            Logger.base.debug(f'🔍 [FLIGHT-CLIENT] Flight {flight_id} not found')
            return None

        if not response.is_success:
            raise FlightServiceError(
                f'Flight service returned {response.status_code} on {path}',
                status_code=response.status_code,
            )

        if response.content.strip() in (b'', b'null'):
            Logger.base.debug(f'🔍 [FLIGHT-CLIENT] Flight {flight_id} returned an empty body')
            return None

        try:
            payload = _FlightPayload.model_validate_json(response.content)
        except ValidationError as e:
            raise FlightServiceError(f'Malformed flight payload on {path}: {e}') from e

        return payload.to_snapshot()


def create_flight_http_client(*, base_url: str, timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=base_url, timeout=httpx.Timeout(timeout))
