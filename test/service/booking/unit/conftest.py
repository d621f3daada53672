"""Unit test fixtures for the booking service"""

import pytest

from src.platform.resilience.circuit_breaker import CircuitBreaker, CircuitBreakerConfig
from src.service.booking.app.interface.i_flight_client import FlightServiceError


@pytest.fixture
def flight_circuit_breaker() -> CircuitBreaker:
    return CircuitBreaker(
        name='flight_client',
        config=CircuitBreakerConfig(
            failure_rate_threshold=50.0,
            sliding_window_size=2,
            minimum_number_of_calls=2,
            wait_duration_in_open_state=30.0,
            permitted_calls_in_half_open_state=1,
            record_exceptions=(FlightServiceError,),
        ),
    )
