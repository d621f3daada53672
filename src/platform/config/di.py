"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.db_setting import Database
from src.platform.metrics.booking_metrics import metrics
from src.platform.resilience.circuit_breaker import CircuitBreaker, CircuitBreakerConfig
from src.service.booking.app.interface.i_flight_client import FlightServiceError
from src.service.booking.driven_adapter.http_client.flight_client_impl import (
    FlightClientImpl,
    create_flight_http_client,
)
from src.service.booking.driven_adapter.repo.booking_query_repo_impl import BookingQueryRepoImpl


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager with settings from config_service)
    database = providers.Singleton(Database)

    # Metrics
    booking_metrics = providers.Object(metrics)

    # Repositories (stateless - use session_factory per-request)
    # Command repo is created by the Unit of Work, which owns the transaction
    booking_query_repo = providers.Singleton(
        BookingQueryRepoImpl, session_factory=database.provided.session
    )

    # Flight inventory service (closed by main.py lifespan)
    flight_http_client = providers.Singleton(
        create_flight_http_client,
        base_url=config_service.provided.FLIGHT_SERVICE_BASE_URL,
        timeout=config_service.provided.FLIGHT_SERVICE_TIMEOUT,
    )
    flight_client = providers.Singleton(FlightClientImpl, http_client=flight_http_client)

    # One breaker per process: its window is shared by all requests
    flight_circuit_breaker_config = providers.Singleton(
        CircuitBreakerConfig,
        failure_rate_threshold=config_service.provided.CIRCUIT_BREAKER_FAILURE_RATE_THRESHOLD,
        sliding_window_size=config_service.provided.CIRCUIT_BREAKER_SLIDING_WINDOW_SIZE,
        minimum_number_of_calls=config_service.provided.CIRCUIT_BREAKER_MINIMUM_NUMBER_OF_CALLS,
        wait_duration_in_open_state=config_service.provided.CIRCUIT_BREAKER_WAIT_DURATION_IN_OPEN_STATE,
        permitted_calls_in_half_open_state=config_service.provided.CIRCUIT_BREAKER_PERMITTED_CALLS_IN_HALF_OPEN_STATE,
        record_exceptions=(FlightServiceError,),
    )
    flight_circuit_breaker = providers.Singleton(
        CircuitBreaker,
        name='flight_client',
        config=flight_circuit_breaker_config,
        on_state_change=booking_metrics.provided.on_circuit_state_change,
    )


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
