"""
Test Configuration

Unit tests run without PostgreSQL or the flight service: repositories, the
Unit of Work and the flight client are replaced by fakes and mocks.
"""

# =============================================================================
# Environment setup MUST happen before any application import
# (settings and logging sinks are built at import time)
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)
    os.environ.setdefault('POSTGRES_DB', 'flight_booking_test_db')
    os.environ.setdefault('FLIGHT_SERVICE_BASE_URL', 'http://flight-service.test')


_early_setup_test_environment()

from collections.abc import Iterator  # noqa: E402

import pytest  # noqa: E402

from src.platform.config.di import container  # noqa: E402


@pytest.fixture(autouse=True)
def reset_container_singletons() -> Iterator[None]:
    """Every test starts with a fresh circuit breaker and flight client"""
    yield
    container.reset_singletons()
