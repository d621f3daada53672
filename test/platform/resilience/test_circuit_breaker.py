"""
Unit tests for CircuitBreaker

Focus:
1. CLOSED -> OPEN once the failure rate over the window reaches the threshold
2. OPEN short-circuits to the fallback without calling the target
3. HALF_OPEN trial calls decide between CLOSED and OPEN
4. Only configured exception types count as failures
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.platform.resilience.circuit_breaker import (
    CallNotPermittedError,
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitState,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> CircuitBreakerConfig:
    return CircuitBreakerConfig(
        failure_rate_threshold=50.0,
        sliding_window_size=4,
        minimum_number_of_calls=4,
        wait_duration_in_open_state=10.0,
        permitted_calls_in_half_open_state=2,
        record_exceptions=(ConnectionError,),
    )


@pytest.fixture
def breaker(config: CircuitBreakerConfig, clock: FakeClock) -> CircuitBreaker:
    return CircuitBreaker(name='flight', config=config, clock=clock)


async def _ok() -> str:
    return 'ok'


async def _fail() -> str:
    raise ConnectionError('flight service down')


async def _trip(breaker: CircuitBreaker, *, failures: int = 4) -> None:
    for _ in range(failures):
        with pytest.raises(ConnectionError):
            await breaker.call(_fail)


@pytest.mark.unit
class TestClosedState:
    async def test_passes_calls_through(self, breaker: CircuitBreaker):
        target = AsyncMock(return_value='flight-10')

        result = await breaker.call(target, 10, fallback=None, verbose=True)

        assert result == 'flight-10'
        target.assert_awaited_once_with(10, verbose=True)
        assert breaker.state == CircuitState.CLOSED

    async def test_stays_closed_below_minimum_number_of_calls(self, breaker: CircuitBreaker):
        await _trip(breaker, failures=3)

        assert breaker.state == CircuitState.CLOSED
        assert breaker.failure_rate == -1.0

    async def test_opens_when_failure_rate_reaches_threshold(self, breaker: CircuitBreaker):
        await breaker.call(_ok)
        await breaker.call(_ok)
        await _trip(breaker, failures=2)

        assert breaker.failure_rate == 50.0
        assert breaker.state == CircuitState.OPEN

    async def test_stays_closed_below_threshold(self, breaker: CircuitBreaker):
        for _ in range(3):
            await breaker.call(_ok)
        await _trip(breaker, failures=1)

        assert breaker.failure_rate == 25.0
        assert breaker.state == CircuitState.CLOSED

    async def test_unrecorded_exception_propagates_and_is_not_counted(
        self, breaker: CircuitBreaker
    ):
        async def bug() -> None:
            raise ValueError('not a transport failure')

        fallback = AsyncMock()
        for _ in range(4):
            with pytest.raises(ValueError):
                await breaker.call(bug, fallback=fallback)

        fallback.assert_not_awaited()
        assert breaker.state == CircuitState.CLOSED
        assert breaker.failure_rate == -1.0

    async def test_fallback_receives_recorded_exception(self, breaker: CircuitBreaker):
        fallback = AsyncMock(return_value='fallback-value')

        result = await breaker.call(_fail, fallback=fallback)

        assert result == 'fallback-value'
        (error,) = fallback.await_args.args
        assert isinstance(error, ConnectionError)


@pytest.mark.unit
class TestOpenState:
    async def test_rejects_without_calling_target(self, breaker: CircuitBreaker):
        await _trip(breaker)
        target = AsyncMock()

        with pytest.raises(CallNotPermittedError) as exc_info:
            await breaker.call(target)

        target.assert_not_awaited()
        assert exc_info.value.state == CircuitState.OPEN
        assert exc_info.value.name == 'flight'

    async def test_fallback_receives_call_not_permitted(self, breaker: CircuitBreaker):
        await _trip(breaker)
        fallback = AsyncMock(return_value=None)

        await breaker.call(_ok, fallback=fallback)

        (error,) = fallback.await_args.args
        assert isinstance(error, CallNotPermittedError)

    async def test_still_open_before_wait_duration(
        self, breaker: CircuitBreaker, clock: FakeClock
    ):
        await _trip(breaker)
        clock.advance(9.9)

        with pytest.raises(CallNotPermittedError):
            await breaker.call(_ok)
        assert breaker.state == CircuitState.OPEN

    async def test_moves_to_half_open_after_wait_duration(
        self, breaker: CircuitBreaker, clock: FakeClock
    ):
        await _trip(breaker)
        clock.advance(10.0)

        assert await breaker.call(_ok) == 'ok'
        assert breaker.state == CircuitState.HALF_OPEN


@pytest.mark.unit
class TestHalfOpenState:
    async def test_closes_when_trial_calls_succeed(
        self, breaker: CircuitBreaker, clock: FakeClock
    ):
        await _trip(breaker)
        clock.advance(10.0)

        await breaker.call(_ok)
        await breaker.call(_ok)

        assert breaker.state == CircuitState.CLOSED
        # window starts over after closing
        assert breaker.failure_rate == -1.0

    async def test_reopens_when_trial_calls_fail(
        self, breaker: CircuitBreaker, clock: FakeClock
    ):
        await _trip(breaker)
        clock.advance(10.0)

        await breaker.call(_ok)
        with pytest.raises(ConnectionError):
            await breaker.call(_fail)

        assert breaker.state == CircuitState.OPEN
        with pytest.raises(CallNotPermittedError):
            await breaker.call(_ok)

    async def test_rejects_calls_beyond_permitted_trials(self, clock: FakeClock):
        breaker = CircuitBreaker(
            name='flight',
            config=CircuitBreakerConfig(
                sliding_window_size=2,
                minimum_number_of_calls=2,
                permitted_calls_in_half_open_state=1,
                record_exceptions=(ConnectionError,),
            ),
            clock=clock,
        )
        await _trip(breaker, failures=2)
        clock.advance(60.0)

        gate = asyncio.Event()

        async def slow_trial() -> str:
            await gate.wait()
            return 'trial'

        trial = asyncio.create_task(breaker.call(slow_trial))
        for _ in range(3):
            await asyncio.sleep(0)
        assert breaker.state == CircuitState.HALF_OPEN

        with pytest.raises(CallNotPermittedError) as exc_info:
            await breaker.call(_ok)
        assert exc_info.value.state == CircuitState.HALF_OPEN

        gate.set()
        assert await trial == 'trial'
        assert breaker.state == CircuitState.CLOSED


@pytest.mark.unit
class TestListenerAndReset:
    async def test_listener_notified_on_each_transition(
        self, config: CircuitBreakerConfig, clock: FakeClock
    ):
        listener = MagicMock()
        breaker = CircuitBreaker(
            name='flight', config=config, clock=clock, on_state_change=listener
        )

        await _trip(breaker)
        clock.advance(10.0)
        await breaker.call(_ok)
        await breaker.call(_ok)

        assert [c.args for c in listener.call_args_list] == [
            ('flight', CircuitState.CLOSED, CircuitState.OPEN),
            ('flight', CircuitState.OPEN, CircuitState.HALF_OPEN),
            ('flight', CircuitState.HALF_OPEN, CircuitState.CLOSED),
        ]

    async def test_reset_closes_open_breaker(self, breaker: CircuitBreaker):
        await _trip(breaker)

        await breaker.reset()

        assert breaker.state == CircuitState.CLOSED
        assert await breaker.call(_ok) == 'ok'


@pytest.mark.unit
class TestConfigValidation:
    @pytest.mark.parametrize(
        'kwargs',
        [
            {'failure_rate_threshold': 0},
            {'failure_rate_threshold': 101},
            {'sliding_window_size': 0},
            {'wait_duration_in_open_state': -1},
            {'permitted_calls_in_half_open_state': 0},
        ],
    )
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            CircuitBreakerConfig(**kwargs)
