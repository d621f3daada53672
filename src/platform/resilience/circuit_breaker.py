"""
Three-state circuit breaker for calls to remote services.

    CLOSED ──(failure rate >= threshold over the sliding window)──> OPEN
    OPEN ──(wait duration elapsed, on next call)──> HALF_OPEN
    HALF_OPEN ──(all trial calls recorded, failure rate < threshold)──> CLOSED
    HALF_OPEN ──(all trial calls recorded, failure rate >= threshold)──> OPEN

Usage:
    breaker = CircuitBreaker(name='flight_client', config=CircuitBreakerConfig())

    async def fallback(exc: Exception) -> FlightSnapshot | None:
        raise ServiceUnavailableError('Flight service unavailable')

    flight = await breaker.call(client.get_flight_by_id, flight_id=10, fallback=fallback)

The fallback receives CallNotPermittedError when the call was short-circuited,
or the recorded exception when the call itself failed.
"""

import asyncio
from collections import deque
from enum import StrEnum
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar

import attrs

from src.platform.logging.loguru_io import Logger


_T = TypeVar('_T')


class CircuitState(StrEnum):
    CLOSED = 'closed'
    OPEN = 'open'
    HALF_OPEN = 'half_open'


class CallNotPermittedError(Exception):
    def __init__(self, name: str, state: CircuitState) -> None:
        self.name = name
        self.state = state
        super().__init__(f'Circuit breaker {name!r} is {state.value} and does not permit calls')


def _positive(instance: Any, attribute: attrs.Attribute, value: float) -> None:
    if value <= 0:
        raise ValueError(f'{attribute.name} must be > 0, got {value}')


def _percentage(instance: Any, attribute: attrs.Attribute, value: float) -> None:
    if not 0 < value <= 100:
        raise ValueError(f'{attribute.name} must be within (0, 100], got {value}')


@attrs.define(frozen=True)
class CircuitBreakerConfig:
    failure_rate_threshold: float = attrs.field(default=50.0, validator=_percentage)
    sliding_window_size: int = attrs.field(default=10, validator=_positive)
    minimum_number_of_calls: int = attrs.field(default=5, validator=_positive)
    wait_duration_in_open_state: float = attrs.field(default=10.0, validator=_positive)
    permitted_calls_in_half_open_state: int = attrs.field(default=3, validator=_positive)
    record_exceptions: tuple[type[Exception], ...] = (Exception,)


StateListener = Callable[[str, CircuitState, CircuitState], None]


class CircuitBreaker:
    def __init__(
        self,
        *,
        name: str,
        config: CircuitBreakerConfig,
        clock: Callable[[], float] = time.monotonic,
        on_state_change: Optional[StateListener] = None,
    ) -> None:
        self.name = name
        self.config = config
        self._clock = clock
        self._on_state_change = on_state_change
        self._lock = asyncio.Lock()
        self._state = CircuitState.CLOSED
        # True = failure, False = success
        self._window: deque[bool] = deque(maxlen=config.sliding_window_size)
        self._opened_at = 0.0
        self._half_open_in_flight = 0
        self._half_open_outcomes: list[bool] = []

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def failure_rate(self) -> float:
        """Failure percentage over the current window, -1 until enough calls are recorded"""
        if len(self._window) < self._minimum_calls:
            return -1.0
        return self._rate(self._window)

    @property
    def _minimum_calls(self) -> int:
        return min(self.config.minimum_number_of_calls, self.config.sliding_window_size)

    async def call(
        self,
        func: Callable[..., Awaitable[_T]],
        *args: Any,
        fallback: Optional[Callable[[Exception], Awaitable[_T]]] = None,
        **kwargs: Any,
    ) -> _T:
        try:
            await self._acquire_permission()
        except CallNotPermittedError as e:
            if fallback is None:
                raise
            return await fallback(e)

        try:
            result = await func(*args, **kwargs)
        except self.config.record_exceptions as e:
            await self._on_result(failed=True)
            if fallback is None:
                raise
            return await fallback(e)
        except BaseException:
            # Not a recorded failure, but the half-open trial slot must be released
            await self._release_trial()
            raise

        await self._on_result(failed=False)
        return result

    async def reset(self) -> None:
        async with self._lock:
            self._transition(CircuitState.CLOSED)

    async def _acquire_permission(self) -> None:
        async with self._lock:
            if self._state == CircuitState.OPEN:
                if self._clock() - self._opened_at < self.config.wait_duration_in_open_state:
                    raise CallNotPermittedError(self.name, self._state)
                self._transition(CircuitState.HALF_OPEN)

            if self._state == CircuitState.HALF_OPEN:
                trials = self._half_open_in_flight + len(self._half_open_outcomes)
                if trials >= self.config.permitted_calls_in_half_open_state:
                    raise CallNotPermittedError(self.name, self._state)
                self._half_open_in_flight += 1

    async def _on_result(self, *, failed: bool) -> None:
        async with self._lock:
            if self._state == CircuitState.HALF_OPEN:
                self._half_open_in_flight = max(self._half_open_in_flight - 1, 0)
                self._half_open_outcomes.append(failed)
                if len(self._half_open_outcomes) >= self.config.permitted_calls_in_half_open_state:
                    if self._rate(self._half_open_outcomes) >= self.config.failure_rate_threshold:
                        self._transition(CircuitState.OPEN)
                    else:
                        self._transition(CircuitState.CLOSED)
                return

            if self._state == CircuitState.OPEN:
                # Call started before another one tripped the breaker
                return

            self._window.append(failed)
            if self.failure_rate >= self.config.failure_rate_threshold:
                self._transition(CircuitState.OPEN)

    async def _release_trial(self) -> None:
        async with self._lock:
            if self._state == CircuitState.HALF_OPEN:
                self._half_open_in_flight = max(self._half_open_in_flight - 1, 0)

    def _transition(self, new_state: CircuitState) -> None:
        old_state = self._state
        self._state = new_state
        self._half_open_in_flight = 0
        self._half_open_outcomes = []
        if new_state == CircuitState.OPEN:
            self._opened_at = self._clock()
        if new_state == CircuitState.CLOSED:
            self._window.clear()

        if old_state == new_state:
            return
        Logger.base.warning(
            f'⚡ [CIRCUIT-BREAKER] {self.name}: {old_state.value} -> {new_state.value}'
        )
        if self._on_state_change:
            self._on_state_change(self.name, old_state, new_state)

    @staticmethod
    def _rate(outcomes: 'deque[bool] | list[bool]') -> float:
        return sum(outcomes) * 100.0 / len(outcomes)
