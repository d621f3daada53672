from prometheus_client import Counter, Gauge, Histogram

from src.platform.resilience.circuit_breaker import CircuitState


_STATE_VALUE = {
    CircuitState.CLOSED: 0,
    CircuitState.HALF_OPEN: 1,
    CircuitState.OPEN: 2,
}


class BookingMetrics:
    """
    Booking Service Core Metrics Collector

    Tracks booking outcomes, flight service latency and circuit breaker health
    """

    def __init__(self):
        # ========== Booking Business Metrics ==========
        self.booking_requests = Counter(
            'booking_requests_total',
            'Total create-booking requests',
            ['result'],  # result: created/invalid/not_found/conflict/unavailable/error
        )

        self.booking_cancellations = Counter(
            'booking_cancellations_total',
            'Total cancel-booking requests',
            ['result'],  # result: cancelled/already_cancelled
        )

        self.booked_seats = Counter('booked_seats_total', 'Total seats booked')

        # ========== Flight Service Metrics ==========
        self.flight_lookup_duration = Histogram(
            'flight_lookup_duration_seconds',
            'Flight service lookup duration',
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
        )

        # ========== Circuit Breaker Metrics ==========
        self.circuit_breaker_state = Gauge(
            'circuit_breaker_state',
            'Circuit breaker state (0=closed, 1=half_open, 2=open)',
            ['name'],
        )

        self.circuit_breaker_transitions = Counter(
            'circuit_breaker_transitions_total',
            'Circuit breaker state transitions',
            ['name', 'from_state', 'to_state'],
        )

    def record_booking(self, *, result: str, seats: int = 0) -> None:
        self.booking_requests.labels(result=result).inc()
        if seats:
            self.booked_seats.inc(seats)

    def record_cancellation(self, *, result: str) -> None:
        self.booking_cancellations.labels(result=result).inc()

    def on_circuit_state_change(
        self, name: str, old_state: CircuitState, new_state: CircuitState
    ) -> None:
        self.circuit_breaker_state.labels(name=name).set(_STATE_VALUE[new_state])
        self.circuit_breaker_transitions.labels(
            name=name, from_state=old_state.value, to_state=new_state.value
        ).inc()


# Global metrics instance
metrics = BookingMetrics()
