"""
CircuitBreaker - Stops calling a failing upstream for a cooldown period.

States:
- CLOSED: Normal operation, outcomes are recorded in a sliding window
- OPEN: Upstream is failing, requests are rejected without being sent
- HALF_OPEN: A limited number of trial requests probe for recovery

Transitions:
- CLOSED → OPEN: Failure rate over the window reaches the threshold
- OPEN → HALF_OPEN: After reset_timeout expires
- HALF_OPEN → CLOSED: On successful trial request(s)
- HALF_OPEN → OPEN: On a failed trial request
"""

import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable

from loguru import logger


class CircuitState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "CLOSED"  # Normal operation
    OPEN = "OPEN"  # Blocking requests
    HALF_OPEN = "HALF_OPEN"  # Testing recovery


@dataclass
class CircuitBreakerConfig:
    """Configuration for circuit breaker."""

    failure_rate_threshold: float = 50.0  # Percent of failures in the window
    sliding_window_size: int = 10  # Outcomes remembered while CLOSED
    minimum_calls: int = 5  # Outcomes needed before the rate is evaluated
    reset_timeout: timedelta = timedelta(seconds=30)  # Time before half-open
    half_open_max_requests: int = 3  # Trial requests allowed in half-open state
    success_threshold: int = 1  # Successes needed to close from half-open


class CircuitBreaker:
    """
    Circuit breaker for a single upstream service.

    Every method that touches state takes the internal lock, so outcomes
    recorded from concurrent tasks (or threads) never interleave.

    Usage:
        cb = CircuitBreaker("movies")

        if not cb.try_acquire():
            raise CircuitOpenError(...)

        try:
            result = await make_request()
        except Exception:
            cb.record_failure()
            raise
        cb.record_success()
    """

    def __init__(
        self,
        service_id: str,
        config: CircuitBreakerConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.service_id = service_id
        self.config = config or CircuitBreakerConfig()
        self._clock = clock

        self._state = CircuitState.CLOSED
        self._window: deque[bool] = deque(maxlen=self.config.sliding_window_size)
        self._failure_count = 0
        self._success_count = 0
        self._last_failure_time: datetime | None = None
        self._opened_at: datetime | None = None
        self._half_open_requests = 0
        self._lock = threading.RLock()

    @property
    def state(self) -> CircuitState:
        """Get current state, checking for automatic transitions."""
        with self._lock:
            if self._state == CircuitState.OPEN and self._reset_timeout_elapsed():
                self._state = CircuitState.HALF_OPEN
                self._half_open_requests = 0
                self._success_count = 0
                logger.info(
                    f"Circuit breaker '{self.service_id}' transitioned to HALF_OPEN"
                )
            return self._state

    @property
    def failure_rate(self) -> float:
        """Failure percentage over the current window, 0 when it is empty."""
        with self._lock:
            if not self._window:
                return 0.0
            return 100.0 * sum(self._window) / len(self._window)

    def can_request(self) -> bool:
        """Check if a request would be allowed, without claiming a permit."""
        with self._lock:
            current_state = self.state
            if current_state == CircuitState.CLOSED:
                return True
            if current_state == CircuitState.HALF_OPEN:
                return self._half_open_requests < self.config.half_open_max_requests
            return False

    def try_acquire(self) -> bool:
        """Claim permission for one request. Half-open permits are counted."""
        with self._lock:
            if not self.can_request():
                return False
            if self._state == CircuitState.HALF_OPEN:
                self._half_open_requests += 1
            return True

    def release(self) -> None:
        """Give back a permit for a request that finished without an outcome."""
        with self._lock:
            if self._state == CircuitState.HALF_OPEN and self._half_open_requests > 0:
                self._half_open_requests -= 1

    def record_success(self) -> None:
        """Record a successful request."""
        with self._lock:
            if self._state == CircuitState.HALF_OPEN:
                self._success_count += 1
                if self._success_count >= self.config.success_threshold:
                    self._close()
            elif self._state == CircuitState.CLOSED:
                self._window.append(False)

    def record_failure(self) -> None:
        """Record a failed request."""
        with self._lock:
            self._failure_count += 1
            self._last_failure_time = self._clock()

            if self._state == CircuitState.HALF_OPEN:
                # Any failure in half-open reopens the circuit
                self._open()
            elif self._state == CircuitState.CLOSED:
                self._window.append(True)
                if self._threshold_reached():
                    self._open()

    def _threshold_reached(self) -> bool:
        if len(self._window) < self.config.minimum_calls:
            return False
        return self.failure_rate >= self.config.failure_rate_threshold

    def _reset_timeout_elapsed(self) -> bool:
        return (
            self._opened_at is not None
            and self._clock() >= self._opened_at + self.config.reset_timeout
        )

    def _open(self) -> None:
        """Transition to OPEN state."""
        self._state = CircuitState.OPEN
        self._opened_at = self._clock()
        self._half_open_requests = 0
        logger.warning(
            f"Circuit breaker '{self.service_id}' OPENED "
            f"(failure rate {self.failure_rate:.0f}%, {self._failure_count} failures)"
        )

    def _close(self) -> None:
        """Transition to CLOSED state."""
        self._state = CircuitState.CLOSED
        self._window.clear()
        self._failure_count = 0
        self._success_count = 0
        self._opened_at = None
        self._half_open_requests = 0
        logger.info(f"Circuit breaker '{self.service_id}' CLOSED (recovered)")

    def reset(self) -> None:
        """Manually reset the circuit breaker."""
        with self._lock:
            self._state = CircuitState.CLOSED
            self._window.clear()
            self._failure_count = 0
            self._success_count = 0
            self._opened_at = None
            self._half_open_requests = 0
            self._last_failure_time = None
            logger.info(f"Circuit breaker '{self.service_id}' manually reset")

    def get_time_until_reset(self) -> float | None:
        """Get seconds until circuit transitions to half-open."""
        with self._lock:
            if self._state != CircuitState.OPEN or not self._opened_at:
                return None

            reset_at = self._opened_at + self.config.reset_timeout
            remaining = (reset_at - self._clock()).total_seconds()
            return max(0, remaining)

    def get_status(self) -> dict[str, Any]:
        """Get current status as dictionary."""
        with self._lock:
            return {
                "service_id": self.service_id,
                "state": self.state.value,
                "failure_rate": round(self.failure_rate, 1),
                "failure_count": self._failure_count,
                "success_count": self._success_count,
                "last_failure": (
                    self._last_failure_time.isoformat()
                    if self._last_failure_time
                    else None
                ),
                "opened_at": (self._opened_at.isoformat() if self._opened_at else None),
                "time_until_reset": self.get_time_until_reset(),
            }
