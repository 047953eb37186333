"""
RetryPolicy - Bounded retries with capped exponential backoff.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable

from recommender.services.errors import UpstreamError


def is_transient_failure(error: BaseException) -> bool:
    """Only 5xx and transport-level upstream failures are retried."""
    return isinstance(error, UpstreamError) and error.is_transient


@dataclass
class RetryPolicy:
    """How many times to attempt a call and how long to wait in between."""

    max_attempts: int = 3  # Total attempts, including the first one
    initial_wait: timedelta = timedelta(milliseconds=500)
    multiplier: float = 2.0
    max_wait: timedelta = timedelta(seconds=5)
    retry_on: Callable[[BaseException], bool] = field(default=is_transient_failure)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def should_retry(self, error: BaseException, attempt: int) -> bool:
        """Whether a failure on the given (1-based) attempt earns another try."""
        return attempt < self.max_attempts and self.retry_on(error)

    def backoff(self, attempt: int) -> float:
        """Seconds to wait after the given (1-based) failed attempt."""
        wait = self.initial_wait.total_seconds() * self.multiplier ** (attempt - 1)
        return min(wait, self.max_wait.total_seconds())
