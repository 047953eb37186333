from datetime import timedelta

import pytest

from fakes import FakeClock, RecordingSleep
from recommender.movies.types import Genre
from recommender.services.circuit_breaker import CircuitBreaker, CircuitBreakerConfig
from recommender.services.resilience import ResilientInvoker
from recommender.services.retry import RetryPolicy


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def breaker(clock) -> CircuitBreaker:
    return CircuitBreaker(
        "movies",
        CircuitBreakerConfig(
            failure_rate_threshold=50.0,
            sliding_window_size=4,
            minimum_calls=4,
            reset_timeout=timedelta(seconds=30),
            half_open_max_requests=1,
        ),
        clock=clock,
    )


@pytest.fixture
def retry_policy() -> RetryPolicy:
    return RetryPolicy(max_attempts=3, initial_wait=timedelta(milliseconds=100))


@pytest.fixture
def invoker(breaker, retry_policy, sleep) -> ResilientInvoker:
    return ResilientInvoker(breaker, retry_policy, sleep=sleep)


@pytest.fixture
def taxonomy() -> list[Genre]:
    return [Genre(id=1, name="Action"), Genre(id=2, name="Drama")]
