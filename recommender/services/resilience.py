"""
ResilientInvoker - Retry around a circuit breaker around a deferred upstream call.

Each attempt goes through the breaker gate again, so a breaker tripped by an
earlier attempt makes the next one fail fast with CircuitOpenError. That error
is not retried.
"""

import asyncio
from typing import Awaitable, Callable, TypeVar

from loguru import logger

from recommender.services.circuit_breaker import CircuitBreaker
from recommender.services.errors import CircuitOpenError, UpstreamError
from recommender.services.retry import RetryPolicy

T = TypeVar("T")


class ResilientInvoker:
    """
    Runs zero-argument async callables under a shared breaker and retry policy.

    Usage:
        invoker = ResilientInvoker(CircuitBreaker("movies"), RetryPolicy())
        genres = await invoker.invoke(lambda: client.fetch_genres("en"))
    """

    def __init__(
        self,
        breaker: CircuitBreaker,
        retry: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.breaker = breaker
        self.retry = retry or RetryPolicy()
        self._sleep = sleep

    async def invoke(self, call: Callable[[], Awaitable[T]]) -> T:
        """
        Invoke the call, retrying transient upstream failures.

        Raises:
            UpstreamError: Non-retryable failure, or the last transient one
            CircuitOpenError: The breaker rejected an attempt
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._attempt(call)
            except Exception as e:
                if not self.retry.should_retry(e, attempt):
                    if attempt > 1:
                        logger.error(
                            f"Giving up on '{self.breaker.service_id}' "
                            f"after {attempt} attempts: {e}"
                        )
                    raise

                delay = self.retry.backoff(attempt)
                logger.warning(
                    f"Attempt {attempt}/{self.retry.max_attempts} to "
                    f"'{self.breaker.service_id}' failed: {e}; retrying in {delay:.2f}s"
                )
                await self._sleep(delay)

    async def _attempt(self, call: Callable[[], Awaitable[T]]) -> T:
        """Single attempt through the breaker gate."""
        if not self.breaker.try_acquire():
            raise CircuitOpenError(
                self.breaker.service_id,
                self.breaker.get_time_until_reset() or 0,
            )

        try:
            result = await call()
        except asyncio.CancelledError:
            self.breaker.release()
            raise
        except UpstreamError as e:
            # A 4xx means upstream is up and answering
            if e.is_transient:
                self.breaker.record_failure()
            else:
                self.breaker.record_success()
            raise
        except Exception:
            self.breaker.record_failure()
            raise

        self.breaker.record_success()
        return result
