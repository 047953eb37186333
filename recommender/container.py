"""
Composition root - builds the movie services from Settings.

    client -> breaker + retry -> invoker -> genre cache -> orchestrator
                                        -> language catalog
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import httpx
from loguru import logger

from recommender.movies.genres import GenreCache
from recommender.movies.languages import LanguageCatalog
from recommender.movies.search import SearchOrchestrator
from recommender.services.cache import CacheManager
from recommender.services.circuit_breaker import CircuitBreaker, CircuitBreakerConfig
from recommender.services.client import UpstreamClient
from recommender.services.resilience import ResilientInvoker
from recommender.services.retry import RetryPolicy
from recommender.settings import Settings, global_settings


@dataclass
class MovieServices:
    """Everything the inbound layer needs, wired over one upstream client."""

    client: UpstreamClient
    breaker: CircuitBreaker
    invoker: ResilientInvoker
    genres: GenreCache
    search: SearchOrchestrator
    languages: LanguageCatalog

    def get_health_status(self) -> dict[str, Any]:
        """Breaker and genre cache status."""
        return {
            "circuit_breaker": self.breaker.get_status(),
            "genre_cache": self.genres.get_stats(),
        }

    async def close(self) -> None:
        await self.client.close()


def build_services(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> MovieServices:
    """Construct the services explicitly from settings."""
    settings = settings or global_settings

    client = UpstreamClient(
        base_url=settings.movie_service_url,
        auth_token=settings.auth_token,
        timeout=settings.request_timeout,
        transport=transport,
    )
    breaker = CircuitBreaker(
        UpstreamClient.SERVICE_ID,
        CircuitBreakerConfig(
            failure_rate_threshold=settings.breaker_failure_rate_threshold,
            sliding_window_size=settings.breaker_sliding_window_size,
            minimum_calls=settings.breaker_minimum_calls,
            reset_timeout=timedelta(seconds=settings.breaker_wait_duration_seconds),
            half_open_max_requests=settings.breaker_half_open_calls,
        ),
    )
    retry = RetryPolicy(
        max_attempts=settings.retry_max_attempts,
        initial_wait=timedelta(seconds=settings.retry_wait_seconds),
        max_wait=timedelta(seconds=settings.retry_max_wait_seconds),
    )
    invoker = ResilientInvoker(breaker, retry)

    ttl = timedelta(minutes=settings.genre_cache_ttl_minutes)
    genres = GenreCache(
        client,
        invoker,
        ttl=ttl,
        cache=CacheManager(
            max_size=settings.genre_cache_max_size,
            default_ttl=ttl,
            debug=settings.log_level == "DEBUG",
        ),
    )

    logger.debug(f"Built movie services for {settings.movie_service_url}")
    return MovieServices(
        client=client,
        breaker=breaker,
        invoker=invoker,
        genres=genres,
        search=SearchOrchestrator(
            client,
            invoker,
            genres,
            max_concurrency=settings.max_concurrent_fetches,
        ),
        languages=LanguageCatalog(client, invoker),
    )


# Global services instance
_global_services: MovieServices | None = None


def get_movie_services() -> MovieServices:
    """Get the global movie services instance."""
    global _global_services
    if _global_services is None:
        _global_services = build_services()
    return _global_services


async def close_movie_services() -> None:
    """Close the global movie services."""
    global _global_services
    if _global_services:
        await _global_services.close()
        _global_services = None
