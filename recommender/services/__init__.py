"""
Service layer infrastructure - resilience patterns for upstream API calls.

Provides:
- CacheManager: In-memory cache with a fixed TTL
- CircuitBreaker: Prevents cascading failures
- RetryPolicy: Bounded retries for transient failures
- ResilientInvoker: Retry around breaker around a deferred call
- UpstreamClient: Typed HTTP accessor for the movie service
"""

from recommender.services.errors import (
    ServiceError,
    UpstreamError,
    RequestTimeoutError,
    CircuitOpenError,
    CacheError,
    UnexpectedCacheValueError,
)
from recommender.services.cache import CacheManager, CacheEntry, CacheStats
from recommender.services.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitState,
)
from recommender.services.retry import RetryPolicy, is_transient_failure
from recommender.services.resilience import ResilientInvoker
from recommender.services.request_id import current_request_id, request_context
from recommender.services.client import UpstreamClient

__all__ = [
    # Errors
    "ServiceError",
    "UpstreamError",
    "RequestTimeoutError",
    "CircuitOpenError",
    "CacheError",
    "UnexpectedCacheValueError",
    # Cache
    "CacheManager",
    "CacheEntry",
    "CacheStats",
    # Circuit Breaker
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitState",
    # Retry
    "RetryPolicy",
    "ResilientInvoker",
    "is_transient_failure",
    # Request id
    "current_request_id",
    "request_context",
    # Client
    "UpstreamClient",
]
