"""
Service layer exceptions.
"""

from typing import Any


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, service_id: str | None = None):
        self.service_id = service_id
        super().__init__(message)


class UpstreamError(ServiceError):
    """Upstream answered with a non-2xx status or could not be reached."""

    def __init__(
        self,
        status_code: int | None,
        message: str,
        service_id: str | None = None,
    ):
        self.status_code = status_code
        self.message = message
        prefix = f"HTTP {status_code}" if status_code is not None else "Transport error"
        super().__init__(f"{prefix}: {message}", service_id=service_id)

    @property
    def is_transient(self) -> bool:
        """5xx responses and transport failures are worth retrying."""
        return self.status_code is None or self.status_code >= 500


class RequestTimeoutError(UpstreamError):
    """Request timed out."""

    def __init__(self, service_id: str, timeout: float):
        self.timeout = timeout
        super().__init__(
            None,
            f"request to service '{service_id}' timed out after {timeout}s",
            service_id=service_id,
        )


class CircuitOpenError(ServiceError):
    """Circuit breaker is open, request blocked."""

    def __init__(self, service_id: str, reset_after_seconds: float):
        self.reset_after_seconds = reset_after_seconds
        super().__init__(
            f"Circuit breaker open for service '{service_id}', "
            f"retry after {reset_after_seconds:.1f}s",
            service_id=service_id,
        )


class CacheError(ServiceError):
    """Cache operation failed."""

    pass


class UnexpectedCacheValueError(CacheError):
    """A cache lookup returned a value of the wrong shape."""

    def __init__(self, key: str, value: Any):
        self.key = key
        super().__init__(
            f"Unexpected type in cache for '{key}': {type(value).__name__}"
        )
