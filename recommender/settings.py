import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

load_dotenv()


class Settings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Upstream movie service
    movie_service_url: str = Field(
        default="https://api.themoviedb.org/3", alias="MOVIE_SERVICE_URL"
    )
    auth_token: str = Field(default="", alias="AUTH_TOKEN")
    request_timeout: float = Field(default=10.0, alias="REQUEST_TIMEOUT")

    # Genre cache
    genre_cache_ttl_minutes: int = Field(default=60, alias="GENRE_CACHE_TTL")
    genre_cache_max_size: int = Field(default=100, alias="GENRE_CACHE_MAX_SIZE")

    # Retry
    retry_max_attempts: int = Field(default=3, alias="RETRY_MAX_ATTEMPTS")
    retry_wait_seconds: float = Field(default=0.5, alias="RETRY_WAIT")
    retry_max_wait_seconds: float = Field(default=5.0, alias="RETRY_MAX_WAIT")

    # Circuit breaker
    breaker_failure_rate_threshold: float = Field(
        default=50.0, alias="CB_FAILURE_RATE_THRESHOLD"
    )
    breaker_sliding_window_size: int = Field(default=10, alias="CB_SLIDING_WINDOW_SIZE")
    breaker_minimum_calls: int = Field(default=5, alias="CB_MINIMUM_CALLS")
    breaker_wait_duration_seconds: float = Field(default=30.0, alias="CB_WAIT_DURATION")
    breaker_half_open_calls: int = Field(default=3, alias="CB_HALF_OPEN_CALLS")

    # Fan-out (None means unbounded)
    max_concurrent_fetches: int | None = Field(
        default=None, alias="MAX_CONCURRENT_FETCHES"
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator(
        "request_timeout",
        "genre_cache_ttl_minutes",
        "genre_cache_max_size",
        "retry_max_attempts",
        "retry_max_wait_seconds",
        "breaker_sliding_window_size",
        "breaker_minimum_calls",
        "breaker_wait_duration_seconds",
        "breaker_half_open_calls",
    )
    @classmethod
    def _must_be_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @field_validator("retry_wait_seconds")
    @classmethod
    def _must_not_be_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("must not be negative")
        return value

    @field_validator("breaker_failure_rate_threshold")
    @classmethod
    def _must_be_percentage(cls, value: float) -> float:
        if not 0 < value <= 100:
            raise ValueError("must be within (0, 100]")
        return value

    @field_validator("max_concurrent_fetches", mode="before")
    @classmethod
    def _empty_means_unbounded(cls, value):
        if value in ("", "0", 0):
            return None
        return value

    @field_validator("max_concurrent_fetches")
    @classmethod
    def _cap_must_be_positive(cls, value: int | None) -> int | None:
        if value is not None and value < 0:
            raise ValueError("must not be negative")
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @model_validator(mode="after")
    def _window_holds_minimum_calls(self) -> "Settings":
        if self.breaker_minimum_calls > self.breaker_sliding_window_size:
            raise ValueError(
                "CB_MINIMUM_CALLS cannot exceed CB_SLIDING_WINDOW_SIZE"
            )
        return self

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """Build settings from environment variables keyed by field alias."""
        environ = os.environ if environ is None else environ
        aliases = {field.alias for field in cls.model_fields.values() if field.alias}
        return cls.model_validate(
            {key: value for key, value in environ.items() if key in aliases}
        )


global_settings = Settings.from_env()
