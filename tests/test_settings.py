import pytest
from pydantic import ValidationError

from recommender.settings import Settings


def test_defaults() -> None:
    settings = Settings.from_env({})

    assert settings.movie_service_url == "https://api.themoviedb.org/3"
    assert settings.genre_cache_ttl_minutes == 60
    assert settings.retry_max_attempts == 3
    assert settings.max_concurrent_fetches is None


def test_values_are_read_from_aliases() -> None:
    settings = Settings.from_env(
        {
            "MOVIE_SERVICE_URL": "https://api.test/3",
            "AUTH_TOKEN": "secret",
            "GENRE_CACHE_TTL": "15",
            "RETRY_MAX_ATTEMPTS": "5",
            "CB_FAILURE_RATE_THRESHOLD": "75",
            "MAX_CONCURRENT_FETCHES": "4",
            "LOG_LEVEL": "debug",
            "UNRELATED": "ignored",
        }
    )

    assert settings.movie_service_url == "https://api.test/3"
    assert settings.auth_token == "secret"
    assert settings.genre_cache_ttl_minutes == 15
    assert settings.retry_max_attempts == 5
    assert settings.breaker_failure_rate_threshold == 75.0
    assert settings.max_concurrent_fetches == 4
    assert settings.log_level == "DEBUG"


def test_empty_concurrency_cap_means_unbounded() -> None:
    assert Settings.from_env({"MAX_CONCURRENT_FETCHES": ""}).max_concurrent_fetches is None


@pytest.mark.parametrize(
    "environ",
    [
        {"RETRY_MAX_ATTEMPTS": "0"},
        {"GENRE_CACHE_TTL": "-1"},
        {"RETRY_WAIT": "-0.5"},
        {"CB_FAILURE_RATE_THRESHOLD": "0"},
        {"CB_FAILURE_RATE_THRESHOLD": "150"},
        {"CB_SLIDING_WINDOW_SIZE": "3", "CB_MINIMUM_CALLS": "5"},
        {"MAX_CONCURRENT_FETCHES": "-2"},
    ],
)
def test_invalid_values_are_rejected(environ) -> None:
    with pytest.raises(ValidationError):
        Settings.from_env(environ)


def test_fields_can_be_set_by_name() -> None:
    settings = Settings(retry_max_attempts=1, breaker_half_open_calls=1)

    assert settings.retry_max_attempts == 1
    assert settings.breaker_half_open_calls == 1
