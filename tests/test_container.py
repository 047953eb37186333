import httpx
import pytest

import recommender.container as container
from fakes import BASE_URL
from recommender.container import build_services
from recommender.services.errors import CircuitOpenError, UpstreamError
from recommender.settings import Settings
from tmdb_responses import DISCOVER_RESPONSE_1982, GENRES_RESPONSE, LANGUAGES_RESPONSE

HOST = "api.test"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        movie_service_url=BASE_URL,
        auth_token="secret-token",
        retry_max_attempts=2,
        retry_wait_seconds=0,
        breaker_sliding_window_size=2,
        breaker_minimum_calls=2,
        breaker_half_open_calls=1,
    )


def discover_response(request: httpx.Request) -> httpx.Response:
    if request.url.params["primary_release_year"] == "1982":
        return httpx.Response(200, json=DISCOVER_RESPONSE_1982)
    return httpx.Response(
        200, json={"page": 1, "results": [], "total_pages": 0, "total_results": 0}
    )


@pytest.mark.asyncio
async def test_search_end_to_end(settings, respx_mock) -> None:
    genres_route = respx_mock.get(host=HOST, path="/3/genre/movie/list").mock(
        return_value=httpx.Response(200, json=GENRES_RESPONSE)
    )
    discover_route = respx_mock.get(host=HOST, path="/3/discover/movie").mock(
        side_effect=discover_response
    )
    services = build_services(settings)

    try:
        movies = await services.search.search(1982, 1983, ["Action", "Adventure"], "en")
        again = await services.search.search(1982, 1982, ["Action"], "en")
    finally:
        await services.close()

    assert [movie.title for movie in movies] == ["Blade Runner", "First Blood"]
    assert movies[1].genres == ["Adventure", "Action"]
    assert movies[0].genres == []
    assert movies[1].popularity == 39
    assert len(again) == 2
    assert genres_route.call_count == 1
    assert discover_route.call_count == 3
    assert {call.request.url.params["with_genres"] for call in discover_route.calls} == {
        "12,28",
        "28",
    }


@pytest.mark.asyncio
async def test_languages_end_to_end(settings, respx_mock) -> None:
    respx_mock.get(host=HOST, path="/3/configuration/languages").mock(
        return_value=httpx.Response(200, json=LANGUAGES_RESPONSE)
    )
    services = build_services(settings)

    try:
        languages = await services.languages.list_languages()
    finally:
        await services.close()

    assert [language.english_name for language in languages] == [
        "English",
        "French",
        "German",
        "Italian",
        "Spanish",
    ]


@pytest.mark.asyncio
async def test_failing_upstream_opens_shared_breaker(settings, respx_mock) -> None:
    route = respx_mock.get(host=HOST, path="/3/genre/movie/list").mock(
        return_value=httpx.Response(502, text="bad gateway")
    )
    services = build_services(settings)

    try:
        with pytest.raises(UpstreamError) as excinfo:
            await services.search.get_genres("en")
        with pytest.raises(CircuitOpenError):
            await services.languages.list_languages()
        health = services.get_health_status()
    finally:
        await services.close()

    # Both attempts fail, which fills the 2-call window and opens the breaker
    assert excinfo.value.status_code == 502
    assert route.call_count == 2
    assert health["circuit_breaker"]["state"] == "OPEN"
    assert health["genre_cache"]["size"] == 0


@pytest.mark.asyncio
async def test_client_error_surfaces_without_retry(settings, respx_mock) -> None:
    route = respx_mock.get(host=HOST, path="/3/genre/movie/list").mock(
        return_value=httpx.Response(401, text="invalid api key")
    )
    services = build_services(settings)

    try:
        with pytest.raises(UpstreamError) as excinfo:
            await services.search.search(2000, 2001, ["Action"], "en")
        health = services.get_health_status()
    finally:
        await services.close()

    assert excinfo.value.status_code == 401
    assert route.call_count == 1
    assert health["circuit_breaker"]["state"] == "CLOSED"


@pytest.mark.asyncio
async def test_global_services_are_reused_until_closed(monkeypatch, settings) -> None:
    monkeypatch.setattr(container, "global_settings", settings)
    monkeypatch.setattr(container, "_global_services", None)

    first = container.get_movie_services()
    assert container.get_movie_services() is first
    assert first.client.base_url == BASE_URL

    await container.close_movie_services()
    assert container._global_services is None


@pytest.mark.asyncio
async def test_genre_cache_uses_configured_size_and_debug(settings) -> None:
    settings = settings.model_copy(update={"genre_cache_max_size": 7, "log_level": "DEBUG"})
    services = build_services(settings)

    try:
        health = services.get_health_status()
    finally:
        await services.close()

    assert health["genre_cache"]["max_size"] == 7
    assert services.genres._cache._debug is True
