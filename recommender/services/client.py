"""
UpstreamClient - Typed async HTTP accessor for the movie service.

Thin wrapper over httpx: bearer auth, correlation header, and mapping of every
failure to UpstreamError. No retries or caching here; see ResilientInvoker and
GenreCache for those.
"""

from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from recommender.movies.types import Genre, GenresResponse, Language, MoviePage
from recommender.services.errors import RequestTimeoutError, UpstreamError
from recommender.services.request_id import X_REQUEST_ID, current_request_id

ModelT = TypeVar("ModelT", bound=BaseModel)


class UpstreamClient:
    """
    Client for the genre, discover and language endpoints.

    Usage:
        async with UpstreamClient("https://api.themoviedb.org/3", token) as client:
            genres = await client.fetch_genres("en")
    """

    SERVICE_ID = "movies"

    def __init__(
        self,
        base_url: str,
        auth_token: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self._auth_token = auth_token
        self._timeout = timeout
        self._transport = transport

        # HTTP client (lazy initialization)
        self._http_client: httpx.AsyncClient | None = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self._auth_token}",
                    "Content-Type": "application/json",
                },
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
        return self._http_client

    async def fetch_genres(self, language: str) -> list[Genre]:
        """Genre taxonomy for a language, in upstream order."""
        data = await self._get("/genre/movie/list", params={"language": language})
        return self._parse(GenresResponse, data).genres

    async def fetch_movie_page(
        self, year: int, genre_ids: str, language: str
    ) -> MoviePage:
        """First page of movies released in a year, most popular first."""
        data = await self._get(
            "/discover/movie",
            params={
                "include_adult": "false",
                "include_video": "false",
                "primary_release_year": year,
                "with_genres": genre_ids,
                "with_original_language": language,
                "sort_by": "popularity.desc",
            },
        )
        return self._parse(MoviePage, data)

    async def fetch_languages(self) -> list[Language]:
        """Supported languages, in upstream order."""
        data = await self._get("/configuration/languages")
        if not isinstance(data, list):
            raise UpstreamError(
                200, "Malformed response: expected a list", service_id=self.SERVICE_ID
            )
        return [self._parse(Language, item) for item in data]

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Execute a GET request and decode the JSON body."""
        client = await self._get_http_client()

        try:
            response = await client.get(
                path,
                params=params,
                headers={X_REQUEST_ID: current_request_id()},
            )
            response.raise_for_status()

        except httpx.TimeoutException as e:
            raise RequestTimeoutError(self.SERVICE_ID, self._timeout) from e

        except httpx.HTTPStatusError as e:
            logger.debug(f"GET {path} -> {e.response.status_code}")
            raise UpstreamError(
                e.response.status_code,
                e.response.text[:200],
                service_id=self.SERVICE_ID,
            ) from e

        except httpx.RequestError as e:
            raise UpstreamError(None, str(e), service_id=self.SERVICE_ID) from e

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                response.status_code,
                f"Malformed response: {e}",
                service_id=self.SERVICE_ID,
            ) from e

    def _parse(self, model: type[ModelT], data: Any) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise UpstreamError(
                200,
                f"Malformed {model.__name__}: {e.error_count()} validation errors",
                service_id=self.SERVICE_ID,
            ) from e

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
        logger.debug("UpstreamClient closed")

    async def __aenter__(self) -> "UpstreamClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
