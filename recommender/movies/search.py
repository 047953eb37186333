"""
SearchOrchestrator - Per-year movie discovery joined with genre names.

A search resolves the language's taxonomy, translates genre names to an id
filter, fetches one discover page per year concurrently, and returns the
movies as summaries sorted by release date.

Failure is all-or-nothing: the first year that fails after retries cancels
every other in-flight year and the error propagates to the caller.
"""

import asyncio
from datetime import date
from typing import TYPE_CHECKING, AsyncIterator, Iterable

from loguru import logger

from recommender.movies.genres import GenreCache
from recommender.movies.types import Genre, MoviePage, MovieSummary
from recommender.services.request_id import current_request_id, request_context
from recommender.services.resilience import ResilientInvoker

if TYPE_CHECKING:
    from recommender.services.client import UpstreamClient


def join_genre_ids(genre_names: Iterable[str], taxonomy: list[Genre]) -> str:
    """Comma-separated ids of taxonomy genres whose name matches exactly."""
    wanted = set(genre_names)
    return ",".join(str(genre.id) for genre in taxonomy if genre.name in wanted)


def release_sort_key(summary: MovieSummary) -> date:
    """Parsed release date; missing or malformed dates sort last."""
    try:
        return date.fromisoformat(summary.release_date or "")
    except ValueError:
        return date.max


class SearchOrchestrator:
    """
    Fans out discover requests per year and aggregates the results.

    Usage:
        orchestrator = SearchOrchestrator(client, invoker, genre_cache)
        movies = await orchestrator.search(1982, 1985, ["Action"], "en")
    """

    def __init__(
        self,
        client: "UpstreamClient",
        invoker: ResilientInvoker,
        genres: GenreCache,
        max_concurrency: int | None = None,
    ):
        self._client = client
        self._invoker = invoker
        self._genres = genres
        self._semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def get_genres(self, language: str) -> list[Genre]:
        """Genre taxonomy for a language, sorted by id."""
        return await self._genres.get(language)

    async def search(
        self,
        start_year: int,
        end_year: int,
        genre_names: list[str],
        language: str,
    ) -> list[MovieSummary]:
        """
        Movies released in [start_year, end_year] matching the genres.

        Inputs are trusted: the range and the number of genres are checked by
        the caller. Genre names without an exact match are ignored.

        Raises:
            UpstreamError: A fetch failed after retries
            CircuitOpenError: The breaker rejected a fetch
        """
        # One id for every outbound call of this search
        with request_context(current_request_id()):
            taxonomy = await self._genres.get(language)
            genre_ids = join_genre_ids(genre_names, taxonomy)
            years = range(start_year, end_year + 1)

            logger.info(
                f"Searching {len(years)} year(s) {start_year}-{end_year} "
                f"with genres [{genre_ids}] in '{language}'"
            )

            pages = await self._fetch_years(years, genre_ids, language)
            summaries = [
                MovieSummary.from_movie(movie, taxonomy)
                for page in pages
                for movie in page.results
            ]
            summaries.sort(key=release_sort_key)

            logger.info(f"Search returned {len(summaries)} movies")
            return summaries

    async def stream(
        self,
        start_year: int,
        end_year: int,
        genre_names: list[str],
        language: str,
    ) -> AsyncIterator[MovieSummary]:
        """One-shot async iterator over the sorted search result."""
        for summary in await self.search(start_year, end_year, genre_names, language):
            yield summary

    async def _fetch_years(
        self, years: range, genre_ids: str, language: str
    ) -> list[MoviePage]:
        """Fetch every year concurrently; pages come back in year order."""
        tasks = [
            asyncio.create_task(
                self._fetch_year(year, genre_ids, language),
                name=f"discover-{year}",
            )
            for year in years
        ]
        if not tasks:
            return []

        # Failures in completion order
        failures: list[BaseException] = []

        def collect(task: asyncio.Task) -> None:
            if not task.cancelled() and task.exception() is not None:
                failures.append(task.exception())

        for task in tasks:
            task.add_done_callback(collect)

        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
            if failures:
                raise failures[0]
            return [task.result() for task in tasks]
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                logger.debug(f"Cancelled {len(pending)} pending discover request(s)")
            # Collects every outcome so no task exception goes unretrieved
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _fetch_year(self, year: int, genre_ids: str, language: str) -> MoviePage:
        if self._semaphore is None:
            page = await self._fetch_page(year, genre_ids, language)
        else:
            async with self._semaphore:
                page = await self._fetch_page(year, genre_ids, language)
        logger.debug(f"Year {year}: {len(page.results)} movies")
        return page

    async def _fetch_page(self, year: int, genre_ids: str, language: str) -> MoviePage:
        return await self._invoker.invoke(
            lambda: self._client.fetch_movie_page(year, genre_ids, language)
        )
