"""
GenreCache - Cache-aside genre taxonomy per language.
"""

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from loguru import logger

from recommender.movies.types import Genre
from recommender.services.cache import CacheManager
from recommender.services.errors import UnexpectedCacheValueError
from recommender.services.resilience import ResilientInvoker

if TYPE_CHECKING:
    from recommender.services.client import UpstreamClient


class GenreCache:
    """
    Genre taxonomy keyed by language, sorted by id, kept for a fixed TTL.

    Concurrent misses for the same language each fetch from upstream and the
    last write wins; any fetched taxonomy for a language is equivalent.
    """

    def __init__(
        self,
        client: "UpstreamClient",
        invoker: ResilientInvoker,
        ttl: timedelta = timedelta(minutes=60),
        cache: CacheManager | None = None,
    ):
        self._client = client
        self._invoker = invoker
        self._ttl = ttl
        self._cache = cache if cache is not None else CacheManager(default_ttl=ttl)

    @staticmethod
    def cache_key(language: str) -> str:
        return f"genres_{language}"

    async def get(self, language: str) -> list[Genre]:
        """Taxonomy for a language, from cache when fresh."""
        key = self.cache_key(language)

        entry = await self._cache.get(key)
        if entry is not None:
            return list(self._ensure_taxonomy(key, entry.data))

        genres = await self._invoker.invoke(lambda: self._client.fetch_genres(language))
        taxonomy = sorted(genres, key=lambda genre: genre.id)
        await self._cache.set(key, taxonomy, self._ttl)
        logger.info(f"Cached {len(taxonomy)} genres for language '{language}'")
        return list(taxonomy)

    @staticmethod
    def _ensure_taxonomy(key: str, value: object) -> list[Genre]:
        if not isinstance(value, list) or not all(
            isinstance(item, Genre) for item in value
        ):
            raise UnexpectedCacheValueError(key, value)
        return value

    def get_stats(self) -> dict[str, Any]:
        return self._cache.get_stats().to_dict()
