"""
LanguageCatalog - Supported languages sorted by English name.
"""

from typing import TYPE_CHECKING

from loguru import logger

from recommender.movies.types import Language
from recommender.services.resilience import ResilientInvoker

if TYPE_CHECKING:
    from recommender.services.client import UpstreamClient


class LanguageCatalog:
    def __init__(self, client: "UpstreamClient", invoker: ResilientInvoker):
        self._client = client
        self._invoker = invoker

    async def list_languages(self) -> list[Language]:
        """All upstream languages, ordered by English name."""
        languages = await self._invoker.invoke(self._client.fetch_languages)
        logger.info(f"Fetched {len(languages)} languages")
        return sorted(languages, key=lambda language: language.english_name)
