"""
Movie catalog orchestration on top of the resilient service layer.

Provides:
- GenreCache: Cache-aside genre taxonomy per language
- SearchOrchestrator: Per-year discover fan-out with genre names joined in
- LanguageCatalog: Supported languages sorted by English name
"""

from recommender.movies.types import (
    Genre,
    GenresResponse,
    Language,
    Movie,
    MoviePage,
    MovieSummary,
)
from recommender.movies.genres import GenreCache
from recommender.movies.search import SearchOrchestrator
from recommender.movies.languages import LanguageCatalog

__all__ = [
    # Types
    "Genre",
    "GenresResponse",
    "Language",
    "Movie",
    "MoviePage",
    "MovieSummary",
    # Components
    "GenreCache",
    "SearchOrchestrator",
    "LanguageCatalog",
]
