"""
Movie catalog types using Pydantic models.

Upstream payloads are validated with their snake_case keys; output models
serialise with camelCase keys via ``model_dump(by_alias=True)``.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Genre(BaseModel):
    """A genre id/name pair from the upstream taxonomy."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class GenresResponse(BaseModel):
    """Envelope of the genre list endpoint."""

    genres: list[Genre] = Field(default_factory=list)


class Movie(BaseModel):
    """A movie as returned by the discover endpoint."""

    model_config = ConfigDict(frozen=True)

    adult: bool = False
    backdrop_path: str | None = None
    genre_ids: list[int] = Field(default_factory=list)
    id: int
    original_language: str | None = None
    original_title: str | None = None
    overview: str | None = None
    popularity: float = 0.0
    poster_path: str | None = None
    release_date: str | None = None
    title: str | None = None
    video: bool = False
    vote_average: float = 0.0
    vote_count: int = 0

    @field_validator("genre_ids", mode="before")
    @classmethod
    def _null_genre_ids(cls, value):
        return [] if value is None else value


class MoviePage(BaseModel):
    """One page of discover results."""

    page: int = 1
    results: list[Movie] = Field(default_factory=list)
    total_pages: int = 0
    total_results: int = 0


class MovieSummary(BaseModel):
    """A movie with its genre names resolved, as handed back to callers."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    genres: list[str] = Field(default_factory=list)
    original_language: str | None = Field(
        default=None, serialization_alias="originalLanguage"
    )
    original_title: str | None = Field(default=None, serialization_alias="originalTitle")
    title: str | None = None
    overview: str | None = None
    popularity: int = 0
    release_date: str | None = Field(default=None, serialization_alias="releaseDate")

    @classmethod
    def from_movie(cls, movie: Movie, taxonomy: list[Genre]) -> "MovieSummary":
        """Resolve genre names in taxonomy order and truncate popularity."""
        genre_ids = set(movie.genre_ids)
        return cls(
            id=movie.id,
            genres=[genre.name for genre in taxonomy if genre.id in genre_ids],
            original_language=movie.original_language,
            original_title=movie.original_title,
            title=movie.title,
            overview=movie.overview,
            popularity=int(movie.popularity),
            release_date=movie.release_date,
        )


class Language(BaseModel):
    """A language supported by the upstream service."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    iso_639_1: str = Field(serialization_alias="iso6391")
    english_name: str = Field(serialization_alias="englishName")
    name: str = ""
