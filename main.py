"""
Recommender entry point.

Validates inbound parameters, binds a request id, and prints the result of a
search, genre or language lookup as JSON.
"""

import argparse
import asyncio
import json
import sys

from loguru import logger

from recommender.container import close_movie_services, get_movie_services
from recommender.services.errors import ServiceError
from recommender.services.request_id import request_context
from recommender.settings import global_settings

MAX_YEAR_RANGE = 5
MAX_GENRES = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Movie recommender")
    parser.add_argument("--request-id", help="Correlation id forwarded upstream")
    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="Search movies by years and genres")
    search.add_argument("--start-year", type=int, required=True)
    search.add_argument("--end-year", type=int, required=True)
    search.add_argument("--genres", nargs="+", required=True)
    search.add_argument("--language", required=True, help="ISO 639-1 code")

    genres = commands.add_parser("genres", help="List genres for a language")
    genres.add_argument("language", help="ISO 639-1 code")

    commands.add_parser("languages", help="List supported languages")
    return parser


def validate_search(args: argparse.Namespace) -> str | None:
    """Error message for out-of-range search parameters, None when valid."""
    if args.end_year - args.start_year > MAX_YEAR_RANGE:
        return f"Year range should not exceed {MAX_YEAR_RANGE} years"
    if len(args.genres) > MAX_GENRES:
        return f"Genres should not exceed {MAX_GENRES}"
    return None


async def run(args: argparse.Namespace) -> list[dict]:
    services = get_movie_services()

    if args.command == "search":
        movies = await services.search.search(
            args.start_year, args.end_year, args.genres, args.language
        )
        return [movie.model_dump(by_alias=True) for movie in movies]

    if args.command == "genres":
        genres = await services.search.get_genres(args.language)
        return [genre.model_dump() for genre in genres]

    languages = await services.languages.list_languages()
    return [language.model_dump(by_alias=True) for language in languages]


def configure_logging() -> None:
    logger.remove()
    logger.add(sys.stderr, level=global_settings.log_level)


async def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run one command and print its JSON result."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "search":
        error = validate_search(args)
        if error:
            parser.error(error)

    with request_context(args.request_id) as request_id:
        logger.info(f"Running '{args.command}' (request {request_id})")
        try:
            result = await run(args)
        except ServiceError as e:
            logger.error(f"{type(e).__name__}: {e}")
            return 1
        finally:
            await close_movie_services()

    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    configure_logging()
    sys.exit(asyncio.run(main()))
