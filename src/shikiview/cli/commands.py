"""CLI commands for shikiview.

Thin front end over :class:`~shikiview.services.CatalogServices`: every command
runs one facade (or color cache) operation and renders the canonical result.
- Uses Typer for argument parsing and Rich for all output.
- ``--json`` prints the canonical models as JSON instead of tables.
- A :class:`~shikiview.catalog.errors.CatalogError` is printed as
  ``[kind] message`` and the command exits with ``ExitCode.ERROR``.
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Annotated, Any, Optional, TypeVar

import typer
from pydantic import BaseModel
from rich.console import Console

from shikiview.__about__ import __version__
from shikiview.catalog.errors import CatalogError
from shikiview.catalog.params import SortOption
from shikiview.cli.renderer import (
    render_character_detail,
    render_media_detail,
    render_named_list,
    render_search_result,
)
from shikiview.services import CatalogServices
from shikiview.settings import load_settings

app = typer.Typer(
    name="shikiview",
    help="Browse the Shikimori anime/manga catalog from the terminal.",
    no_args_is_help=True,
)
console = Console()

T = TypeVar("T")


class ExitCode(int, Enum):
    """Exit codes for CLI commands."""

    SUCCESS = 0
    ERROR = 1


class ContentType(str, Enum):
    ANIME = "anime"
    MANGA = "manga"
    CHARACTERS = "characters"
    PEOPLE = "people"


JSON_OUTPUT = Annotated[
    bool, typer.Option("--json", help="Print canonical JSON instead of tables.")
]
ADULT_CONTENT = Annotated[
    Optional[bool],
    typer.Option(
        "--adult/--no-adult",
        help="Include adult-rated entries (overrides config and environment).",
    ),
]


def _run(
    operation: Callable[[CatalogServices], Awaitable[T]],
    adult: Optional[bool] = None,
) -> T:
    """Run *operation* against a fresh service container, handling CatalogError."""

    async def runner() -> T:
        async with CatalogServices(load_settings(adult)) as services:
            return await operation(services)

    try:
        return asyncio.run(runner())
    except CatalogError as exc:
        console.print(f"[{exc.kind.value}] {exc.message}", style="red", markup=False)
        if exc.retry_after is not None:
            console.print(f"retry after {exc.retry_after:g}s", style="yellow")
        raise typer.Exit(ExitCode.ERROR)


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (list, tuple)):
        return [_dump(item) for item in value]
    return value


def _print_json(value: Any) -> None:
    typer.echo(json.dumps(_dump(value), ensure_ascii=False, indent=2))


@app.command()
def search(
    content: Annotated[ContentType, typer.Argument(help="What to search for.")],
    query: Annotated[str, typer.Argument(help="Search text.")] = "",
    page: Annotated[int, typer.Option("--page", "-p")] = 1,
    limit: Annotated[int, typer.Option("--limit", "-l")] = 20,
    kind: Annotated[Optional[str], typer.Option(help="Kind filter (tv, movie, manga...).")] = None,
    status: Annotated[Optional[str], typer.Option(help="Status filter.")] = None,
    genre: Annotated[Optional[str], typer.Option(help="Genre id filter.")] = None,
    studio: Annotated[Optional[str], typer.Option(help="Studio filter (anime).")] = None,
    publisher: Annotated[
        Optional[str], typer.Option(help="Publisher filter (manga).")
    ] = None,
    order: Annotated[SortOption, typer.Option(help="Sort order.")] = SortOption.RELEVANCE,
    adult: ADULT_CONTENT = None,
    as_json: JSON_OUTPUT = False,
) -> None:
    """Search anime, manga, characters or people."""

    async def operation(services: CatalogServices) -> Any:
        facade = services.facade
        if content is ContentType.ANIME:
            return await facade.search_anime(
                query, page, limit, kind, status, genre, studio, order
            )
        if content is ContentType.MANGA:
            return await facade.search_manga(
                query, page, limit, kind, status, genre, publisher, order
            )
        if content is ContentType.CHARACTERS:
            return await facade.search_characters(query, page, limit)
        return await facade.search_people(query, page, limit)

    result = _run(operation, adult)
    if as_json:
        _print_json(result)
    else:
        render_search_result(result, console)


@app.command()
def anime(
    anime_id: Annotated[int, typer.Argument(help="Shikimori anime id.")],
    adult: ADULT_CONTENT = None,
    as_json: JSON_OUTPUT = False,
) -> None:
    """Show the full record of one anime."""
    detail = _run(lambda services: services.facade.get_anime_by_id(anime_id), adult)
    if as_json:
        _print_json(detail)
    else:
        render_media_detail(detail, console)


@app.command()
def manga(
    manga_id: Annotated[int, typer.Argument(help="Shikimori manga id.")],
    adult: ADULT_CONTENT = None,
    as_json: JSON_OUTPUT = False,
) -> None:
    """Show the full record of one manga."""
    detail = _run(lambda services: services.facade.get_manga_by_id(manga_id), adult)
    if as_json:
        _print_json(detail)
    else:
        render_media_detail(detail, console)


@app.command()
def character(
    character_id: Annotated[int, typer.Argument(help="Shikimori character id.")],
    as_json: JSON_OUTPUT = False,
) -> None:
    """Show a character with its appearances and voice actors."""
    detail = _run(
        lambda services: services.facade.get_character_details(character_id)
    )
    if as_json:
        _print_json(detail)
    else:
        render_character_detail(detail, console)


@app.command()
def genres(as_json: JSON_OUTPUT = False) -> None:
    """List all genres."""
    items = _run(lambda services: services.facade.get_genres())
    if as_json:
        _print_json(items)
    else:
        render_named_list("Genres", items, console)


@app.command()
def studios(
    query: Annotated[str, typer.Argument(help="Name filter.")] = "",
    as_json: JSON_OUTPUT = False,
) -> None:
    """List studios whose name contains QUERY."""
    items = _run(lambda services: services.facade.search_studios(query))
    if as_json:
        _print_json(items)
    else:
        render_named_list("Studios", items, console)


@app.command()
def publishers(
    query: Annotated[str, typer.Argument(help="Name filter.")] = "",
    as_json: JSON_OUTPUT = False,
) -> None:
    """List publishers whose name contains QUERY."""
    items = _run(lambda services: services.facade.search_publishers(query))
    if as_json:
        _print_json(items)
    else:
        render_named_list("Publishers", items, console)


@app.command()
def accent(url: Annotated[str, typer.Argument(help="Poster image URL.")]) -> None:
    """Print the accent color derived from a poster image."""
    color = _run(lambda services: services.get_accent_color(url))
    typer.echo(color)


@app.command()
def version() -> None:
    """Show the version of shikiview."""
    console.print(f"shikiview version: [bold]{__version__}[/bold]")


if __name__ == "__main__":
    app()
