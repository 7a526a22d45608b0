"""Tests for the renderer module."""

import io

from rich.console import Console

from shikiview.catalog.mapping import graphql, rest
from shikiview.catalog.models import Anime, Genre, SearchResult, Studio
from shikiview.cli.renderer import (
    render_character_detail,
    render_media_detail,
    render_named_list,
    render_search_result,
)


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200, color_system=None), buffer


def test_render_search_result_escapes_markup() -> None:
    console, buffer = _console()
    result = SearchResult(
        items=(Anime(id=1, title="[bold]Bebop[/bold]", score=8.75, kind="tv", episodes=26),),
        page=1,
        limit=20,
    )
    render_search_result(result, console)

    output = buffer.getvalue()
    assert "[bold]Bebop[/bold]" in output
    assert "8.75" in output
    assert "Total: 1" in output


def test_render_media_detail(anime_detail_record: dict) -> None:
    console, buffer = _console()
    render_media_detail(graphql.map_anime_detail(anime_detail_record), console)

    output = buffer.getvalue()
    assert "Cowboy Bebop" in output
    assert "Sunrise" in output
    assert "Адаптация" in output
    assert "Спайк Шпигель" in output


def test_render_character_detail(character_record: dict) -> None:
    console, buffer = _console()
    render_character_detail(rest.map_character_detail(character_record), console)

    output = buffer.getvalue()
    assert "Swimming Bird" in output
    assert "Коити Ямадэра" in output
    assert "Appearances" in output


def test_render_named_list() -> None:
    console, buffer = _console()
    items = [Genre(id=1, name="Action", russian="Экшен", kind="genre"), Studio(id=14, name="Sunrise")]
    render_named_list("Lookup", items, console)

    output = buffer.getvalue()
    assert "Экшен | genre" in output
    assert "Total: 2" in output
