"""Renderer for CLI output.

Renders canonical catalog entities as Rich tables and panels.
"""

from collections.abc import Iterable, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from shikiview.catalog.models import (
    Anime,
    AnimeDetail,
    Character,
    CharacterDetail,
    Genre,
    Manga,
    MangaDetail,
    MediaSummary,
    Person,
    Publisher,
    SearchResult,
    Studio,
)


def _score(score: float | None) -> str:
    return f"{score:.2f}" if score is not None else "-"


def _join(values: Iterable[str] | None) -> str:
    return escape(", ".join(values)) if values else "-"


def _progress(item: MediaSummary) -> str:
    if isinstance(item, Anime):
        return str(item.episodes or item.episodes_aired or "-")
    if isinstance(item, Manga):
        return f"{item.volumes or '-'} / {item.chapters or '-'}"
    return "-"


def render_search_result(
    result: SearchResult[MediaSummary] | SearchResult[Character] | SearchResult[Person],
    console: Console | None = None,
) -> None:
    """Render one page of search results as a table."""
    console = console or Console()
    table = Table(title=f"Page {result.page} (limit {result.limit})")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Russian")
    table.add_column("Info", style="yellow")
    table.add_column("URL", style="blue")

    for item in result.items:
        if isinstance(item, MediaSummary):
            info = f"{item.kind or '-'} | {_score(item.score)} | {_progress(item)}"
            table.add_row(
                str(item.id), escape(item.title), escape(item.russian or ""), info, item.url
            )
        else:
            table.add_row(
                str(item.id), escape(item.name), escape(item.russian or ""), "", item.url
            )

    console.print(table)
    console.print(f"Total: {len(result.items)}")


def render_media_detail(
    detail: AnimeDetail | MangaDetail, console: Console | None = None
) -> None:
    """Render an anime or manga detail record as a panel plus staff/cast tables."""
    console = console or Console()
    lines = [
        f"[bold]{escape(detail.title)}[/bold]"
        + (f" / {escape(detail.russian)}" if detail.russian else ""),
        f"Kind: {detail.kind or '-'}   Status: {detail.status or '-'}   "
        f"Score: {_score(detail.score)}",
        f"Genres: {_join(g.russian or g.name for g in detail.genres or ())}",
    ]
    if isinstance(detail, AnimeDetail):
        lines.append(f"Studios: {_join(s.name for s in detail.studios or ())}")
        lines.append(f"Episodes: {_progress(detail)}   Rating: {detail.rating or '-'}")
    else:
        lines.append(f"Publishers: {_join(p.name for p in detail.publishers or ())}")
        lines.append(f"Volumes / chapters: {_progress(detail)}")
    if detail.synonyms:
        lines.append(f"Synonyms: {_join(detail.synonyms)}")
    if detail.url:
        lines.append(f"URL: {detail.url}")
    console.print(Panel("\n".join(lines), title=f"#{detail.id}"))

    if detail.description:
        console.print(detail.description, markup=False)

    if detail.related:
        table = Table(title="Related")
        table.add_column("Relation", style="yellow")
        table.add_column("Type")
        table.add_column("Title", style="bold")
        for edge in detail.related:
            target = edge.anime or edge.manga
            kind = "anime" if edge.anime else "manga"
            table.add_row(
                escape(edge.relation_text or edge.relation_kind), kind, escape(target.name)
            )
        console.print(table)

    if detail.character_roles:
        table = Table(title="Characters")
        table.add_column("Role", style="yellow")
        table.add_column("Name", style="bold")
        for role in detail.character_roles[:30]:
            first = (role.roles_ru or role.roles_en or ("-",))[0]
            table.add_row(
                escape(first), escape(role.character.russian or role.character.name)
            )
        console.print(table)


def render_character_detail(
    detail: CharacterDetail, console: Console | None = None
) -> None:
    console = console or Console()
    lines = [
        f"[bold]{escape(detail.name)}[/bold]"
        + (f" / {escape(detail.russian)}" if detail.russian else ""),
        f"Japanese: {escape(detail.japanese or '-')}",
        f"Synonyms: {_join(detail.synonyms)}",
        f"Seiyu: {_join(p.russian or p.name for p in detail.seyus)}",
    ]
    if detail.url:
        lines.append(f"URL: {detail.url}")
    console.print(Panel("\n".join(lines), title=f"#{detail.id}"))

    if detail.character_roles:
        table = Table(title="Appearances")
        table.add_column("Type")
        table.add_column("Title", style="bold")
        table.add_column("Role", style="yellow")
        for role in detail.character_roles:
            media = role.anime or role.manga
            kind = "anime" if role.anime else "manga"
            table.add_row(kind, escape(media.title), _join(role.roles_ru or role.roles_en))
        console.print(table)


def render_named_list(
    title: str,
    items: Sequence[Genre | Studio | Publisher],
    console: Console | None = None,
) -> None:
    """Render a genre/studio/publisher lookup list."""
    console = console or Console()
    table = Table(title=title)
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Extra")
    for item in items:
        extra = ""
        if isinstance(item, Genre):
            extra = " | ".join(filter(None, (item.russian, item.kind)))
        elif isinstance(item, Studio):
            extra = item.image_url or ""
        table.add_row(str(item.id), escape(item.name), escape(extra))
    console.print(table)
    console.print(f"Total: {len(items)}")
