"""Catalog facade: one upstream round trip per logical UI operation.

Each operation validates its arguments, issues exactly one transport call,
maps every returned record into a canonical model and returns it. Every
failure leaves the facade as a :class:`~shikiview.catalog.errors.CatalogError`;
nothing is cached here.
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, Protocol, TypeVar

from shikiview.catalog.errors import (
    CatalogError,
    UpstreamError,
    translate_upstream_error,
)
from shikiview.catalog.mapping import graphql, rest
from shikiview.catalog.models import (
    Anime,
    AnimeDetail,
    Character,
    CharacterDetail,
    Genre,
    Manga,
    MangaDetail,
    Person,
    Publisher,
    SearchResult,
    Studio,
)
from shikiview.catalog.params import (
    AnimeSearchParams,
    CharacterSearchParams,
    MangaSearchParams,
    PeopleSearchParams,
    SortOption,
)
from shikiview.utils.debug import debug

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MIN_LIMIT = 1
MAX_LIMIT = 50

T = TypeVar("T")
R = TypeVar("R")


class CatalogTransport(Protocol):
    """What the facade needs from a transport client."""

    async def animes(self, params: AnimeSearchParams) -> list[dict[str, Any]]: ...

    async def mangas(self, params: MangaSearchParams) -> list[dict[str, Any]]: ...

    async def characters(
        self, params: CharacterSearchParams
    ) -> list[dict[str, Any]]: ...

    async def people(self, params: PeopleSearchParams) -> list[dict[str, Any]]: ...

    async def anime(
        self, anime_id: int, censored: bool | None = None
    ) -> dict[str, Any] | None: ...

    async def manga(
        self, manga_id: int, censored: bool | None = None
    ) -> dict[str, Any] | None: ...

    async def character(self, character_id: int) -> dict[str, Any] | None: ...

    async def genres(self) -> list[dict[str, Any]]: ...

    async def studios(self) -> list[dict[str, Any]]: ...

    async def publishers(self) -> list[dict[str, Any]]: ...


def validate_pagination(page: int, limit: int) -> None:
    """Raise a ``validation`` error unless ``page >= 1`` and ``1 <= limit <= 50``."""
    if page < 1:
        raise CatalogError.validation("Страница должна быть >= 1")
    if not MIN_LIMIT <= limit <= MAX_LIMIT:
        raise CatalogError.validation(
            f"Лимит должен быть от {MIN_LIMIT} до {MAX_LIMIT}"
        )


def _validate_id(entity_id: int) -> None:
    if entity_id < 1:
        raise CatalogError.validation("Идентификатор должен быть >= 1")


def _parse_order(order: str | SortOption | None) -> str | None:
    if order is None:
        return None
    try:
        return SortOption(order).upstream_order
    except ValueError:
        allowed = ", ".join(option.value for option in SortOption)
        raise CatalogError.validation(
            f"Неизвестная сортировка '{order}', допустимо: {allowed}"
        ) from None


def _search_text(query: str | None) -> str | None:
    text = (query or "").strip()
    return text or None


class CatalogFacade:
    """Entry point used by the UI for every catalog query.

    Args:
        transport: Client for the upstream protocols.
        censored: Censorship flag derived from the "allow adult content"
            preference; forwarded on anime/manga queries.
    """

    def __init__(self, transport: CatalogTransport, censored: bool = True) -> None:
        self._transport = transport
        self._censored = censored

    async def search_anime(
        self,
        query: str = "",
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
        kind: str | None = None,
        status: str | None = None,
        genre: str | None = None,
        studio: str | None = None,
        order: str | SortOption | None = None,
        season: str | None = None,
        rating: str | None = None,
    ) -> SearchResult[Anime]:
        validate_pagination(page, limit)
        params = AnimeSearchParams(
            search=_search_text(query),
            page=page,
            limit=limit,
            kind=kind or None,
            status=status or None,
            season=season or None,
            rating=rating or None,
            genre=genre or None,
            studio=studio or None,
            order=_parse_order(order),
            censored=self._censored,
        )
        items = await self._call("search_anime", self._transport.animes, params)
        return self._page(items, graphql.map_anime, page, limit)

    async def search_manga(
        self,
        query: str = "",
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
        kind: str | None = None,
        status: str | None = None,
        genre: str | None = None,
        publisher: str | None = None,
        order: str | SortOption | None = None,
        season: str | None = None,
    ) -> SearchResult[Manga]:
        validate_pagination(page, limit)
        params = MangaSearchParams(
            search=_search_text(query),
            page=page,
            limit=limit,
            kind=kind or None,
            status=status or None,
            season=season or None,
            genre=genre or None,
            publisher=publisher or None,
            order=_parse_order(order),
            censored=self._censored,
        )
        items = await self._call("search_manga", self._transport.mangas, params)
        return self._page(items, graphql.map_manga, page, limit)

    async def search_characters(
        self,
        query: str = "",
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
        ids: Sequence[str | int] | None = None,
    ) -> SearchResult[Character]:
        validate_pagination(page, limit)
        params = CharacterSearchParams(
            search=_search_text(query),
            page=page,
            limit=limit,
            ids=tuple(str(i) for i in ids) if ids else None,
        )
        items = await self._call(
            "search_characters", self._transport.characters, params
        )
        return self._page(items, graphql.map_character, page, limit)

    async def search_people(
        self,
        query: str = "",
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
        is_seyu: bool | None = None,
        is_mangaka: bool | None = None,
        is_producer: bool | None = None,
    ) -> SearchResult[Person]:
        validate_pagination(page, limit)
        params = PeopleSearchParams(
            search=_search_text(query),
            page=page,
            limit=limit,
            is_seyu=is_seyu,
            is_mangaka=is_mangaka,
            is_producer=is_producer,
        )
        items = await self._call("search_people", self._transport.people, params)
        return self._page(items, graphql.map_person, page, limit)

    async def get_anime_by_id(self, anime_id: int) -> AnimeDetail:
        _validate_id(anime_id)
        raw = await self._call(
            "get_anime_by_id", self._transport.anime, anime_id, self._censored
        )
        if raw is None:
            raise CatalogError.not_found(f"аниме с id {anime_id}")
        return graphql.map_anime_detail(raw)

    async def get_manga_by_id(self, manga_id: int) -> MangaDetail:
        _validate_id(manga_id)
        raw = await self._call(
            "get_manga_by_id", self._transport.manga, manga_id, self._censored
        )
        if raw is None:
            raise CatalogError.not_found(f"манга с id {manga_id}")
        return graphql.map_manga_detail(raw)

    async def get_character_details(self, character_id: int) -> CharacterDetail:
        _validate_id(character_id)
        raw = await self._call(
            "get_character_details", self._transport.character, character_id
        )
        if raw is None:
            raise CatalogError.not_found(f"персонаж с id {character_id}")
        return rest.map_character_detail(raw)

    async def get_genres(self) -> list[Genre]:
        items = await self._call("get_genres", self._transport.genres)
        return [rest.map_genre(item) for item in items]

    async def search_studios(self, query: str = "") -> list[Studio]:
        items = await self._call("search_studios", self._transport.studios)
        studios = [rest.map_studio(item) for item in items]
        return _filter_by_name(studios, query)

    async def search_publishers(self, query: str = "") -> list[Publisher]:
        items = await self._call("search_publishers", self._transport.publishers)
        publishers = [rest.map_publisher(item) for item in items]
        return _filter_by_name(publishers, query)

    @staticmethod
    async def _call(
        operation: str, fn: Callable[..., Awaitable[R]], *args: Any
    ) -> R:
        """Run one transport call, translating upstream failures exactly once."""
        try:
            return await fn(*args)
        except UpstreamError as exc:
            translated = translate_upstream_error(exc)
            debug(f"{operation} failed: {translated.kind.value}: {exc!r}")
            raise translated from exc

    @staticmethod
    def _page(
        items: list[dict[str, Any]],
        mapper: Callable[[Mapping[str, Any]], T],
        page: int,
        limit: int,
    ) -> SearchResult[T]:
        return SearchResult(
            items=tuple(mapper(item) for item in items), page=page, limit=limit
        )


def _filter_by_name(entities: list[T], query: str) -> list[T]:
    needle = query.strip().casefold()
    if not needle:
        return entities
    return [e for e in entities if needle in getattr(e, "name", "").casefold()]
