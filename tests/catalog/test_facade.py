"""Tests for the catalog facade against an in-memory transport."""

import pytest

from shikiview.catalog.errors import (
    CatalogError,
    ErrorKind,
    UpstreamApiError,
    UpstreamProtocolError,
    UpstreamRateLimitError,
    UpstreamTransportError,
)
from shikiview.catalog.facade import CatalogFacade, validate_pagination
from shikiview.catalog.params import SortOption
from tests.helpers.fakes import FakeTransport


@pytest.mark.parametrize("page, limit", [(0, 20), (1, 0), (1, 51), (-3, 10)])
def test_invalid_pagination_is_rejected(page: int, limit: int) -> None:
    with pytest.raises(CatalogError) as excinfo:
        validate_pagination(page, limit)
    assert excinfo.value.kind is ErrorKind.VALIDATION


@pytest.mark.parametrize("page, limit", [(1, 1), (1, 50), (99, 20)])
def test_valid_pagination_passes(page: int, limit: int) -> None:
    validate_pagination(page, limit)


@pytest.mark.asyncio
async def test_invalid_pagination_makes_no_upstream_call() -> None:
    transport = FakeTransport()
    facade = CatalogFacade(transport)
    with pytest.raises(CatalogError) as excinfo:
        await facade.search_anime("bebop", page=0)
    assert excinfo.value.kind is ErrorKind.VALIDATION
    assert transport.calls == []


@pytest.mark.asyncio
async def test_search_anime_maps_items_and_echoes_pagination() -> None:
    transport = FakeTransport(
        animes=[
            {"id": "1", "name": "Cowboy Bebop", "score": 8.75},
            {"id": "5", "name": "Tengoku no Tobira", "score": "0.0"},
        ]
    )
    facade = CatalogFacade(transport, censored=False)
    result = await facade.search_anime(
        " bebop ", page=2, limit=50, kind="tv", order=SortOption.SCORE
    )

    assert [item.id for item in result.items] == [1, 5]
    assert result.items[1].score is None
    assert (result.page, result.limit) == (2, 50)

    assert len(transport.calls) == 1
    name, (params,) = transport.calls[0]
    assert name == "animes"
    assert params.search == "bebop"
    assert params.kind == "tv"
    assert params.order == "ranked"
    assert params.censored is False


@pytest.mark.asyncio
async def test_empty_query_and_filters_are_omitted() -> None:
    transport = FakeTransport()
    facade = CatalogFacade(transport)
    result = await facade.search_manga("", kind="", publisher=None)

    assert result.items == ()
    (_, (params,)), = transport.calls
    assert params.to_variables() == {"page": 1, "limit": 20, "censored": True}


@pytest.mark.asyncio
async def test_unknown_order_is_a_validation_error() -> None:
    transport = FakeTransport()
    with pytest.raises(CatalogError) as excinfo:
        await CatalogFacade(transport).search_anime("x", order="newest")
    assert excinfo.value.kind is ErrorKind.VALIDATION
    assert transport.calls == []


@pytest.mark.asyncio
async def test_search_characters_forwards_ids() -> None:
    transport = FakeTransport(characters=[{"id": "1", "name": "Spike"}])
    result = await CatalogFacade(transport).search_characters(ids=[1, 2])
    assert result.items[0].name == "Spike"
    (_, (params,)), = transport.calls
    assert params.ids == ("1", "2")


@pytest.mark.asyncio
async def test_search_people_takes_page_before_limit() -> None:
    transport = FakeTransport(people=[{"id": "2", "name": "Kouichi", "isSeyu": True}])
    result = await CatalogFacade(transport).search_people("kou", 3, 10, is_seyu=True)
    assert result.items[0].is_seyu is True
    assert (result.page, result.limit) == (3, 10)
    (_, (params,)), = transport.calls
    assert (params.page, params.limit) == (3, 10)
    assert params.is_seyu is True


@pytest.mark.asyncio
async def test_get_anime_forwards_censored_flag(anime_detail_record: dict) -> None:
    transport = FakeTransport(anime=anime_detail_record)
    detail = await CatalogFacade(transport, censored=True).get_anime_by_id(1)
    assert detail.title == "Cowboy Bebop"
    assert transport.calls == [("anime", (1, True))]


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["get_anime_by_id", "get_manga_by_id", "get_character_details"])
async def test_unknown_id_is_not_found(method: str) -> None:
    transport = FakeTransport(anime=None, manga=None, character=None)
    with pytest.raises(CatalogError) as excinfo:
        await getattr(CatalogFacade(transport), method)(999999)
    assert excinfo.value.kind is ErrorKind.NOT_FOUND
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_non_positive_id_is_rejected() -> None:
    transport = FakeTransport()
    with pytest.raises(CatalogError) as excinfo:
        await CatalogFacade(transport).get_manga_by_id(0)
    assert excinfo.value.kind is ErrorKind.VALIDATION
    assert transport.calls == []


@pytest.mark.asyncio
async def test_character_details_use_rest_record(character_record: dict) -> None:
    transport = FakeTransport(character=character_record)
    detail = await CatalogFacade(transport).get_character_details(1)
    assert detail.synonyms == ("Swimming Bird", "Spike", "Space Cowboy")
    assert transport.calls == [("character", (1,))]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "upstream, kind",
    [
        (UpstreamTransportError("refused"), ErrorKind.TRANSPORT),
        (UpstreamProtocolError(["Field 'x' doesn't exist"]), ErrorKind.PROTOCOL),
        (UpstreamApiError(500), ErrorKind.UPSTREAM_API),
    ],
)
async def test_upstream_failures_are_translated(upstream, kind: ErrorKind) -> None:
    transport = FakeTransport(animes=upstream)
    with pytest.raises(CatalogError) as excinfo:
        await CatalogFacade(transport).search_anime("bebop")
    assert excinfo.value.kind is kind
    assert excinfo.value.__cause__ is upstream
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_rate_limit_exposes_retry_after() -> None:
    transport = FakeTransport(genres=UpstreamRateLimitError(7))
    with pytest.raises(CatalogError) as excinfo:
        await CatalogFacade(transport).get_genres()
    assert excinfo.value.kind is ErrorKind.RATE_LIMIT
    assert excinfo.value.retry_after == 7


@pytest.mark.asyncio
async def test_malformed_record_is_a_serialization_error() -> None:
    transport = FakeTransport(animes=[{"name": "no id"}])
    with pytest.raises(CatalogError) as excinfo:
        await CatalogFacade(transport).search_anime("x")
    assert excinfo.value.kind is ErrorKind.SERIALIZATION


@pytest.mark.asyncio
async def test_lookup_lists_filter_by_name() -> None:
    transport = FakeTransport(
        studios=[
            {"id": 14, "name": "Sunrise"},
            {"id": 2, "name": "Bones"},
            {"id": 7, "name": "J.C.Staff"},
        ],
        publishers=[{"id": 1, "name": "Shueisha"}],
    )
    facade = CatalogFacade(transport)
    assert [s.id for s in await facade.search_studios("SUN")] == [14]
    assert len(await facade.search_studios("")) == 3
    assert await facade.search_publishers("kodansha") == []


@pytest.mark.asyncio
async def test_get_genres() -> None:
    transport = FakeTransport(genres=[{"id": 1, "name": "Action", "russian": "Экшен"}])
    genres = await CatalogFacade(transport).get_genres()
    assert genres[0].russian == "Экшен"
