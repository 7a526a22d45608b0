"""Tests for the Shikimori transport using respx to mock HTTP."""

import json

import httpx
import pytest
import respx

from shikiview.catalog.errors import (
    CatalogError,
    ErrorKind,
    UpstreamApiError,
    UpstreamProtocolError,
    UpstreamRateLimitError,
    UpstreamSerializationError,
    UpstreamTransportError,
)
from shikiview.catalog.facade import CatalogFacade
from shikiview.catalog.params import AnimeSearchParams, CharacterSearchParams
from shikiview.catalog.transport import ShikimoriTransport

ORIGIN = "https://shikimori.one"
GRAPHQL_URL = f"{ORIGIN}/api/graphql"


@pytest.mark.asyncio
@respx.mock
async def test_search_posts_graphql_with_variables() -> None:
    route = respx.post(GRAPHQL_URL).mock(
        return_value=httpx.Response(
            200, json={"data": {"animes": [{"id": "1", "name": "Cowboy Bebop"}]}}
        )
    )
    async with httpx.AsyncClient() as client:
        transport = ShikimoriTransport(client, user_agent="shikiview-tests")
        records = await transport.animes(
            AnimeSearchParams(search="bebop", limit=5, censored=True)
        )

    assert records == [{"id": "1", "name": "Cowboy Bebop"}]
    request = route.calls.last.request
    assert request.headers["User-Agent"] == "shikiview-tests"
    body = json.loads(request.content)
    assert "animes(" in body["query"]
    assert body["variables"] == {
        "search": "bebop",
        "page": 1,
        "limit": 5,
        "censored": True,
    }


@pytest.mark.asyncio
@respx.mock
async def test_character_search_sends_ids() -> None:
    route = respx.post(GRAPHQL_URL).mock(
        return_value=httpx.Response(200, json={"data": {"characters": []}})
    )
    async with httpx.AsyncClient() as client:
        records = await ShikimoriTransport(client).characters(
            CharacterSearchParams(ids=("1", "2"))
        )
    assert records == []
    assert json.loads(route.calls.last.request.content)["variables"]["ids"] == ["1", "2"]


@pytest.mark.asyncio
@respx.mock
async def test_detail_returns_first_record_or_none() -> None:
    route = respx.post(GRAPHQL_URL)
    route.side_effect = [
        httpx.Response(200, json={"data": {"animes": [{"id": "1"}]}}),
        httpx.Response(200, json={"data": {"animes": []}}),
    ]
    async with httpx.AsyncClient() as client:
        transport = ShikimoriTransport(client)
        assert await transport.anime(1, censored=False) == {"id": "1"}
        assert await transport.anime(2) is None

    first = json.loads(route.calls[0].request.content)["variables"]
    second = json.loads(route.calls[1].request.content)["variables"]
    assert first == {"ids": "1", "censored": False}
    assert second == {"ids": "2"}


@pytest.mark.asyncio
@respx.mock
async def test_graphql_errors_array_is_a_protocol_error() -> None:
    respx.post(GRAPHQL_URL).mock(
        return_value=httpx.Response(
            200, json={"errors": [{"message": "Field 'nope' doesn't exist"}]}
        )
    )
    async with httpx.AsyncClient() as client:
        with pytest.raises(UpstreamProtocolError) as excinfo:
            await ShikimoriTransport(client).animes(AnimeSearchParams())
    assert excinfo.value.messages == ["Field 'nope' doesn't exist"]


@pytest.mark.asyncio
@respx.mock
async def test_rate_limit_reads_retry_after() -> None:
    respx.post(GRAPHQL_URL).mock(
        return_value=httpx.Response(429, headers={"Retry-After": "3"})
    )
    async with httpx.AsyncClient() as client:
        with pytest.raises(UpstreamRateLimitError) as excinfo:
            await ShikimoriTransport(client).animes(AnimeSearchParams())
    assert excinfo.value.retry_after == 3.0


@pytest.mark.asyncio
@respx.mock
async def test_server_error_is_an_api_error() -> None:
    respx.get(f"{ORIGIN}/api/genres").mock(return_value=httpx.Response(503))
    async with httpx.AsyncClient() as client:
        with pytest.raises(UpstreamApiError) as excinfo:
            await ShikimoriTransport(client).genres()
    assert excinfo.value.status_code == 503


@pytest.mark.asyncio
@respx.mock
async def test_invalid_json_is_a_serialization_error() -> None:
    respx.get(f"{ORIGIN}/api/studios").mock(
        return_value=httpx.Response(200, content=b"<html>maintenance</html>")
    )
    async with httpx.AsyncClient() as client:
        with pytest.raises(UpstreamSerializationError):
            await ShikimoriTransport(client).studios()


@pytest.mark.asyncio
@respx.mock
async def test_missing_data_is_a_serialization_error() -> None:
    respx.post(GRAPHQL_URL).mock(return_value=httpx.Response(200, json={"data": None}))
    async with httpx.AsyncClient() as client:
        with pytest.raises(UpstreamSerializationError):
            await ShikimoriTransport(client).animes(AnimeSearchParams())


@pytest.mark.asyncio
@respx.mock
async def test_connection_failure_is_a_transport_error() -> None:
    respx.post(GRAPHQL_URL).mock(side_effect=httpx.ConnectError("refused"))
    async with httpx.AsyncClient() as client:
        with pytest.raises(UpstreamTransportError):
            await ShikimoriTransport(client).animes(AnimeSearchParams())


@pytest.mark.asyncio
@respx.mock
async def test_unknown_character_is_none() -> None:
    respx.get(f"{ORIGIN}/api/characters/42").mock(return_value=httpx.Response(404))
    async with httpx.AsyncClient() as client:
        assert await ShikimoriTransport(client).character(42) is None


@pytest.mark.asyncio
@respx.mock
async def test_character_record_is_returned_raw() -> None:
    respx.get(f"{ORIGIN}/api/characters/1").mock(
        return_value=httpx.Response(200, json={"id": 1, "name": "Spike Spiegel"})
    )
    async with httpx.AsyncClient() as client:
        record = await ShikimoriTransport(client).character(1)
    assert record == {"id": 1, "name": "Spike Spiegel"}


@pytest.mark.asyncio
@respx.mock
async def test_custom_origin() -> None:
    route = respx.get("https://shiki.example/api/publishers").mock(
        return_value=httpx.Response(200, json=[{"id": 1, "name": "Shueisha"}, "junk"])
    )
    async with httpx.AsyncClient() as client:
        transport = ShikimoriTransport(client, origin="https://shiki.example/")
        assert await transport.publishers() == [{"id": 1, "name": "Shueisha"}]
    assert route.called


@pytest.mark.asyncio
@respx.mock
async def test_redirect_loop_is_a_transport_error() -> None:
    url = f"{ORIGIN}/api/characters/1"
    respx.get(url).mock(return_value=httpx.Response(302, headers={"Location": url}))
    async with httpx.AsyncClient(follow_redirects=True) as client:
        with pytest.raises(UpstreamTransportError) as excinfo:
            await ShikimoriTransport(client).character(1)
    assert isinstance(excinfo.value.__cause__, httpx.TooManyRedirects)


@pytest.mark.asyncio
@respx.mock
async def test_redirect_loop_reaches_the_caller_as_catalog_error() -> None:
    url = f"{ORIGIN}/api/characters/1"
    respx.get(url).mock(return_value=httpx.Response(302, headers={"Location": url}))
    async with httpx.AsyncClient(follow_redirects=True) as client:
        facade = CatalogFacade(ShikimoriTransport(client))
        with pytest.raises(CatalogError) as excinfo:
            await facade.get_character_details(1)
    assert excinfo.value.kind is ErrorKind.TRANSPORT


@pytest.mark.asyncio
@respx.mock
async def test_undecodable_body_encoding_is_a_transport_error() -> None:
    respx.get(f"{ORIGIN}/api/genres").mock(
        side_effect=httpx.DecodingError("malformed gzip body")
    )
    async with httpx.AsyncClient() as client:
        with pytest.raises(UpstreamTransportError) as excinfo:
            await ShikimoriTransport(client).genres()
    assert isinstance(excinfo.value.__cause__, httpx.DecodingError)
