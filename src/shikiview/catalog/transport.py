"""Async transport for the Shikimori catalog.

Talks to both upstream protocols over a shared :class:`httpx.AsyncClient`:

- the GraphQL endpoint (``/api/graphql``) for searches and anime/manga details;
- the REST API (``/api/...``) for character details and the genre, studio and
  publisher lookup lists.

The transport returns raw, partially-populated records (plain dicts) and raises
only :class:`~shikiview.catalog.errors.UpstreamError` subclasses. It performs no
retries and no caching.
"""

from typing import Any

import httpx

from shikiview.__about__ import __version__
from shikiview.catalog.errors import (
    UpstreamApiError,
    UpstreamProtocolError,
    UpstreamRateLimitError,
    UpstreamSerializationError,
    UpstreamTransportError,
    parse_retry_after,
)
from shikiview.catalog.mapping.common import SITE_ORIGIN
from shikiview.catalog.params import (
    AnimeSearchParams,
    CharacterSearchParams,
    MangaSearchParams,
    PeopleSearchParams,
    SearchParams,
)
from shikiview.utils.debug import debug

DEFAULT_USER_AGENT = f"shikiview/{__version__}"

HTTP_TOO_MANY_REQUESTS = 429
HTTP_NOT_FOUND = 404
HTTP_ERROR_THRESHOLD = 400

POSTER_FIELDS = """
    poster { originalUrl mainUrl previewUrl miniUrl mini2xUrl }
"""

ANIME_SEARCH_QUERY = (
    """
query (
  $search: String, $page: PositiveInt, $limit: PositiveInt,
  $kind: AnimeKindString, $status: AnimeStatusString, $season: SeasonString,
  $rating: RatingString, $genre: String, $studio: String, $order: OrderEnum,
  $censored: Boolean
) {
  animes(
    search: $search, page: $page, limit: $limit, kind: $kind, status: $status,
    season: $season, rating: $rating, genre: $genre, studio: $studio,
    order: $order, censored: $censored
  ) {
    id name russian url score kind status episodes episodesAired
"""
    + POSTER_FIELDS
    + """
  }
}
"""
)

MANGA_SEARCH_QUERY = (
    """
query (
  $search: String, $page: PositiveInt, $limit: PositiveInt,
  $kind: MangaKindString, $status: MangaStatusString, $season: SeasonString,
  $genre: String, $publisher: String, $order: OrderEnum, $censored: Boolean
) {
  mangas(
    search: $search, page: $page, limit: $limit, kind: $kind, status: $status,
    season: $season, genre: $genre, publisher: $publisher, order: $order,
    censored: $censored
  ) {
    id name russian url score kind status volumes chapters
"""
    + POSTER_FIELDS
    + """
  }
}
"""
)

CHARACTER_SEARCH_QUERY = (
    """
query ($search: String, $page: PositiveInt, $limit: PositiveInt, $ids: [ID!]) {
  characters(search: $search, page: $page, limit: $limit, ids: $ids) {
    id name russian url description isAnime isManga isRanobe
"""
    + POSTER_FIELDS
    + """
  }
}
"""
)

PEOPLE_SEARCH_QUERY = (
    """
query (
  $search: String, $page: PositiveInt, $limit: PositiveInt,
  $is_seyu: Boolean, $is_producer: Boolean, $is_mangaka: Boolean
) {
  people(
    search: $search, page: $page, limit: $limit,
    isSeyu: $is_seyu, isProducer: $is_producer, isMangaka: $is_mangaka
  ) {
    id name russian url website isSeyu isMangaka isProducer
"""
    + POSTER_FIELDS
    + """
  }
}
"""
)

_DETAIL_FIELDS = (
    """
    id malId name russian licenseNameRu english japanese synonyms url
    score kind status description descriptionHtml descriptionSource isCensored
    airedOn { year month day date }
    releasedOn { year month day date }
    licensors
"""
    + POSTER_FIELDS
    + """
    genres { id name russian kind }
    externalLinks { id kind url createdAt updatedAt }
    personRoles { id rolesRu rolesEn person { id name russian url"""
    + POSTER_FIELDS
    + """ } }
    characterRoles { id rolesRu rolesEn character { id name russian url"""
    + POSTER_FIELDS
    + """ } }
    related {
      id relationKind relationText
      anime { id name russian url"""
    + POSTER_FIELDS
    + """ }
      manga { id name russian url"""
    + POSTER_FIELDS
    + """ }
    }
    scoresStats { score count }
    statusesStats { status count }
"""
)

ANIME_DETAIL_QUERY = (
    """
query ($ids: String, $censored: Boolean) {
  animes(ids: $ids, limit: 1, censored: $censored) {
"""
    + _DETAIL_FIELDS
    + """
    episodes episodesAired rating duration season nextEpisodeAt
    fansubbers fandubbers
    studios { id name imageUrl }
    videos { id url name kind playerUrl imageUrl }
    screenshots { id originalUrl x166Url x332Url }
  }
}
"""
)

MANGA_DETAIL_QUERY = (
    """
query ($ids: String, $censored: Boolean) {
  mangas(ids: $ids, limit: 1, censored: $censored) {
"""
    + _DETAIL_FIELDS
    + """
    volumes chapters
    publishers { id name }
  }
}
"""
)


class ShikimoriTransport:
    """Raw access to the Shikimori GraphQL and REST APIs.

    The client is injected so that one connection pool is shared with the
    rest of the process; the transport never closes it.
    """

    GRAPHQL_PATH = "/api/graphql"

    def __init__(
        self,
        client: httpx.AsyncClient,
        origin: str = SITE_ORIGIN,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._client = client
        self._origin = origin.rstrip("/")
        self._headers = {"User-Agent": user_agent, "Accept": "application/json"}

    async def animes(self, params: AnimeSearchParams) -> list[dict[str, Any]]:
        return await self._search(ANIME_SEARCH_QUERY, params, "animes")

    async def mangas(self, params: MangaSearchParams) -> list[dict[str, Any]]:
        return await self._search(MANGA_SEARCH_QUERY, params, "mangas")

    async def characters(self, params: CharacterSearchParams) -> list[dict[str, Any]]:
        return await self._search(CHARACTER_SEARCH_QUERY, params, "characters")

    async def people(self, params: PeopleSearchParams) -> list[dict[str, Any]]:
        return await self._search(PEOPLE_SEARCH_QUERY, params, "people")

    async def anime(
        self, anime_id: int, censored: bool | None = None
    ) -> dict[str, Any] | None:
        """Fetch one anime with all detail fields, or ``None`` if it is unknown."""
        return await self._single(ANIME_DETAIL_QUERY, "animes", anime_id, censored)

    async def manga(
        self, manga_id: int, censored: bool | None = None
    ) -> dict[str, Any] | None:
        return await self._single(MANGA_DETAIL_QUERY, "mangas", manga_id, censored)

    async def character(self, character_id: int) -> dict[str, Any] | None:
        """Fetch ``/api/characters/:id``; a 404 means the character does not exist."""
        payload = await self._rest(f"/api/characters/{character_id}", allow_missing=True)
        if payload is None:
            return None
        if not isinstance(payload, dict):
            raise UpstreamSerializationError("character: expected a JSON object")
        return payload

    async def genres(self) -> list[dict[str, Any]]:
        return self._object_list(await self._rest("/api/genres"), "genres")

    async def studios(self) -> list[dict[str, Any]]:
        return self._object_list(await self._rest("/api/studios"), "studios")

    async def publishers(self) -> list[dict[str, Any]]:
        return self._object_list(await self._rest("/api/publishers"), "publishers")

    async def _search(
        self, query: str, params: SearchParams, key: str
    ) -> list[dict[str, Any]]:
        data = await self._graphql(query, params.to_variables())
        return self._object_list(data.get(key), key)

    async def _single(
        self, query: str, key: str, entity_id: int, censored: bool | None
    ) -> dict[str, Any] | None:
        variables: dict[str, Any] = {"ids": str(entity_id)}
        if censored is not None:
            variables["censored"] = censored
        data = await self._graphql(query, variables)
        records = self._object_list(data.get(key), key)
        return records[0] if records else None

    async def _graphql(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        response = await self._send(
            "POST",
            self.GRAPHQL_PATH,
            json={"query": query, "variables": variables},
        )
        if response.status_code >= HTTP_ERROR_THRESHOLD:
            raise UpstreamApiError(response.status_code, str(response.request.url))
        payload = self._decode(response)
        if not isinstance(payload, dict):
            raise UpstreamSerializationError("GraphQL: expected a JSON object")
        errors = payload.get("errors")
        if errors:
            messages = [
                str(err.get("message"))
                for err in errors
                if isinstance(err, dict) and err.get("message")
            ]
            raise UpstreamProtocolError(messages)
        data = payload.get("data")
        if not isinstance(data, dict):
            raise UpstreamSerializationError("GraphQL: response has no data")
        return data

    async def _rest(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        allow_missing: bool = False,
    ) -> Any:
        response = await self._send("GET", path, params=params)
        if allow_missing and response.status_code == HTTP_NOT_FOUND:
            return None
        if response.status_code >= HTTP_ERROR_THRESHOLD:
            raise UpstreamApiError(response.status_code, str(response.request.url))
        return self._decode(response)

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self._origin}{path}"
        debug(f"Shikimori {method} {url}")
        try:
            response = await self._client.request(
                method, url, headers=self._headers, **kwargs
            )
        except httpx.TimeoutException as exc:
            raise UpstreamTransportError(f"timeout: {url}") from exc
        except httpx.RequestError as exc:
            # Connect/read failures, redirect loops and undecodable bodies.
            raise UpstreamTransportError(f"{type(exc).__name__}: {url}") from exc
        if response.status_code == HTTP_TOO_MANY_REQUESTS:
            raise UpstreamRateLimitError(
                parse_retry_after(response.headers.get("Retry-After"))
            )
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamSerializationError(f"invalid JSON: {exc}") from exc

    @staticmethod
    def _object_list(value: Any, what: str) -> list[dict[str, Any]]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise UpstreamSerializationError(f"{what}: expected a list")
        return [item for item in value if isinstance(item, dict)]
