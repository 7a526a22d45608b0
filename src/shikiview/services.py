"""Service container owning the catalog layer's shared objects.

One :class:`CatalogServices` instance holds the single HTTP client, the
transport, the facade and the accent color cache. Each is created lazily on
first access and lives until :meth:`CatalogServices.aclose`.
"""

from types import TracebackType
from typing import Optional

import httpx

from shikiview.catalog.facade import CatalogFacade
from shikiview.catalog.transport import ShikimoriTransport
from shikiview.imaging.color_cache import AccentColorCache
from shikiview.settings import Settings, load_settings


class CatalogServices:
    """Lazily constructed, explicitly closed catalog singletons.

    Args:
        settings: Resolved settings; loaded from the environment if omitted.
        client: Optional pre-built HTTP client (tests inject one). A client
            passed in is not closed by :meth:`aclose`.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self._client = client
        self._owns_client = client is None
        self._transport: Optional[ShikimoriTransport] = None
        self._facade: Optional[CatalogFacade] = None
        self._color_cache: Optional[AccentColorCache] = None

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True)
        return self._client

    @property
    def transport(self) -> ShikimoriTransport:
        if self._transport is None:
            self._transport = ShikimoriTransport(
                self.http_client,
                origin=self.settings.SHIKIMORI_ORIGIN,
                user_agent=self.settings.SHIKIMORI_USER_AGENT,
            )
        return self._transport

    @property
    def facade(self) -> CatalogFacade:
        if self._facade is None:
            self._facade = CatalogFacade(self.transport, censored=self.settings.censored)
        return self._facade

    @property
    def color_cache(self) -> AccentColorCache:
        if self._color_cache is None:
            self._color_cache = AccentColorCache(
                self.http_client,
                timeout=self.settings.IMAGE_FETCH_TIMEOUT,
                max_bytes=self.settings.IMAGE_MAX_BYTES,
            )
        return self._color_cache

    async def get_accent_color(self, url: str) -> str:
        return await self.color_cache.get_or_compute_accent_color(url)

    async def aclose(self) -> None:
        """Close the HTTP client if this container created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
        self._transport = None
        self._facade = None
        self._color_cache = None

    async def __aenter__(self) -> "CatalogServices":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()
