"""Process-lifetime cache of poster accent colors keyed by image URL.

On a miss the image is fetched (bounded by a total deadline and a size ceiling),
decoded, passed to the extractor and stored under the exact URL string. The
lock only guards the dictionary, never the fetch, so two concurrent misses on
the same URL may both fetch; both compute the same value and the last write
wins.

Failures (network, timeout, non-2xx, undecodable image) are raised as
``transport`` errors and are not cached, so a later call fetches again.
"""

import asyncio
import threading

import httpx

from shikiview.catalog.errors import CatalogError, ErrorKind, translate_http_error
from shikiview.imaging.accent import (
    FALLBACK_COLOR,
    ImageDecodeError,
    accent_color_from_bytes,
)
from shikiview.utils.debug import debug, warn

FETCH_TIMEOUT = 5.0
MAX_IMAGE_BYTES = 2 * 1024 * 1024


class AccentColorCache:
    """URL -> accent color memo backed by an injected HTTP client.

    Entries are never evicted; the cache lives as long as its owner.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        timeout: float = FETCH_TIMEOUT,
        max_bytes: int = MAX_IMAGE_BYTES,
    ) -> None:
        self._client = client
        self._timeout = timeout
        self._max_bytes = max_bytes
        self._colors: dict[str, str] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._colors)

    def cached(self, url: str) -> str | None:
        """Return the stored color for *url* without fetching."""
        with self._lock:
            return self._colors.get(url)

    async def get_or_compute_accent_color(self, url: str) -> str:
        """Return the accent color for the poster at *url*.

        Raises:
            CatalogError: ``validation`` for an empty URL, ``transport`` for
                fetch or decode failures.
        """
        if not url:
            raise CatalogError.validation("пустой URL изображения")

        cached = self.cached(url)
        if cached is not None:
            debug(f"Accent color cache hit: {url}")
            return cached

        debug(f"Accent color cache miss: {url}")
        try:
            data = await asyncio.wait_for(self._fetch(url), self._timeout)
        except asyncio.TimeoutError as exc:
            raise CatalogError(
                ErrorKind.TRANSPORT,
                f"превышено время ожидания ({self._timeout:g} с): {url}",
            ) from exc
        if data is None:
            return FALLBACK_COLOR

        try:
            color = accent_color_from_bytes(data)
        except ImageDecodeError as exc:
            raise CatalogError(ErrorKind.TRANSPORT, str(exc)) from exc

        with self._lock:
            self._colors[url] = color
        return color

    async def _fetch(self, url: str) -> bytes | None:
        """Download the image body, or ``None`` if it exceeds the size ceiling.

        The per-phase httpx timeout is kept; the caller bounds the whole call.
        """
        try:
            async with self._client.stream("GET", url, timeout=self._timeout) as resp:
                resp.raise_for_status()
                declared = resp.headers.get("Content-Length", "")
                if declared.isdigit() and int(declared) > self._max_bytes:
                    warn(f"Skipping {url}: Content-Length {declared} over limit")
                    return None
                body = bytearray()
                async for chunk in resp.aiter_bytes():
                    body.extend(chunk)
                    if len(body) > self._max_bytes:
                        warn(f"Skipping {url}: body over {self._max_bytes} bytes")
                        return None
                return bytes(body)
        except httpx.HTTPError as exc:
            raise translate_http_error(exc) from exc
        except httpx.InvalidURL as exc:
            raise CatalogError(ErrorKind.TRANSPORT, f"некорректный URL: {url}") from exc
