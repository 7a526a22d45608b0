"""Error taxonomy for the catalog layer.

Upstream failures come in a small closed set of families, each raised by the
transport as its own exception type. Every family is translated exactly once,
at the facade (or color cache) boundary, into a :class:`CatalogError` carrying a
stable ``kind`` that the UI can key off.

Design:
- ``ErrorKind`` is the fixed taxonomy; there is no "unknown" member.
- Each ``UpstreamError`` subclass declares the kind it translates to, so the
  translation is total over the families and adding a new family means adding a
  subclass with its own ``kind``.
- ``not_found`` and ``validation`` are never raised by the transport; they are
  synthesized locally by the facade.
"""

from enum import Enum
from typing import Any, ClassVar

import httpx


class ErrorKind(str, Enum):
    """Stable error kinds surfaced to the UI."""

    VALIDATION = "validation"
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    RATE_LIMIT = "rate_limit"
    UPSTREAM_API = "upstream_api"
    SERIALIZATION = "serialization"
    NOT_FOUND = "not_found"


# Localized message prefixes shown to the user.
_MESSAGE_PREFIXES: dict[ErrorKind, str] = {
    ErrorKind.VALIDATION: "Ошибка валидации",
    ErrorKind.TRANSPORT: "Ошибка сети",
    ErrorKind.PROTOCOL: "Ошибка запроса",
    ErrorKind.RATE_LIMIT: "Превышен лимит запросов",
    ErrorKind.UPSTREAM_API: "Ошибка API",
    ErrorKind.SERIALIZATION: "Ошибка разбора ответа",
    ErrorKind.NOT_FOUND: "Не найдено",
}


class CatalogError(Exception):
    """Structured error handed to the caller of the catalog layer.

    Attributes:
        kind: One of the fixed :class:`ErrorKind` values.
        message: Human-readable, localized message.
        retry_after: Backoff hint in seconds, only ever set for ``rate_limit``.
    """

    def __init__(
        self, kind: ErrorKind, detail: str, retry_after: float | None = None
    ) -> None:
        """Build the error, prefixing *detail* with the localized kind label."""
        self.kind = kind
        self.message = f"{_MESSAGE_PREFIXES[kind]}: {detail}"
        self.retry_after = retry_after if kind is ErrorKind.RATE_LIMIT else None
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the ``{kind, message, retry_after}`` shape consumed by the UI."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "retry_after": self.retry_after,
        }

    @classmethod
    def validation(cls, detail: str) -> "CatalogError":
        return cls(ErrorKind.VALIDATION, detail)

    @classmethod
    def not_found(cls, detail: str) -> "CatalogError":
        return cls(ErrorKind.NOT_FOUND, detail)

    @classmethod
    def serialization(cls, detail: str) -> "CatalogError":
        return cls(ErrorKind.SERIALIZATION, detail)


class UpstreamError(Exception):
    """Base class for failures raised by the catalog transport."""

    kind: ClassVar[ErrorKind]

    def describe(self) -> str:
        """Return the detail part of the translated message."""
        return str(self) or type(self).__name__


class UpstreamTransportError(UpstreamError):
    """Network-level failure: DNS, connect, read error or timeout."""

    kind = ErrorKind.TRANSPORT


class UpstreamProtocolError(UpstreamError):
    """Well-formed GraphQL response that carries an ``errors`` array."""

    kind = ErrorKind.PROTOCOL

    def __init__(self, messages: list[str]) -> None:
        self.messages = messages
        super().__init__("; ".join(messages) or "unknown GraphQL error")


class UpstreamRateLimitError(UpstreamError):
    """Upstream asked the client to back off (HTTP 429)."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(self, retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        super().__init__("Shikimori rate limit exceeded")

    def describe(self) -> str:
        if self.retry_after is None:
            return "повторите запрос позже"
        return f"повторите запрос через {self.retry_after:g} с"


class UpstreamApiError(UpstreamError):
    """Non-2xx response from a REST or GraphQL endpoint."""

    kind = ErrorKind.UPSTREAM_API

    def __init__(self, status_code: int, url: str = "") -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code} {url}".rstrip())


class UpstreamSerializationError(UpstreamError):
    """Response body could not be parsed into the expected shape."""

    kind = ErrorKind.SERIALIZATION


def translate_upstream_error(exc: UpstreamError) -> CatalogError:
    """Translate an upstream failure into the structured :class:`CatalogError`.

    Args:
        exc: Any exception raised by the transport.

    Returns:
        The structured error; ``retry_after`` is carried only for rate limits.
    """
    retry_after = exc.retry_after if isinstance(exc, UpstreamRateLimitError) else None
    return CatalogError(exc.kind, exc.describe(), retry_after=retry_after)


def translate_http_error(exc: httpx.HTTPError) -> CatalogError:
    """Translate a raw httpx failure (image fetches) into a ``transport`` error."""
    if isinstance(exc, httpx.TimeoutException):
        return CatalogError(ErrorKind.TRANSPORT, f"превышено время ожидания ({exc})")
    if isinstance(exc, httpx.HTTPStatusError):
        return CatalogError(
            ErrorKind.TRANSPORT, f"HTTP {exc.response.status_code} {exc.request.url}"
        )
    return CatalogError(ErrorKind.TRANSPORT, str(exc) or type(exc).__name__)


def parse_retry_after(value: str | None) -> float | None:
    """Parse a ``Retry-After`` header given in seconds; dates are ignored."""
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None
