"""Mapping policies shared by the GraphQL and REST mappers.

Every helper here is total: malformed optional values degrade to ``None``
instead of raising. The only exception is :func:`require_id`, because a record
without its own identity cannot become a canonical entity.
"""

import math
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from shikiview.catalog.errors import CatalogError
from shikiview.catalog.models import UNRESOLVED_ID, Poster

# Public site that canonical entity and image links point at. API calls may go
# elsewhere (``Settings.SHIKIMORI_ORIGIN``); links never follow them.
SITE_ORIGIN = "https://shikimori.one"

T = TypeVar("T")

# Score strings Shikimori uses for "not scored yet".
_EMPTY_SCORES = {"", "0", "0.0"}


def absolute_url(url: Any, origin: str = SITE_ORIGIN) -> str | None:
    """Rewrite a ``/``-prefixed path against *origin*; pass absolute URLs through.

    Protocol-relative ``//host/path`` URLs only gain the origin's scheme.
    """
    if not isinstance(url, str) or not url:
        return None
    if url.startswith("//"):
        scheme = origin.split(":", 1)[0]
        return f"{scheme}:{url}"
    if url.startswith("/"):
        return f"{origin}{url}"
    return url


def entity_url(raw_url: Any, collection: str, entity_id: int) -> str:
    """Return the canonical URL, synthesizing ``<origin>/<collection>/<id>``."""
    return absolute_url(raw_url) or f"{SITE_ORIGIN}/{collection}/{entity_id}"


def coerce_int(value: Any) -> int | None:
    """Coerce numeric or string-encoded integers; anything else is ``None``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def coerce_score(value: Any) -> float | None:
    """Coerce a score; empty strings, zero and non-finite values mean "no score"."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if text in _EMPTY_SCORES:
            return None
        try:
            score = float(text)
        except ValueError:
            return None
    elif isinstance(value, (int, float)):
        score = float(value)
    else:
        return None
    if not math.isfinite(score):
        return None
    return score or None


def coerce_str(value: Any) -> str | None:
    """Return non-empty strings, ``None`` for anything else."""
    if isinstance(value, str) and value:
        return value
    return None


def coerce_bool(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def string_list(value: Any) -> tuple[str, ...] | None:
    """Keep the string members of a present list."""
    if not isinstance(value, list):
        return None
    return tuple(item for item in value if isinstance(item, str))


def split_synonyms(value: Any) -> tuple[str, ...]:
    """Split a comma-separated synonyms field into trimmed tokens."""
    if isinstance(value, list):
        return string_list(value) or ()
    if not isinstance(value, str):
        return ()
    return tuple(token.strip() for token in value.split(",") if token.strip())


def require_id(raw: Mapping[str, Any], entity: str) -> int:
    """Return the record's own id or fail with a ``serialization`` error."""
    entity_id = coerce_int(raw.get("id"))
    if entity_id is None:
        raise CatalogError.serialization(f"{entity}: отсутствует id")
    return entity_id


def optional_id(raw: Mapping[str, Any]) -> int:
    """Return the id of a nested stub, or the unresolved sentinel."""
    return coerce_int(raw.get("id")) or UNRESOLVED_ID


def as_mapping(value: Any) -> Mapping[str, Any] | None:
    return value if isinstance(value, Mapping) else None


def map_collection(
    raw: Mapping[str, Any],
    key: str,
    mapper: Callable[[Mapping[str, Any]], T | None],
) -> tuple[T, ...] | None:
    """Map a nested list field, preserving absent-vs-empty.

    Returns ``None`` if upstream omitted the field, otherwise a tuple of mapped
    items. Non-object members and members the mapper rejects are skipped.
    """
    value = raw.get(key)
    if not isinstance(value, list):
        return None
    mapped = (mapper(item) for item in value if isinstance(item, Mapping))
    return tuple(item for item in mapped if item is not None)


def build_poster(
    main: Any, original: Any, preview: Any, small: Any = None, smaller: Any = None
) -> Poster | None:
    """Build a :class:`Poster` with absolute URLs and the preview fallback.

    Returns ``None`` if upstream supplied no usable URL at all.
    """
    main_url = absolute_url(main)
    original_url = absolute_url(original)
    preview_url = absolute_url(preview) or main_url
    small_url = absolute_url(small)
    smaller_url = absolute_url(smaller)
    if not any((main_url, original_url, preview_url, small_url, smaller_url)):
        return None
    return Poster(
        main=main_url,
        original=original_url,
        preview=preview_url,
        small=small_url,
        smaller=smaller_url,
    )


def poster_url(poster: Poster | None) -> str | None:
    """Pick the single URL shown on cards: main size first, then original."""
    if poster is None:
        return None
    return poster.main or poster.original
