"""Typed search parameters passed from the facade to the transport."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class SortOption(str, Enum):
    """Sort orders offered by the UI."""

    RELEVANCE = "relevance"
    SCORE = "score"
    TITLE = "title"
    POPULARITY = "popularity"

    @property
    def upstream_order(self) -> str | None:
        """GraphQL ``order`` value; relevance leaves ordering to the search."""
        return _UPSTREAM_ORDER[self]


_UPSTREAM_ORDER: dict[SortOption, str | None] = {
    SortOption.RELEVANCE: None,
    SortOption.SCORE: "ranked",
    SortOption.TITLE: "name",
    SortOption.POPULARITY: "popularity",
}


class SearchParams(BaseModel):
    """Common pagination and search text."""

    model_config = ConfigDict(frozen=True)

    search: str | None = None
    page: int = 1
    limit: int = 20

    def to_variables(self) -> dict[str, Any]:
        """Return GraphQL variables, omitting unset filters."""
        return {k: v for k, v in self.model_dump().items() if v is not None}


class AnimeSearchParams(SearchParams):
    kind: str | None = None
    status: str | None = None
    season: str | None = None
    rating: str | None = None
    genre: str | None = None
    studio: str | None = None
    order: str | None = None
    censored: bool | None = None


class MangaSearchParams(SearchParams):
    kind: str | None = None
    status: str | None = None
    season: str | None = None
    genre: str | None = None
    publisher: str | None = None
    order: str | None = None
    censored: bool | None = None


class CharacterSearchParams(SearchParams):
    ids: tuple[str, ...] | None = None


class PeopleSearchParams(SearchParams):
    is_seyu: bool | None = None
    is_producer: bool | None = None
    is_mangaka: bool | None = None
