"""Canonical catalog models.

This module defines the protocol-agnostic entities the rest of the application
works with. Both upstream shapes (GraphQL and REST) are mapped into these models
by :mod:`shikiview.catalog.mapping`.

Design:
- All models are frozen; sequences are tuples so an entity cannot be mutated
  after construction.
- ``id`` is always present. ``0`` marks an unresolved nested reference.
- Optional collections are ``None`` when upstream omitted them and an empty
  tuple when upstream returned an empty list.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

UNRESOLVED_ID = 0
"""Id used for nested references that upstream omitted."""

UNKNOWN_NAME = "Unknown"
"""Title/name used when upstream omitted it."""


class CanonicalModel(BaseModel):
    """Base for all canonical entities: immutable once constructed."""

    model_config = ConfigDict(frozen=True)


class Poster(CanonicalModel):
    """Poster URL variants, always absolute or ``None``."""

    main: str | None = None
    original: str | None = None
    preview: str | None = None
    small: str | None = None
    smaller: str | None = None


class IncompleteDate(CanonicalModel):
    """Partially known date as published by Shikimori (e.g. year only)."""

    year: int | None = None
    month: int | None = None
    day: int | None = None
    date: str | None = None


class Genre(CanonicalModel):
    id: int
    name: str
    russian: str | None = None
    kind: str | None = None


class Studio(CanonicalModel):
    id: int
    name: str
    image_url: str | None = None


class Publisher(CanonicalModel):
    id: int
    name: str


class ExternalLink(CanonicalModel):
    id: int | None = None
    kind: str
    url: str
    created_at: str | None = None
    updated_at: str | None = None


class Person(CanonicalModel):
    """A person (seiyu, mangaka, producer, staff member)."""

    id: int
    name: str
    russian: str | None = None
    url: str | None = None
    poster_url: str | None = None
    is_seyu: bool | None = None
    is_mangaka: bool | None = None
    is_producer: bool | None = None
    website: str | None = None


class Character(CanonicalModel):
    """A character as returned by character search and role edges."""

    id: int
    name: str
    russian: str | None = None
    url: str | None = None
    poster_url: str | None = None
    description: str | None = None
    is_anime: bool | None = None
    is_manga: bool | None = None
    is_ranobe: bool | None = None


class PersonRole(CanonicalModel):
    id: int
    roles_ru: tuple[str, ...] = ()
    roles_en: tuple[str, ...] = ()
    person: Person


class CharacterRole(CanonicalModel):
    id: int
    roles_ru: tuple[str, ...] = ()
    roles_en: tuple[str, ...] = ()
    character: Character


class RelatedMedia(CanonicalModel):
    """Stub of an anime or manga referenced by a relation edge."""

    id: int
    name: str
    russian: str | None = None
    url: str | None = None
    poster_url: str | None = None


class Related(CanonicalModel):
    """Relation edge pointing at exactly one anime or manga stub."""

    id: int
    anime: RelatedMedia | None = None
    manga: RelatedMedia | None = None
    relation_kind: str
    relation_text: str | None = None

    @model_validator(mode="after")
    def _exactly_one_target(self) -> "Related":
        if (self.anime is None) == (self.manga is None):
            raise ValueError("Related edge must reference exactly one of anime/manga")
        return self


class Video(CanonicalModel):
    id: int
    url: str | None = None
    name: str | None = None
    kind: str | None = None
    player_url: str | None = None
    image_url: str | None = None


class Screenshot(CanonicalModel):
    id: int
    original_url: str | None = None
    x166_url: str | None = None
    x332_url: str | None = None


class ScoreStat(CanonicalModel):
    score: int
    count: int


class StatusStat(CanonicalModel):
    status: str
    count: int


class MediaSummary(CanonicalModel):
    """Fields shared by anime and manga search results."""

    id: int
    title: str = UNKNOWN_NAME
    russian: str | None = None
    url: str | None = None
    poster_url: str | None = None
    score: float | None = None
    kind: str | None = None
    status: str | None = None


class Anime(MediaSummary):
    episodes: int | None = None
    episodes_aired: int | None = None


class Manga(MediaSummary):
    volumes: int | None = None
    chapters: int | None = None


class _DetailFields(CanonicalModel):
    """Rich fields shared by anime and manga detail views."""

    mal_id: int | None = None
    license_name_ru: str | None = None
    english: str | None = None
    japanese: str | None = None
    synonyms: tuple[str, ...] | None = None
    poster: Poster | None = None
    description: str | None = None
    description_html: str | None = None
    description_source: str | None = None
    aired_on: IncompleteDate | None = None
    released_on: IncompleteDate | None = None
    is_censored: bool | None = None
    genres: tuple[Genre, ...] | None = None
    external_links: tuple[ExternalLink, ...] | None = None
    person_roles: tuple[PersonRole, ...] | None = None
    character_roles: tuple[CharacterRole, ...] | None = None
    related: tuple[Related, ...] | None = None
    scores_stats: tuple[ScoreStat, ...] | None = None
    statuses_stats: tuple[StatusStat, ...] | None = None
    licensors: tuple[str, ...] | None = None


class AnimeDetail(Anime, _DetailFields):
    """Full anime record for the detail view."""

    rating: str | None = None
    duration: int | None = None
    season: str | None = None
    next_episode_at: str | None = None
    studios: tuple[Studio, ...] | None = None
    videos: tuple[Video, ...] | None = None
    screenshots: tuple[Screenshot, ...] | None = None
    fansubbers: tuple[str, ...] | None = None
    fandubbers: tuple[str, ...] | None = None


class MangaDetail(Manga, _DetailFields):
    """Full manga record for the detail view."""

    publishers: tuple[Publisher, ...] | None = None


class CharacterRoleDetail(CanonicalModel):
    """A character's appearance in exactly one anime or manga."""

    id: int
    roles_ru: tuple[str, ...] = ()
    roles_en: tuple[str, ...] = ()
    anime: Anime | None = None
    manga: Manga | None = None

    @model_validator(mode="after")
    def _exactly_one_target(self) -> "CharacterRoleDetail":
        if (self.anime is None) == (self.manga is None):
            raise ValueError("Character role must reference exactly one of anime/manga")
        return self


class CharacterDetail(CanonicalModel):
    """Full character record for the character detail view."""

    id: int
    name: str = UNKNOWN_NAME
    russian: str | None = None
    japanese: str | None = None
    synonyms: tuple[str, ...] = ()
    url: str | None = None
    poster_url: str | None = None
    poster: Poster | None = None
    description: str | None = None
    description_html: str | None = None
    character_roles: tuple[CharacterRoleDetail, ...] = ()
    seyus: tuple[Person, ...] = ()


T = TypeVar("T")


class SearchResult(CanonicalModel, Generic[T]):
    """A page of results echoing the requested pagination."""

    items: tuple[T, ...]
    page: int
    limit: int


UNRESOLVED_CHARACTER = Character(id=UNRESOLVED_ID, name=UNKNOWN_NAME)
UNRESOLVED_PERSON = Person(id=UNRESOLVED_ID, name=UNKNOWN_NAME)
