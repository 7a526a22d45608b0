"""Mapper for records returned by the Shikimori REST API.

REST records are loosely typed: ids and scores may arrive as numbers or as
strings, image URLs are often site-relative paths, and alternative names come as
a single comma separated ``altname`` string.
"""

from collections.abc import Mapping
from typing import Any

from shikiview.catalog.mapping.common import (
    absolute_url,
    as_mapping,
    build_poster,
    coerce_int,
    coerce_score,
    coerce_str,
    entity_url,
    map_collection,
    poster_url,
    require_id,
    split_synonyms,
    string_list,
)
from shikiview.catalog.models import (
    UNKNOWN_NAME,
    Anime,
    CharacterDetail,
    CharacterRoleDetail,
    Genre,
    Manga,
    Person,
    Poster,
    Publisher,
    Studio,
)


def map_image(raw: Any) -> Poster | None:
    """Map a REST ``image`` object; its ``preview`` size serves as main."""
    image = as_mapping(raw)
    if image is None:
        return None
    return build_poster(
        main=image.get("preview") or image.get("original"),
        original=image.get("original"),
        preview=image.get("preview"),
        small=image.get("x96"),
        smaller=image.get("x48"),
    )


def map_genre(raw: Mapping[str, Any]) -> Genre:
    return Genre(
        id=require_id(raw, "genres"),
        name=coerce_str(raw.get("name")) or UNKNOWN_NAME,
        russian=coerce_str(raw.get("russian")),
        kind=coerce_str(raw.get("kind")) or coerce_str(raw.get("entry_type")),
    )


def map_studio(raw: Mapping[str, Any]) -> Studio:
    return Studio(
        id=require_id(raw, "studios"),
        name=(
            coerce_str(raw.get("filtered_name"))
            or coerce_str(raw.get("name"))
            or UNKNOWN_NAME
        ),
        image_url=absolute_url(raw.get("image")),
    )


def map_publisher(raw: Mapping[str, Any]) -> Publisher:
    return Publisher(
        id=require_id(raw, "publishers"),
        name=coerce_str(raw.get("name")) or UNKNOWN_NAME,
    )


def map_person(raw: Mapping[str, Any]) -> Person:
    person_id = require_id(raw, "people")
    return Person(
        id=person_id,
        name=coerce_str(raw.get("name")) or UNKNOWN_NAME,
        russian=coerce_str(raw.get("russian")),
        url=entity_url(raw.get("url"), "people", person_id),
        poster_url=poster_url(map_image(raw.get("image"))),
    )


def _media_common(raw: Mapping[str, Any], collection: str) -> dict[str, Any]:
    media_id = require_id(raw, collection)
    return {
        "id": media_id,
        "title": coerce_str(raw.get("name")) or UNKNOWN_NAME,
        "russian": coerce_str(raw.get("russian")),
        "url": entity_url(raw.get("url"), collection, media_id),
        "poster_url": poster_url(map_image(raw.get("image"))),
        "score": coerce_score(raw.get("score")),
        "kind": coerce_str(raw.get("kind")),
        "status": coerce_str(raw.get("status")),
    }


def map_anime(raw: Mapping[str, Any]) -> Anime:
    return Anime(
        **_media_common(raw, "animes"),
        episodes=coerce_int(raw.get("episodes")),
        episodes_aired=coerce_int(raw.get("episodes_aired")),
    )


def map_manga(raw: Mapping[str, Any]) -> Manga:
    return Manga(
        **_media_common(raw, "mangas"),
        volumes=coerce_int(raw.get("volumes")),
        chapters=coerce_int(raw.get("chapters")),
    )


def _roles(raw: Mapping[str, Any]) -> dict[str, tuple[str, ...]]:
    roles_en = string_list(raw.get("roles"))
    if roles_en is None:
        role = coerce_str(raw.get("role"))
        roles_en = (role,) if role else ()
    return {"roles_ru": string_list(raw.get("roles_ru")) or (), "roles_en": roles_en}


def _anime_role(raw: Mapping[str, Any]) -> CharacterRoleDetail | None:
    if coerce_int(raw.get("id")) is None:
        return None
    anime = map_anime(raw)
    return CharacterRoleDetail(id=anime.id, anime=anime, **_roles(raw))


def _manga_role(raw: Mapping[str, Any]) -> CharacterRoleDetail | None:
    if coerce_int(raw.get("id")) is None:
        return None
    manga = map_manga(raw)
    return CharacterRoleDetail(id=manga.id, manga=manga, **_roles(raw))


def _seyu(raw: Mapping[str, Any]) -> Person | None:
    if coerce_int(raw.get("id")) is None:
        return None
    return map_person(raw)


def map_character_detail(raw: Mapping[str, Any]) -> CharacterDetail:
    """Map ``GET /api/characters/:id`` into a :class:`CharacterDetail`.

    Anime appearances come before manga ones; a missing ``animes`` or
    ``mangas`` list contributes nothing. Appearances and voice actors without an id
    are skipped.
    """
    character_id = require_id(raw, "characters")
    poster = map_image(raw.get("image"))
    roles = (map_collection(raw, "animes", _anime_role) or ()) + (
        map_collection(raw, "mangas", _manga_role) or ()
    )
    return CharacterDetail(
        id=character_id,
        name=coerce_str(raw.get("name")) or UNKNOWN_NAME,
        russian=coerce_str(raw.get("russian")),
        japanese=coerce_str(raw.get("japanese")),
        synonyms=split_synonyms(raw.get("altname")),
        url=entity_url(raw.get("url"), "characters", character_id),
        poster_url=poster_url(poster),
        poster=poster,
        description=coerce_str(raw.get("description")),
        description_html=coerce_str(raw.get("description_html")),
        character_roles=roles,
        seyus=map_collection(raw, "seyu", _seyu) or (),
    )
