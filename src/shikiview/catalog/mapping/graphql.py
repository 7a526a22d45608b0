"""Mapper for records returned by the Shikimori GraphQL endpoint.

GraphQL records use camelCase keys, string-typed ``ID`` fields and a nested
``poster`` object with size-specific URLs. Each function accepts one raw record
and returns a canonical model from :mod:`shikiview.catalog.models`.
"""

from collections.abc import Mapping
from typing import Any

from shikiview.catalog.mapping.common import (
    absolute_url,
    as_mapping,
    build_poster,
    coerce_bool,
    coerce_int,
    coerce_score,
    coerce_str,
    entity_url,
    map_collection,
    optional_id,
    poster_url,
    require_id,
    string_list,
)
from shikiview.catalog.models import (
    UNKNOWN_NAME,
    UNRESOLVED_CHARACTER,
    UNRESOLVED_PERSON,
    Anime,
    AnimeDetail,
    Character,
    CharacterRole,
    ExternalLink,
    Genre,
    IncompleteDate,
    Manga,
    MangaDetail,
    Person,
    PersonRole,
    Poster,
    Publisher,
    Related,
    RelatedMedia,
    Screenshot,
    ScoreStat,
    StatusStat,
    Studio,
    Video,
)


def map_poster(raw: Any) -> Poster | None:
    poster = as_mapping(raw)
    if poster is None:
        return None
    return build_poster(
        main=poster.get("mainUrl"),
        original=poster.get("originalUrl"),
        preview=poster.get("previewUrl"),
        small=poster.get("mini2xUrl"),
        smaller=poster.get("miniUrl"),
    )


def map_date(raw: Any) -> IncompleteDate | None:
    value = as_mapping(raw)
    if value is None:
        return None
    date = IncompleteDate(
        year=coerce_int(value.get("year")),
        month=coerce_int(value.get("month")),
        day=coerce_int(value.get("day")),
        date=coerce_str(value.get("date")),
    )
    if date == IncompleteDate():
        return None
    return date


def _media_common(raw: Mapping[str, Any], collection: str) -> dict[str, Any]:
    media_id = require_id(raw, collection)
    poster = map_poster(raw.get("poster"))
    return {
        "id": media_id,
        "title": coerce_str(raw.get("name")) or UNKNOWN_NAME,
        "russian": coerce_str(raw.get("russian")),
        "url": entity_url(raw.get("url"), collection, media_id),
        "poster_url": poster_url(poster),
        "score": coerce_score(raw.get("score")),
        "kind": coerce_str(raw.get("kind")),
        "status": coerce_str(raw.get("status")),
    }


def map_anime(raw: Mapping[str, Any]) -> Anime:
    return Anime(
        **_media_common(raw, "animes"),
        episodes=coerce_int(raw.get("episodes")),
        episodes_aired=coerce_int(raw.get("episodesAired")),
    )


def map_manga(raw: Mapping[str, Any]) -> Manga:
    return Manga(
        **_media_common(raw, "mangas"),
        volumes=coerce_int(raw.get("volumes")),
        chapters=coerce_int(raw.get("chapters")),
    )


def map_character(raw: Mapping[str, Any]) -> Character:
    character_id = require_id(raw, "characters")
    return _character(raw, character_id)


def _character(raw: Mapping[str, Any], character_id: int) -> Character:
    return Character(
        id=character_id,
        name=coerce_str(raw.get("name")) or UNKNOWN_NAME,
        russian=coerce_str(raw.get("russian")),
        url=entity_url(raw.get("url"), "characters", character_id),
        poster_url=poster_url(map_poster(raw.get("poster"))),
        description=coerce_str(raw.get("description")),
        is_anime=coerce_bool(raw.get("isAnime")),
        is_manga=coerce_bool(raw.get("isManga")),
        is_ranobe=coerce_bool(raw.get("isRanobe")),
    )


def map_person(raw: Mapping[str, Any]) -> Person:
    person_id = require_id(raw, "people")
    return _person(raw, person_id)


def _person(raw: Mapping[str, Any], person_id: int) -> Person:
    return Person(
        id=person_id,
        name=coerce_str(raw.get("name")) or UNKNOWN_NAME,
        russian=coerce_str(raw.get("russian")),
        url=entity_url(raw.get("url"), "people", person_id),
        poster_url=poster_url(map_poster(raw.get("poster"))),
        is_seyu=coerce_bool(raw.get("isSeyu")),
        is_mangaka=coerce_bool(raw.get("isMangaka")),
        is_producer=coerce_bool(raw.get("isProducer")),
        website=coerce_str(raw.get("website")),
    )


def _nested_character(raw: Any) -> Character:
    """Map a role's character, substituting the sentinel when it is missing."""
    character = as_mapping(raw)
    if character is None:
        return UNRESOLVED_CHARACTER
    return _character(character, optional_id(character))


def _nested_person(raw: Any) -> Person:
    person = as_mapping(raw)
    if person is None:
        return UNRESOLVED_PERSON
    return _person(person, optional_id(person))


def map_character_role(raw: Mapping[str, Any]) -> CharacterRole:
    return CharacterRole(
        id=optional_id(raw),
        roles_ru=string_list(raw.get("rolesRu")) or (),
        roles_en=string_list(raw.get("rolesEn")) or (),
        character=_nested_character(raw.get("character")),
    )


def map_person_role(raw: Mapping[str, Any]) -> PersonRole:
    return PersonRole(
        id=optional_id(raw),
        roles_ru=string_list(raw.get("rolesRu")) or (),
        roles_en=string_list(raw.get("rolesEn")) or (),
        person=_nested_person(raw.get("person")),
    )


def _related_media(raw: Any, collection: str) -> RelatedMedia | None:
    media = as_mapping(raw)
    if media is None:
        return None
    media_id = optional_id(media)
    return RelatedMedia(
        id=media_id,
        name=coerce_str(media.get("name")) or UNKNOWN_NAME,
        russian=coerce_str(media.get("russian")),
        url=entity_url(media.get("url"), collection, media_id),
        poster_url=poster_url(map_poster(media.get("poster"))),
    )


def map_related(raw: Mapping[str, Any]) -> Related | None:
    """Map a relation edge; edges pointing at nothing are dropped.

    An edge carrying both stubs keeps the anime one.
    """
    anime = _related_media(raw.get("anime"), "animes")
    manga = None if anime else _related_media(raw.get("manga"), "mangas")
    if anime is None and manga is None:
        return None
    return Related(
        id=optional_id(raw),
        anime=anime,
        manga=manga,
        relation_kind=coerce_str(raw.get("relationKind")) or "other",
        relation_text=coerce_str(raw.get("relationText")),
    )


def map_genre(raw: Mapping[str, Any]) -> Genre | None:
    genre_id = coerce_int(raw.get("id"))
    if genre_id is None:
        return None
    return Genre(
        id=genre_id,
        name=coerce_str(raw.get("name")) or UNKNOWN_NAME,
        russian=coerce_str(raw.get("russian")),
        kind=coerce_str(raw.get("kind")),
    )


def map_studio(raw: Mapping[str, Any]) -> Studio | None:
    studio_id = coerce_int(raw.get("id"))
    if studio_id is None:
        return None
    return Studio(
        id=studio_id,
        name=coerce_str(raw.get("name")) or UNKNOWN_NAME,
        image_url=absolute_url(raw.get("imageUrl")),
    )


def map_publisher(raw: Mapping[str, Any]) -> Publisher | None:
    publisher_id = coerce_int(raw.get("id"))
    if publisher_id is None:
        return None
    return Publisher(id=publisher_id, name=coerce_str(raw.get("name")) or UNKNOWN_NAME)


def map_external_link(raw: Mapping[str, Any]) -> ExternalLink | None:
    url = absolute_url(raw.get("url"))
    if url is None:
        return None
    return ExternalLink(
        id=coerce_int(raw.get("id")),
        kind=coerce_str(raw.get("kind")) or "unknown",
        url=url,
        created_at=coerce_str(raw.get("createdAt")),
        updated_at=coerce_str(raw.get("updatedAt")),
    )


def map_video(raw: Mapping[str, Any]) -> Video:
    return Video(
        id=optional_id(raw),
        url=absolute_url(raw.get("url")),
        name=coerce_str(raw.get("name")),
        kind=coerce_str(raw.get("kind")),
        player_url=absolute_url(raw.get("playerUrl")),
        image_url=absolute_url(raw.get("imageUrl")),
    )


def map_screenshot(raw: Mapping[str, Any]) -> Screenshot:
    return Screenshot(
        id=optional_id(raw),
        original_url=absolute_url(raw.get("originalUrl")),
        x166_url=absolute_url(raw.get("x166Url")),
        x332_url=absolute_url(raw.get("x332Url")),
    )


def map_score_stat(raw: Mapping[str, Any]) -> ScoreStat | None:
    score = coerce_int(raw.get("score"))
    count = coerce_int(raw.get("count"))
    if score is None or count is None:
        return None
    return ScoreStat(score=score, count=count)


def map_status_stat(raw: Mapping[str, Any]) -> StatusStat | None:
    status = coerce_str(raw.get("status"))
    count = coerce_int(raw.get("count"))
    if status is None or count is None:
        return None
    return StatusStat(status=status, count=count)


def _detail_common(raw: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "mal_id": coerce_int(raw.get("malId")),
        "license_name_ru": coerce_str(raw.get("licenseNameRu")),
        "english": coerce_str(raw.get("english")),
        "japanese": coerce_str(raw.get("japanese")),
        "synonyms": string_list(raw.get("synonyms")),
        "poster": map_poster(raw.get("poster")),
        "description": coerce_str(raw.get("description")),
        "description_html": coerce_str(raw.get("descriptionHtml")),
        "description_source": coerce_str(raw.get("descriptionSource")),
        "aired_on": map_date(raw.get("airedOn")),
        "released_on": map_date(raw.get("releasedOn")),
        "is_censored": coerce_bool(raw.get("isCensored")),
        "genres": map_collection(raw, "genres", map_genre),
        "external_links": map_collection(raw, "externalLinks", map_external_link),
        "person_roles": map_collection(raw, "personRoles", map_person_role),
        "character_roles": map_collection(raw, "characterRoles", map_character_role),
        "related": map_collection(raw, "related", map_related),
        "scores_stats": map_collection(raw, "scoresStats", map_score_stat),
        "statuses_stats": map_collection(raw, "statusesStats", map_status_stat),
        "licensors": string_list(raw.get("licensors")),
    }


def map_anime_detail(raw: Mapping[str, Any]) -> AnimeDetail:
    summary = map_anime(raw)
    return AnimeDetail(
        **summary.model_dump(),
        **_detail_common(raw),
        rating=coerce_str(raw.get("rating")),
        duration=coerce_int(raw.get("duration")),
        season=coerce_str(raw.get("season")),
        next_episode_at=coerce_str(raw.get("nextEpisodeAt")),
        studios=map_collection(raw, "studios", map_studio),
        videos=map_collection(raw, "videos", map_video),
        screenshots=map_collection(raw, "screenshots", map_screenshot),
        fansubbers=string_list(raw.get("fansubbers")),
        fandubbers=string_list(raw.get("fandubbers")),
    )


def map_manga_detail(raw: Mapping[str, Any]) -> MangaDetail:
    summary = map_manga(raw)
    return MangaDetail(
        **summary.model_dump(),
        **_detail_common(raw),
        publishers=map_collection(raw, "publishers", map_publisher),
    )

