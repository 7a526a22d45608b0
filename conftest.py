"""Configure pytest and provide shared fixtures."""

import sys
from pathlib import Path
from typing import Any

import pytest

# Make the src layout importable without an editable install.
src_path = str(Path(__file__).parent / "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from tests.helpers.fakes import load_fixture  # noqa: E402


@pytest.fixture
def anime_detail_record() -> dict[str, Any]:
    """Raw GraphQL anime record with every detail field populated."""
    return load_fixture("graphql_anime_detail")["data"]["animes"][0]


@pytest.fixture
def character_record() -> dict[str, Any]:
    """Raw REST ``/api/characters/1`` record."""
    return load_fixture("rest_character")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config file at an empty temp dir and clear SHIKIVIEW_* env vars."""
    from shikiview.utils import config as cfg

    config_dir = tmp_path / "config" / "shikiview"
    monkeypatch.setattr(cfg, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(cfg, "CONFIG_FILE", config_dir / "config.toml")
    for name in (
        "SHIKIVIEW_CATALOG_ALLOW_ADULT_CONTENT",
        "SHIKIVIEW_IMAGES_FETCH_TIMEOUT",
        "SHIKIVIEW_IMAGES_MAX_BYTES",
        "SHIKIVIEW_DEBUG",
        "ALLOW_ADULT_CONTENT",
        "IMAGE_FETCH_TIMEOUT",
        "IMAGE_MAX_BYTES",
    ):
        monkeypatch.delenv(name, raising=False)
    return config_dir
