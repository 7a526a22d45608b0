"""Settings loader for the catalog layer.

Loads upstream endpoints, the image fetch limits and the adult-content
preference from environment variables or a ``.env`` file.

Optional .env keys:
- SHIKIMORI_ORIGIN (API host only; canonical links in mapped entities always
  point at https://shikimori.one)
- SHIKIMORI_USER_AGENT
- ALLOW_ADULT_CONTENT
- IMAGE_FETCH_TIMEOUT (seconds)
- IMAGE_MAX_BYTES
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from shikiview.catalog.mapping.common import SITE_ORIGIN
from shikiview.catalog.transport import DEFAULT_USER_AGENT
from shikiview.utils.config import resolve_setting

DEFAULT_IMAGE_TIMEOUT = 5.0
DEFAULT_IMAGE_MAX_BYTES = 2 * 1024 * 1024


class Settings(BaseSettings):
    """Settings consumed by :class:`~shikiview.services.CatalogServices`."""

    SHIKIMORI_ORIGIN: str = SITE_ORIGIN
    SHIKIMORI_USER_AGENT: str = DEFAULT_USER_AGENT
    ALLOW_ADULT_CONTENT: bool = False
    IMAGE_FETCH_TIMEOUT: float = DEFAULT_IMAGE_TIMEOUT
    IMAGE_MAX_BYTES: int = DEFAULT_IMAGE_MAX_BYTES

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def censored(self) -> bool:
        """Censorship flag forwarded to upstream searches."""
        return not self.ALLOW_ADULT_CONTENT


def load_settings(allow_adult_content: bool | None = None) -> Settings:
    """Build :class:`Settings`, layering the user config file on top.

    Each resolved key follows CLI > ``SHIKIVIEW_<SECTION>_<KEY>`` env var >
    config.toml > the plain ``Settings`` field:

    - ``catalog.allow_adult_content`` -> ``ALLOW_ADULT_CONTENT``
    - ``images.fetch_timeout`` -> ``IMAGE_FETCH_TIMEOUT``
    - ``images.max_bytes`` -> ``IMAGE_MAX_BYTES``
    """
    settings = Settings()
    update = {
        "ALLOW_ADULT_CONTENT": resolve_setting(
            "catalog.allow_adult_content",
            default=settings.ALLOW_ADULT_CONTENT,
            cli_value=allow_adult_content,
        ),
        "IMAGE_FETCH_TIMEOUT": resolve_setting(
            "images.fetch_timeout", default=settings.IMAGE_FETCH_TIMEOUT
        ),
        "IMAGE_MAX_BYTES": resolve_setting(
            "images.max_bytes", default=settings.IMAGE_MAX_BYTES
        ),
    }
    return settings.model_copy(update=update)
