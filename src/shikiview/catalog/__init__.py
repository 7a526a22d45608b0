"""Catalog normalization layer for the Shikimori anime/manga catalog.

- errors: error taxonomy and upstream failure families.
- models: canonical, protocol-agnostic entities.
- mapping: GraphQL and REST record mappers.
- transport: httpx client for both upstream protocols.
- facade: validated, one-round-trip operations used by the UI.
"""

from shikiview.catalog.errors import CatalogError, ErrorKind
from shikiview.catalog.facade import CatalogFacade
from shikiview.catalog.transport import ShikimoriTransport

__all__ = ["CatalogError", "CatalogFacade", "ErrorKind", "ShikimoriTransport"]
