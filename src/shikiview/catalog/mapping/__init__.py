"""Canonical mappers, one module per upstream record shape.

- :mod:`~shikiview.catalog.mapping.graphql` for the typed GraphQL protocol.
- :mod:`~shikiview.catalog.mapping.rest` for the loosely-typed REST API.

Both build the same models from :mod:`shikiview.catalog.models`.
"""

from shikiview.catalog.mapping import graphql, rest

__all__ = ["graphql", "rest"]
