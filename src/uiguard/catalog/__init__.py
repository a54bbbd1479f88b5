"""Component catalog and name-similarity helpers."""

from uiguard.catalog.catalog import (
    CatalogError,
    CatalogLike,
    ComponentCatalog,
    default_catalog,
    load_catalog,
)
from uiguard.catalog.similarity import format_suggestion, levenshtein, similar_types

__all__ = [
    "CatalogError",
    "CatalogLike",
    "ComponentCatalog",
    "default_catalog",
    "format_suggestion",
    "levenshtein",
    "load_catalog",
    "similar_types",
]
