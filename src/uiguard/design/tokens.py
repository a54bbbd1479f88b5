"""Loading of design tokens from YAML."""

from __future__ import annotations

import functools
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from uiguard.catalog.catalog import CatalogError
from uiguard.models.tokens import DesignTokens
from uiguard.parser.loader import TrackedLoader

DEFAULT_TOKENS_RESOURCE = "design/tokens.yaml"


def _build(data: dict, source: str) -> DesignTokens:
    try:
        return DesignTokens.model_validate(data)
    except PydanticValidationError as exc:
        raise CatalogError(f"Invalid design tokens in {source}: {exc}") from exc


@functools.lru_cache(maxsize=1)
def default_tokens() -> DesignTokens:
    """The token set shipped with the package (loaded once)."""
    data, _ = TrackedLoader().load_resource(DEFAULT_TOKENS_RESOURCE)
    return _build(data, DEFAULT_TOKENS_RESOURCE)


def load_tokens(path: Path | None = None) -> DesignTokens:
    if path is None:
        return default_tokens()
    data, _ = TrackedLoader().load(path)
    return _build(data, str(path))
