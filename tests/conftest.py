"""Shared test fixtures for uiguard."""

from __future__ import annotations

import copy
import json
from typing import Any

import pytest

from uiguard.catalog import ComponentCatalog, default_catalog
from uiguard.chain.pipeline import ValidationChain
from uiguard.design.tokens import default_tokens
from uiguard.models.tokens import DesignTokens
from uiguard.parser.loader import TrackedLoader
from uiguard.streaming.sessions import StreamSessionManager

VALID_DOCUMENT: dict[str, Any] = {
    "version": "1.0",
    "root": {
        "id": "root",
        "type": "Container",
        "props": {"className": "p-4 bg-primary-500"},
        "children": [
            {"id": "title", "type": "Text", "props": {"text": "Hello"}},
            {"id": "save", "type": "Button", "props": {"text": "Save", "variant": "default"}},
        ],
    },
}


@pytest.fixture
def loader() -> TrackedLoader:
    return TrackedLoader()


@pytest.fixture
def catalog() -> ComponentCatalog:
    return default_catalog()


@pytest.fixture
def tokens() -> DesignTokens:
    return default_tokens()


@pytest.fixture
def chain(catalog: ComponentCatalog, tokens: DesignTokens) -> ValidationChain:
    return ValidationChain(catalog=catalog, tokens=tokens)


@pytest.fixture
def stream_manager(catalog: ComponentCatalog) -> StreamSessionManager:
    """StreamSessionManager with long TTL and no cleanup thread (for tests)."""
    return StreamSessionManager(catalog=catalog, ttl_seconds=3600, cleanup_interval=9999)


@pytest.fixture
def valid_document() -> dict[str, Any]:
    """A fresh copy of a document that passes every layer."""
    return copy.deepcopy(VALID_DOCUMENT)


@pytest.fixture
def valid_json(valid_document: dict[str, Any]) -> str:
    return json.dumps(valid_document, indent=2)
