"""Component catalog: known component types, aliases and prop schemas."""

from __future__ import annotations

import functools
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError as PydanticValidationError

from uiguard.models.catalog import ComponentDefinition, PropSchema
from uiguard.parser.loader import SourceMap, TrackedLoader

DEFAULT_CATALOG_RESOURCE = "catalog/catalog.yaml"


class CatalogError(Exception):
    """Raised when a catalog definition cannot be loaded."""


@runtime_checkable
class CatalogLike(Protocol):
    """Minimal capability the validators need from a catalog."""

    def is_valid_type(self, name: str) -> bool: ...

    def get_all(self) -> list[str]: ...


class ComponentCatalog:
    """Registry of component definitions.

    Lookups accept the canonical name, any casing of it, or a registered
    alias (``div`` resolves to ``Container``).
    """

    def __init__(
        self,
        components: Iterable[ComponentDefinition] = (),
        aliases: Mapping[str, str] | None = None,
    ) -> None:
        self._components: dict[str, ComponentDefinition] = {}
        self._folded: dict[str, str] = {}
        self._aliases: dict[str, str] = {}
        for component in components:
            self.register(component)
        for alias, target in (aliases or {}).items():
            self.add_alias(alias, target)

    # -- construction --------------------------------------------------------

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], source_map: SourceMap | None = None
    ) -> ComponentCatalog:
        """Build a catalog from ``{"components": {...}, "aliases": {...}}``."""
        raw_components = data.get("components") or {}
        if not isinstance(raw_components, Mapping):
            raise CatalogError("'components' must be a mapping of name to definition")
        components: list[ComponentDefinition] = []
        for name, body in raw_components.items():
            try:
                definition = {"name": name, **(body or {})}
                components.append(ComponentDefinition.model_validate(definition))
            except (PydanticValidationError, TypeError) as exc:
                location = ""
                span = source_map.get(f"components.{name}") if source_map else None
                if span is not None:
                    location = f" ({span.file}:{span.line}:{span.column})"
                raise CatalogError(f"Invalid component '{name}'{location}: {exc}") from exc
        aliases = data.get("aliases") or {}
        if not isinstance(aliases, Mapping):
            raise CatalogError("'aliases' must be a mapping of alias to component name")
        return cls(components, aliases)

    @classmethod
    def from_file(cls, path: Path) -> ComponentCatalog:
        data, source_map = TrackedLoader().load(path)
        return cls.from_mapping(data, source_map)

    def register(self, component: ComponentDefinition) -> None:
        self._components[component.name] = component
        self._folded[component.name.lower()] = component.name

    def add_alias(self, alias: str, target: str) -> None:
        canonical = self._folded.get(target.lower())
        if canonical is None:
            raise CatalogError(f"Alias '{alias}' points to unknown component '{target}'")
        self._aliases[alias.lower()] = canonical

    # -- lookups -------------------------------------------------------------

    def resolve_alias(self, name: str) -> str | None:
        """Return the canonical component name for *name*, or ``None``."""
        if name in self._components:
            return name
        folded = name.lower()
        return self._folded.get(folded) or self._aliases.get(folded)

    def is_valid_type(self, name: str) -> bool:
        return self.resolve_alias(name) is not None

    def get(self, name: str) -> ComponentDefinition | None:
        canonical = self.resolve_alias(name)
        return self._components.get(canonical) if canonical else None

    def get_props_schema(self, name: str) -> dict[str, PropSchema] | None:
        component = self.get(name)
        return component.props_schema if component else None

    def is_deprecated(self, name: str) -> bool:
        component = self.get(name)
        return bool(component and component.deprecated)

    def get_all(self) -> list[str]:
        return sorted(self._components)

    @property
    def aliases(self) -> dict[str, str]:
        return dict(self._aliases)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_valid_type(name)

    def __len__(self) -> int:
        return len(self._components)


@functools.lru_cache(maxsize=1)
def default_catalog() -> ComponentCatalog:
    """The catalog shipped with the package (loaded once)."""
    data, source_map = TrackedLoader().load_resource(DEFAULT_CATALOG_RESOURCE)
    return ComponentCatalog.from_mapping(data, source_map)


def load_catalog(path: Path | None = None) -> ComponentCatalog:
    """Load a catalog from *path*, falling back to the packaged default."""
    if path is None:
        return default_catalog()
    return ComponentCatalog.from_file(path)
