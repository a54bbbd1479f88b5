"""Component-existence and props validation against the catalog."""

from __future__ import annotations

from typing import Any

from uiguard.catalog import CatalogLike, similar_types
from uiguard.chain.structure import Finding
from uiguard.models.catalog import PropSchema, PropType
from uiguard.models.errors import Severity, ValidationLayer

UNKNOWN_COMPONENT = "UNKNOWN_COMPONENT"
DEPRECATED_COMPONENT = "DEPRECATED_COMPONENT"
MISSING_REQUIRED_PROP = "MISSING_REQUIRED_PROP"
INVALID_PROP_TYPE = "INVALID_PROP_TYPE"
INVALID_ENUM_VALUE = "INVALID_ENUM_VALUE"

_COMPONENT_CODES = frozenset({UNKNOWN_COMPONENT, DEPRECATED_COMPONENT})


def categorize_layer(code: str) -> ValidationLayer:
    """Map a finding code to the chain layer that owns it."""
    if code in _COMPONENT_CODES:
        return ValidationLayer.COMPONENT_EXISTENCE
    return ValidationLayer.PROPS_VALIDATION


def value_type(value: Any) -> str:
    """JSON type name of a decoded value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def matches_type(value: Any, expected: PropType) -> bool:
    actual = value_type(value)
    if expected is PropType.FUNCTION:
        # Handlers arrive as action names in JSON documents.
        return actual == "string"
    return actual == expected.value


class ComponentValidator:
    """Checks component types and props in one traversal of the tree."""

    def __init__(self, catalog: CatalogLike) -> None:
        self._catalog = catalog

    def validate(self, document: dict[str, Any]) -> list[Finding]:
        findings: list[Finding] = []
        self._visit(document.get("root"), "root", findings)
        return findings

    def _visit(self, component: Any, path: str, findings: list[Finding]) -> None:
        if not isinstance(component, dict):
            return
        type_name = component.get("type")
        if isinstance(type_name, str) and type_name.strip():
            if not self._catalog.is_valid_type(type_name):
                findings.append(self._unknown(type_name, path))
            else:
                findings.extend(self._check_known(component, type_name, path))

        children = component.get("children")
        if isinstance(children, list):
            for index, child in enumerate(children):
                self._visit(child, f"{path}.children[{index}]", findings)

    def _unknown(self, type_name: str, path: str) -> Finding:
        valid_types = self._catalog.get_all()
        matches = similar_types(type_name, valid_types)
        if matches:
            suggestion = f"Did you mean: {', '.join(matches)}?"
        else:
            more = "..." if len(valid_types) > 5 else ""
            suggestion = f"Valid types: {', '.join(valid_types[:5])}{more}"
        return Finding(
            code=UNKNOWN_COMPONENT,
            path=f"{path}.type",
            message=f'Unknown component type "{type_name}" at "{path}"',
            suggestion=suggestion,
        )

    def _check_known(self, component: dict[str, Any], type_name: str, path: str) -> list[Finding]:
        findings: list[Finding] = []
        definition = getattr(self._catalog, "get", None)
        component_def = definition(type_name) if callable(definition) else None
        if component_def is not None and component_def.deprecated:
            findings.append(
                Finding(
                    code=DEPRECATED_COMPONENT,
                    path=f"{path}.type",
                    message=f'Component type "{type_name}" at "{path}" is deprecated',
                    severity=Severity.WARNING,
                    suggestion=component_def.deprecation_message
                    or "Use a supported component instead",
                )
            )

        lookup = getattr(self._catalog, "get_props_schema", None)
        schema = lookup(type_name) if callable(lookup) else None
        props = component.get("props")
        if schema and (props is None or isinstance(props, dict)):
            findings.extend(self._check_props(props or {}, schema, path))
        return findings

    @staticmethod
    def _check_props(
        props: dict[str, Any], schema: dict[str, PropSchema], path: str
    ) -> list[Finding]:
        findings: list[Finding] = []
        for name, prop in schema.items():
            prop_path = f"{path}.props.{name}"
            value = props.get(name)
            if value is None:
                if prop.required:
                    findings.append(
                        Finding(
                            code=MISSING_REQUIRED_PROP,
                            path=prop_path,
                            message=f'Missing required property "{name}" at "{path}"',
                            suggestion=f"{name}: {prop.description}"
                            if prop.description
                            else f'Property "{name}" is required (type: {prop.type.value})',
                        )
                    )
                continue
            if not matches_type(value, prop.type):
                findings.append(
                    Finding(
                        code=INVALID_PROP_TYPE,
                        path=prop_path,
                        message=(
                            f'Invalid type for property "{name}" at "{path}": '
                            f"expected {prop.type.value}, got {value_type(value)}"
                        ),
                        suggestion=f"Expected type: {prop.type.value}",
                    )
                )
                continue
            if prop.enum and prop.type is PropType.STRING and value not in prop.enum:
                findings.append(
                    Finding(
                        code=INVALID_ENUM_VALUE,
                        path=prop_path,
                        message=f'Invalid enum value "{value}" for property "{name}" at "{path}"',
                        suggestion=f"Valid values: {', '.join(prop.enum)}",
                    )
                )
        return findings
