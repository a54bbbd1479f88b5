"""Schema-structure checks for a parsed UI document.

Only the shape of the document is checked here: required fields, field types
and id uniqueness.  Catalog membership and prop schemas are the business of
:mod:`uiguard.chain.components`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from uiguard.models.errors import Severity

MISSING_FIELD = "MISSING_FIELD"
INVALID_TYPE = "INVALID_TYPE"
INVALID_VALUE = "INVALID_VALUE"
DUPLICATE_ID = "DUPLICATE_ID"


@dataclass(frozen=True)
class Finding:
    """A single coded finding produced by a chain layer."""

    code: str
    path: str
    message: str
    severity: Severity = Severity.ERROR
    suggestion: str | None = None


def structure_suggestion(code: str, path: str) -> str:
    if code == MISSING_FIELD:
        if path == "version":
            return 'Add "version": "1.0" to your schema'
        if path == "root":
            return 'Add a "root" object with "id" and "type" fields'
        if path.endswith(".id"):
            return 'Each component must have a unique "id" string'
        if path.endswith(".type"):
            return 'Each component must have a "type" string'
        return f'Add the missing field at "{path}"'
    if code == INVALID_TYPE:
        return f'Check the type of the value at "{path}"'
    if code == INVALID_VALUE:
        return f'The value at "{path}" is invalid'
    if code == DUPLICATE_ID:
        return "Each component must have a unique ID"
    return f'Fix the error at "{path}"'


def _finding(code: str, path: str, message: str) -> Finding:
    return Finding(
        code=code, path=path, message=message, suggestion=structure_suggestion(code, path)
    )


def _present(obj: dict[str, Any], key: str) -> bool:
    return obj.get(key) is not None


class _Findings(list[Finding]):
    """Finding list with shorthands for the three common shapes."""

    def missing(self, path: str, field_name: str, where: str) -> None:
        self.append(_finding(MISSING_FIELD, path, f'Missing required field: {field_name}{where}'))

    def wrong_type(self, path: str, message: str) -> None:
        self.append(_finding(INVALID_TYPE, path, message))

    def empty(self, path: str, field_name: str, where: str) -> None:
        self.append(_finding(INVALID_VALUE, path, f'Field "{field_name}" cannot be empty{where}'))


class StructureValidator:
    """Checks the required shape of a UI document."""

    def validate(self, document: Any) -> list[Finding]:
        if not isinstance(document, dict):
            return [_finding(INVALID_TYPE, "", "Schema must be an object")]
        findings = _Findings()
        self._check_version(document, findings)
        self._check_root(document, findings)
        for key in ("data", "meta"):
            if _present(document, key) and not isinstance(document[key], dict):
                findings.wrong_type(key, f'Field "{key}" must be an object')
        return list(findings)

    @staticmethod
    def is_fatal(findings: list[Finding]) -> bool:
        """True when the document cannot be traversed any further."""
        return any(
            f.path == "" or (f.path == "root" and f.code == MISSING_FIELD) for f in findings
        )

    # -- document level ------------------------------------------------------

    def _check_version(self, document: dict[str, Any], findings: _Findings) -> None:
        if "version" not in document:
            findings.missing("version", "version", "")
            return
        version = document["version"]
        if not isinstance(version, str):
            findings.wrong_type("version", 'Field "version" must be a string')
        elif not version.strip():
            findings.empty("version", "version", "")

    def _check_root(self, document: dict[str, Any], findings: _Findings) -> None:
        if "root" not in document:
            findings.missing("root", "root", "")
            return
        self._check_component(document["root"], "root", set(), findings)

    # -- components ----------------------------------------------------------

    def _check_component(
        self, component: Any, path: str, seen_ids: set[str], findings: _Findings
    ) -> None:
        if not isinstance(component, dict):
            findings.wrong_type(path, f'Component at "{path}" must be an object')
            return
        where = f' at "{path}"'

        self._check_id(component, path, seen_ids, findings)
        self._check_string_field(component, "type", path, findings)

        for key in ("props", "style"):
            if _present(component, key) and not isinstance(component[key], dict):
                findings.wrong_type(f"{path}.{key}", f'Field "{key}" must be an object{where}')

        if _present(component, "events"):
            events = component["events"]
            if not isinstance(events, list):
                findings.wrong_type(f"{path}.events", f'Field "events" must be an array{where}')
            else:
                for index, binding in enumerate(events):
                    self._check_event(binding, f"{path}.events[{index}]", findings)

        if _present(component, "loop"):
            self._check_loop(component["loop"], f"{path}.loop", findings)

        if _present(component, "children"):
            children = component["children"]
            if not isinstance(children, list):
                findings.wrong_type(
                    f"{path}.children", f'Field "children" must be an array{where}'
                )
                return
            for index, child in enumerate(children):
                # Plain strings are text nodes.
                if isinstance(child, str):
                    continue
                self._check_component(child, f"{path}.children[{index}]", seen_ids, findings)

    def _check_id(
        self, component: dict[str, Any], path: str, seen_ids: set[str], findings: _Findings
    ) -> None:
        if not self._check_string_field(component, "id", path, findings):
            return
        component_id = component["id"]
        if component_id in seen_ids:
            findings.append(
                _finding(
                    DUPLICATE_ID,
                    f"{path}.id",
                    f'Duplicate component id "{component_id}" at "{path}"',
                )
            )
        else:
            seen_ids.add(component_id)

    @staticmethod
    def _check_string_field(
        obj: dict[str, Any], key: str, path: str, findings: _Findings
    ) -> bool:
        """Require a non-empty string at ``obj[key]``; True when it is one."""
        field_path = f"{path}.{key}"
        where = f' at "{path}"'
        if key not in obj:
            findings.missing(field_path, key, where)
            return False
        if not isinstance(obj[key], str):
            findings.wrong_type(field_path, f'Field "{key}" must be a string{where}')
            return False
        if not obj[key].strip():
            findings.empty(field_path, key, where)
            return False
        return True

    def _check_event(self, binding: Any, path: str, findings: _Findings) -> None:
        if not isinstance(binding, dict):
            findings.wrong_type(path, f'Event binding at "{path}" must be an object')
            return
        if "event" not in binding:
            findings.missing(f"{path}.event", "event", f' at "{path}"')
        elif not isinstance(binding["event"], str):
            findings.wrong_type(f"{path}.event", f'Field "event" must be a string at "{path}"')
        if "action" not in binding:
            findings.missing(f"{path}.action", "action", f' at "{path}"')
            return
        action = binding["action"]
        if not isinstance(action, dict):
            findings.wrong_type(f"{path}.action", f'Field "action" must be an object at "{path}"')
        elif "type" not in action:
            findings.missing(f"{path}.action.type", "type", f' in action at "{path}"')
        elif not isinstance(action["type"], str):
            findings.wrong_type(
                f"{path}.action.type", f'Field "type" must be a string in action at "{path}"'
            )

    def _check_loop(self, loop: Any, path: str, findings: _Findings) -> None:
        if not isinstance(loop, dict):
            findings.wrong_type(path, f'Loop config at "{path}" must be an object')
            return
        if "source" not in loop:
            findings.missing(f"{path}.source", "source", f' at "{path}"')
        elif not isinstance(loop["source"], str):
            findings.wrong_type(f"{path}.source", f'Field "source" must be a string at "{path}"')
        for key in ("itemName", "indexName"):
            if _present(loop, key) and not isinstance(loop[key], str):
                findings.wrong_type(
                    f"{path}.{key}", f'Field "{key}" must be a string at "{path}"'
                )
