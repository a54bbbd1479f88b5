"""Name similarity used to suggest corrections for unknown component types."""

from __future__ import annotations

from collections.abc import Iterable

MAX_DISTANCE = 3


def levenshtein(a: str, b: str) -> int:
    """Classic edit distance (insert, delete, substitute each cost 1)."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def similar_types(name: str, candidates: Iterable[str], limit: int = 3) -> list[str]:
    """Return up to *limit* candidates that look like *name*.

    A candidate qualifies when either name contains the other
    (case-insensitively) or their edit distance is at most ``MAX_DISTANCE``.
    Results are ranked by distance, then alphabetically.
    """
    needle = name.lower()
    if not needle:
        return []
    scored: list[tuple[int, str]] = []
    for candidate in candidates:
        lowered = candidate.lower()
        distance = levenshtein(needle, lowered)
        if needle in lowered or lowered in needle or distance <= MAX_DISTANCE:
            scored.append((distance, candidate))
    scored.sort()
    return [candidate for _, candidate in scored[:limit]]


def format_suggestion(name: str, candidates: Iterable[str]) -> str:
    matches = similar_types(name, candidates)
    if matches:
        return f"Did you mean: {', '.join(matches)}?"
    return "Check the component type name"
