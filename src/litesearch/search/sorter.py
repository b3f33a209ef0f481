"""
Deterministic multi-key ordering for matched documents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Any, Mapping, Sequence

from .predicates import as_float, is_number


SCORE_FIELD = "_score"


@dataclass(frozen=True)
class SortField:
    """One sort key; ``field`` is an attribute name or ``_score``."""

    field: str
    asc: bool = True


@dataclass(frozen=True)
class ScoredRow:
    """A matched document carried through sort and limit."""

    id: str
    source: str
    attributes: Mapping[str, Any] = field(default_factory=dict)
    score: float | None = None


def compare_values(a: Any, b: Any) -> int:
    """Three-way compare; numbers numerically, strings lexically, else equal."""
    if is_number(a) and is_number(b):
        fa, fb = as_float(a), as_float(b)
        return (fa > fb) - (fa < fb)
    if isinstance(a, str) and isinstance(b, str):
        return (a > b) - (a < b)
    return 0


def sort_rows(rows: Sequence[ScoredRow], sort: Sequence[SortField]) -> list[ScoredRow]:
    """Order rows by ``sort``; full ties fall back to ascending id."""

    def compare(left: ScoredRow, right: ScoredRow) -> int:
        for sort_field in sort:
            if sort_field.field == SCORE_FIELD:
                result = compare_values(left.score or 0.0, right.score or 0.0)
            else:
                result = compare_values(
                    left.attributes.get(sort_field.field),
                    right.attributes.get(sort_field.field),
                )
            if result != 0:
                return result if sort_field.asc else -result
        return (left.id > right.id) - (left.id < right.id)

    return sorted(rows, key=cmp_to_key(compare))


def parse_sort_field(raw: str) -> SortField:
    """Parse ``field``, ``field:asc`` or ``field:desc``.

    ``_score`` without a direction sorts descending.
    """
    name, _, direction = raw.partition(":")
    name = name.strip()
    if not name:
        raise ValueError(f"Invalid sort field: {raw!r}")
    direction = direction.strip().lower()
    if not direction:
        return SortField(field=name, asc=name != SCORE_FIELD)
    if direction not in {"asc", "desc"}:
        raise ValueError(f"Sort direction must be `asc` or `desc`: {raw!r}")
    return SortField(field=name, asc=direction == "asc")
