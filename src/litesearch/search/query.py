"""
Search pipeline over a single document collection.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from .evaluator import matches
from .predicates import Predicate
from .sorter import ScoredRow, SortField, sort_rows


@dataclass(frozen=True)
class SearchRequest:
    """Query tree plus ordering, size cap and score threshold."""

    query: Predicate | None = None
    sort: tuple[SortField, ...] = field(default_factory=tuple)
    size: int | None = None
    min_score: float | None = None


@dataclass(frozen=True)
class Hit:
    """A single search result; ``source`` is the stored JSON text."""

    id: str
    source: str
    score: float | None = None

    def document(self) -> Any:
        """The decoded source; text that is not JSON is returned as is."""
        return decode_source(self.source)


@dataclass(frozen=True)
class SearchResponse:
    hits: list[Hit] = field(default_factory=list)
    max_score: float | None = None

    @property
    def ids(self) -> list[str]:
        return [hit.id for hit in self.hits]


def decode_source(source: str) -> Any:
    try:
        return json.loads(source)
    except ValueError:
        return source


def decode_attributes(raw: str) -> dict[str, Any]:
    """Decode stored JSON text into an attribute map.

    Anything that is not a JSON object decodes to an empty map, so the
    document only ever matches predicates that need no fields.
    """
    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError):
        return {}
    if not isinstance(decoded, dict):
        return {}
    return decoded


def run_search(collection: Mapping[str, str] | None, request: SearchRequest | None) -> SearchResponse:
    """Scan, collect, sort, limit and respond for one collection."""
    if not collection:
        return SearchResponse()
    request = request or SearchRequest()

    rows: list[ScoredRow] = []
    for doc_id, raw in collection.items():
        attributes = decode_attributes(raw)
        result = matches(attributes, request.query, min_score=request.min_score)
        if result.matched:
            rows.append(
                ScoredRow(id=doc_id, source=raw, attributes=attributes, score=result.score)
            )

    if request.sort:
        rows = sort_rows(rows, request.sort)

    limit = len(rows)
    if request.size is not None and 0 <= request.size < limit:
        limit = request.size
    limited = rows[:limit]

    scores = [row.score for row in limited if row.score is not None]
    return SearchResponse(
        hits=[Hit(id=row.id, source=row.source, score=row.score) for row in limited],
        max_score=max(scores) if scores else None,
    )
