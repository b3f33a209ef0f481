"""
Query predicate types and their JSON wire form.

A predicate is either a leaf field test or a ``BoolQuery`` composing other
predicates. All predicate types are frozen so one instance can be shared by
concurrent searches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Sequence, TypeAlias, Union

from ..exceptions import PredicateParseError


QueryType = Literal["equal", "contains", "in", "not_exists", "match", "multi_match"]

DEFAULT_TEXT_FIELD = "text_content"
EMBEDDING_FIELD = "embedding"


@dataclass(frozen=True)
class EqualQuery:
    """Field value equals ``value`` (numbers compared as numbers)."""

    key: str
    value: Any


@dataclass(frozen=True)
class ContainsQuery:
    """Field value contains ``value`` as a case-insensitive substring."""

    key: str
    value: Any


@dataclass(frozen=True)
class InQuery:
    """Field value is one of ``values``."""

    key: str
    values: tuple[Any, ...]


@dataclass(frozen=True)
class NotExistsQuery:
    """Field is absent from the document."""

    key: str


@dataclass(frozen=True)
class MatchQuery:
    """Single-field match.

    Behaves like ``ContainsQuery`` for text. When ``key`` is the embedding
    field and ``value`` is a numeric vector, the search pipeline scores
    documents by cosine similarity instead.
    """

    key: str
    value: Any


@dataclass(frozen=True)
class MultiMatchQuery:
    """Any of ``fields`` contains ``query`` (case-insensitive)."""

    fields: tuple[str, ...]
    query: str


@dataclass(frozen=True)
class LegacyContainsQuery:
    """Keyless substring search against the default text field.

    Older callers send ``{"value": "..."}`` with neither type nor key.
    """

    value: str


@dataclass(frozen=True)
class BoolQuery:
    """Boolean composition of sub-predicates."""

    filter: tuple["Predicate", ...] = field(default_factory=tuple)
    must: tuple["Predicate", ...] = field(default_factory=tuple)
    must_not: tuple["Predicate", ...] = field(default_factory=tuple)
    should: tuple["Predicate", ...] = field(default_factory=tuple)
    minimum_should_match: int | None = None


Predicate: TypeAlias = Union[
    EqualQuery,
    ContainsQuery,
    InQuery,
    NotExistsQuery,
    MatchQuery,
    MultiMatchQuery,
    LegacyContainsQuery,
    BoolQuery,
]


def is_number(value: Any) -> bool:
    """Return True for int/float values; bool is not a number here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def as_float(value: Any) -> Any:
    """Return ``value`` as a float; ints beyond float range stay exact ints."""
    try:
        return float(value)
    except OverflowError:
        return value


def canonical_value(value: Any) -> Any:
    """Promote ints to float and sequences to tuples, recursively."""
    if is_number(value):
        return as_float(value)
    if isinstance(value, (list, tuple)):
        return tuple(canonical_value(item) for item in value)
    return value


def new_equal_query(key: str, value: Any) -> EqualQuery:
    return EqualQuery(key=key, value=canonical_value(value))


def new_contains_query(key: str, value: str) -> ContainsQuery:
    return ContainsQuery(key=key, value=value)


def new_in_query(key: str, values: Sequence[Any]) -> InQuery:
    return InQuery(key=key, values=tuple(canonical_value(item) for item in values))


def new_not_exists_query(key: str) -> NotExistsQuery:
    return NotExistsQuery(key=key)


def new_match_query(key: str, value: Any) -> MatchQuery:
    return MatchQuery(key=key, value=canonical_value(value))


def new_multi_match_query(fields: Sequence[str], query: str) -> MultiMatchQuery:
    return MultiMatchQuery(fields=tuple(fields), query=query)


def new_vector_query(vector: Sequence[float], *, key: str = EMBEDDING_FIELD) -> MatchQuery:
    """Build a similarity query against the embedding field."""
    return MatchQuery(key=key, value=tuple(float(item) for item in vector))


def new_bool_query(
    *,
    filter: Sequence[Predicate] = (),
    must: Sequence[Predicate] = (),
    must_not: Sequence[Predicate] = (),
    should: Sequence[Predicate] = (),
    minimum_should_match: int | None = None,
) -> BoolQuery:
    return BoolQuery(
        filter=tuple(filter),
        must=tuple(must),
        must_not=tuple(must_not),
        should=tuple(should),
        minimum_should_match=minimum_should_match,
    )


# Wire form ---------------------------------------------------------------

_LEAF_TYPES: tuple[QueryType, ...] = ("equal", "contains", "in", "not_exists", "match", "multi_match")
_BOOL_CLAUSES: tuple[str, ...] = ("filter", "must", "must_not", "should")


def parse_predicate(raw: Mapping[str, Any] | None) -> Predicate | None:
    """Parse a JSON-like query tree into a predicate.

    ``None`` and ``{}`` mean match-all and return ``None``. A leaf with a
    ``key`` but no ``type`` parses to an empty ``BoolQuery``, which also
    matches everything.
    """
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise PredicateParseError(f"Query must be an object, got {type(raw).__name__}.")
    if not raw:
        return None

    if "bool" in raw:
        return _parse_bool(raw["bool"])

    query_type = raw.get("type")
    key = raw.get("key")
    if query_type is None and not key:
        value = raw.get("value")
        if not isinstance(value, str):
            raise PredicateParseError("Keyless query requires a string `value`.")
        return LegacyContainsQuery(value=value)
    if query_type is None:
        # A keyed leaf without a type matches everything.
        return BoolQuery()

    if query_type not in _LEAF_TYPES:
        raise PredicateParseError(
            f"Unsupported query type {query_type!r}. Supported: {', '.join(_LEAF_TYPES)}"
        )

    if query_type == "multi_match":
        fields = raw.get("fields")
        query = raw.get("query", raw.get("value"))
        if not isinstance(fields, list) or not all(isinstance(f, str) for f in fields):
            raise PredicateParseError("`multi_match` requires a list of string `fields`.")
        if not isinstance(query, str):
            raise PredicateParseError("`multi_match` requires a string `query`.")
        return new_multi_match_query(fields, query)

    if not isinstance(key, str) or not key:
        raise PredicateParseError(f"`{query_type}` query requires a non-empty `key`.")

    if query_type == "not_exists":
        return new_not_exists_query(key)

    if "value" not in raw:
        raise PredicateParseError(f"`{query_type}` query requires a `value`.")
    value = raw["value"]

    if query_type == "equal":
        return new_equal_query(key, value)
    if query_type == "contains":
        return new_contains_query(key, value)
    if query_type == "in":
        if not isinstance(value, list):
            raise PredicateParseError("`in` query requires a list `value`.")
        return new_in_query(key, value)
    return new_match_query(key, value)


def _parse_bool(raw: Any) -> BoolQuery:
    if not isinstance(raw, Mapping):
        raise PredicateParseError("`bool` must be an object.")

    clauses: dict[str, list[Predicate]] = {}
    for clause in _BOOL_CLAUSES:
        items = raw.get(clause) or []
        if not isinstance(items, list):
            raise PredicateParseError(f"`bool.{clause}` must be a list.")
        parsed: list[Predicate] = []
        for item in items:
            predicate = parse_predicate(item)
            # An empty sub-query is a match-all leaf.
            parsed.append(predicate if predicate is not None else BoolQuery())
        clauses[clause] = parsed

    minimum = raw.get("minimum_should_match")
    if minimum is not None and (not isinstance(minimum, int) or isinstance(minimum, bool)):
        raise PredicateParseError("`minimum_should_match` must be an integer.")

    return new_bool_query(minimum_should_match=minimum, **clauses)


def predicate_to_dict(predicate: Predicate | None) -> dict[str, Any]:
    """Render a predicate in its JSON wire form."""
    if predicate is None:
        return {}
    if isinstance(predicate, BoolQuery):
        body: dict[str, Any] = {
            clause: [predicate_to_dict(item) for item in getattr(predicate, clause)]
            for clause in _BOOL_CLAUSES
            if getattr(predicate, clause)
        }
        if predicate.minimum_should_match is not None:
            body["minimum_should_match"] = predicate.minimum_should_match
        return {"bool": body}
    if isinstance(predicate, LegacyContainsQuery):
        return {"value": predicate.value}
    if isinstance(predicate, MultiMatchQuery):
        return {"type": "multi_match", "fields": list(predicate.fields), "query": predicate.query}
    if isinstance(predicate, NotExistsQuery):
        return {"type": "not_exists", "key": predicate.key}
    if isinstance(predicate, InQuery):
        return {"type": "in", "key": predicate.key, "value": list(predicate.values)}
    if isinstance(predicate, EqualQuery):
        return {"type": "equal", "key": predicate.key, "value": _plain(predicate.value)}
    if isinstance(predicate, ContainsQuery):
        return {"type": "contains", "key": predicate.key, "value": predicate.value}
    if isinstance(predicate, MatchQuery):
        return {"type": "match", "key": predicate.key, "value": _plain(predicate.value)}
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def _plain(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_plain(item) for item in value]
    return value
