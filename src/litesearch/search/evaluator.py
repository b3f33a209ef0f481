"""
Predicate evaluation against decoded document attributes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .predicates import (
    DEFAULT_TEXT_FIELD,
    EMBEDDING_FIELD,
    BoolQuery,
    ContainsQuery,
    EqualQuery,
    InQuery,
    LegacyContainsQuery,
    MatchQuery,
    MultiMatchQuery,
    NotExistsQuery,
    Predicate,
    as_float,
    is_number,
)
from .scoring import as_vector, cosine_similarity


@dataclass(frozen=True)
class MatchResult:
    """Outcome of evaluating one document."""

    matched: bool
    score: float | None = None


def matches(
    attributes: Mapping[str, Any],
    predicate: Predicate | None,
    *,
    min_score: float | None = None,
) -> MatchResult:
    """Evaluate the top-level predicate of a request against one document.

    A ``MatchQuery`` on the embedding field with a numeric vector is a
    similarity query: every document is eligible, documents with a decodable
    embedding get a cosine score, and scores under ``min_score`` drop out.
    """
    if predicate is None:
        return MatchResult(matched=True)

    query_vector = _similarity_vector(predicate)
    if query_vector is None:
        return MatchResult(matched=evaluate(attributes, predicate))

    document_vector = as_vector(attributes.get(EMBEDDING_FIELD))
    if document_vector is None:
        return MatchResult(matched=True)
    score = cosine_similarity(query_vector, document_vector)
    if min_score is not None and score < min_score:
        return MatchResult(matched=False, score=score)
    return MatchResult(matched=True, score=score)


def evaluate(attributes: Mapping[str, Any], predicate: Predicate | None) -> bool:
    """Return True when ``attributes`` satisfy ``predicate``."""
    if predicate is None:
        return True
    if isinstance(predicate, BoolQuery):
        return _evaluate_bool(attributes, predicate)
    if isinstance(predicate, LegacyContainsQuery):
        if not predicate.value:
            return True
        return _contains(attributes.get(DEFAULT_TEXT_FIELD), predicate.value)
    if isinstance(predicate, EqualQuery):
        if predicate.key not in attributes:
            return False
        return _equal(attributes[predicate.key], predicate.value)
    if isinstance(predicate, (ContainsQuery, MatchQuery)):
        if predicate.key not in attributes:
            return False
        return _contains(attributes[predicate.key], predicate.value)
    if isinstance(predicate, MultiMatchQuery):
        return any(
            _contains(attributes[name], predicate.query)
            for name in predicate.fields
            if name in attributes
        )
    if isinstance(predicate, InQuery):
        if predicate.key not in attributes:
            return False
        return _member(attributes[predicate.key], predicate.values)
    if isinstance(predicate, NotExistsQuery):
        return predicate.key not in attributes
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def _evaluate_bool(attributes: Mapping[str, Any], query: BoolQuery) -> bool:
    for sub in query.filter:
        if not evaluate(attributes, sub):
            return False
    for sub in query.must:
        if not evaluate(attributes, sub):
            return False
    for sub in query.must_not:
        if evaluate(attributes, sub):
            return False
    if query.should:
        required = 1 if query.minimum_should_match is None else query.minimum_should_match
        matched = sum(1 for sub in query.should if evaluate(attributes, sub))
        if matched < required:
            return False
    return True


def _similarity_vector(predicate: Predicate) -> list[float] | None:
    if not isinstance(predicate, MatchQuery) or predicate.key != EMBEDDING_FIELD:
        return None
    return as_vector(predicate.value)


def _equal(field_value: Any, expected: Any) -> bool:
    if is_number(field_value) and is_number(expected):
        return as_float(field_value) == as_float(expected)
    if isinstance(field_value, str) and isinstance(expected, str):
        return field_value == expected
    return False


def _contains(field_value: Any, needle: Any) -> bool:
    if not isinstance(field_value, str) or not isinstance(needle, str):
        return False
    return needle.lower() in field_value.lower()


def _member(field_value: Any, candidates: tuple[Any, ...]) -> bool:
    if is_number(field_value):
        target = as_float(field_value)
        return any(is_number(item) and as_float(item) == target for item in candidates)
    if isinstance(field_value, str):
        return any(isinstance(item, str) and item == field_value for item in candidates)
    return False
