"""Query language, scoring and the search pipeline."""

from .evaluator import MatchResult, evaluate, matches
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
    new_bool_query,
    new_contains_query,
    new_equal_query,
    new_in_query,
    new_match_query,
    new_multi_match_query,
    new_not_exists_query,
    new_vector_query,
    parse_predicate,
    predicate_to_dict,
)
from .query import (
    Hit,
    SearchRequest,
    SearchResponse,
    decode_attributes,
    decode_source,
    run_search,
)
from .scoring import cosine_similarity
from .sorter import SCORE_FIELD, SortField, parse_sort_field, sort_rows

__all__ = [
    "MatchResult",
    "evaluate",
    "matches",
    "DEFAULT_TEXT_FIELD",
    "EMBEDDING_FIELD",
    "BoolQuery",
    "ContainsQuery",
    "EqualQuery",
    "InQuery",
    "LegacyContainsQuery",
    "MatchQuery",
    "MultiMatchQuery",
    "NotExistsQuery",
    "Predicate",
    "new_bool_query",
    "new_contains_query",
    "new_equal_query",
    "new_in_query",
    "new_match_query",
    "new_multi_match_query",
    "new_not_exists_query",
    "new_vector_query",
    "parse_predicate",
    "predicate_to_dict",
    "Hit",
    "SearchRequest",
    "SearchResponse",
    "decode_attributes",
    "decode_source",
    "run_search",
    "cosine_similarity",
    "SCORE_FIELD",
    "SortField",
    "parse_sort_field",
    "sort_rows",
]
