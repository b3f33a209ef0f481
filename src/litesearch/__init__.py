"""
litesearch - embedded, file-persisted JSON document index.

This package provides an in-process replacement for a search cluster:
index and document CRUD, a structured boolean query language with vector
similarity scoring, multi-key sorting, and JSON snapshot persistence.

Example usage:
    >>> from litesearch import DocumentStore, SearchRequest, new_contains_query
    >>> store = DocumentStore("/tmp/lite.json")
    >>> store.create("docs", "1", {"text_content": "Hello World"})
    >>> store.search("docs", SearchRequest(query=new_contains_query("text_content", "hello"))).ids
    ['1']
"""

from .client import create_client
from .exceptions import (
    BulkIndexError,
    ConfigError,
    DocumentEncodeError,
    LiteSearchError,
    PredicateParseError,
)
from .search import (
    BoolQuery,
    ContainsQuery,
    EqualQuery,
    Hit,
    InQuery,
    LegacyContainsQuery,
    MatchQuery,
    MultiMatchQuery,
    NotExistsQuery,
    Predicate,
    SearchRequest,
    SearchResponse,
    SortField,
    cosine_similarity,
    new_bool_query,
    new_contains_query,
    new_equal_query,
    new_in_query,
    new_match_query,
    new_multi_match_query,
    new_not_exists_query,
    new_vector_query,
    parse_predicate,
)
from .storage import DocumentStore, NoopClient, SearchClient

__all__ = [
    # Clients
    "create_client",
    "DocumentStore",
    "NoopClient",
    "SearchClient",
    # Queries
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
    "cosine_similarity",
    # Requests
    "SearchRequest",
    "SearchResponse",
    "SortField",
    "Hit",
    # Errors
    "LiteSearchError",
    "ConfigError",
    "PredicateParseError",
    "DocumentEncodeError",
    "BulkIndexError",
]
