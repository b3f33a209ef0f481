"""Exception hierarchy for litesearch.

Callers can catch ``LiteSearchError`` for anything raised by the package or
discriminate on the concrete subclasses below.
"""

from __future__ import annotations


class LiteSearchError(Exception):
    """Base class for all litesearch exceptions."""


class ConfigError(LiteSearchError):
    """Raised when a search URI or environment setting cannot be used."""


class PredicateParseError(LiteSearchError, ValueError):
    """Raised when a wire-form query tree is malformed."""


class DocumentEncodeError(LiteSearchError, ValueError):
    """Raised when a document cannot be serialized to JSON."""


class BulkIndexError(LiteSearchError):
    """Raised when a single bulk item cannot be decoded or stored."""

    def __init__(self, document_id: str, reason: str) -> None:
        super().__init__(f"Bulk item {document_id!r} failed: {reason}")
        self.document_id = document_id
        self.reason = reason
