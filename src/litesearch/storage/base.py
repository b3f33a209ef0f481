"""
Storage interfaces and records shared by search clients.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, BinaryIO, Protocol, Union

from ..search.query import SearchRequest, SearchResponse, decode_attributes


BulkBody = Union[bytes, str, BinaryIO, None]


@dataclass(frozen=True)
class StoredDocument:
    """A document as kept in a collection: id plus verbatim JSON text."""

    id: str
    source: str

    @property
    def attributes(self) -> dict[str, Any]:
        return decode_attributes(self.source)


class PropertyTypes:
    """Mapping hints for ``create_index(properties=...)``.

    Hints are accepted for compatibility with cluster-backed clients and are
    not enforced by the embedded store.
    """

    def long_number_property(self) -> dict[str, Any]:
        return {"type": "long"}

    def text_property(self) -> dict[str, Any]:
        return {"type": "text"}

    def unsigned_long_number_property(self) -> dict[str, Any]:
        return {"type": "unsigned_long"}


class BulkIndexer(Protocol):
    """Per-item indexing handle bound to one index."""

    def add(self, document_id: str, body: BulkBody) -> None:
        """Decode ``body`` and store it under ``document_id``."""

    def close(self) -> None:
        """Finish the bulk session."""


class SearchClient(Protocol):
    """Protocol for the document index operations used by callers."""

    def create_index(self, index: str, properties: dict[str, Any] | None = None) -> None:
        """Create an index if it does not exist."""

    def delete_index(self, index: str) -> None:
        """Drop an index and all its documents."""

    def exists(self, index: str) -> bool:
        """Return True if the index exists."""

    def create(self, index: str, document_id: str, document: Any) -> None:
        """Store ``document`` under ``document_id``, replacing any previous version."""

    def update(self, index: str, document_id: str, document: Any) -> None:
        """Replace a document; same semantics as ``create``."""

    def delete(self, index: str, document_id: str) -> None:
        """Remove a document; missing ids are ignored."""

    def search(self, index: str, request: SearchRequest | None = None) -> SearchResponse:
        """Evaluate ``request`` over an index."""

    def new_bulk_indexer(self, index: str) -> BulkIndexer:
        """Return a bulk indexer bound to ``index``."""

    def types(self) -> PropertyTypes:
        """Return mapping hint factories."""
