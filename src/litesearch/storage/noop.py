"""
Client that accepts every call and stores nothing.

Used in lite mode when no snapshot location is configured.
"""

from __future__ import annotations

from typing import Any

from ..search.query import SearchRequest, SearchResponse
from .base import BulkBody, PropertyTypes


class NoopBulkIndexer:
    def add(self, document_id: str, body: BulkBody) -> None:
        return None

    def close(self) -> None:
        return None


class NoopClient:
    """Every index exists and every search is empty."""

    def create_index(self, index: str, properties: dict[str, Any] | None = None) -> None:
        return None

    def delete_index(self, index: str) -> None:
        return None

    def exists(self, index: str) -> bool:
        return True

    def create(self, index: str, document_id: str, document: Any) -> None:
        return None

    def update(self, index: str, document_id: str, document: Any) -> None:
        return None

    def delete(self, index: str, document_id: str) -> None:
        return None

    def search(self, index: str, request: SearchRequest | None = None) -> SearchResponse:
        return SearchResponse()

    def new_bulk_indexer(self, index: str) -> NoopBulkIndexer:
        return NoopBulkIndexer()

    def types(self) -> PropertyTypes:
        return PropertyTypes()
