"""
Bulk indexing adapter that commits each item as it arrives.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from ..exceptions import BulkIndexError, DocumentEncodeError
from .base import BulkBody

if TYPE_CHECKING:
    from .document_store import DocumentStore


class DocumentBulkIndexer:
    """Decode each bulk body and hand it straight to ``DocumentStore.create``.

    There is no buffering: every ``add`` is persisted before it returns, so
    ``close`` has nothing left to flush.
    """

    def __init__(self, store: DocumentStore, index: str) -> None:
        self.store = store
        self.index = index
        self.added = 0

    def __enter__(self) -> DocumentBulkIndexer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def add(self, document_id: str, body: BulkBody) -> None:
        raw = _decode_body(document_id, body)
        try:
            self.store.create(self.index, document_id, raw)
        except DocumentEncodeError as err:
            raise BulkIndexError(document_id, str(err)) from err
        self.added += 1

    def close(self) -> None:
        return None


def _decode_body(document_id: str, body: BulkBody) -> str:
    """Return the body as validated JSON text; an empty body is stored as null."""
    if body is None:
        return "null"
    if hasattr(body, "read"):
        body = body.read()
    if isinstance(body, (bytes, bytearray)):
        try:
            body = bytes(body).decode("utf-8")
        except UnicodeDecodeError as err:
            raise BulkIndexError(document_id, f"body is not UTF-8: {err}") from err
    if not isinstance(body, str):
        raise BulkIndexError(document_id, f"unsupported body type {type(body).__name__}")
    if not body.strip():
        return "null"
    try:
        json.loads(body)
    except ValueError as err:
        raise BulkIndexError(document_id, f"body is not valid JSON: {err}") from err
    return body
