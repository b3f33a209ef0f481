"""
Snapshot-backed in-memory document store.
"""

from __future__ import annotations

import json
import os
from typing import Any

from ..exceptions import DocumentEncodeError
from ..search.query import SearchRequest, SearchResponse, run_search
from .base import PropertyTypes, StoredDocument
from .bulk import DocumentBulkIndexer
from .locking import ReadWriteLock
from .snapshot import Corpus, SnapshotFile


def encode_document(document: Any) -> str:
    """Return the stored JSON text for ``document``.

    ``bytes`` and ``str`` are taken as already-serialized JSON and kept
    verbatim; anything else is serialized with ``json.dumps``. Bytes that are
    not UTF-8 are still stored, with U+FFFD in place of the bad sequences.
    """
    if isinstance(document, (bytes, bytearray)):
        return bytes(document).decode("utf-8", errors="replace")
    if isinstance(document, str):
        return document
    try:
        return json.dumps(document)
    except (TypeError, ValueError) as err:
        raise DocumentEncodeError(f"Document is not JSON serializable: {err}") from err


class DocumentStore:
    """Index -> id -> JSON document corpus guarded by one reader/writer lock.

    Every mutation rewrites the snapshot before the write lock is released.
    Snapshot failures are logged; the in-memory change is kept regardless.
    """

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self._lock = ReadWriteLock()
        self._snapshot = SnapshotFile(path)
        self._docs: Corpus = self._snapshot.load()

    @property
    def path(self) -> str | None:
        return str(self._snapshot.path) if self._snapshot.path is not None else None

    def create_index(self, index: str, properties: dict[str, Any] | None = None) -> None:
        with self._lock.write_lock():
            self._docs.setdefault(index, {})
            self._persist_locked()

    def delete_index(self, index: str) -> None:
        with self._lock.write_lock():
            self._docs.pop(index, None)
            self._persist_locked()

    def exists(self, index: str) -> bool:
        with self._lock.read_lock():
            return index in self._docs

    def create(self, index: str, document_id: str, document: Any) -> None:
        raw = encode_document(document)
        with self._lock.write_lock():
            self._docs.setdefault(index, {})[document_id] = raw
            self._persist_locked()

    def update(self, index: str, document_id: str, document: Any) -> None:
        self.create(index, document_id, document)

    def delete(self, index: str, document_id: str) -> None:
        with self._lock.write_lock():
            docs = self._docs.get(index)
            if docs is not None:
                docs.pop(document_id, None)
            self._persist_locked()

    def get(self, index: str, document_id: str) -> StoredDocument | None:
        with self._lock.read_lock():
            raw = self._docs.get(index, {}).get(document_id)
        if raw is None:
            return None
        return StoredDocument(id=document_id, source=raw)

    def list_indices(self) -> list[str]:
        with self._lock.read_lock():
            return sorted(self._docs)

    def count(self, index: str) -> int:
        with self._lock.read_lock():
            return len(self._docs.get(index, {}))

    def search(self, index: str, request: SearchRequest | None = None) -> SearchResponse:
        with self._lock.read_lock():
            return run_search(self._docs.get(index), request)

    def new_bulk_indexer(self, index: str) -> DocumentBulkIndexer:
        return DocumentBulkIndexer(self, index)

    def types(self) -> PropertyTypes:
        return PropertyTypes()

    def _persist_locked(self) -> None:
        if self._snapshot.enabled:
            self._snapshot.save(self._docs)
