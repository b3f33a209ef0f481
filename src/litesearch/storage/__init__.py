"""Storage backends for litesearch."""

from .base import BulkIndexer, PropertyTypes, SearchClient, StoredDocument
from .bulk import DocumentBulkIndexer
from .document_store import DocumentStore, encode_document
from .locking import ReadWriteLock
from .noop import NoopBulkIndexer, NoopClient
from .snapshot import SnapshotFile

__all__ = [
    "BulkIndexer",
    "PropertyTypes",
    "SearchClient",
    "StoredDocument",
    "DocumentBulkIndexer",
    "DocumentStore",
    "encode_document",
    "ReadWriteLock",
    "NoopBulkIndexer",
    "NoopClient",
    "SnapshotFile",
]
