from pathlib import Path

import pytest

from litesearch.storage import DocumentStore


@pytest.fixture()
def snapshot_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "lite.json"


@pytest.fixture()
def store(snapshot_path: Path) -> DocumentStore:
    return DocumentStore(snapshot_path)


@pytest.fixture()
def seeded_store(store: DocumentStore) -> DocumentStore:
    """Three documents with text, category and view counts."""
    store.create_index("docs")
    store.create("docs", "a", {"text_content": "hello world", "category": "news", "views": 10})
    store.create("docs", "b", {"text_content": "HELLO golang", "category": "blog", "views": 50})
    store.create("docs", "c", {"text_content": "random", "category": "news", "views": 30})
    return store
