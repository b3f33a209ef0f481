"""Tests for the snapshot-backed document store."""

from __future__ import annotations

import io
import json
import threading
from pathlib import Path

import pytest

from litesearch.exceptions import BulkIndexError, DocumentEncodeError
from litesearch.search import (
    SCORE_FIELD,
    LegacyContainsQuery,
    SearchRequest,
    SortField,
    new_bool_query,
    new_contains_query,
    new_equal_query,
    new_in_query,
    new_vector_query,
)
from litesearch.storage import DocumentStore, NoopClient, ReadWriteLock, SnapshotFile


def test_create_index_then_exists_and_empty_search(store: DocumentStore) -> None:
    store.create_index("docs")

    assert store.exists("docs") is True
    response = store.search("docs", SearchRequest())
    assert response.hits == []
    assert response.max_score is None


def test_create_implicitly_creates_index(store: DocumentStore) -> None:
    assert store.exists("docs") is False
    store.create("docs", "1", {"text_content": "x"})
    assert store.exists("docs") is True


def test_create_index_keeps_existing_documents(store: DocumentStore) -> None:
    store.create("docs", "1", {"text_content": "x"})
    store.create_index("docs")
    assert store.search("docs").ids == ["1"]


def test_match_all_returns_every_document(seeded_store: DocumentStore) -> None:
    response = seeded_store.search("docs", SearchRequest())
    assert sorted(response.ids) == ["a", "b", "c"]
    assert seeded_store.search("docs").ids == response.ids


def test_contains_search_is_case_insensitive(store: DocumentStore) -> None:
    store.create_index("docs")
    store.create("docs", "1", {"text_content": "Hello World"})
    store.create("docs", "2", {"text_content": "another line"})

    response = store.search(
        "docs", SearchRequest(query=new_contains_query("text_content", "hello"))
    )

    assert response.ids == ["1"]
    assert json.loads(response.hits[0].source) == {"text_content": "Hello World"}
    assert response.hits[0].score is None


def test_equal_and_bool_queries(seeded_store: DocumentStore) -> None:
    equal = seeded_store.search(
        "docs", SearchRequest(query=new_equal_query("category", "news"))
    )
    assert sorted(equal.ids) == ["a", "c"]

    both = seeded_store.search(
        "docs",
        SearchRequest(
            query=new_bool_query(
                must=[
                    new_equal_query("category", "news"),
                    new_contains_query("text_content", "random"),
                ]
            )
        ),
    )
    assert both.ids == ["c"]


def test_legacy_query_searches_text_content(seeded_store: DocumentStore) -> None:
    response = seeded_store.search("docs", SearchRequest(query=LegacyContainsQuery(value="hello")))
    assert sorted(response.ids) == ["a", "b"]


def test_sort_and_size(seeded_store: DocumentStore) -> None:
    response = seeded_store.search(
        "docs",
        SearchRequest(sort=(SortField(field="views", asc=False),), size=2),
    )
    assert response.ids == ["b", "c"]


@pytest.mark.parametrize("size, expected", [(None, 3), (-1, 3), (0, 0), (1, 1), (10, 3)])
def test_size_limits(seeded_store: DocumentStore, size, expected) -> None:
    response = seeded_store.search("docs", SearchRequest(size=size))
    assert len(response.hits) == expected


def test_vector_similarity_search(store: DocumentStore) -> None:
    store.create_index("docs")
    store.create("docs", "v1", {"embedding": [1, 0, 0], "label": "x"})
    store.create("docs", "v2", {"embedding": [0.8, 0.2, 0], "label": "y"})

    response = store.search(
        "docs",
        SearchRequest(
            query=new_vector_query([0.8, 0.2, 0]),
            sort=(SortField(field=SCORE_FIELD, asc=False),),
            size=1,
            min_score=0.5,
        ),
    )

    assert response.ids == ["v2"]
    assert response.hits[0].score == pytest.approx(1.0)
    assert response.max_score == pytest.approx(1.0)


def test_vector_min_score_filters_and_max_score_uses_limited_set(store: DocumentStore) -> None:
    store.create("docs", "near", {"embedding": [1, 0]})
    store.create("docs", "mid", {"embedding": [1, 1]})
    store.create("docs", "far", {"embedding": [0, 1]})

    response = store.search(
        "docs",
        SearchRequest(
            query=new_vector_query([1, 0]),
            sort=(SortField(field=SCORE_FIELD, asc=True),),
            min_score=0.5,
            size=1,
        ),
    )

    assert response.ids == ["mid"]
    assert response.max_score == pytest.approx(1 / 2**0.5)


def test_delete_removes_document(seeded_store: DocumentStore) -> None:
    seeded_store.delete("docs", "b")
    seeded_store.delete("docs", "missing")
    seeded_store.delete("unknown-index", "a")

    assert sorted(seeded_store.search("docs").ids) == ["a", "c"]
    assert seeded_store.exists("unknown-index") is False


def test_update_replaces_whole_document(seeded_store: DocumentStore) -> None:
    seeded_store.update("docs", "a", {"category": "blog"})

    stored = seeded_store.get("docs", "a")
    assert stored is not None
    assert stored.attributes == {"category": "blog"}
    assert seeded_store.search(
        "docs", SearchRequest(query=new_contains_query("text_content", "world"))
    ).ids == []


def test_delete_index(seeded_store: DocumentStore) -> None:
    seeded_store.delete_index("docs")

    assert seeded_store.exists("docs") is False
    assert seeded_store.search("docs").hits == []


def test_unknown_index_search_is_empty(store: DocumentStore) -> None:
    assert store.search("nope", SearchRequest(query=new_equal_query("a", 1))).hits == []


def test_malformed_documents_are_kept_but_never_match_fields(store: DocumentStore) -> None:
    store.create("docs", "bad", b"{not json")
    store.create("docs", "list", [1, 2, 3])
    store.create("docs", "good", {"text_content": "ok"})

    assert sorted(store.search("docs").ids) == ["bad", "good", "list"]
    assert store.search(
        "docs", SearchRequest(query=new_contains_query("text_content", "o"))
    ).ids == ["good"]
    stored = store.get("docs", "bad")
    assert stored is not None and stored.source == "{not json"


def test_raw_json_text_is_stored_verbatim(store: DocumentStore) -> None:
    store.create("docs", "1", '{"text_content":  "spaced"}')
    assert store.search("docs").hits[0].source == '{"text_content":  "spaced"}'


def test_unserializable_document_raises(store: DocumentStore) -> None:
    with pytest.raises(DocumentEncodeError):
        store.create("docs", "1", {"when": object()})
    assert store.exists("docs") is False


def test_persistence_round_trip(snapshot_path: Path) -> None:
    first = DocumentStore(snapshot_path)
    first.create_index("docs")
    first.create("docs", "1", {"text_content": "persist me"})
    first.create_index("empty")

    second = DocumentStore(snapshot_path)

    assert second.exists("docs") is True
    assert second.exists("empty") is True
    response = second.search("docs", SearchRequest(query=LegacyContainsQuery(value="persist")))
    assert response.ids == ["1"]


def test_snapshot_is_pretty_printed_json(snapshot_path: Path) -> None:
    store = DocumentStore(snapshot_path)
    store.create("docs", "1", {"text_content": "hello"})

    text = snapshot_path.read_text()
    assert json.loads(text) == {"docs": {"1": {"text_content": "hello"}}}
    assert '\n  "docs": {' in text
    assert not snapshot_path.with_name(snapshot_path.name + ".tmp").exists()


def test_snapshot_reflects_deletes(snapshot_path: Path) -> None:
    store = DocumentStore(snapshot_path)
    store.create("docs", "1", {"a": 1})
    store.create("docs", "2", {"a": 2})
    store.delete("docs", "1")
    store.create("gone", "x", {})
    store.delete_index("gone")

    assert json.loads(snapshot_path.read_text()) == {"docs": {"2": {"a": 2}}}


def test_corrupt_snapshot_starts_empty(snapshot_path: Path) -> None:
    snapshot_path.parent.mkdir(parents=True)
    snapshot_path.write_text("{ definitely not json")

    store = DocumentStore(snapshot_path)

    assert store.list_indices() == []
    store.create("docs", "1", {"a": 1})
    assert json.loads(snapshot_path.read_text()) == {"docs": {"1": {"a": 1}}}


def test_snapshot_with_wrong_layout_starts_empty(snapshot_path: Path) -> None:
    snapshot_path.parent.mkdir(parents=True)
    snapshot_path.write_text(json.dumps({"docs": ["not", "a", "map"]}))

    assert DocumentStore(snapshot_path).list_indices() == []


def test_missing_parent_directory_is_created(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "deeper" / "lite.json"
    DocumentStore(path)
    assert path.parent.is_dir()


def test_snapshot_write_failure_keeps_mutation(snapshot_path: Path, monkeypatch, caplog) -> None:
    store = DocumentStore(snapshot_path)

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("litesearch.storage.snapshot.os.replace", broken_replace)
    with caplog.at_level("WARNING", logger="litesearch.storage.snapshot"):
        store.create("docs", "1", {"text_content": "kept"})

    assert store.search("docs").ids == ["1"]
    assert "Failed to write snapshot" in caplog.text


def test_store_without_path_does_not_persist(tmp_path: Path) -> None:
    store = DocumentStore(None)
    store.create("docs", "1", {"a": 1})

    assert store.path is None
    assert store.search("docs").ids == ["1"]
    assert list(tmp_path.iterdir()) == []


def test_snapshot_file_disabled_without_path() -> None:
    snapshot = SnapshotFile("")
    assert snapshot.enabled is False
    assert snapshot.load() == {}
    assert snapshot.save({"docs": {}}) is False


def test_bulk_indexer_commits_each_item(store: DocumentStore, snapshot_path: Path) -> None:
    store.create_index("docs")
    with store.new_bulk_indexer("docs") as indexer:
        indexer.add("3", json.dumps({"text_content": "HELLO from bulk"}).encode())
        assert json.loads(snapshot_path.read_text())["docs"]["3"] == {
            "text_content": "HELLO from bulk"
        }
        indexer.add("4", io.BytesIO(b'{"text_content": "from a stream"}'))
        indexer.add("5", None)

    assert indexer.added == 3
    assert store.search("docs", SearchRequest(query=LegacyContainsQuery(value="hello"))).ids == [
        "3"
    ]
    stored = store.get("docs", "5")
    assert stored is not None and stored.source == "null"


def test_bulk_indexer_reports_bad_items(store: DocumentStore) -> None:
    indexer = store.new_bulk_indexer("docs")
    indexer.add("ok", b'{"a": 1}')

    with pytest.raises(BulkIndexError) as excinfo:
        indexer.add("bad", b"{broken")
    assert excinfo.value.document_id == "bad"
    with pytest.raises(BulkIndexError):
        indexer.add("binary", b"\xff\xfe")

    indexer.close()
    assert store.search("docs").ids == ["ok"]


def test_types_returns_mapping_hints(store: DocumentStore) -> None:
    types = store.types()
    store.create_index(
        "docs",
        {"views": types.long_number_property(), "text_content": types.text_property()},
    )
    assert types.unsigned_long_number_property() == {"type": "unsigned_long"}
    assert store.exists("docs")


def test_noop_client_accepts_everything() -> None:
    client = NoopClient()
    client.create_index("docs")
    client.create("docs", "1", {"a": 1})
    indexer = client.new_bulk_indexer("docs")
    indexer.add("2", b"{}")
    indexer.close()

    assert client.exists("anything") is True
    assert client.search("docs").hits == []


def test_read_write_lock_blocks_writer_until_readers_leave() -> None:
    lock = ReadWriteLock()
    acquired = threading.Event()

    def writer() -> None:
        with lock.write_lock():
            acquired.set()

    with lock.read_lock():
        with lock.read_lock():
            thread = threading.Thread(target=writer)
            thread.start()
            assert not acquired.wait(0.1)
    thread.join(timeout=2)

    assert acquired.is_set()


def test_concurrent_writes_and_searches(store: DocumentStore) -> None:
    errors: list[Exception] = []

    def write(worker: int) -> None:
        try:
            for n in range(20):
                store.create("docs", f"{worker}-{n}", {"worker": worker, "n": n})
        except Exception as exc:
            errors.append(exc)

    def read() -> None:
        try:
            for _ in range(20):
                store.search("docs", SearchRequest(query=new_equal_query("worker", 1)))
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=write, args=(w,)) for w in range(3)]
    threads += [threading.Thread(target=read) for _ in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert store.count("docs") == 60
    assert len(store.search("docs", SearchRequest(query=new_equal_query("worker", 1))).hits) == 20


def test_integers_beyond_float_range_compare_without_error(store: DocumentStore) -> None:
    huge = "9" * 400
    store.create("docs", "big", '{"n": ' + huge + "}")
    store.create("docs", "small", {"n": 1})

    assert store.search("docs", SearchRequest(query=new_equal_query("n", 1))).ids == ["small"]
    assert store.search("docs", SearchRequest(query=new_in_query("n", [1, 2]))).ids == ["small"]
    assert store.search(
        "docs", SearchRequest(query=new_equal_query("n", int(huge)))
    ).ids == ["big"]
    ordered = store.search("docs", SearchRequest(sort=(SortField(field="n", asc=False),)))
    assert ordered.ids == ["big", "small"]


def test_non_utf8_bytes_are_stored_without_error(store: DocumentStore) -> None:
    store.create("docs", "bin", b"\xff\xfe{}")
    store.create("docs", "good", {"text_content": "ok"})

    stored = store.get("docs", "bin")
    assert stored is not None
    assert stored.attributes == {}
    assert sorted(store.search("docs").ids) == ["bin", "good"]
    assert store.search("docs", SearchRequest(query=LegacyContainsQuery(value="ok"))).ids == [
        "good"
    ]


def test_snapshot_reload_keeps_sources_verbatim(snapshot_path: Path) -> None:
    sources = {
        "text": "hello",
        "json_string": '"hello"',
        "spaced": '{"text_content":  "spaced"}',
        "lookalike": '{"$raw": "not a wrapper"}',
        "plain": '{"a": 1}',
    }
    first = DocumentStore(snapshot_path)
    for doc_id, source in sources.items():
        first.create("docs", doc_id, source)

    second = DocumentStore(snapshot_path)

    for doc_id, source in sources.items():
        stored = second.get("docs", doc_id)
        assert stored is not None and stored.source == source
    assert json.loads(snapshot_path.read_text())["docs"]["plain"] == {"a": 1}


def test_hit_document_decodes_json_and_keeps_other_text(store: DocumentStore) -> None:
    store.create("docs", "json", {"a": 1})
    store.create("docs", "text", "not json")

    documents = {hit.id: hit.document() for hit in store.search("docs").hits}

    assert documents == {"json": {"a": 1}, "text": "not json"}
