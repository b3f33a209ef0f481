"""
FastAPI server exposing the embedded search store over HTTP.

Every endpoint accepts an optional ``db_path`` query parameter; without it
the snapshot location comes from SEARCH_URI or the default path.
"""

import json
from typing import Any

from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .exceptions import BulkIndexError, PredicateParseError
from .models import BulkItem, SearchRequestModel, SearchResponseModel
from .search import decode_source
from .search_config import configure_logging, resolve_snapshot_path
from .storage import DocumentStore

app = FastAPI(title="litesearch", description="Embedded JSON document search")

_stores: dict[str, DocumentStore] = {}


def _get_store(db_path: str | None) -> DocumentStore:
    """Return the shared store for a snapshot path, opening it on first use."""
    resolved = resolve_snapshot_path(db_path)
    if resolved not in _stores:
        _stores[resolved] = DocumentStore(resolved)
    return _stores[resolved]


class CreateIndexRequest(BaseModel):
    """Optional mapping hints; accepted and not enforced."""

    properties: dict[str, Any] | None = None


class BulkRequest(BaseModel):
    """Request model for bulk indexing."""

    items: list[BulkItem]


@app.put("/api/indices/{index}")
async def create_index(index: str, request: CreateIndexRequest | None = None, db_path: str | None = None):
    """Create an index if it does not exist."""
    try:
        properties = request.properties if request is not None else None
        _get_store(db_path).create_index(index, properties)
        return {"index": index, "acknowledged": True}
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)


@app.get("/api/indices/{index}")
async def index_exists(index: str, db_path: str | None = None):
    """Report whether an index exists and how many documents it holds."""
    try:
        store = _get_store(db_path)
        return {"index": index, "exists": store.exists(index), "count": store.count(index)}
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)


@app.delete("/api/indices/{index}")
async def delete_index(index: str, db_path: str | None = None):
    """Delete an index and its documents."""
    try:
        _get_store(db_path).delete_index(index)
        return {"index": index, "acknowledged": True}
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)


@app.put("/api/indices/{index}/documents/{doc_id}")
async def put_document(index: str, doc_id: str, document: Any = Body(...), db_path: str | None = None):
    """Create or replace a document."""
    try:
        _get_store(db_path).create(index, doc_id, json.dumps(document))
        return {"index": index, "id": doc_id, "acknowledged": True}
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)


@app.get("/api/indices/{index}/documents/{doc_id}")
async def get_document(index: str, doc_id: str, db_path: str | None = None):
    """Fetch a stored document."""
    try:
        stored = _get_store(db_path).get(index, doc_id)
        if stored is None:
            return JSONResponse({"error": "Document not found"}, status_code=404)
        return {"index": index, "id": stored.id, "source": decode_source(stored.source)}
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)


@app.delete("/api/indices/{index}/documents/{doc_id}")
async def delete_document(index: str, doc_id: str, db_path: str | None = None):
    """Delete a document; unknown ids succeed."""
    try:
        _get_store(db_path).delete(index, doc_id)
        return {"index": index, "id": doc_id, "acknowledged": True}
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)


@app.post("/api/indices/{index}/bulk")
async def bulk_index(index: str, request: BulkRequest, db_path: str | None = None):
    """Index a batch of documents, committing each item as it arrives."""
    try:
        errors: list[dict[str, str]] = []
        with _get_store(db_path).new_bulk_indexer(index) as indexer:
            for item in request.items:
                try:
                    indexer.add(item.id, json.dumps(item.doc))
                except BulkIndexError as exc:
                    errors.append({"id": item.id, "error": str(exc)})
        return {"index": index, "indexed": indexer.added, "errors": errors}
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)


@app.post("/api/indices/{index}/search")
async def search_index(index: str, request: SearchRequestModel, db_path: str | None = None):
    """Search an index and return hits with scores."""
    try:
        search_request = request.to_request()
    except PredicateParseError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    try:
        response = _get_store(db_path).search(index, search_request)
        return SearchResponseModel.from_response(response).model_dump()
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)



def run_server(host: str = "127.0.0.1", port: int = 8000):
    """Run the FastAPI server."""
    import uvicorn

    configure_logging()
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()