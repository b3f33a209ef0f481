import json
from pathlib import Path
from typing import Annotated, Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typer import Argument, Exit, Option, Typer

from .exceptions import BulkIndexError, DocumentEncodeError
from .models import SearchResponseModel
from .search import SearchRequest, parse_predicate, parse_sort_field
from .search_config import configure_logging, resolve_snapshot_path
from .storage import DocumentStore

app = Typer(help="Embedded JSON document index with structured queries.")
console = Console()

DbPathOption = Annotated[
    Optional[str],
    Option(
        "--db-path",
        help="Snapshot file path. Defaults to SEARCH_URI or ./var/data/litesearch/lite.json.",
    ),
]


@app.callback()
def main(
    log_level: Annotated[
        Optional[str], Option("--log-level", help="Logging level, e.g. INFO or DEBUG.")
    ] = None,
) -> None:
    configure_logging(log_level)


def open_store(db_path: str | None) -> DocumentStore:
    return DocumentStore(resolve_snapshot_path(db_path))


def _load_json(raw: str, *, what: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        console.print(f"[bold red]Invalid {what} JSON:[/] {escape(str(exc))}")
        raise Exit(code=2)


@app.command("create-index")
def create_index(
    index: Annotated[str, Argument(help="Index name.")],
    db_path: DbPathOption = None,
) -> None:
    """Create an index (existing documents are kept)."""
    open_store(db_path).create_index(index)
    console.print(f"Created index [bold]{escape(index)}[/]")


@app.command("delete-index")
def delete_index(
    index: Annotated[str, Argument(help="Index name.")],
    db_path: DbPathOption = None,
) -> None:
    """Delete an index and all its documents."""
    open_store(db_path).delete_index(index)
    console.print(f"Deleted index [bold]{escape(index)}[/]")


@app.command()
def exists(
    index: Annotated[str, Argument(help="Index name.")],
    db_path: DbPathOption = None,
) -> None:
    """Exit with status 0 if the index exists, 1 otherwise."""
    found = open_store(db_path).exists(index)
    console.print("true" if found else "false")
    if not found:
        raise Exit(code=1)


@app.command()
def put(
    index: Annotated[str, Argument(help="Index name.")],
    doc_id: Annotated[str, Argument(help="Document id.")],
    document: Annotated[str, Argument(help="Document as a JSON string.")],
    db_path: DbPathOption = None,
) -> None:
    """Create or replace a document."""
    payload = _load_json(document, what="document")
    try:
        open_store(db_path).create(index, doc_id, payload)
    except DocumentEncodeError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/]")
        raise Exit(code=2)
    console.print(f"Stored [bold]{escape(doc_id)}[/] in [bold]{escape(index)}[/]")


@app.command()
def delete(
    index: Annotated[str, Argument(help="Index name.")],
    doc_id: Annotated[str, Argument(help="Document id.")],
    db_path: DbPathOption = None,
) -> None:
    """Delete a document; unknown ids are ignored."""
    open_store(db_path).delete(index, doc_id)
    console.print(f"Deleted [bold]{escape(doc_id)}[/] from [bold]{escape(index)}[/]")


@app.command()
def bulk(
    index: Annotated[str, Argument(help="Index name.")],
    file: Annotated[
        Path, Argument(help='JSON Lines file, one {"id": ..., "doc": ...} per line.')
    ],
    db_path: DbPathOption = None,
) -> None:
    """Index every line of a JSON Lines file."""
    if not file.is_file():
        console.print(f"[bold red]No such file:[/] {escape(str(file))}")
        raise Exit(code=2)

    store = open_store(db_path)
    failures: list[str] = []
    with store.new_bulk_indexer(index) as indexer:
        for line_number, line in enumerate(file.read_text(encoding="utf-8").splitlines(), 1):
            if not line.strip():
                continue
            try:
                item = json.loads(line)
                doc_id = str(item["id"])
                body = json.dumps(item.get("doc"))
            except (ValueError, KeyError, TypeError) as exc:
                failures.append(f"line {line_number}: {exc}")
                continue
            try:
                indexer.add(doc_id, body)
            except BulkIndexError as exc:
                failures.append(f"line {line_number}: {exc}")

    console.print(f"Indexed [bold]{indexer.added}[/] documents into [bold]{escape(index)}[/]")
    for failure in failures:
        console.print(f"[red]{escape(failure)}[/]")
    if failures:
        raise Exit(code=1)


@app.command()
def search(
    index: Annotated[str, Argument(help="Index name.")],
    query: Annotated[
        Optional[str], Option("--query", "-q", help="Query tree as JSON. Omit to match all.")
    ] = None,
    sort: Annotated[
        Optional[list[str]],
        Option("--sort", "-s", help="Sort key `field[:asc|desc]`; repeatable."),
    ] = None,
    size: Annotated[Optional[int], Option("--size", "-n", help="Maximum hits.")] = None,
    min_score: Annotated[
        Optional[float], Option("--min-score", help="Minimum vector similarity.")
    ] = None,
    as_json: Annotated[bool, Option("--json", help="Print raw JSON.")] = False,
    db_path: DbPathOption = None,
) -> None:
    """Search an index."""
    raw_query = _load_json(query, what="query") if query else None
    try:
        request = SearchRequest(
            query=parse_predicate(raw_query),
            sort=tuple(parse_sort_field(item) for item in sort or []),
            size=size,
            min_score=min_score,
        )
    except ValueError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/]")
        raise Exit(code=2)

    response = open_store(db_path).search(index, request)

    if as_json:
        console.out(SearchResponseModel.from_response(response).model_dump_json(), highlight=False)
        return

    table = Table(title=f"{escape(index)}: {len(response.hits)} hits")
    table.add_column("id", style="bold")
    table.add_column("score", justify="right")
    table.add_column("source", overflow="fold")
    for hit in response.hits:
        score = f"{hit.score:.4f}" if hit.score is not None else "-"
        table.add_row(escape(hit.id), score, escape(hit.source))
    console.print(table)


@app.command()
def serve(
    host: Annotated[str, Option("--host", help="Interface to bind.")] = "127.0.0.1",
    port: Annotated[int, Option("--port", help="Port to listen on.")] = 8000,
) -> None:
    """Serve the HTTP API."""
    from .server import run_server

    console.print(f"Serving on [bold]http://{host}:{port}[/]")
    run_server(host=host, port=port)
