"""Command line interface for DocChunker."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from docchunker.chunking.dispatcher import chunk_document
from docchunker.config import AppConfig
from docchunker.ingestion.extractors import ExtractionError, UnsupportedFileType, extract_text
from docchunker.models import (
    ChunkingOptions,
    ChunkingResult,
    DocumentInfo,
    InvalidChunkingOptions,
    SplittingMethod,
)
from docchunker.storage.chunks import ChunkStore, ChunkStoreError
from docchunker.utils.files import compute_sha256, guess_mimetype
from docchunker.web.app import app as web_app


console = Console()
app = typer.Typer(help="DocChunker - split documents into annotated text chunks")

METHOD_HELP = "Splitting method: " + ", ".join(method.value for method in SplittingMethod)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _ensure_db_parent(db_path: Path) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)


def _build_options(method: str, chunk_size: int, overlap: int) -> ChunkingOptions:
    options = ChunkingOptions(
        chunk_size=chunk_size,
        chunk_overlap=overlap,
        method=SplittingMethod.parse(method),
    )
    try:
        options.validate()
    except InvalidChunkingOptions as exc:
        flag = "--chunk-size" if exc.field == "chunk_size" else "--overlap"
        raise typer.BadParameter(exc.message, param_hint=flag) from exc
    return options


def _chunk_file(path: Path, options: ChunkingOptions) -> ChunkingResult:
    mimetype = guess_mimetype(path)
    try:
        extraction = extract_text(path.read_bytes(), mimetype, path.name)
    except (UnsupportedFileType, ExtractionError) as exc:
        raise typer.BadParameter(str(exc), param_hint="FILE") from exc

    document = DocumentInfo(
        file_id=compute_sha256(path),
        file_name=path.name,
        file_type=extraction.file_type,
        uploaded_at=datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc),
    )
    return chunk_document(
        extraction.text,
        document,
        options,
        page_starts=extraction.page_starts,
        confidence=extraction.confidence,
    )


def _print_result(result: ChunkingResult, limit: int) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#")
    table.add_column("Chars")
    table.add_column("Words")
    table.add_column("Language")
    table.add_column("Span")
    table.add_column("Snippet")

    for chunk in result.chunks[:limit]:
        snippet = chunk.text.replace("\n", " ")
        language = chunk.metadata.language.value if chunk.metadata.language else "-"
        table.add_row(
            str(chunk.index),
            str(chunk.character_count),
            str(chunk.word_count),
            language,
            f"{chunk.start_index}-{chunk.end_index}",
            snippet[:120],
        )

    console.print(table)
    if len(result.chunks) > limit:
        console.print(f"[dim]... {len(result.chunks) - limit} more chunks[/dim]")

    stats = result.statistics
    console.print(
        f"Chunks: {stats.total_chunks}, characters: {stats.total_characters}, "
        f"words: {stats.total_words}, avg size: {stats.average_chunk_size:.1f}, "
        f"languages: {', '.join(stats.languages) or '-'}"
    )


@app.command()
def chunk(
    path: Path = typer.Argument(
        ..., help="Document to chunk (PDF, text or image).", exists=True, dir_okay=False
    ),
    method: str = typer.Option(AppConfig().method, "--method", "-m", help=METHOD_HELP),
    chunk_size: int = typer.Option(AppConfig().chunk_size, help="Chunk size in characters"),
    overlap: int = typer.Option(AppConfig().chunk_overlap, help="Chunk overlap"),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
    show: int = typer.Option(20, help="Number of chunks to preview"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Split a document into chunks and preview them."""
    _setup_logging(verbose)
    options = _build_options(method, chunk_size, overlap)
    result = _chunk_file(path, options)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return

    if not result.chunks:
        console.print("[yellow]No text found in document.[/yellow]")
        return
    _print_result(result, show)


@app.command()
def save(
    path: Path = typer.Argument(
        ..., help="Document to chunk and store.", exists=True, dir_okay=False
    ),
    table_name: str = typer.Option(..., "--table", "-t", help="Chunk table name"),
    description: Optional[str] = typer.Option(None, help="Table description"),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
    method: str = typer.Option(AppConfig().method, "--method", "-m", help=METHOD_HELP),
    chunk_size: int = typer.Option(AppConfig().chunk_size, help="Chunk size in characters"),
    overlap: int = typer.Option(AppConfig().chunk_overlap, help="Chunk overlap"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Chunk a document and save the chunks into a table."""
    _setup_logging(verbose)
    options = _build_options(method, chunk_size, overlap)
    config = AppConfig(db_path=db if db is not None else AppConfig().db_path)
    resolved_db = config.resolve_db_path(Path.cwd())

    result = _chunk_file(path, options)
    if not result.chunks:
        console.print("[yellow]No text found in document, nothing saved.[/yellow]")
        return

    _ensure_db_parent(resolved_db)
    store = ChunkStore(resolved_db)
    try:
        table = store.create_table(table_name, description)
        saved = store.save_chunks(table.name, [c.to_dict() for c in result.chunks])
    except ChunkStoreError as exc:
        raise typer.BadParameter(str(exc), param_hint="--table") from exc
    finally:
        store.close()

    console.print(f"Saved {saved} chunks to [bold]{table.name}[/bold] in {resolved_db}")


@app.command()
def tables(
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
) -> None:
    """List chunk tables."""
    config = AppConfig(db_path=db if db is not None else AppConfig().db_path)
    resolved_db = config.resolve_db_path(Path.cwd())

    if not resolved_db.exists():
        console.print("[yellow]Database not found, no tables yet.[/yellow]")
        return

    store = ChunkStore(resolved_db)
    try:
        rows = store.list_tables()
    finally:
        store.close()

    if not rows:
        console.print("[yellow]No chunk tables.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Name")
    table.add_column("Chunks")
    table.add_column("Description")
    table.add_column("Updated")
    for row in rows:
        table.add_row(row.name, str(row.chunk_count), row.description or "", row.updated_at)
    console.print(table)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
) -> None:
    """Start the HTTP API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    console.print(f"Starting web API on http://{host}:{port}")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":  # pragma: no cover
    app()
