"""Command line interface for quizrag."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.table import Table

from quizrag.config import AppConfig
from quizrag.embedding.encoder import EmbeddingConfig, EmbeddingModel
from quizrag.errors import ConfigurationError, EmptyInputError, ExtractionError
from quizrag.index.indexer import Indexer
from quizrag.index.storage import SQLiteVectorStore
from quizrag.ingestion.service import IngestService
from quizrag.utils.files import iter_document_paths


console = Console()
app = typer.Typer(help="quizrag - chunk documents and index them for quiz generation")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _ensure_db_parent(db_path: Path) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)


def _resolve_db(db: Path | None) -> Path:
    config = AppConfig(db_path=db if db is not None else AppConfig().db_path)
    return config.resolve_db_path(Path.cwd())


@app.command()
def ingest(
    inputs: List[Path] = typer.Argument(
        ..., help="Files or folders with PDF/DOCX/TXT/MD documents.", resolve_path=True
    ),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
    model: str = typer.Option(AppConfig().model_name, help="Sentence-transformer model name"),
    window_size: int = typer.Option(AppConfig().window_size, help="Chunk size in characters"),
    overlap: int = typer.Option(AppConfig().overlap, help="Characters shared by neighbouring chunks"),
    batch_size: int = typer.Option(AppConfig().batch_size, help="Chunks per vector store call"),
    workers: int = typer.Option(AppConfig().max_workers, help="Documents indexed in parallel"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Ingest documents and index their chunks in the background."""
    _setup_logging(verbose)
    config = AppConfig(
        db_path=db if db is not None else AppConfig().db_path,
        model_name=model,
        window_size=window_size,
        overlap=overlap,
        batch_size=batch_size,
        max_workers=workers,
    )
    try:
        config.validate()
    except ConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    paths = list(iter_document_paths(inputs))
    if not paths:
        console.print("[yellow]No documents found.[/yellow]")
        return

    resolved_db = config.resolve_db_path(Path.cwd())
    _ensure_db_parent(resolved_db)

    embedder = EmbeddingModel(EmbeddingConfig(model_name=config.model_name))
    store = SQLiteVectorStore(resolved_db, embedder=embedder)
    indexer = Indexer(store, max_workers=config.max_workers)
    service = IngestService(indexer, config)

    console.print(f"Indexing into [bold]{resolved_db}[/bold]...")
    job_ids: list[str] = []
    try:
        for path in paths:
            try:
                job = service.ingest_file(path)
            except (EmptyInputError, ExtractionError) as exc:
                console.print(f"[yellow]Skipped {path}: {exc}[/yellow]")
                continue
            job_ids.append(job.job_id)
        indexer.wait()

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Job")
        table.add_column("Chunks", justify="right")
        for job_id in job_ids:
            table.add_row(job_id, str(store.count_chunks(job_id)))
        console.print(table)
    finally:
        indexer.shutdown(wait=True)
        store.close()


@app.command()
def jobs(
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
) -> None:
    """List indexed jobs."""
    resolved_db = _resolve_db(db)
    if not resolved_db.exists():
        console.print("[yellow]Database not found, nothing indexed yet.[/yellow]")
        return

    store = SQLiteVectorStore(resolved_db)
    try:
        rows = store.list_jobs()
    finally:
        store.close()
    if not rows:
        console.print("[yellow]No jobs indexed.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Job")
    table.add_column("Chunks", justify="right")
    table.add_column("Characters", justify="right")
    table.add_column("Indexed at")
    for row in rows:
        table.add_row(
            row["job_id"], str(row["chunk_count"]), str(row["total_chars"]), str(row["indexed_at"])
        )
    console.print(table)


@app.command()
def forget(
    job_id: str = typer.Argument(..., help="Job id as shown by `quizrag jobs`"),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
) -> None:
    """Remove every indexed chunk of a job."""
    resolved_db = _resolve_db(db)
    if not resolved_db.exists():
        console.print("[yellow]Database not found, nothing to remove.[/yellow]")
        return

    store = SQLiteVectorStore(resolved_db)
    try:
        removed = store.delete_job(job_id)
    finally:
        store.close()
    console.print(f"Removed {removed} chunks for job {job_id}.")
