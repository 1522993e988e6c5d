"""Vector store capability and its SQLite implementation."""

from __future__ import annotations

import json
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, List, Protocol, Sequence

import numpy as np

from quizrag.models import ChunkRecord

if TYPE_CHECKING:
    from quizrag.embedding.encoder import EmbeddingModel


class VectorStore(Protocol):
    """Anything that can index a batch of chunk records."""

    def add(self, records: Sequence[ChunkRecord]) -> None: ...


class SQLiteVectorStore:
    """Persists chunk text, metadata and embeddings in SQLite.

    The connection is shared with indexing worker threads; writes are
    serialised through an internal lock.
    """

    def __init__(self, db_path: Path, *, embedder: EmbeddingModel | None = None) -> None:
        self.db_path = Path(db_path)
        self.embedder = embedder
        self._lock = threading.RLock()
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.execute("PRAGMA synchronous=NORMAL;")
        self._ensure_schema()

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                yield self._conn
                self._conn.commit()
            except Exception:
                self._conn.rollback()
                raise

    def _ensure_schema(self) -> None:
        with self.transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS chunks (
                    id INTEGER PRIMARY KEY,
                    job_id TEXT NOT NULL,
                    chunk_index INTEGER NOT NULL,
                    text TEXT NOT NULL,
                    metadata TEXT,
                    embedding BLOB NOT NULL,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
            conn.execute(
                """CREATE INDEX IF NOT EXISTS idx_chunks_job_id
                    ON chunks(job_id)
                """
            )

    def add(self, records: Sequence[ChunkRecord]) -> None:
        """Embed and insert a batch of records in a single transaction."""
        if not records:
            return
        if self.embedder is None:
            raise RuntimeError("SQLiteVectorStore needs an embedder to add records")

        embeddings = self.embedder.embed([record.text for record in records])
        if embeddings.shape[0] != len(records):
            raise ValueError("Embeddings and records length mismatch")

        with self.transaction() as conn:
            conn.executemany(
                """
                INSERT INTO chunks(job_id, chunk_index, text, metadata, embedding)
                VALUES (?, ?, ?, ?, ?)
                """,
                [
                    (
                        record.job_id,
                        record.index,
                        record.text,
                        json.dumps(record.metadata, ensure_ascii=True),
                        sqlite3.Binary(np.asarray(vector, dtype="float32").tobytes()),
                    )
                    for record, vector in zip(records, embeddings)
                ],
            )

    def count_chunks(self, job_id: str | None = None) -> int:
        with self._lock:
            if job_id is None:
                row = self._conn.execute("SELECT COUNT(*) AS n FROM chunks").fetchone()
            else:
                row = self._conn.execute(
                    "SELECT COUNT(*) AS n FROM chunks WHERE job_id = ?", (job_id,)
                ).fetchone()
        return int(row["n"])

    def list_jobs(self) -> List[dict]:
        """Return one summary row per indexed job, oldest first."""
        with self._lock:
            rows = self._conn.execute(
                """
                SELECT job_id,
                       COUNT(*) AS chunk_count,
                       SUM(LENGTH(text)) AS total_chars,
                       MIN(created_at) AS indexed_at
                FROM chunks
                GROUP BY job_id
                ORDER BY MIN(id)
                """
            ).fetchall()
        return [
            {
                "job_id": row["job_id"],
                "chunk_count": row["chunk_count"],
                "total_chars": row["total_chars"] or 0,
                "indexed_at": row["indexed_at"],
            }
            for row in rows
        ]

    def delete_job(self, job_id: str) -> int:
        """Remove every chunk of a job and return how many were deleted."""
        with self.transaction() as conn:
            cursor = conn.execute("DELETE FROM chunks WHERE job_id = ?", (job_id,))
        return cursor.rowcount
