"""Write batches to the vector store, one call per batch."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from quizrag.errors import IndexingError
from quizrag.index.storage import VectorStore
from quizrag.models import Batch, ChunkRecord

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class BatchResult:
    start_index: int
    size: int
    error: IndexingError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BatchSubmitter:
    """Submits the batches of a single job to a vector store.

    A failing batch is logged and reported in the returned ``BatchResult``;
    it never raises, so the caller can move on to the next batch. Each batch
    is attempted once.
    """

    def __init__(self, store: VectorStore, job_id: str) -> None:
        self.store = store
        self.job_id = job_id

    def to_records(self, batch: Batch) -> list[ChunkRecord]:
        return [
            ChunkRecord(
                job_id=self.job_id,
                index=chunk.sequence_index,
                text=chunk.text,
                metadata={
                    "job_id": self.job_id,
                    "sequence_index": chunk.sequence_index,
                    "start": chunk.start,
                },
            )
            for chunk in batch
        ]

    def submit(self, batch: Batch) -> BatchResult:
        start_index = batch.start_index
        try:
            self.store.add(self.to_records(batch))
        except Exception as exc:
            error = IndexingError(self.job_id, start_index, len(batch), str(exc))
            error.__cause__ = exc
            LOGGER.exception(
                "Vector indexing failed for job %s, batch starting at %s (%s chunks)",
                self.job_id,
                start_index,
                len(batch),
            )
            return BatchResult(start_index=start_index, size=len(batch), error=error)

        LOGGER.debug(
            "Indexed job %s batch starting at %s (%s chunks)", self.job_id, start_index, len(batch)
        )
        return BatchResult(start_index=start_index, size=len(batch))
