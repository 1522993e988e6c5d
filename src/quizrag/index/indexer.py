"""Background chunk-and-index pipeline."""

from __future__ import annotations

import functools
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from dataclasses import dataclass, field
from typing import List

from quizrag.errors import EmptyInputError, IndexerClosedError
from quizrag.index.batcher import batch_chunks, validate_batch_size
from quizrag.index.storage import VectorStore
from quizrag.index.submitter import BatchResult, BatchSubmitter
from quizrag.models import ChunkingConfig, IndexingJob
from quizrag.utils.text import ChunkSequence

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class IndexStats:
    job_id: str
    chunks_indexed: int = 0
    batches_submitted: int = 0
    batches_failed: int = 0
    failed_batch_starts: List[int] = field(default_factory=list)
    elapsed_ms: int = 0

    def record(self, result: BatchResult) -> None:
        if result.ok:
            self.batches_submitted += 1
            self.chunks_indexed += result.size
        else:
            self.batches_failed += 1
            self.failed_batch_starts.append(result.start_index)

    @property
    def batches_attempted(self) -> int:
        return self.batches_submitted + self.batches_failed


class Indexer:
    """Runs chunk -> batch -> submit for each ingested document.

    ``index_async`` validates its arguments on the caller's thread and then
    hands the job to a worker pool; the caller gets nothing back and all
    outcomes are reported through logging. Batches of one job are submitted
    in order, one at a time. Separate jobs may run side by side when
    ``max_workers`` is greater than one.
    """

    def __init__(self, store: VectorStore, *, max_workers: int = 1) -> None:
        self.store = store
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="quizrag-index"
        )
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    def __enter__(self) -> "Indexer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown(wait=True)

    def index_async(
        self, job_id: str, text: str, config: ChunkingConfig, batch_size: int
    ) -> None:
        """Schedule a document for background indexing and return immediately."""
        if not text or not text.strip():
            raise EmptyInputError(f"job {job_id}: document has no text to index")
        validate_batch_size(batch_size)

        job = IndexingJob(job_id=job_id, text=text)
        try:
            future = self._executor.submit(self.run, job, config, batch_size)
        except RuntimeError as exc:
            raise IndexerClosedError(f"job {job_id}: indexer has been shut down") from exc
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(functools.partial(self._on_done, job_id))
        LOGGER.info("Queued vector indexing for job %s", job_id)

    def run(self, job: IndexingJob, config: ChunkingConfig, batch_size: int) -> IndexStats:
        """Index one job synchronously; every batch is attempted exactly once."""
        t0 = time.perf_counter()
        LOGGER.info(
            "Start vector indexing for job %s (%s chars, window %s, overlap %s, batch %s)",
            job.job_id,
            len(job.text),
            config.window_size,
            config.overlap,
            batch_size,
        )

        stats = IndexStats(job_id=job.job_id)
        submitter = BatchSubmitter(self.store, job.job_id)
        for batch in batch_chunks(ChunkSequence(job.text, config), batch_size):
            stats.record(submitter.submit(batch))

        stats.elapsed_ms = int((time.perf_counter() - t0) * 1000)
        LOGGER.info(
            "Vector indexing finished for job %s: %s chunks in %s batches, %s failed, %s ms",
            job.job_id,
            stats.chunks_indexed,
            stats.batches_attempted,
            stats.batches_failed,
            stats.elapsed_ms,
        )
        if stats.failed_batch_starts:
            LOGGER.warning(
                "Job %s needs re-indexing for batches starting at chunks %s",
                job.job_id,
                stats.failed_batch_starts,
            )
        return stats

    def _on_done(self, job_id: str, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
        if future.cancelled():
            LOGGER.warning("Vector indexing for job %s was cancelled before it started", job_id)
            return
        exc = future.exception()
        if exc is not None:
            LOGGER.error("Vector indexing crashed for job %s", job_id, exc_info=exc)

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until every scheduled job has finished; False on timeout."""
        with self._lock:
            futures = list(self._pending)
        _, not_done = wait_futures(futures, timeout=timeout)
        return not not_done

    def shutdown(self, *, wait: bool = True) -> None:
        """Stop accepting jobs; without ``wait`` queued jobs are abandoned."""
        self._executor.shutdown(wait=wait, cancel_futures=not wait)
