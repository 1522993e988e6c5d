"""Error types raised by the ingestion and indexing pipeline."""

from __future__ import annotations


class QuizRagError(Exception):
    """Base class for all quizrag errors."""


class ConfigurationError(QuizRagError, ValueError):
    """Invalid chunking or batching parameters."""


class EmptyInputError(QuizRagError, ValueError):
    """Raised when a document has no text worth indexing."""


class ExtractionError(QuizRagError):
    """Raised when text cannot be extracted from an uploaded file."""


class IndexingError(QuizRagError):
    """A single batch could not be written to the vector store.

    Carries enough context to re-index the batch by hand.
    """

    def __init__(self, job_id: str, start_index: int, size: int, detail: str) -> None:
        super().__init__(
            f"job {job_id}: batch starting at chunk {start_index} ({size} chunks) failed: {detail}"
        )
        self.job_id = job_id
        self.start_index = start_index
        self.size = size
        self.detail = detail


class IndexerClosedError(QuizRagError, RuntimeError):
    """Raised when a job is submitted to an indexer that has been shut down."""
