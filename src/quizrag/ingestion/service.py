"""Document ingestion entry point."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from quizrag.config import AppConfig
from quizrag.errors import EmptyInputError
from quizrag.index.indexer import Indexer
from quizrag.ingestion.extractor import extract_text
from quizrag.models import IndexingJob
from quizrag.utils.files import compute_sha256

LOGGER = logging.getLogger(__name__)


def job_id_for(path: Path) -> str:
    """Correlation id that stays stable for identical file content."""
    return f"{path.stem}-{compute_sha256(path)[:12]}"


class IngestService:
    """Extracts text and hands it to the indexer without waiting for it."""

    def __init__(self, indexer: Indexer, config: AppConfig | None = None) -> None:
        self.indexer = indexer
        self.config = config or AppConfig()
        self.config.validate()

    def ingest_text(self, job_id: str, text: str, *, source: str | None = None) -> IndexingJob:
        if not text or not text.strip():
            raise EmptyInputError(f"Document {source or job_id} doesn't have content")

        self.indexer.index_async(
            job_id, text, self.config.chunking_config(), self.config.batch_size
        )
        return IndexingJob(job_id=job_id, text=text, source=source)

    def ingest_file(self, path: Path) -> IndexingJob:
        t0 = time.perf_counter()
        path = Path(path)
        text = extract_text(path)
        LOGGER.info(
            "Extracted %s chars from %s in %d ms",
            len(text),
            path,
            (time.perf_counter() - t0) * 1000,
        )
        return self.ingest_text(job_id_for(path), text, source=str(path))
