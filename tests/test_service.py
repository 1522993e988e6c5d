"""Tests for IngestService."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from quizrag.config import AppConfig
from quizrag.errors import ConfigurationError, EmptyInputError
from quizrag.index.indexer import Indexer
from quizrag.ingestion.service import IngestService, job_id_for
from quizrag.models import ChunkingConfig


class TestIngestText:
    """Test ingest_text."""

    def test_schedules_indexing(self) -> None:
        indexer = Mock()
        service = IngestService(indexer, AppConfig(window_size=4, overlap=1, batch_size=2))

        job = service.ingest_text("quiz-1", "ABCDEFGHIJ")

        indexer.index_async.assert_called_once_with(
            "quiz-1", "ABCDEFGHIJ", ChunkingConfig(window_size=4, overlap=1), 2
        )
        assert job.job_id == "quiz-1"

    @pytest.mark.parametrize("text", ["", "  \n "])
    def test_blank_text_never_starts_indexer(self, text: str) -> None:
        indexer = Mock()
        service = IngestService(indexer)

        with pytest.raises(EmptyInputError):
            service.ingest_text("quiz-1", text)

        indexer.index_async.assert_not_called()

    def test_blank_text_store_untouched(self, store) -> None:
        """Scenario: blank text leaves the store without calls."""
        indexer = Indexer(store)
        service = IngestService(indexer)

        with pytest.raises(EmptyInputError):
            service.ingest_text("quiz-1", "   ")
        indexer.shutdown(wait=True)

        assert store.calls == []

    def test_invalid_config_rejected_up_front(self) -> None:
        with pytest.raises(ConfigurationError):
            IngestService(Mock(), AppConfig(window_size=10, overlap=10))
        with pytest.raises(ConfigurationError):
            IngestService(Mock(), AppConfig(batch_size=0))

    def test_end_to_end(self, store) -> None:
        """Text should land in the store batch by batch."""
        with Indexer(store) as indexer:
            IngestService(indexer, AppConfig(window_size=4, overlap=1, batch_size=2)).ingest_text(
                "quiz-1", "ABCDEFGHIJ"
            )

        assert [[r.text for r in call] for call in store.calls] == [
            ["ABCD", "DEFG"],
            ["GHIJ", "J"],
        ]


class TestIngestFile:
    """Test ingest_file."""

    def test_job_id_stable_for_same_content(self, tmp_path: Path) -> None:
        a = tmp_path / "a" / "notes.txt"
        b = tmp_path / "b" / "notes.txt"
        a.parent.mkdir()
        b.parent.mkdir()
        a.write_text("same content")
        b.write_text("same content")

        assert job_id_for(a) == job_id_for(b)
        assert job_id_for(a).startswith("notes-")

    def test_ingest_file(self, tmp_path: Path) -> None:
        path = tmp_path / "chapter.txt"
        path.write_text("The cell cycle has four phases.")
        indexer = Mock()

        job = IngestService(indexer).ingest_file(path)

        assert job.source == str(path)
        assert job.job_id == job_id_for(path)
        args = indexer.index_async.call_args[0]
        assert args[1] == "The cell cycle has four phases."

    @patch("quizrag.ingestion.service.extract_text", return_value="\n\n")
    def test_empty_file(self, mock_extract: Mock, tmp_path: Path) -> None:
        path = tmp_path / "scan.pdf"
        path.write_bytes(b"dummy")
        indexer = Mock()

        with pytest.raises(EmptyInputError):
            IngestService(indexer).ingest_file(path)

        indexer.index_async.assert_not_called()
