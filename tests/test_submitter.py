"""Tests for BatchSubmitter."""

from __future__ import annotations

import logging
from unittest.mock import Mock

from quizrag.errors import IndexingError
from quizrag.index.submitter import BatchResult, BatchSubmitter
from quizrag.models import Batch, Chunk


def _batch() -> Batch:
    return Batch((Chunk("GHIJ", 2, 6), Chunk("J", 3, 9)))


class TestBatchResult:
    """Test BatchResult."""

    def test_ok(self) -> None:
        assert BatchResult(start_index=0, size=2).ok
        assert not BatchResult(start_index=0, size=2, error=IndexingError("j", 0, 2, "x")).ok


class TestBatchSubmitter:
    """Test BatchSubmitter."""

    def test_submit_success(self, store) -> None:
        """Should call the store once with records for every chunk."""
        result = BatchSubmitter(store, "quiz-1").submit(_batch())

        assert result.ok
        assert result.start_index == 2
        assert result.size == 2
        assert len(store.calls) == 1
        assert [r.text for r in store.calls[0]] == ["GHIJ", "J"]

    def test_records_carry_metadata(self, store) -> None:
        """Records should carry job id and chunk position."""
        BatchSubmitter(store, "quiz-1").submit(_batch())

        record = store.calls[0][1]
        assert record.job_id == "quiz-1"
        assert record.index == 3
        assert record.metadata == {"job_id": "quiz-1", "sequence_index": 3, "start": 9}

    def test_submit_failure_is_contained(self, failing_store_factory, caplog) -> None:
        """Should return the error instead of raising, and log context."""
        store = failing_store_factory(fail_on=[0])

        with caplog.at_level(logging.ERROR, logger="quizrag.index.submitter"):
            result = BatchSubmitter(store, "quiz-7").submit(_batch())

        assert not result.ok
        assert isinstance(result.error, IndexingError)
        assert result.error.job_id == "quiz-7"
        assert result.error.start_index == 2
        assert result.error.size == 2
        assert isinstance(result.error.__cause__, ConnectionError)
        assert "quiz-7" in caplog.text
        assert "batch starting at 2" in caplog.text

    def test_no_retry(self) -> None:
        """Should attempt a failing batch only once."""
        store = Mock()
        store.add.side_effect = RuntimeError("boom")

        BatchSubmitter(store, "quiz-1").submit(_batch())

        store.add.assert_called_once()
