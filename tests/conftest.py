"""Shared fixtures."""

from __future__ import annotations

import threading
from typing import List, Sequence

import pytest

from quizrag.models import ChunkRecord


class RecordingStore:
    """Vector store stub that records every add() call.

    Calls whose position (0-based) is listed in ``fail_on`` raise instead of
    storing anything.
    """

    def __init__(self, fail_on: Sequence[int] = ()) -> None:
        self.fail_on = set(fail_on)
        self.calls: List[List[ChunkRecord]] = []
        self.stored: List[ChunkRecord] = []
        self.lock = threading.Lock()

    def add(self, records: Sequence[ChunkRecord]) -> None:
        with self.lock:
            position = len(self.calls)
            self.calls.append(list(records))
        if position in self.fail_on:
            raise ConnectionError(f"store unavailable for call {position}")
        with self.lock:
            self.stored.extend(records)


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def failing_store_factory():
    return RecordingStore
