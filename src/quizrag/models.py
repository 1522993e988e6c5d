"""Core quizrag data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Tuple

from quizrag.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class Chunk:
    """Contiguous window of source text."""

    text: str
    sequence_index: int
    start: int


@dataclass(frozen=True, slots=True)
class Batch:
    """Ordered group of chunks written to the store in one call."""

    chunks: Tuple[Chunk, ...]

    def __len__(self) -> int:
        return len(self.chunks)

    def __iter__(self) -> Iterator[Chunk]:
        return iter(self.chunks)

    @property
    def start_index(self) -> int:
        return self.chunks[0].sequence_index if self.chunks else 0

    @property
    def texts(self) -> list[str]:
        return [chunk.text for chunk in self.chunks]


@dataclass(frozen=True, slots=True)
class ChunkingConfig:
    """Window size and overlap, both measured in characters.

    ``overlap`` must be strictly smaller than ``window_size`` so that every
    step moves forward through the text.
    """

    window_size: int
    overlap: int = 0

    def __post_init__(self) -> None:
        if self.window_size <= 0:
            raise ConfigurationError(f"window_size must be positive, got {self.window_size}")
        if self.overlap < 0:
            raise ConfigurationError(f"overlap must not be negative, got {self.overlap}")
        if self.overlap >= self.window_size:
            raise ConfigurationError(
                f"overlap ({self.overlap}) must be smaller than window_size ({self.window_size})"
            )

    @property
    def stride(self) -> int:
        return self.window_size - self.overlap


@dataclass(frozen=True, slots=True)
class IndexingJob:
    """One ingestion run, identified by an opaque correlation id."""

    job_id: str
    text: str = field(repr=False)
    source: str | None = None


@dataclass(slots=True)
class ChunkRecord:
    """Chunk text paired with metadata, as handed to a vector store."""

    job_id: str
    index: int
    text: str
    metadata: Dict[str, Any]
