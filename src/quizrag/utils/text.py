"""Text helpers, including the fixed-window chunker."""

from __future__ import annotations

from typing import Iterable, Iterator

from quizrag.models import Chunk, ChunkingConfig


class ChunkSequence:
    """Lazy, restartable sequence of overlapping character windows.

    Each call to ``iter()`` starts over from the beginning of the text, so the
    same instance can be consumed more than once. Chunks are produced on
    demand; the full list is never built.
    """

    def __init__(self, text: str, config: ChunkingConfig) -> None:
        self.text = text or ""
        self.config = config

    def __iter__(self) -> Iterator[Chunk]:
        text = self.text
        window = self.config.window_size
        stride = self.config.stride
        for index, start in enumerate(range(0, len(text), stride)):
            yield Chunk(text=text[start : start + window], sequence_index=index, start=start)

    def __len__(self) -> int:
        if not self.text:
            return 0
        stride = self.config.stride
        return (len(self.text) + stride - 1) // stride

    def __repr__(self) -> str:
        return (
            f"ChunkSequence(chars={len(self.text)}, window_size={self.config.window_size}, "
            f"overlap={self.config.overlap})"
        )


def chunk_text(text: str, *, window_size: int = 4000, overlap: int = 200) -> ChunkSequence:
    """Split text into overlapping character chunks.

    Chunk ``i`` starts at ``i * (window_size - overlap)`` and is at most
    ``window_size`` characters long; only the last chunk may be shorter.
    Invalid parameters raise ``ConfigurationError`` here, before any chunk
    is produced.
    """
    return ChunkSequence(text, ChunkingConfig(window_size=window_size, overlap=overlap))


def normalize_whitespace(lines: Iterable[str]) -> str:
    """Collapse whitespace and join lines."""
    return "\n".join(line.strip() for line in lines if line.strip())
