"""Group chunks into fixed-size batches."""

from __future__ import annotations

from itertools import islice
from typing import Iterable, Iterator

from quizrag.errors import ConfigurationError
from quizrag.models import Batch, Chunk


def validate_batch_size(batch_size: int) -> None:
    if batch_size <= 0:
        raise ConfigurationError(f"batch_size must be positive, got {batch_size}")


def batch_chunks(chunks: Iterable[Chunk], batch_size: int) -> Iterator[Batch]:
    """Yield consecutive batches of ``batch_size`` chunks.

    The last batch may be shorter but is never empty. At most one batch worth
    of chunks is pulled from ``chunks`` ahead of the consumer.
    """
    validate_batch_size(batch_size)
    return _iter_batches(iter(chunks), batch_size)


def _iter_batches(iterator: Iterator[Chunk], batch_size: int) -> Iterator[Batch]:
    while True:
        group = tuple(islice(iterator, batch_size))
        if not group:
            return
        yield Batch(group)
