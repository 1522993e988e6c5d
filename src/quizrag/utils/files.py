"""Utility helpers for working with files."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Iterable, Iterator

SUPPORTED_SUFFIXES = (".pdf", ".docx", ".txt", ".md")


def is_supported(path: Path) -> bool:
    return path.suffix.lower() in SUPPORTED_SUFFIXES


def iter_document_paths(inputs: Iterable[Path]) -> Iterator[Path]:
    """Yield ingestible files from input paths, descending into directories."""
    for item in inputs:
        if item.is_dir():
            yield from iter_document_paths(
                sorted(child for child in item.rglob("*") if child.is_file())
            )
        elif item.is_file() and is_supported(item):
            yield item


def compute_sha256(path: Path) -> str:
    """Compute SHA256 hash for a file."""
    sha = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1 << 20), b""):
            sha.update(chunk)
    return sha.hexdigest()
