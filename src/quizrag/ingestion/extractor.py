"""Text extraction for uploaded documents.

PDFs go through PyMuPDF (fitz) page by page, DOCX files through python-docx
paragraph by paragraph, and plain-text files are read as UTF-8.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import docx
import fitz  # PyMuPDF

from quizrag.errors import ExtractionError
from quizrag.utils.files import is_supported
from quizrag.utils.text import normalize_whitespace

LOGGER = logging.getLogger(__name__)


def iter_text_parts(path: Path) -> Iterator[str]:
    """Yield text content from a PDF file page by page."""
    try:
        doc = fitz.open(path)
    except Exception as exc:
        raise ExtractionError(f"Failed to open PDF {path}: {exc}") from exc

    try:
        for index in range(len(doc)):
            try:
                text = doc[index].get_text() or ""
            except Exception as exc:  # pragma: no cover - damaged page
                LOGGER.warning("Failed to read page %s in %s: %s", index, path, exc)
                continue
            normalized = normalize_whitespace(text.splitlines())
            if normalized:
                yield normalized
    finally:
        doc.close()


def extract_docx(path: Path) -> str:
    """Join the paragraphs of a Word document with newlines."""
    try:
        document = docx.Document(str(path))
    except Exception as exc:
        raise ExtractionError(f"Failed to open DOCX {path}: {exc}") from exc
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def extract_text(path: Path) -> str:
    """Return the full text of a PDF, DOCX or plain-text document."""
    path = Path(path)
    if not is_supported(path):
        raise ExtractionError(f"Unsupported document type: {path.suffix or path.name}")

    suffix = path.suffix.lower()
    if suffix == ".pdf":
        return "\n".join(iter_text_parts(path))
    if suffix == ".docx":
        return extract_docx(path)

    try:
        return path.read_bytes().decode("utf-8", errors="replace")
    except OSError as exc:
        raise ExtractionError(f"Failed to read {path}: {exc}") from exc
