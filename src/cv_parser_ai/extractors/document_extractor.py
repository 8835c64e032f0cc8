"""Plain-text extraction from CV documents (PDF, DOCX, TXT, MD)."""

import logging
import re
from io import BytesIO
from pathlib import Path
from typing import Any

from cv_parser_ai.exceptions import DocumentExtractionError
from cv_parser_ai.models.results import ExtractedDocument
from cv_parser_ai.utils.text import detect_file_type

logger = logging.getLogger(__name__)

# Longer documents are cut before cleaning
MAX_TEXT_LENGTH = 50000

SUPPORTED_FILE_TYPES = ("pdf", "docx", "txt", "md")

_PAGE_FOOTER = re.compile(r"Page \d+ of \d+")
_REFERENCES = re.compile(r"References available upon request", re.IGNORECASE)
_WHITESPACE_RUN = re.compile(r"\s{2,}")
_BLANK_LINES = re.compile(r"\n{3,}")


def preprocess_text(
    raw: str | None,
    page_count: int | None = None,
    metadata: dict[str, Any] | None = None,
) -> ExtractedDocument:
    """Clean extracted text and count its words and lines.

    Examples:
        >>> doc = preprocess_text("Jane Doe\\r\\n\\tEngineer   Page 1 of 2")
        >>> doc.text, doc.word_count
        ('Jane Doe Engineer', 3)
    """
    text = raw or ""
    if not text:
        return ExtractedDocument(text="", page_count=page_count, metadata=metadata or {})

    text = text[:MAX_TEXT_LENGTH]
    text = text.replace("\r\n", "\n").replace("\t", " ")
    text = _WHITESPACE_RUN.sub(" ", text)
    text = _BLANK_LINES.sub("\n\n", text)
    text = _PAGE_FOOTER.sub("", text)
    text = _REFERENCES.sub("", text)
    text = text.strip()

    return ExtractedDocument(
        text=text,
        word_count=len(text.split()),
        line_count=len(text.split("\n")) if text else 0,
        page_count=page_count,
        metadata=metadata or {},
    )


def _extract_pdf(data: bytes) -> tuple[str, int, dict[str, Any]]:
    try:
        import fitz  # PyMuPDF
    except ImportError as e:
        raise DocumentExtractionError(
            "PDF parsing library not installed. Run: pip install pymupdf",
            file_type="pdf",
            cause=e,
        ) from e

    with fitz.open(stream=data, filetype="pdf") as doc:
        text_parts = [page.get_text() for page in doc]
        page_count = len(doc)
        metadata = {key: value for key, value in (doc.metadata or {}).items() if value}

    return "\n\n".join(part for part in text_parts if part.strip()), page_count, metadata


def _extract_docx(data: bytes) -> str:
    try:
        from docx import Document
    except ImportError as e:
        raise DocumentExtractionError(
            "DOCX parsing library not installed. Run: pip install python-docx",
            file_type="docx",
            cause=e,
        ) from e

    document = Document(BytesIO(data))
    paragraphs = [p.text for p in document.paragraphs if p.text.strip()]
    # Table cells hold contact blocks in many CV templates
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                paragraphs.append(" | ".join(cells))
    return "\n".join(paragraphs)


def extract_text_from_buffer(buffer: bytes, file_type: str | None = None) -> ExtractedDocument:
    """Extract and clean text from an in-memory document.

    Args:
        buffer: Raw document bytes.
        file_type: "pdf", "docx", "txt" or "md"; detected from magic bytes if None.

    Raises:
        DocumentExtractionError: For unsupported formats or extraction failures.
    """
    kind = (file_type or detect_file_type(buffer)).lower().lstrip(".")
    if kind not in SUPPORTED_FILE_TYPES:
        raise DocumentExtractionError(f"Unsupported file format: {kind}", file_type=kind)

    try:
        if kind == "pdf":
            text, page_count, metadata = _extract_pdf(buffer)
            document = preprocess_text(text, page_count=page_count, metadata=metadata)
        elif kind == "docx":
            document = preprocess_text(_extract_docx(buffer))
        else:
            document = preprocess_text(buffer.decode("utf-8"))
    except DocumentExtractionError:
        raise
    except Exception as e:
        raise DocumentExtractionError(
            f"Failed to extract text from {kind}: {e}", file_type=kind, cause=e
        ) from e

    logger.debug(f"Extracted {document.word_count} words from {kind} document")
    return document


def extract_text(path: str | Path) -> ExtractedDocument:
    """Extract and clean text from a document on disk, typed by its extension.

    Raises:
        DocumentExtractionError: If the file is missing, unsupported or unreadable.
    """
    file_path = Path(path)
    kind = file_path.suffix.lower().lstrip(".")
    if kind not in SUPPORTED_FILE_TYPES:
        raise DocumentExtractionError(f"Unsupported file format: {kind or 'unknown'}", file_type=kind)

    try:
        data = file_path.read_bytes()
    except OSError as e:
        raise DocumentExtractionError(
            f"Failed to read {file_path}: {e}", file_type=kind, cause=e
        ) from e

    return extract_text_from_buffer(data, kind)
