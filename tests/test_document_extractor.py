"""Tests for document text extraction."""

from io import BytesIO
from pathlib import Path

import pytest

from cv_parser_ai.exceptions import DocumentExtractionError
from cv_parser_ai.extractors.document_extractor import (
    MAX_TEXT_LENGTH,
    extract_text,
    extract_text_from_buffer,
    preprocess_text,
)
from cv_parser_ai.utils.text import detect_file_type


class TestPreprocessText:
    """Tests for text cleanup and counting."""

    def test_cleans_and_counts(self) -> None:
        doc = preprocess_text("Jane Doe\r\n\tEngineer   Page 1 of 2")
        assert doc.text == "Jane Doe Engineer"
        assert doc.word_count == 3
        assert doc.line_count == 1

    def test_keeps_single_line_breaks(self) -> None:
        doc = preprocess_text("Jane Doe\nEngineer\nAcme")
        assert doc.text == "Jane Doe\nEngineer\nAcme"
        assert doc.line_count == 3

    def test_removes_references_boilerplate(self) -> None:
        doc = preprocess_text("Skills: Python\nReferences available upon request")
        assert doc.text == "Skills: Python"

    def test_empty_text(self) -> None:
        doc = preprocess_text("")
        assert doc.text == ""
        assert doc.word_count == 0
        assert doc.line_count == 0

    def test_truncates_long_text(self) -> None:
        doc = preprocess_text("a" * (MAX_TEXT_LENGTH + 100))
        assert len(doc.text) == MAX_TEXT_LENGTH


class TestDetectFileType:
    """Tests for magic byte sniffing."""

    def test_known_types(self) -> None:
        assert detect_file_type(b"%PDF-1.7 ...") == "pdf"
        assert detect_file_type(b"PK\x03\x04...") == "docx"
        assert detect_file_type(b"\xd0\xcf\x11\xe0...") == "doc"

    def test_unknown(self) -> None:
        assert detect_file_type(b"Jane Doe") == "unknown"
        assert detect_file_type(b"") == "unknown"


class TestExtractTextFromBuffer:
    """Tests for in-memory extraction."""

    def test_plain_text(self) -> None:
        doc = extract_text_from_buffer("Jane Doe\nEngineer".encode(), "txt")
        assert doc.text == "Jane Doe\nEngineer"
        assert doc.word_count == 3

    def test_markdown(self) -> None:
        doc = extract_text_from_buffer(b"# Jane Doe\n\n- Python", ".MD")
        assert doc.text.startswith("# Jane Doe")

    def test_undetectable_type_raises(self) -> None:
        with pytest.raises(DocumentExtractionError, match="Unsupported file format: unknown"):
            extract_text_from_buffer(b"Jane Doe")

    def test_legacy_doc_unsupported(self) -> None:
        with pytest.raises(DocumentExtractionError, match="Unsupported file format: doc"):
            extract_text_from_buffer(b"\xd0\xcf\x11\xe0")

    def test_invalid_utf8(self) -> None:
        with pytest.raises(DocumentExtractionError, match="Failed to extract text from txt") as exc_info:
            extract_text_from_buffer(b"\xff\xfe\xfa", "txt")
        assert exc_info.value.retryable is False
        assert isinstance(exc_info.value.cause, UnicodeDecodeError)

    def test_docx(self) -> None:
        docx = pytest.importorskip("docx")
        document = docx.Document()
        document.add_paragraph("Jane Doe")
        document.add_paragraph("Senior Engineer")
        table = document.add_table(rows=1, cols=2)
        table.rows[0].cells[0].text = "jane@example.com"
        table.rows[0].cells[1].text = "555-123-4567"
        buffer = BytesIO()
        document.save(buffer)

        doc = extract_text_from_buffer(buffer.getvalue())

        assert doc.text.splitlines() == [
            "Jane Doe",
            "Senior Engineer",
            "jane@example.com | 555-123-4567",
        ]

    def test_pdf(self) -> None:
        fitz = pytest.importorskip("fitz")
        pdf = fitz.open()
        page = pdf.new_page()
        page.insert_text((72, 72), "Jane Doe")
        data = pdf.tobytes()
        pdf.close()

        doc = extract_text_from_buffer(data)

        assert "Jane Doe" in doc.text
        assert doc.page_count == 1


class TestExtractText:
    """Tests for extraction from disk."""

    def test_text_file(self, tmp_path: Path) -> None:
        path = tmp_path / "cv.txt"
        path.write_text("Jane Doe\nEngineer", encoding="utf-8")
        assert extract_text(path).text == "Jane Doe\nEngineer"

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "cv.rtf"
        path.write_text("{\\rtf1 Jane}", encoding="utf-8")
        with pytest.raises(DocumentExtractionError, match="Unsupported file format: rtf"):
            extract_text(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentExtractionError, match="Failed to read"):
            extract_text(tmp_path / "missing.txt")
