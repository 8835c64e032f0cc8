"""Extractors for document text and structured CV data."""

from cv_parser_ai.extractors.cv_extractor import CVExtractor
from cv_parser_ai.extractors.document_extractor import (
    extract_text,
    extract_text_from_buffer,
    preprocess_text,
)

__all__ = ["CVExtractor", "extract_text", "extract_text_from_buffer", "preprocess_text"]
