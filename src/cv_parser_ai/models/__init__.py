"""Data models for cv-parser-ai."""

from cv_parser_ai.models.options import ParseOptions
from cv_parser_ai.models.results import (
    BatchItemResult,
    BatchResult,
    BatchSummary,
    CompressionStats,
    ExtractedDocument,
    ExtractionResponse,
    ParsedResponse,
    ParseOutcome,
    PromptInfo,
    ValidationResult,
)

__all__ = [
    "BatchItemResult",
    "BatchResult",
    "BatchSummary",
    "CompressionStats",
    "ExtractedDocument",
    "ExtractionResponse",
    "ParseOptions",
    "ParseOutcome",
    "ParsedResponse",
    "PromptInfo",
    "ValidationResult",
]
