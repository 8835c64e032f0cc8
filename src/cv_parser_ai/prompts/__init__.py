"""Prompt templates for CV extraction."""

from cv_parser_ai.prompts.extraction import (
    CANNED_LEVEL_FIELDS,
    CV_EXTRACTION_PROMPT,
    SYSTEM_INSTRUCTION,
)

__all__ = ["CANNED_LEVEL_FIELDS", "CV_EXTRACTION_PROMPT", "SYSTEM_INSTRUCTION"]
