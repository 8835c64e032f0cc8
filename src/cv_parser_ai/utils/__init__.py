"""Utility functions for CV parsing."""

from cv_parser_ai.utils.date_utils import (
    extract_end_year,
    is_present_term,
    months_between,
    parse_date,
)
from cv_parser_ai.utils.text import detect_file_type, extract_keywords

__all__ = [
    "detect_file_type",
    "extract_end_year",
    "extract_keywords",
    "is_present_term",
    "months_between",
    "parse_date",
]
