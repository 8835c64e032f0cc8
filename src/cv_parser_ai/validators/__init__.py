"""Validation and normalization of parsed CV data."""

from cv_parser_ai.validators.data_validator import DataValidator
from cv_parser_ai.validators.normalizer import (
    calculate_duration,
    calculate_total_experience_years,
    normalize_date,
    normalize_email,
    normalize_name,
    normalize_parsed_data,
    normalize_phone,
    normalize_skills,
    normalize_url,
)

__all__ = [
    "DataValidator",
    "calculate_duration",
    "calculate_total_experience_years",
    "normalize_date",
    "normalize_email",
    "normalize_name",
    "normalize_parsed_data",
    "normalize_phone",
    "normalize_skills",
    "normalize_url",
]
