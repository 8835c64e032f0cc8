"""Confidence scoring for parsed CV data."""

from cv_parser_ai.scoring.confidence import (
    calculate_confidence,
    calculate_overall_confidence,
    round_half_up,
)

__all__ = ["calculate_confidence", "calculate_overall_confidence", "round_half_up"]
