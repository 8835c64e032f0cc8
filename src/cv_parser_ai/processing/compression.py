"""Level-aware text compression.

Each parsing level bounds how much of the document reaches the LLM. The cut
is a plain character slice with no sentence awareness, so results at a given
level are reproducible across runs.
"""

import logging
import math
import re
from enum import Enum
from typing import NamedTuple

from cv_parser_ai.models.results import CompressionStats

logger = logging.getLogger(__name__)


class ParsingLevel(str, Enum):
    """Trade-off between token cost and extraction completeness."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    ULTRA = "ultra"


# None means the cleaned text is never truncated
LEVEL_CHAR_LIMITS: dict[ParsingLevel, int | None] = {
    ParsingLevel.LOW: 2000,
    ParsingLevel.MODERATE: 3500,
    ParsingLevel.HIGH: 5000,
    ParsingLevel.ULTRA: None,
}

PARSING_LEVELS: dict[str, dict[str, str]] = {
    "low": {
        "description": "Basic info only (name, email, phone)",
        "tokens": "~200",
        "speed": "Fastest",
    },
    "moderate": {
        "description": "Key sections (personal, experience, education, skills)",
        "tokens": "~500",
        "speed": "Fast",
    },
    "high": {
        "description": "Detailed extraction with descriptions",
        "tokens": "~1000",
        "speed": "Medium",
    },
    "ultra": {
        "description": "Comprehensive extraction with full details",
        "tokens": "~2000",
        "speed": "Slower",
    },
}

PAGE_FOOTER_PATTERN = re.compile(r"Page \d+ of \d+")
REFERENCES_PATTERN = re.compile(r"References available upon request", re.IGNORECASE)
WHITESPACE_RUN_PATTERN = re.compile(r"\s{2,}")

HIGH_LEVEL_TITLE_TERMS = ("senior", "lead", "manager", "director", "head", "principal", "architect")
TECHNICAL_TITLE_TERMS = ("developer", "engineer", "programmer", "analyst", "specialist")
ENTRY_LEVEL_TITLE_TERMS = ("junior", "intern", "entry", "assistant", "trainee")
EXECUTIVE_TITLE_TERMS = ("ceo", "cto", "cfo", "chief", "president", "vice president")


class CompressedText(NamedTuple):
    text: str
    stats: CompressionStats


def coerce_level(level: "ParsingLevel | str | None") -> ParsingLevel | None:
    """Resolve a level name, returning None for unrecognized values."""
    if level is None or isinstance(level, ParsingLevel):
        return level
    try:
        return ParsingLevel(str(level).strip().lower())
    except ValueError:
        return None


def clean_text(text: str) -> str:
    """Drop page footers and reference boilerplate, then collapse whitespace runs."""
    cleaned = PAGE_FOOTER_PATTERN.sub("", text)
    cleaned = REFERENCES_PATTERN.sub("", cleaned)
    cleaned = WHITESPACE_RUN_PATTERN.sub(" ", cleaned)
    return cleaned.strip()


def compress_text(text: str, level: ParsingLevel | str) -> str:
    """Clean text and cut it to the level's character limit.

    Unrecognized levels use the moderate limit. Ultra never truncates.

    Examples:
        >>> len(compress_text("x" * 3000, "low"))
        2000
        >>> compress_text("Jane   Doe  Page 1 of 2", "ultra")
        'Jane Doe'
    """
    cleaned = clean_text(text)
    resolved = coerce_level(level)
    if resolved is None:
        logger.debug(f"Unknown parsing level {level!r}, using moderate limit")
        resolved = ParsingLevel.MODERATE

    limit = LEVEL_CHAR_LIMITS[resolved]
    return cleaned if limit is None else cleaned[:limit]


def compression_ratio(original_length: int, compressed_length: int) -> int:
    """Percentage of characters removed, rounded half up."""
    if original_length == 0:
        return 0
    return math.floor((1 - compressed_length / original_length) * 100 + 0.5)


class TextCompressor:
    """Compress text for a parsing level and report what was removed."""

    def compress(self, text: str, level: ParsingLevel | str) -> CompressedText:
        compressed = compress_text(text, level)
        resolved = coerce_level(level)
        stats = CompressionStats(
            level=resolved.value if resolved else str(level),
            original_text_length=len(text),
            compressed_text_length=len(compressed),
            compression_ratio=compression_ratio(len(text), len(compressed)),
        )
        return CompressedText(compressed, stats)


def get_parsing_levels() -> dict[str, dict[str, str]]:
    """Describe each parsing level's scope, token estimate and speed."""
    return {level: dict(info) for level, info in PARSING_LEVELS.items()}


def select_parsing_level(
    job_title: str | None = None,
    job_type: str | None = None,
    salary: float | None = None,
) -> ParsingLevel:
    """Pick a parsing level from a job posting.

    Rules are checked in order: senior titles or salary above 100k get high,
    technical roles get moderate, entry-level titles or salary below 40k get
    low, executive titles or salary above 200k get ultra. An unknown salary
    never triggers the salary rules.

    Examples:
        >>> select_parsing_level("Senior Backend Engineer")
        <ParsingLevel.HIGH: 'high'>
        >>> select_parsing_level("Marketing Coordinator")
        <ParsingLevel.MODERATE: 'moderate'>
    """
    title = (job_title or "").lower()
    kind = (job_type or "").lower()

    if any(term in title for term in HIGH_LEVEL_TITLE_TERMS) or (
        salary is not None and salary > 100000
    ):
        return ParsingLevel.HIGH

    if any(term in title for term in TECHNICAL_TITLE_TERMS) or "technical" in kind:
        return ParsingLevel.MODERATE

    if any(term in title for term in ENTRY_LEVEL_TITLE_TERMS) or (
        salary is not None and salary < 40000
    ):
        return ParsingLevel.LOW

    if any(term in title for term in EXECUTIVE_TITLE_TERMS) or (
        salary is not None and salary > 200000
    ):
        return ParsingLevel.ULTRA

    return ParsingLevel.MODERATE
