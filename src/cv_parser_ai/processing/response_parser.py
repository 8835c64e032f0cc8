"""Recover a JSON object from a raw LLM reply.

Replies often arrive wrapped in markdown fences or surrounded by prose. The
parser strips fences, trims to the outermost braces and parses strictly. It
does not repair truncated or otherwise malformed JSON.
"""

import json
import logging
import re

from cv_parser_ai.models.results import ParsedResponse
from cv_parser_ai.scoring.confidence import calculate_confidence

logger = logging.getLogger(__name__)

JSON_FENCE_PATTERN = re.compile(r"```json\n?")
FENCE_PATTERN = re.compile(r"```\n?")


def extract_json_text(raw: str) -> str:
    """Apply the fence and brace trimming steps without parsing.

    Examples:
        >>> extract_json_text('Sure! ```json\\n{"a": 1}\\n``` done')
        '{"a": 1}'
    """
    cleaned = raw.strip()
    cleaned = JSON_FENCE_PATTERN.sub("", cleaned)
    cleaned = FENCE_PATTERN.sub("", cleaned)

    start = cleaned.find("{")
    if start > 0:
        cleaned = cleaned[start:]

    end = cleaned.rfind("}")
    if end > 0:
        cleaned = cleaned[: end + 1]

    return cleaned


def parse_llm_response(raw: str | None) -> ParsedResponse:
    """Parse an LLM reply into a JSON object.

    Args:
        raw: The reply text.

    Returns:
        ParsedResponse with the data and its confidence, or a failure carrying
        the error message and the untouched reply.
    """
    raw_text = raw if isinstance(raw, str) else ""
    logger.debug(f"Raw AI response: {raw_text[:200]}...")

    try:
        data = json.loads(extract_json_text(raw_text))
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    except (ValueError, TypeError) as e:
        logger.warning(f"Failed to parse AI response: {e}")
        return ParsedResponse(
            success=False,
            error=f"Failed to parse AI response: {e}",
            raw_response=raw_text,
        )

    return ParsedResponse(
        success=True,
        data=data,
        confidence=calculate_confidence(data),
        raw_response=raw_text,
    )
