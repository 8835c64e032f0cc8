"""LangGraph node definitions for the CV parsing pipeline."""

import logging
import time
from collections.abc import Callable
from datetime import date, datetime, timezone
from typing import Any

from cv_parser_ai.exceptions import (
    CVParserError,
    DataValidationError,
    ParseDeadlineExceededError,
)
from cv_parser_ai.extractors.cv_extractor import CVExtractor
from cv_parser_ai.llm.fallback import build_candidate_models, run_with_model_fallback
from cv_parser_ai.models.options import ParseOptions
from cv_parser_ai.models.state import ParseState
from cv_parser_ai.processing.prompt_builder import PromptBuilder
from cv_parser_ai.schemas.cv_schema import CVSchema
from cv_parser_ai.scoring.confidence import calculate_overall_confidence
from cv_parser_ai.utils.text import extract_keywords
from cv_parser_ai.validators.data_validator import DataValidator
from cv_parser_ai.validators.normalizer import (
    calculate_total_experience_years,
    normalize_parsed_data,
)

logger = logging.getLogger(__name__)


def _check_deadline(
    state: ParseState,
    clock: Callable[[], float],
    upcoming_delay: float = 0.0,
) -> None:
    """Raise if the parse has run, or would run, past its deadline."""
    deadline = state["options"].deadline_seconds
    started_at = state.get("started_at")
    if deadline is None or started_at is None:
        return
    elapsed = clock() - started_at
    if elapsed + upcoming_delay > deadline:
        raise ParseDeadlineExceededError(deadline, last_error=state.get("last_error"))


def build_metadata(
    data: dict[str, Any],
    state: ParseState,
    confidence: float,
    today: date | None = None,
) -> dict[str, Any]:
    """Compose the metadata block.

    LLM-supplied metadata keys are kept when non-null, but the computed
    values always win.
    """
    options = state["options"]
    document = state["document"]
    extraction = state.get("extraction")

    llm_metadata = data.get("metadata") if isinstance(data.get("metadata"), dict) else {}
    metadata = {key: value for key, value in llm_metadata.items() if value is not None}

    total_years = calculate_total_experience_years(data.get("experience"), today=today)
    if total_years is not None:
        metadata["totalExperience"] = f"{total_years:g} years"

    metadata.update(
        {
            "parseDate": datetime.now(timezone.utc).isoformat(),
            "parseConfidence": confidence,
            "provider": extraction.provider if extraction else None,
            "model": extraction.model if extraction else None,
            "parsingLevel": options.parsing_level or "original",
            "wordCount": document.word_count,
            "lineCount": document.line_count,
        }
    )
    return metadata


def create_nodes(
    schema: CVSchema,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> dict:
    """Create all pipeline nodes for a schema.

    Args:
        schema: Schema used for prompts and validation.
        sleep: Sleep function used for backoff and fallback delays.
        clock: Monotonic clock used for the deadline check.

    Returns:
        dict: Dictionary of node functions.
    """
    validator = DataValidator(schema)

    def _extract_once(state: ParseState, options: ParseOptions):
        provider = state["llm_provider"]
        extractor = CVExtractor(provider, PromptBuilder(options.canned_level_prompts))
        text = state["document"].text

        if not options.model_fallback:
            return extractor.extract(
                text, schema, options.parsing_level, options.model, options.temperature
            )

        candidates = build_candidate_models(
            options.model or provider.model,
            options.fallback_models or provider.fallback_models,
        )
        result = run_with_model_fallback(
            candidates,
            lambda model: extractor.extract(
                text, schema, options.parsing_level, model, options.temperature
            ),
            delay_seconds=options.fallback_delay_seconds,
            sleep=sleep,
        )
        return result.value

    def extract_llm(state: ParseState) -> dict:
        """Compress, prompt, call the provider and parse the reply."""
        options = state["options"]
        attempt = state.get("attempt", 0) + 1
        _check_deadline(state, clock)

        try:
            extraction = _extract_once(state, options)
        except CVParserError as e:
            if not e.retryable:
                raise
            logger.warning(f"Extraction attempt {attempt} failed: {e}")
            return {"attempt": attempt, "extraction": None, "last_error": e}

        return {"attempt": attempt, "extraction": extraction, "last_error": None}

    def backoff(state: ParseState) -> dict:
        """Wait attempt x base delay before the next extraction attempt."""
        options = state["options"]
        delay = state.get("attempt", 1) * options.retry_delay_seconds
        _check_deadline(state, clock, upcoming_delay=delay)

        logger.warning(
            f"Retrying extraction (attempt {state.get('attempt', 1) + 1} of "
            f"{options.max_retries + 1}) in {delay:g}s"
        )
        if delay > 0:
            sleep(delay)
        return {"last_delay": delay}

    def validate(state: ParseState) -> dict:
        """Check the reply against the schema and normalize its leaves."""
        options = state["options"]
        data = state["extraction"].data or {}

        if not options.validate_data:
            return {"data": dict(data), "validation": None}

        result = validator.validate(data)
        for warning in result.warnings:
            logger.debug(f"Validation warning: {warning}")

        if not result.is_valid and options.strict_validation:
            raise DataValidationError(result.errors, result.warnings)
        if not result.is_valid:
            logger.warning(f"Validation errors (lenient mode): {', '.join(result.errors)}")

        return {"data": result.data, "validation": result}

    def enrich(state: ParseState) -> dict:
        """Normalize, then attach metadata and keywords and check confidence."""
        options = state["options"]
        data = state["data"] or {}

        if options.normalize_data:
            data = normalize_parsed_data(data)
        else:
            data = dict(data)

        confidence = calculate_overall_confidence(data)

        if options.include_metadata:
            data["metadata"] = build_metadata(data, state, confidence)

        if options.include_keywords:
            keywords = extract_keywords(state["document"].text)
            if isinstance(data.get("metadata"), dict):
                data["metadata"]["keywords"] = keywords
            else:
                data["keywords"] = keywords

        low_confidence = confidence < options.confidence_threshold
        if low_confidence:
            logger.warning(
                f"Parse confidence ({confidence}) below threshold ({options.confidence_threshold})"
            )

        return {"data": data, "confidence": confidence, "low_confidence": low_confidence}

    return {
        "extract_llm": extract_llm,
        "backoff": backoff,
        "validate": validate,
        "enrich": enrich,
    }
