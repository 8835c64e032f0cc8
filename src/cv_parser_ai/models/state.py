"""LangGraph state for a single parse."""

from typing import Any, TypedDict

from cv_parser_ai.exceptions import CVParserError
from cv_parser_ai.llm.base import LLMProvider
from cv_parser_ai.models.options import ParseOptions
from cv_parser_ai.models.results import ExtractedDocument, ExtractionResponse, ValidationResult


class ParseState(TypedDict, total=False):
    """State carried through the parse graph.

    Inputs are set once by the caller; the remaining keys are filled in by
    the nodes as the parse advances.
    """

    # Inputs
    document: ExtractedDocument
    options: ParseOptions
    llm_provider: LLMProvider
    started_at: float  # monotonic clock reading

    # Extraction loop
    attempt: int
    extraction: ExtractionResponse | None
    last_error: CVParserError | None
    last_delay: float

    # Post-processing
    validation: ValidationResult | None
    data: dict[str, Any] | None
    confidence: float
    low_confidence: bool
