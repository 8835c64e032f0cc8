"""Result and diagnostic models returned by the parsing pipeline."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that dumps camelCase keys for JSON output."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ExtractedDocument(CamelModel):
    """Plain text pulled from a CV document. Immutable once produced."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    text: str
    word_count: int = 0
    line_count: int = 0
    page_count: int | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class CompressionStats(CamelModel):
    """How much a parsing level shortened the document text."""

    level: str
    original_text_length: int
    compressed_text_length: int
    compression_ratio: int


class PromptInfo(CamelModel):
    """Diagnostics for one built prompt.

    ``level`` is "original" when no parsing level was requested; the
    compression fields are then unset.
    """

    level: str
    original_text_length: int
    compressed_text_length: int
    prompt_length: int
    estimated_tokens: int
    compression_ratio: int | None = None


class ParsedResponse(BaseModel):
    """Outcome of recovering a JSON object from a raw LLM reply."""

    success: bool
    data: dict[str, Any] | None = None
    confidence: float = 0.0
    error: str | None = None
    raw_response: str | None = None


class ExtractionResponse(ParsedResponse):
    """Parsed reply plus the prompt and model that produced it."""

    prompt_info: PromptInfo | None = None
    provider: str | None = None
    model: str | None = None


class ValidationResult(BaseModel):
    """Schema validation outcome with the normalized data tree."""

    is_valid: bool
    data: dict[str, Any] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class ParseOutcome(BaseModel):
    """Full result of one parse with its diagnostics."""

    data: dict[str, Any]
    confidence: float
    provider_confidence: float
    prompt_info: PromptInfo | None = None
    provider: str
    model: str | None = None
    attempts: int = 1
    validation: ValidationResult | None = None
    low_confidence: bool = False


class BatchItemResult(BaseModel):
    """One input's outcome in a batch run."""

    source: str
    success: bool
    data: dict[str, Any] | None = None
    error: str | None = None
    error_kind: str | None = None


class BatchSummary(BaseModel):
    """Aggregate counts for a batch run. ``success_rate`` is a 0-1 fraction."""

    total: int
    successful: int
    failed: int
    success_rate: float


class BatchResult(BaseModel):
    """Per-item outcomes, in input order, plus the summary."""

    results: list[BatchItemResult]
    summary: BatchSummary

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form for writing batch reports."""
        return self.model_dump(mode="json")
