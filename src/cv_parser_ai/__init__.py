"""CV Parser AI - LLM-powered CV parsing into schema-shaped JSON."""

from cv_parser_ai.exceptions import (
    ConfigurationError,
    CVParserError,
    DataValidationError,
    DocumentExtractionError,
    ErrorKind,
    ModelFallbackExhaustedError,
    ParseDeadlineExceededError,
    ProviderCallError,
    ProviderUnavailableError,
    ResponseParseError,
    SchemaError,
)
from cv_parser_ai.models.options import ParseOptions
from cv_parser_ai.models.results import BatchResult, ParseOutcome
from cv_parser_ai.parser import CVParser
from cv_parser_ai.schemas.cv_schema import CVSchema, FieldSpec
from cv_parser_ai.schemas.field_types import FieldType

__version__ = "0.1.0"

__all__ = [
    "BatchResult",
    "CVParser",
    "CVParserError",
    "CVSchema",
    "ConfigurationError",
    "DataValidationError",
    "DocumentExtractionError",
    "ErrorKind",
    "FieldSpec",
    "FieldType",
    "ModelFallbackExhaustedError",
    "ParseDeadlineExceededError",
    "ParseOptions",
    "ParseOutcome",
    "ProviderCallError",
    "ProviderUnavailableError",
    "ResponseParseError",
    "SchemaError",
    "__version__",
]
