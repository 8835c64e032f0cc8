"""Exception hierarchy for CV parsing.

Every error carries an ``ErrorKind`` tag and a ``retryable`` flag. The
pipeline decides whether to retry from the flag, never from the message text.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Category of a parser failure."""

    CONFIGURATION = "configuration"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    DOCUMENT_EXTRACTION = "document_extraction"
    PROVIDER_CALL = "provider_call"
    RESPONSE_PARSE = "response_parse"
    VALIDATION = "validation"
    DEADLINE = "deadline"


class CVParserError(Exception):
    """Base exception for all parser errors.

    Attributes:
        message: Human-readable error message.
        details: Additional context about the error.
        cause: Original exception that caused this error.
    """

    kind: ErrorKind = ErrorKind.CONFIGURATION
    retryable: bool = False

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        return self.message


class ConfigurationError(CVParserError):
    """Raised for missing API keys or unsupported provider settings."""

    kind = ErrorKind.CONFIGURATION


class SchemaError(ConfigurationError):
    """Raised when a schema definition cannot be built."""


class ProviderUnavailableError(CVParserError):
    """Raised when a provider's client library is not installed."""

    kind = ErrorKind.PROVIDER_UNAVAILABLE

    def __init__(self, provider: str, package: str, cause: BaseException | None = None):
        super().__init__(
            f"Provider '{provider}' is unavailable: install '{package}' to use it",
            details={"provider": provider, "package": package},
            cause=cause,
        )
        self.provider = provider
        self.package = package


class DocumentExtractionError(CVParserError):
    """Raised when text cannot be extracted from a document."""

    kind = ErrorKind.DOCUMENT_EXTRACTION

    def __init__(
        self,
        message: str,
        file_type: str | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message, details={"file_type": file_type}, cause=cause)
        self.file_type = file_type


class ProviderCallError(CVParserError):
    """Raised when a call to an LLM provider fails."""

    kind = ErrorKind.PROVIDER_CALL
    retryable = True

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        model: str | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message, details={"provider": provider, "model": model}, cause=cause)
        self.provider = provider
        self.model = model


class ModelFallbackExhaustedError(ProviderCallError):
    """Raised when every candidate model of a provider has failed."""

    def __init__(
        self,
        attempted_models: list[str],
        last_error: BaseException | None,
        provider: str | None = None,
    ):
        last_message = str(last_error) if last_error else "Unknown error"
        super().__init__(
            f"All models failed ({', '.join(attempted_models)}). Last error: {last_message}",
            provider=provider,
            model=attempted_models[-1] if attempted_models else None,
            cause=last_error,
        )
        self.attempted_models = attempted_models
        self.last_error = last_error
        self.details["attempted_models"] = attempted_models


class ResponseParseError(CVParserError):
    """Raised when an LLM reply cannot be recovered as a JSON object."""

    kind = ErrorKind.RESPONSE_PARSE
    retryable = True

    def __init__(self, message: str, raw_response: str | None = None):
        super().__init__(message, details={"raw_response": raw_response})
        self.raw_response = raw_response


class DataValidationError(CVParserError):
    """Raised in strict mode when parsed data violates the schema."""

    kind = ErrorKind.VALIDATION

    def __init__(self, errors: list[str], warnings: list[str] | None = None):
        super().__init__(
            f"Validation failed: {', '.join(errors)}",
            details={"errors": errors, "warnings": warnings or []},
        )
        self.errors = errors
        self.warnings = warnings or []


class ParseDeadlineExceededError(CVParserError):
    """Raised when a parse runs past its caller-supplied deadline."""

    kind = ErrorKind.DEADLINE

    def __init__(self, deadline_seconds: float, last_error: BaseException | None = None):
        message = f"Parse exceeded its deadline of {deadline_seconds:g}s"
        if last_error is not None:
            message = f"{message}. Last error: {last_error}"
        super().__init__(message, details={"deadline_seconds": deadline_seconds}, cause=last_error)
        self.deadline_seconds = deadline_seconds
