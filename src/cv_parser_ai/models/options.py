"""Layered parse options.

Precedence, highest first: per-call overrides, per-instance options,
``Settings`` (environment), built-in defaults.
"""

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from cv_parser_ai.exceptions import ConfigurationError

if TYPE_CHECKING:
    from cv_parser_ai.config import Settings


class ParseOptions(BaseModel):
    """Typed options for a parse call.

    Accepts both snake_case and camelCase names, so ``parsing_level`` and
    ``parsingLevel`` are equivalent.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
        protected_namespaces=(),
    )

    provider: str = "google"
    model: str | None = None
    parsing_level: str | None = None

    include_metadata: bool = True
    include_keywords: bool = True
    validate_data: bool = True
    normalize_data: bool = True
    strict_validation: bool = False
    confidence_threshold: float = Field(default=0.5, ge=0.0, le=1.0)

    retry_on_failure: bool = True
    max_retries: int = Field(default=2, ge=0, le=10)
    retry_delay_seconds: float = Field(default=1.0, ge=0.0)

    temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4000, ge=1)

    model_fallback: bool = False
    fallback_models: list[str] | None = None
    fallback_delay_seconds: float = Field(default=1.0, ge=0.0)

    canned_level_prompts: bool = True
    deadline_seconds: float | None = Field(default=None, gt=0)

    @classmethod
    def _canonical_keys(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Map camelCase aliases onto field names so layers merge key by key."""
        by_alias = {info.alias: name for name, info in cls.model_fields.items() if info.alias}
        return {by_alias.get(key, key): value for key, value in values.items()}

    @classmethod
    def _validated(cls, values: dict[str, Any]) -> "ParseOptions":
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            problems = []
            for error in e.errors():
                location = ".".join(str(part) for part in error["loc"])
                problems.append(f"{location}: {error['msg']}")
            raise ConfigurationError(
                f"Invalid parse options: {'; '.join(problems)}",
                details={"errors": e.errors(include_url=False)},
                cause=e,
            ) from e

    @classmethod
    def from_settings(cls, settings: "Settings", **overrides: Any) -> "ParseOptions":
        """Build the instance layer from environment settings plus overrides."""
        base: dict[str, Any] = {
            "provider": settings.provider,
            "model": settings.model,
            "parsing_level": settings.parsing_level,
            "temperature": settings.temperature,
            "max_tokens": settings.max_tokens,
            "confidence_threshold": settings.confidence_threshold,
            "max_retries": settings.max_retries,
            "retry_delay_seconds": settings.retry_delay_seconds,
        }
        overrides = {key: value for key, value in overrides.items() if value is not None}
        return cls._validated({**base, **cls._canonical_keys(overrides)})

    def merged(self, **overrides: Any) -> "ParseOptions":
        """Return a validated copy with per-call overrides applied.

        ``None`` overrides are ignored so callers can forward optional
        arguments unchanged.
        """
        overrides = {key: value for key, value in overrides.items() if value is not None}
        if not overrides:
            return self
        return self._validated({**self.model_dump(), **self._canonical_keys(overrides)})
