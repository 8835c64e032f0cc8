"""Top-level CV parser.

Wires document extraction, the LLM extraction loop, validation and
enrichment behind ``parse``, ``parse_buffer``, ``parse_text`` and
``parse_batch``.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

from cv_parser_ai.config import Settings, get_settings
from cv_parser_ai.exceptions import ConfigurationError, CVParserError
from cv_parser_ai.extractors.document_extractor import (
    extract_text,
    extract_text_from_buffer,
    preprocess_text,
)
from cv_parser_ai.graph.workflow import create_parse_graph, run_parse_graph
from cv_parser_ai.llm.base import (
    LLMProvider,
    get_llm_provider,
    list_available_providers,
    normalize_provider_name,
)
from cv_parser_ai.llm.base import get_recommended_model as _recommended_model
from cv_parser_ai.models.options import ParseOptions
from cv_parser_ai.models.results import (
    BatchItemResult,
    BatchResult,
    BatchSummary,
    ExtractedDocument,
    ParseOutcome,
)
from cv_parser_ai.processing.compression import get_parsing_levels as _parsing_levels
from cv_parser_ai.schemas.cv_schema import CVSchema

logger = logging.getLogger(__name__)

Source = str | Path | bytes | ExtractedDocument
BatchInput = str | Path | Mapping[str, Any]


class CVParser:
    """Parse CV documents into schema-shaped JSON with an LLM.

    Options resolve per call as: call overrides, then the ``options`` and
    keyword overrides given here, then ``Settings``, then built-in defaults.

    Example:
        >>> parser = CVParser(api_key="...", provider="openai", parsing_level="moderate")
        >>> result = parser.parse("resume.pdf", include_keywords=False)
    """

    def __init__(
        self,
        api_key: str | None = None,
        schema: CVSchema | None = None,
        options: ParseOptions | Mapping[str, Any] | None = None,
        llm_provider: LLMProvider | None = None,
        settings: Settings | None = None,
        sleep: Callable[[float], None] = time.sleep,
        **overrides: Any,
    ):
        """Initialize the parser.

        Args:
            api_key: Provider API key. Falls back to the provider's env var.
            schema: Extraction schema (default: the comprehensive schema).
            options: Instance-level options, as a ParseOptions or a dict.
            llm_provider: Pre-built provider binding, mainly for tests.
            settings: Settings to read defaults from (default: environment).
            sleep: Sleep function for retry and fallback delays.
            **overrides: Individual option overrides, e.g. ``parsing_level="low"``.

        Raises:
            ConfigurationError: If no API key is available or the provider is unknown.
            ProviderUnavailableError: If the provider's client library is missing.
        """
        self.settings = settings or get_settings()
        if isinstance(options, ParseOptions):
            self.options = options.merged(**overrides)
        else:
            self.options = ParseOptions.from_settings(self.settings, **{**(options or {}), **overrides})

        self.schema = schema or CVSchema.default()
        self._providers: dict[str, LLMProvider] = {}
        self._providers_lock = threading.Lock()
        self._sleep = sleep

        if llm_provider is None:
            llm_provider = self._build_provider(self.options.provider, api_key, self.options.model)
        self.llm_provider = llm_provider

        self.graph = create_parse_graph(self.schema, sleep=sleep)

    def _build_provider(
        self, provider: str, api_key: str | None, model: str | None = None
    ) -> LLMProvider:
        name = normalize_provider_name(provider)
        key = api_key or self.settings.api_key_for(name)
        if not key:
            raise ConfigurationError(
                f"AI API key is required for provider '{name}'",
                details={"provider": name},
            )
        return get_llm_provider(
            name,
            model=model,
            api_key=key,
            temperature=self.options.temperature,
            max_tokens=self.options.max_tokens,
            timeout=self.settings.request_timeout,
        )

    def _switches_provider(self, options: ParseOptions) -> bool:
        if options.provider == self.options.provider:
            return False
        return normalize_provider_name(options.provider) != normalize_provider_name(
            self.options.provider
        )

    def _call_options(self, overrides: dict[str, Any]) -> ParseOptions:
        """Merge per-call overrides onto the instance options.

        When a call switches provider without naming a model, the instance
        model is dropped and the switched provider uses its own default.
        """
        call_options = self.options.merged(**overrides)
        if overrides.get("model") is None and self._switches_provider(call_options):
            call_options = call_options.model_copy(update={"model": None})
        return call_options

    def _provider_for(self, options: ParseOptions) -> LLMProvider:
        """Provider binding for a call, built once per provider name."""
        if not self._switches_provider(options):
            return self.llm_provider

        name = normalize_provider_name(options.provider)
        with self._providers_lock:
            if name not in self._providers:
                # The constructor key belongs to the instance provider only
                self._providers[name] = self._build_provider(name, None)
            return self._providers[name]

    @classmethod
    def with_schema(cls, schema: CVSchema, **kwargs: Any) -> "CVParser":
        """Create a parser with a custom schema."""
        return cls(schema=schema, **kwargs)

    @classmethod
    def minimal(cls, **kwargs: Any) -> "CVParser":
        """Create a parser with the minimal schema."""
        return cls(schema=CVSchema.minimal(), **kwargs)

    @classmethod
    def for_ats(cls, **kwargs: Any) -> "CVParser":
        """Create a parser with the ATS-optimized schema."""
        return cls(schema=CVSchema.ats(), **kwargs)

    @staticmethod
    def get_available_providers() -> list[str]:
        """Providers whose client library is installed."""
        return sorted(list_available_providers())

    @staticmethod
    def get_parsing_levels() -> dict[str, dict[str, str]]:
        return _parsing_levels()

    @staticmethod
    def get_recommended_model(provider: str) -> str:
        return _recommended_model(provider)

    def parse(self, path: str | Path, **options: Any) -> dict[str, Any]:
        """Parse a CV file (pdf, docx, txt, md) into a result dict."""
        return self.parse_detailed(Path(path), **options).data

    def parse_buffer(
        self, buffer: bytes, file_type: str | None = None, **options: Any
    ) -> dict[str, Any]:
        """Parse an in-memory document; the type is detected from magic bytes if omitted."""
        document = extract_text_from_buffer(buffer, file_type)
        return self.parse_detailed(document, **options).data

    def parse_text(self, text: str, **options: Any) -> dict[str, Any]:
        """Parse CV text that was already extracted."""
        return self.parse_detailed(preprocess_text(text), **options).data

    def parse_detailed(self, source: Source, **options: Any) -> ParseOutcome:
        """Parse a document and return the result with its diagnostics.

        Args:
            source: A file path, raw document bytes, or an ExtractedDocument.
            **options: Per-call option overrides.

        Raises:
            CVParserError: A typed error once retries and fallbacks are exhausted.
        """
        call_options = self._call_options(options)
        document = self._load(source)
        provider = self._provider_for(call_options)

        state = run_parse_graph(self.graph, document, call_options, provider)
        if state.get("data") is None:
            error = state.get("last_error")
            if error is None:
                raise CVParserError("Parse failed without a recorded error")
            logger.error(f"Parse failed after {state.get('attempt', 0)} attempt(s): {error}")
            raise error

        extraction = state["extraction"]
        return ParseOutcome(
            data=state["data"],
            confidence=state.get("confidence", 0.0),
            provider_confidence=extraction.confidence,
            prompt_info=extraction.prompt_info,
            provider=extraction.provider or provider.name,
            model=extraction.model,
            attempts=state.get("attempt", 1),
            validation=state.get("validation"),
            low_confidence=state.get("low_confidence", False),
        )

    def _load(self, source: Source) -> ExtractedDocument:
        if isinstance(source, ExtractedDocument):
            return source
        if isinstance(source, bytes | bytearray):
            return extract_text_from_buffer(bytes(source))
        return extract_text(source)

    def _parse_batch_item(self, item: BatchInput, options: dict[str, Any]) -> BatchItemResult:
        if isinstance(item, Mapping):
            name = str(item.get("name") or "buffer")
        else:
            name = str(item)

        try:
            if isinstance(item, Mapping):
                if "buffer" not in item:
                    raise CVParserError("Invalid file format in batch: missing 'buffer'")
                data = self.parse_buffer(item["buffer"], item.get("type"), **options)
            else:
                data = self.parse(item, **options)
        except CVParserError as e:
            logger.warning(f"Batch item {name} failed: {e}")
            return BatchItemResult(source=name, success=False, error=str(e), error_kind=e.kind.value)
        except Exception as e:
            logger.exception(f"Batch item {name} failed unexpectedly")
            return BatchItemResult(source=name, success=False, error=str(e), error_kind="unknown")

        return BatchItemResult(source=name, success=True, data=data)

    def parse_batch(
        self,
        files: Iterable[BatchInput],
        max_workers: int = 1,
        **options: Any,
    ) -> BatchResult:
        """Parse several documents; one item's failure never affects another.

        Args:
            files: Paths, or dicts with ``buffer`` and optional ``type`` and ``name``.
            max_workers: Thread count; 1 parses sequentially.
            **options: Per-call option overrides applied to every item.

        Returns:
            BatchResult with one entry per input, in input order.
        """
        items = list(files)
        if max_workers > 1 and len(items) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                results = list(executor.map(lambda item: self._parse_batch_item(item, options), items))
        else:
            results = [self._parse_batch_item(item, options) for item in items]

        successful = sum(1 for result in results if result.success)
        summary = BatchSummary(
            total=len(results),
            successful=successful,
            failed=len(results) - successful,
            success_rate=round(successful / len(results), 4) if results else 0.0,
        )
        logger.info(f"Batch complete: {successful}/{len(results)} parsed")
        return BatchResult(results=results, summary=summary)
