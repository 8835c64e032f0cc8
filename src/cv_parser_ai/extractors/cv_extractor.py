"""CV extraction with an LLM and a schema-driven prompt."""

import logging

from cv_parser_ai.exceptions import CVParserError, ProviderCallError, ResponseParseError
from cv_parser_ai.llm.base import LLMProvider
from cv_parser_ai.models.results import ExtractionResponse
from cv_parser_ai.processing.compression import ParsingLevel
from cv_parser_ai.processing.prompt_builder import PromptBuilder
from cv_parser_ai.processing.response_parser import parse_llm_response
from cv_parser_ai.schemas.cv_schema import CVSchema

logger = logging.getLogger(__name__)


class CVExtractor:
    """Extract structured CV data from raw text."""

    def __init__(self, llm_provider: LLMProvider, prompt_builder: PromptBuilder | None = None):
        self.llm_provider = llm_provider
        self.prompt_builder = prompt_builder or PromptBuilder()

    def process_with_schema(
        self,
        text: str,
        schema: CVSchema,
        level: ParsingLevel | str | None = None,
        model: str | None = None,
        temperature: float | None = None,
    ) -> ExtractionResponse:
        """Run one prompt through the provider and parse the reply.

        Args:
            text: Document text.
            schema: Fields to extract.
            level: Parsing level, or None for the full prompt.
            model: Model override for this call.
            temperature: Temperature override for this call.

        Returns:
            ExtractionResponse. A reply that is not recoverable JSON comes back
            with ``success=False`` and the raw text.

        Raises:
            ProviderCallError: If the provider call itself fails.
        """
        built = self.prompt_builder.build(text, schema, level)
        provider_name = self.llm_provider.name
        model_name = model or self.llm_provider.model

        try:
            raw = self.llm_provider.complete(built.prompt, model=model_name, temperature=temperature)
        except CVParserError:
            raise
        except Exception as e:
            logger.warning(f"{provider_name} call failed (model={model_name}): {e}")
            raise ProviderCallError(
                f"{provider_name} processing failed: {e}",
                provider=provider_name,
                model=model_name,
                cause=e,
            ) from e

        parsed = parse_llm_response(raw)
        outcome = "succeeded" if parsed.success else "returned unparseable output"
        logger.info(
            f"{provider_name} call {outcome} (model={model_name}, "
            f"~{built.info.estimated_tokens} prompt tokens)"
        )
        return ExtractionResponse(
            **parsed.model_dump(),
            prompt_info=built.info,
            provider=provider_name,
            model=model_name,
        )

    def extract(
        self,
        text: str,
        schema: CVSchema,
        level: ParsingLevel | str | None = None,
        model: str | None = None,
        temperature: float | None = None,
    ) -> ExtractionResponse:
        """Like ``process_with_schema`` but raise on an unparseable reply.

        Raises:
            ProviderCallError: If the provider call fails.
            ResponseParseError: If the reply holds no JSON object.
        """
        response = self.process_with_schema(text, schema, level, model, temperature)
        if not response.success:
            raise ResponseParseError(
                response.error or "Failed to parse AI response",
                raw_response=response.raw_response,
            )
        return response
