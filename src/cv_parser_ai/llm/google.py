"""Google Gemini LLM provider."""

import os

from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI

from cv_parser_ai.llm.base import LLMProvider

# Cheapest first; hosted model names are retired without notice
GEMINI_FALLBACK_MODELS = (
    "gemini-2.5-flash-lite",
    "gemini-2.0-flash-lite",
    "gemini-2.0-flash",
    "gemini-2.0-flash-001",
    "gemini-2.5-flash",
    "gemini-1.5-flash",
    "gemini-1.5-flash-002",
    "gemini-2.5-pro",
    "gemini-1.5-pro",
)


class GoogleProvider(LLMProvider):
    """Google Gemini provider using langchain-google-genai.

    Gemini receives the prompt as a single user message, no system instruction.
    """

    name = "google"
    default_model = "gemini-2.5-flash"
    fallback_models = GEMINI_FALLBACK_MODELS

    def __init__(self, model: str | None = None, api_key: str | None = None, **kwargs):
        """Initialize the Google provider.

        Args:
            model: Model name (default: gemini-2.5-flash).
            api_key: Google API key. If not provided, uses GOOGLE_API_KEY env var.
            **kwargs: temperature, max_tokens, timeout, max_retries.
        """
        super().__init__(model=model, api_key=api_key or os.getenv("GOOGLE_API_KEY"), **kwargs)

    def _create_chat_model(self, model: str, temperature: float) -> BaseChatModel:
        """Create a Gemini chat model instance."""
        return ChatGoogleGenerativeAI(
            model=model,
            temperature=temperature,
            max_output_tokens=self.max_tokens,
            google_api_key=self.api_key,
            timeout=self.timeout,
            max_retries=self.max_retries,
        )
