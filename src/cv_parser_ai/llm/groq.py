"""Groq LLM provider."""

from langchain_core.language_models import BaseChatModel
from langchain_groq import ChatGroq

from cv_parser_ai.llm.base import LLMProvider
from cv_parser_ai.prompts.extraction import SYSTEM_INSTRUCTION


class GroqProvider(LLMProvider):
    """Groq-hosted open models via langchain-groq."""

    name = "groq"
    default_model = "llama-3.1-8b-instant"
    fallback_models = ("llama-3.1-8b-instant", "llama-3.3-70b-versatile", "gemma2-9b-it")
    system_instruction = SYSTEM_INSTRUCTION

    def _create_chat_model(self, model: str, temperature: float) -> BaseChatModel:
        """Create a Groq chat model."""
        return ChatGroq(
            model=model,
            temperature=temperature,
            max_tokens=self.max_tokens,
            api_key=self.api_key,
            timeout=self.timeout,
            max_retries=self.max_retries,
        )
