"""OpenAI LLM provider."""

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from cv_parser_ai.llm.base import LLMProvider
from cv_parser_ai.prompts.extraction import SYSTEM_INSTRUCTION


class OpenAIProvider(LLMProvider):
    """OpenAI GPT provider."""

    name = "openai"
    default_model = "gpt-4o-mini"
    fallback_models = ("gpt-4o-mini", "gpt-4.1-mini", "gpt-4o", "gpt-3.5-turbo")
    system_instruction = SYSTEM_INSTRUCTION

    def _create_chat_model(self, model: str, temperature: float) -> BaseChatModel:
        """Create an OpenAI chat model."""
        return ChatOpenAI(
            model=model,
            temperature=temperature,
            max_tokens=self.max_tokens,
            api_key=self.api_key,
            timeout=self.timeout,
            max_retries=self.max_retries,
        )
