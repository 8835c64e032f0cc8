"""Anthropic Claude LLM provider."""

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage

from cv_parser_ai.llm.base import LLMProvider


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider with model caching.

    Claude receives the prompt as a single user message, no system instruction.
    """

    name = "anthropic"
    default_model = "claude-3-5-haiku-latest"
    fallback_models = (
        "claude-3-5-haiku-latest",
        "claude-3-haiku-20240307",
        "claude-sonnet-4-5",
    )

    def _create_chat_model(self, model: str, temperature: float) -> BaseChatModel:
        """Create an Anthropic chat model."""
        return ChatAnthropic(
            model=model,
            temperature=temperature,
            max_tokens=self.max_tokens,
            api_key=self.api_key,
            timeout=self.timeout,
            max_retries=self.max_retries,
        )

    def extract_completion(self, message: BaseMessage) -> str:
        """Take the first text block of a Claude reply."""
        content = message.content
        if isinstance(content, list):
            for block in content:
                if isinstance(block, dict) and block.get("type") == "text":
                    return block.get("text", "")
                if isinstance(block, str):
                    return block
            return ""
        return content
