"""Base LLM provider abstraction."""

import importlib
import importlib.util
import logging
import threading
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, ClassVar

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from cv_parser_ai.exceptions import ConfigurationError, ProviderUnavailableError
from cv_parser_ai.llm.fallback import build_candidate_models

logger = logging.getLogger(__name__)

# Default timeout in seconds for API requests
DEFAULT_TIMEOUT = 120.0  # 2 minutes per request
DEFAULT_MAX_RETRIES = 1  # client-level retry; the pipeline retries on top
DEFAULT_TEMPERATURE = 0.1
DEFAULT_MAX_TOKENS = 4000

PROVIDER_ALIASES = {
    "gemini": "google",
    "claude": "anthropic",
}

# provider -> (module, class name, distribution to install)
PROVIDER_BINDINGS: dict[str, tuple[str, str, str]] = {
    "google": ("cv_parser_ai.llm.google", "GoogleProvider", "langchain-google-genai"),
    "openai": ("cv_parser_ai.llm.openai", "OpenAIProvider", "langchain-openai"),
    "anthropic": ("cv_parser_ai.llm.anthropic", "AnthropicProvider", "langchain-anthropic"),
    "groq": ("cv_parser_ai.llm.groq", "GroqProvider", "langchain-groq"),
}

# provider -> client library import name
PROVIDER_CLIENT_MODULES = {
    "google": "langchain_google_genai",
    "openai": "langchain_openai",
    "anthropic": "langchain_anthropic",
    "groq": "langchain_groq",
}

RECOMMENDED_MODELS = {
    "google": "gemini-2.5-flash",
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-haiku-latest",
    "groq": "llama-3.1-8b-instant",
}


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Implements model caching to avoid repeated instantiation overhead.
    Models are cached per (model, temperature) on first access and reused.
    """

    name: ClassVar[str]
    default_model: ClassVar[str]
    fallback_models: ClassVar[tuple[str, ...]] = ()
    system_instruction: ClassVar[str | None] = None

    def __init__(
        self,
        model: str | None = None,
        api_key: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ):
        self.model = model or self.default_model
        self.api_key = api_key
        self.default_temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.max_retries = max_retries
        self._models: dict[tuple[str, float], BaseChatModel] = {}
        self._lock = threading.Lock()

    def get_chat_model(
        self,
        model: str | None = None,
        temperature: float | None = None,
    ) -> BaseChatModel:
        """Get a cached chat model for a model id and temperature."""
        key = (
            model or self.model,
            temperature if temperature is not None else self.default_temperature,
        )
        with self._lock:
            if key not in self._models:
                self._models[key] = self._create_chat_model(*key)
            return self._models[key]

    @abstractmethod
    def _create_chat_model(self, model: str, temperature: float) -> BaseChatModel:
        """Create a new chat model instance. Override in subclasses."""
        pass

    def build_messages(self, prompt: str) -> list[BaseMessage]:
        """Build the request messages, with the system instruction if the provider uses one."""
        messages: list[BaseMessage] = []
        if self.system_instruction:
            messages.append(SystemMessage(content=self.system_instruction))
        messages.append(HumanMessage(content=prompt))
        return messages

    def extract_completion(self, message: BaseMessage) -> str:
        """Pull the reply text out of a model response."""
        content = message.content
        if isinstance(content, str):
            return content
        # List of content blocks (strings or {"type": "text", "text": ...})
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """Send a prompt and return the completion text."""
        chat_model = self.get_chat_model(model, temperature)
        response = chat_model.invoke(self.build_messages(prompt))
        return self.extract_completion(response)

    def candidate_models(self) -> list[str]:
        """Models to probe during fallback, configured model first."""
        return build_candidate_models(self.model, self.fallback_models)


def normalize_provider_name(provider: str) -> str:
    """Resolve aliases like "gemini" and "claude" to canonical provider names.

    Raises:
        ConfigurationError: If the provider is not supported.
    """
    name = (provider or "").strip().lower()
    name = PROVIDER_ALIASES.get(name, name)
    if name not in PROVIDER_BINDINGS:
        supported = ", ".join(sorted(PROVIDER_BINDINGS))
        raise ConfigurationError(
            f"Unsupported AI provider: {provider}. Supported providers: {supported}",
            details={"provider": provider},
        )
    return name


def get_recommended_model(provider: str) -> str:
    """Get the recommended model for a provider, defaulting to Google's."""
    try:
        return RECOMMENDED_MODELS[normalize_provider_name(provider)]
    except ConfigurationError:
        return RECOMMENDED_MODELS["google"]


@lru_cache
def list_available_providers() -> frozenset[str]:
    """Providers whose client library is installed."""
    return frozenset(
        provider
        for provider, module in PROVIDER_CLIENT_MODULES.items()
        if importlib.util.find_spec(module) is not None
    )


def get_llm_provider(
    provider: str,
    model: str | None = None,
    api_key: str | None = None,
    **kwargs: Any,
) -> LLMProvider:
    """Factory function to get an LLM provider instance.

    Raises:
        ConfigurationError: If the provider is unknown.
        ProviderUnavailableError: If the provider's client library is not installed.
    """
    name = normalize_provider_name(provider)
    module_name, class_name, package = PROVIDER_BINDINGS[name]
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ProviderUnavailableError(name, package, cause=e) from e

    provider_class: type[LLMProvider] = getattr(module, class_name)
    logger.info(f"Using {name} provider with model {model or provider_class.default_model}")
    return provider_class(model=model, api_key=api_key, **kwargs)
