"""LLM provider abstraction."""

from cv_parser_ai.llm.base import (
    LLMProvider,
    get_llm_provider,
    get_recommended_model,
    list_available_providers,
    normalize_provider_name,
)
from cv_parser_ai.llm.fallback import (
    FallbackResult,
    build_candidate_models,
    is_model_unavailable_error,
    run_with_model_fallback,
)

__all__ = [
    "FallbackResult",
    "LLMProvider",
    "build_candidate_models",
    "get_llm_provider",
    "get_recommended_model",
    "is_model_unavailable_error",
    "list_available_providers",
    "normalize_provider_name",
    "run_with_model_fallback",
]
