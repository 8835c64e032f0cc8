"""Text compression, prompt assembly and LLM response parsing."""

from cv_parser_ai.processing.compression import (
    LEVEL_CHAR_LIMITS,
    ParsingLevel,
    TextCompressor,
    clean_text,
    compress_text,
    get_parsing_levels,
    select_parsing_level,
)
from cv_parser_ai.processing.prompt_builder import (
    BuiltPrompt,
    PromptBuilder,
    format_schema_for_prompt,
)
from cv_parser_ai.processing.response_parser import parse_llm_response

__all__ = [
    "BuiltPrompt",
    "LEVEL_CHAR_LIMITS",
    "ParsingLevel",
    "PromptBuilder",
    "TextCompressor",
    "clean_text",
    "compress_text",
    "format_schema_for_prompt",
    "get_parsing_levels",
    "parse_llm_response",
    "select_parsing_level",
]
