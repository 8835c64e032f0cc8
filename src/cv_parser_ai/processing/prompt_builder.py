"""Schema-driven prompt assembly."""

import math
from collections.abc import Mapping
from typing import NamedTuple

from cv_parser_ai.models.results import PromptInfo
from cv_parser_ai.processing.compression import ParsingLevel, TextCompressor, coerce_level
from cv_parser_ai.prompts.extraction import CANNED_LEVEL_FIELDS, CV_EXTRACTION_PROMPT
from cv_parser_ai.schemas.cv_schema import CVSchema, FieldSpec


class BuiltPrompt(NamedTuple):
    prompt: str
    info: PromptInfo


def estimate_tokens(text: str) -> int:
    """Rough token count at four characters per token."""
    return math.ceil(len(text) / 4)


def format_schema_for_prompt(schema: Mapping[str, FieldSpec]) -> str:
    """Render a schema as one manifest line per field path.

    Nested paths are indented two spaces per level.

    Examples:
        >>> print(format_schema_for_prompt(CVSchema.custom({"summary": {"type": "string"}})))
        - summary: string (OPTIONAL)
    """
    lines: list[str] = []

    def walk(fields: Mapping[str, FieldSpec], prefix: str, depth: int) -> None:
        for key, spec in fields.items():
            path = f"{prefix}.{key}" if prefix else key
            tag = "(REQUIRED)" if spec.required else "(OPTIONAL)"
            lines.append(f"{'  ' * depth}- {path}: {spec.type.value} {tag}")
            if spec.fields:
                walk(spec.fields, path, depth + 1)

    walk(schema, "", 0)
    return "\n".join(lines)


class PromptBuilder:
    """Build extraction prompts for a schema and optional parsing level.

    With no level, the full text and the schema manifest are sent. With a
    level, the text is compressed first; low and moderate also swap the
    schema manifest for a shorter hand-written field list unless
    ``canned_level_prompts`` is off. An unrecognized level is treated as
    moderate for both truncation and field list.
    """

    def __init__(
        self,
        canned_level_prompts: bool = True,
        compressor: TextCompressor | None = None,
    ):
        self.canned_level_prompts = canned_level_prompts
        self.compressor = compressor or TextCompressor()

    def field_manifest(self, schema: CVSchema, level: ParsingLevel | None) -> str:
        if self.canned_level_prompts and level is not None and level.value in CANNED_LEVEL_FIELDS:
            return CANNED_LEVEL_FIELDS[level.value]
        return format_schema_for_prompt(schema)

    def build(
        self,
        text: str,
        schema: CVSchema,
        level: ParsingLevel | str | None = None,
    ) -> BuiltPrompt:
        """Assemble the prompt and its diagnostics.

        Args:
            text: Document text.
            schema: Schema describing the fields to extract.
            level: Parsing level, or None for the full uncompressed prompt.

        Returns:
            BuiltPrompt with the prompt text and its PromptInfo.
        """
        if not level:
            prompt = CV_EXTRACTION_PROMPT.format(
                field_manifest=format_schema_for_prompt(schema),
                cv_text=text,
            )
            info = PromptInfo(
                level="original",
                original_text_length=len(text),
                compressed_text_length=len(text),
                prompt_length=len(prompt),
                estimated_tokens=estimate_tokens(prompt),
            )
            return BuiltPrompt(prompt, info)

        compressed, stats = self.compressor.compress(text, level)
        resolved = coerce_level(level) or ParsingLevel.MODERATE
        prompt = CV_EXTRACTION_PROMPT.format(
            field_manifest=self.field_manifest(schema, resolved),
            cv_text=compressed,
        )
        info = PromptInfo(
            level=stats.level,
            original_text_length=stats.original_text_length,
            compressed_text_length=stats.compressed_text_length,
            prompt_length=len(prompt),
            estimated_tokens=estimate_tokens(prompt),
            compression_ratio=stats.compression_ratio,
        )
        return BuiltPrompt(prompt, info)
