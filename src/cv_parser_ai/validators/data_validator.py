"""Schema-driven validation of parsed CV data.

Walks the schema and the payload together. Missing required fields and
exceptions become errors; format mismatches and array coercions become
warnings. The output tree holds every schema field, with ``None`` for
anything missing, and leaf values run through their type's normalizer.
"""

import logging
from collections.abc import Mapping
from typing import Any

from cv_parser_ai.models.results import ValidationResult
from cv_parser_ai.schemas.cv_schema import CVSchema, FieldSpec
from cv_parser_ai.schemas.field_types import FieldType, get_field_handler

logger = logging.getLogger(__name__)


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


class DataValidator:
    """Validate and normalize data against a schema."""

    def __init__(self, schema: CVSchema):
        self.schema = schema

    def validate(self, data: Any) -> ValidationResult:
        """Validate a parsed payload.

        Args:
            data: The JSON object recovered from the LLM reply.

        Returns:
            ValidationResult whose ``data`` is the normalized tree. The tree is
            returned even when ``is_valid`` is False.
        """
        if not isinstance(data, dict):
            return ValidationResult(
                is_valid=False,
                data={},
                errors=[f"Validation failed: expected a JSON object, got {type(data).__name__}"],
            )

        errors: list[str] = []
        warnings: list[str] = []
        result = self._validate_object(data, self.schema, "", errors, warnings)

        if errors:
            logger.info(f"Validation found {len(errors)} error(s), {len(warnings)} warning(s)")
        return ValidationResult(
            is_valid=not errors,
            data=result,
            errors=errors,
            warnings=warnings,
        )

    def _validate_object(
        self,
        data: Mapping[str, Any],
        fields: Mapping[str, FieldSpec],
        path: str,
        errors: list[str],
        warnings: list[str],
    ) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, spec in fields.items():
            current_path = f"{path}.{key}" if path else key
            value = data.get(key)

            if _is_missing(value):
                if spec.required:
                    errors.append(f"Required field missing: {current_path}")
                result[key] = None
                continue

            try:
                result[key] = self._validate_field(value, spec, current_path, errors, warnings)
            except Exception as e:
                errors.append(f"Validation error for {current_path}: {e}")
                result[key] = value
        return result

    def _validate_field(
        self,
        value: Any,
        spec: FieldSpec,
        path: str,
        errors: list[str],
        warnings: list[str],
    ) -> Any:
        if spec.type == FieldType.ARRAY:
            if not isinstance(value, list):
                warnings.append(f"Converting non-array to array for {path}")
                value = [value]
            if not spec.fields:
                return value

            items = []
            for index, item in enumerate(value):
                item_path = f"{path}[{index}]"
                if not isinstance(item, dict):
                    errors.append(
                        f"Validation error for {item_path}: expected an object, "
                        f"got {type(item).__name__}"
                    )
                    items.append(item)
                    continue
                items.append(self._validate_object(item, spec.fields, item_path, errors, warnings))
            return items

        if spec.fields:
            if not isinstance(value, dict):
                raise TypeError(f"expected an object, got {type(value).__name__}")
            return self._validate_object(value, spec.fields, path, errors, warnings)

        handler = get_field_handler(spec.type)
        if handler is None:
            return value

        if not handler.validator(value):
            warnings.append(f"Invalid format for {path}: {value}")
        return handler.normalizer(value)
