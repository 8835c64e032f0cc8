"""CV schemas and field type registry."""

from cv_parser_ai.schemas.cv_schema import CVSchema, FieldSpec
from cv_parser_ai.schemas.field_types import (
    FIELD_HANDLERS,
    FieldHandler,
    FieldType,
    get_field_handler,
    register_field_handler,
)

__all__ = [
    "CVSchema",
    "FIELD_HANDLERS",
    "FieldHandler",
    "FieldSpec",
    "FieldType",
    "get_field_handler",
    "register_field_handler",
]
