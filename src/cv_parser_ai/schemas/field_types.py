"""Semantic field types and their validator/normalizer pairs."""

import re
from collections.abc import Callable
from enum import Enum
from typing import Any, NamedTuple
from urllib.parse import urlparse

from cv_parser_ai.utils.date_utils import parse_date


class FieldType(str, Enum):
    """Semantic kind of a schema field."""

    # Basic types
    STRING = "string"
    EMAIL = "email"
    PHONE = "phone"
    URL = "url"
    DATE = "date"
    NUMBER = "number"
    BOOLEAN = "boolean"

    # Complex types
    ARRAY = "array"
    OBJECT = "object"

    # Specialized CV types
    NAME = "name"
    ADDRESS = "address"
    SKILL_LIST = "skill_list"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    LANGUAGE = "language"
    CERTIFICATION = "certification"


class FieldHandler(NamedTuple):
    """Format check and canonicalization for one field type."""

    validator: Callable[[Any], bool]
    normalizer: Callable[[Any], Any]


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")
_PHONE_SEPARATORS = re.compile(r"[\s\-()]")
_PHONE_NOISE = re.compile(r"[^\d+]")

TRUTHY_STRINGS = {"true", "yes", "y", "1"}
FALSY_STRINGS = {"false", "no", "n", "0"}


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _trim(value: Any) -> str:
    return str(value).strip()


def _is_email(value: Any) -> bool:
    return isinstance(value, str) and bool(EMAIL_PATTERN.match(value))


def _normalize_email(value: Any) -> str:
    return str(value).lower().strip()


def _is_phone(value: Any) -> bool:
    return bool(PHONE_PATTERN.match(_PHONE_SEPARATORS.sub("", str(value))))


def _normalize_phone(value: Any) -> str:
    text = str(value).strip()
    digits = _PHONE_NOISE.sub("", text).replace("+", "")
    return f"+{digits}" if text.startswith("+") else digits


def _is_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    parsed = urlparse(value.strip())
    return bool(parsed.scheme and parsed.netloc)


def _normalize_url(value: Any) -> str:
    text = str(value).strip()
    if not re.match(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", text):
        text = f"https://{text}"
    return text


def _is_date(value: Any) -> bool:
    return parse_date(value) is not None


def _normalize_date(value: Any) -> Any:
    parsed = parse_date(value)
    if parsed is None:
        # Already reported by the validator; keep the original text
        return str(value).strip()
    return parsed.isoformat()


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int | float):
        return True
    try:
        float(str(value).strip())
    except ValueError:
        return False
    return True


def _normalize_number(value: Any) -> Any:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        return value
    return int(number) if number.is_integer() else number


def _is_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    return str(value).strip().lower() in TRUTHY_STRINGS | FALSY_STRINGS


def _normalize_boolean(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUTHY_STRINGS:
        return True
    if text in FALSY_STRINGS:
        return False
    return value


def _normalize_name(value: Any) -> str:
    parts = str(value).strip().split(" ")
    return " ".join(part[:1].upper() + part[1:].lower() for part in parts)


def _is_list(value: Any) -> bool:
    return isinstance(value, list)


def _normalize_array(value: Any) -> list[Any]:
    if isinstance(value, list):
        return value
    return [item for item in [value] if item]


def _normalize_skill_list(value: Any) -> list[str]:
    items = value if isinstance(value, list) else [value]
    seen: set[str] = set()
    skills = []
    for item in items:
        if item is None:
            continue
        skill = str(item).strip()
        if not skill or skill.lower() in seen:
            continue
        seen.add(skill.lower())
        skills.append(skill)
    return skills


FIELD_HANDLERS: dict[FieldType, FieldHandler] = {
    FieldType.STRING: FieldHandler(_is_string, _trim),
    FieldType.ADDRESS: FieldHandler(_is_string, _trim),
    FieldType.LANGUAGE: FieldHandler(_is_string, _trim),
    FieldType.EMAIL: FieldHandler(_is_email, _normalize_email),
    FieldType.PHONE: FieldHandler(_is_phone, _normalize_phone),
    FieldType.URL: FieldHandler(_is_url, _normalize_url),
    FieldType.DATE: FieldHandler(_is_date, _normalize_date),
    FieldType.NUMBER: FieldHandler(_is_number, _normalize_number),
    FieldType.BOOLEAN: FieldHandler(_is_boolean, _normalize_boolean),
    FieldType.NAME: FieldHandler(_is_string, _normalize_name),
    FieldType.ARRAY: FieldHandler(_is_list, _normalize_array),
    FieldType.SKILL_LIST: FieldHandler(_is_list, _normalize_skill_list),
}


def get_field_handler(field_type: FieldType | str) -> FieldHandler | None:
    """Look up the handler for a field type.

    Structured types (object, experience, education, certification) have no
    handler and pass through unchanged.
    """
    return FIELD_HANDLERS.get(FieldType(field_type))


def register_field_handler(field_type: FieldType | str, handler: FieldHandler) -> None:
    """Register or replace the handler for a field type."""
    FIELD_HANDLERS[FieldType(field_type)] = handler
