"""Declarative CV schemas.

A schema maps top-level field names to ``FieldSpec`` entries. It drives both
the field manifest in the extraction prompt and the validation pass over the
LLM's reply. Schemas are immutable once built; the presets are independent
instances rather than transformations of the default schema.
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from cv_parser_ai.exceptions import SchemaError
from cv_parser_ai.schemas.field_types import FieldType


class FieldSpec(BaseModel):
    """Type, required-ness and nested fields of one schema entry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: FieldType
    required: bool = False
    fields: Mapping[str, "FieldSpec"] | None = None
    item_type: FieldType | None = None

    @field_validator("fields", mode="after")
    @classmethod
    def freeze_fields(cls, v: Mapping[str, "FieldSpec"] | None) -> Mapping[str, "FieldSpec"] | None:
        if v is None:
            return None
        return MappingProxyType(dict(v))

    @classmethod
    def from_definition(cls, definition: "FieldSpec | Mapping[str, Any]") -> "FieldSpec":
        """Build a FieldSpec from a plain dict like ``{"type": "email", "required": True}``.

        ``itemType`` is accepted as an alias of ``item_type``.
        """
        if isinstance(definition, FieldSpec):
            return definition
        data = dict(definition)
        if "itemType" in data:
            data["item_type"] = data.pop("itemType")
        if data.get("fields") is not None:
            data["fields"] = {
                name: cls.from_definition(sub) for name, sub in data["fields"].items()
            }
        return cls.model_validate(data)


def _f(
    field_type: FieldType,
    required: bool = False,
    fields: dict[str, Any] | None = None,
    item_type: FieldType | None = None,
) -> dict[str, Any]:
    return {"type": field_type, "required": required, "fields": fields, "item_type": item_type}


DEFAULT_SCHEMA_DEFINITION: dict[str, Any] = {
    "personal": _f(
        FieldType.OBJECT,
        required=True,
        fields={
            "fullName": _f(FieldType.NAME, required=True),
            "firstName": _f(FieldType.STRING),
            "lastName": _f(FieldType.STRING),
            "email": _f(FieldType.EMAIL, required=True),
            "phone": _f(FieldType.PHONE),
            "address": _f(FieldType.ADDRESS),
            "city": _f(FieldType.STRING),
            "state": _f(FieldType.STRING),
            "country": _f(FieldType.STRING),
            "postalCode": _f(FieldType.STRING),
            "linkedIn": _f(FieldType.URL),
            "github": _f(FieldType.URL),
            "website": _f(FieldType.URL),
        },
    ),
    "experience": _f(
        FieldType.ARRAY,
        item_type=FieldType.EXPERIENCE,
        fields={
            "jobTitle": _f(FieldType.STRING, required=True),
            "company": _f(FieldType.STRING, required=True),
            "startDate": _f(FieldType.DATE),
            "endDate": _f(FieldType.DATE),
            "current": _f(FieldType.BOOLEAN),
            "duration": _f(FieldType.STRING),
            "location": _f(FieldType.STRING),
            "description": _f(FieldType.STRING),
            "achievements": _f(FieldType.ARRAY),
            "technologies": _f(FieldType.SKILL_LIST),
        },
    ),
    "education": _f(
        FieldType.ARRAY,
        item_type=FieldType.EDUCATION,
        fields={
            "institution": _f(FieldType.STRING, required=True),
            "degree": _f(FieldType.STRING, required=True),
            "fieldOfStudy": _f(FieldType.STRING),
            "startDate": _f(FieldType.DATE),
            "endDate": _f(FieldType.DATE),
            "gpa": _f(FieldType.STRING),
            "location": _f(FieldType.STRING),
            "achievements": _f(FieldType.ARRAY),
        },
    ),
    "skills": _f(
        FieldType.OBJECT,
        fields={
            "technical": _f(FieldType.SKILL_LIST),
            "soft": _f(FieldType.SKILL_LIST),
            "languages": _f(FieldType.ARRAY),
            "frameworks": _f(FieldType.SKILL_LIST),
            "tools": _f(FieldType.SKILL_LIST),
            "databases": _f(FieldType.SKILL_LIST),
        },
    ),
    "certifications": _f(
        FieldType.ARRAY,
        item_type=FieldType.CERTIFICATION,
        fields={
            "name": _f(FieldType.STRING, required=True),
            "issuer": _f(FieldType.STRING, required=True),
            "issueDate": _f(FieldType.DATE),
            "expiryDate": _f(FieldType.DATE),
            "credentialId": _f(FieldType.STRING),
            "url": _f(FieldType.URL),
        },
    ),
    "summary": _f(FieldType.STRING),
    "objective": _f(FieldType.STRING),
    "projects": _f(
        FieldType.ARRAY,
        fields={
            "name": _f(FieldType.STRING, required=True),
            "description": _f(FieldType.STRING),
            "technologies": _f(FieldType.SKILL_LIST),
            "url": _f(FieldType.URL),
        },
    ),
    "metadata": _f(
        FieldType.OBJECT,
        fields={
            "totalExperience": _f(FieldType.STRING),
            "keywords": _f(FieldType.ARRAY),
            "parseConfidence": _f(FieldType.NUMBER),
            "parseDate": _f(FieldType.DATE),
        },
    ),
}

MINIMAL_SCHEMA_DEFINITION: dict[str, Any] = {
    "personal": _f(
        FieldType.OBJECT,
        required=True,
        fields={
            "fullName": _f(FieldType.NAME, required=True),
            "email": _f(FieldType.EMAIL, required=True),
            "phone": _f(FieldType.PHONE),
        },
    ),
    "experience": _f(
        FieldType.ARRAY,
        fields={
            "jobTitle": _f(FieldType.STRING, required=True),
            "company": _f(FieldType.STRING, required=True),
        },
    ),
}

ATS_SCHEMA_DEFINITION: dict[str, Any] = {
    "personal": _f(
        FieldType.OBJECT,
        required=True,
        fields={
            "fullName": _f(FieldType.NAME, required=True),
            "email": _f(FieldType.EMAIL, required=True),
            "phone": _f(FieldType.PHONE, required=True),
            "linkedIn": _f(FieldType.URL),
        },
    ),
    "experience": _f(
        FieldType.ARRAY,
        required=True,
        fields={
            "jobTitle": _f(FieldType.STRING, required=True),
            "company": _f(FieldType.STRING, required=True),
            "startDate": _f(FieldType.DATE, required=True),
            "endDate": _f(FieldType.DATE),
            "description": _f(FieldType.STRING, required=True),
        },
    ),
    "skills": _f(
        FieldType.OBJECT,
        required=True,
        fields={"technical": _f(FieldType.SKILL_LIST, required=True)},
    ),
}


class CVSchema(Mapping[str, FieldSpec]):
    """Immutable mapping of top-level field names to field specs.

    Examples:
        >>> schema = CVSchema.minimal()
        >>> schema.required_fields()
        ['personal', 'personal.fullName', 'personal.email', 'experience.jobTitle', 'experience.company']
    """

    def __init__(self, definition: Mapping[str, Any] | None = None, name: str = "custom"):
        if not definition:
            definition = DEFAULT_SCHEMA_DEFINITION
            name = "default"

        try:
            fields = {key: FieldSpec.from_definition(value) for key, value in definition.items()}
        except (ValidationError, TypeError, ValueError, AttributeError) as e:
            raise SchemaError(f"Invalid schema definition: {e}", cause=e) from e

        self._fields: Mapping[str, FieldSpec] = MappingProxyType(fields)
        self.name = name

    @classmethod
    def default(cls) -> "CVSchema":
        """Comprehensive schema covering every supported CV section."""
        return cls(DEFAULT_SCHEMA_DEFINITION, name="default")

    @classmethod
    def minimal(cls) -> "CVSchema":
        """Name, email, phone and job titles only."""
        return cls(MINIMAL_SCHEMA_DEFINITION, name="minimal")

    @classmethod
    def ats(cls) -> "CVSchema":
        """Schema tuned for applicant tracking systems."""
        return cls(ATS_SCHEMA_DEFINITION, name="ats")

    @classmethod
    def custom(cls, fields: Mapping[str, Any], extend_default: bool = False) -> "CVSchema":
        """Build a custom schema.

        Args:
            fields: Top-level field definitions.
            extend_default: If True, the custom entries replace or extend the
                default schema's top-level entries instead of standing alone.
        """
        if extend_default:
            return cls({**DEFAULT_SCHEMA_DEFINITION, **fields}, name="custom")
        return cls(fields, name="custom")

    def __getitem__(self, key: str) -> FieldSpec:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"CVSchema(name={self.name!r}, fields={list(self._fields)!r})"

    def field_paths(self) -> dict[str, FieldSpec]:
        """Flatten the schema into ``{dotted_path: FieldSpec}`` in schema order."""
        paths: dict[str, FieldSpec] = {}

        def walk(fields: Mapping[str, FieldSpec], prefix: str) -> None:
            for key, spec in fields.items():
                path = f"{prefix}.{key}" if prefix else key
                paths[path] = spec
                if spec.fields:
                    walk(spec.fields, path)

        walk(self._fields, "")
        return paths

    def required_fields(self) -> list[str]:
        """Dotted paths of every required field, at any depth."""
        return [path for path, spec in self.field_paths().items() if spec.required]
