"""Post-validation normalization of parsed CV data.

This pass runs on the tree the schema validator already produced. It
re-normalizes dates and contact fields and adds the derived experience
``duration``, which the schema cannot express.
"""

import copy
import re
from datetime import date
from typing import Any
from urllib.parse import urlparse

from cv_parser_ai.scoring.confidence import round_half_up
from cv_parser_ai.utils.date_utils import is_present_term, months_between, parse_date

_PHONE_NOISE = re.compile(r"[^\d+]")


def normalize_phone(phone: Any) -> str | None:
    """Keep digits and ``+``; numbers longer than 10 digits get a leading ``+``.

    Examples:
        >>> normalize_phone("1 (555) 123-4567")
        '+15551234567'
        >>> normalize_phone("555-1234")
        '5551234'
    """
    if not phone:
        return None
    normalized = _PHONE_NOISE.sub("", str(phone))
    if len(normalized) > 10 and not normalized.startswith("+"):
        normalized = f"+{normalized}"
    return normalized


def normalize_email(email: Any) -> str | None:
    if not email:
        return None
    return str(email).lower().strip()


def normalize_date(value: Any) -> str | None:
    """Convert a date value to ``YYYY-MM-DD``.

    Returns None for empty, ongoing ("Present") or unparseable values.
    """
    if not value:
        return None
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else None


def normalize_url(url: Any) -> str | None:
    """Prepend ``https://`` when no scheme is given; None if still invalid."""
    if not url:
        return None
    normalized = str(url).strip()
    if not normalized.startswith(("http://", "https://")):
        normalized = f"https://{normalized}"

    parsed = urlparse(normalized)
    if not parsed.netloc or " " in parsed.netloc:
        return None
    return normalized


def normalize_name(name: Any) -> str | None:
    """Capitalize each space-separated token.

    Examples:
        >>> normalize_name("  jane DOE ")
        'Jane Doe'
    """
    if not name:
        return None
    return " ".join(part[:1].upper() + part[1:].lower() for part in str(name).strip().split(" "))


def normalize_skills(skills: Any) -> list[str]:
    """Trim skills, drop empty ones and capitalize the first letter."""
    if not skills:
        return []
    items = skills if isinstance(skills, list) else [skills]
    trimmed = [str(skill).strip() for skill in items if skill is not None]
    return [skill[:1].upper() + skill[1:] for skill in trimmed if skill]


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count != 1 else ''}"


def format_duration(total_months: int) -> str:
    """Render months as e.g. "2 years 3 months", "1 year" or "5 months"."""
    years, months = divmod(total_months, 12)
    if years and months:
        return f"{_plural(years, 'year')} {_plural(months, 'month')}"
    if years:
        return _plural(years, "year")
    return _plural(months, "month")


def calculate_duration(start: Any, end: Any = None, today: date | None = None) -> str | None:
    """Human-readable length of a role.

    Args:
        start: Start date value.
        end: End date value; None or an ongoing term like "Present" means today.
        today: Reference date for ongoing roles.

    Returns:
        Duration text, or None when a date cannot be parsed.
    """
    total = _duration_months(start, end, today)
    return format_duration(total) if total is not None else None


def _duration_months(start: Any, end: Any, today: date | None) -> int | None:
    if not start:
        return None
    start_date = parse_date(start)
    if start_date is None:
        return None

    if not end or is_present_term(end):
        end_date = today or date.today()
    else:
        end_date = parse_date(end)
        if end_date is None:
            return None

    return months_between(start_date, end_date)


def calculate_total_experience_years(
    experiences: Any, today: date | None = None
) -> float | None:
    """Sum the datable experience entries, in years to one decimal place."""
    if not isinstance(experiences, list):
        return None

    durations = [
        _duration_months(exp.get("startDate"), exp.get("endDate"), today)
        for exp in experiences
        if isinstance(exp, dict)
    ]
    months = [value for value in durations if value is not None]
    if not months:
        return None
    return round_half_up(sum(months) / 12, 1)


def normalize_parsed_data(data: dict[str, Any], today: date | None = None) -> dict[str, Any]:
    """Second normalization pass over an already validated tree.

    Returns a new dict; the input is left untouched.
    """
    normalized = copy.deepcopy(data)

    personal = normalized.get("personal")
    if isinstance(personal, dict):
        if personal.get("email"):
            personal["email"] = normalize_email(personal["email"])
        if personal.get("phone"):
            personal["phone"] = normalize_phone(personal["phone"])
        if personal.get("fullName"):
            personal["fullName"] = normalize_name(personal["fullName"])
        if personal.get("linkedIn"):
            personal["linkedIn"] = normalize_url(personal["linkedIn"])

    experience = normalized.get("experience")
    if isinstance(experience, list):
        normalized["experience"] = [
            {
                **exp,
                "startDate": normalize_date(exp.get("startDate")),
                "endDate": normalize_date(exp.get("endDate")),
                "duration": calculate_duration(exp.get("startDate"), exp.get("endDate"), today),
            }
            if isinstance(exp, dict)
            else exp
            for exp in experience
        ]

    education = normalized.get("education")
    if isinstance(education, list):
        normalized["education"] = [
            {
                **edu,
                "startDate": normalize_date(edu.get("startDate")),
                "endDate": normalize_date(edu.get("endDate")),
            }
            if isinstance(edu, dict)
            else edu
            for edu in education
        ]

    certifications = normalized.get("certifications")
    if isinstance(certifications, list):
        normalized["certifications"] = [
            {
                **cert,
                "issueDate": normalize_date(cert.get("issueDate")),
                "expiryDate": normalize_date(cert.get("expiryDate")),
            }
            if isinstance(cert, dict)
            else cert
            for cert in certifications
        ]

    skills = normalized.get("skills")
    if isinstance(skills, dict):
        for key, value in skills.items():
            if isinstance(value, list):
                skills[key] = normalize_skills(value)

    return normalized
