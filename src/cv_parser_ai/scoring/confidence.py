"""Completeness heuristics for parsed CV data.

Scores only count categories that are present in the data: a category that is
absent entirely shrinks the maximum instead of lowering the score. Two
weightings exist and are kept independent. ``calculate_confidence`` is the
score attached to a single LLM reply; ``calculate_overall_confidence`` is the
one reported in result metadata.
"""

import math
from typing import Any


def round_half_up(value: float, digits: int = 2) -> float:
    """Round like ``Math.round(x * 10**digits) / 10**digits``.

    Examples:
        >>> round_half_up(0.125)
        0.13
    """
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def _present(value: Any) -> bool:
    """Truthiness where empty containers still count as present."""
    if isinstance(value, dict | list):
        return True
    return bool(value)


def _has_personal(data: dict[str, Any]) -> bool:
    return isinstance(data.get("personal"), dict)


def _non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def _has_skills(data: dict[str, Any]) -> bool:
    skills = data.get("skills")
    if not isinstance(skills, dict):
        return False
    return _present(skills.get("technical")) or _present(skills.get("soft"))


def _score(
    data: dict[str, Any] | None,
    personal_points: tuple[int, int, int],
    experience_per_item: float,
    experience_cap: float,
    education_per_item: float,
    education_cap: float,
    skills_points: float,
) -> float:
    if not isinstance(data, dict):
        return 0.0

    score = 0.0
    max_score = 0.0

    if _has_personal(data):
        personal = data["personal"]
        name_points, email_points, phone_points = personal_points
        if _present(personal.get("fullName")):
            score += name_points
        if _present(personal.get("email")):
            score += email_points
        if _present(personal.get("phone")):
            score += phone_points
        max_score += sum(personal_points)

    if _non_empty_list(data.get("experience")):
        score += min(len(data["experience"]) * experience_per_item, experience_cap)
        max_score += experience_cap

    if _non_empty_list(data.get("education")):
        score += min(len(data["education"]) * education_per_item, education_cap)
        max_score += education_cap

    if _has_skills(data):
        score += skills_points
        max_score += skills_points

    if max_score == 0:
        return 0.0
    return round_half_up(score / max_score, 2)


def calculate_confidence(data: dict[str, Any] | None) -> float:
    """Score one LLM extraction.

    Weights: personal 50 (name 20, email 20, phone 10), experience 30
    (10 per entry), education 10 (5 per entry), skills 10.

    Examples:
        >>> calculate_confidence({"personal": {"fullName": "A B", "email": "a@b.com"}})
        0.8
        >>> calculate_confidence({})
        0.0
    """
    return _score(
        data,
        personal_points=(20, 20, 10),
        experience_per_item=10,
        experience_cap=30,
        education_per_item=5,
        education_cap=10,
        skills_points=10,
    )


def calculate_overall_confidence(data: dict[str, Any] | None) -> float:
    """Score a fully processed result for its metadata.

    Weights: personal 40 (name 15, email 15, phone 10), experience 30
    (10 per entry), education 15 (7.5 per entry), skills 15.
    """
    return _score(
        data,
        personal_points=(15, 15, 10),
        experience_per_item=10,
        experience_cap=30,
        education_per_item=7.5,
        education_cap=15,
        skills_points=15,
    )
