"""Date parsing utilities for CV date fields."""

import math
import re
from datetime import date, datetime

# Pattern to match 4-digit years (1900-2099)
YEAR_PATTERN = re.compile(r"\b(19|20)\d{2}\b")

# Terms indicating current/ongoing employment
PRESENT_TERMS = {"present", "current", "now", "ongoing"}

# Average month length used for all duration math
AVERAGE_MONTH_DAYS = 30.44

# Tried in order after ISO parsing fails
DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m",
    "%Y/%m/%d",
    "%Y/%m",
    "%Y",
    "%m/%d/%Y",
    "%m/%Y",
    "%m-%Y",
    "%b %Y",
    "%B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%B %d %Y",
    "%d %b %Y",
    "%d %B %Y",
)


def is_present_term(value: object) -> bool:
    """Check whether a date value means "ongoing" (e.g. "Present").

    Examples:
        >>> is_present_term("Present")
        True
        >>> is_present_term("2021")
        False
    """
    if not isinstance(value, str):
        return False
    return value.lower().strip() in PRESENT_TERMS


def parse_date(value: object) -> date | None:
    """Parse a CV date value into a date.

    Partial dates resolve to the first day of the period, so "2021" becomes
    2021-01-01 and "March 2020" becomes 2020-03-01.

    Args:
        value: A date, datetime, or string like "2021-03", "Mar 2021", "03/2021".

    Returns:
        The parsed date, or None if the value is empty, ongoing, or unparseable.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = " ".join(value.strip().split())
    if not text or is_present_term(text):
        return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    # "Sep. 2020" -> "Sep 2020"
    candidates = [text, text.replace(".", "")]
    for candidate in candidates:
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(candidate, fmt).date()
            except ValueError:
                continue

    return None


def months_between(start: date, end: date) -> int:
    """Whole months between two dates, rounded up, using the average month length."""
    days = abs((end - start).days)
    return math.ceil(days / AVERAGE_MONTH_DAYS)


def extract_end_year(date_str: str | None) -> int | None:
    """Extract the year from an end date string.

    Args:
        date_str: Date string like "2023", "Jan 2023", "Present", "2020-2023".

    Returns:
        The latest year mentioned, the current year for ongoing roles, or None.
    """
    if not date_str:
        return None
    if any(term in date_str.lower() for term in PRESENT_TERMS):
        return date.today().year

    years = [int(match.group(0)) for match in YEAR_PATTERN.finditer(date_str)]
    return max(years) if years else None
