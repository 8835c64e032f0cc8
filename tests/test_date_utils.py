"""Tests for date parsing utilities."""

from datetime import date, datetime

from cv_parser_ai.utils.date_utils import (
    PRESENT_TERMS,
    YEAR_PATTERN,
    extract_end_year,
    is_present_term,
    months_between,
    parse_date,
)


class TestYearPattern:
    """Tests for the YEAR_PATTERN regex."""

    def test_matches_four_digit_years(self) -> None:
        assert YEAR_PATTERN.search("2021") is not None
        assert YEAR_PATTERN.search("1999") is not None

    def test_matches_years_in_text(self) -> None:
        match = YEAR_PATTERN.search("December 2021")
        assert match is not None
        assert match.group() == "2021"

    def test_does_not_match_invalid_years(self) -> None:
        assert YEAR_PATTERN.search("999") is None
        assert YEAR_PATTERN.search("22021") is None


class TestPresentTerms:
    """Tests for ongoing-role terms."""

    def test_contains_expected_terms(self) -> None:
        assert {"present", "current", "now", "ongoing"} <= PRESENT_TERMS

    def test_is_present_term(self) -> None:
        assert is_present_term("Present")
        assert is_present_term("  current ")
        assert not is_present_term("2021")
        assert not is_present_term(None)


class TestParseDate:
    """Tests for parse_date."""

    def test_iso_dates(self) -> None:
        assert parse_date("2021-03-15") == date(2021, 3, 15)
        assert parse_date("2021-03-15T10:00:00Z") == date(2021, 3, 15)

    def test_partial_dates(self) -> None:
        assert parse_date("2021-03") == date(2021, 3, 1)
        assert parse_date("2021") == date(2021, 1, 1)
        assert parse_date("03/2021") == date(2021, 3, 1)

    def test_month_names(self) -> None:
        assert parse_date("March 2020") == date(2020, 3, 1)
        assert parse_date("Sep. 2020") == date(2020, 9, 1)
        assert parse_date("Jan 15, 2019") == date(2019, 1, 15)

    def test_date_objects(self) -> None:
        assert parse_date(date(2020, 1, 2)) == date(2020, 1, 2)
        assert parse_date(datetime(2020, 1, 2, 8, 30)) == date(2020, 1, 2)

    def test_unparseable(self) -> None:
        assert parse_date("Present") is None
        assert parse_date("a while ago") is None
        assert parse_date("") is None
        assert parse_date(2021) is None


class TestMonthsBetween:
    """Tests for months_between."""

    def test_rounds_up(self) -> None:
        assert months_between(date(2021, 1, 1), date(2022, 1, 1)) == 12
        assert months_between(date(2021, 1, 1), date(2021, 1, 1)) == 0

    def test_order_independent(self) -> None:
        assert months_between(date(2022, 1, 1), date(2021, 1, 1)) == 12


class TestExtractEndYear:
    """Tests for extract_end_year."""

    def test_none_returns_none(self) -> None:
        assert extract_end_year(None) is None
        assert extract_end_year("") is None

    def test_present_returns_current_year(self) -> None:
        assert extract_end_year("Present") == date.today().year
        assert extract_end_year("2019 - Current") == date.today().year

    def test_latest_year_in_range(self) -> None:
        assert extract_end_year("2020-2023") == 2023
        assert extract_end_year("Jan 2023") == 2023

    def test_no_year(self) -> None:
        assert extract_end_year("N/A") is None
