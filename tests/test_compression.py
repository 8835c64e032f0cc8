"""Tests for level-aware text compression and level selection."""

from cv_parser_ai.processing.compression import (
    LEVEL_CHAR_LIMITS,
    ParsingLevel,
    TextCompressor,
    clean_text,
    compress_text,
    compression_ratio,
    get_parsing_levels,
    select_parsing_level,
)


class TestCleanText:
    """Tests for boilerplate removal."""

    def test_removes_page_footers(self) -> None:
        assert clean_text("Jane Doe Page 1 of 3\nEngineer Page 2 of 3") == "Jane Doe Engineer"

    def test_removes_references_line(self) -> None:
        text = "Skills: Python\nReferences Available Upon Request"
        assert clean_text(text) == "Skills: Python"

    def test_collapses_whitespace_runs(self) -> None:
        assert clean_text("a    b\n\n\nc") == "a b c"


class TestCompressText:
    """Tests for per-level truncation."""

    def test_level_limits(self) -> None:
        text = "x" * 6000
        assert len(compress_text(text, "low")) == 2000
        assert len(compress_text(text, "moderate")) == 3500
        assert len(compress_text(text, "high")) == 5000
        assert len(compress_text(text, "ultra")) == 6000

    def test_accepts_enum_levels(self) -> None:
        assert len(compress_text("y" * 2500, ParsingLevel.LOW)) == 2000

    def test_unknown_level_uses_moderate_limit(self) -> None:
        assert len(compress_text("z" * 4000, "extreme")) == LEVEL_CHAR_LIMITS[ParsingLevel.MODERATE]

    def test_short_text_untouched(self) -> None:
        assert compress_text("Jane Doe", "low") == "Jane Doe"


class TestCompressionStats:
    """Tests for compression statistics."""

    def test_ratio_rounds_half_up(self) -> None:
        assert compression_ratio(3000, 2000) == 33
        assert compression_ratio(200, 199) == 1
        assert compression_ratio(8, 7) == 13

    def test_ratio_of_empty_text(self) -> None:
        assert compression_ratio(0, 0) == 0

    def test_compressor_reports_stats(self) -> None:
        result = TextCompressor().compress("x" * 3000, "low")
        assert len(result.text) == 2000
        assert result.stats.level == "low"
        assert result.stats.original_text_length == 3000
        assert result.stats.compressed_text_length == 2000
        assert result.stats.compression_ratio == 33


class TestParsingLevels:
    """Tests for the parsing level catalogue."""

    def test_all_levels_described(self) -> None:
        levels = get_parsing_levels()
        assert list(levels) == ["low", "moderate", "high", "ultra"]
        assert levels["low"]["tokens"] == "~200"

    def test_returns_copies(self) -> None:
        levels = get_parsing_levels()
        levels["low"]["tokens"] = "changed"
        assert get_parsing_levels()["low"]["tokens"] == "~200"


class TestSelectParsingLevel:
    """Tests for choosing a level from a job posting."""

    def test_senior_title_is_high(self) -> None:
        assert select_parsing_level("Senior Backend Engineer") is ParsingLevel.HIGH

    def test_high_salary_is_high(self) -> None:
        assert select_parsing_level("Marketing Coordinator", salary=150000) is ParsingLevel.HIGH

    def test_technical_title_is_moderate(self) -> None:
        assert select_parsing_level("Junior Developer") is ParsingLevel.MODERATE

    def test_technical_job_type_beats_entry_title(self) -> None:
        assert select_parsing_level("Support Assistant", job_type="Technical") is ParsingLevel.MODERATE

    def test_entry_title_is_low(self) -> None:
        assert select_parsing_level("Junior Designer") is ParsingLevel.LOW

    def test_low_salary_is_low(self) -> None:
        assert select_parsing_level(salary=30000) is ParsingLevel.LOW

    def test_executive_title_is_ultra(self) -> None:
        assert select_parsing_level("Chief Marketing Officer") is ParsingLevel.ULTRA

    def test_unknown_salary_skips_salary_rules(self) -> None:
        assert select_parsing_level("Office Coordinator", salary=None) is ParsingLevel.MODERATE

    def test_defaults_to_moderate(self) -> None:
        assert select_parsing_level() is ParsingLevel.MODERATE
