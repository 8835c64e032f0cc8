"""Tests for keyword extraction."""

from cv_parser_ai.utils.text import extract_keywords


class TestExtractKeywords:
    """Tests for extract_keywords."""

    def test_orders_by_frequency(self) -> None:
        text = "Python developer. Python, SQL and Python; SQL pipelines."
        assert extract_keywords(text) == ["python", "sql", "developer", "pipelines"]

    def test_drops_stop_words_short_words_and_numbers(self) -> None:
        text = "I am the lead on an AI team since 2019 with Go"
        assert extract_keywords(text) == ["lead", "team", "since"]

    def test_limit(self) -> None:
        text = " ".join(f"skill{i}" for i in range(100))
        assert len(extract_keywords(text, max_keywords=10)) == 10

    def test_min_length(self) -> None:
        assert extract_keywords("Go and Rust", min_length=2) == ["go", "rust"]

    def test_empty(self) -> None:
        assert extract_keywords("") == []
        assert extract_keywords(None) == []
