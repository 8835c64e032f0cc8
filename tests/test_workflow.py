"""Tests for the LangGraph parse pipeline."""

from datetime import date
from typing import Any
from unittest.mock import MagicMock, call

import pytest

from cv_parser_ai.exceptions import (
    ConfigurationError,
    DataValidationError,
    ModelFallbackExhaustedError,
    ParseDeadlineExceededError,
    ResponseParseError,
)
from cv_parser_ai.graph.nodes import build_metadata
from cv_parser_ai.graph.workflow import create_parse_graph, recursion_limit_for, run_parse_graph
from cv_parser_ai.models.options import ParseOptions
from cv_parser_ai.models.results import ExtractedDocument, ExtractionResponse
from cv_parser_ai.schemas.cv_schema import CVSchema


class FakeClock:
    """Monotonic clock that only advances when something sleeps."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


def _run(provider, document, schema=None, sleep=None, **options: Any):
    graph = create_parse_graph(schema or CVSchema.default(), sleep=sleep or MagicMock())
    return run_parse_graph(graph, document, ParseOptions(**options), provider)


class TestHappyPath:
    """Tests for a parse that succeeds on the first attempt."""

    def test_validated_and_enriched(self, stub_provider, sample_document) -> None:
        state = _run(stub_provider, sample_document)

        assert state["attempt"] == 1
        assert len(stub_provider.calls) == 1

        data = state["data"]
        assert data["personal"]["fullName"] == "Jane Doe"
        assert data["personal"]["email"] == "jane.doe@example.com"
        assert data["experience"][0]["endDate"] is None
        assert data["experience"][0]["duration"]
        assert data["skills"]["technical"] == ["Python", "SQL", "Kubernetes"]
        assert state["validation"].is_valid is True

    def test_metadata(self, stub_provider, sample_document) -> None:
        state = _run(stub_provider, sample_document)
        metadata = state["data"]["metadata"]

        assert metadata["provider"] == "stub"
        assert metadata["model"] == "stub-model"
        assert metadata["parsingLevel"] == "original"
        assert metadata["parseConfidence"] == state["confidence"]
        assert metadata["wordCount"] == sample_document.word_count
        assert metadata["lineCount"] == sample_document.line_count
        assert metadata["totalExperience"].endswith(" years")
        assert "python" in metadata["keywords"]

    def test_keywords_top_level_without_metadata(self, stub_provider, sample_document) -> None:
        state = _run(stub_provider, sample_document, include_metadata=False)
        assert state["data"]["metadata"] is None
        assert "python" in state["data"]["keywords"]

    def test_no_keywords(self, stub_provider, sample_document) -> None:
        state = _run(stub_provider, sample_document, include_keywords=False)
        assert "keywords" not in state["data"]["metadata"]
        assert "keywords" not in state["data"]

    def test_skip_validation_keeps_raw_keys(self, make_stub, sample_document) -> None:
        provider = make_stub('{"personal": {"fullName": "jane doe"}, "hobbies": ["chess"]}')
        state = _run(provider, sample_document, validate_data=False, include_metadata=False)
        assert state["validation"] is None
        assert state["data"]["hobbies"] == ["chess"]
        assert state["data"]["personal"]["fullName"] == "Jane Doe"

    def test_level_reaches_prompt(self, stub_provider, sample_document) -> None:
        state = _run(stub_provider, sample_document, parsing_level="low")
        assert state["extraction"].prompt_info.level == "low"
        assert state["data"]["metadata"]["parsingLevel"] == "low"


class TestRetries:
    """Tests for the retry loop around extraction."""

    def test_retries_until_reply_parses(self, make_stub, sample_reply, sample_document) -> None:
        sleep = MagicMock()
        provider = make_stub(["not json", "still not json", sample_reply])

        state = _run(provider, sample_document, sleep=sleep, max_retries=2, retry_delay_seconds=1.0)

        assert state["attempt"] == 3
        assert state["data"]["personal"]["fullName"] == "Jane Doe"
        assert sleep.call_args_list == [call(1.0), call(2.0)]

    def test_gives_up_after_max_retries(self, make_stub, sample_document) -> None:
        sleep = MagicMock()
        provider = make_stub("not json")

        state = _run(provider, sample_document, sleep=sleep, max_retries=1)

        assert state["data"] is None
        assert state["attempt"] == 2
        assert isinstance(state["last_error"], ResponseParseError)
        assert state["last_error"].raw_response == "not json"
        assert len(provider.calls) == 2
        sleep.assert_called_once_with(1.0)

    def test_provider_failures_are_retried(self, make_stub, sample_reply, sample_document) -> None:
        provider = make_stub([TimeoutError("read timed out"), sample_reply])
        state = _run(provider, sample_document, max_retries=1)
        assert state["attempt"] == 2
        assert state["data"] is not None

    def test_non_retryable_error_propagates(self, make_stub, sample_document) -> None:
        provider = make_stub([ConfigurationError("bad key")])
        with pytest.raises(ConfigurationError):
            _run(provider, sample_document, max_retries=3)
        assert len(provider.calls) == 1

    def test_recursion_limit_covers_all_attempts(self) -> None:
        assert recursion_limit_for(ParseOptions(max_retries=10)) == 32


class TestDeadline:
    """Tests for the overall parse deadline."""

    def test_deadline_stops_backoff(self, make_stub, sample_document) -> None:
        clock = FakeClock()
        provider = make_stub("not json")
        graph = create_parse_graph(CVSchema.default(), sleep=clock.sleep, clock=clock)
        options = ParseOptions(max_retries=5, retry_delay_seconds=1.0, deadline_seconds=2.5)

        with pytest.raises(ParseDeadlineExceededError) as exc_info:
            run_parse_graph(graph, sample_document, options, provider, clock=clock)

        # Second backoff (2s) would end at t=3 > 2.5
        assert len(provider.calls) == 2
        assert clock.now == 1.0
        assert isinstance(exc_info.value.cause, ResponseParseError)


class TestModelFallback:
    """Tests for model fallback inside an extraction attempt."""

    def test_unavailable_model_skipped(self, make_stub, sample_reply, sample_document) -> None:
        sleep = MagicMock()
        provider = make_stub(sample_reply, failures={"stub-model": Exception("404 model not found")})

        state = _run(provider, sample_document, sleep=sleep, model_fallback=True)

        assert [c["model"] for c in provider.calls] == ["stub-model", "stub-a"]
        assert state["extraction"].model == "stub-a"
        assert state["data"]["metadata"]["model"] == "stub-a"
        sleep.assert_not_called()

    def test_custom_fallback_models(self, make_stub, sample_reply, sample_document) -> None:
        provider = make_stub(sample_reply, failures={"stub-model": Exception("404")})
        state = _run(
            provider,
            sample_document,
            model_fallback=True,
            fallback_models=["custom-1", "custom-2"],
        )
        assert state["extraction"].model == "custom-1"

    def test_exhausted_fallback_is_retryable(self, make_stub, sample_document) -> None:
        sleep = MagicMock()
        failures = {model: Exception("timeout") for model in ("stub-model", "stub-a", "stub-b")}
        provider = make_stub("{}", failures=failures)

        state = _run(provider, sample_document, sleep=sleep, model_fallback=True, max_retries=0)

        assert state["data"] is None
        assert isinstance(state["last_error"], ModelFallbackExhaustedError)
        assert state["last_error"].attempted_models == ["stub-model", "stub-a", "stub-b"]
        assert sleep.call_args_list == [call(1.0), call(1.0)]


class TestValidationModes:
    """Tests for strict and lenient validation."""

    def test_strict_raises(self, make_stub, sample_document) -> None:
        provider = make_stub('{"personal": {"fullName": "Jane Doe"}}')
        with pytest.raises(DataValidationError) as exc_info:
            _run(provider, sample_document, schema=CVSchema.minimal(), strict_validation=True)
        assert exc_info.value.errors == ["Required field missing: personal.email"]
        assert str(exc_info.value) == "Validation failed: Required field missing: personal.email"

    def test_lenient_keeps_data(self, make_stub, sample_document) -> None:
        provider = make_stub('{"personal": {"fullName": "Jane Doe"}}')
        state = _run(provider, sample_document, schema=CVSchema.minimal())
        assert state["data"]["personal"] == {"fullName": "Jane Doe", "email": None, "phone": None}
        assert state["validation"].errors == ["Required field missing: personal.email"]

    def test_low_confidence_flagged(self, make_stub, sample_document) -> None:
        provider = make_stub('{"personal": {"fullName": "Jane Doe"}}')
        state = _run(provider, sample_document, schema=CVSchema.minimal())
        # name only: 15 of 40 personal points
        assert state["confidence"] == 0.38
        assert state["low_confidence"] is True


class TestBuildMetadata:
    """Tests for metadata composition."""

    def test_computed_values_win(self) -> None:
        document = ExtractedDocument(text="Jane Doe", word_count=2, line_count=1)
        state = {
            "options": ParseOptions(parsing_level="high"),
            "document": document,
            "extraction": ExtractionResponse(success=True, provider="stub", model="m1"),
        }
        data = {
            "metadata": {"parseConfidence": 0.99, "source": "resume.pdf", "keywords": None},
            "experience": [{"startDate": "2020-01-01", "endDate": "2022-04-01"}],
        }

        metadata = build_metadata(data, state, 0.5, today=date(2022, 4, 1))

        assert metadata["parseConfidence"] == 0.5
        assert metadata["source"] == "resume.pdf"
        assert "keywords" not in metadata
        assert metadata["totalExperience"] == "2.3 years"
        assert metadata["parsingLevel"] == "high"
        assert metadata["provider"] == "stub"
        assert metadata["model"] == "m1"
        assert metadata["wordCount"] == 2
        assert metadata["parseDate"].endswith("+00:00")
