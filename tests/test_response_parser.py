"""Tests for recovering JSON from LLM replies."""

from cv_parser_ai.processing.response_parser import extract_json_text, parse_llm_response


class TestExtractJsonText:
    """Tests for fence and brace trimming."""

    def test_plain_json_untouched(self) -> None:
        assert extract_json_text('{"a": 1}') == '{"a": 1}'

    def test_strips_json_fence(self) -> None:
        assert extract_json_text('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_strips_bare_fence(self) -> None:
        assert extract_json_text('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_trims_surrounding_prose(self) -> None:
        raw = 'Here you go: {"a": {"b": 2}} Let me know if you need more.'
        assert extract_json_text(raw) == '{"a": {"b": 2}}'


class TestParseLlmResponse:
    """Tests for parse_llm_response."""

    def test_fenced_reply(self) -> None:
        raw = '```json\n{"personal": {"fullName": "Jane Doe", "email": "jane@example.com"}}\n```'
        result = parse_llm_response(raw)
        assert result.success is True
        assert result.data == {"personal": {"fullName": "Jane Doe", "email": "jane@example.com"}}
        assert result.confidence == 0.8
        assert result.raw_response == raw

    def test_invalid_json(self) -> None:
        raw = "I could not find a CV in this text."
        result = parse_llm_response(raw)
        assert result.success is False
        assert result.data is None
        assert result.error.startswith("Failed to parse AI response:")
        assert result.raw_response == raw

    def test_truncated_json_is_not_repaired(self) -> None:
        result = parse_llm_response('{"personal": {"fullName": "Jane"')
        assert result.success is False

    def test_array_reply_rejected(self) -> None:
        result = parse_llm_response("[1, 2, 3]")
        assert result.success is False
        assert "expected a JSON object, got list" in result.error

    def test_empty_reply(self) -> None:
        result = parse_llm_response("")
        assert result.success is False
        assert result.raw_response == ""

    def test_none_reply(self) -> None:
        assert parse_llm_response(None).success is False

    def test_empty_object_scores_zero(self) -> None:
        result = parse_llm_response("{}")
        assert result.success is True
        assert result.data == {}
        assert result.confidence == 0.0
