"""Pytest configuration and fixtures."""

import json
import os
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from cv_parser_ai.config import Settings
from cv_parser_ai.llm.base import LLMProvider
from cv_parser_ai.models.results import ExtractedDocument
from cv_parser_ai.parser import CVParser


class StubProvider(LLMProvider):
    """Provider that replays canned replies instead of calling a model.

    ``replies`` is either one reply used for every call or a list consumed
    in order. A reply that is an exception is raised. ``failures`` maps model
    ids to exceptions raised whenever that model is requested.
    """

    name = "stub"
    default_model = "stub-model"
    fallback_models = ("stub-a", "stub-b")

    def __init__(
        self,
        replies: str | list[Any] = "{}",
        failures: dict[str, Exception] | None = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.replies = replies
        self.failures = failures or {}
        self.calls: list[dict[str, Any]] = []

    def _create_chat_model(self, model: str, temperature: float):
        return MagicMock(name=f"chat-model-{model}")

    def complete(self, prompt: str, model: str | None = None, temperature: float | None = None) -> str:
        model = model or self.model
        self.calls.append({"prompt": prompt, "model": model, "temperature": temperature})
        if model in self.failures:
            raise self.failures[model]

        if isinstance(self.replies, list):
            reply = self.replies.pop(0)
        else:
            reply = self.replies
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    with patch.dict(os.environ, {}, clear=True):
        return Settings(_env_file=None)


@pytest.fixture
def sample_cv_text() -> str:
    """A short plain-text CV."""
    return (
        "Jane Doe\n"
        "jane.doe@example.com | (555) 123-4567\n"
        "linkedin.com/in/janedoe\n\n"
        "EXPERIENCE\n"
        "Senior Engineer, Acme Corp, Jan 2020 - Present\n"
        "Built data pipelines in Python and SQL.\n\n"
        "EDUCATION\n"
        "BSc Computer Science, State University, 2014 - 2018\n\n"
        "SKILLS\n"
        "Python, SQL, Kubernetes, Leadership\n"
    )


@pytest.fixture
def sample_document(sample_cv_text: str) -> ExtractedDocument:
    """The sample CV as an extracted document."""
    return ExtractedDocument(
        text=sample_cv_text,
        word_count=len(sample_cv_text.split()),
        line_count=len(sample_cv_text.split("\n")),
    )


@pytest.fixture
def sample_parsed_data() -> dict[str, Any]:
    """A reply payload as an LLM would return it for the sample CV."""
    return {
        "personal": {
            "fullName": "jane DOE",
            "email": " Jane.Doe@Example.com ",
            "phone": "(555) 123-4567",
            "linkedIn": "linkedin.com/in/janedoe",
        },
        "experience": [
            {
                "jobTitle": "Senior Engineer",
                "company": "Acme Corp",
                "startDate": "2020-01",
                "endDate": "Present",
                "description": "Built data pipelines in Python and SQL.",
            }
        ],
        "education": [
            {
                "institution": "State University",
                "degree": "BSc Computer Science",
                "startDate": "2014",
                "endDate": "2018",
            }
        ],
        "skills": {"technical": ["python", " SQL ", "Python", "kubernetes"], "soft": ["leadership"]},
    }


@pytest.fixture
def sample_reply(sample_parsed_data: dict[str, Any]) -> str:
    """The sample payload wrapped the way chat models often answer."""
    return f"Here is the parsed CV:\n```json\n{json.dumps(sample_parsed_data)}\n```"


@pytest.fixture
def stub_provider(sample_reply: str) -> StubProvider:
    """Provider that always answers with the sample reply."""
    return StubProvider(sample_reply)


@pytest.fixture
def sleep_mock() -> MagicMock:
    """Stand-in for time.sleep so retries run instantly."""
    return MagicMock()


@pytest.fixture
def make_parser(settings: Settings, sleep_mock: MagicMock):
    """Build a CVParser around a provider without touching real APIs."""

    def _make(provider: LLMProvider, **kwargs: Any) -> CVParser:
        return CVParser(llm_provider=provider, settings=settings, sleep=sleep_mock, **kwargs)

    return _make


@pytest.fixture
def make_stub() -> type[StubProvider]:
    """The StubProvider class, for tests that script their own replies."""
    return StubProvider
