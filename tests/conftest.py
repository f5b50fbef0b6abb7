"""Pytest configuration and shared fixtures for question generation tests."""

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from certprep.config import Settings
from certprep.exam_catalog import ExamCatalogLoader
from certprep.generation.backoff import BackoffPolicy
from certprep.models import Question, QuestionType
from certprep.providers import GeminiProvider, MoonshotProvider, OpenRouterProvider

GEMINI_HOST = "generativelanguage.googleapis.com"
OPENROUTER_HOST = "openrouter.ai"
MOONSHOT_HOST = "api.moonshot.cn"

EXAM_NAME = "Salesforce Associate Certification"


def make_record(index: int, **overrides: Any) -> Dict[str, Any]:
    """A well-formed multiple-choice record as a model would return it."""
    record = {
        "questionType": "multiple-choice",
        "question": f"Which Salesforce feature answers scenario {index}?",
        "options": [
            f"Feature {index}-1",
            f"Feature {index}-2",
            f"Feature {index}-3",
            f"Feature {index}-4",
        ],
        "answer": "B",
        "explanation": f"Feature {index}-2 is designed for scenario {index}.",
    }
    record.update(overrides)
    return record


def make_records(count: int, start: int = 0) -> List[Dict[str, Any]]:
    return [make_record(i) for i in range(start, start + count)]


def make_question(index: int, provider: str = "gemini") -> Question:
    return Question(
        question_type=QuestionType.MULTIPLE_CHOICE,
        question_text=f"Which Salesforce feature answers scenario {index}?",
        options=["One", "Two", "Three", "Four"],
        correct_option_letter="A",
        explanation="Because.",
        original_provider_answer="A",
        source_provider=provider,
    )


def gemini_payload(text: str) -> Dict[str, Any]:
    """Gemini generateContent envelope around ``text``."""
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def chat_payload(text: str) -> Dict[str, Any]:
    """Chat-completions envelope around ``text``."""
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


def requested_count(request: httpx.Request) -> int:
    """Number of questions the prompt inside ``request`` asks for."""
    body = json.loads(request.content)
    if "contents" in body:
        prompt = body["contents"][0]["parts"][0]["text"]
    else:
        prompt = body["messages"][0]["content"]
    marker = "FORMAT (exactly "
    start = prompt.index(marker) + len(marker)
    return int(prompt[start : prompt.index(" ", start)])


@pytest.fixture
def test_settings() -> Settings:
    """Settings with all three providers configured and no delays."""
    return Settings(
        _env_file=None,
        gemini_api_key="test-gemini-key",
        deepseek_api_key="test-openrouter-key",
        moonshot_api_key="test-moonshot-key",
        batch_delay_seconds=0,
        attempt_delay_seconds=0,
    )


@pytest.fixture
def exam_catalog() -> ExamCatalogLoader:
    """The packaged exam catalog, loaded."""
    loader = ExamCatalogLoader()
    loader.load()
    return loader


@pytest.fixture
def providers() -> List[Any]:
    """All three providers with credentials, in default priority order."""
    return [
        GeminiProvider(api_key="test-gemini-key"),
        OpenRouterProvider(api_key="test-openrouter-key"),
        MoonshotProvider(api_key="test-moonshot-key"),
    ]


@pytest.fixture
def no_backoff() -> BackoffPolicy:
    return BackoffPolicy.none()


@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], Any]], httpx.AsyncClient]:
    """Factory building an AsyncClient served by ``httpx.MockTransport``."""
    clients: List[httpx.AsyncClient] = []

    def factory(handler: Callable[[httpx.Request], Any]) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    return factory
