"""
tests/conftest.py
Shared fakes: an OpenAI-shaped client, a scripted PubMed client,
a Cartesia mock transport, and a frozen clock.
"""

from datetime import datetime, timezone
from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import (
    get_clock,
    get_completion_service,
    get_literature_client,
    get_speech_service,
    get_transcription_service,
)
from app.main import app
from app.services.llm_service import CompletionService
from app.services.transcription_service import TranscriptionService
from app.services.tts_service import SpeechSynthesisService

PCM = b"\x00\x00\x80\x3f" * 64
FIXED_NOW = datetime(2026, 10, 19, 16, 5, 9, tzinfo=timezone.utc)


def fixed_clock(tz=None):
    if tz is None:
        return FIXED_NOW.replace(tzinfo=None)
    return FIXED_NOW.astimezone(tz)


class FakeOpenAI:
    """Just enough of AsyncOpenAI: audio.transcriptions + chat.completions."""

    def __init__(self, transcript="hello", reply="Hi, I am Swift.",
                 transcribe_error=None, complete_error=None):
        self.transcript = transcript
        self.reply = reply
        self.transcribe_error = transcribe_error
        self.complete_error = complete_error
        self.transcription_calls: list[dict] = []
        self.completion_calls: list[dict] = []
        self.audio = SimpleNamespace(transcriptions=SimpleNamespace(create=self._transcribe))
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._complete))

    async def _transcribe(self, **kwargs):
        self.transcription_calls.append(kwargs)
        if self.transcribe_error:
            raise self.transcribe_error
        return SimpleNamespace(text=self.transcript)

    async def _complete(self, **kwargs):
        self.completion_calls.append(kwargs)
        if self.complete_error:
            raise self.complete_error
        message = SimpleNamespace(role="assistant", content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    @property
    def system_prompts(self) -> list[str]:
        return [call["messages"][0]["content"] for call in self.completion_calls]


class FakeLiterature:
    """Returns the scripted results in order, one per search() call."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls: list[tuple] = []

    async def search(self, query, max_results=None):
        self.calls.append((query, max_results))
        return self.results.pop(0) if self.results else None


class CartesiaMock:
    def __init__(self, status_code=200, body=PCM):
        self.status_code = status_code
        self.body = body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def cartesia():
    return CartesiaMock()


@pytest.fixture
def literature():
    return FakeLiterature()


@pytest.fixture
def make_client(fake_openai, cartesia, literature):
    """
    Build a TestClient with every external service faked.
    Keyword args replace the default fakes for a single test.
    """

    def _make(openai_client=None, tts=None, literature_client=None, voices=None):
        oa = openai_client or fake_openai
        tts_mock = tts or cartesia
        lit = literature_client or literature

        app.dependency_overrides[get_transcription_service] = (
            lambda: TranscriptionService(api_key="test", client=oa)
        )
        app.dependency_overrides[get_completion_service] = (
            lambda: CompletionService(api_key="test", client=oa)
        )
        app.dependency_overrides[get_speech_service] = (
            lambda: SpeechSynthesisService(
                api_key="cartesia-test", voices=voices, transport=tts_mock.transport
            )
        )
        app.dependency_overrides[get_literature_client] = lambda: lit
        app.dependency_overrides[get_clock] = lambda: fixed_clock
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def clock():
    return fixed_clock
