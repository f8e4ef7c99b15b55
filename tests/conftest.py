"""Shared fakes for the chat pipeline tests.

Every fake implements the collaborator ABCs from ``app.application.interfaces``
so the pipeline is exercised exactly as it is wired in production.
"""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from app.application.interfaces import (  # noqa: E402
    PlaceSearchInterface,
    ReasonerInterface,
    SpeechToTextInterface,
    TextToSpeechInterface,
)
from app.pipelines.chat.prompts import CLASSIFICATION_PROMPT, REWRITE_PROMPT  # noqa: E402

_REWRITE_MARKER = REWRITE_PROMPT.split("{", 1)[0][:20]
_CLASSIFY_MARKER = CLASSIFICATION_PROMPT.split("{", 1)[0][:20]


class FakeReasoner(ReasonerInterface):
    """Answers by prompt kind: rewrite, classification or handler answer."""

    def __init__(
        self,
        *,
        intent: str = "PLACE_SEARCH",
        rewrite: str | None = None,
        answer: str = "도움이 되는 답변입니다.",
        fail: tuple[str, ...] = (),
        configured: bool = True,
    ) -> None:
        self.intent = intent
        self.rewrite = rewrite
        self.answer = answer
        self.fail = set(fail)
        self.configured = configured
        self.prompts: list[str] = []

    def _kind(self, prompt: str) -> str:
        if prompt.startswith(_REWRITE_MARKER):
            return "rewrite"
        if prompt.startswith(_CLASSIFY_MARKER):
            return "classify"
        return "answer"

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        kind = self._kind(prompt)
        if kind in self.fail:
            raise RuntimeError(f"{kind} unavailable")
        if kind == "rewrite":
            return self.rewrite if self.rewrite is not None else prompt.rsplit(": ", 1)[-1]
        if kind == "classify":
            return self.intent
        return self.answer

    async def is_configured(self) -> bool:
        return self.configured


class FakeStt(SpeechToTextInterface):
    def __init__(self, text: str = "홍대 카페 추천해줘", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[tuple[bytes, str, str, int]] = []

    async def decode(self, audio_bytes, language_code, encoding, sample_rate) -> str:
        self.calls.append((audio_bytes, language_code, encoding, sample_rate))
        if self.error is not None:
            raise self.error
        return self.text

    async def is_available(self) -> bool:
        return True


class FakePlaces(PlaceSearchInterface):
    def __init__(
        self,
        results: list[dict[str, Any]] | None = None,
        details: dict[str, Any] | None = None,
        *,
        search_error: Exception | None = None,
        details_error: Exception | None = None,
        configured: bool = True,
    ) -> None:
        self.results = results or []
        self.details_payload = details
        self.search_error = search_error
        self.details_error = details_error
        self.configured = configured
        self.searches: list[tuple[str, str | None, int | None]] = []

    async def search(self, query, location=None, radius_meters=None):
        self.searches.append((query, location, radius_meters))
        if self.search_error is not None:
            raise self.search_error
        return list(self.results)

    async def details(self, place_id):
        if self.details_error is not None:
            raise self.details_error
        return dict(self.details_payload or {})

    async def is_configured(self) -> bool:
        return self.configured


class FakeTts(TextToSpeechInterface):
    def __init__(self, audio: bytes = b"ID3-fake-mp3", error: Exception | None = None) -> None:
        self.audio = audio
        self.error = error
        self.calls: list[dict[str, str]] = []

    async def synthesize(self, text, voice_id, language_code, output_format, engine) -> bytes:
        self.calls.append(
            {
                "text": text,
                "voice_id": voice_id,
                "language_code": language_code,
                "output_format": output_format,
                "engine": engine,
            }
        )
        if self.error is not None:
            raise self.error
        return self.audio

    async def list_voices(self, language_code):
        return [{"id": "Seoyeon", "name": "Seoyeon", "gender": "Female", "engines": ["neural"]}]

    async def is_available(self) -> bool:
        return self.error is None


@pytest.fixture
def reasoner() -> FakeReasoner:
    return FakeReasoner()


@pytest.fixture
def stt() -> FakeStt:
    return FakeStt()


@pytest.fixture
def places() -> FakePlaces:
    return FakePlaces()


@pytest.fixture
def tts() -> FakeTts:
    return FakeTts()
