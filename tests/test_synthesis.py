"""Response composition: voice defaults, synthesis failures, duration."""

from __future__ import annotations

import asyncio

from conftest import FakeTts
from app.config.settings import PollyConfig
from app.pipelines.chat.synthesis import (
    ResponseComposer,
    estimate_duration_seconds,
    resolve_voice_options,
)
from app.views.chat import ChatRequest

DEFAULTS = PollyConfig()


def test_voice_options_default_independently():
    voice = resolve_voice_options(ChatRequest(voice_id="Jihye", engine="  "), DEFAULTS)

    assert voice.voice_id == "Jihye"
    assert voice.engine == "neural"
    assert voice.output_format == "mp3"
    assert voice.language_code == "ko-KR"


def test_voice_options_without_request_use_defaults():
    voice = resolve_voice_options(None, DEFAULTS)
    assert (voice.voice_id, voice.output_format) == ("Seoyeon", "mp3")


def test_duration_estimate():
    assert estimate_duration_seconds("") == 1
    assert estimate_duration_seconds("가나") == 1
    assert estimate_duration_seconds("가" * 30) == 10


def test_compose_strips_markup_before_synthesis():
    tts = FakeTts()
    composer = ResponseComposer(tts, DEFAULTS)

    composed = asyncio.run(composer.compose("**안녕하세요** 반갑습니다", wants_audio=True))

    assert composed.message == "**안녕하세요** 반갑습니다"
    assert composed.spoken_text == "안녕하세요 반갑습니다"
    assert composed.audio == b"ID3-fake-mp3"
    assert tts.calls[0]["text"] == "안녕하세요 반갑습니다"
    assert tts.calls[0]["voice_id"] == "Seoyeon"


def test_compose_truncates_long_text():
    tts = FakeTts()
    composer = ResponseComposer(tts, PollyConfig(max_characters=10))

    asyncio.run(composer.compose("가" * 50))

    assert len(tts.calls[0]["text"]) == 10


def test_synthesis_failure_keeps_text():
    composer = ResponseComposer(FakeTts(error=RuntimeError("throttled")), DEFAULTS)

    composed = asyncio.run(composer.compose("안녕"))

    assert composed.audio is None
    assert composed.message == "안녕"


def test_audio_not_requested():
    tts = FakeTts()

    composed = asyncio.run(ResponseComposer(tts, DEFAULTS).compose("안녕", wants_audio=False))

    assert composed.audio is None
    assert tts.calls == []


def test_synthesize_failure_is_a_degraded_result():
    composer = ResponseComposer(FakeTts(error=RuntimeError("throttled")), DEFAULTS)
    voice = resolve_voice_options(None, DEFAULTS)

    result = asyncio.run(composer.synthesize("안녕", voice))

    assert result.value is None
    assert result.degraded is True
    assert "throttled" in result.detail


def test_compose_marks_missing_audio_as_degraded():
    composer = ResponseComposer(FakeTts(error=RuntimeError("throttled")), DEFAULTS)

    composed = asyncio.run(composer.compose("안녕"))

    assert composed.audio_degraded is True


def test_compose_without_audio_request_is_not_degraded():
    composed = asyncio.run(ResponseComposer(FakeTts(), DEFAULTS).compose("안녕", wants_audio=False))

    assert composed.audio_degraded is False
