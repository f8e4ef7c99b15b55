"""Input normalization: session ids, base64 audio and STT fallback."""

from __future__ import annotations

import asyncio
import base64

import pytest
from prometheus_client import REGISTRY

from conftest import FakeStt
from app.config.settings import TranscribeConfig
from app.pipelines.chat.errors import InvalidAudio, MissingInput
from app.pipelines.chat.ingestion import (
    STT_FALLBACK_TEXT,
    decode_audio_payload,
    normalize_input,
    resolve_session_id,
    transcribe_payload,
)
from app.views.chat import ChatRequest

CONFIG = TranscribeConfig()


def _normalize(request: ChatRequest, stt: FakeStt):
    return asyncio.run(normalize_input(request, "sess", stt, CONFIG))


def test_resolve_session_id_keeps_given_value():
    assert resolve_session_id(" abc ") == "abc"


@pytest.mark.parametrize("value", [None, "", "   "])
def test_resolve_session_id_generates_uuid(value):
    generated = resolve_session_id(value)
    assert len(generated) == 36
    assert generated != resolve_session_id(value)


def test_decode_audio_accepts_wrapped_base64():
    encoded = base64.b64encode(b"raw audio bytes").decode("ascii")
    wrapped = f"{encoded[:8]}\n{encoded[8:]}"
    assert decode_audio_payload(wrapped) == b"raw audio bytes"


@pytest.mark.parametrize("value", ["%%%", "abc", "", "   "])
def test_decode_audio_rejects_invalid_payloads(value):
    assert decode_audio_payload(value) is None


def test_text_input_is_trimmed(stt):
    normalized = _normalize(ChatRequest(message="  홍대 카페  "), stt)

    assert normalized.text == "홍대 카페"
    assert normalized.from_audio is False
    assert stt.calls == []


def test_audio_takes_precedence_over_text(stt):
    audio = base64.b64encode(b"pcm").decode("ascii")

    normalized = _normalize(ChatRequest(message="텍스트", audio_data=audio), stt)

    assert normalized.text == "홍대 카페 추천해줘"
    assert normalized.from_audio is True


def test_stt_error_uses_fallback_text():
    audio = base64.b64encode(b"pcm").decode("ascii")

    normalized = _normalize(ChatRequest(audio_data=audio), FakeStt(error=RuntimeError("down")))

    assert normalized.text == STT_FALLBACK_TEXT
    assert normalized.degraded is True


def test_empty_transcript_is_missing_input():
    audio = base64.b64encode(b"pcm").decode("ascii")

    with pytest.raises(MissingInput):
        _normalize(ChatRequest(audio_data=audio), FakeStt(text="  "))


def test_invalid_audio_raises_with_session(stt):
    with pytest.raises(InvalidAudio) as exc_info:
        _normalize(ChatRequest(audio_data="!!!"), stt)

    assert exc_info.value.session_id == "sess"
    assert exc_info.value.status_code == 400


def test_no_input_raises_missing_input(stt):
    with pytest.raises(MissingInput):
        _normalize(ChatRequest(), stt)


def test_transcribe_payload_reports_fallback_as_degraded():
    labels = {"stage": "ingestion"}
    before = REGISTRY.get_sample_value("chat_stage_fallbacks_total", labels) or 0.0

    result = asyncio.run(transcribe_payload(b"pcm", FakeStt(error=RuntimeError("down")), CONFIG))

    assert result.value == STT_FALLBACK_TEXT
    assert result.degraded is True
    assert "down" in result.detail
    assert REGISTRY.get_sample_value("chat_stage_fallbacks_total", labels) == before + 1


def test_transcribe_payload_trims_transcript(stt):
    result = asyncio.run(transcribe_payload(b"pcm", stt, CONFIG))

    assert result.value == "홍대 카페 추천해줘"
    assert result.degraded is False
