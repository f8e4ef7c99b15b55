"""Input normalization helpers (Stage 01 of the chat pipeline)."""

from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import Protocol
from uuid import uuid4

from app.application.interfaces import SpeechToTextInterface
from app.config.settings import TranscribeConfig
from app.telemetry import record_stage_fallback

from .errors import InvalidAudio, MissingInput
from .types import NormalizedInput, StageResult

logger = logging.getLogger("app.services.chat_pipeline")

STAGE = "ingestion"

STT_FALLBACK_TEXT = "음성 인식 서비스가 현재 사용할 수 없습니다. 텍스트로 입력해주세요."

_WHITESPACE = re.compile(r"\s+")


class ChatInput(Protocol):
    """Fields the normalizer reads from an incoming request."""

    message: str | None
    audio_data: str | None
    session_id: str | None


def resolve_session_id(session_id: str | None) -> str:
    """Keep a caller-supplied id, or mint a fresh one."""

    if session_id and session_id.strip():
        return session_id.strip()
    return str(uuid4())


def decode_audio_payload(audio_data: str) -> bytes | None:
    """Strictly decode base64 audio; None when the payload is malformed."""

    compact = _WHITESPACE.sub("", audio_data or "")
    if not compact:
        return None
    try:
        decoded = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        logger.warning("stage=%s invalid base64 audio: %s", STAGE, exc)
        return None
    return decoded or None


async def transcribe_payload(
    audio_bytes: bytes,
    stt: SpeechToTextInterface,
    config: TranscribeConfig,
) -> StageResult[str]:
    """Run STT once; on failure fall back to the fixed notice text."""

    try:
        text = await stt.decode(
            audio_bytes,
            config.language_code,
            config.media_encoding,
            config.sample_rate_hz,
        )
    except Exception as exc:
        logger.warning("stage=%s speech recognition failed: %s", STAGE, exc)
        record_stage_fallback(STAGE)
        return StageResult.fallback(STT_FALLBACK_TEXT, f"speech recognition failed: {exc}")
    return StageResult.ok((text or "").strip())


async def normalize_input(
    request: ChatInput,
    session_id: str,
    stt: SpeechToTextInterface,
    config: TranscribeConfig,
) -> NormalizedInput:
    """Resolve the canonical utterance or raise an ``InputError``."""

    audio_data = request.audio_data
    if audio_data and audio_data.strip():
        audio_bytes = decode_audio_payload(audio_data)
        if audio_bytes is None:
            raise InvalidAudio(session_id)
        transcript = await transcribe_payload(audio_bytes, stt, config)
        logger.info(
            "stage=%s session=%s stt_text=%s degraded=%s",
            STAGE,
            session_id,
            transcript.value,
            transcript.degraded,
        )
        if not transcript.value:
            raise MissingInput(session_id)
        return NormalizedInput(
            text=transcript.value,
            session_id=session_id,
            from_audio=True,
            degraded=transcript.degraded,
        )

    text = (request.message or "").strip()
    if not text:
        raise MissingInput(session_id)
    return NormalizedInput(text=text, session_id=session_id)


__all__ = [
    "STT_FALLBACK_TEXT",
    "decode_audio_payload",
    "normalize_input",
    "resolve_session_id",
    "transcribe_payload",
]
