"""Response composition stage (Stage 06): speech text, Polly audio, duration."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from app.application.interfaces import TextToSpeechInterface
from app.config.settings import PollyConfig
from app.telemetry import record_stage_fallback

from .formatting import strip_markup
from .types import ComposedResponse, StageResult, VoiceOptions

logger = logging.getLogger("app.services.chat_pipeline")

STAGE = "synthesis"
SYLLABLES_PER_SECOND = 3


class VoiceRequest(Protocol):
    """Optional caller-supplied voice fields."""

    voice_id: Optional[str]
    output_format: Optional[str]
    engine: Optional[str]
    language_code: Optional[str]


def _pick(value: Optional[str], default: str) -> str:
    if value and value.strip():
        return value.strip()
    return default


def resolve_voice_options(
    options: Optional[VoiceRequest],
    defaults: PollyConfig,
) -> VoiceOptions:
    """Default each voice field independently when it is blank or absent."""

    return VoiceOptions(
        voice_id=_pick(getattr(options, "voice_id", None), defaults.default_voice_id),
        output_format=_pick(
            getattr(options, "output_format", None), defaults.default_output_format
        ),
        engine=_pick(getattr(options, "engine", None), defaults.default_engine),
        language_code=_pick(
            getattr(options, "language_code", None), defaults.default_language_code
        ),
    )


def estimate_duration_seconds(text: str) -> int:
    """Display-only estimate from character count, never below one second."""

    return max(1, len(text or "") // SYLLABLES_PER_SECOND)


class ResponseComposer:
    """Assemble the final text, spoken text and optional audio for a reply."""

    def __init__(self, tts: TextToSpeechInterface, polly_config: PollyConfig) -> None:
        self._tts = tts
        self._config = polly_config

    async def synthesize(self, text: str, voice: VoiceOptions) -> StageResult[Optional[bytes]]:
        """Best-effort synthesis; a failure degrades to no audio."""

        if not text:
            return StageResult.ok(None)
        spoken = text[: self._config.max_characters]
        try:
            audio = await self._tts.synthesize(
                spoken,
                voice.voice_id,
                voice.language_code,
                voice.output_format,
                voice.engine,
            )
        except Exception as exc:
            logger.warning("stage=%s speech synthesis failed: %s", STAGE, exc)
            record_stage_fallback(STAGE)
            return StageResult.fallback(None, f"speech synthesis failed: {exc}")
        if not audio:
            logger.warning("stage=%s speech synthesis returned no audio", STAGE)
            record_stage_fallback(STAGE)
            return StageResult.fallback(None, "empty audio stream")
        return StageResult.ok(audio)

    async def compose(
        self,
        message: str,
        wants_audio: bool = True,
        options: Optional[VoiceRequest] = None,
    ) -> ComposedResponse:
        spoken_text = strip_markup(message)
        voice = resolve_voice_options(options, self._config)
        audio = StageResult.ok(None)
        if wants_audio:
            audio = await self.synthesize(spoken_text, voice)
        return ComposedResponse(
            message=message,
            spoken_text=spoken_text,
            audio=audio.value,
            duration_seconds=estimate_duration_seconds(spoken_text),
            voice=voice,
            audio_degraded=audio.degraded,
        )


__all__ = [
    "ResponseComposer",
    "estimate_duration_seconds",
    "resolve_voice_options",
]
