"""Text-to-speech controller backed by Amazon Polly."""

from __future__ import annotations

import base64

from fastapi import APIRouter, HTTPException, Query, status

from app.config.settings import settings
from app.controllers.dependencies import TtsDep
from app.pipelines.chat import estimate_duration_seconds, resolve_voice_options, strip_markup
from app.views import (
    TextToSpeechRequest,
    TextToSpeechResponse,
    VoiceListResponse,
    VoiceView,
)

router = APIRouter(prefix="/api/tts", tags=["tts"])


@router.post("", response_model=TextToSpeechResponse)
async def text_to_speech(request: TextToSpeechRequest, tts: TtsDep) -> TextToSpeechResponse:
    """Convert text to speech with Polly and return base64 audio."""

    text = strip_markup(request.text)[: settings.polly.max_characters]
    if not text:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Text is empty after removing markup",
        )

    voice = resolve_voice_options(request, settings.polly)
    try:
        audio_bytes = await tts.synthesize(
            text,
            voice.voice_id,
            voice.language_code,
            voice.output_format,
            voice.engine,
        )
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    return TextToSpeechResponse(
        success=True,
        audio_data=base64.b64encode(audio_bytes).decode("ascii"),
        audio_format=voice.output_format,
        voice_id=voice.voice_id,
        text_length=len(text),
        estimated_duration_seconds=estimate_duration_seconds(text),
    )


@router.get("/voices", response_model=VoiceListResponse)
async def list_voices(
    tts: TtsDep,
    language_code: str = Query(
        settings.polly.default_language_code, alias="languageCode"
    ),
) -> VoiceListResponse:
    """List the Polly voices available for a language."""

    try:
        voices = await tts.list_voices(language_code)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    return VoiceListResponse(
        language_code=language_code,
        voices=[VoiceView(**voice) for voice in voices],
    )


__all__ = ["router"]
