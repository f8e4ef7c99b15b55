"""Amazon Polly text-to-speech for chatbot replies."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from app.application.interfaces import TextToSpeechInterface
from app.config.settings import settings
from app.services.aws import create_boto3_client

logger = logging.getLogger(__name__)


class SpeechSynthesisError(RuntimeError):
    """Raised when the Polly synthesis call fails."""


class PollyTtsService(TextToSpeechInterface):
    """Synthesize speech with Amazon Polly and return raw audio bytes."""

    def __init__(self, client=None) -> None:
        self._client = client or create_boto3_client(
            "polly", region_name=settings.polly.region
        )

    async def synthesize(
        self,
        text: str,
        voice_id: str,
        language_code: str,
        output_format: str,
        engine: str,
    ) -> bytes:
        """Convert plain text to audio in the requested format."""

        if not text or not text.strip():
            raise SpeechSynthesisError("Nothing to synthesize.")

        try:
            response: dict[str, Any] = await run_in_threadpool(
                self._client.synthesize_speech,
                Text=text,
                TextType="text",
                VoiceId=voice_id,
                LanguageCode=language_code,
                OutputFormat=output_format,
                Engine=engine,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Polly synth failed for voice '%s'", voice_id)
            raise SpeechSynthesisError(f"Failed to synthesize speech: {exc}") from exc

        audio_stream = response.get("AudioStream")
        if audio_stream is None:
            raise SpeechSynthesisError("Polly returned no audio stream.")
        audio_bytes = await run_in_threadpool(audio_stream.read)
        if not audio_bytes:
            raise SpeechSynthesisError("Polly returned an empty audio stream.")

        logger.info("Polly synthesis complete: %s bytes voice=%s", len(audio_bytes), voice_id)
        return audio_bytes

    async def list_voices(self, language_code: str) -> list[dict[str, Any]]:
        """Return the voices Polly offers for ``language_code``."""

        try:
            response = await run_in_threadpool(
                self._client.describe_voices,
                LanguageCode=language_code,
            )
        except (BotoCoreError, ClientError) as exc:
            raise SpeechSynthesisError(f"Failed to list voices: {exc}") from exc

        return [
            {
                "id": voice.get("Id"),
                "name": voice.get("Name"),
                "gender": voice.get("Gender"),
                "engines": list(voice.get("SupportedEngines", [])),
            }
            for voice in response.get("Voices", [])
        ]

    async def is_available(self) -> bool:
        """Cheap metadata call used by the status endpoint."""

        try:
            await self.list_voices(settings.polly.default_language_code)
        except SpeechSynthesisError as exc:
            logger.warning("Polly availability probe failed: %s", exc)
            return False
        return True


def get_polly_service() -> PollyTtsService:
    """Return the default Polly service instance."""

    return _DEFAULT_SERVICE


_DEFAULT_SERVICE = PollyTtsService()


__all__ = [
    "PollyTtsService",
    "SpeechSynthesisError",
    "get_polly_service",
]
