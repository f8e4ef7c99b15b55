"""Amazon Transcribe integration helpers using Streaming API."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass

from amazon_transcribe.client import TranscribeStreamingClient
from amazon_transcribe.handlers import TranscriptResultStreamHandler
from amazon_transcribe.model import TranscriptEvent
from fastapi.concurrency import run_in_threadpool

from app.application.interfaces import SpeechToTextInterface
from app.config.settings import settings
from app.services.aws import has_aws_credentials

logger = logging.getLogger(__name__)

# Encodings accepted by the streaming API. LINEAR16 is the name most browser
# recorders and the Google-style clients use for raw PCM.
_ENCODING_ALIASES = {
    "pcm": "pcm",
    "linear16": "pcm",
    "flac": "flac",
    "ogg-opus": "ogg-opus",
    "ogg_opus": "ogg-opus",
}


@dataclass(frozen=True)
class TranscriptionResult:
    """Structured transcription outcome."""

    transcript: str
    language_code: str | None = None


class TranscriptionError(RuntimeError):
    """Raised when Amazon Transcribe fails to process audio successfully."""


class TranscribeService(SpeechToTextInterface):
    """High-level facade for streaming audio to Amazon Transcribe."""

    def __init__(self, region: str, chunk_size: int = 8192) -> None:
        self._region = region
        self._chunk_size = chunk_size
        self._client: TranscribeStreamingClient | None = None

        # Ensure credentials are available to the SDK
        if settings.aws.access_key:
            os.environ.setdefault("AWS_ACCESS_KEY_ID", settings.aws.access_key)
        if settings.aws.secret_key:
            os.environ.setdefault("AWS_SECRET_ACCESS_KEY", settings.aws.secret_key)

    def _get_client(self) -> TranscribeStreamingClient:
        if self._client is None:
            self._client = TranscribeStreamingClient(region=self._region)
        return self._client

    async def is_available(self) -> bool:
        """Credential presence check; no stream is opened."""

        return await run_in_threadpool(has_aws_credentials)

    async def decode(
        self,
        audio_bytes: bytes,
        language_code: str,
        encoding: str,
        sample_rate: int,
    ) -> str:
        """Return the transcript text for one utterance."""

        result = await self.transcribe(
            audio_bytes,
            language_code=language_code,
            encoding=encoding,
            sample_rate=sample_rate,
        )
        return result.transcript

    async def transcribe(
        self,
        audio_bytes: bytes,
        *,
        language_code: str,
        encoding: str,
        sample_rate: int,
    ) -> TranscriptionResult:
        """Stream audio to Transcribe and return the full transcript."""

        if not audio_bytes:
            raise TranscriptionError("The audio payload is empty.")

        media_encoding = _ENCODING_ALIASES.get(encoding.strip().lower())
        if media_encoding is None:
            raise TranscriptionError(f"Unsupported audio encoding: {encoding}")

        try:
            stream = await self._get_client().start_stream_transcription(
                language_code=language_code,
                media_sample_rate_hz=sample_rate,
                media_encoding=media_encoding,
            )
        except Exception as exc:
            raise TranscriptionError(f"Could not open transcription stream: {exc}") from exc

        handler = _SimpleTranscriptHandler(stream.output_stream)

        async def write_chunks():
            chunk_size = self._chunk_size
            logger.info(
                "Starting stream. Total bytes: %s. Chunk size: %s",
                len(audio_bytes),
                chunk_size,
            )
            for i in range(0, len(audio_bytes), chunk_size):
                chunk = audio_bytes[i : i + chunk_size]
                await stream.input_stream.send_audio_event(audio_chunk=chunk)
                # Yield so the result handler can drain events between chunks.
                await asyncio.sleep(0)
            await stream.input_stream.end_stream()

        try:
            await asyncio.gather(write_chunks(), handler.handle_events())
        except Exception as exc:
            logger.error("Streaming loop failed: %s", exc)
            raise TranscriptionError(f"Streaming transcription failed: {exc}") from exc

        logger.info("Transcription complete. Length: %s", len(handler.transcript))
        return TranscriptionResult(
            transcript=handler.transcript.strip(),
            language_code=language_code,
        )


class _SimpleTranscriptHandler(TranscriptResultStreamHandler):
    def __init__(self, transcript_result_stream):
        super().__init__(transcript_result_stream)
        self.transcript = ""

    async def handle_transcript_event(self, transcript_event: TranscriptEvent):
        results = transcript_event.transcript.results
        for result in results:
            if not result.is_partial:
                for alt in result.alternatives:
                    logger.debug("Received transcript chunk: %s...", alt.transcript[:20])
                    self.transcript += alt.transcript + " "


def get_transcribe_service() -> TranscribeService:
    """Return the default transcribe service instance."""
    return _DEFAULT_SERVICE


_DEFAULT_SERVICE = TranscribeService(region=settings.transcribe.region)


__all__ = [
    "TranscribeService",
    "TranscriptionError",
    "TranscriptionResult",
    "get_transcribe_service",
]
