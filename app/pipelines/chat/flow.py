"""Orchestration for ``POST /api/chatbot/chat``.

Execution order:

1. ``ingestion`` – resolve the session id and the single canonical utterance.
2. ``extraction`` – location/keywords from pattern tables, query rewrite via Bedrock.
3. ``intent`` – closed-set classification via Bedrock.
4. ``routing`` – pick the handler registered for the intent.
5. ``handlers`` – Google Places search (mock fallback) or a Bedrock answer.
6. ``synthesis`` – strip markup, synthesize Polly audio, estimate duration.

Data flows strictly forward; degraded stages hand the next stage a fallback
value and only input/configuration problems stop the request.
"""

from __future__ import annotations

import base64
import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from app.application.interfaces import (
    PlaceSearchInterface,
    ReasonerInterface,
    SpeechToTextInterface,
    TextToSpeechInterface,
)
from app.config.settings import Settings, settings as default_settings
from app.telemetry import record_chat_request
from app.views.chat import (
    ChatRequest,
    ChatResponse,
    ExtractedInfoView,
    NearbyPlaceView,
    PlaceRecordView,
    PlaceReviewView,
    SttRequest,
    SttResponse,
)

from .errors import ChatPipelineError, MissingAudio, InvalidAudio, ServiceUnavailable
from .extraction import EntityExtractor
from .handlers import (
    PlaceSearchHandler,
    general_chat_handler,
    information_handler,
    unknown_handler,
)
from .ingestion import decode_audio_payload, normalize_input, resolve_session_id, transcribe_payload
from .intent import IntentClassifier
from .mock_places import MockPlaceGenerator
from .routing import IntentRouter
from .synthesis import ResponseComposer
from .types import ExtractedEntities, Intent, PlaceSearchOutcome
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger("app.services.chat_pipeline")

STAGE = "pipeline"
STT_FAILED_MESSAGE = "STT 변환에 실패했습니다."


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the chat pipeline."""

    order: int
    name: str
    module: str
    summary: str


PIPELINE_STAGES: List[PipelineStage] = [
    PipelineStage(
        1,
        "Input Normalization",
        "app.pipelines.chat.ingestion",
        "Resolve the session id, validate base64 audio, transcribe it or use the text field.",
    ),
    PipelineStage(
        2,
        "Entity Extraction",
        "app.pipelines.chat.extraction",
        "Match location and keyword tables, ask Bedrock to rewrite the query.",
    ),
    PipelineStage(
        3,
        "Intent Classification",
        "app.pipelines.chat.intent",
        "Ask Bedrock for one of four labels and coerce anything else to UNKNOWN.",
    ),
    PipelineStage(
        4,
        "Intent Routing",
        "app.pipelines.chat.routing",
        "Select the handler registered for the intent.",
    ),
    PipelineStage(
        5,
        "Handling",
        "app.pipelines.chat.handlers",
        "Search Google Places (mock fallback) or answer with a Bedrock prompt.",
    ),
    PipelineStage(
        6,
        "Response Composition",
        "app.pipelines.chat.synthesis",
        "Strip markup, synthesize Polly audio and estimate the spoken duration.",
    ),
]


def _extracted_view(entities: ExtractedEntities) -> ExtractedInfoView:
    return ExtractedInfoView(
        location=entities.location,
        keywords=list(entities.keywords),
        original_query=entities.original_query,
        processed_query=entities.processed_query,
    )


def _place_view(outcome: Optional[PlaceSearchOutcome]) -> Optional[PlaceRecordView]:
    if outcome is None or outcome.record is None:
        return None
    record = outcome.record
    return PlaceRecordView(
        id=record.id,
        name=record.name,
        address=record.address,
        rating=record.rating,
        open_now=record.open_now,
        price_level=record.price_level,
        opening_hours=list(record.opening_hours),
        reviews=[
            PlaceReviewView(author_name=review.author_name, text=review.text, rating=review.rating)
            for review in record.reviews
        ],
        nearby=[
            NearbyPlaceView(
                name=place.name,
                rating=place.rating,
                place_id=place.place_id,
                address=place.address,
            )
            for place in record.nearby
        ],
        source=outcome.source.value,
        mock_reason=outcome.mock_reason.value if outcome.mock_reason else None,
    )


def failure_response(error: ChatPipelineError) -> ChatResponse:
    """Body returned alongside ``error.status_code``."""

    return ChatResponse(
        success=False,
        message=error.user_message,
        session_id=error.session_id,
        error_message=error.user_message,
    )


class ChatPipeline:
    """Run one chat turn through every stage with injected collaborators."""

    def __init__(
        self,
        *,
        reasoner: ReasonerInterface,
        stt: SpeechToTextInterface,
        places: PlaceSearchInterface,
        tts: TextToSpeechInterface,
        config: Settings = default_settings,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._reasoner = reasoner
        self._stt = stt
        self._config = config
        self._extractor = EntityExtractor(reasoner, vocabulary)
        self._classifier = IntentClassifier(reasoner)
        self._router = IntentRouter(
            {
                Intent.PLACE_SEARCH: PlaceSearchHandler(
                    places,
                    MockPlaceGenerator(rng),
                    config.chatbot,
                    config.places,
                ),
                Intent.INFORMATION_REQUEST: information_handler(reasoner),
                Intent.GENERAL_CHAT: general_chat_handler(reasoner),
                Intent.UNKNOWN: unknown_handler(reasoner),
            }
        )
        self._composer = ResponseComposer(tts, config.polly)

    async def handle(self, request: ChatRequest) -> ChatResponse:
        """Produce a reply or raise a ``ChatPipelineError`` carrying the session id."""

        session_id = resolve_session_id(request.session_id)
        try:
            response = await self._run(request, session_id)
        except ChatPipelineError as exc:
            logger.info(
                "stage=%s session=%s request rejected: %s",
                STAGE,
                session_id,
                exc.user_message,
            )
            record_chat_request(None, False)
            raise
        except Exception as exc:
            logger.exception("stage=%s session=%s chat pipeline failed", STAGE, session_id)
            record_chat_request(None, False)
            raise ChatPipelineError(session_id) from exc

        record_chat_request(response.intent, True)
        return response

    async def _run(self, request: ChatRequest, session_id: str) -> ChatResponse:
        normalized = await normalize_input(request, session_id, self._stt, self._config.transcribe)
        logger.info(
            "stage=%s session=%s input from_audio=%s degraded=%s text=%s",
            STAGE,
            session_id,
            normalized.from_audio,
            normalized.degraded,
            normalized.text,
        )

        if not await self._reasoner.is_configured():
            raise ServiceUnavailable(session_id)

        entities = await self._extractor.extract(normalized.text)
        classification = await self._classifier.classify(normalized.text)
        handler = self._router.route(classification.intent)
        handled = await handler.handle(entities)
        if handled.degraded:
            logger.warning(
                "stage=%s session=%s intent=%s handler degraded: %s",
                STAGE,
                session_id,
                classification.intent.value,
                handled.detail,
            )
        result = handled.value

        composed = await self._composer.compose(
            result.message,
            wants_audio=request.include_audio,
            options=request,
        )
        logger.info(
            "stage=%s session=%s intent=%s degraded=%s audio=%s",
            STAGE,
            session_id,
            classification.intent.value,
            handled.degraded or composed.audio_degraded,
            composed.audio is not None,
        )

        audio_data = None
        audio_format = None
        if composed.audio is not None:
            audio_data = base64.b64encode(composed.audio).decode("ascii")
            audio_format = composed.voice.output_format if composed.voice else None

        return ChatResponse(
            success=True,
            message=composed.message,
            intent=classification.intent.value,
            confidence=classification.confidence,
            session_id=session_id,
            processed_query=entities.processed_query,
            extracted_info=_extracted_view(entities),
            audio_data=audio_data,
            audio_format=audio_format,
            audio_duration_seconds=composed.duration_seconds,
            structured_data=_place_view(result.place_outcome),
        )

    async def transcribe(self, request: SttRequest) -> SttResponse:
        """Speech-to-text only; backs ``POST /api/chatbot/stt``."""

        session_id = resolve_session_id(request.session_id)
        audio_data = request.audio_data
        if not audio_data or not audio_data.strip():
            raise MissingAudio(session_id)

        audio_bytes = decode_audio_payload(audio_data)
        if audio_bytes is None:
            raise InvalidAudio(session_id)

        transcript = await transcribe_payload(audio_bytes, self._stt, self._config.transcribe)
        if transcript.degraded:
            return SttResponse(
                success=False,
                text=transcript.value,
                session_id=session_id,
                degraded=True,
                error_message=STT_FAILED_MESSAGE,
            )
        if not transcript.value:
            return SttResponse(
                success=False,
                session_id=session_id,
                error_message=STT_FAILED_MESSAGE,
            )
        return SttResponse(success=True, text=transcript.value, session_id=session_id)


__all__ = [
    "ChatPipeline",
    "PIPELINE_STAGES",
    "PipelineStage",
    "STT_FAILED_MESSAGE",
    "failure_response",
]
