"""Common FastAPI dependencies reused across controllers.

Collaborators are the process-wide service instances from ``app.services``;
tests replace these providers via ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from app.application.interfaces import (
    PlaceSearchInterface,
    ReasonerInterface,
    SpeechToTextInterface,
    TextToSpeechInterface,
)
from app.config.settings import settings
from app.pipelines.chat import ChatPipeline, ServiceHealthAggregator
from app.services import (
    get_llm_client,
    get_places_client,
    get_polly_service,
    get_transcribe_service,
)


def get_reasoner() -> ReasonerInterface:
    return get_llm_client()


def get_stt() -> SpeechToTextInterface:
    return get_transcribe_service()


def get_places() -> PlaceSearchInterface:
    return get_places_client()


def get_tts() -> TextToSpeechInterface:
    return get_polly_service()


ReasonerDep = Annotated[ReasonerInterface, Depends(get_reasoner)]
SttDep = Annotated[SpeechToTextInterface, Depends(get_stt)]
PlacesDep = Annotated[PlaceSearchInterface, Depends(get_places)]
TtsDep = Annotated[TextToSpeechInterface, Depends(get_tts)]


def get_chat_pipeline(
    reasoner: ReasonerDep,
    stt: SttDep,
    places: PlacesDep,
    tts: TtsDep,
) -> ChatPipeline:
    """Assemble the per-request pipeline around the shared collaborators."""

    return ChatPipeline(
        reasoner=reasoner,
        stt=stt,
        places=places,
        tts=tts,
        config=settings,
    )


def get_health_aggregator(
    reasoner: ReasonerDep,
    stt: SttDep,
    places: PlacesDep,
    tts: TtsDep,
) -> ServiceHealthAggregator:
    return ServiceHealthAggregator(reasoner, stt, places, tts)


ChatPipelineDep = Annotated[ChatPipeline, Depends(get_chat_pipeline)]
HealthAggregatorDep = Annotated[ServiceHealthAggregator, Depends(get_health_aggregator)]


__all__ = [
    "ChatPipelineDep",
    "HealthAggregatorDep",
    "PlacesDep",
    "ReasonerDep",
    "SttDep",
    "TtsDep",
    "get_chat_pipeline",
    "get_health_aggregator",
    "get_places",
    "get_reasoner",
    "get_stt",
    "get_tts",
]
