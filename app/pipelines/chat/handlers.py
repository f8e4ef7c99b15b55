"""Intent handlers (Stage 05) of the chat pipeline.

Every handler catches its own failures and answers with a fixed apology for
its branch, so one broken collaborator never fails the whole request.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Sequence

from app.application.interfaces import PlaceSearchInterface, ReasonerInterface
from app.config.settings import ChatbotConfig, PlacesConfig
from app.telemetry import record_stage_fallback

from .extraction import build_search_query
from .formatting import format_place_message
from .mock_places import MockPlaceGenerator
from .prompts import (
    GENERAL_CHAT_PROMPT,
    INFORMATION_PROMPT,
    UNKNOWN_PROMPT,
    render_handler_prompt,
)
from .types import (
    ExtractedEntities,
    HandlerResult,
    MockReason,
    NearbyPlace,
    PlaceRecord,
    PlaceReview,
    PlaceSearchOutcome,
    PlaceSource,
    StageResult,
)

logger = logging.getLogger("app.services.chat_pipeline")

STAGE = "handler"

PLACE_SEARCH_APOLOGY = "죄송합니다. 장소 검색 중 오류가 발생했습니다."
INFORMATION_APOLOGY = "죄송합니다. 정보 요청 처리 중 오류가 발생했습니다."
GENERAL_CHAT_APOLOGY = "죄송합니다. 대화 처리 중 오류가 발생했습니다."
UNKNOWN_APOLOGY = (
    "죄송합니다. 요청을 이해하지 못했습니다. "
    "더 구체적으로 말씀해주시면 도움을 드릴 수 있습니다."
)
NO_RESULTS_MESSAGE = "'{query}'에 대한 검색 결과를 찾지 못했습니다. 다른 지역이나 키워드로 다시 시도해주세요."


class IntentHandler(ABC):
    """Turn extracted entities into a reply for one intent branch."""

    @abstractmethod
    async def handle(self, entities: ExtractedEntities) -> StageResult[HandlerResult]:
        ...


def _as_float(value: Any) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _nearby_from_summary(summary: Mapping[str, Any]) -> NearbyPlace:
    return NearbyPlace(
        name=str(summary.get("name") or ""),
        rating=_as_float(summary.get("rating")),
        place_id=summary.get("place_id"),
        address=summary.get("formatted_address"),
    )


def build_place_record(
    details: Mapping[str, Any],
    others: Sequence[Mapping[str, Any]] = (),
    max_nearby: int = 5,
) -> PlaceRecord:
    """Convert a normalized Places dictionary (plus neighbours) to a record."""

    reviews = tuple(
        PlaceReview(
            author_name=str(review.get("author_name") or ""),
            text=str(review.get("text") or ""),
            rating=review.get("rating"),
        )
        for review in details.get("reviews") or ()
    )
    nearby = tuple(
        _nearby_from_summary(summary)
        for summary in others[:max_nearby]
        if summary.get("name")
    )
    return PlaceRecord(
        id=str(details.get("place_id") or ""),
        name=str(details.get("name") or ""),
        address=details.get("formatted_address"),
        rating=_as_float(details.get("rating")),
        open_now=details.get("open_now"),
        price_level=details.get("price_level"),
        opening_hours=tuple(details.get("weekday_text") or ()),
        reviews=reviews,
        nearby=nearby,
    )


class PlaceSearchHandler(IntentHandler):
    """Live place search with a tagged mock fallback."""

    def __init__(
        self,
        places: PlaceSearchInterface,
        mock_generator: MockPlaceGenerator,
        chatbot_config: ChatbotConfig,
        places_config: PlacesConfig,
    ) -> None:
        self._places = places
        self._mock = mock_generator
        self._chatbot_config = chatbot_config
        self._places_config = places_config

    async def handle(self, entities: ExtractedEntities) -> StageResult[HandlerResult]:
        try:
            outcome = await self.search(entities)
        except Exception as exc:
            logger.exception("stage=%s place search handler failed", STAGE)
            record_stage_fallback(STAGE)
            return StageResult.fallback(
                HandlerResult(message=PLACE_SEARCH_APOLOGY),
                f"place search failed: {exc}",
            )

        if outcome.record is None:
            message = NO_RESULTS_MESSAGE.format(query=outcome.query)
        else:
            message = format_place_message(outcome.record)
        return StageResult.ok(HandlerResult(message=message, place_outcome=outcome))

    async def search(self, entities: ExtractedEntities) -> PlaceSearchOutcome:
        query = build_search_query(entities, self._chatbot_config.default_search_phrase)

        if not await self._places.is_configured():
            logger.info("stage=%s places collaborator not configured; using mock data", STAGE)
            return self._mock_outcome(query, entities, MockReason.NOT_CONFIGURED)

        try:
            results = await self._places.search(
                query,
                entities.location,
                self._places_config.radius_meters,
            )
        except Exception as exc:
            logger.warning("stage=%s place search failed query=%s: %s", STAGE, query, exc)
            record_stage_fallback(STAGE)
            return self._mock_outcome(query, entities, MockReason.SEARCH_FAILED)

        if not results:
            if self._chatbot_config.mock_on_empty_results:
                logger.info("stage=%s no results for query=%s; using mock data", STAGE, query)
                return self._mock_outcome(query, entities, MockReason.EMPTY_RESULT)
            logger.info("stage=%s no results for query=%s", STAGE, query)
            return PlaceSearchOutcome(source=PlaceSource.EMPTY, query=query)

        first, others = results[0], results[1:]
        details: Mapping[str, Any] = first
        place_id = first.get("place_id")
        if place_id:
            try:
                details = await self._places.details(place_id)
            except Exception as exc:
                logger.warning(
                    "stage=%s details lookup failed place_id=%s: %s", STAGE, place_id, exc
                )
                record_stage_fallback(STAGE)

        record = build_place_record(details, others, self._chatbot_config.max_nearby)
        logger.info("stage=%s live result place=%s nearby=%d", STAGE, record.name, len(record.nearby))
        return PlaceSearchOutcome(source=PlaceSource.LIVE, query=query, record=record)

    def _mock_outcome(
        self,
        query: str,
        entities: ExtractedEntities,
        reason: MockReason,
    ) -> PlaceSearchOutcome:
        return PlaceSearchOutcome(
            source=PlaceSource.MOCK,
            query=query,
            record=self._mock.generate(entities),
            mock_reason=reason,
        )


class ReasonerHandler(IntentHandler):
    """Forward the query to the reasoning model with a branch-specific template."""

    def __init__(self, reasoner: ReasonerInterface, template: str, apology: str) -> None:
        self._reasoner = reasoner
        self._template = template
        self._apology = apology

    async def handle(self, entities: ExtractedEntities) -> StageResult[HandlerResult]:
        try:
            reply = await self._reasoner.complete(render_handler_prompt(self._template, entities))
        except Exception as exc:
            logger.warning("stage=%s reasoner handler failed: %s", STAGE, exc)
            record_stage_fallback(STAGE)
            return StageResult.fallback(
                HandlerResult(message=self._apology),
                f"reasoner failed: {exc}",
            )

        if not reply or not reply.strip():
            logger.warning("stage=%s reasoner handler returned an empty reply", STAGE)
            record_stage_fallback(STAGE)
            return StageResult.fallback(HandlerResult(message=self._apology), "empty reply")
        return StageResult.ok(HandlerResult(message=reply))


def information_handler(reasoner: ReasonerInterface) -> ReasonerHandler:
    return ReasonerHandler(reasoner, INFORMATION_PROMPT, INFORMATION_APOLOGY)


def general_chat_handler(reasoner: ReasonerInterface) -> ReasonerHandler:
    return ReasonerHandler(reasoner, GENERAL_CHAT_PROMPT, GENERAL_CHAT_APOLOGY)


def unknown_handler(reasoner: ReasonerInterface) -> ReasonerHandler:
    return ReasonerHandler(reasoner, UNKNOWN_PROMPT, UNKNOWN_APOLOGY)


__all__ = [
    "IntentHandler",
    "PlaceSearchHandler",
    "ReasonerHandler",
    "build_place_record",
    "general_chat_handler",
    "information_handler",
    "unknown_handler",
    "PLACE_SEARCH_APOLOGY",
    "INFORMATION_APOLOGY",
    "GENERAL_CHAT_APOLOGY",
    "UNKNOWN_APOLOGY",
]
