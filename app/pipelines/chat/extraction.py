"""Entity extraction stage (Stage 02) of the chat pipeline.

Location and keywords come from deterministic pattern tables; the processed
query is a rewrite obtained from the reasoning model.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from app.application.interfaces import ReasonerInterface
from app.telemetry import record_stage_fallback

from .prompts import render_rewrite_prompt
from .types import ExtractedEntities, StageResult
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger("app.services.chat_pipeline")

STAGE = "extraction"
WINDOW_CHARS = 10

_WINDOW_TOKEN = re.compile(r"[가-힣a-zA-Z0-9\s]+")
_STREET_PATTERN = re.compile(r"([가-힣]+(?:역|구|동|가|로|길|대로))")
_CITY_PATTERN = re.compile(r"([가-힣]+(?:시|군))")


def _find_landmark(lowered: str, landmarks: Sequence[str]) -> Optional[str]:
    for landmark in landmarks:
        if landmark.lower() in lowered:
            return landmark
    return None


def _window_around(text: str, lowered: str, keyword: str) -> Optional[str]:
    index = lowered.find(keyword.lower())
    if index == -1:
        return None
    start = max(0, index - WINDOW_CHARS)
    end = min(len(text), index + len(keyword) + WINDOW_CHARS)
    match = _WINDOW_TOKEN.search(text[start:end])
    if not match:
        return None
    return match.group().strip() or None


def extract_location(text: str, vocabulary: Vocabulary) -> Optional[str]:
    """Resolve a location: landmark table, then suffix windows, then regex."""

    lowered = text.lower()

    landmark = _find_landmark(lowered, vocabulary.landmarks)
    if landmark:
        return landmark

    for suffix in vocabulary.location_suffixes:
        if suffix.lower() not in lowered:
            continue
        around = _window_around(text, lowered, suffix)
        if around:
            return around

    for pattern in (_STREET_PATTERN, _CITY_PATTERN):
        match = pattern.search(text)
        if match:
            return match.group(1)

    return None


def extract_keywords(text: str, vocabulary: Vocabulary) -> tuple[str, ...]:
    """Vocabulary hits from both tables, deduplicated and sorted."""

    lowered = text.lower()
    hits = [
        term
        for term in (*vocabulary.food_terms, *vocabulary.qualifier_terms)
        if term.lower() in lowered
    ]
    return tuple(sorted(set(hits)))


def build_search_query(entities: ExtractedEntities, default_phrase: str = "맛집 추천") -> str:
    """Location followed by keywords, or the default phrase when both are empty."""

    parts: list[str] = []
    if entities.location and entities.location.strip():
        parts.append(entities.location.strip())
    parts.extend(entities.keywords)
    query = " ".join(parts).strip()
    return query or default_phrase


class EntityExtractor:
    """Derive location, keywords and a rewritten query from an utterance."""

    def __init__(
        self,
        reasoner: ReasonerInterface,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    ) -> None:
        self._reasoner = reasoner
        self._vocabulary = vocabulary

    async def extract(self, text: str) -> ExtractedEntities:
        """Best-effort extraction; never raises."""

        try:
            location = extract_location(text, self._vocabulary)
            keywords = extract_keywords(text, self._vocabulary)
        except Exception:
            logger.exception("stage=%s pattern extraction failed", STAGE)
            record_stage_fallback(STAGE)
            return ExtractedEntities(
                location=None,
                keywords=(),
                original_query=text,
                processed_query=text,
            )

        rewritten = await self.rewrite_query(text)
        entities = ExtractedEntities(
            location=location,
            keywords=keywords,
            original_query=text,
            processed_query=rewritten.value,
        )
        logger.info(
            "stage=%s location=%s keywords=%s processed=%s",
            STAGE,
            entities.location,
            list(entities.keywords),
            entities.processed_query,
        )
        return entities

    async def rewrite_query(self, text: str) -> StageResult[str]:
        try:
            reply = await self._reasoner.complete(render_rewrite_prompt(text))
        except Exception as exc:
            logger.warning("stage=%s query rewrite failed: %s", STAGE, exc)
            record_stage_fallback(STAGE)
            return StageResult.fallback(text, f"rewrite failed: {exc}")

        cleaned = (reply or "").strip()
        if not cleaned:
            logger.warning("stage=%s query rewrite returned an empty reply", STAGE)
            record_stage_fallback(STAGE)
            return StageResult.fallback(text, "empty rewrite")
        return StageResult.ok(cleaned)


__all__ = [
    "EntityExtractor",
    "build_search_query",
    "extract_keywords",
    "extract_location",
]
