"""Typed containers shared across the chat pipeline.

These live in their own module so every stage (`ingestion`, `extraction`,
`intent`, `handlers`, `synthesis`, `flow`) can import them without creating
circular dependencies.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


class Intent(str, enum.Enum):
    """Closed set of request intents."""

    PLACE_SEARCH = "PLACE_SEARCH"
    INFORMATION_REQUEST = "INFORMATION_REQUEST"
    GENERAL_CHAT = "GENERAL_CHAT"
    UNKNOWN = "UNKNOWN"


class PlaceSource(str, enum.Enum):
    """How a place result was obtained."""

    LIVE = "live"
    MOCK = "mock"
    EMPTY = "empty"


class MockReason(str, enum.Enum):
    EMPTY_RESULT = "empty_result"
    SEARCH_FAILED = "search_failed"
    NOT_CONFIGURED = "not_configured"


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of a stage that may degrade to a fallback value."""

    value: T
    degraded: bool = False
    detail: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> "StageResult[T]":
        return cls(value=value)

    @classmethod
    def fallback(cls, value: T, detail: str) -> "StageResult[T]":
        return cls(value=value, degraded=True, detail=detail)


@dataclass(frozen=True)
class NormalizedInput:
    """The single canonical utterance for a request."""

    text: str
    session_id: str
    from_audio: bool = False
    degraded: bool = False


@dataclass(frozen=True)
class ExtractedEntities:
    """Location, keywords and rewritten query derived from the utterance."""

    location: Optional[str]
    keywords: Tuple[str, ...]
    original_query: str
    processed_query: str


@dataclass(frozen=True)
class IntentClassification:
    intent: Intent
    raw_reply: str = ""
    exact: bool = False

    @property
    def confidence(self) -> str:
        return "high" if self.exact else "low"


@dataclass(frozen=True)
class PlaceReview:
    author_name: str
    text: str
    rating: Optional[int] = None


@dataclass(frozen=True)
class NearbyPlace:
    name: str
    rating: Optional[float] = None
    place_id: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class PlaceRecord:
    id: str
    name: str
    address: Optional[str] = None
    rating: Optional[float] = None
    open_now: Optional[bool] = None
    price_level: Optional[int] = None
    opening_hours: Tuple[str, ...] = ()
    reviews: Tuple[PlaceReview, ...] = ()
    nearby: Tuple[NearbyPlace, ...] = ()


@dataclass(frozen=True)
class PlaceSearchOutcome:
    """Place handler result, tagged so mock data never passes as live data."""

    source: PlaceSource
    query: str
    record: Optional[PlaceRecord] = None
    mock_reason: Optional[MockReason] = None

    @property
    def is_mock(self) -> bool:
        return self.source is PlaceSource.MOCK


@dataclass(frozen=True)
class HandlerResult:
    message: str
    place_outcome: Optional[PlaceSearchOutcome] = None


@dataclass(frozen=True)
class VoiceOptions:
    voice_id: str
    output_format: str
    engine: str
    language_code: str


@dataclass(frozen=True)
class ComposedResponse:
    message: str
    spoken_text: str
    audio: Optional[bytes]
    duration_seconds: int
    voice: Optional[VoiceOptions] = None
    audio_degraded: bool = False


@dataclass(frozen=True)
class ServiceStatus:
    services: dict = field(default_factory=dict)
    overall: bool = False
    message: str = ""


__all__ = [
    "Intent",
    "PlaceSource",
    "MockReason",
    "StageResult",
    "NormalizedInput",
    "ExtractedEntities",
    "IntentClassification",
    "PlaceReview",
    "NearbyPlace",
    "PlaceRecord",
    "PlaceSearchOutcome",
    "HandlerResult",
    "VoiceOptions",
    "ComposedResponse",
    "ServiceStatus",
]
