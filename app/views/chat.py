"""Pydantic schemas for the chatbot endpoints."""

from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


def _camel(name: str, snake: str, default=None, **kwargs):
    """Accept camelCase or snake_case input and serialize as camelCase."""

    return Field(
        default,
        validation_alias=AliasChoices(name, snake),
        serialization_alias=name,
        **kwargs,
    )


class ChatRequest(BaseModel):
    """Incoming chat turn: text, base64 audio, or both (audio wins)."""

    message: Optional[str] = None
    audio_data: Optional[str] = _camel("audioData", "audio_data")
    session_id: Optional[str] = _camel("sessionId", "session_id")
    user_id: Optional[str] = _camel("userId", "user_id")
    include_audio: bool = _camel("includeAudio", "include_audio", default=True)
    voice_id: Optional[str] = _camel("voiceId", "voice_id")
    output_format: Optional[str] = _camel("outputFormat", "output_format")
    engine: Optional[str] = None
    language_code: Optional[str] = _camel("languageCode", "language_code")

    model_config = ConfigDict(populate_by_name=True)


class ExtractedInfoView(BaseModel):
    location: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    original_query: str = _camel("originalQuery", "original_query", default="")
    processed_query: str = _camel("processedQuery", "processed_query", default="")

    model_config = ConfigDict(populate_by_name=True)


class PlaceReviewView(BaseModel):
    author_name: str = _camel("authorName", "author_name", default="")
    text: str = ""
    rating: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True)


class NearbyPlaceView(BaseModel):
    name: str
    rating: Optional[float] = None
    place_id: Optional[str] = _camel("placeId", "place_id")
    address: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class PlaceRecordView(BaseModel):
    """Structured place data; ``source`` tells live results from mock ones."""

    id: str
    name: str
    address: Optional[str] = None
    rating: Optional[float] = None
    open_now: Optional[bool] = _camel("openNow", "open_now")
    price_level: Optional[int] = _camel("priceLevel", "price_level")
    opening_hours: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("openingHours", "opening_hours"),
        serialization_alias="openingHours",
    )
    reviews: List[PlaceReviewView] = Field(default_factory=list)
    nearby: List[NearbyPlaceView] = Field(default_factory=list)
    source: str = "live"
    mock_reason: Optional[str] = _camel("mockReason", "mock_reason")

    model_config = ConfigDict(populate_by_name=True)


class ChatResponse(BaseModel):
    success: bool
    message: str = ""
    intent: Optional[str] = None
    confidence: Optional[str] = None
    session_id: str = _camel("sessionId", "session_id", default="")
    processed_query: Optional[str] = _camel("processedQuery", "processed_query")
    extracted_info: Optional[ExtractedInfoView] = _camel("extractedInfo", "extracted_info")
    audio_data: Optional[str] = _camel("audioData", "audio_data")
    audio_format: Optional[str] = _camel("audioFormat", "audio_format")
    audio_duration_seconds: Optional[int] = _camel(
        "audioDurationSeconds", "audio_duration_seconds"
    )
    structured_data: Optional[PlaceRecordView] = _camel("structuredData", "structured_data")
    error_message: Optional[str] = _camel("errorMessage", "error_message")

    model_config = ConfigDict(populate_by_name=True)


class SttRequest(BaseModel):
    audio_data: Optional[str] = _camel("audioData", "audio_data")
    session_id: Optional[str] = _camel("sessionId", "session_id")

    model_config = ConfigDict(populate_by_name=True)


class SttResponse(BaseModel):
    success: bool
    text: Optional[str] = None
    session_id: str = _camel("sessionId", "session_id", default="")
    degraded: bool = False
    error_message: Optional[str] = _camel("errorMessage", "error_message")

    model_config = ConfigDict(populate_by_name=True)


class ServiceStatusResponse(BaseModel):
    services: dict[str, bool] = Field(default_factory=dict)
    overall: bool
    message: str


class ChatTestRequest(BaseModel):
    message: str = Field(..., min_length=1)


class ChatTestResponse(BaseModel):
    success: bool
    message: str
    intent: str
    extracted_info: ExtractedInfoView = _camel("extractedInfo", "extracted_info")

    model_config = ConfigDict(populate_by_name=True)


__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ChatTestRequest",
    "ChatTestResponse",
    "ExtractedInfoView",
    "NearbyPlaceView",
    "PlaceRecordView",
    "PlaceReviewView",
    "ServiceStatusResponse",
    "SttRequest",
    "SttResponse",
]
