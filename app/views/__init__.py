"""Pydantic schemas used as views in the MVC architecture."""

from .chat import (
    ChatRequest,
    ChatResponse,
    ChatTestRequest,
    ChatTestResponse,
    ExtractedInfoView,
    NearbyPlaceView,
    PlaceRecordView,
    PlaceReviewView,
    ServiceStatusResponse,
    SttRequest,
    SttResponse,
)
from .common import HealthResponse
from .places import (
    PlaceDetailsRequest,
    PlaceDetailsView,
    PlaceSearchRequest,
    PlaceSearchResponse,
    PlaceSummaryView,
)
from .tts import (
    TextToSpeechRequest,
    TextToSpeechResponse,
    VoiceListResponse,
    VoiceView,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ChatTestRequest",
    "ChatTestResponse",
    "ExtractedInfoView",
    "HealthResponse",
    "NearbyPlaceView",
    "PlaceDetailsRequest",
    "PlaceDetailsView",
    "PlaceRecordView",
    "PlaceReviewView",
    "PlaceSearchRequest",
    "PlaceSearchResponse",
    "PlaceSummaryView",
    "ServiceStatusResponse",
    "SttRequest",
    "SttResponse",
    "TextToSpeechRequest",
    "TextToSpeechResponse",
    "VoiceListResponse",
    "VoiceView",
]
