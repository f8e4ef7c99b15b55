"""Service layer helpers for external integrations."""

from .llm_client import BedrockLlmClient, LlmInvocationError, get_llm_client
from .places import GooglePlacesClient, PlacesError, get_places_client
from .polly import PollyTtsService, SpeechSynthesisError, get_polly_service
from .transcribe import (
    TranscribeService,
    TranscriptionError,
    TranscriptionResult,
    get_transcribe_service,
)

__all__ = [
    "BedrockLlmClient",
    "LlmInvocationError",
    "get_llm_client",
    "GooglePlacesClient",
    "PlacesError",
    "get_places_client",
    "PollyTtsService",
    "SpeechSynthesisError",
    "get_polly_service",
    "TranscribeService",
    "TranscriptionError",
    "TranscriptionResult",
    "get_transcribe_service",
]
