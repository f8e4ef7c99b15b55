"""Chat pipeline package.

Modules are organised by the order in which `/api/chatbot/chat` executes:

1. `ingestion` – session id, base64 audio validation, STT or text input.
2. `extraction` – location/keyword tables (`vocabulary`) and query rewrite.
3. `intent` – closed-set classification of the utterance.
4. `routing` – intent → handler dispatch table.
5. `handlers` – place search (`mock_places` fallback) and reasoner answers.
6. `synthesis` – markup stripping (`formatting`), Polly audio, duration.
7. `health` – collaborator probes for `/api/chatbot/status`.
8. `flow` – the `ChatPipeline` tying the stages together.

The FastAPI controller imports from here so contributors can jump straight
to the relevant stage without wading through a single monolithic file.
"""

from .errors import (
    ChatPipelineError,
    InputError,
    InvalidAudio,
    MissingAudio,
    MissingInput,
    ServiceUnavailable,
)
from .extraction import EntityExtractor, build_search_query, extract_keywords, extract_location
from .flow import PIPELINE_STAGES, ChatPipeline, PipelineStage, failure_response
from .formatting import format_place_message, strip_markup
from .handlers import PlaceSearchHandler, ReasonerHandler
from .health import ServiceHealthAggregator
from .ingestion import STT_FALLBACK_TEXT, normalize_input, resolve_session_id
from .intent import IntentClassifier, normalize_intent
from .mock_places import MockPlaceGenerator
from .routing import IntentRouter
from .synthesis import ResponseComposer, estimate_duration_seconds, resolve_voice_options
from .types import (
    ExtractedEntities,
    Intent,
    IntentClassification,
    MockReason,
    PlaceRecord,
    PlaceSearchOutcome,
    PlaceSource,
    StageResult,
)
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

__all__ = [
    "ChatPipeline",
    "ChatPipelineError",
    "DEFAULT_VOCABULARY",
    "EntityExtractor",
    "ExtractedEntities",
    "InputError",
    "Intent",
    "IntentClassification",
    "IntentClassifier",
    "IntentRouter",
    "InvalidAudio",
    "MissingAudio",
    "MissingInput",
    "MockPlaceGenerator",
    "MockReason",
    "PIPELINE_STAGES",
    "PipelineStage",
    "PlaceRecord",
    "PlaceSearchHandler",
    "PlaceSearchOutcome",
    "PlaceSource",
    "ReasonerHandler",
    "ResponseComposer",
    "STT_FALLBACK_TEXT",
    "ServiceHealthAggregator",
    "ServiceUnavailable",
    "StageResult",
    "Vocabulary",
    "build_search_query",
    "estimate_duration_seconds",
    "extract_keywords",
    "extract_location",
    "failure_response",
    "format_place_message",
    "normalize_input",
    "normalize_intent",
    "resolve_session_id",
    "resolve_voice_options",
    "strip_markup",
]
