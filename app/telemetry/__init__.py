"""Telemetry helpers and metrics."""

from .metrics import (
    CHAT_REQUESTS,
    ERROR_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    STAGE_FALLBACKS,
    observe_request,
    record_chat_request,
    record_stage_fallback,
)

__all__ = [
    "CHAT_REQUESTS",
    "ERROR_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "STAGE_FALLBACKS",
    "observe_request",
    "record_chat_request",
    "record_stage_fallback",
]
