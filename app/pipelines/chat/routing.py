"""Intent router (Stage 04): a pure mapping from intent to handler."""

from __future__ import annotations

from typing import Mapping

from .handlers import IntentHandler
from .types import Intent


class IntentRouter:
    """Dispatch table covering every ``Intent`` member."""

    def __init__(self, handlers: Mapping[Intent, IntentHandler]) -> None:
        missing = [intent.value for intent in Intent if intent not in handlers]
        if missing:
            raise ValueError(f"No handler registered for intents: {', '.join(missing)}")
        self._handlers = dict(handlers)

    def route(self, intent: Intent) -> IntentHandler:
        return self._handlers[intent]


__all__ = ["IntentRouter"]
