"""Intent classification stage (Stage 03) of the chat pipeline."""

from __future__ import annotations

import logging

from app.application.interfaces import ReasonerInterface
from app.telemetry import record_stage_fallback

from .prompts import render_classification_prompt
from .types import Intent, IntentClassification

logger = logging.getLogger("app.services.chat_pipeline")

STAGE = "intent"
_LABELS = {intent.value: intent for intent in Intent}


def normalize_intent(raw_reply: object) -> IntentClassification:
    """Constrain a free-form model reply to the closed intent set."""

    raw_text = "" if raw_reply is None else str(raw_reply)
    token = raw_text.strip().upper()
    intent = _LABELS.get(token)
    if intent is None:
        return IntentClassification(intent=Intent.UNKNOWN, raw_reply=raw_text, exact=False)
    return IntentClassification(intent=intent, raw_reply=raw_text, exact=True)


class IntentClassifier:
    """Ask the reasoning model for a label and normalize the answer."""

    def __init__(self, reasoner: ReasonerInterface) -> None:
        self._reasoner = reasoner

    async def classify(self, text: str) -> IntentClassification:
        """Never raises; failures and stray labels resolve to UNKNOWN."""

        try:
            raw_reply = await self._reasoner.complete(render_classification_prompt(text))
        except Exception as exc:
            logger.warning("stage=%s classifier invocation failed: %s", STAGE, exc)
            record_stage_fallback(STAGE)
            return IntentClassification(intent=Intent.UNKNOWN)

        classification = normalize_intent(raw_reply)
        if not classification.exact:
            logger.info(
                "stage=%s ambiguous classifier reply coerced to UNKNOWN raw=%r",
                STAGE,
                raw_reply,
            )
        else:
            logger.info("stage=%s intent=%s", STAGE, classification.intent.value)
        return classification


__all__ = ["IntentClassifier", "normalize_intent"]
