"""Intent classification and normalization."""

from __future__ import annotations

import asyncio

import pytest

from conftest import FakeReasoner
from app.pipelines.chat.intent import IntentClassifier, normalize_intent
from app.pipelines.chat.types import Intent


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("PLACE_SEARCH", Intent.PLACE_SEARCH),
        ("  information_request\n", Intent.INFORMATION_REQUEST),
        ("General_Chat", Intent.GENERAL_CHAT),
        ("UNKNOWN", Intent.UNKNOWN),
    ],
)
def test_exact_labels_are_accepted(raw, expected):
    classification = normalize_intent(raw)
    assert classification.intent is expected
    assert classification.confidence == "high"


@pytest.mark.parametrize(
    "raw",
    ["", None, "PLACE SEARCH", "의도: PLACE_SEARCH", "PLACE_SEARCH.", "🙂", 42],
)
def test_anything_else_is_unknown(raw):
    classification = normalize_intent(raw)
    assert classification.intent is Intent.UNKNOWN
    assert classification.confidence == "low"


def test_classifier_sends_query_in_prompt():
    reasoner = FakeReasoner(intent="GENERAL_CHAT")

    classification = asyncio.run(IntentClassifier(reasoner).classify("안녕, 오늘 어때?"))

    assert classification.intent is Intent.GENERAL_CHAT
    assert reasoner.prompts[0].endswith("안녕, 오늘 어때?")
    for label in Intent:
        assert label.value in reasoner.prompts[0]


def test_classifier_failure_resolves_to_unknown():
    reasoner = FakeReasoner(fail=("classify",))

    classification = asyncio.run(IntentClassifier(reasoner).classify("무엇이든"))

    assert classification.intent is Intent.UNKNOWN
