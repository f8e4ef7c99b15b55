"""Collaborator status aggregation."""

from __future__ import annotations

import asyncio
import logging

from conftest import FakePlaces, FakeReasoner, FakeStt, FakeTts
from app.pipelines.chat.health import (
    ALL_HEALTHY_MESSAGE,
    DEGRADED_MESSAGE,
    ServiceHealthAggregator,
)


def test_all_collaborators_healthy():
    aggregator = ServiceHealthAggregator(FakeReasoner(), FakeStt(), FakePlaces(), FakeTts())

    status = asyncio.run(aggregator.status())

    assert status.overall is True
    assert status.message == ALL_HEALTHY_MESSAGE
    assert set(status.services) == {"bedrock", "stt", "preprocessing", "google_places", "polly"}


def test_raising_probe_is_isolated():
    class ExplodingStt(FakeStt):
        async def is_available(self) -> bool:
            raise RuntimeError("credentials chain broke")

    aggregator = ServiceHealthAggregator(
        FakeReasoner(configured=False), ExplodingStt(), FakePlaces(), FakeTts()
    )

    status = asyncio.run(aggregator.status())

    assert status.services["stt"] is False
    assert status.services["bedrock"] is False
    assert status.services["google_places"] is True
    assert status.services["polly"] is True
    assert status.overall is False
    assert status.message == DEGRADED_MESSAGE


def test_failed_probe_log_names_the_stage(caplog):
    class ExplodingTts(FakeTts):
        async def is_available(self) -> bool:
            raise RuntimeError("polly unreachable")

    aggregator = ServiceHealthAggregator(FakeReasoner(), FakeStt(), FakePlaces(), ExplodingTts())

    with caplog.at_level(logging.WARNING, logger="app.services.chat_pipeline"):
        asyncio.run(aggregator.status())

    assert any(
        record.getMessage().startswith("stage=health status probe polly failed")
        for record in caplog.records
    )
