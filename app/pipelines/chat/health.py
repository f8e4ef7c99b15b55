"""Collaborator status aggregation for ``GET /api/chatbot/status``."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict

from app.application.interfaces import (
    PlaceSearchInterface,
    ReasonerInterface,
    SpeechToTextInterface,
    TextToSpeechInterface,
)

from .types import ServiceStatus

logger = logging.getLogger("app.services.chat_pipeline")

STAGE = "health"

ALL_HEALTHY_MESSAGE = "모든 서비스가 정상 작동 중입니다."
DEGRADED_MESSAGE = "일부 서비스에 문제가 있습니다."

Probe = Callable[[], Awaitable[bool]]


async def _always_ready() -> bool:
    return True


class ServiceHealthAggregator:
    """Run each collaborator's lightweight probe in isolation."""

    def __init__(
        self,
        reasoner: ReasonerInterface,
        stt: SpeechToTextInterface,
        places: PlaceSearchInterface,
        tts: TextToSpeechInterface,
    ) -> None:
        self._probes: Dict[str, Probe] = {
            "bedrock": reasoner.is_configured,
            "stt": stt.is_available,
            "preprocessing": _always_ready,
            "google_places": places.is_configured,
            "polly": tts.is_available,
        }

    async def _run_probe(self, name: str, probe: Probe) -> bool:
        try:
            return bool(await probe())
        except Exception as exc:
            logger.warning("stage=%s status probe %s failed: %s", STAGE, name, exc)
            return False

    async def status(self) -> ServiceStatus:
        services = {name: await self._run_probe(name, probe) for name, probe in self._probes.items()}
        overall = all(services.values())
        return ServiceStatus(
            services=services,
            overall=overall,
            message=ALL_HEALTHY_MESSAGE if overall else DEGRADED_MESSAGE,
        )


__all__ = ["ServiceHealthAggregator", "ALL_HEALTHY_MESSAGE", "DEGRADED_MESSAGE"]
