"""Chatbot endpoints: chat turn, speech-to-text, status and a diagnostic turn."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.controllers.dependencies import ChatPipelineDep, HealthAggregatorDep
from app.pipelines.chat import ChatPipelineError, failure_response
from app.views import (
    ChatRequest,
    ChatResponse,
    ChatTestRequest,
    ChatTestResponse,
    ServiceStatusResponse,
    SttRequest,
    SttResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chatbot", tags=["chatbot"])


def _error_response(exc: ChatPipelineError) -> JSONResponse:
    body = failure_response(exc)
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


@router.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
async def chat(request: ChatRequest, pipeline: ChatPipelineDep):
    """Run one chat turn from text or base64 audio."""

    logger.info("Chat request received: session=%s", request.session_id)
    try:
        return await pipeline.handle(request)
    except ChatPipelineError as exc:
        return _error_response(exc)


@router.post("/stt", response_model=SttResponse, response_model_exclude_none=True)
async def speech_to_text(request: SttRequest, pipeline: ChatPipelineDep):
    """Transcribe base64 audio without running the rest of the pipeline."""

    logger.info("STT request received: session=%s", request.session_id)
    try:
        return await pipeline.transcribe(request)
    except ChatPipelineError as exc:
        body = SttResponse(
            success=False,
            session_id=exc.session_id,
            error_message=exc.user_message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=body.model_dump(by_alias=True, exclude_none=True),
        )


@router.get("/status", response_model=ServiceStatusResponse)
async def service_status(aggregator: HealthAggregatorDep) -> ServiceStatusResponse:
    """Report whether each external collaborator looks usable."""

    status = await aggregator.status()
    return ServiceStatusResponse(
        services=status.services,
        overall=status.overall,
        message=status.message,
    )


@router.post("/test", response_model=ChatTestResponse)
async def test_chat(request: ChatTestRequest, pipeline: ChatPipelineDep):
    """Text-only turn without audio, returning the diagnostic fields."""

    logger.info("Diagnostic chat request: %s", request.message)
    try:
        response = await pipeline.handle(ChatRequest(message=request.message, include_audio=False))
    except ChatPipelineError as exc:
        return _error_response(exc)

    return ChatTestResponse(
        success=response.success,
        message=response.message,
        intent=response.intent or "",
        extracted_info=response.extracted_info,
    )


__all__ = ["router"]
