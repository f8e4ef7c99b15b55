"""Thin Bedrock client wrapper for the chatbot's reasoning calls."""

from __future__ import annotations

import base64
import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from app.application.interfaces import ReasonerInterface
from app.config.settings import settings
from app.services.aws import create_boto3_client, has_aws_credentials

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "당신은 한국어로 답하는 친절한 생활 정보 도우미입니다. "
    "요청받은 형식을 지키고 불필요한 설명은 덧붙이지 마세요."
)


class LlmInvocationError(RuntimeError):
    """Raised when the Bedrock invocation fails."""


def _decode_bedrock_api_key(secret_value: Optional[str]) -> tuple[str, str] | None:
    """Decode the BEDROCK_API_KEY secret into access/secret key components."""

    if not secret_value:
        return None

    try:
        decoded_bytes = base64.b64decode(secret_value.strip())
    except ValueError:
        decoded_bytes = secret_value.encode("utf-8", "ignore")

    filtered = "".join(chr(b) for b in decoded_bytes if 31 < b < 127)
    if ":" not in filtered:
        return None
    access_key, secret_key = filtered.split(":", 1)
    return access_key, secret_key


class BedrockLlmClient(ReasonerInterface):
    """Invoke Amazon Bedrock models with standard configuration."""

    def __init__(self, client=None, *, model_id: str | None = None) -> None:
        self._model_id = model_id or settings.bedrock.model_id
        self._api_key_tuple = None
        if settings.bedrock.api_key:
            self._api_key_tuple = _decode_bedrock_api_key(
                settings.bedrock.api_key.get_secret_value()
            )

        if client is not None:
            self._client = client
            return

        try:
            self._client = create_boto3_client(
                "bedrock-runtime",
                region_name=settings.bedrock.region,
                aws_access_key_id=self._api_key_tuple[0] if self._api_key_tuple else None,
                aws_secret_access_key=self._api_key_tuple[1] if self._api_key_tuple else None,
            )
        except Exception as exc:  # pragma: no cover - configuration issue
            logger.warning("Bedrock client could not be initialised: %s", exc)
            self._client = None

    async def is_configured(self) -> bool:
        """Credential presence check; never contacts the model."""

        if self._client is None or not self._model_id:
            return False
        if self._api_key_tuple:
            return True
        return await run_in_threadpool(has_aws_credentials)

    async def complete(self, prompt: str) -> str:
        """Send a single-turn prompt and return the model's text."""

        result = await self.invoke(
            system_prompt=DEFAULT_SYSTEM_PROMPT,
            user_prompt=prompt,
        )
        if not result:
            raise LlmInvocationError("Bedrock returned an empty response.")
        return result

    async def invoke(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
        top_p: float | None = None,
        model_id: str | None = None,
    ) -> str | None:
        """Run a Bedrock `converse` call and return the aggregate text output."""

        target_model_id = model_id or self._model_id
        if not self._client or not target_model_id:
            raise LlmInvocationError("Bedrock client is not configured.")

        inference_cfg = {
            "maxTokens": max_tokens or settings.bedrock.max_tokens,
            "temperature": (
                temperature
                if temperature is not None
                else settings.bedrock.temperature
            ),
            "topP": top_p if top_p is not None else settings.bedrock.top_p,
        }

        def _call() -> str:
            response = self._client.converse(
                modelId=target_model_id,
                system=[{"text": system_prompt}],
                messages=[{"role": "user", "content": [{"text": user_prompt}]}],
                inferenceConfig=inference_cfg,
            )
            content_blocks = (
                response.get("output", {})
                .get("message", {})
                .get("content", [])
            )
            texts = [block.get("text", "") for block in content_blocks if block.get("text")]
            return "\n".join(texts).strip()

        try:
            result = await run_in_threadpool(_call)
        except Exception as exc:  # pragma: no cover - external dependency
            raise LlmInvocationError(str(exc)) from exc

        return result or None


def get_llm_client() -> BedrockLlmClient:
    """Return the default Bedrock client instance."""

    return _DEFAULT_CLIENT


_DEFAULT_CLIENT = BedrockLlmClient()


__all__ = [
    "BedrockLlmClient",
    "LlmInvocationError",
    "DEFAULT_SYSTEM_PROMPT",
    "get_llm_client",
]
