"""Terminal errors that stop the chat pipeline before a reply is produced."""

from __future__ import annotations

from fastapi import status


class ChatPipelineError(RuntimeError):
    """Base error carrying the user-facing message and the request's session id."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    user_message = "서비스 처리 중 오류가 발생했습니다."

    def __init__(self, session_id: str, user_message: str | None = None) -> None:
        self.session_id = session_id
        if user_message:
            self.user_message = user_message
        super().__init__(self.user_message)


class InputError(ChatPipelineError):
    status_code = status.HTTP_400_BAD_REQUEST


class MissingInput(InputError):
    user_message = "텍스트 메시지가 필요합니다."


class MissingAudio(InputError):
    user_message = "오디오 데이터가 필요합니다."


class InvalidAudio(InputError):
    user_message = "유효하지 않은 오디오 데이터입니다."


class ServiceUnavailable(ChatPipelineError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    user_message = "AI 서비스 설정이 완료되지 않았습니다."


__all__ = [
    "ChatPipelineError",
    "InputError",
    "MissingInput",
    "MissingAudio",
    "InvalidAudio",
    "ServiceUnavailable",
]
