"""Prompt templates sent to the reasoning model.

Each template is a ``str.format`` string; ``render_handler_prompt`` fills the
per-intent ones from the extracted entities.
"""

from __future__ import annotations

from .types import ExtractedEntities

REWRITE_PROMPT = (
    "다음 사용자 쿼리를 분석하고 개선해주세요. "
    "장소 검색, 정보 요청, 일반 대화 등을 구분하여 명확하고 구체적인 쿼리로 변환해주세요. "
    "응답은 개선된 쿼리만 반환해주세요.\n\n"
    "사용자 쿼리: {query}"
)

CLASSIFICATION_PROMPT = """다음 사용자 쿼리의 의도를 분류해주세요.

가능한 의도:
- PLACE_SEARCH: 식당, 카페 등 특정 장소를 찾거나 추천을 원함
- INFORMATION_REQUEST: 사실, 방법, 영업시간 같은 정보를 묻는 질문
- GENERAL_CHAT: 인사, 잡담 등 일반 대화
- UNKNOWN: 위 어디에도 해당하지 않거나 의도를 알 수 없음

예시:
쿼리: "강남역 중식집 추천해줘" -> PLACE_SEARCH
쿼리: "홍대 근처 분위기 좋은 카페 알려줘" -> PLACE_SEARCH
쿼리: "비빔밥은 어느 지역 음식이야?" -> INFORMATION_REQUEST
쿼리: "안녕, 오늘 기분 어때?" -> GENERAL_CHAT
쿼리: "ㅁㄴㅇㄹ" -> UNKNOWN

응답은 의도 이름 하나만 반환해주세요 (예: PLACE_SEARCH).

사용자 쿼리: {query}"""

INFORMATION_PROMPT = (
    "사용자가 '{query}'에 대한 정보를 요청하고 있습니다. "
    "정리된 질문: {processed_query} "
    "추출된 위치: {location}, 키워드: {keywords} "
    "이 정보를 바탕으로 유용한 정보를 한국어로 간결하게 제공해주세요."
)

GENERAL_CHAT_PROMPT = (
    "사용자와의 일반적인 대화입니다. "
    "사용자 메시지: '{query}' "
    "친근하고 도움이 되는 응답을 한국어로 생성해주세요."
)

UNKNOWN_PROMPT = (
    "사용자의 의도를 명확히 파악하기 어려운 요청입니다. "
    "사용자 메시지: '{query}' "
    "추출된 위치: {location}, 키워드: {keywords} "
    "사용자에게 더 구체적인 정보를 요청하거나 도움을 제공해주세요."
)

_MISSING = "없음"


def render_rewrite_prompt(query: str) -> str:
    return REWRITE_PROMPT.format(query=query)


def render_classification_prompt(query: str) -> str:
    return CLASSIFICATION_PROMPT.format(query=query)


def render_handler_prompt(template: str, entities: ExtractedEntities) -> str:
    """Fill a handler template; unused placeholders are simply ignored."""

    return template.format(
        query=entities.original_query,
        processed_query=entities.processed_query or entities.original_query,
        location=entities.location or _MISSING,
        keywords=", ".join(entities.keywords) if entities.keywords else _MISSING,
    )


__all__ = [
    "REWRITE_PROMPT",
    "CLASSIFICATION_PROMPT",
    "INFORMATION_PROMPT",
    "GENERAL_CHAT_PROMPT",
    "UNKNOWN_PROMPT",
    "render_rewrite_prompt",
    "render_classification_prompt",
    "render_handler_prompt",
]
