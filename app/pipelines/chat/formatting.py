"""Text rendering helpers: place messages for display and plain text for speech."""

from __future__ import annotations

import re

from .types import PlaceRecord

MAX_REVIEWS = 3
MAX_NEARBY = 5

_FENCE = re.compile(r"^\s*```[^\n]*$", re.MULTILINE)
_IMAGE = re.compile(r"!\[([^\]]*)\]\([^)]*\)")
_LINK = re.compile(r"\[([^\]]+)\]\([^)]*\)")
_LINE_PREFIX = re.compile(
    r"^[ \t]*(?:#{1,6}[ \t]+|>+[ \t]*|[-*+•][ \t]+|\d{1,3}[.)](?!\s*\d)[ \t]+)",
    re.MULTILINE,
)
_BOLD = re.compile(r"(\*\*|__)(?=\S)(.+?)(?<=\S)\1")
_ITALIC_STAR = re.compile(r"\*(?=\S)([^*\n]+?)(?<=\S)\*")
_ITALIC_UNDERSCORE = re.compile(r"(?<!\w)_(?=\S)([^_\n]+?)(?<=\S)_(?!\w)")
_INLINE_CODE = re.compile(r"`+([^`\n]*)`+")
_STRAY_MARKERS = re.compile(r"\*{2,}|`+")
_TRAILING_SPACE = re.compile(r"[ \t]+$", re.MULTILINE)
_BLANK_RUNS = re.compile(r"\n{3,}")


def _format_rating(rating: float) -> str:
    return f"{rating:.1f}"


def format_place_message(record: PlaceRecord) -> str:
    """Render a place record as the chat reply shown to the user."""

    lines = [f"📍 **{record.name}**"]
    if record.rating is not None and record.rating > 0:
        lines.append(f"⭐ 평점: {_format_rating(record.rating)}/5.0")
    if record.address:
        lines.append(f"📍 주소: {record.address}")
    if record.open_now is not None:
        lines.append("🟢 영업중" if record.open_now else "🔴 영업종료")

    if record.opening_hours:
        lines.append("🕒 영업시간:")
        lines.extend(f"   {day}" for day in record.opening_hours)

    reviews = record.reviews[:MAX_REVIEWS]
    if reviews:
        lines.append("💬 최근 리뷰:")
        lines.extend(f"   {review.author_name}: {review.text}" for review in reviews)

    nearby = record.nearby[:MAX_NEARBY]
    if nearby:
        lines.append("")
        lines.append("🔍 근처 추천 장소:")
        for place in nearby:
            entry = f"• {place.name}"
            if place.rating is not None and place.rating > 0:
                entry += f" (⭐ {_format_rating(place.rating)})"
            lines.append(entry)

    return "\n".join(lines)


def _strip_once(text: str) -> str:
    text = _FENCE.sub("", text)
    text = _IMAGE.sub(r"\1", text)
    text = _LINK.sub(r"\1", text)
    text = _LINE_PREFIX.sub("", text)
    text = _BOLD.sub(r"\2", text)
    text = _ITALIC_STAR.sub(r"\1", text)
    text = _ITALIC_UNDERSCORE.sub(r"\1", text)
    text = _INLINE_CODE.sub(r"\1", text)
    text = _STRAY_MARKERS.sub("", text)
    text = _TRAILING_SPACE.sub("", text)
    text = _BLANK_RUNS.sub("\n\n", text)
    return text.strip()


def strip_markup(text: str | None) -> str:
    """Remove markdown-style markup so the text can be read aloud.

    Every rule only removes characters, so applying the rules until nothing
    changes terminates and makes the function idempotent.
    """

    current = text or ""
    while True:
        stripped = _strip_once(current)
        if stripped == current:
            return stripped
        current = stripped


__all__ = ["format_place_message", "strip_markup"]
