"""Deterministic-format stand-in place data for when live search yields nothing.

Names are drawn from per-location tables (falling back to a generic table);
randomness comes from an injected ``random.Random`` so tests can seed it.
"""

from __future__ import annotations

import random
from typing import Mapping, Optional, Sequence, Tuple

from .types import ExtractedEntities, NearbyPlace, PlaceRecord, PlaceReview

MOCK_RATING = 4.5
MIN_NEARBY = 3
MAX_NEARBY = 5

LOCATION_TABLES: Mapping[str, Tuple[Tuple[str, float], ...]] = {
    "강남역": (
        ("강남역 짜장면집", 4.3),
        ("강남역 탕수육 전문점", 4.7),
        ("강남역 짬뽕 맛집", 4.1),
        ("강남역 중화요리", 4.5),
        ("강남역 라면 전문점", 4.2),
        ("강남역 볶음밥 맛집", 4.4),
    ),
    "홍대": (
        ("홍대 맛있는 카페", 4.6),
        ("홍대 분위기 좋은 식당", 4.3),
        ("홍대 유명한 맛집", 4.8),
        ("홍대 데이트 맛집", 4.2),
        ("홍대 친구들과 가는 곳", 4.5),
        ("홍대 인기 맛집", 4.7),
    ),
    "신촌": (
        ("신촌 맛집 1호점", 4.4),
        ("신촌 유명한 식당", 4.6),
        ("신촌 분위기 좋은 카페", 4.1),
        ("신촌 데이트 맛집", 4.3),
        ("신촌 친구들과 가는 곳", 4.5),
        ("신촌 인기 맛집", 4.7),
    ),
}

GENERIC_TABLE: Tuple[Tuple[str, float], ...] = (
    ("맛있는 식당", 4.3),
    ("유명한 맛집", 4.7),
    ("분위기 좋은 식당", 4.1),
    ("인기 맛집", 4.5),
    ("추천 맛집", 4.4),
    ("데이트 맛집", 4.2),
)

# First keyword decides which label replaces the generic "맛집".
CUISINE_LABELS: Tuple[Tuple[str, str], ...] = (
    ("중식", "중식당"),
    ("한식", "한식당"),
    ("일식", "일식당"),
    ("양식", "양식당"),
    ("카페", "카페"),
)

OPENING_HOURS: Tuple[str, ...] = (
    "월요일: 09:00–22:00",
    "화요일: 09:00–22:00",
    "수요일: 09:00–22:00",
    "목요일: 09:00–22:00",
    "금요일: 09:00–23:00",
    "토요일: 09:00–23:00",
    "일요일: 10:00–21:00",
)

REVIEWS: Tuple[PlaceReview, ...] = (
    PlaceReview(author_name="김철수", text="맛있고 분위기가 좋아요!", rating=5),
    PlaceReview(author_name="이영희", text="가격 대비 만족스러운 맛집입니다.", rating=4),
    PlaceReview(author_name="박민수", text="친구들과 가기 좋은 곳이에요.", rating=5),
)


def _apply_cuisine_label(name: str, keywords: Sequence[str]) -> str:
    if not keywords:
        return name
    first = keywords[0]
    for marker, label in CUISINE_LABELS:
        if marker in first:
            return name.replace("맛집", label)
    return name


class MockPlaceGenerator:
    """Build a structurally complete ``PlaceRecord`` without any network call."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        tables: Mapping[str, Tuple[Tuple[str, float], ...]] = LOCATION_TABLES,
        generic_table: Tuple[Tuple[str, float], ...] = GENERIC_TABLE,
    ) -> None:
        if len(generic_table) < MAX_NEARBY:
            raise ValueError(f"generic table needs at least {MAX_NEARBY} entries")
        self._rng = rng or random.Random()
        self._tables = tables
        self._generic_table = generic_table

    def table_for(self, location: Optional[str]) -> Tuple[Tuple[str, float], ...]:
        if location and location in self._tables:
            return self._tables[location]
        return self._generic_table

    def generate(self, entities: ExtractedEntities) -> PlaceRecord:
        table = self.table_for(entities.location)
        index = self._rng.randrange(len(table))
        name = _apply_cuisine_label(table[index][0], entities.keywords)

        count = min(self._rng.randint(MIN_NEARBY, MAX_NEARBY), len(table))
        nearby = tuple(
            NearbyPlace(
                name=entry_name,
                rating=entry_rating,
                place_id=f"mock-nearby-{position}",
            )
            for position, (entry_name, entry_rating) in enumerate(table[:count])
        )

        address = "서울특별시"
        if entities.location:
            address = f"서울특별시 {entities.location}"

        return PlaceRecord(
            id=f"mock-{entities.location or 'default'}-{index}",
            name=name,
            address=address,
            rating=MOCK_RATING,
            open_now=True,
            opening_hours=OPENING_HOURS,
            reviews=REVIEWS,
            nearby=nearby,
        )


__all__ = ["MockPlaceGenerator", "MOCK_RATING", "MIN_NEARBY", "MAX_NEARBY"]
