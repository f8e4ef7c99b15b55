"""Pattern tables used by the entity extractor.

The tables are immutable and injected into ``EntityExtractor`` so tests can
swap in small fixtures.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple


def _unique(values: Iterable[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(value for value in values if value))


@dataclass(frozen=True)
class Vocabulary:
    landmarks: Tuple[str, ...]
    location_suffixes: Tuple[str, ...]
    food_terms: Tuple[str, ...]
    qualifier_terms: Tuple[str, ...]

    @classmethod
    def build(
        cls,
        *,
        landmarks: Iterable[str],
        location_suffixes: Iterable[str],
        food_terms: Iterable[str],
        qualifier_terms: Iterable[str],
    ) -> "Vocabulary":
        """Create a vocabulary with duplicates dropped and order preserved."""

        return cls(
            landmarks=_unique(landmarks),
            location_suffixes=_unique(location_suffixes),
            food_terms=_unique(food_terms),
            qualifier_terms=_unique(qualifier_terms),
        )


# Checked first, in this order.
LANDMARKS = (
    "강남역", "홍대", "신촌", "이태원", "압구정", "청담", "삼성역", "역삼역",
    "선릉역", "논현역", "신사역", "강남구", "서초구", "송파구", "마포구",
    "용산구", "영등포구", "여의도", "잠실", "건대", "성수", "왕십리",
)

# Administrative-unit words and district names.
LOCATION_SUFFIXES = (
    "역", "구", "동", "가", "로", "길", "대로", "시", "군", "리",
    "강남", "강북", "서초", "송파", "마포", "용산", "영등포", "금천", "관악", "동작",
    "서대문", "은평", "노원", "도봉", "강동", "광진", "성동", "중랑", "성북",
    "종로", "중구", "동대문", "여의도", "홍대", "신촌", "이태원", "압구정", "청담",
    "삼성", "역삼", "선릉", "논현", "신사",
)

FOOD_TERMS = (
    "맛집", "식당", "레스토랑", "카페", "음식점", "한식", "중식", "일식", "양식", "분식",
    "치킨", "피자", "햄버거", "샐러드", "스시", "라멘", "돈까스", "파스타", "스테이크",
    "떡볶이", "김밥", "라면", "국수", "냉면", "비빔밥", "불고기", "갈비", "삼겹살",
    "회", "초밥", "우동", "돈부리", "카레", "타코", "부리토", "샌드위치",
    "브런치", "디저트", "케이크", "아이스크림", "커피", "차", "주스", "음료",
)

QUALIFIER_TERMS = (
    "추천", "찾아", "알려", "근처", "주변", "가까운", "좋은", "유명한", "인기",
    "맛있는", "저렴한", "비싼", "고급", "분위기", "데이트", "혼밥", "회식",
    "가족", "친구", "연인", "혼자", "여럿", "단체",
)

DEFAULT_VOCABULARY = Vocabulary.build(
    landmarks=LANDMARKS,
    location_suffixes=LOCATION_SUFFIXES,
    food_terms=FOOD_TERMS,
    qualifier_terms=QUALIFIER_TERMS,
)


__all__ = ["Vocabulary", "DEFAULT_VOCABULARY"]
