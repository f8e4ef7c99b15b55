"""Schemas for the Google Places pass-through endpoints."""

from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.views.chat import PlaceReviewView


class PlaceSearchRequest(BaseModel):
    query: str = Field(..., min_length=1)
    location: Optional[str] = None
    radius_meters: Optional[int] = Field(
        None,
        ge=1,
        le=50000,
        validation_alias=AliasChoices("radiusMeters", "radius_meters"),
        serialization_alias="radiusMeters",
    )

    model_config = ConfigDict(populate_by_name=True)


class PlaceDetailsRequest(BaseModel):
    place_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("placeId", "place_id"),
        serialization_alias="placeId",
    )

    model_config = ConfigDict(populate_by_name=True)


class PlaceSummaryView(BaseModel):
    place_id: Optional[str] = Field(None, serialization_alias="placeId")
    name: str = ""
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = Field(None, serialization_alias="userRatingsTotal")
    address: Optional[str] = None
    open_now: Optional[bool] = Field(None, serialization_alias="openNow")
    price_level: Optional[int] = Field(None, serialization_alias="priceLevel")

    model_config = ConfigDict(populate_by_name=True)


class PlaceDetailsView(PlaceSummaryView):
    opening_hours: List[str] = Field(default_factory=list, serialization_alias="openingHours")
    reviews: List[PlaceReviewView] = Field(default_factory=list)


class PlaceSearchResponse(BaseModel):
    query: str
    results: List[PlaceSummaryView] = Field(default_factory=list)


__all__ = [
    "PlaceDetailsRequest",
    "PlaceDetailsView",
    "PlaceSearchRequest",
    "PlaceSearchResponse",
    "PlaceSummaryView",
]
