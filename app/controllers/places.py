"""Google Places pass-through endpoints."""

from __future__ import annotations

from typing import Any, Mapping

from fastapi import APIRouter, HTTPException, status

from app.config.settings import settings
from app.controllers.dependencies import PlacesDep
from app.services import PlacesError
from app.views import (
    PlaceDetailsRequest,
    PlaceDetailsView,
    PlaceSearchRequest,
    PlaceSearchResponse,
    PlaceSummaryView,
)

router = APIRouter(prefix="/api/places", tags=["places"])


def _summary_fields(place: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "place_id": place.get("place_id"),
        "name": place.get("name") or "",
        "rating": place.get("rating"),
        "user_ratings_total": place.get("user_ratings_total"),
        "address": place.get("formatted_address"),
        "open_now": place.get("open_now"),
        "price_level": place.get("price_level"),
    }


async def _ensure_configured(places: PlacesDep) -> None:
    if not await places.is_configured():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Google Places API key is not configured",
        )


@router.post("/search", response_model=PlaceSearchResponse)
async def search_places(request: PlaceSearchRequest, places: PlacesDep) -> PlaceSearchResponse:
    await _ensure_configured(places)
    radius = request.radius_meters or settings.places.radius_meters
    try:
        results = await places.search(request.query, request.location, radius)
    except PlacesError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    return PlaceSearchResponse(
        query=request.query,
        results=[PlaceSummaryView(**_summary_fields(place)) for place in results],
    )


@router.post("/details", response_model=PlaceDetailsView)
async def place_details(request: PlaceDetailsRequest, places: PlacesDep) -> PlaceDetailsView:
    await _ensure_configured(places)
    try:
        details = await places.details(request.place_id)
    except PlacesError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    return PlaceDetailsView(
        **_summary_fields(details),
        opening_hours=list(details.get("weekday_text") or []),
        reviews=list(details.get("reviews") or []),
    )


__all__ = ["router"]
