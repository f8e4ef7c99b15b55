"""Google Places web service client (Text Search + Place Details)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.application.interfaces import PlaceSearchInterface
from app.config.settings import settings

logger = logging.getLogger(__name__)

_DETAIL_FIELDS = (
    "place_id,name,rating,opening_hours,reviews,formatted_address,"
    "geometry,price_level,user_ratings_total"
)

_DAY_TRANSLATIONS = (
    ("Monday", "월요일"),
    ("Tuesday", "화요일"),
    ("Wednesday", "수요일"),
    ("Thursday", "목요일"),
    ("Friday", "금요일"),
    ("Saturday", "토요일"),
    ("Sunday", "일요일"),
    ("AM", "오전"),
    ("PM", "오후"),
    ("Closed", "휴무"),
    ("Open 24 hours", "24시간 영업"),
)


class PlacesError(RuntimeError):
    """Raised when the Places API cannot serve a request."""


def translate_weekday_text(day_text: str) -> str:
    """Render Google's English opening-hours line with Korean day names."""

    translated = day_text
    for source, target in _DAY_TRANSLATIONS:
        translated = translated.replace(source, target)
    return translated


def _summarize_result(raw: dict[str, Any]) -> dict[str, Any]:
    opening_hours = raw.get("opening_hours") or {}
    return {
        "place_id": raw.get("place_id"),
        "name": raw.get("name", ""),
        "rating": raw.get("rating"),
        "user_ratings_total": raw.get("user_ratings_total"),
        "formatted_address": raw.get("formatted_address") or raw.get("vicinity"),
        "open_now": opening_hours.get("open_now"),
        "price_level": raw.get("price_level"),
        "geometry": raw.get("geometry"),
    }


def _summarize_details(raw: dict[str, Any]) -> dict[str, Any]:
    details = _summarize_result(raw)
    opening_hours = raw.get("opening_hours") or {}
    details["weekday_text"] = [
        translate_weekday_text(text) for text in opening_hours.get("weekday_text", [])
    ]
    details["reviews"] = [
        {
            "author_name": review.get("author_name", ""),
            "text": review.get("text", ""),
            "rating": review.get("rating"),
        }
        for review in raw.get("reviews", [])
    ]
    return details


class GooglePlacesClient(PlaceSearchInterface):
    """Query Google Places and return normalized place dictionaries."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if api_key is None and settings.places.api_key:
            api_key = settings.places.api_key.get_secret_value()
        self._api_key = api_key
        self._base_url = (base_url or settings.places.base_url).rstrip("/")
        self._transport = transport

    async def is_configured(self) -> bool:
        return bool(self._api_key)

    async def search(
        self,
        query: str,
        location: str | None = None,
        radius_meters: int | None = None,
    ) -> list[dict[str, Any]]:
        """Run a Text Search; an empty list means the API found nothing.

        Google honours ``radius`` only next to a ``location`` coordinate, so the
        radius is sent when the named location resolves to one.
        """

        search_text = query
        if location and location not in query:
            search_text = f"{location} {query}"

        params: dict[str, Any] = {"query": search_text}
        bias = None
        if location and radius_meters:
            bias = await self._locate(location)
            if bias is not None:
                params["location"] = bias
                params["radius"] = radius_meters

        logger.info(
            "Google Places search query=%s location=%s bias=%s radius=%s",
            search_text,
            location,
            bias,
            params.get("radius"),
        )
        payload = await self._get("textsearch/json", params)
        return [_summarize_result(result) for result in payload.get("results", [])]

    async def _locate(self, location: str) -> str | None:
        """Resolve a place name to ``"lat,lng"``; None when it cannot be placed."""

        try:
            payload = await self._get(
                "findplacefromtext/json",
                {"input": location, "inputtype": "textquery", "fields": "geometry"},
            )
        except PlacesError as exc:
            logger.warning("Google Places could not locate %s: %s", location, exc)
            return None

        for candidate in payload.get("candidates", []):
            point = (candidate.get("geometry") or {}).get("location") or {}
            if "lat" in point and "lng" in point:
                return f"{point['lat']},{point['lng']}"
        return None

    async def details(self, place_id: str) -> dict[str, Any]:
        """Fetch the detail record for ``place_id``."""

        if not place_id:
            raise PlacesError("A place_id is required for a details lookup.")

        payload = await self._get(
            "details/json",
            {"place_id": place_id, "fields": _DETAIL_FIELDS},
        )
        result = payload.get("result")
        if not isinstance(result, dict):
            raise PlacesError(f"No details returned for {place_id}")
        return _summarize_details(result)

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        if not self._api_key:
            raise PlacesError("Google Places API key is not configured.")

        query_params = dict(params)
        query_params["key"] = self._api_key
        query_params["language"] = settings.places.language

        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=settings.places.timeout_seconds,
            transport=self._transport,
        ) as client:
            try:
                response = await client.get(f"/{path}", params=query_params)
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as exc:
                raise PlacesError(
                    f"Places API returned HTTP {exc.response.status_code}"
                ) from exc
            except httpx.RequestError as exc:
                raise PlacesError(f"Unable to reach Places API: {exc}") from exc
            except ValueError as exc:
                raise PlacesError(f"Invalid response from Places API: {exc}") from exc

        status = data.get("status", "OK")
        if status == "ZERO_RESULTS":
            return {"results": []}
        if status != "OK":
            raise PlacesError(
                f"Places API status {status}: {data.get('error_message', '')}".strip()
            )
        return data


def get_places_client() -> GooglePlacesClient:
    """Return the default Places client instance."""

    return _DEFAULT_CLIENT


_DEFAULT_CLIENT = GooglePlacesClient()


__all__ = [
    "GooglePlacesClient",
    "PlacesError",
    "get_places_client",
    "translate_weekday_text",
]
