"""Place lookups used to enrich visit drafts."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from munch_log.domain.places import PlaceDetails, PlaceSuggestion

_logger = logging.getLogger(__name__)

_OK_STATUSES = {"OK", "ZERO_RESULTS"}
PHOTO_MAX_WIDTH = 400


class PlacesClient(Protocol):
    """Interface for the places API."""

    async def autocomplete(self, text: str) -> dict[str, object]:
        """Return raw autocomplete predictions for typed text."""

    async def place_details(self, place_id: str) -> dict[str, object]:
        """Return raw details for a place id."""

    async def photo_url(self, photo_reference: str, max_width: int) -> str:
        """Return a keyless image URL for a place photo reference."""


def maps_url(place_id: str) -> str:
    """Return the map link stored with a visit."""
    return f"https://maps.google.com/?q=place_id:{place_id}"


@dataclass
class PlacesService:
    """Wraps the places API; a missing client disables lookups quietly."""

    client: PlacesClient | None

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def search(self, text: str) -> list[PlaceSuggestion]:
        """Return suggestions for typed text, or nothing on any failure."""
        query = text.strip()
        if self.client is None or not query:
            return []
        try:
            payload = await self.client.autocomplete(query)
        except httpx.HTTPError:
            _logger.warning("Places autocomplete failed", exc_info=True)
            return []
        if payload.get("status") not in _OK_STATUSES:
            _logger.warning("Places autocomplete status: %s", payload.get("status"))
            return []
        return [
            PlaceSuggestion(
                place_id=str(prediction["place_id"]),
                description=str(prediction.get("description", "")),
            )
            for prediction in payload.get("predictions", [])
            if prediction.get("place_id")
        ]

    async def get_details(self, place_id: str) -> PlaceDetails | None:
        """Return details for a selected suggestion."""
        if self.client is None or not place_id:
            return None
        try:
            payload = await self.client.place_details(place_id)
        except httpx.HTTPError:
            _logger.warning("Places details failed", exc_info=True)
            return None
        if payload.get("status") != "OK":
            _logger.warning("Places details status: %s", payload.get("status"))
            return None
        result = payload.get("result") or {}
        resolved_id = result.get("place_id")
        if not resolved_id:
            return None
        photos = result.get("photos") or []
        photo_reference = photos[0].get("photo_reference") if photos else None
        photo_url = await self._photo_url(photo_reference) if photo_reference else ""
        return PlaceDetails(
            place_id=str(resolved_id),
            name=str(result.get("name") or ""),
            address=str(result.get("formatted_address") or ""),
            rating=float(result.get("rating") or 0.0),
            maps_url=maps_url(str(resolved_id)),
            photo_url=photo_url,
        )

    async def _photo_url(self, photo_reference: str) -> str:
        """Resolve a place photo; a failed lookup just leaves the place without one."""
        if self.client is None:
            return ""
        try:
            return await self.client.photo_url(photo_reference, PHOTO_MAX_WIDTH)
        except httpx.HTTPError:
            _logger.warning("Places photo lookup failed", exc_info=True)
            return ""
