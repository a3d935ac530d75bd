"""Google Places API client."""

from dataclasses import dataclass

import httpx

from munch_log.services.places import PlacesClient

_DETAIL_FIELDS = "name,formatted_address,place_id,rating,photos"


@dataclass
class HttpxGooglePlacesClient(PlacesClient):
    """HTTPX-backed Places client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxGooglePlacesClient":
        """Create a Places client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def autocomplete(self, text: str) -> dict[str, object]:
        """Return establishment predictions for typed text."""
        response = await self.http_client.get(
            f"{self.base_url}/autocomplete/json",
            params={"input": text, "types": "establishment", "key": self.api_key},
            timeout=10,
        )
        response.raise_for_status()
        return response.json()

    async def place_details(self, place_id: str) -> dict[str, object]:
        """Return the fields a visit draft needs for a place."""
        response = await self.http_client.get(
            f"{self.base_url}/details/json",
            params={
                "place_id": place_id,
                "fields": _DETAIL_FIELDS,
                "key": self.api_key,
            },
            timeout=10,
        )
        response.raise_for_status()
        return response.json()

    async def photo_url(self, photo_reference: str, max_width: int) -> str:
        """Resolve a photo reference to the image URL the Photo API redirects to.

        The redirect target carries no API key, so it is safe to store and to
        hand to browsers. Returns "" when the API does not redirect.
        """
        response = await self.http_client.get(
            f"{self.base_url}/photo",
            params={
                "maxwidth": max_width,
                "photo_reference": photo_reference,
                "key": self.api_key,
            },
            timeout=10,
            follow_redirects=False,
        )
        if response.is_redirect:
            return response.headers.get("location", "")
        response.raise_for_status()
        return ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
