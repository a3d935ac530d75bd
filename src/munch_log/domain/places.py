"""Domain models for place lookups."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PlaceSuggestion:
    """An autocomplete suggestion for a typed restaurant name."""

    place_id: str
    description: str


@dataclass(frozen=True)
class PlaceDetails:
    """Place metadata used to enrich a visit draft."""

    place_id: str
    name: str
    address: str
    rating: float
    maps_url: str
    photo_url: str
