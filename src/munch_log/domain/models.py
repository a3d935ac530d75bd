"""Domain models for restaurant visits."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class Identity:
    """The signed-in user as reported by the auth backend."""

    id: str
    email: str | None = None


@dataclass(frozen=True)
class VisitRecord:
    """One logged restaurant visit stored in the backend."""

    id: str
    user_id: str
    restaurant_name: str
    date_visited: date
    dishes_ordered: str
    rating: int
    address: str | None = None
    value_rating: int | None = None
    notes: str | None = None
    photo_url: str | None = None
    google_place_id: str | None = None
    google_rating: float | None = None
    google_maps_url: str | None = None
    google_photo_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def display_photo_url(self) -> str | None:
        """Uploaded photo first, then the place photo."""
        return self.photo_url or self.google_photo_url
