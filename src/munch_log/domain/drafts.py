"""Form draft for an in-progress add or edit."""

import base64
from dataclasses import dataclass, replace
from datetime import date

from munch_log.domain.models import VisitRecord
from munch_log.domain.places import PlaceDetails

DEFAULT_RATING = 5


@dataclass(frozen=True)
class PendingPhoto:
    """A photo picked in the form but not uploaded yet."""

    filename: str
    content_type: str
    content: bytes


@dataclass(frozen=True)
class VisitDraft:
    """Client-only mirror of the editable visit fields."""

    restaurant_name: str = ""
    address: str = ""
    date_visited: date | None = None
    dishes_ordered: str = ""
    rating: int | None = DEFAULT_RATING
    notes: str = ""
    google_place_id: str = ""
    google_rating: float = 0.0
    google_maps_url: str = ""
    google_photo_url: str = ""
    photo_url: str = ""
    photo: PendingPhoto | None = None
    photo_preview: str = ""


def new_draft(today: date) -> VisitDraft:
    """Return the empty draft used by the add form."""
    return VisitDraft(date_visited=today)


def draft_from_visit(visit: VisitRecord) -> VisitDraft:
    """Seed a draft from an existing record for editing."""
    return VisitDraft(
        restaurant_name=visit.restaurant_name,
        address=visit.address or "",
        date_visited=visit.date_visited,
        dishes_ordered=visit.dishes_ordered,
        rating=visit.rating,
        notes=visit.notes or "",
        google_place_id=visit.google_place_id or "",
        google_rating=visit.google_rating or 0.0,
        google_maps_url=visit.google_maps_url or "",
        google_photo_url=visit.google_photo_url or "",
        photo_url=visit.photo_url or "",
        photo_preview=visit.display_photo_url or "",
    )


def apply_place(draft: VisitDraft, place: PlaceDetails) -> VisitDraft:
    """Overwrite every place-derived field at once.

    Values the lookup did not return are reset to empty so nothing from an
    earlier selection survives.
    """
    return replace(
        draft,
        restaurant_name=place.name or "",
        address=place.address or "",
        google_place_id=place.place_id or "",
        google_rating=place.rating or 0.0,
        google_maps_url=place.maps_url or "",
        google_photo_url=place.photo_url or "",
        photo_preview=place.photo_url or "",
    )


def missing_required(draft: VisitDraft) -> list[str]:
    """Return the names of required fields that are empty."""
    missing = []
    if not draft.restaurant_name.strip():
        missing.append("restaurant_name")
    if draft.date_visited is None:
        missing.append("date_visited")
    if not draft.dishes_ordered.strip():
        missing.append("dishes_ordered")
    if draft.rating is None:
        missing.append("rating")
    return missing


def draft_payload(draft: VisitDraft, photo_url: str | None) -> dict[str, object]:
    """Build the row payload for the editable fields of a draft."""
    return {
        "restaurant_name": draft.restaurant_name,
        "address": draft.address or None,
        "date_visited": draft.date_visited.isoformat() if draft.date_visited else None,
        "dishes_ordered": draft.dishes_ordered,
        "rating": draft.rating,
        "notes": draft.notes or None,
        "google_place_id": draft.google_place_id or None,
        "google_rating": draft.google_rating or None,
        "google_maps_url": draft.google_maps_url or None,
        "google_photo_url": draft.google_photo_url or None,
        "photo_url": photo_url or None,
    }


def preview_data_url(photo: PendingPhoto) -> str:
    """Inline the picked photo so the form can preview it before upload."""
    encoded = base64.b64encode(photo.content).decode("ascii")
    return f"data:{photo.content_type};base64,{encoded}"
