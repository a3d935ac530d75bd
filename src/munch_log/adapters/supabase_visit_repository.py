"""Supabase repository for visit records."""

from dataclasses import dataclass
from datetime import date, datetime

import httpx
from supabase import Client, PostgrestAPIError

from munch_log.domain.errors import RecordStoreError
from munch_log.domain.models import VisitRecord
from munch_log.services.visits import VisitRepository


@dataclass
class SupabaseVisitRepository(VisitRepository):
    """Supabase implementation for visit persistence."""

    client: Client
    table: str = "restaurants"

    def list_visits(self) -> list[VisitRecord]:
        """Return visits, newest visit date first."""
        try:
            response = (
                self.client.table(self.table)
                .select("*")
                .order("date_visited", desc=True)
                .execute()
            )
        except (PostgrestAPIError, httpx.HTTPError) as exc:
            raise RecordStoreError("Failed to list visits") from exc
        return [_parse_visit(row) for row in response.data or []]

    def create_visit(self, payload: dict[str, object]) -> VisitRecord:
        """Insert a visit row and return it."""
        try:
            response = self.client.table(self.table).insert(payload).execute()
        except (PostgrestAPIError, httpx.HTTPError) as exc:
            raise RecordStoreError("Failed to create visit") from exc
        if not response.data:
            raise RecordStoreError("Failed to create visit")
        return _parse_visit(response.data[0])

    def update_visit(self, visit_id: str, payload: dict[str, object]) -> VisitRecord:
        """Update a visit row; rows hidden by the access policy count as missing."""
        try:
            response = (
                self.client.table(self.table)
                .update(payload)
                .eq("id", visit_id)
                .execute()
            )
        except (PostgrestAPIError, httpx.HTTPError) as exc:
            raise RecordStoreError(f"Failed to update visit {visit_id}") from exc
        if not response.data:
            raise RecordStoreError(f"Visit {visit_id} not found")
        return _parse_visit(response.data[0])

    def delete_visit(self, visit_id: str) -> None:
        """Delete a visit row."""
        try:
            self.client.table(self.table).delete().eq("id", visit_id).execute()
        except (PostgrestAPIError, httpx.HTTPError) as exc:
            raise RecordStoreError(f"Failed to delete visit {visit_id}") from exc


def _parse_visit(row: dict[str, object]) -> VisitRecord:
    return VisitRecord(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        restaurant_name=str(row.get("restaurant_name") or ""),
        address=row.get("address") or None,
        date_visited=date.fromisoformat(str(row["date_visited"])[:10]),
        dishes_ordered=str(row.get("dishes_ordered") or ""),
        rating=int(row.get("rating") or 0),
        value_rating=_optional_int(row.get("value_rating")),
        notes=row.get("notes") or None,
        photo_url=row.get("photo_url") or None,
        google_place_id=row.get("google_place_id") or None,
        google_rating=_optional_float(row.get("google_rating")),
        google_maps_url=row.get("google_maps_url") or None,
        google_photo_url=row.get("google_photo_url") or None,
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )


def _optional_int(value: object) -> int | None:
    if isinstance(value, int | float):
        return int(value)
    return None


def _optional_float(value: object) -> float | None:
    if isinstance(value, int | float):
        return float(value)
    return None


def _parse_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    return datetime.fromisoformat(value)
