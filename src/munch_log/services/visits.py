"""Visit record persistence."""

from dataclasses import dataclass
from typing import Protocol

from munch_log.domain.models import Identity, VisitRecord


class VisitRepository(Protocol):
    """Persistence interface for visit records."""

    def list_visits(self) -> list[VisitRecord]:
        """Return visible visits, newest visit date first."""

    def create_visit(self, payload: dict[str, object]) -> VisitRecord:
        """Insert a visit row and return it."""

    def update_visit(self, visit_id: str, payload: dict[str, object]) -> VisitRecord:
        """Replace the editable fields of a visit and return it."""

    def delete_visit(self, visit_id: str) -> None:
        """Delete a visit row."""


@dataclass
class VisitService:
    """Application service for visit CRUD.

    Row ownership is enforced by the backend's access policy, so listing
    does not filter by user.
    """

    repository: VisitRepository

    def list_visits(self, identity: Identity) -> list[VisitRecord]:
        """Return every visit the signed-in identity can see."""
        return self.repository.list_visits()

    def create_visit(
        self, identity: Identity, payload: dict[str, object]
    ) -> VisitRecord:
        """Insert a visit owned by the identity."""
        return self.repository.create_visit({**payload, "user_id": identity.id})

    def update_visit(self, visit_id: str, payload: dict[str, object]) -> VisitRecord:
        """Replace a visit's editable fields."""
        return self.repository.update_visit(visit_id, payload)

    def delete_visit(self, visit_id: str) -> None:
        """Delete a visit."""
        self.repository.delete_visit(visit_id)
