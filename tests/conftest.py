"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from uuid import uuid4

import pytest

from munch_log.config import Settings
from munch_log.containers import AppContainer
from munch_log.domain.errors import AuthFailure, PhotoUploadError, RecordStoreError
from munch_log.domain.models import Identity, VisitRecord
from munch_log.services.controller import VisitLogController
from munch_log.services.photos import PhotoService, PhotoStorage
from munch_log.services.places import PlacesClient, PlacesService
from munch_log.services.sessions import AuthGateway, SessionService
from munch_log.services.state_store import BrowserSessionStore
from munch_log.services.visits import VisitRepository, VisitService

TODAY = date(2024, 3, 15)


@dataclass
class InMemoryAuthGateway(AuthGateway):
    """In-memory auth backend keyed by email."""

    accounts: dict[str, tuple[str, Identity]] = field(default_factory=dict)
    pending_signups: list[str] = field(default_factory=list)
    oauth_codes: dict[str, Identity] = field(default_factory=dict)
    session: Identity | None = None
    fail_lookup: bool = False
    oauth_error: str | None = None
    sign_outs: int = 0

    def add_account(self, email: str, password: str) -> Identity:
        identity = Identity(id=str(uuid4()), email=email)
        self.accounts[email] = (password, identity)
        return identity

    def current_identity(self) -> Identity | None:
        if self.fail_lookup:
            raise RuntimeError("auth backend unavailable")
        return self.session

    def sign_in_with_password(self, email: str, password: str) -> Identity:
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise AuthFailure("Invalid login credentials")
        self.session = account[1]
        return account[1]

    def sign_up(self, email: str, password: str) -> None:
        if email in self.accounts:
            raise AuthFailure("User already registered")
        self.pending_signups.append(email)

    def oauth_url(self, provider: str, redirect_to: str) -> str:
        if self.oauth_error:
            raise AuthFailure(self.oauth_error)
        return f"https://auth.test/authorize?provider={provider}&to={redirect_to}"

    def exchange_code(self, code: str) -> Identity:
        identity = self.oauth_codes.get(code)
        if identity is None:
            raise AuthFailure("invalid flow state, no valid flow state found")
        self.session = identity
        return identity

    def sign_out(self) -> None:
        self.sign_outs += 1
        self.session = None


@dataclass
class InMemoryVisitRepository(VisitRepository):
    """In-memory visit table scoped to one signed-in user like row-level security."""

    rows: dict[str, VisitRecord] = field(default_factory=dict)
    owner_id: str | None = None
    fail_on: set[str] = field(default_factory=set)
    payloads: list[dict[str, object]] = field(default_factory=list)

    def seed(self, user_id: str, **overrides: object) -> VisitRecord:
        values: dict[str, object] = {
            "id": str(uuid4()),
            "user_id": user_id,
            "restaurant_name": "Somewhere",
            "date_visited": TODAY,
            "dishes_ordered": "Soup",
            "rating": 5,
        }
        values.update(overrides)
        visit = VisitRecord(**values)  # type: ignore[arg-type]
        self.rows[visit.id] = visit
        return visit

    def _visible(self) -> list[VisitRecord]:
        return [row for row in self.rows.values() if row.user_id == self.owner_id]

    def list_visits(self) -> list[VisitRecord]:
        if "list" in self.fail_on:
            raise RecordStoreError("list failed")
        return sorted(
            self._visible(), key=lambda visit: visit.date_visited, reverse=True
        )

    def create_visit(self, payload: dict[str, object]) -> VisitRecord:
        if "create" in self.fail_on:
            raise RecordStoreError("create failed")
        self.payloads.append(payload)
        now = datetime.now(tz=UTC)
        visit = VisitRecord(
            id=str(uuid4()),
            user_id=str(payload["user_id"]),
            restaurant_name=str(payload["restaurant_name"]),
            address=payload.get("address"),  # type: ignore[arg-type]
            date_visited=date.fromisoformat(str(payload["date_visited"])),
            dishes_ordered=str(payload["dishes_ordered"]),
            rating=int(payload["rating"]),  # type: ignore[arg-type]
            notes=payload.get("notes"),  # type: ignore[arg-type]
            photo_url=payload.get("photo_url"),  # type: ignore[arg-type]
            google_place_id=payload.get("google_place_id"),  # type: ignore[arg-type]
            google_rating=payload.get("google_rating"),  # type: ignore[arg-type]
            google_maps_url=payload.get("google_maps_url"),  # type: ignore[arg-type]
            google_photo_url=payload.get("google_photo_url"),  # type: ignore[arg-type]
            created_at=now,
            updated_at=now,
        )
        self.rows[visit.id] = visit
        return visit

    def update_visit(self, visit_id: str, payload: dict[str, object]) -> VisitRecord:
        if "update" in self.fail_on:
            raise RecordStoreError("update failed")
        existing = self.rows.get(visit_id)
        if existing is None or existing.user_id != self.owner_id:
            raise RecordStoreError(f"Visit {visit_id} not found")
        self.payloads.append(payload)
        visited = date.fromisoformat(str(payload["date_visited"]))
        values = {**payload, "date_visited": visited}
        updated = replace(existing, **values, updated_at=datetime.now(tz=UTC))
        self.rows[visit_id] = updated
        return updated

    def delete_visit(self, visit_id: str) -> None:
        if "delete" in self.fail_on:
            raise RecordStoreError("delete failed")
        self.rows.pop(visit_id, None)


@dataclass
class InMemoryPhotoStorage(PhotoStorage):
    """In-memory bucket with public URLs under a fake host."""

    objects: dict[str, tuple[bytes, str]] = field(default_factory=dict)
    fail: bool = False

    def upload(self, key: str, content: bytes, content_type: str) -> None:
        if self.fail:
            raise PhotoUploadError(f"Failed to upload {key}")
        self.objects[key] = (content, content_type)

    def public_url(self, key: str) -> str:
        return f"https://storage.test/restaurant-photos/{key}"


@dataclass
class FakePlacesClient(PlacesClient):
    """Places client returning canned payloads per place id."""

    predictions: list[dict[str, object]] = field(default_factory=list)
    details: dict[str, dict[str, object]] = field(default_factory=dict)
    queries: list[str] = field(default_factory=list)

    async def autocomplete(self, text: str) -> dict[str, object]:
        self.queries.append(text)
        return {"status": "OK", "predictions": self.predictions}

    async def place_details(self, place_id: str) -> dict[str, object]:
        result = self.details.get(place_id)
        if result is None:
            return {"status": "NOT_FOUND"}
        return {"status": "OK", "result": result}

    async def photo_url(self, photo_reference: str, max_width: int) -> str:
        return f"https://places.test/photo?ref={photo_reference}&w={max_width}"


def cafe_luna_details() -> dict[str, object]:
    return {
        "place_id": "place-luna",
        "name": "Cafe Luna",
        "formatted_address": "1 Moon St",
        "rating": 4.6,
        "photos": [{"photo_reference": "luna-photo"}],
    }


def bare_diner_details() -> dict[str, object]:
    return {"place_id": "place-diner", "name": "Bare Diner"}


@dataclass
class Backend:
    """The fakes behind one controller, bundled for assertions."""

    auth: InMemoryAuthGateway
    visits: InMemoryVisitRepository
    photos: InMemoryPhotoStorage
    places: FakePlacesClient


def build_controller(
    backend: Backend, places_enabled: bool = True
) -> VisitLogController:
    return VisitLogController(
        session_service=SessionService(backend.auth),
        visit_service=VisitService(backend.visits),
        photo_service=PhotoService(backend.photos, clock=lambda: 1700000000000),
        places_service=PlacesService(backend.places if places_enabled else None),
        today=lambda: TODAY,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_anon_key="anon-key",
        google_places_api_key="places-key",
    )


@pytest.fixture
def backend() -> Backend:
    places = FakePlacesClient(
        predictions=[
            {"place_id": "place-luna", "description": "Cafe Luna, 1 Moon St"},
            {"place_id": "place-diner", "description": "Bare Diner"},
        ],
        details={
            "place-luna": cafe_luna_details(),
            "place-diner": bare_diner_details(),
        },
    )
    return Backend(
        auth=InMemoryAuthGateway(),
        visits=InMemoryVisitRepository(),
        photos=InMemoryPhotoStorage(),
        places=places,
    )


@pytest.fixture
def controller(backend: Backend) -> VisitLogController:
    return build_controller(backend)


@pytest.fixture
def signed_in(backend: Backend) -> Identity:
    """Register an account whose rows the fake visit table exposes."""
    identity = backend.auth.add_account("diner@example.com", "secret")
    backend.visits.owner_id = identity.id
    return identity


@pytest.fixture
def container(settings: Settings, backend: Backend) -> AppContainer:
    places_service = PlacesService(backend.places)

    def factory() -> VisitLogController:
        controller = build_controller(backend)
        controller.places_service = places_service
        return controller

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        places_service=places_service,
        session_store=BrowserSessionStore(factory=factory, ttl_seconds=3600),
        close_resources=close_resources,
    )
