"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from munch_log.adapters.google_places_client import HttpxGooglePlacesClient
from munch_log.adapters.supabase_auth_gateway import SupabaseAuthGateway
from munch_log.adapters.supabase_photo_storage import SupabasePhotoStorage
from munch_log.adapters.supabase_visit_repository import SupabaseVisitRepository
from munch_log.config import Settings, places_api_key
from munch_log.services.controller import VisitLogController
from munch_log.services.photos import PhotoService
from munch_log.services.places import PlacesService
from munch_log.services.sessions import SessionService
from munch_log.services.state_store import BrowserSessionStore
from munch_log.services.visits import VisitService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    places_service: PlacesService
    session_store: BrowserSessionStore
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    api_key = places_api_key(resolved_settings.google_places_api_key)
    places_client = (
        HttpxGooglePlacesClient.create(
            api_key=api_key, base_url=resolved_settings.google_places_base_url
        )
        if api_key
        else None
    )
    places_service = PlacesService(places_client)

    def build_controller() -> VisitLogController:
        # Supabase keeps the auth session on the client, so each browser
        # session gets its own.
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_anon_key
        )
        return VisitLogController(
            session_service=SessionService(
                SupabaseAuthGateway(supabase_client),
                oauth_provider=resolved_settings.oauth_provider,
            ),
            visit_service=VisitService(
                SupabaseVisitRepository(
                    supabase_client, table=resolved_settings.visits_table
                )
            ),
            photo_service=PhotoService(
                SupabasePhotoStorage(
                    supabase_client, bucket=resolved_settings.photo_bucket
                )
            ),
            places_service=places_service,
        )

    session_store = BrowserSessionStore(
        factory=build_controller, ttl_seconds=resolved_settings.session_ttl_seconds
    )

    async def close_resources() -> None:
        if places_client is not None:
            await places_client.close()

    return AppContainer(
        settings=resolved_settings,
        places_service=places_service,
        session_store=session_store,
        close_resources=close_resources,
    )
