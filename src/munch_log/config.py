"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_anon_key: str
    google_places_api_key: str | None = None
    google_places_base_url: str = "https://maps.googleapis.com/maps/api/place"
    visits_table: str = "restaurants"
    photo_bucket: str = "restaurant-photos"
    oauth_provider: str = "google"
    session_cookie_name: str = "munchlog_session"
    session_ttl_seconds: int = 86400
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def places_api_key(raw: str | None) -> str | None:
    """Return the Places API key, or None when lookup should stay disabled."""
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned or None
