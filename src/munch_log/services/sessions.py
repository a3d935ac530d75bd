"""Authentication session management."""

import logging
from dataclasses import dataclass
from typing import Protocol

from munch_log.domain.errors import AuthFailure
from munch_log.domain.models import Identity

_logger = logging.getLogger(__name__)


class AuthGateway(Protocol):
    """Interface for the hosted auth backend."""

    def current_identity(self) -> Identity | None:
        """Return the identity of the stored session, if any."""

    def sign_in_with_password(self, email: str, password: str) -> Identity:
        """Sign in and return the identity, raising AuthFailure on rejection."""

    def sign_up(self, email: str, password: str) -> None:
        """Register a new account, raising AuthFailure on rejection."""

    def oauth_url(self, provider: str, redirect_to: str) -> str:
        """Return the provider URL that starts a federated sign-in."""

    def exchange_code(self, code: str) -> Identity:
        """Exchange an OAuth callback code for a session."""

    def sign_out(self) -> None:
        """End the stored session."""


@dataclass
class SessionService:
    """Application service for sign-in, sign-up and sign-out."""

    gateway: AuthGateway
    oauth_provider: str = "google"

    def get_current_identity(self) -> Identity | None:
        """Return the current identity; any failure counts as signed out."""
        try:
            return self.gateway.current_identity()
        except Exception:
            _logger.exception("Session lookup failed")
            return None

    def sign_in(self, email: str, password: str) -> Identity:
        """Sign in with email and password."""
        identity = self.gateway.sign_in_with_password(email, password)
        _logger.info("Signed in", extra={"user_id": identity.id})
        return identity

    def sign_up(self, email: str, password: str) -> None:
        """Create an account that still needs email confirmation."""
        self.gateway.sign_up(email, password)

    def sign_in_with_oauth(self, redirect_to: str) -> str:
        """Return the redirect URL for the configured OAuth provider."""
        return self.gateway.oauth_url(self.oauth_provider, redirect_to)

    def complete_oauth(self, code: str | None, error: str | None = None) -> Identity:
        """Finish an OAuth redirect by exchanging its code for a session."""
        if error:
            raise AuthFailure(error)
        if not code:
            raise AuthFailure("Missing authorization code")
        return self.gateway.exchange_code(code)

    def sign_out(self) -> None:
        """Sign out; backend failures are logged and otherwise ignored."""
        try:
            self.gateway.sign_out()
        except Exception:
            _logger.exception("Sign-out request failed")
