"""Supabase-backed auth gateway."""

from dataclasses import dataclass

from supabase import AuthError, Client

from munch_log.domain.errors import AuthFailure
from munch_log.domain.models import Identity
from munch_log.services.sessions import AuthGateway


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Supabase Auth implementation; one client per browser session."""

    client: Client

    def current_identity(self) -> Identity | None:
        """Return the identity of the client's stored session."""
        session = self.client.auth.get_session()
        if session is None or session.user is None:
            return None
        return _identity(session.user)

    def sign_in_with_password(self, email: str, password: str) -> Identity:
        """Sign in with email and password."""
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            raise AuthFailure(exc.message) from exc
        if response.user is None:
            raise AuthFailure("Sign in did not return a user")
        return _identity(response.user)

    def sign_up(self, email: str, password: str) -> None:
        """Register an account; Supabase sends the confirmation email."""
        try:
            self.client.auth.sign_up({"email": email, "password": password})
        except AuthError as exc:
            raise AuthFailure(exc.message) from exc

    def oauth_url(self, provider: str, redirect_to: str) -> str:
        """Start a PKCE OAuth flow and return the provider URL."""
        try:
            response = self.client.auth.sign_in_with_oauth(
                {"provider": provider, "options": {"redirect_to": redirect_to}}
            )
        except AuthError as exc:
            raise AuthFailure(exc.message) from exc
        return response.url

    def exchange_code(self, code: str) -> Identity:
        """Exchange the callback code using the verifier stored on the client."""
        try:
            response = self.client.auth.exchange_code_for_session({"auth_code": code})
        except AuthError as exc:
            raise AuthFailure(exc.message) from exc
        if response.user is None:
            raise AuthFailure("OAuth sign in did not return a user")
        return _identity(response.user)

    def sign_out(self) -> None:
        """Sign out of Supabase."""
        self.client.auth.sign_out()


def _identity(user: object) -> Identity:
    return Identity(id=str(user.id), email=getattr(user, "email", None))
