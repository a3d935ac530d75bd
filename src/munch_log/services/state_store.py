"""Registry of per-browser controllers keyed by session cookie."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from munch_log.services.controller import VisitLogController


@dataclass
class _Entry:
    controller: VisitLogController
    expires_at: datetime


@dataclass
class BrowserSessionStore:
    """In-memory store that expires idle browser sessions."""

    factory: Callable[[], VisitLogController]
    ttl_seconds: int
    _entries: dict[str, _Entry]

    def __init__(
        self, factory: Callable[[], VisitLogController], ttl_seconds: int
    ) -> None:
        self.factory = factory
        self.ttl_seconds = ttl_seconds
        self._entries = {}

    def get(self, session_id: str | None) -> VisitLogController | None:
        """Return a live controller and extend its lifetime."""
        if not session_id:
            return None
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        now = datetime.now(tz=UTC)
        if now >= entry.expires_at:
            self._entries.pop(session_id, None)
            return None
        entry.expires_at = now + timedelta(seconds=self.ttl_seconds)
        return entry.controller

    def create(self) -> tuple[str, VisitLogController]:
        """Start a fresh browser session with its own controller."""
        self.purge_expired()
        session_id = str(uuid4())
        controller = self.factory()
        self._entries[session_id] = _Entry(
            controller=controller,
            expires_at=datetime.now(tz=UTC) + timedelta(seconds=self.ttl_seconds),
        )
        return session_id, controller

    def discard(self, session_id: str) -> None:
        self._entries.pop(session_id, None)

    def purge_expired(self) -> int:
        """Drop expired sessions and return how many were removed."""
        now = datetime.now(tz=UTC)
        expired = [
            key for key, entry in self._entries.items() if now >= entry.expires_at
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)
