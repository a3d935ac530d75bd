"""Photo uploads to object storage."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from munch_log.domain.drafts import PendingPhoto
from munch_log.domain.models import Identity

_logger = logging.getLogger(__name__)


class PhotoStorage(Protocol):
    """Interface for the object store holding visit photos."""

    def upload(self, key: str, content: bytes, content_type: str) -> None:
        """Store bytes under a key, raising PhotoUploadError on failure."""

    def public_url(self, key: str) -> str:
        """Return the public URL for a stored key."""


def _now_millis() -> int:
    return int(datetime.now(tz=UTC).timestamp() * 1000)


@dataclass
class PhotoService:
    """Uploads photos under a per-user key prefix."""

    storage: PhotoStorage
    clock: Callable[[], int] = field(default=_now_millis)

    def build_key(self, identity: Identity, filename: str) -> str:
        """Return `{user_id}/{millis}.{ext}` for a file."""
        extension = filename.rsplit(".", maxsplit=1)[-1]
        return f"{identity.id}/{self.clock()}.{extension}"

    def upload(self, identity: Identity, photo: PendingPhoto) -> str:
        """Upload a pending photo and return its public URL."""
        key = self.build_key(identity, photo.filename)
        self.storage.upload(key, photo.content, photo.content_type)
        _logger.info("Uploaded photo", extra={"key": key})
        return self.storage.public_url(key)
