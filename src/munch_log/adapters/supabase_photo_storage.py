"""Supabase Storage bucket for visit photos."""

from dataclasses import dataclass

import httpx
from supabase import Client, StorageException

from munch_log.domain.errors import PhotoUploadError
from munch_log.services.photos import PhotoStorage


@dataclass
class SupabasePhotoStorage(PhotoStorage):
    """Stores photos in a public Supabase Storage bucket."""

    client: Client
    bucket: str = "restaurant-photos"

    def upload(self, key: str, content: bytes, content_type: str) -> None:
        """Upload bytes under a key."""
        try:
            self.client.storage.from_(self.bucket).upload(
                key, content, {"content-type": content_type}
            )
        except (StorageException, httpx.HTTPError) as exc:
            raise PhotoUploadError(f"Failed to upload {key}") from exc

    def public_url(self, key: str) -> str:
        """Return the bucket's public URL for a key."""
        return self.client.storage.from_(self.bucket).get_public_url(key)
