"""Errors raised by backend-facing services."""


class AuthFailure(Exception):
    """Authentication failed; the message is shown to the user as-is."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RecordStoreError(RuntimeError):
    """A visit list, insert, update or delete call failed."""


class PhotoUploadError(RuntimeError):
    """A photo could not be stored."""
