"""
Error taxonomy for media library operations.

None of these are fatal: views catch MediaError at the UI boundary and turn
it into a notification.
"""
from typing import Optional


class MediaError(RuntimeError):
    """Base class for media library failures."""


class ValidationError(MediaError):
    """Raised for bad input before any network call is made."""


class NetworkError(MediaError):
    """Raised when an object-store call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CollisionError(MediaError):
    """Raised when a write targets an existing key with overwrite disabled."""

    def __init__(self, key: str, message: Optional[str] = None):
        super().__init__(message or f"{key} already exists")
        self.key = key


def describe_error(exc: Exception) -> str:
    message = str(exc).strip()
    if message:
        return message
    return f"{type(exc).__name__}: {repr(exc)}"
