"""
Protocols (Interfaces) for Dependency Inversion.

The object store is the only wire-level boundary the media library depends on.
"""
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from .models import SortBy


@runtime_checkable
class IObjectStore(Protocol):
    """Interface for a flat-key object store."""

    async def list(self, path: str, limit: int, sort_by: SortBy) -> List[Dict[str, Any]]:
        """List rows directly under path. Folder rows have id None."""
        ...

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: Optional[str] = None,
        cache_control: str = "3600",
        upsert: bool = False,
    ) -> str:
        """Write data at path. Raises CollisionError when upsert is off and path exists."""
        ...

    async def remove(self, paths: Sequence[str]) -> None:
        """Permanently delete objects."""
        ...

    def get_public_url(self, path: str) -> str:
        """Public URL of an object."""
        ...
