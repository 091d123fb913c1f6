"""
Listing Service - Single Responsibility: turn one store listing into a Listing.

Folders do not exist in the store. A row without an identifier is a key
prefix, which is reported as a folder; every other row is a file.
"""
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..errors import MediaError, NetworkError
from ..models import SENTINEL_NAME, FileObject, FolderEntry, Listing, ListingEntry, SortBy
from ..paths import join, validate
from ..protocols import IObjectStore

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100
ErrorChannel = Callable[[MediaError], Any]


def parse_entry(path: str, row: Dict[str, Any]) -> ListingEntry:
    """Tag one raw store row as a folder or a file under path."""
    name = row.get("name") if isinstance(row, dict) else None
    if not isinstance(name, str) or not name:
        raise NetworkError(f"Malformed listing row under '{path}': {row!r}")
    if row.get("id") is None:
        return FolderEntry(name=name)
    return FileObject(
        name=name,
        id=str(row["id"]),
        path=join(path, name),
        created_at=row.get("created_at"),
        metadata=row.get("metadata") or {},
    )


def partition(path: str, entries: Iterable[ListingEntry]) -> Listing:
    folders: Dict[str, None] = {}
    files: List[FileObject] = []
    for entry in entries:
        if isinstance(entry, FolderEntry):
            folders.setdefault(entry.name, None)
        elif entry.name != SENTINEL_NAME:
            files.append(entry)
    return Listing(path=path, folders=tuple(folders), files=tuple(files))


class ListingService:
    """
    Lists one virtual folder.

    The limit is a cap passed to the store, not paginated here: folders with
    more entries than the limit come back truncated.
    """

    def __init__(self, store: IObjectStore, limit: int = DEFAULT_LIMIT):
        self._store = store
        self._limit = limit

    @property
    def limit(self) -> int:
        return self._limit

    async def list(self, path: str, on_error: Optional[ErrorChannel] = None) -> Listing:
        """
        List path, never raising store errors.

        Args:
            path: Root ("") or a normalized path
            on_error: Receives the error when the store call fails

        Returns:
            The partitioned Listing, or an empty Listing on failure
        """
        validate(path)
        try:
            rows = await self._store.list(path, limit=self._limit, sort_by=SortBy("name", "asc"))
            listing = partition(path, (parse_entry(path, row) for row in rows))
        except MediaError as exc:
            logger.warning("Listing '%s' failed: %s", path or "/", exc)
            if on_error is not None:
                on_error(exc)
            return Listing.empty(path)

        logger.debug(
            "Listed '%s': %s folders, %s files",
            path or "/",
            len(listing.folders),
            len(listing.files),
        )
        return listing
