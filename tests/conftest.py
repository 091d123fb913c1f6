"""Shared fixtures: an in-memory flat-key store with Supabase-style listing."""
import asyncio
import itertools
from typing import Any, Dict, List, Optional

import pytest

from medialib.errors import CollisionError
from medialib.models import MediaConfig, SortBy

BASE_URL = "https://demo.supabase.co"


class InMemoryStore:
    """
    Flat key space. Listing a path returns one row per direct child: keys
    below a deeper prefix collapse into a single folder row with id None.
    """

    def __init__(self, keys=(), base_url: str = BASE_URL, bucket: str = "media"):
        self.objects: Dict[str, Dict[str, Any]] = {}
        self.list_calls: List[str] = []
        self.upload_calls: List[Dict[str, Any]] = []
        self.remove_calls: List[List[str]] = []
        self.list_error: Optional[Exception] = None
        self.upload_errors: Dict[str, Exception] = {}
        self.remove_error: Optional[Exception] = None
        self._ids = itertools.count(1)
        self._public_base = f"{base_url}/storage/v1/object/public/{bucket}"
        for key in keys:
            self._put(key, b"seed", "image/png")

    def _put(self, key: str, data: bytes, content_type: Optional[str]) -> None:
        self.objects[key] = {
            "id": f"obj-{next(self._ids)}",
            "data": data,
            "content_type": content_type,
            "created_at": "2024-01-01T00:00:00Z",
        }

    async def list(self, path: str, limit: int, sort_by: SortBy) -> List[Dict[str, Any]]:
        self.list_calls.append(path)
        if self.list_error is not None:
            raise self.list_error

        prefix = f"{path}/" if path else ""
        folders = set()
        rows = []
        for key, obj in self.objects.items():
            if not key.startswith(prefix):
                continue
            rest = key[len(prefix):]
            if "/" in rest:
                folders.add(rest.split("/", 1)[0])
            else:
                rows.append({
                    "name": rest,
                    "id": obj["id"],
                    "created_at": obj["created_at"],
                    "metadata": {"size": len(obj["data"]), "mimetype": obj["content_type"]},
                })
        rows.extend({"name": name, "id": None, "created_at": None, "metadata": None} for name in folders)
        rows.sort(key=lambda row: row["name"], reverse=sort_by.order == "desc")
        return rows[:limit]

    async def upload(self, path, data, content_type=None, cache_control="3600", upsert=False) -> str:
        self.upload_calls.append({"path": path, "upsert": upsert, "cache_control": cache_control})
        if path in self.upload_errors:
            raise self.upload_errors[path]
        if path in self.objects and not upsert:
            raise CollisionError(path, "The resource already exists")
        self._put(path, data, content_type)
        return f"media/{path}"

    async def remove(self, paths) -> None:
        self.remove_calls.append(list(paths))
        if self.remove_error is not None:
            raise self.remove_error
        for path in paths:
            self.objects.pop(path, None)

    def get_public_url(self, path: str) -> str:
        return f"{self._public_base}/{path}"


class GatedStore(InMemoryStore):
    """Listings of gated paths block until the gate is opened."""

    def __init__(self, keys=()):
        super().__init__(keys)
        self.gates: Dict[str, asyncio.Event] = {}

    def gate(self, path: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[path] = event
        return event

    async def list(self, path, limit, sort_by):
        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()
        return await super().list(path, limit, sort_by)


@pytest.fixture
def config():
    return MediaConfig(base_url=BASE_URL, api_key="anon-key", bucket="media")


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def make_store():
    return InMemoryStore


@pytest.fixture
def make_gated_store():
    return GatedStore
