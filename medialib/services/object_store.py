"""HTTP adapter for Supabase Storage."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import httpx

from ..errors import CollisionError, NetworkError
from ..models import MediaConfig, SortBy

logger = logging.getLogger(__name__)

MAX_RETRIES = 3


def _error_detail(response: httpx.Response) -> Any:
    try:
        return response.json()
    except Exception:
        return response.text


def _is_duplicate(response: httpx.Response) -> bool:
    if response.status_code == 409:
        return True
    if response.status_code != 400:
        return False
    detail = _error_detail(response)
    if not isinstance(detail, dict):
        return False
    return str(detail.get("statusCode")) == "409" or detail.get("error") == "Duplicate"


class SupabaseStorageClient:
    """
    HTTP client adapter for one Supabase Storage bucket.

    Implements IObjectStore protocol.

    Usage:
        async with SupabaseStorageClient(config) as store:
            rows = await store.list("products", limit=100, sort_by=SortBy())
    """

    def __init__(self, config: MediaConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        headers = {}
        if self._config.api_key:
            headers["apikey"] = self._config.api_key
            headers["Authorization"] = f"Bearer {self._config.api_key}"
        self._client = httpx.AsyncClient(
            base_url=f"{self._config.base_url.rstrip('/')}/storage/v1",
            headers=headers,
            timeout=self._config.timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def bucket(self) -> str:
        return self._config.bucket

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("SupabaseStorageClient not initialized. Use 'async with' context.")
        return self._client

    async def _send_with_retry(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        client = self._require_client()
        last_exception: Optional[Exception] = None

        for attempt in range(MAX_RETRIES):
            try:
                response = await client.request(method, endpoint, **kwargs)

                if response.status_code >= 500 and attempt < MAX_RETRIES - 1:
                    logger.debug("Retrying %s %s after HTTP %s", method, endpoint, response.status_code)
                    await asyncio.sleep(0.5 * (attempt + 1))
                    continue

                if response.status_code >= 400:
                    raise NetworkError(
                        f"Storage error {response.status_code} on {method} {endpoint}: "
                        f"{_error_detail(response)}",
                        status_code=response.status_code,
                    )

                return response
            except (httpx.RequestError, httpx.TimeoutException) as exc:
                last_exception = exc
                if attempt < MAX_RETRIES - 1:
                    await asyncio.sleep(0.5 * (attempt + 1))
                    continue
                raise NetworkError(f"{method} {endpoint} failed: {exc}") from exc

        if last_exception:
            raise NetworkError(f"{method} {endpoint} failed: {last_exception}") from last_exception
        raise NetworkError(f"Failed to {method} {endpoint} after {MAX_RETRIES} attempts")

    async def list(self, path: str, limit: int, sort_by: SortBy) -> List[Dict[str, Any]]:
        body = {
            "prefix": path,
            "limit": limit,
            "offset": 0,
            "sortBy": sort_by.as_dict(),
        }
        response = await self._send_with_retry("POST", f"/object/list/{self.bucket}", json=body)
        try:
            rows = response.json()
        except ValueError as exc:
            raise NetworkError(f"Malformed listing response for '{path}'") from exc
        if not isinstance(rows, list):
            raise NetworkError(f"Unexpected listing response for '{path}': {rows}")
        for row in rows:
            if not isinstance(row, dict) or not isinstance(row.get("name"), str):
                raise NetworkError(f"Malformed listing row for '{path}': {row!r}")
        logger.debug("Listed %s rows under '%s'", len(rows), path)
        return rows

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: Optional[str] = None,
        cache_control: str = "3600",
        upsert: bool = False,
    ) -> str:
        client = self._require_client()
        headers = {
            "cache-control": f"max-age={cache_control}",
            "x-upsert": "true" if upsert else "false",
            "content-type": content_type or "application/octet-stream",
        }
        endpoint = f"/object/{self.bucket}/{quote(path, safe='/')}"

        # Single attempt: a retried write could collide with its own first try
        try:
            response = await client.post(endpoint, content=data, headers=headers)
        except (httpx.RequestError, httpx.TimeoutException) as exc:
            raise NetworkError(f"Upload of {path} failed: {exc}") from exc

        if not upsert and _is_duplicate(response):
            raise CollisionError(path)
        if response.status_code >= 400:
            raise NetworkError(
                f"Storage error {response.status_code} uploading {path}: {_error_detail(response)}",
                status_code=response.status_code,
            )

        logger.info("Uploaded %s (%s bytes)", path, len(data))
        try:
            return response.json().get("Key", f"{self.bucket}/{path}")
        except (ValueError, AttributeError):
            return f"{self.bucket}/{path}"

    async def remove(self, paths: Sequence[str]) -> None:
        await self._send_with_retry(
            "DELETE",
            f"/object/{self.bucket}",
            json={"prefixes": list(paths)},
        )
        logger.info("Removed %s", ", ".join(paths))

    def get_public_url(self, path: str) -> str:
        return f"{self._config.public_base}/{path}"
