"""Manager view - full media library: browse, upload, delete, create folder, preview."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..errors import MediaError, describe_error
from ..models import Listing, MediaConfig, Notification
from ..protocols import IObjectStore
from ..utils.events import EventEmitter
from .base import MediaView, ViewState

logger = logging.getLogger(__name__)


class MediaManager(MediaView):
    """
    Admin media library.

    Usage:
        manager = MediaManager(store, config)
        manager.events.on("notify", show_toast)
        await manager.start()
        await manager.navigate("products")
        await manager.submit_upload([FileUpload.from_path(path)])
    """

    def __init__(
        self,
        store: IObjectStore,
        config: Optional[MediaConfig] = None,
        events: Optional[EventEmitter] = None,
        static_assets: Optional[Iterable[str]] = None,
    ):
        config = config or MediaConfig()
        super().__init__(
            store,
            config,
            events=events,
            list_limit=config.manager_list_limit,
            static_assets=static_assets,
        )
        self._preview_url: Optional[str] = None

    @property
    def preview_url(self) -> Optional[str]:
        """URL of the asset being previewed, only while PREVIEW_OPEN."""
        if self._state != ViewState.PREVIEW_OPEN:
            return None
        return self._preview_url

    async def start(self) -> Listing:
        return await self._load()

    async def delete(self, path: str) -> bool:
        """Permanently remove one object, then refresh."""
        try:
            await self._store.remove([path])
        except MediaError as exc:
            logger.warning("Delete of %s failed: %s", path, exc)
            await self._notify(Notification.error(describe_error(exc)))
            return False

        if self._state == ViewState.PREVIEW_OPEN and self._preview_url == self.url_for(path):
            self.close_preview()
        await self._notify(Notification.success("File deleted successfully"))
        await self._load()
        return True

    def preview(self, path: str) -> str:
        self._preview_url = self.url_for(path)
        self._state = ViewState.PREVIEW_OPEN
        return self._preview_url

    def close_preview(self) -> None:
        self._preview_url = None
        if self._state == ViewState.PREVIEW_OPEN:
            self._state = self._base_state()

    async def copy_url(self, path: str) -> str:
        """Resolve the public URL for the clipboard."""
        url = self.url_for(path)
        await self._notify(Notification.success("URL copied to clipboard"))
        return url
