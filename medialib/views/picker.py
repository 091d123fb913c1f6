"""Picker view - embeddable dialog to browse, upload and select images."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models import FileUpload, Listing, MediaConfig, UploadResult
from ..protocols import IObjectStore
from ..utils.events import SELECT, EventEmitter
from .base import MediaView, ViewState

logger = logging.getLogger(__name__)


class MediaPicker(MediaView):
    """
    Select image URLs from the media library.

    In single-select mode a selection emits one URL and closes the picker. In
    multi-select mode the picker stays open and collects distinct URLs;
    selecting an already selected URL does nothing (use deselect to remove).

    Usage:
        picker = MediaPicker(store, config, multiple=True)
        picker.events.on("select", form.add_image)
        await picker.open()
        await picker.select_file("products/mug.png")
    """

    def __init__(
        self,
        store: IObjectStore,
        config: Optional[MediaConfig] = None,
        events: Optional[EventEmitter] = None,
        multiple: bool = False,
        selected_urls: Iterable[str] = (),
        static_assets: Optional[Iterable[str]] = None,
    ):
        config = config or MediaConfig()
        super().__init__(
            store,
            config,
            events=events,
            list_limit=config.picker_list_limit,
            static_assets=static_assets,
        )
        self._multiple = multiple
        self._selected = list(dict.fromkeys(selected_urls))
        self._state = ViewState.CLOSED

    @property
    def multiple(self) -> bool:
        return self._multiple

    @property
    def is_open(self) -> bool:
        return self._state != ViewState.CLOSED

    @property
    def selected(self) -> Tuple[str, ...]:
        return tuple(self._selected)

    def is_selected(self, url: str) -> bool:
        return url in self._selected

    def _can_list(self) -> bool:
        return self.is_open

    async def open(self) -> Listing:
        """Open the dialog and list the current folder (root on first open)."""
        if self.is_open:
            return self._listing
        self._state = ViewState.IDLE
        return await self._load()

    async def submit_upload(self, files: Sequence[FileUpload]) -> List[UploadResult]:
        if not self.is_open:
            logger.debug("Ignoring upload while the picker is closed")
            return []
        return await super().submit_upload(files)

    async def submit_create_folder(self, name: str) -> bool:
        if not self.is_open:
            logger.debug("Ignoring folder creation while the picker is closed")
            return False
        return await super().submit_create_folder(name)

    def close(self) -> None:
        # Drop interest in any listing still in flight
        self._generation += 1
        self._loading = False
        self._folder_error = None
        self._state = ViewState.CLOSED

    async def select_file(self, path: str) -> str:
        return await self.select_url(self.url_for(path))

    async def select_url(self, url: str) -> str:
        """Select a resolved URL, e.g. one of the configured static assets."""
        if not self.is_open:
            logger.debug("Ignoring selection while the picker is closed")
            return url
        if self._multiple:
            if url in self._selected:
                logger.debug("Already selected: %s", url)
                return url
            self._selected.append(url)
            await self.events.emit(SELECT, url)
            return url

        await self.events.emit(SELECT, url)
        self.close()
        return url

    def deselect(self, url: str) -> bool:
        if url not in self._selected:
            return False
        self._selected.remove(url)
        return True
