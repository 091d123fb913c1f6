"""
Shared browse/upload/create-folder logic for the media views.

A view owns its own current path and Listing snapshot. Nothing here is shared
between view instances; two views stay consistent only by re-listing the same
store.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from ..errors import CollisionError, MediaError, ValidationError, describe_error
from ..models import Breadcrumb, FileObject, FileUpload, Listing, MediaConfig, Notification, UploadResult
from ..paths import join, normalize, parent_of, segments, validate
from ..protocols import IObjectStore
from ..services.folders import FolderCreator
from ..services.listing import ListingService
from ..services.uploads import UploadCoordinator, upload_notifications
from ..services.urls import UrlResolver
from ..utils.events import NOTIFY, EventEmitter

logger = logging.getLogger(__name__)


class ViewState(Enum):
    """The single UI state of a view. At most one dialog is open at a time."""
    IDLE = "idle"
    LISTING = "listing"
    UPLOAD_IN_PROGRESS = "upload_in_progress"
    FOLDER_DIALOG_OPEN = "folder_dialog_open"
    PREVIEW_OPEN = "preview_open"
    CLOSED = "closed"


class MediaView:
    """
    Base state machine for the manager and picker views.

    Every listing request carries a generation number. When a result arrives
    for anything but the latest request it is dropped, so the last navigation
    always wins.
    """

    def __init__(
        self,
        store: IObjectStore,
        config: Optional[MediaConfig] = None,
        events: Optional[EventEmitter] = None,
        list_limit: Optional[int] = None,
        static_assets: Optional[Iterable[str]] = None,
    ):
        self._config = config or MediaConfig()
        self._store = store
        self._lister = ListingService(store, list_limit or self._config.manager_list_limit)
        self._folder_creator = FolderCreator(store, self._config)
        self._uploader = UploadCoordinator(store, self._config)
        self._urls = UrlResolver(self._config, static_assets)
        self._static_assets: Tuple[str, ...] = tuple(
            static_assets if static_assets is not None else self._config.static_assets
        )
        self.events = events or EventEmitter()

        self._state = ViewState.LISTING
        self._current_path = ""
        self._listing = Listing.empty()
        self._generation = 0
        self._uploads_pending = 0
        self._loading = False
        self._folder_error: Optional[str] = None

    # -- read-only view model --------------------------------------------

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def current_path(self) -> str:
        return self._current_path

    @property
    def listing(self) -> Listing:
        return self._listing

    @property
    def folders(self) -> Tuple[str, ...]:
        return self._listing.folders

    @property
    def files(self) -> Tuple[FileObject, ...]:
        return self._listing.files

    @property
    def is_empty(self) -> bool:
        return self._listing.is_empty

    @property
    def breadcrumbs(self) -> List[Breadcrumb]:
        return segments(self._current_path)

    @property
    def folder_error(self) -> Optional[str]:
        return self._folder_error

    @property
    def static_assets(self) -> Tuple[str, ...]:
        return self._static_assets

    def url_for(self, path: str) -> str:
        return self._urls.resolve(path)

    # -- internals --------------------------------------------------------

    def _can_list(self) -> bool:
        return True

    def _base_state(self) -> ViewState:
        """State to show when no dialog is open."""
        if self._uploads_pending:
            return ViewState.UPLOAD_IN_PROGRESS
        if self._loading:
            return ViewState.LISTING
        return ViewState.IDLE

    def _settle(self) -> None:
        """Follow in-flight work, leaving open dialogs and a closed view alone."""
        if self._state in (ViewState.IDLE, ViewState.LISTING, ViewState.UPLOAD_IN_PROGRESS):
            self._state = self._base_state()

    async def _notify(self, notification: Notification) -> None:
        if notification.is_error:
            logger.debug("%s: %s", notification.title, notification.description)
        await self.events.emit(NOTIFY, notification)

    async def _load(self) -> Listing:
        """List the current path; results of superseded requests are discarded."""
        if not self._can_list():
            return self._listing

        self._generation += 1
        token = self._generation
        path = self._current_path
        self._loading = True
        self._settle()

        errors: List[MediaError] = []
        listing = await self._lister.list(path, on_error=errors.append)

        if token != self._generation:
            logger.debug("Discarding stale listing for '%s'", path or "/")
            return self._listing

        self._listing = listing
        self._loading = False
        self._settle()
        for exc in errors:
            await self._notify(Notification.error(describe_error(exc)))
        return listing

    async def _go(self, path: str) -> Listing:
        if not self._can_list():
            return self._listing
        self._current_path = path
        if self._state in (ViewState.FOLDER_DIALOG_OPEN, ViewState.PREVIEW_OPEN):
            self._folder_error = None
        return await self._load()

    # -- transitions ------------------------------------------------------

    async def refresh(self) -> Listing:
        return await self._load()

    async def navigate(self, folder_name: str) -> Listing:
        try:
            path = join(self._current_path, folder_name)
        except ValidationError as exc:
            await self._notify(Notification.error(describe_error(exc)))
            return self._listing
        return await self._go(path)

    async def navigate_up(self) -> Listing:
        if not self._current_path:
            return self._listing
        return await self._go(parent_of(self._current_path))

    async def navigate_to(self, path: str) -> Listing:
        """Jump to any path, e.g. from a breadcrumb."""
        try:
            target = validate(normalize(path))
        except ValidationError as exc:
            await self._notify(Notification.error(describe_error(exc)))
            return self._listing
        return await self._go(target)

    async def go_home(self) -> Listing:
        return await self._go("")

    async def submit_upload(self, files: Sequence[FileUpload]) -> List[UploadResult]:
        """Upload files into the current folder, then refresh once."""
        if not files:
            await self._notify(Notification.error("Please select files to upload"))
            return []

        self._uploads_pending += 1
        self._settle()
        finished = False

        async def refresh_after_batch() -> Listing:
            nonlocal finished
            finished = True
            self._uploads_pending -= 1
            return await self._load()

        try:
            results = await self._uploader.upload_all(
                self._current_path, files, refresh=refresh_after_batch
            )
        finally:
            if not finished:
                self._uploads_pending -= 1
                self._settle()

        for notification in upload_notifications(results):
            await self._notify(notification)
        return results

    def open_folder_dialog(self) -> None:
        self._folder_error = None
        self._state = ViewState.FOLDER_DIALOG_OPEN

    def cancel_folder_dialog(self) -> None:
        if self._state == ViewState.FOLDER_DIALOG_OPEN:
            self._state = self._base_state()
        self._folder_error = None

    async def submit_create_folder(self, name: str) -> bool:
        """
        Create a folder in the current path.

        On success the dialog closes and the listing refreshes. On failure the
        dialog stays open with folder_error set.
        """
        self._state = ViewState.FOLDER_DIALOG_OPEN
        try:
            await self._folder_creator.create(self._current_path, name)
        except CollisionError:
            self._folder_error = f"Folder '{name.strip()}' already exists"
        except MediaError as exc:
            self._folder_error = describe_error(exc)
        else:
            self._folder_error = None
            self._state = self._base_state()
            await self._notify(Notification.success("Folder created successfully"))
            await self._load()
            return True

        await self._notify(Notification.error(self._folder_error))
        return False
