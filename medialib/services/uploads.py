"""
Upload Coordinator - sequential, error-isolated multi-file upload.

The batch is a fold over the selected files producing one UploadResult per
file. Notifying the user is a separate consumer of that result list.
"""
from __future__ import annotations

import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from ..errors import MediaError, ValidationError, describe_error
from ..models import FileUpload, MediaConfig, Notification, UploadResult
from ..paths import join
from ..protocols import IObjectStore

logger = logging.getLogger(__name__)

RefreshHook = Callable[[], Awaitable[object]]


class UploadCoordinator:
    """Uploads files one after another with overwrite disabled."""

    def __init__(self, store: IObjectStore, config: Optional[MediaConfig] = None):
        self._store = store
        self._config = config or MediaConfig()

    async def upload_one(self, path: str, file: FileUpload) -> UploadResult:
        try:
            dest = join(path, file.name)
        except ValidationError as exc:
            return UploadResult.fail(file.name, describe_error(exc), error_kind=type(exc).__name__)

        try:
            await self._store.upload(
                dest,
                file.data,
                content_type=file.content_type,
                cache_control=self._config.cache_control,
                upsert=False,
            )
        except MediaError as exc:
            logger.warning("Upload of %s failed: %s", dest, exc)
            return UploadResult.fail(
                file.name,
                describe_error(exc),
                path=dest,
                error_kind=type(exc).__name__,
            )

        return UploadResult.ok(file.name, dest)

    async def upload_all(
        self,
        path: str,
        files: Sequence[FileUpload],
        refresh: Optional[RefreshHook] = None,
    ) -> List[UploadResult]:
        """
        Upload files into path sequentially.

        A failure never aborts the batch. refresh, when given, is awaited once
        after the whole batch, however many files succeeded.

        Raises:
            ValidationError: files is empty
        """
        if not files:
            raise ValidationError("Please select files to upload")

        results: List[UploadResult] = []
        for file in files:
            if file.size > self._config.max_file_size:
                logger.debug("%s exceeds the advisory size ceiling (%s bytes)", file.name, file.size)
            results.append(await self.upload_one(path, file))

        succeeded = sum(1 for result in results if result.success)
        logger.info("Upload batch to '%s': %s/%s succeeded", path or "/", succeeded, len(results))

        if refresh is not None:
            await refresh()
        return results


def upload_notifications(results: Sequence[UploadResult]) -> List[Notification]:
    """One error notification per failed file, then a summary."""
    notifications = [
        Notification.error(result.error or "Upload failed", title=f"Error uploading {result.filename}")
        for result in results
        if not result.success
    ]
    succeeded = sum(1 for result in results if result.success)
    if succeeded == len(results):
        notifications.append(Notification.success("Files uploaded successfully"))
    elif succeeded:
        notifications.append(
            Notification.success(f"Uploaded {succeeded} of {len(results)} files")
        )
    return notifications
