"""
Folder Creator - materialize an empty folder by writing a sentinel object.
"""
import logging
from typing import Optional

from ..errors import CollisionError, ValidationError
from ..models import SENTINEL_NAME, MediaConfig
from ..paths import join
from ..protocols import IObjectStore

logger = logging.getLogger(__name__)

# 1x1 transparent PNG, accepted by image-only bucket policies
PLACEHOLDER_PNG = bytes([
    0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A, 0x00, 0x00, 0x00, 0x0D,
    0x49, 0x48, 0x44, 0x52, 0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x01,
    0x08, 0x06, 0x00, 0x00, 0x00, 0x1F, 0x15, 0xC4, 0x89, 0x00, 0x00, 0x00,
    0x0A, 0x49, 0x44, 0x41, 0x54, 0x78, 0x9C, 0x63, 0x00, 0x01, 0x00, 0x00,
    0x05, 0x00, 0x01, 0x0D, 0x0A, 0x2D, 0xB4, 0x00, 0x00, 0x00, 0x00, 0x49,
    0x45, 0x4E, 0x44, 0xAE, 0x42, 0x60, 0x82,
])
PLACEHOLDER_CONTENT_TYPE = "image/png"


def sentinel_path(path: str, name: str) -> str:
    return join(join(path, name), SENTINEL_NAME)


class FolderCreator:
    """
    Creates folders at most once per name within a path.

    The sentinel is written with overwrite disabled, so a second create of the
    same name raises CollisionError instead of silently succeeding.
    """

    def __init__(self, store: IObjectStore, config: Optional[MediaConfig] = None):
        self._store = store
        self._config = config or MediaConfig()

    async def create(self, path: str, name: str, exist_ok: bool = False) -> str:
        """
        Create folder name under path.

        Args:
            path: Parent path ("" for root)
            name: Folder name, trimmed before use
            exist_ok: Treat an existing sentinel as success

        Returns:
            Key of the sentinel object

        Raises:
            ValidationError: name is blank or contains a separator
            CollisionError: the sentinel already exists (unless exist_ok)
            NetworkError: the store call failed
        """
        folder_name = (name or "").strip()
        if not folder_name:
            raise ValidationError("Folder name is required")

        key = sentinel_path(path, folder_name)
        try:
            await self._store.upload(
                key,
                PLACEHOLDER_PNG,
                content_type=PLACEHOLDER_CONTENT_TYPE,
                cache_control=self._config.cache_control,
                upsert=False,
            )
        except CollisionError:
            if not exist_ok:
                raise
            logger.debug("Folder already exists, accepted: %s", key)
            return key

        logger.info("Created folder %s", join(path, folder_name))
        return key
