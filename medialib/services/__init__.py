"""Services for the media library."""
from .folders import FolderCreator
from .listing import ListingService
from .object_store import SupabaseStorageClient
from .uploads import UploadCoordinator, upload_notifications
from .urls import UrlResolver

__all__ = [
    "FolderCreator",
    "ListingService",
    "SupabaseStorageClient",
    "UploadCoordinator",
    "UrlResolver",
    "upload_notifications",
]
