"""
Medialib - media library for the storefront admin console.

Hierarchical folders, upload and selection over a flat object store
(Supabase Storage). Folders are key prefixes; an empty folder is kept alive
by a ".keep" sentinel object.

Usage:
    from medialib import MediaConfig, MediaManager, MediaPicker, SupabaseStorageClient

    config = MediaConfig.from_env()
    async with SupabaseStorageClient(config) as store:
        manager = MediaManager(store, config)
        manager.events.on("notify", print)
        await manager.start()
        await manager.submit_create_folder("products")
        await manager.navigate("products")
        results = await manager.submit_upload([FileUpload.from_path(path)])

        # Embeddable picker, multi-select
        picker = MediaPicker(store, config, multiple=True)
        picker.events.on("select", on_image_selected)
        await picker.open()
        await picker.select_file("products/mug.png")
"""
from .errors import CollisionError, MediaError, NetworkError, ValidationError
from .models import (
    Breadcrumb,
    FileObject,
    FileUpload,
    FolderEntry,
    Listing,
    MediaConfig,
    Notification,
    UploadResult,
    UploadStatus,
)
from .protocols import IObjectStore
from .services import (
    FolderCreator,
    ListingService,
    SupabaseStorageClient,
    UploadCoordinator,
    UrlResolver,
)
from .views import MediaManager, MediaPicker, ViewState

__version__ = "0.1.0"
__all__ = [
    # Views
    "MediaManager",
    "MediaPicker",
    "ViewState",
    # Models
    "Breadcrumb",
    "FileObject",
    "FileUpload",
    "FolderEntry",
    "Listing",
    "MediaConfig",
    "Notification",
    "UploadResult",
    "UploadStatus",
    # Services
    "FolderCreator",
    "ListingService",
    "SupabaseStorageClient",
    "UploadCoordinator",
    "UrlResolver",
    "IObjectStore",
    # Errors
    "MediaError",
    "ValidationError",
    "NetworkError",
    "CollisionError",
]
