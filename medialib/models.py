"""
Models for the media library.

Immutable dataclasses: listing entries, listing snapshots, upload results,
notifications and configuration.
"""
import mimetypes
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

SENTINEL_NAME = ".keep"
MB = 1024 * 1024


@dataclass(frozen=True)
class FolderEntry:
    """Virtual directory inferred from a listing row with no identifier."""
    name: str


@dataclass(frozen=True)
class FileObject:
    """Real object in the store."""
    name: str
    id: str
    path: str
    created_at: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)


ListingEntry = Union[FolderEntry, FileObject]


@dataclass(frozen=True)
class Listing:
    """Snapshot of one path: folder names and files, ordered by name."""
    path: str = ""
    folders: Tuple[str, ...] = ()
    files: Tuple[FileObject, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.folders and not self.files

    @classmethod
    def empty(cls, path: str = "") -> "Listing":
        return cls(path=path)


@dataclass(frozen=True)
class SortBy:
    """Listing sort order requested from the store."""
    column: str = "name"
    order: str = "asc"

    def as_dict(self) -> Dict[str, str]:
        return {"column": self.column, "order": self.order}


@dataclass(frozen=True)
class Breadcrumb:
    """One path segment with its cumulative path."""
    name: str
    path: str


@dataclass(frozen=True)
class FileUpload:
    """A file selected for upload."""
    name: str
    data: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: Path, name: Optional[str] = None) -> "FileUpload":
        file_path = Path(path)
        content_type, _ = mimetypes.guess_type(file_path.name)
        return cls(
            name=name or file_path.name,
            data=file_path.read_bytes(),
            content_type=content_type,
        )


class UploadStatus(Enum):
    """Upload operation status."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadResult:
    """Immutable result of uploading one file."""
    filename: str
    path: str = ""
    status: UploadStatus = UploadStatus.SUCCESS
    error: Optional[str] = None
    error_kind: Optional[str] = None  # ValidationError, CollisionError, NetworkError

    @property
    def success(self) -> bool:
        return self.status == UploadStatus.SUCCESS

    @property
    def collided(self) -> bool:
        return self.error_kind == "CollisionError"

    @classmethod
    def ok(cls, filename: str, path: str):
        return cls(filename=filename, path=path, status=UploadStatus.SUCCESS)

    @classmethod
    def fail(cls, filename: str, error: str, path: str = "", error_kind: Optional[str] = None):
        return cls(
            filename=filename,
            path=path,
            status=UploadStatus.FAILED,
            error=error,
            error_kind=error_kind,
        )


@dataclass(frozen=True)
class Notification:
    """User-facing message emitted by the views."""
    title: str
    description: str = ""
    variant: str = "default"  # default, destructive

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"

    @classmethod
    def success(cls, description: str, title: str = "Success"):
        return cls(title=title, description=description)

    @classmethod
    def error(cls, description: str, title: str = "Error"):
        return cls(title=title, description=description, variant="destructive")


@dataclass(frozen=True)
class MediaConfig:
    """Immutable configuration for the media library."""
    base_url: str = ""
    api_key: str = ""
    bucket: str = "media"
    cache_control: str = "3600"
    manager_list_limit: int = 100
    picker_list_limit: int = 1000
    # Advisory only: nothing in the core rejects files on these grounds
    max_file_size: int = 10 * MB
    accepted_mime: str = "image/*"
    static_assets: Tuple[str, ...] = ()
    timeout: int = 60

    @property
    def public_base(self) -> str:
        return f"{self.base_url.rstrip('/')}/storage/v1/object/public/{self.bucket}"

    def accepts(self, content_type: Optional[str]) -> bool:
        """Check a MIME type against the accepted pattern."""
        if not content_type:
            return False
        if self.accepted_mime.endswith("/*"):
            return content_type.startswith(self.accepted_mime[:-1])
        return content_type == self.accepted_mime

    @classmethod
    def from_env(cls, **overrides) -> "MediaConfig":
        """Build configuration from SUPABASE_* / MEDIA_* environment variables."""
        values: Dict[str, Any] = {
            "base_url": os.getenv("SUPABASE_URL", ""),
            "api_key": os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY", ""),
            "bucket": os.getenv("MEDIA_BUCKET", "media"),
        }
        assets = os.getenv("MEDIA_STATIC_ASSETS")
        if assets:
            values["static_assets"] = tuple(a.strip() for a in assets.split(",") if a.strip())
        values.update(overrides)
        return cls(**values)
