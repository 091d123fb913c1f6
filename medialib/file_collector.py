"""File collection utilities for console uploads."""
import mimetypes
from pathlib import Path
from typing import Iterable, List


def is_image(path: Path) -> bool:
    content_type, _ = mimetypes.guess_type(path.name)
    return bool(content_type and content_type.startswith("image/"))


class FileCollector:
    """Collects image files from files and folders."""

    @staticmethod
    def collect_files(folder: Path) -> List[Path]:
        """
        Collect all image files directly inside folder.

        Only the top level is scanned: a folder upload lands in one virtual
        folder, never in nested ones.
        """
        files = []
        for item in folder.iterdir():
            if item.is_file() and is_image(item):
                files.append(item)
        return sorted(files)

    @classmethod
    def expand(cls, sources: Iterable[Path]) -> List[Path]:
        """Explicit files are kept as given; folders expand to their images."""
        files: List[Path] = []
        for source in sources:
            if source.is_dir():
                files.extend(cls.collect_files(source))
            else:
                files.append(source)
        return files
