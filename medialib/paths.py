"""
Path model for virtual folders over a flat key space.

A path is a sequence of non-empty segments joined by "/". The empty string is
the root.
"""
from typing import List

from .errors import ValidationError
from .models import Breadcrumb

SEPARATOR = "/"


def join(parent: str, name: str) -> str:
    """
    Append one segment to a path.

    Raises:
        ValidationError: name is empty or contains a separator
    """
    if not name:
        raise ValidationError("Name is required")
    if SEPARATOR in name:
        raise ValidationError(f"Name must not contain '{SEPARATOR}': {name}")
    if not parent:
        return name
    return f"{parent}{SEPARATOR}{name}"


def parent_of(path: str) -> str:
    parts = path.split(SEPARATOR)
    parts.pop()
    return SEPARATOR.join(parts)


def segments(path: str) -> List[Breadcrumb]:
    """Breadcrumbs for a path: each segment with its cumulative path."""
    crumbs: List[Breadcrumb] = []
    current = ""
    for part in path.split(SEPARATOR) if path else []:
        current = join(current, part)
        crumbs.append(Breadcrumb(name=part, path=current))
    return crumbs


def normalize(path: str) -> str:
    """Strip surrounding separators/whitespace and collapse empty segments."""
    parts = [part for part in path.strip().split(SEPARATOR) if part]
    return SEPARATOR.join(parts)


def is_normalized(path: str) -> bool:
    return path == "" or all(path.split(SEPARATOR))


def validate(path: str) -> str:
    if not is_normalized(path):
        raise ValidationError(f"Invalid path: {path!r}")
    return path
