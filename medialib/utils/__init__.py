"""Utilities for the media library."""
from .events import NOTIFY, SELECT, EventEmitter

__all__ = ["EventEmitter", "NOTIFY", "SELECT"]
