"""Views - UI state machines over the media services."""
from .base import MediaView, ViewState
from .manager import MediaManager
from .picker import MediaPicker

__all__ = ["MediaView", "ViewState", "MediaManager", "MediaPicker"]
