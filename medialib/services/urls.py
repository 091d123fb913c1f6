"""
URL Resolver - deterministic public URL derivation.

Assumes a publicly readable bucket: no signing, no expiry, no network call.
"""
from typing import Iterable, Optional

from ..models import MediaConfig

ABSOLUTE_PREFIXES = ("http://", "https://", "/")


class UrlResolver:
    """Maps object paths and product image references to URLs."""

    def __init__(self, config: MediaConfig, static_assets: Optional[Iterable[str]] = None):
        self._base = config.public_base
        self._static_assets = tuple(
            static_assets if static_assets is not None else config.static_assets
        )

    def resolve(self, path: str) -> str:
        return f"{self._base}/{path}"

    def resolve_asset(self, ref: Optional[str]) -> str:
        """
        Resolve a product image reference.

        Absolute URLs and root-relative paths pass through. Bare names are
        matched by filename against the known static assets; unknown names are
        returned unchanged.
        """
        if not ref:
            return ""
        if ref.startswith(ABSOLUTE_PREFIXES):
            return ref
        filename = ref.split("/")[-1]
        for asset in self._static_assets:
            if asset.endswith(f"/{filename}"):
                return asset
        return ref
