"""
Collaborator interfaces consumed by the analysis engine.

The engine never walks directories, prompts for permissions or decodes
image files itself. It talks to an asset store and an image decoder through
the protocols below; `filesystem.py` provides implementations backed by a
local directory.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Protocol, Sequence

from ..models import MediaAsset, MediaKind

if TYPE_CHECKING:
    from PIL import Image


class AuthorizationState(str, Enum):
    """Access level granted by the asset store."""
    NOT_DETERMINED = 'not_determined'
    LIMITED = 'limited'
    AUTHORIZED = 'authorized'
    DENIED = 'denied'

    @property
    def grants_access(self) -> bool:
        """Limited access still permits analysis over the visible subset."""
        return self in (AuthorizationState.AUTHORIZED, AuthorizationState.LIMITED)


class AssetStore(Protocol):
    """Owner of the media collection."""

    def list_assets(self, kind: MediaKind) -> Sequence[MediaAsset]:
        """Return assets of one kind in a stable order."""
        ...

    def byte_size(self, asset: MediaAsset) -> int:
        """Best-effort size in bytes; falls back to width * height * 4."""
        ...

    def request_deletion(self, assets: Sequence[MediaAsset]) -> bool:
        """Delete assets. Returns False (or raises) if any could not be removed."""
        ...

    def authorization_state(self) -> AuthorizationState:
        ...

    def request_authorization(self) -> AuthorizationState:
        ...


class ImageDecoder(Protocol):
    """Produces decoded pixels for an asset. Raises on any failure."""

    def decode(self, asset: MediaAsset, target_width: int, target_height: int) -> 'Image.Image':
        ...


__all__ = ['AuthorizationState', 'AssetStore', 'ImageDecoder']
