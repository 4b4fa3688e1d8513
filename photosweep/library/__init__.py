"""
Library package for PhotoSweep.

Defines the collaborator protocols the analysis engine consumes and a
filesystem-backed implementation of them.
"""

from __future__ import annotations

from .base import AssetStore, AuthorizationState, ImageDecoder
from .filesystem import FilesystemAssetStore, PillowImageDecoder, find_media_files

__all__ = [
    'AssetStore',
    'AuthorizationState',
    'ImageDecoder',
    'FilesystemAssetStore',
    'PillowImageDecoder',
    'find_media_files',
]
