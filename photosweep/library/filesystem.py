"""
Filesystem-backed library for PhotoSweep.

Treats a directory tree as the media collection: image and video files are
discovered by extension, decoded with Pillow, and deleted by unlinking.
Access levels are derived from the directory's permissions.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Sequence

from PIL import ImageOps

from ..config import IMAGE_EXTENSIONS, VIDEO_EXTENSIONS
from ..models import MediaAsset, MediaKind
from ..scanner.dependencies import HAS_HEIF_SUPPORT, Image
from ..utils.validators import validate_path_in_directory
from .base import AuthorizationState

logger = logging.getLogger(__name__)


def find_media_files(root_path: str | Path, kind: MediaKind, recursive: bool = True) -> list[str]:
    """
    Find all media files of one kind in the given directory.

    Args:
        root_path: Directory path to search
        kind: Image or video
        recursive: If True, search subdirectories recursively

    Returns:
        List of absolute file paths as strings

    Notes:
        - HEIC/HEIF files are skipped if pillow-heif is not installed
        - Symlinks are resolved and each file is returned once
    """
    root = Path(root_path)

    if kind == MediaKind.VIDEO:
        extensions = VIDEO_EXTENSIONS
    elif HAS_HEIF_SUPPORT:
        extensions = IMAGE_EXTENSIONS
    else:
        extensions = {ext for ext in IMAGE_EXTENSIONS if ext not in {'.heic', '.heif'}}

    files = []
    seen = set()

    iterator = root.rglob('*') if recursive else root.glob('*')

    for filepath in iterator:
        if filepath.is_file() and filepath.suffix.lower() in extensions:
            resolved = str(filepath.resolve())
            if resolved not in seen:
                seen.add(resolved)
                files.append(resolved)

    return files


def _read_dimensions(filepath: str) -> tuple[int, int]:
    """Native (width, height) from the image header, or (0, 0)."""
    try:
        with Image.open(filepath) as img:
            return img.width, img.height
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.debug(f"Could not read dimensions of {filepath}: {e}")
        return 0, 0


class FilesystemAssetStore:
    """
    Asset store over a local directory.

    Assets are listed newest first (by modification time, then path) so
    repeated listings of an unchanged directory return the same order.
    """

    def __init__(self, root: str | Path, recursive: bool = True):
        self.root = str(Path(root).resolve())
        self.recursive = recursive

    def authorization_state(self) -> AuthorizationState:
        """Authorized if readable and writable, limited if read-only."""
        if not os.path.isdir(self.root) or not os.access(self.root, os.R_OK | os.X_OK):
            return AuthorizationState.DENIED
        if os.access(self.root, os.W_OK):
            return AuthorizationState.AUTHORIZED
        return AuthorizationState.LIMITED

    def request_authorization(self) -> AuthorizationState:
        state = self.authorization_state()
        logger.info(f"Library access for {self.root}: {state.value}")
        return state

    def list_assets(self, kind: MediaKind) -> list[MediaAsset]:
        assets = []
        for filepath in find_media_files(self.root, kind, recursive=self.recursive):
            try:
                mtime = os.path.getmtime(filepath)
            except OSError:
                continue

            width, height = (0, 0) if kind == MediaKind.VIDEO else _read_dimensions(filepath)
            assets.append(MediaAsset(
                identifier=filepath,
                kind=kind,
                created_at=datetime.fromtimestamp(mtime),
                pixel_width=width,
                pixel_height=height,
            ))

        assets.sort(key=lambda a: (-a.created_at.timestamp(), a.identifier))
        return assets

    def byte_size(self, asset: MediaAsset) -> int:
        try:
            size = os.path.getsize(asset.identifier)
        except OSError:
            size = 0
        return size if size > 0 else asset.estimated_size

    def request_deletion(self, assets: Sequence[MediaAsset]) -> bool:
        """
        Delete the files behind the given assets.

        Returns:
            True if every file was removed, False if any was refused or failed
        """
        failures = 0
        for asset in assets:
            if not validate_path_in_directory(asset.identifier, self.root):
                logger.error(f"Refusing to delete file outside library: {asset.identifier}")
                failures += 1
                continue
            try:
                os.remove(asset.identifier)
                logger.debug(f"Deleted {asset.identifier}")
            except OSError as e:
                logger.error(f"Failed to delete {asset.identifier}: {e}")
                failures += 1

        if failures:
            logger.warning(f"{failures:,} of {len(assets):,} deletions failed")
        return failures == 0


class PillowImageDecoder:
    """Decodes files with Pillow, honouring EXIF orientation."""

    def decode(self, asset: MediaAsset, target_width: int, target_height: int) -> Image.Image:
        if asset.is_video:
            raise ValueError(f"Cannot decode video asset: {asset.identifier}")

        with Image.open(asset.identifier) as img:
            # JPEG only: libjpeg decodes straight to grayscale at a reduced scale
            img.draft('L', (target_width, target_height))
            img.load()
            return ImageOps.exif_transpose(img)


__all__ = ['find_media_files', 'FilesystemAssetStore', 'PillowImageDecoder']
