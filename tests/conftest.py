"""
Pytest configuration and shared fixtures for test suite.
"""

import os
import shutil
import tempfile
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from photosweep.config import FINGERPRINT_SAMPLE_SIZE
from photosweep.engine import AnalysisEngine
from photosweep.library.base import AuthorizationState
from photosweep.models import MediaAsset, MediaKind


BASE_BITS = "0110100111010010" * 4


def flip_bits(bits: str, positions) -> str:
    """Return `bits` with the given positions inverted."""
    chars = list(bits)
    for pos in positions:
        chars[pos] = '1' if chars[pos] == '0' else '0'
    return ''.join(chars)


def image_from_bits(bits: str) -> Image.Image:
    """
    Build a 9x8 grayscale image whose difference hash is exactly `bits`.

    Each row starts at mid-gray and steps up for a 1 bit, down for a 0 bit.
    """
    width, height = FINGERPRINT_SAMPLE_SIZE
    pixels = np.zeros((height, width), dtype=np.uint8)
    for row in range(height):
        value = 128
        pixels[row, 0] = value
        for col in range(width - 1):
            value += 10 if bits[row * (width - 1) + col] == '1' else -10
            pixels[row, col + 1] = value
    return Image.fromarray(pixels)


def dot_grid_image(level: int, size: int = 300) -> Image.Image:
    """
    A `level` gray field with a black dot on every third row and column.

    Every field pixel has exactly one dot among its eight neighbours, so
    FIND_EDGES gives it a response of `level` and the dots respond with 0.
    The sharpness score is therefore the field fraction times level / 255.
    """
    pixels = np.full((size, size), level, dtype=np.uint8)
    pixels[::3, ::3] = 0
    return Image.fromarray(pixels)


# Field levels landing in the middle of each tier
TIER_LEVELS = {
    'blurry': 20,
    'poor': 64,
    'fair': 115,
    'good': 172,
    'excellent': 255,
}


class FakeLibrary:
    """
    In-memory asset store and image decoder.

    Each image asset has a fingerprint image (served for 9x8 requests) and a
    quality image (served for everything else). Assets registered with
    fail=True raise on decode.
    """

    def __init__(self):
        self.assets: list[MediaAsset] = []
        self.sizes: dict[str, int] = {}
        self.hash_images: dict[str, Image.Image] = {}
        self.quality_images: dict[str, Image.Image] = {}
        self.failing: set[str] = set()
        self.auth = AuthorizationState.AUTHORIZED
        self.deletion_calls: list[list[MediaAsset]] = []
        self.delete_result = True
        self.delete_exception = None
        self.list_calls = 0
        self.decode_hook = None
        self.deletion_hook = None

    def add_image(self, identifier, bits=BASE_BITS, quality='good', size=1000,
                  width=4032, height=3024, fail=False):
        asset = MediaAsset(identifier=identifier, kind=MediaKind.IMAGE,
                           pixel_width=width, pixel_height=height)
        self.assets.append(asset)
        self.sizes[identifier] = size
        if fail:
            self.failing.add(identifier)
        else:
            self.hash_images[identifier] = image_from_bits(bits)
            self.quality_images[identifier] = dot_grid_image(TIER_LEVELS[quality])
        return asset

    def add_video(self, identifier, size=50_000):
        asset = MediaAsset(identifier=identifier, kind=MediaKind.VIDEO)
        self.assets.append(asset)
        self.sizes[identifier] = size
        return asset

    # Asset store

    def list_assets(self, kind):
        if kind == MediaKind.IMAGE:
            self.list_calls += 1
        return [a for a in self.assets if a.kind == kind]

    def byte_size(self, asset):
        return self.sizes.get(asset.identifier, 0)

    def request_deletion(self, assets):
        self.deletion_calls.append(list(assets))
        if self.deletion_hook is not None:
            self.deletion_hook(assets)
        if self.delete_exception is not None:
            raise self.delete_exception
        if self.delete_result:
            doomed = {a.identifier for a in assets}
            self.assets = [a for a in self.assets if a.identifier not in doomed]
        return self.delete_result

    def authorization_state(self):
        return self.auth

    def request_authorization(self):
        return self.auth

    # Image decoder

    def decode(self, asset, target_width, target_height):
        if self.decode_hook is not None:
            self.decode_hook(asset)
        if asset.identifier in self.failing:
            raise OSError(f"cannot decode {asset.identifier}")
        if (target_width, target_height) == FINGERPRINT_SAMPLE_SIZE:
            return self.hash_images[asset.identifier].copy()
        return self.quality_images[asset.identifier].copy()


@pytest.fixture
def library():
    """Empty in-memory library."""
    return FakeLibrary()


@pytest.fixture
def engine(library):
    """Sequential engine over the in-memory library, quirk-preserving mode."""
    return AnalysisEngine(library, library, workers=1, exclude_failed_fingerprints=False)


@pytest.fixture
def bits():
    """Fingerprint bit helpers: base pattern, flip and image builder."""
    class Bits:
        base = BASE_BITS
        flip = staticmethod(flip_bits)
        image = staticmethod(image_from_bits)
    return Bits


@pytest.fixture
def dots():
    """Dot grid builder and per-tier field levels."""
    class Dots:
        make = staticmethod(dot_grid_image)
        levels = TIER_LEVELS
    return Dots


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def sample_media(temp_dir):
    """
    Create a small media library on disk.

    Returns:
        dict with paths to:
        - ramp1.png, ramp2.png (identical horizontal ramps, near-duplicates)
        - split.png (ramp up in the top half, down in the bottom half)
        - clip.mp4 (a "video": opaque bytes, never decoded)
    """
    media = {}

    ramp = np.tile(np.linspace(0, 255, 160).astype(np.uint8), (120, 1))
    ramp_img = Image.fromarray(ramp)
    for name in ('ramp1', 'ramp2'):
        path = temp_dir / f"{name}.png"
        ramp_img.save(path, 'PNG')
        media[name] = str(path)

    split = ramp.copy()
    split[60:, :] = split[60:, ::-1]
    path = temp_dir / "split.png"
    Image.fromarray(split).save(path, 'PNG')
    media['split'] = str(path)

    path = temp_dir / "clip.mp4"
    path.write_bytes(b"\x00" * 4096)
    media['clip'] = str(path)

    # Distinct mtimes, newest first: split, ramp2, ramp1, clip
    base = 1_700_000_000
    for offset, name in enumerate(('clip', 'ramp1', 'ramp2', 'split')):
        os.utime(media[name], (base + offset * 60, base + offset * 60))

    return media


@pytest.fixture
def isolated_config(temp_dir, monkeypatch):
    """Point the user config at an empty temp directory and clear env overrides."""
    from photosweep.user_config import get_user_config

    config_dir = temp_dir / "config"
    monkeypatch.setenv('PHOTOSWEEP_CONFIG_DIR', str(config_dir))
    for var in ('PHOTOSWEEP_WORKERS', 'PHOTOSWEEP_EXCLUDE_FAILED', 'PHOTOSWEEP_MAX_PIXELS'):
        monkeypatch.delenv(var, raising=False)

    config = get_user_config()
    config.reload()
    yield config
    config.reload()
