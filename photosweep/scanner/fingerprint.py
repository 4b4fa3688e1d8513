"""
Fingerprint module for the scanner package.

Computes the 64-bit difference hash used to find visually near-duplicate
photos. Fingerprints are `imagehash.ImageHash` values, so subtracting two
of them yields their Hamming distance.
"""

from __future__ import annotations

from typing import Optional

from ..config import FINGERPRINT_BITS, FINGERPRINT_SAMPLE_SIZE
from .dependencies import Image, imagehash, np

_GRID_WIDTH, _GRID_HEIGHT = FINGERPRINT_SAMPLE_SIZE

# Emitted when the fingerprint sample cannot be produced. Two failed photos
# therefore compare as identical (distance 0).
ZERO_FINGERPRINT = imagehash.ImageHash(np.zeros((_GRID_HEIGHT, _GRID_WIDTH - 1), dtype=bool))


def difference_hash(sample: Image.Image) -> imagehash.ImageHash:
    """
    Compute the difference hash of a 9x8 grayscale sample.

    Each row compares every pixel with its right-hand neighbour and emits 1
    when the left pixel is darker. Rows are concatenated top to bottom,
    giving 8 x 8 = 64 bits.

    Args:
        sample: Grayscale-convertible PIL image; resized to 9x8 if needed

    Returns:
        64-bit ImageHash
    """
    gray = sample if sample.mode == 'L' else sample.convert('L')
    if gray.size != FINGERPRINT_SAMPLE_SIZE:
        gray = gray.resize(FINGERPRINT_SAMPLE_SIZE, Image.Resampling.LANCZOS)

    pixels = np.asarray(gray, dtype=np.int16)
    bits = pixels[:, :-1] < pixels[:, 1:]
    return imagehash.ImageHash(bits)


def compute_fingerprint(sample: Optional[Image.Image]) -> imagehash.ImageHash:
    """Fingerprint for a sample, or the all-zero fingerprint if sampling failed."""
    if sample is None:
        return ZERO_FINGERPRINT
    return difference_hash(sample)


def hamming_distance(a: imagehash.ImageHash, b: imagehash.ImageHash) -> int:
    """Number of differing bit positions between two fingerprints."""
    return int(a - b)


def similarity(distance: int) -> float:
    """Similarity in [0, 1] for a Hamming distance between 64-bit fingerprints."""
    return 1.0 - distance / FINGERPRINT_BITS


def fingerprint_to_bits(fingerprint: imagehash.ImageHash) -> str:
    """Render a fingerprint as a row-major string of '0'/'1' characters."""
    return ''.join('1' if bit else '0' for bit in fingerprint.hash.flatten())


def fingerprint_from_bits(bits: str) -> imagehash.ImageHash:
    """
    Parse a row-major '0'/'1' string back into a fingerprint.

    Raises:
        ValueError: If the string is not 64 binary characters
    """
    if len(bits) != FINGERPRINT_BITS or set(bits) - {'0', '1'}:
        raise ValueError(f"Expected {FINGERPRINT_BITS} binary characters, got {bits!r}")
    array = np.array([c == '1' for c in bits], dtype=bool)
    return imagehash.ImageHash(array.reshape(_GRID_HEIGHT, _GRID_WIDTH - 1))


__all__ = [
    'ZERO_FINGERPRINT',
    'difference_hash',
    'compute_fingerprint',
    'hamming_distance',
    'similarity',
    'fingerprint_to_bits',
    'fingerprint_from_bits',
]
