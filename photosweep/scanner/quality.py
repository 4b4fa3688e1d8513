"""
Quality scoring module for the scanner package.

Scores sharpness as the mean edge-response energy of a small grayscale
sample and maps the score onto a discrete quality tier.
"""

from __future__ import annotations

from typing import Optional

from ..config import (
    BLURRY_BELOW,
    FAIR_BELOW,
    GOOD_BELOW,
    MAX_CHANNEL_VALUE,
    POOR_BELOW,
)
from ..models import QualityTier
from .dependencies import Image, ImageFilter, np, _logger


def edge_response(sample: Image.Image) -> np.ndarray:
    """
    Edge intensity image of a grayscale sample.

    Uses Pillow's FIND_EDGES kernel (8 x centre minus the 8 neighbours),
    which responds to local contrast and fades as edges are smoothed out.
    Pillow copies the outermost rows and columns unfiltered, so only the
    interior is returned.

    Raises:
        ValueError: If the sample is smaller than 3x3
    """
    if sample.width < 3 or sample.height < 3:
        raise ValueError(f"Edge filter needs at least 3x3 pixels, got {sample.size}")

    gray = sample if sample.mode == 'L' else sample.convert('L')
    edges = gray.filter(ImageFilter.FIND_EDGES)
    return np.asarray(edges, dtype=np.float64)[1:-1, 1:-1]


def calculate_sharpness(sample: Image.Image) -> float:
    """
    Calculate the sharpness score of a grayscale sample.

    Flat, out-of-focus images produce little edge energy; sharp images
    produce many strong edges and push the mean up.

    Args:
        sample: Grayscale-convertible PIL image (about 300x300)

    Returns:
        Mean edge intensity normalized to [0, 1]
    """
    edges = edge_response(sample)
    return min(float(edges.mean()) / MAX_CHANNEL_VALUE, 1.0)


def tier_for_score(score: float) -> QualityTier:
    """
    Map a sharpness score onto a quality tier.

    Lower bounds are inclusive: 0.15 is POOR, 0.70 is EXCELLENT.
    """
    if score < BLURRY_BELOW:
        return QualityTier.BLURRY
    if score < POOR_BELOW:
        return QualityTier.POOR
    if score < FAIR_BELOW:
        return QualityTier.FAIR
    if score < GOOD_BELOW:
        return QualityTier.GOOD
    return QualityTier.EXCELLENT


def score_quality(sample: Optional[Image.Image]) -> QualityTier:
    """
    Quality tier for a sample, defaulting to FAIR when scoring is impossible.

    Args:
        sample: Grayscale sample, or None if sampling failed

    Returns:
        QualityTier for the sample
    """
    if sample is None:
        return QualityTier.FAIR

    try:
        sharpness = calculate_sharpness(sample)
    except (ValueError, OSError) as e:
        _logger.debug(f"Edge filter failed ({sample.size}): {e}")
        return QualityTier.FAIR

    return tier_for_score(sharpness)


__all__ = ['edge_response', 'calculate_sharpness', 'tier_for_score', 'score_quality']
