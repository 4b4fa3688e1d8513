"""
Scanner package for PhotoSweep.

Provides the per-photo analysis steps and duplicate clustering used by the
analysis engine.

Public API:
- ImageSampler: Produce grayscale samples through an image decoder
- calculate_sharpness / tier_for_score / score_quality: Quality scoring
- difference_hash / compute_fingerprint / hamming_distance: Fingerprints
- analyze_photo: Analyze a single image asset
- find_duplicate_clusters: Greedy near-duplicate clustering
- has_heif_support: Check if HEIC/HEIF support is available
"""

from __future__ import annotations

from .sampling import ImageSampler
from .quality import calculate_sharpness, edge_response, score_quality, tier_for_score
from .fingerprint import (
    ZERO_FINGERPRINT,
    compute_fingerprint,
    difference_hash,
    fingerprint_from_bits,
    fingerprint_to_bits,
    hamming_distance,
    similarity,
)
from .analysis import analyze_photo
from .clustering import find_duplicate_clusters

from .dependencies import HAS_HEIF_SUPPORT


def has_heif_support() -> bool:
    """Check if HEIC/HEIF support is available."""
    return HAS_HEIF_SUPPORT


__all__ = [
    # Sampling
    'ImageSampler',
    # Quality
    'calculate_sharpness',
    'edge_response',
    'score_quality',
    'tier_for_score',
    # Fingerprints
    'ZERO_FINGERPRINT',
    'compute_fingerprint',
    'difference_hash',
    'fingerprint_from_bits',
    'fingerprint_to_bits',
    'hamming_distance',
    'similarity',
    # Analysis
    'analyze_photo',
    # Clustering
    'find_duplicate_clusters',
    # Feature detection
    'has_heif_support',
]
