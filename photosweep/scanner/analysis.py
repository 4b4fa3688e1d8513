"""
Photo analysis module for the scanner package.

Runs the per-asset steps of an analysis pass: two samples, a quality tier
and a fingerprint. Failures degrade to neutral defaults instead of raising.
"""

from __future__ import annotations

from ..config import FINGERPRINT_SAMPLE_SIZE, QUALITY_SAMPLE_SIZE
from ..models import AnalyzedPhoto, MediaAsset
from .dependencies import _logger
from .fingerprint import compute_fingerprint
from .quality import score_quality
from .sampling import ImageSampler


def analyze_photo(
    sampler: ImageSampler,
    asset: MediaAsset,
    file_size: int,
    exclude_failed_fingerprints: bool = False,
) -> AnalyzedPhoto:
    """
    Analyze a single image asset.

    Args:
        sampler: Sampler wrapping the image decoder
        asset: Image asset to analyze
        file_size: Size in bytes reported by the store
        exclude_failed_fingerprints: Leave the fingerprint unset (so the
            photo never clusters) when its sample fails, instead of using the
            all-zero fingerprint

    Returns:
        AnalyzedPhoto with quality tier and fingerprint filled in
    """
    quality_sample = sampler.sample(asset, *QUALITY_SAMPLE_SIZE)
    quality = score_quality(quality_sample)

    hash_sample = sampler.sample(asset, *FINGERPRINT_SAMPLE_SIZE, exact=True)
    if hash_sample is None:
        _logger.debug(f"Fingerprint sample failed for {asset.identifier}")
        fingerprint = None if exclude_failed_fingerprints else compute_fingerprint(None)
    else:
        fingerprint = compute_fingerprint(hash_sample)

    return AnalyzedPhoto(
        asset=asset,
        quality=quality,
        file_size=file_size,
        fingerprint=fingerprint,
    )


__all__ = ['analyze_photo']
