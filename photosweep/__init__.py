"""
PhotoSweep
==========
Finds redundant and low-value photos in a media library so storage can be
reclaimed with minimal manual review.

Features:
- Sharpness-based quality tiers (Excellent / Good / Fair / Poor / Blurry)
- 64-bit difference-hash fingerprints for near-duplicate detection
- Deterministic greedy clustering with a keep recommendation per cluster
- Byte-accurate savings estimates
- Progress reporting and cooperative cancellation
- Filesystem library with HEIC/HEIF support, CLI report and export
"""

__version__ = "1.0.0"
__author__ = "Zedidence"

from .models import (
    AnalysisResult,
    AnalyzedPhoto,
    DuplicateCluster,
    MediaAsset,
    MediaKind,
    QualityTier,
    format_size,
)
from .errors import (
    AnalysisInProgressError,
    AuthorizationError,
    DeletionError,
    PhotoSweepError,
)
from .config import SIMILARITY_THRESHOLD, FINGERPRINT_BITS
from .scanner import (
    ImageSampler,
    analyze_photo,
    calculate_sharpness,
    compute_fingerprint,
    difference_hash,
    find_duplicate_clusters,
    hamming_distance,
    tier_for_score,
)
from .state import EngineState, AnalysisPhase
from .engine import AnalysisEngine
from .library import (
    AssetStore,
    AuthorizationState,
    ImageDecoder,
    FilesystemAssetStore,
    PillowImageDecoder,
)

__all__ = [
    "AnalysisResult",
    "AnalyzedPhoto",
    "DuplicateCluster",
    "MediaAsset",
    "MediaKind",
    "QualityTier",
    "format_size",
    "AnalysisInProgressError",
    "AuthorizationError",
    "DeletionError",
    "PhotoSweepError",
    "SIMILARITY_THRESHOLD",
    "FINGERPRINT_BITS",
    "ImageSampler",
    "analyze_photo",
    "calculate_sharpness",
    "compute_fingerprint",
    "difference_hash",
    "find_duplicate_clusters",
    "hamming_distance",
    "tier_for_score",
    "EngineState",
    "AnalysisPhase",
    "AnalysisEngine",
    "AssetStore",
    "AuthorizationState",
    "ImageDecoder",
    "FilesystemAssetStore",
    "PillowImageDecoder",
]
