"""
Data models for PhotoSweep.

Contains the media asset handle supplied by the library, the quality tier
enumeration, and the records produced by one analysis pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .config import FALLBACK_BYTES_PER_PIXEL

if TYPE_CHECKING:
    from imagehash import ImageHash


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable form."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


class MediaKind(str, Enum):
    """Kind of media asset as reported by the library."""
    IMAGE = 'image'
    VIDEO = 'video'


class QualityTier(str, Enum):
    """
    Discrete quality tier derived from a sharpness score.

    Ordered from best to worst: EXCELLENT > GOOD > FAIR > POOR > BLURRY.
    Compare tiers with `rank`, never with the string values.
    """
    EXCELLENT = 'excellent'
    GOOD = 'good'
    FAIR = 'fair'
    POOR = 'poor'
    BLURRY = 'blurry'

    @property
    def rank(self) -> int:
        """Ordinal position, higher is better."""
        return _TIER_RANKS[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


_TIER_RANKS = {
    QualityTier.EXCELLENT: 4,
    QualityTier.GOOD: 3,
    QualityTier.FAIR: 2,
    QualityTier.POOR: 1,
    QualityTier.BLURRY: 0,
}


@dataclass(frozen=True)
class MediaAsset:
    """
    Read-only handle to an item owned by the asset store.

    Attributes:
        identifier: Opaque, store-unique identifier (a file path for the
            filesystem library)
        kind: Image or video
        created_at: Creation timestamp, if known
        pixel_width: Native width in pixels (0 if unknown)
        pixel_height: Native height in pixels (0 if unknown)
    """
    identifier: str
    kind: MediaKind = MediaKind.IMAGE
    created_at: Optional[datetime] = None
    pixel_width: int = 0
    pixel_height: int = 0

    @property
    def is_video(self) -> bool:
        return self.kind == MediaKind.VIDEO

    @property
    def estimated_size(self) -> int:
        """Size estimate used when the store cannot report one."""
        return self.pixel_width * self.pixel_height * FALLBACK_BYTES_PER_PIXEL


@dataclass(eq=False)
class AnalyzedPhoto:
    """
    Per-image record produced by one analysis pass.

    Only the duplicate-membership fields (is_duplicate, cluster_id,
    similarity) change after creation, and only once, through
    `assign_to_cluster`.

    Attributes:
        asset: The analyzed asset
        quality: Quality tier from the sharpness score
        file_size: Size in bytes
        fingerprint: 64-bit difference hash, or None when excluded from clustering
        is_duplicate: True for cluster members other than the anchor
        cluster_id: Id of the owning cluster, if any
        similarity: Similarity to the cluster anchor (0..1), if a duplicate
    """
    asset: MediaAsset
    quality: QualityTier
    file_size: int = 0
    fingerprint: Optional['ImageHash'] = None
    is_duplicate: bool = False
    cluster_id: Optional[str] = None
    similarity: Optional[float] = None

    def __hash__(self):
        return hash(self.asset.identifier)

    def __eq__(self, other):
        if not isinstance(other, AnalyzedPhoto):
            return False
        return self.asset.identifier == other.asset.identifier

    @property
    def identifier(self) -> str:
        return self.asset.identifier

    @property
    def in_cluster(self) -> bool:
        return self.cluster_id is not None

    @property
    def formatted_size(self) -> str:
        return format_size(self.file_size)

    def assign_to_cluster(
        self,
        cluster_id: str,
        similarity: Optional[float] = None,
        is_duplicate: bool = True,
    ) -> None:
        """
        Record cluster membership.

        Raises:
            ValueError: If the photo already belongs to a cluster
        """
        if self.cluster_id is not None:
            raise ValueError(
                f"{self.identifier} already belongs to cluster {self.cluster_id}"
            )
        self.cluster_id = cluster_id
        self.similarity = similarity
        self.is_duplicate = is_duplicate

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'identifier': self.identifier,
            'quality': self.quality.value,
            'file_size': self.file_size,
            'file_size_formatted': self.formatted_size,
            'fingerprint': str(self.fingerprint) if self.fingerprint is not None else None,
            'is_duplicate': self.is_duplicate,
            'cluster_id': self.cluster_id,
            'similarity': round(self.similarity, 4) if self.similarity is not None else None,
        }


@dataclass(frozen=True)
class DuplicateCluster:
    """
    A group of visually near-duplicate photos.

    Attributes:
        id: Hex string of the anchor's fingerprint
        photos: Members in construction order; the first one is the anchor.
            Any iterable is accepted and stored as a tuple.
    """
    id: str
    photos: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, 'photos', tuple(self.photos))

    @property
    def anchor(self) -> Optional[AnalyzedPhoto]:
        return self.photos[0] if self.photos else None

    @property
    def ranked_photos(self) -> list:
        """Members sorted by quality tier, best first. Equal tiers keep member order."""
        return sorted(self.photos, key=lambda p: p.quality.rank, reverse=True)

    @property
    def best_photo(self) -> Optional[AnalyzedPhoto]:
        """The implicit keep candidate."""
        ranked = self.ranked_photos
        return ranked[0] if ranked else None

    @property
    def removable_photos(self) -> list:
        """All members except the keep candidate."""
        return self.ranked_photos[1:]

    @property
    def reclaimable_bytes(self) -> int:
        """Bytes freed by deleting every member except the keep candidate."""
        return sum(p.file_size for p in self.removable_photos)

    @property
    def image_count(self) -> int:
        return len(self.photos)

    @property
    def formatted_savings(self) -> str:
        return format_size(self.reclaimable_bytes)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        best = self.best_photo
        return {
            'id': self.id,
            'image_count': self.image_count,
            'photos': [p.to_dict() for p in self.photos],
            'best_identifier': best.identifier if best else None,
            'reclaimable_bytes': self.reclaimable_bytes,
            'reclaimable_bytes_formatted': self.formatted_savings,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    Outcome of one complete analysis pass. Replaced wholesale by the next pass.

    Attributes:
        total_photos: Number of image assets enumerated
        total_videos: Number of video assets enumerated
        clusters: Duplicate clusters, highest reclaimable bytes first
        low_quality_photos: POOR photos outside any cluster
        blurry_photos: BLURRY photos outside any cluster
        total_reclaimable_bytes: Cluster savings plus low-quality and blurry sizes
        total_bytes: Size of every enumerated asset
    """
    total_photos: int = 0
    total_videos: int = 0
    clusters: tuple = ()
    low_quality_photos: tuple = ()
    blurry_photos: tuple = ()
    total_reclaimable_bytes: int = 0
    total_bytes: int = 0

    @property
    def total_issues(self) -> int:
        return (
            sum(c.image_count for c in self.clusters)
            + len(self.low_quality_photos)
            + len(self.blurry_photos)
        )

    @property
    def formatted_savings(self) -> str:
        return format_size(self.total_reclaimable_bytes)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'total_photos': self.total_photos,
            'total_videos': self.total_videos,
            'total_bytes': self.total_bytes,
            'total_issues': self.total_issues,
            'clusters': [c.to_dict() for c in self.clusters],
            'low_quality_photos': [p.to_dict() for p in self.low_quality_photos],
            'blurry_photos': [p.to_dict() for p in self.blurry_photos],
            'total_reclaimable_bytes': self.total_reclaimable_bytes,
            'total_reclaimable_bytes_formatted': self.formatted_savings,
        }
