"""
Clustering module for the scanner package.

Groups analyzed photos into near-duplicate clusters with a single greedy
pass over pairwise fingerprint distances, then ranks the clusters by how
many bytes deleting their duplicates would free.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from ..config import SIMILARITY_THRESHOLD
from ..models import AnalyzedPhoto, DuplicateCluster
from .dependencies import HAS_TQDM, _tqdm_class, _logger
from .fingerprint import hamming_distance, similarity


def find_duplicate_clusters(
    photos: list[AnalyzedPhoto],
    threshold: int = SIMILARITY_THRESHOLD,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
    show_progress: bool = False,
) -> Optional[list[DuplicateCluster]]:
    """
    Find clusters of visually near-duplicate photos.

    Photos are visited in input order. Each photo whose fingerprint has not
    been claimed yet becomes an anchor and claims every later, unclustered
    photo within `threshold` bits of it. The anchor's own fingerprint is
    claimed after its scan whether or not a cluster formed. Membership
    fields on the photos are set as clusters form.

    The result depends on input order, so callers must pass photos in a
    deterministic order.

    Args:
        photos: Analyzed photos; those without a fingerprint or that are
            videos are ignored
        threshold: Maximum Hamming distance for a match (inclusive)
        progress_callback: Optional callback(current, total) over comparisons
        should_cancel: Optional predicate polled between anchors
        show_progress: Whether to show a tqdm progress bar

    Returns:
        Clusters sorted by reclaimable bytes (highest first), or None if
        cancelled
    """
    candidates = [
        p for p in photos
        if p.fingerprint is not None and not p.asset.is_video
    ]
    n = len(candidates)
    if n < 2:
        return []

    total_comparisons = (n * (n - 1)) // 2

    pbar: Optional[Any] = None
    if HAS_TQDM and show_progress and total_comparisons > 1000 and _tqdm_class is not None:
        pbar = _tqdm_class(total=total_comparisons, desc="Comparing photos", unit="cmp", ncols=80)

    claimed: set = set()
    clusters: list[DuplicateCluster] = []
    comparison_count = 0

    try:
        for i, anchor in enumerate(candidates):
            if should_cancel is not None and should_cancel():
                _logger.info("Clustering cancelled")
                return None

            row_comparisons = n - i - 1
            anchor_fp = anchor.fingerprint

            if anchor_fp in claimed or anchor.in_cluster:
                comparison_count += row_comparisons
                if pbar is not None:
                    pbar.update(row_comparisons)
                if progress_callback:
                    progress_callback(comparison_count, total_comparisons)
                continue

            matches: list[tuple[AnalyzedPhoto, int]] = []
            for other in candidates[i + 1:]:
                if other.in_cluster:
                    continue
                distance = hamming_distance(anchor_fp, other.fingerprint)
                if distance <= threshold:
                    matches.append((other, distance))
                    claimed.add(other.fingerprint)

            if matches:
                cluster_id = str(anchor_fp)
                anchor.assign_to_cluster(cluster_id, is_duplicate=False)
                for other, distance in matches:
                    other.assign_to_cluster(cluster_id, similarity=similarity(distance))
                clusters.append(DuplicateCluster(
                    id=cluster_id,
                    photos=(anchor, *(other for other, _ in matches)),
                ))

            claimed.add(anchor_fp)

            comparison_count += row_comparisons
            if pbar is not None:
                pbar.update(row_comparisons)
            if progress_callback:
                progress_callback(comparison_count, total_comparisons)
    finally:
        if pbar is not None:
            pbar.close()

    # Stable: equal savings keep formation order
    clusters.sort(key=lambda c: c.reclaimable_bytes, reverse=True)

    _logger.debug(
        f"Clustered {n:,} photos into {len(clusters):,} clusters "
        f"({total_comparisons:,} comparisons max)"
    )
    return clusters


__all__ = ['find_duplicate_clusters']
