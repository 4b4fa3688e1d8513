"""
Analysis orchestration for PhotoSweep.

Provides the AnalysisEngine class that drives a complete analysis pass over
the media library: per-photo quality and fingerprint analysis, video
sizing, duplicate clustering and result aggregation, with progress
reporting, cooperative cancellation and the deletion workflow.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterable, Optional, Sequence

from .errors import AuthorizationError, DeletionError
from .library.base import AssetStore, AuthorizationState, ImageDecoder
from .models import (
    AnalysisResult,
    AnalyzedPhoto,
    DuplicateCluster,
    MediaAsset,
    MediaKind,
    QualityTier,
)
from .scanner import ImageSampler, analyze_photo, find_duplicate_clusters
from .scanner.dependencies import HAS_TQDM, _tqdm_class
from .state import AnalysisPhase, EngineState, EngineStatus, phase_progress
from .user_config import get_user_config
from .utils import formatters

# Module logger
_logger = logging.getLogger(__name__)


def build_result(
    photos: list[AnalyzedPhoto],
    clusters: list[DuplicateCluster],
    video_count: int,
    video_bytes: int,
) -> AnalysisResult:
    """
    Assemble the final result of a run.

    Low-quality and blurry lists only hold photos outside every cluster.
    Total reclaimable bytes add the cluster savings to the sizes of those
    low-quality and blurry photos.
    """
    low_quality = tuple(p for p in photos if p.quality == QualityTier.POOR and not p.in_cluster)
    blurry = tuple(p for p in photos if p.quality == QualityTier.BLURRY and not p.in_cluster)

    reclaimable = (
        sum(c.reclaimable_bytes for c in clusters)
        + sum(p.file_size for p in low_quality)
        + sum(p.file_size for p in blurry)
    )

    return AnalysisResult(
        total_photos=len(photos),
        total_videos=video_count,
        clusters=tuple(clusters),
        low_quality_photos=low_quality,
        blurry_photos=blurry,
        total_reclaimable_bytes=reclaimable,
        total_bytes=sum(p.file_size for p in photos) + video_bytes,
    )


class AnalysisEngine:
    """
    Owns one media library's analysis lifecycle.

    State machine: IDLE -> RUNNING -> COMPLETED, or back to IDLE when a run
    is cancelled. Per-asset failures never fail a run; only missing library
    access and rejected deletions surface as errors.

    Photos are always handed to the clusterer in enumeration order, also
    when sampling runs on several worker threads, so a given library
    produces the same clusters every time.
    """

    def __init__(
        self,
        store: AssetStore,
        decoder: ImageDecoder,
        workers: Optional[int] = None,
        exclude_failed_fingerprints: Optional[bool] = None,
        show_progress: bool = False,
    ):
        """
        Initialize the engine.

        Args:
            store: Asset store owning the collection
            decoder: Image decoder used for sampling
            workers: Sampling threads (default from user config; 1 = sequential)
            exclude_failed_fingerprints: Keep photos whose fingerprint sample
                failed out of clustering (default from user config)
            show_progress: Whether to show tqdm progress bars
        """
        config = get_user_config()
        self.store = store
        self.sampler = ImageSampler(decoder)
        self.workers = max(1, workers if workers is not None else config.default_workers)
        self.exclude_failed_fingerprints = (
            exclude_failed_fingerprints
            if exclude_failed_fingerprints is not None
            else config.exclude_failed_fingerprints
        )
        self.show_progress = show_progress
        self.authorization_state = AuthorizationState.NOT_DETERMINED
        self._status = EngineStatus()

    # -- queries ---------------------------------------------------------

    @property
    def state(self) -> EngineState:
        return self._status.state

    @property
    def progress(self) -> float:
        """Progress of the current run in [0, 1]."""
        return self._status.progress

    @property
    def result(self) -> Optional[AnalysisResult]:
        """Last completed result, if any."""
        return self._status.result

    def subscribe(self, listener: Callable[[EngineState, float], None]) -> Callable[[], None]:
        """Register a (state, progress) listener. Returns an unsubscribe function."""
        return self._status.subscribe(listener)

    def cancel(self) -> None:
        """Request cooperative cancellation of the running analysis."""
        if self._status.state == EngineState.RUNNING:
            _logger.info("Cancellation requested")
        self._status.request_cancel()

    # -- authorization ---------------------------------------------------

    def request_authorization(self) -> bool:
        """
        Ask the store for library access.

        Returns:
            True if full or limited access was granted
        """
        self.authorization_state = self.store.request_authorization()
        granted = self.authorization_state.grants_access
        if not granted:
            _logger.warning(f"Library access not granted: {self.authorization_state.value}")
        return granted

    def _ensure_authorized(self) -> None:
        self.authorization_state = self.store.authorization_state()
        if not self.authorization_state.grants_access:
            raise AuthorizationError(self.authorization_state)

    # -- analysis --------------------------------------------------------

    def run_analysis(self) -> Optional[AnalysisResult]:
        """
        Run a complete analysis pass and publish its result.

        Blocks until the run completes or is cancelled.

        Returns:
            The new AnalysisResult, or None if the run was cancelled

        Raises:
            AuthorizationError: If the store has not granted access
            AnalysisInProgressError: If a run or a deletion is already active
        """
        return self._analyze()

    def _analyze(self, after_delete: bool = False) -> Optional[AnalysisResult]:
        self._ensure_authorized()
        self._status.begin_run(after_delete=after_delete)

        start_time = time.time()
        try:
            result = self._run()
        except BaseException:
            self._status.abandon()
            raise

        if result is None:
            self._status.abandon()
            _logger.info("Analysis cancelled; no result published")
            return None

        self._status.complete(result)
        _logger.info(
            f"Analysis complete in {time.time() - start_time:.1f}s: "
            f"{formatters.format_number(len(result.clusters))} duplicate clusters, "
            f"{formatters.format_number(len(result.low_quality_photos))} low quality, "
            f"{formatters.format_number(len(result.blurry_photos))} blurry, "
            f"{result.formatted_savings} reclaimable"
        )
        return result

    def _run(self) -> Optional[AnalysisResult]:
        """Execute all phases. Returns None as soon as a cancel is observed."""
        images = list(self.store.list_assets(MediaKind.IMAGE))
        videos = list(self.store.list_assets(MediaKind.VIDEO))
        _logger.info(
            f"Analyzing {formatters.format_number(len(images))} photos and "
            f"{formatters.format_number(len(videos))} videos"
        )

        # Phase 1: quality + fingerprint per photo
        photos = self._analyze_images(images)
        if photos is None:
            return None

        # Phase 2: video sizes
        video_bytes = self._size_videos(videos)
        if video_bytes is None:
            return None

        # Phase 3: clustering
        clusters = find_duplicate_clusters(
            photos,
            should_cancel=lambda: self._status.cancel_requested,
            show_progress=self.show_progress,
        )
        if clusters is None or self._status.cancel_requested:
            return None
        self._status.report(phase_progress(AnalysisPhase.CLUSTERING, 1.0))
        _logger.info(f"Found {formatters.format_number(len(clusters))} duplicate clusters")

        # Phase 4: aggregation
        return build_result(photos, clusters, len(videos), video_bytes)

    def _asset_size(self, asset: MediaAsset) -> int:
        size = self.store.byte_size(asset)
        return size if size and size > 0 else asset.estimated_size

    def _analyze_one(self, asset: MediaAsset) -> AnalyzedPhoto:
        return analyze_photo(
            self.sampler,
            asset,
            self._asset_size(asset),
            exclude_failed_fingerprints=self.exclude_failed_fingerprints,
        )

    def _analyze_images(self, images: Sequence[MediaAsset]) -> Optional[list[AnalyzedPhoto]]:
        """
        Phase 1: analyze every photo, preserving enumeration order.

        Returns:
            Analyzed photos in input order, or None if cancelled
        """
        total = len(images)
        photos: list[AnalyzedPhoto] = []
        if total == 0:
            self._status.report(phase_progress(AnalysisPhase.IMAGES, 1.0))
            return photos

        pbar: Optional[Any] = None
        if HAS_TQDM and self.show_progress and _tqdm_class is not None:
            pbar = _tqdm_class(total=total, desc="Analyzing photos", unit="img", ncols=80)

        executor: Optional[ThreadPoolExecutor] = None
        if self.workers > 1:
            executor = ThreadPoolExecutor(max_workers=self.workers)
            # map() yields in submission order regardless of completion order
            results: Iterable[AnalyzedPhoto] = executor.map(self._analyze_one, images)
        else:
            results = map(self._analyze_one, images)

        try:
            for done, photo in enumerate(results, 1):
                photos.append(photo)
                if pbar is not None:
                    pbar.update(1)
                self._status.report(phase_progress(AnalysisPhase.IMAGES, done / total))
                if self._status.cancel_requested:
                    return None
        finally:
            if executor is not None:
                executor.shutdown(wait=True, cancel_futures=True)
            if pbar is not None:
                pbar.close()

        return photos

    def _size_videos(self, videos: Sequence[MediaAsset]) -> Optional[int]:
        """
        Phase 2: sum video sizes. Videos are never decoded or fingerprinted.

        Returns:
            Total video bytes, or None if cancelled
        """
        total = len(videos)
        video_bytes = 0
        if total == 0:
            self._status.report(phase_progress(AnalysisPhase.VIDEOS, 1.0))
            return video_bytes

        for done, asset in enumerate(videos, 1):
            if self._status.cancel_requested:
                return None
            video_bytes += self._asset_size(asset)
            self._status.report(phase_progress(AnalysisPhase.VIDEOS, done / total))

        return video_bytes

    # -- deletion --------------------------------------------------------

    def delete_photos(self, photos: Iterable[AnalyzedPhoto]) -> Optional[AnalysisResult]:
        """
        Delete photos through the store, then re-analyze the whole library.

        An empty selection is a no-op: the store is not called and no new
        analysis runs. A failed deletion skips the re-analysis.

        Args:
            photos: Photos to delete

        Returns:
            The result of the re-analysis (None if it was cancelled), or
            the current result for an empty selection

        Raises:
            DeletionError: If the store rejected or failed the deletion
            AuthorizationError: If library access was lost before the re-scan
            AnalysisInProgressError: If a run or another deletion is active
        """
        photos = list(photos)
        if not photos:
            _logger.debug("No photos selected for deletion")
            return self.result

        self._status.begin_delete()
        try:
            assets = [p.asset for p in photos]
            try:
                deleted = self.store.request_deletion(assets)
            except DeletionError:
                raise
            except Exception as e:
                raise DeletionError(f"Deletion of {len(assets):,} assets failed: {e}") from e

            if not deleted:
                raise DeletionError(f"Store rejected deletion of {len(assets):,} assets")

            _logger.info(f"Deleted {formatters.format_number(len(assets))} assets; re-analyzing library")
            return self._analyze(after_delete=True)
        finally:
            self._status.end_delete()


__all__ = ['AnalysisEngine', 'build_result']
