"""
State management for the PhotoSweep analysis engine.

Holds the engine's lifecycle state, run progress and last published result
behind a lock, and fans changes out to subscribed listeners.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, Optional

from .config import (
    PROGRESS_WEIGHT_AGGREGATION,
    PROGRESS_WEIGHT_CLUSTERING,
    PROGRESS_WEIGHT_IMAGES,
    PROGRESS_WEIGHT_VIDEOS,
)
from .errors import AnalysisInProgressError
from .models import AnalysisResult

_logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    """Lifecycle of the analysis engine: IDLE -> RUNNING -> COMPLETED | IDLE."""
    IDLE = 'idle'
    RUNNING = 'running'
    COMPLETED = 'completed'


class AnalysisPhase(str, Enum):
    """Phases of one analysis run, in execution order."""
    IMAGES = 'images'
    VIDEOS = 'videos'
    CLUSTERING = 'clustering'
    AGGREGATION = 'aggregation'


PHASE_WEIGHTS = {
    AnalysisPhase.IMAGES: PROGRESS_WEIGHT_IMAGES,
    AnalysisPhase.VIDEOS: PROGRESS_WEIGHT_VIDEOS,
    AnalysisPhase.CLUSTERING: PROGRESS_WEIGHT_CLUSTERING,
    AnalysisPhase.AGGREGATION: PROGRESS_WEIGHT_AGGREGATION,
}


def phase_progress(phase: AnalysisPhase, fraction_done: float) -> float:
    """
    Overall progress for a point inside a phase.

    fraction_done * weight(phase) + sum of the weights of earlier phases.

    Examples:
        >>> phase_progress(AnalysisPhase.IMAGES, 0.5)
        0.25
        >>> phase_progress(AnalysisPhase.VIDEOS, 1.0)
        0.8
    """
    fraction_done = min(max(fraction_done, 0.0), 1.0)
    offset = 0.0
    for candidate, weight in PHASE_WEIGHTS.items():
        if candidate == phase:
            return round(offset + fraction_done * weight, 10)
        offset += weight
    raise ValueError(f"Unknown phase: {phase}")


Listener = Callable[[EngineState, float], None]


class EngineStatus:
    """
    Thread-safe state of the analysis engine.

    Progress only moves forward within a run. The result is replaced as a
    whole when a run completes and is left untouched when a run is
    cancelled.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._cancel = threading.Event()
        self._listeners: list[Listener] = []
        self._state = EngineState.IDLE
        self._progress = 0.0
        self._result: Optional[AnalysisResult] = None
        self._deleting = False

    @property
    def state(self) -> EngineState:
        with self._lock:
            return self._state

    @property
    def progress(self) -> float:
        with self._lock:
            return self._progress

    @property
    def result(self) -> Optional[AnalysisResult]:
        with self._lock:
            return self._result

    @property
    def cancel_requested(self) -> bool:
        """Check if cancel has been requested."""
        return self._cancel.is_set()

    def request_cancel(self) -> None:
        """Request cancellation of the current run. No-op when not running."""
        with self._lock:
            if self._state == EngineState.RUNNING:
                self._cancel.set()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with (state, progress) after every change.

        Returns:
            A function that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def begin_delete(self) -> None:
        """
        Reserve the engine for a deletion and its follow-up run.

        Until end_delete(), other deletions and runs are refused, except
        the follow-up run started with begin_run(after_delete=True).

        Raises:
            AnalysisInProgressError: If a run or another deletion is active
        """
        with self._lock:
            if self._state == EngineState.RUNNING:
                raise AnalysisInProgressError("Cannot delete while an analysis is running")
            if self._deleting:
                raise AnalysisInProgressError("A deletion is already in progress")
            self._deleting = True

    def end_delete(self) -> None:
        """Release the reservation taken by begin_delete()."""
        with self._lock:
            self._deleting = False

    def begin_run(self, after_delete: bool = False) -> None:
        """
        Enter RUNNING with progress reset to zero.

        Args:
            after_delete: This is the re-scan of an active deletion

        Raises:
            AnalysisInProgressError: If a run is already active, or a
                deletion is active and this is not its re-scan
        """
        with self._lock:
            if self._state == EngineState.RUNNING:
                raise AnalysisInProgressError("An analysis run is already in progress")
            if self._deleting and not after_delete:
                raise AnalysisInProgressError("A deletion is in progress")
            self._cancel.clear()
            self._state = EngineState.RUNNING
            self._progress = 0.0
        self._notify()

    def report(self, progress: float) -> None:
        """Publish run progress; values below the current progress are ignored."""
        with self._lock:
            if self._state != EngineState.RUNNING or progress <= self._progress:
                return
            self._progress = min(progress, 1.0)
        self._notify()

    def complete(self, result: AnalysisResult) -> None:
        """Publish a finished result and enter COMPLETED."""
        with self._lock:
            self._result = result
            self._progress = 1.0
            self._state = EngineState.COMPLETED
            self._cancel.clear()
        self._notify()

    def abandon(self) -> None:
        """Discard the current run and return to IDLE."""
        with self._lock:
            self._state = EngineState.IDLE
            self._progress = 0.0
            self._cancel.clear()
        self._notify()

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
            state, progress = self._state, self._progress

        for listener in listeners:
            try:
                listener(state, progress)
            except Exception:
                _logger.exception("Progress listener failed")


__all__ = [
    'EngineState',
    'AnalysisPhase',
    'PHASE_WEIGHTS',
    'phase_progress',
    'EngineStatus',
]
