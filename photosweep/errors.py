"""
Exception hierarchy for PhotoSweep.

Per-asset decode failures are never raised to callers; they are absorbed by
the sampler and replaced with neutral defaults. Only the conditions below
reach the consumer of the analysis engine.
"""


class PhotoSweepError(Exception):
    """Base exception class for PhotoSweep errors."""
    pass


class AuthorizationError(PhotoSweepError):
    """Raised when analysis is attempted without access to the library."""

    def __init__(self, state, message: str = ""):
        self.state = state
        super().__init__(message or f"Library access not granted (state: {getattr(state, 'value', state)})")


class DeletionError(PhotoSweepError):
    """Raised when the asset store rejects a deletion request."""
    pass


class AnalysisInProgressError(PhotoSweepError):
    """Raised when an operation needs the engine idle but a run is active."""
    pass
