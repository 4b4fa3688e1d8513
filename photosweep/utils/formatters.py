"""
Formatting utilities for PhotoSweep.

Provides human-readable formatting for numbers, percentages, and file sizes.
"""

from __future__ import annotations

# Re-export format_size from models for convenience
from ..models import format_size


def format_number(n: int) -> str:
    """
    Format large numbers with commas for readability.

    Examples:
        >>> format_number(1000)
        '1,000'
        >>> format_number(1234567)
        '1,234,567'
    """
    return f"{n:,}"


def format_progress(progress: float) -> str:
    """
    Format a progress fraction as a percentage.

    Examples:
        >>> format_progress(0.5)
        '50%'
        >>> format_progress(1.0)
        '100%'
    """
    return f"{int(round(progress * 100))}%"


__all__ = ['format_number', 'format_progress', 'format_size']
