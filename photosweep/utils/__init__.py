"""
Utilities package for PhotoSweep.

Provides:
- formatters: Human-readable formatting for numbers, progress, and file sizes
- validators: Path confinement and parameter validation
- exporters: Export analysis results to files
"""

from __future__ import annotations

from . import formatters
from . import validators
from . import exporters

from .formatters import format_number, format_progress, format_size
from .validators import validate_path_in_directory, validate_directory, validate_workers
from .exporters import export_results

__all__ = [
    # Submodules
    'formatters',
    'validators',
    'exporters',
    # Formatters
    'format_number',
    'format_progress',
    'format_size',
    # Validators
    'validate_path_in_directory',
    'validate_directory',
    'validate_workers',
    # Exporters
    'export_results',
]
