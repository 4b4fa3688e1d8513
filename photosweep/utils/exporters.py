"""
Export functionality for PhotoSweep.

Provides functions to export an analysis result to TXT or CSV files.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import TextIO

from ..models import AnalysisResult, format_size


def _export_txt(result: AnalysisResult, file_handle: TextIO) -> None:
    """
    Export an analysis result to TXT format.

    Args:
        result: Analysis result to export
        file_handle: Open file handle to write to
    """
    file_handle.write("PHOTO CLEANUP REPORT\n")
    file_handle.write("=" * 70 + "\n\n")
    file_handle.write(f"Photos: {result.total_photos:,}  Videos: {result.total_videos:,}  "
                      f"Library size: {format_size(result.total_bytes)}\n")
    file_handle.write(f"Reclaimable: {result.formatted_savings}\n")

    file_handle.write("\n\nDUPLICATES\n")
    file_handle.write("-" * 70 + "\n")
    for i, cluster in enumerate(result.clusters, 1):
        file_handle.write(f"\nCluster {i} ({cluster.image_count} photos, "
                          f"{cluster.formatted_savings} reclaimable):\n")
        best = cluster.best_photo
        for photo in cluster.photos:
            marker = "[KEEP]" if photo == best else "[DUPE]"
            file_handle.write(f"  {marker} {photo.identifier} "
                              f"({photo.quality.display_name}, {photo.formatted_size})\n")

    for title, photos in (("LOW QUALITY", result.low_quality_photos),
                          ("BLURRY", result.blurry_photos)):
        file_handle.write(f"\n\n{title}\n")
        file_handle.write("-" * 70 + "\n")
        for photo in photos:
            file_handle.write(f"  {photo.identifier} ({photo.formatted_size})\n")


def _export_csv(result: AnalysisResult, file_handle: TextIO) -> None:
    """
    Export an analysis result to CSV format.

    Notes:
        CSV includes: category, cluster_id, status, identifier, quality,
                      file_size, similarity
    """
    writer = csv.writer(file_handle)
    writer.writerow(['category', 'cluster_id', 'status', 'identifier',
                     'quality', 'file_size', 'similarity'])

    for cluster in result.clusters:
        best = cluster.best_photo
        for photo in cluster.photos:
            writer.writerow([
                'duplicate',
                cluster.id,
                'keep' if photo == best else 'delete',
                photo.identifier,
                photo.quality.value,
                photo.file_size,
                f"{photo.similarity:.4f}" if photo.similarity is not None else '',
            ])

    for category, photos in (('low_quality', result.low_quality_photos),
                             ('blurry', result.blurry_photos)):
        for photo in photos:
            writer.writerow([category, '', 'delete', photo.identifier,
                             photo.quality.value, photo.file_size, ''])


def export_results(
    result: AnalysisResult,
    output_path: Path,
    export_format: str = 'txt'
) -> None:
    """
    Export an analysis result to a file.

    Args:
        result: Analysis result to export
        output_path: Path to output file
        export_format: Export format ('txt' or 'csv'). Default: 'txt'

    Raises:
        ValueError: If export_format is not 'txt' or 'csv'
        OSError: If file cannot be written
    """
    if export_format not in ('txt', 'csv'):
        raise ValueError(f"Unsupported export format: {export_format}. Use 'txt' or 'csv'.")

    with open(output_path, 'w', encoding='utf-8', newline='') as f:
        if export_format == 'txt':
            _export_txt(result, f)
        else:
            _export_csv(result, f)


__all__ = ['export_results']
