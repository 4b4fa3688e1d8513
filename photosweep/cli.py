"""
Command-line interface for PhotoSweep.

Analyzes a directory of photos and videos, prints a cleanup report, and
optionally exports it or deletes the recommended duplicates.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .config import DEFAULT_WORKERS
from .engine import AnalysisEngine
from .errors import AuthorizationError, DeletionError
from .library import FilesystemAssetStore, PillowImageDecoder
from .models import AnalysisResult, DuplicateCluster, format_size
from .utils.exporters import export_results
from .utils.formatters import format_progress
from .utils.validators import validate_directory, validate_workers


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog='photosweep',
        description='Find duplicate, blurry and low-quality photos',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s ~/Pictures
      Analyze and print a cleanup report (no changes)

  %(prog)s ~/Pictures --export report.csv --export-format csv
      Export the report to CSV for review

  %(prog)s ~/Pictures --delete-duplicates
      Delete every duplicate except the best photo of each cluster
        """
    )

    parser.add_argument(
        'directory',
        type=Path,
        help='Directory holding the photo library'
    )

    parser.add_argument(
        '-r', '--no-recursive',
        action='store_true',
        help='Do not scan subdirectories'
    )

    parser.add_argument(
        '-w', '--workers',
        type=int,
        default=None,
        help=f'Number of sampling threads. Default: user config or {DEFAULT_WORKERS}'
    )

    parser.add_argument(
        '--exclude-failed',
        action='store_true',
        default=None,
        help='Keep photos that could not be decoded out of duplicate clustering'
    )

    parser.add_argument(
        '-e', '--export',
        type=Path,
        help='Export results to file'
    )

    parser.add_argument(
        '--export-format',
        choices=['txt', 'csv'],
        default='txt',
        help='Export format. Default: txt'
    )

    parser.add_argument(
        '--delete-duplicates',
        action='store_true',
        help='Delete duplicates (keeps the best photo of each cluster) after confirmation'
    )

    parser.add_argument(
        '-y', '--yes',
        action='store_true',
        help='Do not ask for confirmation before deleting'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars (useful for piping output)'
    )

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """Parse command-line arguments (default: sys.argv)."""
    return create_parser().parse_args(argv)


def confirm_action(action: str, count: int) -> bool:
    """
    Prompt user to confirm a file action.

    Returns:
        True if user confirms (types 'y'), False otherwise
    """
    confirm = input(f"\nThis will {action} {count:,} files. Continue? [y/N]: ")
    return confirm.lower() == 'y'


def _print_section_header(title: str) -> None:
    """Print a section header with divider lines."""
    print("\n" + "-" * 70)
    print(title)
    print("-" * 70)


def _print_cluster(number: int, cluster: DuplicateCluster) -> None:
    print(f"\nCluster {number} ({cluster.image_count} photos, "
          f"{cluster.formatted_savings} reclaimable):")
    best = cluster.best_photo
    for photo in cluster.ranked_photos:
        marker = "  [KEEP]" if photo == best else "  [DUPE]"
        similarity = f" | {photo.similarity:.0%} similar" if photo.similarity is not None else ""
        print(f"{marker} {photo.identifier}")
        print(f"         {photo.quality.display_name} | {photo.formatted_size}{similarity}")


def print_report(result: AnalysisResult) -> None:
    """
    Print a cleanup report for an analysis result.

    Notes:
        - Clusters appear highest savings first
        - Within a cluster, the keep candidate is listed first as [KEEP]
    """
    print("\n" + "=" * 70)
    print("PHOTO CLEANUP REPORT")
    print("=" * 70)

    print(f"\nPhotos: {result.total_photos:,}   Videos: {result.total_videos:,}   "
          f"Library size: {format_size(result.total_bytes)}")
    print(f"Duplicate clusters: {len(result.clusters):,}   "
          f"Low quality: {len(result.low_quality_photos):,}   "
          f"Blurry: {len(result.blurry_photos):,}")

    if result.clusters:
        _print_section_header("DUPLICATES (visually similar)")
        for i, cluster in enumerate(result.clusters, 1):
            _print_cluster(i, cluster)

    for title, photos in (("LOW QUALITY", result.low_quality_photos),
                          ("BLURRY", result.blurry_photos)):
        if photos:
            _print_section_header(title)
            for photo in photos:
                print(f"  {photo.identifier} ({photo.formatted_size})")

    print("\n" + "=" * 70)
    print(f"Total space recoverable: {result.formatted_savings}")
    print("=" * 70)


def main(argv: Optional[list] = None) -> int:
    """
    Entry point for the CLI.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_arguments(argv)
    logger = setup_logging(args.verbose)

    directory = str(args.directory.expanduser())
    is_valid, error = validate_directory(directory)
    if not is_valid:
        logger.error(error)
        return 1

    if args.workers is not None:
        is_valid, error = validate_workers(args.workers)
        if not is_valid:
            logger.error(error)
            return 1

    engine = AnalysisEngine(
        FilesystemAssetStore(directory, recursive=not args.no_recursive),
        PillowImageDecoder(),
        workers=args.workers,
        exclude_failed_fingerprints=args.exclude_failed,
        show_progress=not args.no_progress,
    )

    if args.verbose:
        engine.subscribe(lambda state, progress: logger.debug(f"{state.value}: {format_progress(progress)}"))

    if not engine.request_authorization():
        logger.error(f"Cannot access library: {directory}")
        return 1

    try:
        result = engine.run_analysis()
    except AuthorizationError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 1

    if result is None:
        return 1

    print_report(result)

    if args.export:
        export_results(result, args.export, args.export_format)
        logger.info(f"Results exported to: {args.export}")

    if args.delete_duplicates:
        to_delete = [p for c in result.clusters for p in c.removable_photos]
        if not to_delete:
            logger.info("No duplicates to delete.")
            return 0
        if not args.yes and not confirm_action('delete', len(to_delete)):
            logger.info("Aborted.")
            return 0
        try:
            refreshed = engine.delete_photos(to_delete)
        except DeletionError as e:
            logger.error(str(e))
            return 1
        if refreshed is not None:
            logger.info(f"Remaining recoverable space: {refreshed.formatted_savings}")

    return 0


__all__ = [
    'main',
    'setup_logging',
    'create_parser',
    'parse_arguments',
    'confirm_action',
    'print_report',
]
