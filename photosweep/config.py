"""
Configuration constants for PhotoSweep.

This module contains the fixed design constants of the analysis engine:
- Quality tier breakpoints for the sharpness score
- Sample resolutions for quality scoring and fingerprinting
- Fingerprint size and the near-duplicate threshold
- Progress weights for each analysis phase
- Supported media extensions for the filesystem library

Runtime-adjustable settings live in user_config.py.
"""

import os

# Sharpness score breakpoints (lower bound inclusive).
# score < 0.15 is Blurry; anything at or above the last bound is Excellent.
BLURRY_BELOW = 0.15
POOR_BELOW = 0.30
FAIR_BELOW = 0.50
GOOD_BELOW = 0.70

# Quality sample (aspect-fit, never upscaled)
QUALITY_SAMPLE_SIZE = (300, 300)

# Difference hash sample: one extra column for horizontal comparisons
FINGERPRINT_SAMPLE_SIZE = (9, 8)
FINGERPRINT_BITS = 64

# Maximum Hamming distance (out of 64 bits) for two photos to be near-duplicates
SIMILARITY_THRESHOLD = 5

# Maximum channel value used to normalize edge energy into [0, 1]
MAX_CHANNEL_VALUE = 255.0

# Used when the store cannot report a size: width * height * 4 bytes (RGBA)
FALLBACK_BYTES_PER_PIXEL = 4

# Progress weights per phase; they sum to 1.0
PROGRESS_WEIGHT_IMAGES = 0.5
PROGRESS_WEIGHT_VIDEOS = 0.3
PROGRESS_WEIGHT_CLUSTERING = 0.1
PROGRESS_WEIGHT_AGGREGATION = 0.1

# Default number of sampling workers (1 = sequential baseline)
DEFAULT_WORKERS = 1

# Decompression bomb limit for the filesystem decoder
DEFAULT_MAX_IMAGE_PIXELS = 500_000_000

# Image extensions recognised by the filesystem library
IMAGE_EXTENSIONS = {
    '.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp', '.tiff', '.tif',
    '.heic', '.heif', '.avif',
    '.dng',
}

# Video extensions recognised by the filesystem library (sized, never decoded)
VIDEO_EXTENSIONS = {
    '.mov', '.mp4', '.m4v', '.avi', '.mkv', '.3gp', '.webm', '.mts',
}

# User configuration file location
CONFIG_DIR = os.path.join(os.path.expanduser('~'), '.photosweep')
