"""
Configuration constants for photoprint.

This module contains all configurable settings including:
- Supported image extensions
- Fingerprint normalization parameters
- Attribute keys and timestamp formats
"""

import os

# All supported image extensions
IMAGE_EXTENSIONS = {
    # Common formats
    '.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp', '.tiff', '.tif',
    # Other formats
    '.heic', '.heif',
    '.pbm', '.pgm', '.ppm', '.pnm',
    '.tga', '.ico', '.pcx', '.sgi',
    '.jp2', '.j2k', '.jpf', '.jpx',
}

# Extensions that need the optional pillow-heif plugin
HEIF_EXTENSIONS = {'.heic', '.heif'}

# Fingerprint normalization
# 100x100 gives a distortion score range of 0..10000
FINGERPRINT_SIZE = (100, 100)
FINGERPRINT_BIT_DEPTH = 32
SUPPORTED_BIT_DEPTHS = (8, 32)

# Fingerprints are stored uncompressed
FINGERPRINT_EXTENSION = '.tif'
FINGERPRINT_FORMAT = 'TIFF'

# Default per-pixel tolerance applied before distortion scoring (0-255)
DEFAULT_FUZZ_FACTOR = 0

# Default number of worker threads
DEFAULT_WORKERS = os.cpu_count() or 1

# Attribute keys understood by the image gateway
COMMENT_KEY = 'comment'
CAPTURE_TIMESTAMP_KEY = 'exif:DateTimeOriginal'

# EXIF capture timestamp formats
EXIF_TIMESTAMP_FORMAT = '%Y:%m:%d %H:%M:%S'
OUTPUT_TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'

# Largest image Pillow will decode before flagging a decompression bomb
MAX_IMAGE_PIXELS = 500_000_000
