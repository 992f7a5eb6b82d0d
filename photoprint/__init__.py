"""
photoprint
==========
Batch photo fingerprinting and duplicate finding.

Features:
- Generate normalized, uncompressed fingerprints for a photo tree
- Find identical and similar photos in another tree by comparing against
  stored fingerprints, with tunable thresholds and fuzz factor
- Harvest EXIF capture timestamps
- Concurrent crawler plus configurable worker pool
- JSON output for the pair review tool
"""

__version__ = "1.0.0"

from .models import (
    WorkerMode,
    WorkerOptions,
    Classification,
    Fingerprint,
    MatchResult,
    RunStats,
)
from .config import IMAGE_EXTENSIONS, FINGERPRINT_SIZE, FINGERPRINT_BIT_DEPTH
from .exceptions import PhotoprintError, ConfigError, CrawlError, DecodeError, EncodeError
from .crawler import PathQueue, DirectoryCrawler
from .imaging import ImageGateway, has_heif_support
from .store import FingerprintStore, classify, find_matches, convert_exif_timestamp
from .output import ResultWriter, read_matches, export_pairs

__all__ = [
    "WorkerMode",
    "WorkerOptions",
    "Classification",
    "Fingerprint",
    "MatchResult",
    "RunStats",
    "IMAGE_EXTENSIONS",
    "FINGERPRINT_SIZE",
    "FINGERPRINT_BIT_DEPTH",
    "PhotoprintError",
    "ConfigError",
    "CrawlError",
    "DecodeError",
    "EncodeError",
    "PathQueue",
    "DirectoryCrawler",
    "ImageGateway",
    "has_heif_support",
    "FingerprintStore",
    "classify",
    "find_matches",
    "convert_exif_timestamp",
    "ResultWriter",
    "read_matches",
    "export_pairs",
]
