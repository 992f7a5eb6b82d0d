"""
Store package for photoprint.

Provides the fingerprint store with its load phase and worker pool, the
per-file operations for each mode, and the match classifier.

Public API:
- FingerprintStore: Load fingerprints and run the worker pool
- classify: Bucket a distortion score against two thresholds
- find_matches: Compare a candidate against every loaded fingerprint
- convert_exif_timestamp: EXIF timestamp to output format
- fingerprint_path: Destination path of a generated fingerprint
"""

from __future__ import annotations

from .matching import classify, find_matches
from .operations import convert_exif_timestamp, fingerprint_path
from .fingerprint_store import FingerprintStore

__all__ = [
    'FingerprintStore',
    'classify',
    'find_matches',
    'convert_exif_timestamp',
    'fingerprint_path',
]
