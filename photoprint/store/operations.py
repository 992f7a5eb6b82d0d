"""
Per-file operations for the store package.

One function per worker mode. Each handles a single path, records the
outcome on the calling worker's RunStats and never raises for an
unreadable image.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Sequence

from ..config import (
    COMMENT_KEY,
    CAPTURE_TIMESTAMP_KEY,
    FINGERPRINT_EXTENSION,
    EXIF_TIMESTAMP_FORMAT,
    OUTPUT_TIMESTAMP_FORMAT,
)
from ..exceptions import DecodeError, EncodeError
from ..models import Fingerprint, RunStats, WorkerOptions
from .matching import find_matches

logger = logging.getLogger(__name__)


def fingerprint_path(source_path: str, destination: str) -> str:
    """
    Where the fingerprint for a source image is written.

    Fingerprints are stored flat: images with the same base name in
    different source folders map to the same file.
    """
    stem = os.path.splitext(os.path.basename(source_path))[0]
    return os.path.join(destination, stem + FINGERPRINT_EXTENSION)


def convert_exif_timestamp(value: str) -> str:
    """
    Convert an EXIF timestamp to the output format.

    Raises:
        ValueError: If the value is not in EXIF format

    Examples:
        >>> convert_exif_timestamp('2019:07:04 18:30:05')
        '2019-07-04 18:30:05'
    """
    parsed = datetime.strptime(value.strip(), EXIF_TIMESTAMP_FORMAT)
    return parsed.strftime(OUTPUT_TIMESTAMP_FORMAT)


def generate(path: str, options: WorkerOptions, gateway, writer, stats: RunStats) -> None:
    """
    Write a normalized fingerprint for one source image.

    Failures are logged with their cause and the file is skipped.
    """
    writer.write_line(path)
    output_path = fingerprint_path(path, options.destination)
    try:
        image = gateway.decode(path)
        image = gateway.normalize(image, options.fingerprint_size, options.bit_depth)
        gateway.set_attribute(image, COMMENT_KEY, path)
        gateway.encode(image, output_path)
    except (DecodeError, EncodeError) as e:
        logger.warning(f"Skipping {path}: {e.cause}")
        stats.failed += 1
        return
    except (OSError, ValueError) as e:
        logger.warning(f"Skipping {path}: {e}")
        stats.failed += 1
        return

    stats.processed += 1
    stats.emitted += 1


def find_duplicates(
    path: str,
    options: WorkerOptions,
    gateway,
    writer,
    stats: RunStats,
    fingerprints: Sequence[Fingerprint],
) -> None:
    """
    Compare one candidate image against the loaded fingerprints.

    Unreadable files are common in uncurated folders and are skipped
    without a warning.
    """
    try:
        image = gateway.decode(path)
        image = gateway.normalize(image, options.fingerprint_size, options.bit_depth)
    except (DecodeError, OSError, ValueError) as e:
        logger.debug(f"Skipping unreadable candidate {path}: {e}")
        stats.failed += 1
        return

    results = find_matches(
        path,
        image,
        fingerprints,
        gateway,
        options.fuzz_factor,
        options.low_threshold,
        options.high_threshold,
    )
    for result in results:
        writer.write_match(result)

    stats.processed += 1
    stats.emitted += len(results)
    if options.collect_matches:
        stats.matches.extend(results)


def extract_metadata(path: str, options: WorkerOptions, gateway, writer, stats: RunStats) -> None:
    """Emit the capture timestamp of one image, if it has one."""
    try:
        image = gateway.decode(path)
    except DecodeError as e:
        logger.debug(f"Skipping unreadable image {path}: {e}")
        stats.failed += 1
        return

    stats.processed += 1
    taken = gateway.get_attribute(image, CAPTURE_TIMESTAMP_KEY)
    if not taken:
        return

    try:
        timestamp = convert_exif_timestamp(taken)
    except ValueError:
        logger.debug(f"Ignoring malformed timestamp {taken!r} in {path}")
        return

    writer.write_metadata(path, timestamp)
    stats.emitted += 1


__all__ = [
    'fingerprint_path',
    'convert_exif_timestamp',
    'generate',
    'find_duplicates',
    'extract_metadata',
]
