"""
Input validation for photoprint.

Provides validators for directories, worker counts, thresholds and
fingerprint dimensions. Each returns an (is_valid, error_message) tuple.
"""

from __future__ import annotations

import os
from typing import Optional


def validate_directory(directory: Optional[str]) -> tuple[bool, str]:
    """
    Validate that a directory exists and is readable.

    Args:
        directory: Directory path to validate

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_directory('/nonexistent/directory')
        (False, 'Directory not found: /nonexistent/directory')
    """
    if not directory:
        return False, "Directory path is required"

    if not os.path.exists(directory):
        return False, f"Directory not found: {directory}"

    if not os.path.isdir(directory):
        return False, f"Path is not a directory: {directory}"

    if not os.access(directory, os.R_OK | os.X_OK):
        return False, f"Cannot read directory (permission denied): {directory}"

    return True, ""


def validate_workers(workers) -> tuple[bool, str]:
    """
    Validate the worker thread count.

    Examples:
        >>> validate_workers(4)
        (True, '')
        >>> validate_workers(0)
        (False, 'Thread count must be at least 1')
    """
    try:
        workers = int(workers)
    except (ValueError, TypeError):
        return False, "Thread count must be an integer"
    if workers < 1:
        return False, "Thread count must be at least 1"
    return True, ""


def validate_thresholds(low, high) -> tuple[bool, str]:
    """
    Validate the pair of distortion thresholds.

    Both are required; there is no built-in default because a sensible
    value depends on the corpus and the fingerprint size.

    Args:
        low: Scores below this are identical
        high: Scores below this (and >= low) are similar

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_thresholds(10, 1000)
        (True, '')
        >>> validate_thresholds(1000, 10)
        (False, 'Low threshold (1000) must be below high threshold (10)')
    """
    if low is None or high is None:
        return False, "Both low and high distortion thresholds are required"
    try:
        low = float(low)
        high = float(high)
    except (ValueError, TypeError):
        return False, "Thresholds must be numbers"
    if low < 0:
        return False, "Low threshold must not be negative"
    if not low < high:
        return False, f"Low threshold ({low:g}) must be below high threshold ({high:g})"
    return True, ""


def validate_fingerprint_size(size) -> tuple[bool, str]:
    """Validate a (width, height) fingerprint size."""
    try:
        width, height = size
        width = int(width)
        height = int(height)
    except (ValueError, TypeError):
        return False, "Fingerprint size must be a (width, height) pair"
    if width < 1 or height < 1:
        return False, "Fingerprint dimensions must be positive"
    return True, ""


def validate_output_file(path) -> tuple[bool, str]:
    """
    Validate that a file can be created or overwritten at ``path``.

    Examples:
        >>> validate_output_file('/nonexistent/dir/pairs.json')
        (False, 'Output directory not found: /nonexistent/dir')
    """
    path = os.path.abspath(path)
    if os.path.isdir(path):
        return False, f"Output path is a directory: {path}"

    parent = os.path.dirname(path)
    if not os.path.isdir(parent):
        return False, f"Output directory not found: {parent}"

    if os.path.exists(path):
        if not os.access(path, os.W_OK):
            return False, f"Cannot write output file (permission denied): {path}"
    elif not os.access(parent, os.W_OK | os.X_OK):
        return False, f"Cannot write to output directory (permission denied): {parent}"

    return True, ""


def parse_size(value: str) -> tuple[int, int]:
    """
    Parse a 'WxH' string into a (width, height) tuple.

    Raises:
        ValueError: If the string is not of the form 'WxH'

    Examples:
        >>> parse_size('100x100')
        (100, 100)
    """
    parts = value.lower().split('x')
    if len(parts) != 2:
        raise ValueError(f"Expected WIDTHxHEIGHT, got {value!r}")
    return int(parts[0]), int(parts[1])


def parse_extensions(value: str) -> frozenset[str]:
    """
    Parse a comma separated extension list, normalizing case and leading dot.

    Examples:
        >>> sorted(parse_extensions('JPG, .png'))
        ['.jpg', '.png']
    """
    extensions = set()
    for item in value.split(','):
        item = item.strip().lower()
        if not item:
            continue
        if not item.startswith('.'):
            item = '.' + item
        extensions.add(item)
    return frozenset(extensions)


__all__ = [
    'validate_directory',
    'validate_workers',
    'validate_thresholds',
    'validate_fingerprint_size',
    'validate_output_file',
    'parse_size',
    'parse_extensions',
]
