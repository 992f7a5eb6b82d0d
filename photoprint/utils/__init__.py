"""
Utilities package for photoprint.

Provides:
- formatters: Human-readable formatting for counts and durations
- validators: Input validation for run configuration
"""

from __future__ import annotations

from . import formatters
from . import validators

from .formatters import format_number, format_elapsed
from .validators import (
    validate_directory,
    validate_workers,
    validate_thresholds,
    validate_fingerprint_size,
    validate_output_file,
    parse_size,
    parse_extensions,
)

__all__ = [
    # Submodules
    'formatters',
    'validators',
    # Formatters
    'format_number',
    'format_elapsed',
    # Validators
    'validate_directory',
    'validate_workers',
    'validate_thresholds',
    'validate_fingerprint_size',
    'validate_output_file',
    'parse_size',
    'parse_extensions',
]
