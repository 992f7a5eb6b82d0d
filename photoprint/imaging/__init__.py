"""
Imaging package for photoprint.

Public API:
- ImageGateway: Pillow/numpy implementation of decode, normalize,
  attribute access, encode and compare
- has_heif_support: Check if HEIC/HEIF support is available
"""

from __future__ import annotations

from .gateway import ImageGateway
from .dependencies import HAS_HEIF_SUPPORT


def has_heif_support() -> bool:
    """Check if HEIC/HEIF support is available."""
    return HAS_HEIF_SUPPORT


__all__ = [
    'ImageGateway',
    'has_heif_support',
]
