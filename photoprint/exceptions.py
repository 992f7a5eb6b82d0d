"""
Exception types for photoprint.

Only ConfigError is fatal; everything else is caught for the single file or
subtree being processed.
"""

from __future__ import annotations


class PhotoprintError(Exception):
    """Base class for all photoprint errors."""


class ConfigError(PhotoprintError):
    """Raised when run configuration is invalid. Reported before any work starts."""


class CrawlError(PhotoprintError):
    """A directory could not be listed during a crawl."""


class DecodeError(PhotoprintError):
    """An image file could not be read or decoded."""

    def __init__(self, path: str, cause: BaseException | str):
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause}")


class EncodeError(PhotoprintError):
    """A normalized image could not be written."""

    def __init__(self, path: str, cause: BaseException | str):
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause}")


__all__ = [
    'PhotoprintError',
    'ConfigError',
    'CrawlError',
    'DecodeError',
    'EncodeError',
]
