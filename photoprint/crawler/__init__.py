"""
Crawler package for photoprint.

Provides concurrent directory traversal feeding a thread-safe work queue.

Public API:
- PathQueue: Unbounded queue of discovered paths plus a completion flag
- DirectoryCrawler: Walks a directory tree on a background thread
"""

from __future__ import annotations

from .path_queue import PathQueue
from .walker import DirectoryCrawler

__all__ = [
    'PathQueue',
    'DirectoryCrawler',
]
