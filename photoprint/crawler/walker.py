"""
Background directory crawler.

Walks a directory tree on its own thread and feeds every regular file it
finds into a PathQueue, marking the queue complete when enumeration ends.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Optional

from ..exceptions import CrawlError
from .path_queue import PathQueue

logger = logging.getLogger(__name__)


class DirectoryCrawler:
    """
    Enumerates a directory tree into a PathQueue on a background thread.

    Unreadable subdirectories are skipped; the crawl always finishes by
    calling mark_complete() exactly once.

    Attributes:
        root: Directory being crawled (absolute)
        queue: Queue receiving absolute file paths
        files_found: Number of files pushed so far
        errors: CrawlErrors for subtrees that could not be listed
    """

    def __init__(self, root: str | Path, queue: Optional[PathQueue] = None):
        self.root = os.path.abspath(root)
        self.queue = queue if queue is not None else PathQueue()
        self.files_found = 0
        self.errors: list[CrawlError] = []
        self._thread: Optional[threading.Thread] = None

    def start(self, recursive: bool = True) -> 'DirectoryCrawler':
        """
        Launch the crawl on a background thread.

        Args:
            recursive: If False, only direct children of the root are visited

        Returns:
            self, so callers can chain start() onto construction

        Raises:
            RuntimeError: If the crawler was already started
        """
        if self._thread is not None:
            raise RuntimeError("DirectoryCrawler already started")

        self._thread = threading.Thread(
            target=self._crawl,
            args=(recursive,),
            name=f"crawler:{os.path.basename(self.root) or self.root}",
            daemon=True,
        )
        self._thread.start()
        return self

    def join(self, timeout: Optional[float] = None) -> None:
        """Block until the crawl thread has finished."""
        if self._thread is not None:
            self._thread.join(timeout)

    def _on_error(self, error: OSError) -> None:
        crawl_error = CrawlError(f"Cannot list {error.filename}: {error.strerror or error}")
        self.errors.append(crawl_error)
        logger.debug(f"Skipping subtree: {crawl_error}")

    def _crawl(self, recursive: bool) -> None:
        try:
            for dirpath, dirnames, filenames in os.walk(self.root, onerror=self._on_error):
                for name in filenames:
                    path = os.path.join(dirpath, name)
                    # os.walk reports broken links and special files here too
                    if os.path.isfile(path):
                        self.queue.push(path)
                        self.files_found += 1
                if not recursive:
                    dirnames.clear()
        except Exception as e:
            logger.error(f"Crawl of {self.root} aborted: {e}")
        finally:
            self.queue.mark_complete()
            logger.debug(f"Crawl of {self.root} finished: {self.files_found:,} files")


__all__ = ['DirectoryCrawler']
