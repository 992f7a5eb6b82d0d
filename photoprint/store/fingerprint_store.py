"""
Fingerprint store: load phase and multi-mode worker pool.

A run starts one DirectoryCrawler and exactly ``options.threads`` identical
consume loops on a thread pool. Each loop drains the shared PathQueue and
applies the per-file operation bound to the run's mode.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path
from typing import Any, Callable, Optional

from ..config import FINGERPRINT_SIZE, FINGERPRINT_BIT_DEPTH, IMAGE_EXTENSIONS, COMMENT_KEY
from ..crawler import DirectoryCrawler, PathQueue
from ..exceptions import DecodeError
from ..imaging import ImageGateway
from ..imaging.dependencies import HAS_TQDM, _tqdm_class
from ..models import Fingerprint, RunStats, WorkerMode, WorkerOptions
from ..output import ResultWriter
from ..utils.formatters import format_number, format_elapsed
from . import operations

logger = logging.getLogger(__name__)


class FingerprintStore:
    """
    Owns the loaded fingerprints and runs the worker pool for each mode.

    The fingerprint tuple is built once by load() before any comparison
    worker starts and is never mutated afterwards, so workers read it
    without locking.
    """

    def __init__(
        self,
        gateway: Optional[ImageGateway] = None,
        writer: Optional[ResultWriter] = None,
        show_progress: bool = False,
    ):
        self.gateway = gateway if gateway is not None else ImageGateway()
        self.writer = writer if writer is not None else ResultWriter()
        self.show_progress = show_progress
        self._fingerprints: tuple[Fingerprint, ...] = ()

    @property
    def fingerprints(self) -> tuple[Fingerprint, ...]:
        """Fingerprints in load order."""
        return self._fingerprints

    def load(
        self,
        source: str | Path,
        fingerprint_size: tuple[int, int] = FINGERPRINT_SIZE,
        bit_depth: int = FINGERPRINT_BIT_DEPTH,
        extensions=IMAGE_EXTENSIONS,
    ) -> int:
        """
        Read every fingerprint under ``source`` into memory.

        Crawls recursively and consumes the queue on the calling thread.
        Entries that fail to decode are skipped.

        Args:
            source: Fingerprint directory
            fingerprint_size: Size loaded fingerprints are brought to
            bit_depth: Bit depth loaded fingerprints are brought to
            extensions: Recognized image suffixes

        Returns:
            Number of fingerprints loaded
        """
        crawler = DirectoryCrawler(source, PathQueue()).start(recursive=True)
        logger.info(f"Loading fingerprints from {crawler.root}...")

        pbar: Optional[Any] = None
        if HAS_TQDM and self.show_progress and _tqdm_class is not None:
            pbar = _tqdm_class(desc="Loading fingerprints", unit="img", ncols=80)

        loaded: list[Fingerprint] = []
        try:
            while True:
                entry, complete = crawler.queue.pop()
                if entry is None:
                    if complete:
                        break
                    continue

                if Path(entry).suffix.lower() not in extensions:
                    continue

                try:
                    image = self.gateway.decode(entry)
                    image = self.gateway.normalize(image, fingerprint_size, bit_depth)
                    pixels = self.gateway.to_array(image)
                    pixels.setflags(write=False)
                except (DecodeError, OSError, ValueError) as e:
                    logger.warning(f"Skipping fingerprint {entry}: {e}")
                    continue

                loaded.append(Fingerprint(
                    path=entry,
                    image=image,
                    pixels=pixels,
                    comment=self.gateway.get_attribute(image, COMMENT_KEY) or "",
                ))
                if pbar is not None:
                    pbar.update(1)
        finally:
            if pbar is not None:
                pbar.close()
            crawler.join()

        self._fingerprints = tuple(loaded)
        logger.info(f"Loaded {format_number(len(self._fingerprints))} fingerprints")
        return len(self._fingerprints)

    def _bind_operation(self, options: WorkerOptions) -> Callable[..., None]:
        """Pick the per-file operation for the run's mode."""
        common = dict(options=options, gateway=self.gateway, writer=self.writer)
        table = {
            WorkerMode.GENERATE: partial(operations.generate, **common),
            WorkerMode.FIND_DUPLICATES: partial(
                operations.find_duplicates, fingerprints=self._fingerprints, **common
            ),
            WorkerMode.EXTRACT_METADATA: partial(operations.extract_metadata, **common),
        }
        return table[options.mode]

    def _consume(
        self,
        queue: PathQueue,
        options: WorkerOptions,
        operation: Callable[..., None],
    ) -> RunStats:
        """Worker loop: drain the queue until it is empty and complete."""
        stats = RunStats()
        while True:
            entry, complete = queue.pop()
            if entry is None:
                if complete:
                    break
                continue

            if not options.is_recognized(entry):
                stats.skipped += 1
                continue

            try:
                operation(entry, stats=stats)
            except Exception as e:
                # Per-file failures never propagate past the dispatch
                logger.warning(f"Unexpected error processing {entry}: {e}", exc_info=True)
                stats.failed += 1

        return stats

    def run_workers(self, options: WorkerOptions) -> RunStats:
        """
        Run one mode over its directory with ``options.threads`` workers.

        Args:
            options: Validated before anything starts

        Returns:
            RunStats merged from every worker

        Raises:
            ConfigError: If the options are invalid
        """
        options.validate()
        started = time.monotonic()

        if options.mode is WorkerMode.FIND_DUPLICATES:
            self.load(
                options.source,
                fingerprint_size=options.fingerprint_size,
                bit_depth=options.bit_depth,
                extensions=options.extensions,
            )

        operation = self._bind_operation(options)
        crawler = DirectoryCrawler(options.pool_root).start(recursive=True)
        logger.info(
            f"Running {options.mode.value} on {crawler.root} with {options.threads} threads"
        )

        stats = RunStats()
        try:
            with ThreadPoolExecutor(
                max_workers=options.threads,
                thread_name_prefix=f"photoprint-{options.mode.value}",
            ) as executor:
                futures = [
                    executor.submit(self._consume, crawler.queue, options, operation)
                    for _ in range(options.threads)
                ]
                for future in futures:
                    stats.merge(future.result())
        finally:
            crawler.join()

        elapsed = format_elapsed(time.monotonic() - started)
        logger.info(
            f"Finished {options.mode.value} in {elapsed}: "
            f"{format_number(stats.processed)} processed, "
            f"{format_number(stats.failed)} failed, "
            f"{format_number(stats.skipped)} skipped, "
            f"{format_number(stats.emitted)} emitted"
        )
        if crawler.errors:
            logger.info(f"{format_number(len(crawler.errors))} directories could not be read")
        return stats


__all__ = ['FingerprintStore']
