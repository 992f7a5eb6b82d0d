"""
Data models for photoprint.

Contains dataclasses and enums for run configuration, fingerprints,
match results and per-worker statistics.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .config import (
    IMAGE_EXTENSIONS,
    FINGERPRINT_SIZE,
    FINGERPRINT_BIT_DEPTH,
    SUPPORTED_BIT_DEPTHS,
    DEFAULT_FUZZ_FACTOR,
)
from .exceptions import ConfigError
from .utils.validators import (
    validate_directory,
    validate_thresholds,
    validate_fingerprint_size,
    validate_workers,
)


class WorkerMode(Enum):
    """The three operating modes of a run."""
    GENERATE = "generate"
    FIND_DUPLICATES = "find-duplicates"
    EXTRACT_METADATA = "extract-metadata"


class Classification(Enum):
    """Bucket a distortion score falls into relative to the two thresholds."""
    IDENTICAL = "identical"
    SIMILAR = "similar"
    DISTINCT = "distinct"


@dataclass(frozen=True)
class WorkerOptions:
    """
    Immutable configuration for one run, shared read-only by all workers.

    Attributes:
        mode: Which per-file operation the pool applies
        source: Images to fingerprint (Generate), stored fingerprints
            (FindDuplicates) or images to scan for timestamps (ExtractMetadata)
        destination: Fingerprint output directory (Generate) or the directory
            searched for duplicates (FindDuplicates). Unused by ExtractMetadata.
        threads: Number of worker threads, at least 1
        fuzz_factor: Per-pixel tolerance applied before scoring (0-255)
        low_threshold: Scores below this are identical
        high_threshold: Scores below this (and >= low) are similar
        fingerprint_size: (width, height) every image is normalized to
        bit_depth: Bit depth of the normalized image (8 or 32)
        extensions: Recognized lowercase image suffixes, including the dot
        collect_matches: Keep every MatchResult on RunStats (needed only
            for the pair export)
    """
    mode: WorkerMode
    source: str
    destination: Optional[str] = None
    threads: int = 1
    fuzz_factor: float = DEFAULT_FUZZ_FACTOR
    low_threshold: Optional[float] = None
    high_threshold: Optional[float] = None
    fingerprint_size: tuple[int, int] = FINGERPRINT_SIZE
    bit_depth: int = FINGERPRINT_BIT_DEPTH
    extensions: frozenset[str] = field(default_factory=lambda: frozenset(IMAGE_EXTENSIONS))
    collect_matches: bool = False

    @property
    def pool_root(self) -> str:
        """Directory crawled by the worker pool."""
        if self.mode is WorkerMode.FIND_DUPLICATES:
            return self.destination
        return self.source

    def is_recognized(self, path: str) -> bool:
        """Check whether a path carries a recognized image suffix."""
        return os.path.splitext(path)[1].lower() in self.extensions

    def validate(self) -> None:
        """
        Check the options before any thread starts.

        Raises:
            ConfigError: If any setting is missing or out of range
        """
        if not isinstance(self.mode, WorkerMode):
            raise ConfigError(f"Invalid mode: {self.mode!r}")

        is_valid, error = validate_workers(self.threads)
        if not is_valid:
            raise ConfigError(error)

        is_valid, error = validate_directory(self.source)
        if not is_valid:
            raise ConfigError(f"Source: {error}")

        if self.mode in (WorkerMode.GENERATE, WorkerMode.FIND_DUPLICATES):
            is_valid, error = validate_directory(self.destination)
            if not is_valid:
                raise ConfigError(f"Destination: {error}")

        if self.mode is WorkerMode.FIND_DUPLICATES:
            is_valid, error = validate_thresholds(self.low_threshold, self.high_threshold)
            if not is_valid:
                raise ConfigError(error)

        if self.fuzz_factor < 0:
            raise ConfigError("Fuzz factor must not be negative")

        is_valid, error = validate_fingerprint_size(self.fingerprint_size)
        if not is_valid:
            raise ConfigError(error)

        if self.bit_depth not in SUPPORTED_BIT_DEPTHS:
            raise ConfigError(
                f"Bit depth must be one of {', '.join(map(str, SUPPORTED_BIT_DEPTHS))}"
            )

        if not self.extensions:
            raise ConfigError("At least one image extension is required")


@dataclass(frozen=True)
class Fingerprint:
    """
    A normalized image loaded from the fingerprint directory.

    Attributes:
        path: Path of the stored fingerprint file
        image: Decoded, normalized PIL image
        pixels: Read-only array of the normalized pixels used for comparison
        comment: Embedded comment attribute (original source path), may be empty
    """
    path: str
    image: Any = field(compare=False)
    pixels: Any = field(compare=False)
    comment: str = ""

    @property
    def identity(self) -> str:
        """Display name: the embedded comment, else the stored filename stem."""
        if self.comment:
            return self.comment
        return os.path.splitext(os.path.basename(self.path))[0]


@dataclass(frozen=True)
class MatchResult:
    """
    A candidate image that matched a stored fingerprint.

    Attributes:
        candidate: Path of the image in the searched directory
        match: Identity of the matched fingerprint
        score: Distortion score (lower is more similar)
        classification: IDENTICAL or SIMILAR
    """
    candidate: str
    match: str
    score: float
    classification: Classification

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'candidate': self.candidate,
            'match': self.match,
            'classification': self.classification.value,
            'score': self.score,
        }

    def to_json(self) -> str:
        """Serialize as a single JSON line."""
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def as_pair(self) -> list[str]:
        """Return the [leftPath, rightPath] pair consumed by the review tool."""
        return [self.candidate, self.match]

    @classmethod
    def from_dict(cls, data: dict) -> 'MatchResult':
        """Create MatchResult from dictionary."""
        return cls(
            candidate=data['candidate'],
            match=data['match'],
            score=data.get('score', 0.0),
            classification=Classification(data.get('classification', 'similar')),
        )


@dataclass
class RunStats:
    """
    Counters for one worker, merged after the pool joins.

    Each worker owns its instance, so no locking is needed. ``matches``
    is only filled when the run was configured with ``collect_matches``.
    """
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    emitted: int = 0
    matches: list = field(default_factory=list)

    def merge(self, other: 'RunStats') -> 'RunStats':
        """Fold another worker's counters into this one."""
        self.processed += other.processed
        self.skipped += other.skipped
        self.failed += other.failed
        self.emitted += other.emitted
        self.matches.extend(other.matches)
        return self


__all__ = [
    'WorkerMode',
    'Classification',
    'WorkerOptions',
    'Fingerprint',
    'MatchResult',
    'RunStats',
]
