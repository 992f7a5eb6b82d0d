"""
Result emission for photoprint.

Worker threads write through a single ResultWriter, which serializes each
line so output from different threads never interleaves mid-line.

Formats:
- FindDuplicates: one JSON object per line
  ``{"candidate": ..., "match": ..., "classification": ..., "score": ...}``
- ExtractMetadata: ``path<TAB>timestamp``
- Generate: the source path of each processed image

export_pairs() writes the aggregated ``[[candidate, match], ...]`` JSON
array read by the pair review tool.
"""

from __future__ import annotations

import json
import sys
import threading
from pathlib import Path
from typing import Iterable, Optional, TextIO

from .models import MatchResult


class ResultWriter:
    """Line-atomic, thread-safe writer for run output."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream if stream is not None else sys.stdout
        self._lock = threading.Lock()

    def write_line(self, line: str) -> None:
        with self._lock:
            self._stream.write(line + "\n")
            self._stream.flush()

    def write_match(self, result: MatchResult) -> None:
        self.write_line(result.to_json())

    def write_metadata(self, path: str, timestamp: str) -> None:
        self.write_line(f"{path}\t{timestamp}")


def read_matches(lines: Iterable[str]) -> list[MatchResult]:
    """Parse JSON Lines match output back into MatchResult objects."""
    results = []
    for line in lines:
        line = line.strip()
        if line:
            results.append(MatchResult.from_dict(json.loads(line)))
    return results


def export_pairs(results: Iterable[MatchResult], output_path: str | Path) -> int:
    """
    Export matches as a JSON array of [candidate, match] pairs.

    Args:
        results: Match results to export
        output_path: Path to output file

    Returns:
        Number of pairs written

    Raises:
        IOError: If file cannot be written
    """
    # Worker completion order is arbitrary; sort for stable files
    pairs = sorted(result.as_pair() for result in results)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(pairs, f, indent=2, ensure_ascii=False)
    return len(pairs)


__all__ = ['ResultWriter', 'read_matches', 'export_pairs']
