"""
Matching module for the store package.

Classifies distortion scores and compares one normalized candidate against
every loaded fingerprint.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from ..models import Classification, Fingerprint, MatchResult

logger = logging.getLogger(__name__)


def classify(score: float, low_threshold: float, high_threshold: float) -> Classification:
    """
    Bucket a distortion score.

    Args:
        score: Distortion score (lower is more similar)
        low_threshold: Scores below this are identical
        high_threshold: Scores below this (and >= low) are similar

    Returns:
        IDENTICAL, SIMILAR or DISTINCT

    Examples:
        >>> classify(0, 10, 1000)
        <Classification.IDENTICAL: 'identical'>
        >>> classify(500, 10, 1000)
        <Classification.SIMILAR: 'similar'>
        >>> classify(1500, 10, 1000)
        <Classification.DISTINCT: 'distinct'>
    """
    if score < low_threshold:
        return Classification.IDENTICAL
    if score < high_threshold:
        return Classification.SIMILAR
    return Classification.DISTINCT


def find_matches(
    candidate_path: str,
    candidate: Any,
    fingerprints: Sequence[Fingerprint],
    gateway,
    fuzz_factor: float,
    low_threshold: float,
    high_threshold: float,
) -> list[MatchResult]:
    """
    Compare a normalized candidate against every fingerprint in load order.

    There is no early exit: a candidate may match several fingerprints.

    Args:
        candidate_path: Path reported in each MatchResult
        candidate: Normalized candidate image or pixel array
        fingerprints: Loaded fingerprint snapshot (read only)
        gateway: ImageGateway providing compare()
        fuzz_factor: Per-pixel tolerance applied before scoring
        low_threshold: Identical below this score
        high_threshold: Similar below this score

    Returns:
        MatchResults for identical and similar pairs only
    """
    pixels = gateway.to_array(candidate)
    results: list[MatchResult] = []

    for fingerprint in fingerprints:
        try:
            score = gateway.compare(pixels, fingerprint.pixels, fuzz_factor)
        except ValueError as e:
            logger.debug(f"Cannot compare {candidate_path} with {fingerprint.path}: {e}")
            continue

        classification = classify(score, low_threshold, high_threshold)
        if classification is Classification.DISTINCT:
            continue

        results.append(MatchResult(
            candidate=candidate_path,
            match=fingerprint.identity,
            score=score,
            classification=classification,
        ))

    return results


__all__ = ['classify', 'find_matches']
