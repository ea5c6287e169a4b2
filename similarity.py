"""
Vector similarity and best-match search.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from data_models import EmbeddedEntry, MatchResult

LOGGER = logging.getLogger(__name__)

# Score reported when either vector has zero magnitude: the lowest possible
# cosine similarity, so a degenerate embedding never wins a match by accident.
ZERO_VECTOR_SIMILARITY = -1.0


class NoMatchError(RuntimeError):
    """Raised when there are no candidate entries to match against."""


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity between two vectors.

    The result is clamped to [-1, 1]. If either vector has zero magnitude the
    similarity is undefined and ZERO_VECTOR_SIMILARITY is returned instead.

    Raises:
        ValueError: If the vectors are empty, differ in length, contain
            non-finite values, or overflow.
    """
    vec_a = np.asarray(a, dtype=float)
    vec_b = np.asarray(b, dtype=float)
    if vec_a.ndim != 1 or vec_b.ndim != 1:
        raise ValueError("Vectors must be one-dimensional")
    if vec_a.size == 0 or vec_b.size == 0:
        raise ValueError("Vectors must not be empty")
    if vec_a.shape != vec_b.shape:
        raise ValueError(
            f"Vector length mismatch: {vec_a.size} != {vec_b.size}"
        )

    if not (np.isfinite(vec_a).all() and np.isfinite(vec_b).all()):
        raise ValueError("Vectors must contain only finite values")

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        LOGGER.warning("Zero-magnitude vector in similarity computation")
        return ZERO_VECTOR_SIMILARITY

    similarity = float(np.dot(vec_a, vec_b) / (norm_a * norm_b))
    # Overflow in the norms or the dot product
    if not math.isfinite(similarity):
        raise ValueError("Similarity is not finite")
    return max(-1.0, min(1.0, similarity))


def find_best_match(source: EmbeddedEntry, targets: Sequence[EmbeddedEntry]) -> MatchResult:
    """
    Find the target entry most similar to the source entry.

    Ties keep the first target encountered.

    Args:
        source: Entry to match.
        targets: Candidate entries, scanned in order.

    Returns:
        MatchResult with the best target and its score.

    Raises:
        NoMatchError: If targets is empty.
    """
    best_match = None
    best_score = float("-inf")

    for target in targets:
        score = cosine_similarity(source.embedding, target.embedding)
        if score > best_score:
            best_score = score
            best_match = target

    if best_match is None:
        raise NoMatchError("No match found")

    return MatchResult(source=source, match=best_match, score=best_score)
