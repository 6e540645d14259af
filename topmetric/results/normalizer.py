"""
Rescale trending scores onto 0-10 relative to the strongest video in a batch.
"""
import dataclasses
import logging
import math
from typing import List, Sequence

import numpy as np

from .models import VideoRecord

logger = logging.getLogger(__name__)

MAX_NORMALIZED_SCORE = 10.0


def clamp_score(value: float) -> float:
    """Clamp a normalized score into [0, 10]; non-finite values become 0."""
    if value is None or not math.isfinite(value):
        return 0.0
    # + 0.0 turns a -0.0 into 0.0
    return float(min(MAX_NORMALIZED_SCORE, max(0.0, value))) + 0.0


def _trending_score(record: VideoRecord) -> float:
    value = record.trending_score
    if value is None or not math.isfinite(value):
        return 0.0
    return max(float(value), 0.0)


def normalize(records: Sequence[VideoRecord], trust_upstream: bool = False) -> List[VideoRecord]:
    """Compute ``normalized_score`` for every record in a batch.

    The reference is the batch's own maximum ``trending_score``; an empty
    batch or a maximum <= 0 uses 1 so nothing divides by zero.

    Args:
        records: The batch to normalize. Not modified.
        trust_upstream: Keep a finite score already supplied by the
            trending service (still clamped to [0, 10]) instead of
            recomputing it.

    Returns:
        New VideoRecords in the same order.
    """
    if not records:
        return []

    scores = np.array([_trending_score(r) for r in records], dtype=np.float64)
    top_score = scores.max()
    if top_score <= 0:
        top_score = 1.0

    relative = np.clip(scores / top_score * MAX_NORMALIZED_SCORE, 0.0, MAX_NORMALIZED_SCORE)

    normalized = []
    for record, value in zip(records, relative):
        upstream = record.normalized_score
        if trust_upstream and upstream is not None and math.isfinite(upstream):
            if not 0.0 <= upstream <= MAX_NORMALIZED_SCORE:
                logger.debug(
                    "Clamping upstream normalized score %.3f for rank %d",
                    upstream, record.rank,
                )
            score = clamp_score(upstream)
        else:
            score = clamp_score(float(value))
        normalized.append(dataclasses.replace(record, normalized_score=score))

    logger.debug("Normalized %d records against top score %.3f", len(normalized), top_score)
    return normalized
