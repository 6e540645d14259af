"""
Deterministic fallback ordering for when the upstream ranking can't be trusted.
"""
import math
from typing import List, Sequence

from .models import VideoRecord


def _finite(value) -> float:
    # NaN would make the order input-dependent
    if value is None or not math.isfinite(value):
        return 0.0
    return float(value)


def _sort_key(record: VideoRecord):
    return (
        -_finite(record.trending_score),
        -_finite(record.regional_relevance.sort_score),
        record.rank,
    )


def sort_descending(records: Sequence[VideoRecord]) -> List[VideoRecord]:
    """Order records by trending score, then regional score, then rank.

    Trending score and regional relevance score sort descending, the
    original rank ascending; a record whose service sent no regional score
    ranks as 0 there. ``sorted`` is stable, so records that tie on all three
    keys keep their input order and repeated calls always give the same
    result. Ranks are left untouched.
    """
    return sorted(records, key=_sort_key)
