"""
Quality tiers for narrowing an already-fetched batch.

Filtering is a pure projection of the stored batch: it never re-normalizes,
never renumbers ranks and never touches the input, so switching tiers back
to "all" always recovers every original record.
"""
import logging
from typing import Dict, List, Sequence, Union

from ..errors import InvalidTierError
from .models import QualityTier, VideoRecord

logger = logging.getLogger(__name__)

# Ordered from most to least permissive; thresholds never decrease
QUALITY_TIERS = (
    QualityTier("all", "All results", min_confidence=0.0, min_regional_score=0.0),
    QualityTier("low-spam", "Low spam", min_confidence=0.4, min_regional_score=0.1),
    QualityTier("good", "Good quality", min_confidence=0.5, min_regional_score=0.3),
    QualityTier("regional", "Regionally relevant", min_confidence=0.6, min_regional_score=0.5),
    QualityTier("premium", "Premium", min_confidence=0.7, min_regional_score=0.7),
)

TIERS_BY_KEY: Dict[str, QualityTier] = {tier.key: tier for tier in QUALITY_TIERS}

DEFAULT_TIER = "all"


def get_tier(key: str) -> QualityTier:
    """Look up a tier by key, raising InvalidTierError if it doesn't exist."""
    try:
        return TIERS_BY_KEY[key]
    except KeyError:
        raise InvalidTierError(key) from None


def passes_tier(record: VideoRecord, tier: QualityTier) -> bool:
    """Check one record against a tier's thresholds.

    Blacklisted records never pass, not even the "all" tier.
    """
    relevance = record.regional_relevance
    return (
        not relevance.blacklisted
        and relevance.confidence >= tier.min_confidence
        and relevance.score >= tier.min_regional_score
    )


def apply_tier(
    records: Sequence[VideoRecord],
    tier: Union[str, QualityTier],
    strict: bool = False,
) -> List[VideoRecord]:
    """Return the records passing a quality tier, in their original order.

    Args:
        records: The raw batch. Not modified.
        tier: Tier key or QualityTier.
        strict: Raise InvalidTierError for an unknown key instead of
            returning the batch unfiltered.

    Returns:
        A new list, empty when nothing qualifies.
    """
    if isinstance(tier, str):
        if tier not in TIERS_BY_KEY:
            if strict:
                raise InvalidTierError(tier)
            logger.warning("Unknown quality tier %r, showing unfiltered results", tier)
            return list(records)
        tier = TIERS_BY_KEY[tier]

    kept = [r for r in records if passes_tier(r, tier)]
    logger.debug("Tier %s kept %d of %d records", tier.key, len(kept), len(records))
    return kept


def tier_counts(records: Sequence[VideoRecord]) -> Dict[str, int]:
    """Number of records each tier would keep."""
    return {
        tier.key: sum(1 for r in records if passes_tier(r, tier))
        for tier in QUALITY_TIERS
    }
