"""
Result pipeline orchestrator.

Turns one trending service response into an immutable ResultBatch:
validate -> normalize -> (fallback sort) -> snapshot. Quality filtering and
export run later against the snapshot, as often as the caller likes.
"""
import logging
from typing import Any, Dict, List, Union

from .exporter import to_delimited_text
from .models import QualityTier, ResultBatch, VideoRecord
from .normalizer import normalize
from .quality import apply_tier
from .response import check_response, extract_video_list, parse_records
from .sorter import sort_descending

logger = logging.getLogger(__name__)


def _as_int(value) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError, OverflowError):
        return 0


def process_response(
    payload: Dict[str, Any],
    trust_order: bool = True,
    trust_upstream_scores: bool = False,
) -> ResultBatch:
    """Run the full post-processing pipeline on one service response.

    Steps:
        1. Reject ``success: false`` responses (UpstreamFailure)
        2. Validate and default-fill every video record
        3. Normalize scores against the batch's top trending score
        4. Re-sort locally if the upstream order isn't trusted
        5. Freeze the result as a ResultBatch

    Args:
        payload: Decoded JSON of an ``/analyze`` response.
        trust_order: Keep the service's ordering. When False the
            deterministic fallback sort is applied.
        trust_upstream_scores: Keep (clamped) normalized scores that the
            service already supplied.

    Returns:
        The immutable batch snapshot.
    """
    # 1. Short-circuit failures before touching any record
    check_response(payload)

    # 2. Boundary validation
    items = extract_video_list(payload)
    records = parse_records(items)

    # 3. Normalize
    records = normalize(records, trust_upstream=trust_upstream_scores)

    # 4. Fallback ordering
    if not trust_order:
        records = sort_descending(records)

    algorithm_info = payload.get("algorithm_info")
    batch = ResultBatch(
        records=tuple(records),
        analyzed_count=_as_int(payload.get("analyzed_videos", len(items))),
        timestamp=str(payload.get("timestamp") or ""),
        query=str(payload.get("query") or ""),
        region=str(payload.get("region") or ""),
        algorithm_used=payload.get("algorithm_used"),
        algorithm_info=algorithm_info if isinstance(algorithm_info, dict) else {},
    )

    logger.info(
        "Processed batch: %d records (%d analyzed upstream)%s",
        len(batch),
        batch.analyzed_count,
        "" if trust_order else ", re-sorted locally",
    )
    return batch


def view(batch: ResultBatch, tier: Union[str, QualityTier] = "all") -> List[VideoRecord]:
    """The records of a batch the user currently sees for a tier."""
    return apply_tier(batch.records, tier)


def export_view(batch: ResultBatch, tier: Union[str, QualityTier] = "all") -> str:
    """CSV text of the currently filtered view of a batch."""
    return to_delimited_text(view(batch, tier))
