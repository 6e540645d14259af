"""
Result post-processing pipeline for trending service responses.

Normalizes scores, re-sorts when the upstream order can't be trusted,
filters by quality tier and exports to CSV.
"""
from .models import QualityTier, RegionalRelevance, ResultBatch, VideoRecord
from .normalizer import normalize
from .sorter import sort_descending
from .quality import QUALITY_TIERS, apply_tier, get_tier, tier_counts
from .exporter import derive_filename, export_to_file, to_delimited_text
from .pipeline import export_view, process_response, view
from .summary import BatchSummary, summarize

__all__ = [
    "QualityTier",
    "RegionalRelevance",
    "ResultBatch",
    "VideoRecord",
    "normalize",
    "sort_descending",
    "QUALITY_TIERS",
    "apply_tier",
    "get_tier",
    "tier_counts",
    "derive_filename",
    "export_to_file",
    "to_delimited_text",
    "export_view",
    "process_response",
    "view",
    "BatchSummary",
    "summarize",
]
