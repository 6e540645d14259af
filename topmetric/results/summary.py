"""
Headline statistics for a result set.
"""
from dataclasses import dataclass, field
from typing import Dict, Sequence

import pandas as pd

from .models import VideoRecord
from .quality import tier_counts

TRENDING_PAGE_SOURCES = ("trending_page",)


@dataclass
class BatchSummary:
    """Aggregate numbers shown above a result list."""
    total: int
    trending_page_videos: int
    api_videos: int
    truly_trending: int
    blacklisted: int
    total_views: int
    mean_normalized_score: float
    mean_engagement_rate: float
    by_tier: Dict[str, int] = field(default_factory=dict)

    def summary(self) -> str:
        lines = [
            f"Results:           {self.total}",
            f"Trending pages:    {self.trending_page_videos}",
            f"API videos:        {self.api_videos}",
            f"Truly trending:    {self.truly_trending}",
            f"Blacklisted:       {self.blacklisted}",
            f"Total views:       {self.total_views:,}",
            f"Mean score:        {self.mean_normalized_score:.1f}/10",
            f"Mean engagement:   {self.mean_engagement_rate:.2%}",
            "",
            "By tier:",
        ]
        for key, count in self.by_tier.items():
            lines.append(f"  {key:<10} {count}")
        return "\n".join(lines)


def summarize(records: Sequence[VideoRecord]) -> BatchSummary:
    """Compute a BatchSummary; an empty set gives all-zero numbers."""
    if not records:
        return BatchSummary(
            total=0,
            trending_page_videos=0,
            api_videos=0,
            truly_trending=0,
            blacklisted=0,
            total_views=0,
            mean_normalized_score=0.0,
            mean_engagement_rate=0.0,
            by_tier=tier_counts(records),
        )

    df = pd.DataFrame(
        [
            {
                "source": r.source,
                "views": r.views,
                "normalized_score": r.normalized_score or 0.0,
                "engagement_rate": r.engagement_rate,
                "is_truly_trending": r.is_truly_trending,
                "blacklisted": r.regional_relevance.blacklisted,
            }
            for r in records
        ]
    )
    from_trending_page = df["source"].isin(TRENDING_PAGE_SOURCES)

    return BatchSummary(
        total=len(df),
        trending_page_videos=int(from_trending_page.sum()),
        api_videos=int((~from_trending_page).sum()),
        truly_trending=int(df["is_truly_trending"].sum()),
        blacklisted=int(df["blacklisted"].sum()),
        total_views=int(df["views"].sum()),
        mean_normalized_score=float(df["normalized_score"].mean()),
        mean_engagement_rate=float(df["engagement_rate"].mean()),
        by_tier=tier_counts(records),
    )
