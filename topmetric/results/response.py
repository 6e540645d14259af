"""
Coerce a trending service ``/analyze`` response into VideoRecords.

The service's JSON is loosely typed and varies by analysis mode. Everything
is validated and default-filled here so the pipeline stages can assume
well-typed input.
"""
import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..errors import UpstreamFailure
from .models import (
    DEFAULT_CONFIDENCE,
    DEFAULT_REGIONAL_SCORE,
    RegionalRelevance,
    VideoPayload,
    VideoRecord,
)

logger = logging.getLogger(__name__)

THUMBNAIL_TEMPLATE = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"

_VIDEO_ID_PATTERNS = (
    re.compile(r"[?&]v=([A-Za-z0-9_-]{6,})"),
    re.compile(r"youtu\.be/([A-Za-z0-9_-]{6,})"),
    re.compile(r"/(?:shorts|embed)/([A-Za-z0-9_-]{6,})"),
)


def extract_video_id(url: str) -> str:
    """Pull the YouTube video id out of a watch / short / embed URL."""
    for pattern in _VIDEO_ID_PATTERNS:
        match = pattern.search(url or "")
        if match:
            return match.group(1)
    return ""


def format_duration(seconds: int) -> str:
    """Format seconds as MM:SS, or H:MM:SS for an hour or more."""
    h, remainder = divmod(max(int(seconds), 0), 3600)
    m, s = divmod(remainder, 60)
    if h:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"


def _relevance_from(payload: VideoPayload) -> RegionalRelevance:
    nested = payload.regional_relevance
    if nested is not None:
        return RegionalRelevance(
            score=DEFAULT_REGIONAL_SCORE if nested.score is None else nested.score,
            confidence=nested.confidence,
            blacklisted=nested.blacklisted,
            explanation=nested.explanation,
            score_supplied=nested.score is not None,
        )

    # V6 payloads carry the two numbers flat on the video
    score = payload.regional_relevance_score
    confidence = payload.confidence
    return RegionalRelevance(
        score=DEFAULT_REGIONAL_SCORE if score is None else min(1.0, max(0.0, score)),
        confidence=DEFAULT_CONFIDENCE if confidence is None else min(1.0, max(0.0, confidence)),
        score_supplied=score is not None,
    )


def build_record(payload: VideoPayload, index: int) -> VideoRecord:
    """Turn a validated payload into a VideoRecord.

    Args:
        payload: Validated service entry.
        index: 0-based position in the service's list, used when the
            entry has no usable rank.

    Returns:
        VideoRecord with every documented default filled in.
    """
    video_id = payload.video_id or extract_video_id(payload.url)
    thumbnail = payload.thumbnail
    if not thumbnail and video_id:
        thumbnail = THUMBNAIL_TEMPLATE.format(video_id=video_id)

    duration_formatted = payload.duration_formatted
    if not duration_formatted:
        duration_formatted = format_duration(payload.duration_seconds)

    return VideoRecord(
        rank=payload.rank if payload.rank is not None else index + 1,
        title=payload.title or "Unknown",
        channel=payload.channel or "Unknown",
        views=payload.views,
        likes=payload.likes,
        comments=payload.comments,
        trending_score=payload.trending_score,
        normalized_score=payload.normalized_score,
        age_hours=payload.age_hours,
        duration_seconds=payload.duration_seconds,
        duration_formatted=duration_formatted,
        engagement_rate=payload.engagement_rate,
        url=payload.url,
        video_id=video_id,
        thumbnail=thumbnail,
        source=payload.source,
        is_truly_trending=payload.is_truly_trending,
        regional_relevance=_relevance_from(payload),
    )


def parse_records(items: Optional[List[Any]]) -> List[VideoRecord]:
    """Validate a raw list of service entries.

    Entries that are not JSON objects are skipped; bad fields inside an
    object fall back to defaults. One broken entry never aborts the batch.
    """
    records = []
    for index, item in enumerate(items or []):
        if not isinstance(item, dict):
            logger.warning("Skipping malformed record at position %d: %r", index, item)
            continue
        try:
            payload = VideoPayload.model_validate(item)
        except ValidationError as e:
            logger.warning("Skipping record at position %d: %s", index, e)
            continue
        records.append(build_record(payload, index))

    logger.debug("Parsed %d of %d records", len(records), len(items or []))
    return records


def check_response(payload: Dict[str, Any]) -> None:
    """Raise UpstreamFailure unless the service reported success."""
    if not isinstance(payload, dict):
        raise UpstreamFailure("Trending service returned a non-object response")
    if payload.get("success") is not True:
        message = payload.get("error") or payload.get("message")
        raise UpstreamFailure(str(message) if message else None)


def extract_video_list(payload: Dict[str, Any]) -> List[Any]:
    """Return the video list of a response, tolerating mode-specific keys."""
    items = payload.get("top_videos")
    if items is None:
        # Some analysis modes name the list differently
        items = payload.get("videos")
    if not isinstance(items, list):
        return []
    return items
