"""
Data models for the result pipeline.

The dataclasses are the internal, already-clean shapes every pipeline stage
works on. The pydantic models describe the trending service's loosely typed
JSON and coerce it at the boundary; their validators never reject a field,
they substitute the documented default instead.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Conservative "unknown" relevance for records without a relevance sub-object
DEFAULT_REGIONAL_SCORE = 0.3
DEFAULT_CONFIDENCE = 0.5


@dataclass(frozen=True)
class RegionalRelevance:
    """How well a video fits the requested region, as judged upstream."""
    score: float = DEFAULT_REGIONAL_SCORE  # 0.0-1.0
    confidence: float = DEFAULT_CONFIDENCE  # 0.0-1.0
    blacklisted: bool = False
    explanation: str = ""
    # False when the service sent no score and the default above stands in
    score_supplied: bool = True

    @property
    def sort_score(self) -> float:
        """Score used for ordering; a missing score ranks as 0."""
        return self.score if self.score_supplied else 0.0


def _unknown_relevance() -> RegionalRelevance:
    return RegionalRelevance(score_supplied=False)


@dataclass(frozen=True)
class VideoRecord:
    """One ranked trending video."""
    rank: int
    title: str
    channel: str
    views: int = 0
    likes: int = 0
    comments: int = 0
    trending_score: float = 0.0
    normalized_score: Optional[float] = None  # 0.0-10.0 once normalized
    age_hours: float = 0.0
    duration_seconds: int = 0
    duration_formatted: str = "00:00"
    engagement_rate: float = 0.0  # fraction, 0.05 == 5%
    url: str = ""
    video_id: str = ""
    thumbnail: str = ""
    source: str = ""  # api / trending_page / api_trending
    is_truly_trending: bool = False
    regional_relevance: RegionalRelevance = field(default_factory=_unknown_relevance)


@dataclass(frozen=True)
class QualityTier:
    """A named confidence / regional-score threshold pair."""
    key: str
    label: str
    min_confidence: float
    min_regional_score: float


@dataclass(frozen=True)
class ResultBatch:
    """Immutable snapshot of one search call's normalized results."""
    records: Tuple[VideoRecord, ...]
    analyzed_count: int
    timestamp: str
    query: str = ""
    region: str = ""
    algorithm_used: Optional[str] = None
    algorithm_info: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.records, tuple):
            object.__setattr__(self, "records", tuple(self.records))

    def __len__(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records


# ── Boundary coercion helpers ─────────────────────────────────────────


def _finite_or_none(value) -> Optional[float]:
    """Parse a number, returning None for missing, NaN, inf or junk."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _non_negative(value) -> float:
    number = _finite_or_none(value)
    if number is None or number < 0:
        return 0.0
    return number


def _unit_interval(value, default: float) -> float:
    number = _finite_or_none(value)
    if number is None:
        return default
    return min(1.0, max(0.0, number))


def _as_flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


def _as_text(value) -> str:
    if value is None:
        return ""
    return str(value)


class RelevancePayload(BaseModel):
    """``regionalRelevance`` as sent by the trending service."""
    model_config = ConfigDict(extra="ignore")

    score: Optional[float] = None
    confidence: float = DEFAULT_CONFIDENCE
    blacklisted: bool = False
    explanation: str = ""

    @field_validator("score", mode="before")
    @classmethod
    def _coerce_score(cls, v):
        number = _finite_or_none(v)
        if number is None:
            return None
        return min(1.0, max(0.0, number))

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, v):
        return _unit_interval(v, DEFAULT_CONFIDENCE)

    @field_validator("blacklisted", mode="before")
    @classmethod
    def _coerce_blacklisted(cls, v):
        return _as_flag(v)

    @field_validator("explanation", mode="before")
    @classmethod
    def _coerce_explanation(cls, v):
        return _as_text(v)


class VideoPayload(BaseModel):
    """One entry of ``top_videos`` before it becomes a VideoRecord."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    rank: Optional[int] = None
    video_id: str = ""
    title: str = ""
    channel: str = ""
    views: int = 0
    likes: int = 0
    comments: int = 0
    trending_score: float = 0.0
    normalized_score: Optional[float] = None
    age_hours: float = 0.0
    duration_seconds: int = 0
    duration_formatted: str = ""
    engagement_rate: float = 0.0
    url: str = ""
    thumbnail: str = ""
    source: str = ""
    is_truly_trending: bool = False
    regional_relevance: Optional[RelevancePayload] = Field(
        default=None,
        validation_alias=AliasChoices("regionalRelevance", "regional_relevance"),
    )
    # Flat V6 fields, used when the nested object is missing
    regional_relevance_score: Optional[float] = None
    confidence: Optional[float] = None

    @field_validator("rank", mode="before")
    @classmethod
    def _coerce_rank(cls, v):
        number = _finite_or_none(v)
        if number is None or number < 1:
            return None
        return int(number)

    @field_validator("views", "likes", "comments", "duration_seconds", mode="before")
    @classmethod
    def _coerce_count(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return max(v, 0)
        return int(_non_negative(v))

    @field_validator("trending_score", "age_hours", "engagement_rate", mode="before")
    @classmethod
    def _coerce_metric(cls, v):
        return _non_negative(v)

    @field_validator("normalized_score", "regional_relevance_score", "confidence", mode="before")
    @classmethod
    def _coerce_optional(cls, v):
        return _finite_or_none(v)

    @field_validator(
        "video_id", "title", "channel", "duration_formatted", "url", "thumbnail", "source",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, v):
        return _as_text(v).strip()

    @field_validator("is_truly_trending", mode="before")
    @classmethod
    def _coerce_trending_flag(cls, v):
        return _as_flag(v)

    @field_validator("regional_relevance", mode="before")
    @classmethod
    def _coerce_relevance(cls, v):
        return v if isinstance(v, dict) else None
