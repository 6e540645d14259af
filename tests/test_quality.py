"""
Tests for quality tier filtering.
"""
import pytest

from topmetric.errors import InvalidTierError
from topmetric.results.models import RegionalRelevance, VideoRecord
from topmetric.results.quality import (
    QUALITY_TIERS,
    apply_tier,
    get_tier,
    passes_tier,
    tier_counts,
)


def _make_record(rank, score=0.3, confidence=0.5, blacklisted=False, **kwargs):
    return VideoRecord(
        rank=rank,
        title=f"Video {rank}",
        channel="TestChannel",
        regional_relevance=RegionalRelevance(
            score=score, confidence=confidence, blacklisted=blacklisted,
        ),
        **kwargs,
    )


@pytest.fixture
def batch():
    return [
        _make_record(1, score=0.9, confidence=0.9),
        _make_record(2, score=0.95, confidence=0.95, blacklisted=True),
        _make_record(3),  # default relevance
        _make_record(4, score=0.55, confidence=0.65),
        _make_record(5, score=0.05, confidence=0.2),
    ]


class TestTierTable:
    def test_keys(self):
        assert [t.key for t in QUALITY_TIERS] == ["all", "low-spam", "good", "regional", "premium"]

    def test_thresholds_increase(self):
        for looser, stricter in zip(QUALITY_TIERS, QUALITY_TIERS[1:]):
            assert stricter.min_confidence >= looser.min_confidence
            assert stricter.min_regional_score >= looser.min_regional_score

    def test_all_tier_has_zero_thresholds(self):
        tier = get_tier("all")
        assert tier.min_confidence == 0.0
        assert tier.min_regional_score == 0.0

    def test_get_unknown_tier_raises(self):
        with pytest.raises(InvalidTierError) as exc_info:
            get_tier("platinum")
        assert exc_info.value.key == "platinum"


class TestApplyTier:
    def test_all_drops_only_blacklisted(self, batch):
        assert [r.rank for r in apply_tier(batch, "all")] == [1, 3, 4, 5]

    def test_default_relevance_kept_by_all(self):
        record = VideoRecord(rank=1, title="t", channel="c")
        assert apply_tier([record], "all") == [record]

    def test_blacklisted_excluded_from_every_tier(self):
        record = _make_record(1, score=1.0, confidence=1.0, blacklisted=True)
        for tier in QUALITY_TIERS:
            assert apply_tier([record], tier) == []

    def test_thresholds(self, batch):
        assert [r.rank for r in apply_tier(batch, "low-spam")] == [1, 3, 4]
        assert [r.rank for r in apply_tier(batch, "good")] == [1, 3, 4]
        assert [r.rank for r in apply_tier(batch, "regional")] == [1, 4]
        assert [r.rank for r in apply_tier(batch, "premium")] == [1]

    def test_thresholds_are_inclusive(self):
        record = _make_record(1, score=0.7, confidence=0.7)
        assert apply_tier([record], "premium") == [record]

    def test_premium_subset_of_all(self, batch):
        everything = apply_tier(batch, "all")
        for record in apply_tier(batch, "premium"):
            assert record in everything

    def test_idempotent(self, batch):
        once = apply_tier(batch, "regional")
        assert apply_tier(once, "regional") == once

    def test_accepts_tier_object(self, batch):
        assert apply_tier(batch, get_tier("premium")) == apply_tier(batch, "premium")

    def test_switching_back_recovers_everything(self, batch):
        original = list(batch)
        apply_tier(batch, "premium")
        assert batch == original
        assert len(apply_tier(batch, "all")) == 4

    def test_ranks_not_renumbered(self, batch):
        assert [r.rank for r in apply_tier(batch, "regional")] == [1, 4]

    def test_returns_new_list(self, batch):
        assert apply_tier(batch, "all") is not batch

    def test_nothing_qualifies(self):
        assert apply_tier([_make_record(1, score=0.0, confidence=0.0)], "premium") == []

    def test_empty_batch(self):
        assert apply_tier([], "good") == []

    def test_unknown_tier_fails_open(self, batch):
        result = apply_tier(batch, "platinum")
        assert result == batch
        assert result is not batch

    def test_unknown_tier_strict_raises(self, batch):
        with pytest.raises(InvalidTierError):
            apply_tier(batch, "platinum", strict=True)


class TestTierCounts:
    def test_counts(self, batch):
        assert tier_counts(batch) == {
            "all": 4,
            "low-spam": 3,
            "good": 3,
            "regional": 2,
            "premium": 1,
        }

    def test_passes_tier(self):
        assert passes_tier(_make_record(1), get_tier("good")) is True
        assert passes_tier(_make_record(1), get_tier("regional")) is False
