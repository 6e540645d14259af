"""Tests for batch summary statistics."""
import pytest

from topmetric.results.pipeline import process_response
from topmetric.results.summary import summarize


class TestSummarize:
    def test_sample_batch(self, sample_response):
        batch = process_response(sample_response)
        summary = summarize(batch.records)
        assert summary.total == 3
        assert summary.trending_page_videos == 1
        assert summary.api_videos == 2
        assert summary.truly_trending == 1
        assert summary.blacklisted == 1
        assert summary.total_views == 120000 + 50000 + 999
        assert summary.mean_normalized_score == pytest.approx(5.0)
        assert summary.mean_engagement_rate == pytest.approx((0.0742 + 0.022) / 3)
        assert summary.by_tier["all"] == 2
        assert summary.by_tier["premium"] == 1

    def test_empty(self):
        summary = summarize([])
        assert summary.total == 0
        assert summary.mean_normalized_score == 0.0
        assert summary.by_tier == {
            "all": 0, "low-spam": 0, "good": 0, "regional": 0, "premium": 0,
        }

    def test_summary_text(self, sample_response):
        text = summarize(process_response(sample_response).records).summary()
        assert "Results:           3" in text
        assert "Mean score:        5.0/10" in text
        assert "premium" in text
