"""
Pytest configuration and fixtures.
"""
import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture
def sample_response():
    """A successful /analyze response with three videos."""
    return {
        "success": True,
        "query": "gaming",
        "region": "DE",
        "algorithm_used": "momentum_v6",
        "analysis_mode": "trending_pages",
        "analyzed_videos": 48,
        "timestamp": "2026-10-19T12:00:00Z",
        "algorithm_info": {"formula": "views/h*0.6 + engagement*0.3 + decay*0.1"},
        "top_videos": [
            {
                "rank": 1,
                "video_id": "aaaaaaaaaaa",
                "title": "Top gaming video",
                "channel": "ChannelOne",
                "views": 120000,
                "likes": 8000,
                "comments": 900,
                "trending_score": 100.0,
                "age_hours": 5.5,
                "duration_seconds": 754,
                "duration_formatted": "12:34",
                "engagement_rate": 0.0742,
                "url": "https://www.youtube.com/watch?v=aaaaaaaaaaa",
                "thumbnail": "https://img.youtube.com/vi/aaaaaaaaaaa/hqdefault.jpg",
                "source": "trending_page",
                "is_truly_trending": True,
                "regionalRelevance": {
                    "score": 0.9,
                    "confidence": 0.8,
                    "blacklisted": False,
                    "explanation": "German title and channel",
                },
            },
            {
                "rank": 2,
                "title": 'He said "hi", twice',
                "channel": "ChannelTwo",
                "views": 50000,
                "likes": 1000,
                "comments": 100,
                "trending_score": 50.0,
                "age_hours": 20,
                "duration_seconds": 300,
                "engagement_rate": 0.022,
                "url": "https://youtu.be/bbbbbbbbbbb",
                "source": "api",
            },
            {
                "rank": 3,
                "title": "Spam compilation",
                "channel": "SpamChannel",
                "views": 999,
                "likes": 1,
                "comments": 0,
                "trending_score": 0,
                "url": "https://www.youtube.com/watch?v=ccccccccccc",
                "source": "api",
                "regionalRelevance": {
                    "score": 0.95,
                    "confidence": 0.95,
                    "blacklisted": True,
                    "explanation": "Known spam channel",
                },
            },
        ],
    }
