"""
Tests for Gamification & Insights
"""

import pytest
from datetime import date, datetime, timedelta, timezone
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cf_analytics.gamification import compute_progression, derive_insights
from cf_analytics.normalizer import normalize_submissions
from cf_analytics.snapshot import build_snapshot

UTC = timezone.utc
TODAY = date(2024, 6, 30)


def daily_solves(days, rating=1700, tags=("dp",)):
    """One accepted submission per day, ending today."""
    raw = []
    for i in range(days):
        day = TODAY - timedelta(days=i)
        ts = int(datetime(day.year, day.month, day.day, 10, tzinfo=UTC).timestamp())
        raw.append({
            "id": i + 1,
            "creationTimeSeconds": ts,
            "problem": {"contestId": 1000 + i, "index": "A", "rating": rating, "tags": list(tags)},
            "verdict": "OK",
        })
    return raw


@pytest.fixture
def veteran():
    return build_snapshot(normalize_submissions(daily_solves(120)), TODAY, UTC)


@pytest.fixture
def beginner():
    raw = [{
        "id": 1,
        "creationTimeSeconds": int(datetime(2024, 6, 1, tzinfo=UTC).timestamp()),
        "problem": {"contestId": 1, "index": "A", "rating": 1000, "tags": ["math"]},
        "verdict": "OK",
    }]
    raw += [{
        "id": 2 + i,
        "creationTimeSeconds": int(datetime(2024, 6, 2, tzinfo=UTC).timestamp()),
        "problem": {"contestId": 1, "index": "B", "rating": 1000, "tags": ["math"]},
        "verdict": "WRONG_ANSWER",
    } for i in range(3)]
    return build_snapshot(normalize_submissions(raw), TODAY, UTC)


class TestProgression:

    def test_xp_and_level(self, veteran):
        prog = compute_progression(veteran)

        assert prog.xp == 1200
        assert prog.level == 3
        assert prog.next_level_xp == 1500
        assert prog.progress == pytest.approx(40.0)

    def test_all_badges(self, veteran):
        names = [b.name for b in compute_progression(veteran).badges]
        assert names == ["Thinker", "Sprinter", "Sharpshooter", "Consistent", "Challenger"]

    def test_beginner_has_no_badges(self, beginner):
        prog = compute_progression(beginner)

        assert prog.xp == 10
        assert prog.level == 1
        assert prog.progress == pytest.approx(2.0)
        assert prog.badges == ()

    def test_to_dict(self, veteran):
        data = compute_progression(veteran).to_dict()
        assert data["badges"][0]["name"] == "Thinker"


class TestInsights:

    def test_beginner_improvements(self, beginner):
        insights = derive_insights(beginner)

        assert insights.strengths == ("Strong in math (1 solved)",)
        assert insights.improvements == (
            "Try harder problems (1400+ rating)",
            "Focus on accuracy - review before submitting",
        )

    def test_veteran_strengths(self, veteran):
        insights = derive_insights(veteran)

        assert "Consistent practice (120 day streak)" in insights.strengths
        assert "High accuracy rate (100.0%)" in insights.strengths
        assert not any("harder" in line for line in insights.improvements)

    def test_few_tags_not_suggested_for_exploring(self):
        raw = [{
            "id": 1,
            "creationTimeSeconds": int(datetime(2024, 6, 1, tzinfo=UTC).timestamp()),
            "problem": {"contestId": 1, "index": "A", "rating": 1500, "tags": ["dp"]},
            "verdict": "OK",
        }]
        insights = derive_insights(build_snapshot(normalize_submissions(raw), TODAY, UTC))

        assert insights.strengths[0] == "Strong in dp (1 solved)"
        assert not any(line.startswith("Explore") for line in insights.improvements)

    def test_explore_least_solved_tags(self):
        counts = {"dp": 5, "greedy": 4, "math": 3, "graphs": 2, "strings": 1}
        raw = []
        for tag, count in counts.items():
            for _ in range(count):
                raw.append({
                    "id": len(raw) + 1,
                    "creationTimeSeconds": int(datetime(2024, 6, 1, tzinfo=UTC).timestamp()) + len(raw),
                    "problem": {"contestId": 100 + len(raw), "index": "A", "rating": 1500, "tags": [tag]},
                    "verdict": "OK",
                })
        insights = derive_insights(build_snapshot(normalize_submissions(raw), TODAY, UTC))

        assert insights.strengths[:3] == (
            "Strong in dp (5 solved)",
            "Strong in greedy (4 solved)",
            "Strong in math (3 solved)",
        )
        assert "Explore math, graphs, strings" in insights.improvements
