"""
Tests for Wrong-Pattern Miner
"""

import pytest
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cf_analytics.models import Problem, Submission, Verdict
from cf_analytics.patterns import WrongPattern, mine_wrong_patterns, rating_bucket


def rejected(rating, tags, verdict=Verdict.WRONG_ANSWER, index="A"):
    return Submission(
        submission_id=None,
        problem=Problem(contest_id=1, index=index, rating=rating, tags=tuple(tags)),
        verdict=verdict,
        submitted_at=0,
    )


class TestRatingBucket:

    @pytest.mark.parametrize("rating,bucket", [
        (1190, 1200),
        (1210, 1200),
        (1250, 1200),
        (1260, 1300),
        (800, 800),
    ])
    def test_nearest_hundred(self, rating, bucket):
        assert rating_bucket(rating) == bucket


class TestMineWrongPatterns:

    def test_reference_bucket(self):
        """Three WA on dp at 1190/1210/1250 form one dp-1200 pattern."""
        subs = [rejected(r, ["dp"]) for r in (1190, 1210, 1250)]
        patterns = mine_wrong_patterns(subs)

        assert patterns == (WrongPattern(tag="dp", rating=1200, count=3),)
        assert patterns[0].key == "dp-1200"

    def test_accepted_ignored(self):
        subs = [rejected(1200, ["dp"], verdict=Verdict.OK)]
        assert mine_wrong_patterns(subs) == ()

    def test_unrated_ignored(self):
        assert mine_wrong_patterns([rejected(None, ["dp"])]) == ()

    def test_every_tag_counted(self):
        patterns = mine_wrong_patterns([rejected(1500, ["dp", "math"])])
        assert {(p.tag, p.rating) for p in patterns} == {("dp", 1500), ("math", 1500)}

    def test_ranked_by_frequency_top_five(self):
        subs = []
        for i, tag in enumerate(["a", "b", "c", "d", "e", "f"]):
            subs += [rejected(1000, [tag])] * (i + 1)
        patterns = mine_wrong_patterns(subs)

        assert len(patterns) == 5
        assert [p.tag for p in patterns] == ["f", "e", "d", "c", "b"]
        assert patterns[0].count == 6

    def test_any_rejection_verdict_counts(self):
        subs = [
            rejected(1400, ["graphs"], verdict=Verdict.TIME_LIMIT_EXCEEDED),
            rejected(1400, ["graphs"], verdict=Verdict.COMPILATION_ERROR),
        ]
        assert mine_wrong_patterns(subs)[0].count == 2
