"""
Tests for Weakness/Strength Classifier
"""

import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cf_analytics.classifier import (
    TagPerformance, classify_strong_tags, classify_weak_tags,
)


class TestWeakTags:
    """Weak tags need success rate < 0.5 over at least 3 attempts."""

    def test_qualifies_with_enough_attempts(self):
        perf = TagPerformance("dp", solved=2, wrong=3)

        assert perf.attempts == 5
        assert perf.success_rate == 0.4
        assert perf.is_weak

    def test_too_few_attempts(self):
        assert not TagPerformance("math", solved=1, wrong=1).is_weak

    def test_exactly_half_is_not_weak(self):
        assert not TagPerformance("greedy", solved=2, wrong=2).is_weak

    def test_classify_reference_case(self):
        weak = classify_weak_tags({"dp": 2, "math": 1}, {"dp": 3, "math": 1})
        assert weak == ("dp",)

    def test_only_wrong_tags_considered(self):
        """A tag with no wrong submissions is never weak."""
        weak = classify_weak_tags({"dp": 0}, {})
        assert weak == ()

    def test_tag_never_solved(self):
        weak = classify_weak_tags({}, {"graphs": 4})
        assert weak == ("graphs",)

    def test_sorted_ascending_by_wrong_count(self):
        wrong = {"a": 9, "b": 3, "c": 5, "d": 3}
        weak = classify_weak_tags({}, wrong)

        assert weak == ("b", "d", "c", "a")

    def test_truncated_to_five(self):
        wrong = {f"tag{i}": 3 + i for i in range(8)}
        weak = classify_weak_tags({}, wrong)

        assert len(weak) == 5
        assert weak[0] == "tag0"


class TestStrongTags:

    def test_sorted_descending(self):
        strong = classify_strong_tags({"dp": 3, "math": 10, "greedy": 5})
        assert strong == ("math", "greedy", "dp")

    def test_no_attempt_threshold(self):
        """A single solve is enough to appear among strong tags."""
        assert classify_strong_tags({"strings": 1}) == ("strings",)

    def test_truncated_to_five(self):
        stats = {f"t{i}": i for i in range(1, 9)}
        assert classify_strong_tags(stats) == ("t8", "t7", "t6", "t5", "t4")

    def test_empty(self):
        assert classify_strong_tags({}) == ()
