"""
Weakness / Strength Classifier

Ranks tags from the aggregated solved and wrong counters.

Weak tags need a minimum number of attempts before they qualify; strong tags
do not. The two rules are intentionally asymmetric.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple

WEAK_SUCCESS_THRESHOLD = 0.5
WEAK_MIN_ATTEMPTS = 3
WEAK_TAGS_LIMIT = 5
STRONG_TAGS_LIMIT = 5


@dataclass(frozen=True)
class TagPerformance:
    tag: str
    solved: int
    wrong: int

    @property
    def attempts(self) -> int:
        return self.solved + self.wrong

    @property
    def success_rate(self) -> float:
        if self.attempts == 0:
            return 0.0
        return self.solved / self.attempts

    @property
    def is_weak(self) -> bool:
        return (self.success_rate < WEAK_SUCCESS_THRESHOLD
                and self.attempts >= WEAK_MIN_ATTEMPTS)

    def to_dict(self) -> Dict:
        return {
            "tag": self.tag,
            "solved": self.solved,
            "wrong": self.wrong,
            "attempts": self.attempts,
            "success_rate": round(self.success_rate, 4),
        }


def tag_performance(
    tag_stats: Mapping[str, int],
    wrong_tag_stats: Mapping[str, int],
) -> List[TagPerformance]:
    """Per-tag performance for every tag that has at least one wrong submission."""
    return [
        TagPerformance(tag=tag, solved=tag_stats.get(tag, 0), wrong=wrong)
        for tag, wrong in wrong_tag_stats.items()
    ]


def classify_weak_tags(
    tag_stats: Mapping[str, int],
    wrong_tag_stats: Mapping[str, int],
    limit: int = WEAK_TAGS_LIMIT,
) -> Tuple[str, ...]:
    """
    Tags with a success rate under 50% over at least 3 attempts.

    Ordered ascending by wrong-submission count, ties in first-seen order.
    """
    weak = [p for p in tag_performance(tag_stats, wrong_tag_stats) if p.is_weak]
    weak.sort(key=lambda p: p.wrong)
    return tuple(p.tag for p in weak[:limit])


def classify_strong_tags(
    tag_stats: Mapping[str, int],
    limit: int = STRONG_TAGS_LIMIT,
) -> Tuple[str, ...]:
    """Most-solved tags, descending by count."""
    ranked = sorted(tag_stats.items(), key=lambda kv: kv[1], reverse=True)
    return tuple(tag for tag, _ in ranked[:limit])
