"""
Analytics Snapshot

Immutable bundle of everything derived from one submission list: metrics,
streaks, weak/strong tags and wrong-submission patterns.
"""

from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from .classifier import classify_strong_tags, classify_weak_tags
from .metrics import (
    ContestActivity, HourBucket, MetricSummary, RatingKey, RatingPoint,
    aggregate_metrics, difficulty_chart, top_tags,
)
from .models import local_today
from .normalizer import NormalizedSubmissions
from .patterns import WrongPattern, mine_wrong_patterns
from .streaks import StreakRecord, calculate_streaks


@dataclass(frozen=True)
class AnalyticsSnapshot:
    metrics: MetricSummary
    streaks: StreakRecord
    weak_tags: Tuple[str, ...]
    strong_tags: Tuple[str, ...]
    wrong_patterns: Tuple[WrongPattern, ...]
    solved_problem_ids: FrozenSet[str]

    # Shortcuts onto the metric summary
    @property
    def solved_count(self) -> int:
        return self.metrics.solved_count

    @property
    def total_count(self) -> int:
        return self.metrics.total_count

    @property
    def accuracy(self) -> float:
        return self.metrics.accuracy

    @property
    def average_difficulty(self) -> int:
        return self.metrics.average_difficulty

    @property
    def tag_stats(self) -> Mapping[str, int]:
        return self.metrics.tag_stats

    @property
    def wrong_tag_stats(self) -> Mapping[str, int]:
        return self.metrics.wrong_tag_stats

    @property
    def difficulty_distribution(self) -> Mapping[RatingKey, int]:
        return self.metrics.difficulty_distribution

    @property
    def hourly_performance(self) -> Tuple[HourBucket, ...]:
        return self.metrics.hourly_performance

    @property
    def rating_progress(self) -> Tuple[RatingPoint, ...]:
        return self.metrics.rating_progress

    @property
    def contest_stats(self) -> Tuple[ContestActivity, ...]:
        return self.metrics.contest_stats

    def to_dict(self) -> Dict[str, Any]:
        m = self.metrics
        return {
            "solved": m.solved_count,
            "total": m.total_count,
            "accuracy": m.accuracy,
            "unique_solved": m.unique_solved,
            "average_difficulty": m.average_difficulty,
            "difficulty_distribution": {str(k): v for k, v in m.difficulty_distribution.items()},
            "difficulty_chart": [
                {"rating": str(r), "count": n} for r, n in difficulty_chart(m.difficulty_distribution)
            ],
            "tag_stats": dict(m.tag_stats),
            "wrong_tag_stats": dict(m.wrong_tag_stats),
            "top_tags": [{"tag": t, "count": n} for t, n in top_tags(m.tag_stats)],
            "hourly_performance": [b.to_dict() for b in m.hourly_performance],
            "verdict_distribution": [{"name": k, "value": v} for k, v in m.verdict_distribution],
            "daily_activity": dict(m.daily_activity),
            "rating_progress": [p.to_dict() for p in m.rating_progress],
            "contest_stats": [c.to_dict() for c in m.contest_stats],
            "streaks": self.streaks.to_dict(),
            "weak_tags": list(self.weak_tags),
            "strong_tags": list(self.strong_tags),
            "wrong_patterns": [p.to_dict() for p in self.wrong_patterns],
        }


def build_snapshot(
    normalized: NormalizedSubmissions,
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> AnalyticsSnapshot:
    """Run every submission-derived stage over ``normalized``."""
    if today is None:
        today = local_today(tz)

    metrics = aggregate_metrics(normalized, today, tz)
    return AnalyticsSnapshot(
        metrics=metrics,
        streaks=calculate_streaks(normalized.submissions, today, tz),
        weak_tags=classify_weak_tags(metrics.tag_stats, metrics.wrong_tag_stats),
        strong_tags=classify_strong_tags(metrics.tag_stats),
        wrong_patterns=mine_wrong_patterns(normalized.submissions),
        solved_problem_ids=frozenset(normalized.solved_problem_ids),
    )
