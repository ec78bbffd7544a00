"""
Contest Performance Analyzer

Works on the rating-history feed, independently of submissions. Also selects
upcoming rounds from the contest catalog.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .models import Contest, ContestRatingChange, round_half_up

logger = logging.getLogger(__name__)

RATING_HISTORY_LIMIT = 20
UPCOMING_LIMIT = 8

GOOD_LABEL = "Good"
NEEDS_IMPROVEMENT_LABEL = "Needs Improvement"


@dataclass(frozen=True)
class ContestResult:
    change: ContestRatingChange

    @property
    def rating_change(self) -> int:
        return self.change.rating_change

    @property
    def label(self) -> str:
        return GOOD_LABEL if self.rating_change > 0 else NEEDS_IMPROVEMENT_LABEL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contest_id": self.change.contest_id,
            "contest_name": self.change.contest_name,
            "rank": self.change.rank,
            "old_rating": self.change.old_rating,
            "new_rating": self.change.new_rating,
            "rating_change": self.rating_change,
            "performance": self.label,
        }


@dataclass(frozen=True)
class ContestPerformance:
    results: Tuple[ContestResult, ...]
    average_change: int
    best: ContestResult
    worst: ContestResult
    total_contests: int
    positive_contests: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "average_change": self.average_change,
            "best_contest": self.best.to_dict(),
            "worst_contest": self.worst.to_dict(),
            "total_contests": self.total_contests,
            "positive_contests": self.positive_contests,
        }


def normalize_rating_history(
    raw: Iterable[Any],
    limit: int = RATING_HISTORY_LIMIT,
) -> Tuple[ContestRatingChange, ...]:
    """
    Turn the reverse-chronological ``user.rating`` feed into the ``limit``
    most recent records, oldest first.
    """
    records: List[ContestRatingChange] = []
    for item in raw or ():
        if isinstance(item, ContestRatingChange):
            records.append(item)
        elif isinstance(item, dict):
            records.append(ContestRatingChange.from_api(item))
        else:
            logger.debug(f"Skipping rating record of type {type(item).__name__}")
    records.reverse()
    return tuple(records[-limit:]) if limit else tuple(records)


def analyze_contest_performance(
    history: Sequence[ContestRatingChange],
) -> Optional[ContestPerformance]:
    """
    Summarize rating changes. Returns None for an empty history.

    Best and worst contests keep the first record on ties.
    """
    if not history:
        return None

    results = tuple(ContestResult(change) for change in history)

    best = worst = results[0]
    for result in results[1:]:
        if result.rating_change > best.rating_change:
            best = result
        if result.rating_change < worst.rating_change:
            worst = result

    total_change = sum(r.rating_change for r in results)
    return ContestPerformance(
        results=results,
        average_change=round_half_up(total_change / len(results)),
        best=best,
        worst=worst,
        total_contests=len(results),
        positive_contests=sum(1 for r in results if r.rating_change > 0),
    )


def rating_timeline(history: Sequence[ContestRatingChange]) -> List[Dict[str, Any]]:
    return [
        {
            "contest_id": c.contest_id,
            "contest_name": c.contest_name,
            "rating": c.new_rating,
            "time": c.rating_update_time,
        }
        for c in history
    ]


def upcoming_contests(
    raw: Iterable[Dict[str, Any]],
    limit: int = UPCOMING_LIMIT,
) -> Tuple[Contest, ...]:
    """Contests that have not started yet, soonest first."""
    contests = [Contest.from_api(c) for c in raw or () if isinstance(c, dict)]
    pending = [c for c in contests if c.phase == "BEFORE"]
    pending.sort(key=lambda c: c.start_time)
    return tuple(pending[:limit])
