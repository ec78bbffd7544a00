"""
Streak Calculator

Consecutive-day solve streaks over local calendar dates.
"""

from dataclasses import dataclass
from datetime import date, timedelta, tzinfo
from typing import Dict, Iterable, List, Optional, Set

from .models import Submission, local_datetime, local_today


@dataclass(frozen=True)
class StreakRecord:
    current: int = 0
    max: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"current": self.current, "max": self.max}


def solved_dates(
    submissions: Iterable[Submission],
    tz: Optional[tzinfo] = None,
) -> Set[date]:
    """Distinct local dates with at least one accepted submission."""
    return {
        local_datetime(s.submitted_at, tz).date()
        for s in submissions
        if s.is_accepted
    }


def longest_streak(dates: Iterable[date]) -> int:
    ordered: List[date] = sorted(set(dates))
    if not ordered:
        return 0

    best = running = 1
    for prev, cur in zip(ordered, ordered[1:]):
        gap = (cur - prev).days
        if gap == 1:
            running += 1
            best = max(best, running)
        elif gap == 0:
            continue
        else:
            running = 1
    return max(best, running)


def current_streak(dates: Set[date], today: date) -> int:
    """Days in a row ending today; 0 when nothing was solved today."""
    streak = 0
    day = today
    while day in dates:
        streak += 1
        day -= timedelta(days=1)
    return streak


def calculate_streaks(
    submissions: Iterable[Submission],
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> StreakRecord:
    """
    Compute current and maximum solve streaks.

    Args:
        submissions: Any iterable of submissions, order does not matter
        today: Reference date for the current streak (defaults to the local date)
        tz: Timezone used to map timestamps to calendar dates

    Returns:
        StreakRecord with ``current`` and ``max`` day counts
    """
    dates = solved_dates(submissions, tz)
    if not dates:
        return StreakRecord()
    if today is None:
        today = local_today(tz)
    return StreakRecord(current=current_streak(dates, today), max=longest_streak(dates))