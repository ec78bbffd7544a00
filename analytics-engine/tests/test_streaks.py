"""
Tests for Streak Calculator

Tests maximum and current consecutive-day solve streaks.
"""

import pytest
from datetime import date, datetime, timezone
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cf_analytics.models import Submission
from cf_analytics.streaks import StreakRecord, calculate_streaks, current_streak, longest_streak

UTC = timezone.utc


def solved_on(*days, verdict="OK", month=1):
    subs = []
    for i, d in enumerate(days):
        ts = int(datetime(2024, month, d, 15, tzinfo=UTC).timestamp())
        subs.append(Submission.from_api({
            "id": i + 1,
            "creationTimeSeconds": ts,
            "problem": {"contestId": 1, "index": chr(65 + i)},
            "verdict": verdict,
        }))
    return subs


class TestLongestStreak:

    def test_gap_resets(self):
        """Jan 1, 2, 3 then Jan 5 gives a max streak of 3."""
        dates = [date(2024, 1, d) for d in (1, 2, 3, 5)]
        assert longest_streak(dates) == 3

    def test_final_run_counts(self):
        dates = [date(2024, 1, d) for d in (1, 5, 6, 7, 8)]
        assert longest_streak(dates) == 4

    def test_single_date(self):
        assert longest_streak([date(2024, 1, 1)]) == 1

    def test_month_boundary(self):
        dates = [date(2024, 1, 31), date(2024, 2, 1)]
        assert longest_streak(dates) == 2


class TestCurrentStreak:

    def test_counts_back_from_today(self):
        dates = {date(2024, 1, d) for d in (3, 4, 5)}
        assert current_streak(dates, date(2024, 1, 5)) == 3

    def test_no_solve_today_is_zero(self):
        dates = {date(2024, 1, d) for d in (3, 4)}
        assert current_streak(dates, date(2024, 1, 5)) == 0

    def test_stops_at_first_gap(self):
        dates = {date(2024, 1, d) for d in (1, 2, 4, 5)}
        assert current_streak(dates, date(2024, 1, 5)) == 2


class TestCalculateStreaks:

    def test_empty(self):
        assert calculate_streaks([], today=date(2024, 1, 5)) == StreakRecord(0, 0)

    def test_reference_scenario(self):
        subs = solved_on(1, 2, 3, 5)
        record = calculate_streaks(subs, today=date(2024, 1, 10), tz=UTC)

        assert record.max == 3
        assert record.current == 0

    def test_same_day_solves_count_once(self):
        subs = solved_on(4, 4, 4, 5)
        record = calculate_streaks(subs, today=date(2024, 1, 5), tz=UTC)

        assert record.current == 2
        assert record.max == 2

    def test_rejected_submissions_ignored(self):
        subs = solved_on(1, 2, 3, verdict="WRONG_ANSWER")
        assert calculate_streaks(subs, today=date(2024, 1, 3), tz=UTC) == StreakRecord()

    def test_single_recent_date(self):
        record = calculate_streaks(solved_on(9), today=date(2024, 1, 9), tz=UTC)
        assert record.to_dict() == {"current": 1, "max": 1}

    def test_order_independent(self):
        forward = calculate_streaks(solved_on(1, 2, 3, 8, 9), today=date(2024, 1, 9), tz=UTC)
        backward = calculate_streaks(
            list(reversed(solved_on(1, 2, 3, 8, 9))), today=date(2024, 1, 9), tz=UTC
        )
        assert forward == backward == StreakRecord(current=2, max=3)


@pytest.mark.parametrize("days,expected", [
    ((1,), 1),
    ((1, 3), 1),
    ((1, 2, 4, 5, 6), 3),
])
def test_longest_streak_cases(days, expected):
    assert longest_streak([date(2024, 1, d) for d in days]) == expected
