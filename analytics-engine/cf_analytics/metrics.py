"""
Metric Aggregator

Order-independent counters over the normalized submission list: accuracy,
difficulty histogram, per-tag solved/wrong counts, hour-of-day performance and
average solved difficulty. Also carries the time-ordered series the dashboard
charts (rating progress, daily activity) and the per-contest participation
tallies.

Counting semantics follow the judge's feed: "solved" counters count accepted
*submissions*, so two accepted submissions on the same problem count twice.
Distinct problems are reported separately as ``unique_solved``.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta, tzinfo
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .models import Submission, Verdict, local_datetime, round_half_up
from .normalizer import NormalizedSubmissions

UNKNOWN_RATING = "Unknown"
HOURS_PER_DAY = 24
RECENT_WINDOW = 200          # newest submissions used for the verdict breakdown
ACTIVITY_WINDOW_DAYS = 30
TOP_TAGS_LIMIT = 8

VERDICT_LABELS: Tuple[Tuple[Verdict, str], ...] = (
    (Verdict.OK, "Accepted"),
    (Verdict.WRONG_ANSWER, "Wrong Answer"),
    (Verdict.TIME_LIMIT_EXCEEDED, "TLE"),
    (Verdict.MEMORY_LIMIT_EXCEEDED, "MLE"),
    (Verdict.RUNTIME_ERROR, "Runtime Error"),
    (Verdict.COMPILATION_ERROR, "Compilation Error"),
    (Verdict.OTHER, "Other"),
)

RatingKey = Union[int, str]


@dataclass(frozen=True)
class HourBucket:
    hour: int
    submissions: int = 0
    solved: int = 0

    @property
    def success_rate(self) -> float:
        if self.submissions == 0:
            return 0.0
        return self.solved / self.submissions * 100

    def to_dict(self) -> Dict:
        return {
            "hour": self.hour,
            "submissions": self.submissions,
            "solved": self.solved,
            "success_rate": round(self.success_rate, 2),
        }


@dataclass(frozen=True)
class RatingPoint:
    """One point of the rating-progress series: a first solve of a new problem."""
    solved_on: date
    problems_solved: int
    rating: int
    problem_id: str

    def to_dict(self) -> Dict:
        return {
            "date": self.solved_on.isoformat(),
            "problems_solved": self.problems_solved,
            "rating": self.rating,
            "problem_id": self.problem_id,
        }


@dataclass(frozen=True)
class ContestActivity:
    """Submissions made while officially competing in one contest."""
    contest_id: Optional[int]
    solved: int
    total: int
    rating: int

    def to_dict(self) -> Dict:
        return {
            "contest_id": self.contest_id,
            "solved": self.solved,
            "total": self.total,
            "rating": self.rating,
        }


@dataclass(frozen=True)
class MetricSummary:
    solved_count: int
    total_count: int
    accuracy: float
    unique_solved: int
    average_difficulty: int
    difficulty_distribution: Mapping[RatingKey, int]
    tag_stats: Mapping[str, int]
    wrong_tag_stats: Mapping[str, int]
    hourly_performance: Tuple[HourBucket, ...]
    verdict_distribution: Tuple[Tuple[str, int], ...]
    daily_activity: Mapping[str, int]
    rating_progress: Tuple[RatingPoint, ...]
    contest_stats: Tuple[ContestActivity, ...]

    @property
    def success_rate_by_hour(self) -> Tuple[float, ...]:
        return tuple(b.success_rate for b in self.hourly_performance)


# ── Individual aggregates ───────────────────────────────────────────────

def compute_accuracy(solved_count: int, total_count: int) -> float:
    """Percentage of accepted submissions, rounded to 2 decimals."""
    if total_count == 0:
        return 0.0
    return round(solved_count / total_count * 100, 2)


def difficulty_distribution(submissions: Iterable[Submission]) -> Dict[RatingKey, int]:
    """Accepted submissions per problem rating; unrated problems go under "Unknown"."""
    counts: Counter = Counter()
    for sub in submissions:
        if sub.is_accepted:
            key = sub.rating if sub.rating is not None else UNKNOWN_RATING
            counts[key] += 1
    return dict(counts)


def tag_counts(submissions: Iterable[Submission], accepted: bool) -> Dict[str, int]:
    """
    Count tags over accepted (``accepted=True``) or non-accepted submissions.
    Every tag of a multi-tag problem is incremented.
    """
    counts: Counter = Counter()
    for sub in submissions:
        if sub.is_accepted == accepted:
            counts.update(sub.tags)
    return dict(counts)


def hourly_performance(
    submissions: Iterable[Submission],
    tz: Optional[tzinfo] = None,
) -> Tuple[HourBucket, ...]:
    seen = [0] * HOURS_PER_DAY
    solved = [0] * HOURS_PER_DAY
    for sub in submissions:
        hour = local_datetime(sub.submitted_at, tz).hour
        seen[hour] += 1
        if sub.is_accepted:
            solved[hour] += 1
    return tuple(
        HourBucket(hour=h, submissions=seen[h], solved=solved[h])
        for h in range(HOURS_PER_DAY)
    )


def average_difficulty(submissions: Iterable[Submission]) -> int:
    """Mean rating of accepted submissions on rated problems; 0 when there are none."""
    ratings = [s.rating for s in submissions if s.is_accepted and s.rating is not None]
    if not ratings:
        return 0
    return round_half_up(sum(ratings) / len(ratings))


def verdict_distribution(
    submissions: Sequence[Submission],
    window: int = RECENT_WINDOW,
) -> Tuple[Tuple[str, int], ...]:
    """Verdict counts over the newest ``window`` submissions (input ascending by time)."""
    recent = submissions[-window:] if window else submissions
    counts = Counter(s.verdict for s in recent)
    return tuple((label, counts.get(verdict, 0)) for verdict, label in VERDICT_LABELS)


def daily_activity(
    submissions: Iterable[Submission],
    today: date,
    tz: Optional[tzinfo] = None,
    days: int = ACTIVITY_WINDOW_DAYS,
) -> Dict[str, int]:
    """Submissions per local calendar day over the trailing ``days`` window."""
    cutoff = today - timedelta(days=days)
    counts: Dict[str, int] = {}
    for sub in submissions:
        day = local_datetime(sub.submitted_at, tz).date()
        if cutoff <= day <= today:
            key = day.isoformat()
            counts[key] = counts.get(key, 0) + 1
    return dict(sorted(counts.items()))


def rating_progress(
    first_solves: Iterable[Submission],
    tz: Optional[tzinfo] = None,
) -> Tuple[RatingPoint, ...]:
    """
    Running count of distinct solved problems. Requires ``first_solves`` in
    ascending time order, which the normalizer guarantees.
    """
    points: List[RatingPoint] = []
    for n, sub in enumerate(first_solves, start=1):
        points.append(RatingPoint(
            solved_on=local_datetime(sub.submitted_at, tz).date(),
            problems_solved=n,
            rating=sub.rating or 0,
            problem_id=sub.problem_id,
        ))
    return tuple(points)


def participation_stats(submissions: Iterable[Submission]) -> Tuple[ContestActivity, ...]:
    """Per-contest solved/total tallies over submissions made as a contestant."""
    tallies: Dict[Optional[int], Dict[str, int]] = {}
    for sub in submissions:
        if sub.participant_type != "CONTESTANT":
            continue
        entry = tallies.setdefault(
            sub.contest_id, {"solved": 0, "total": 0, "rating": sub.rating or 0}
        )
        if sub.is_accepted:
            entry["solved"] += 1
        entry["total"] += 1
    return tuple(
        ContestActivity(contest_id=cid, solved=t["solved"], total=t["total"], rating=t["rating"])
        for cid, t in tallies.items()
    )


# ── Chart projections ───────────────────────────────────────────────────

def top_tags(tag_stats: Mapping[str, int], limit: int = TOP_TAGS_LIMIT) -> List[Tuple[str, int]]:
    """Tags by descending count; equal counts keep first-seen order."""
    return Counter(dict(tag_stats)).most_common(limit)


def difficulty_chart(distribution: Mapping[RatingKey, int]) -> List[Tuple[int, int]]:
    """Rated buckets of the difficulty histogram, ascending by rating."""
    rated = [(k, v) for k, v in distribution.items() if k != UNKNOWN_RATING]
    return sorted(rated, key=lambda kv: int(kv[0]))


# ── Aggregate ───────────────────────────────────────────────────────────

def aggregate_metrics(
    normalized: NormalizedSubmissions,
    today: date,
    tz: Optional[tzinfo] = None,
) -> MetricSummary:
    subs = normalized.submissions
    solved_count = sum(1 for s in subs if s.is_accepted)
    total_count = len(subs)

    return MetricSummary(
        solved_count=solved_count,
        total_count=total_count,
        accuracy=compute_accuracy(solved_count, total_count),
        unique_solved=len(normalized.first_solves),
        average_difficulty=average_difficulty(subs),
        difficulty_distribution=MappingProxyType(difficulty_distribution(subs)),
        tag_stats=MappingProxyType(tag_counts(subs, accepted=True)),
        wrong_tag_stats=MappingProxyType(tag_counts(subs, accepted=False)),
        hourly_performance=hourly_performance(subs, tz),
        verdict_distribution=verdict_distribution(subs),
        daily_activity=MappingProxyType(daily_activity(subs, today, tz)),
        rating_progress=rating_progress(normalized.first_solves, tz),
        contest_stats=participation_stats(subs),
    )
