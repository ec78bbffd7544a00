"""
Submission Normalizer

Turns the raw ``user.status`` feed into a time-ordered, de-duplicated tuple of
``Submission`` values and records the first accepted submission of every
distinct problem.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, List, Set, Tuple

from .models import Submission

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedSubmissions:
    """Output of the normalizer."""
    submissions: Tuple[Submission, ...]      # ascending by submitted_at
    first_solves: Tuple[Submission, ...]     # first OK per problem, in solve order

    @property
    def solved_problem_ids(self) -> Tuple[str, ...]:
        return tuple(s.problem_id for s in self.first_solves)

    @property
    def is_empty(self) -> bool:
        return not self.submissions

    def __len__(self) -> int:
        return len(self.submissions)


EMPTY = NormalizedSubmissions(submissions=(), first_solves=())


def _has_valid_time(sub: Submission) -> bool:
    try:
        datetime.fromtimestamp(sub.submitted_at, timezone.utc)
    except (OverflowError, ValueError, OSError):
        return False
    return True


def parse_submissions(raw: Iterable[Any]) -> List[Submission]:
    """
    Parse raw API records, skipping any without a problem payload or with a
    timestamp outside the platform's datetime range. Already-parsed
    ``Submission`` items pass through unchanged.
    """
    parsed = []
    for record in raw or ():
        try:
            sub = record if isinstance(record, Submission) else Submission.from_api(record)
        except (ValueError, AttributeError) as e:
            logger.debug(f"Skipping malformed submission record: {e}")
            continue
        if not _has_valid_time(sub):
            logger.debug(f"Skipping submission {sub.submission_id} with bad timestamp {sub.submitted_at}")
            continue
        parsed.append(sub)
    return parsed


def normalize_submissions(raw: Iterable[Any]) -> NormalizedSubmissions:
    """
    Normalize a submission feed.

    Accepts raw API dicts, already-parsed ``Submission`` objects, or a mix.
    Records sharing a submission id are kept once. Sorting is stable, so
    submissions with equal timestamps keep their input order.
    """
    items = list(raw or ())
    if not items:
        return EMPTY

    submissions = parse_submissions(items)

    seen_ids: Set[int] = set()
    unique: List[Submission] = []
    for sub in submissions:
        if sub.submission_id is not None:
            if sub.submission_id in seen_ids:
                continue
            seen_ids.add(sub.submission_id)
        unique.append(sub)

    unique.sort(key=lambda s: s.submitted_at)

    solved: Set[str] = set()
    first_solves: List[Submission] = []
    for sub in unique:
        if sub.is_accepted and sub.problem_id not in solved:
            solved.add(sub.problem_id)
            first_solves.append(sub)

    return NormalizedSubmissions(
        submissions=tuple(unique),
        first_solves=tuple(first_solves),
    )
