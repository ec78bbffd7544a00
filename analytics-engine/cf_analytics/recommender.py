"""
Recommendation Engine

Picks unsolved catalog problems that target the user's weak tags or the
(tag, rating) combinations they keep getting wrong, and ranks them by how
close they sit to a target slightly above the user's rating.

Candidate sets:
1. Weak-tag candidates - any weak tag, rating inside the difficulty range,
   at least one tag in the user's tag filter (when a filter is set)
2. Pattern candidates - any wrong-pattern tag, rating within 200 of that
   pattern's bucket

The two sets are concatenated without de-duplication, so a problem that
qualifies both ways can be listed twice.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Collection, Dict, Iterable, List, Optional, Sequence, Tuple

from .models import Problem
from .patterns import WrongPattern
from .snapshot import AnalyticsSnapshot

logger = logging.getLogger(__name__)

DEFAULT_MIN_RATING = 800
DEFAULT_MAX_RATING = 3500
TARGET_OFFSET = 150
PATTERN_RATING_WINDOW = 200
RECOMMENDATION_LIMIT = 15


class RecommendationReason(Enum):
    WEAK_TAG = "weak_tag"
    WRONG_PATTERN = "wrong_pattern"
    SKILL_LEVEL = "skill_level"


@dataclass(frozen=True)
class DifficultyRange:
    low: int = DEFAULT_MIN_RATING
    high: int = DEFAULT_MAX_RATING

    def __post_init__(self):
        if self.low > self.high:
            raise ValueError(f"empty difficulty range [{self.low}, {self.high}]")

    def contains(self, rating: Optional[int]) -> bool:
        return rating is not None and self.low <= rating <= self.high


DEFAULT_RANGE = DifficultyRange()


@dataclass(frozen=True)
class Recommendation:
    problem: Problem
    reason: RecommendationReason
    message: str
    distance: int  # |rating - target|

    def to_dict(self) -> Dict[str, Any]:
        data = self.problem.to_dict()
        data.update({
            "reason": self.reason.value,
            "message": self.message,
            "distance": self.distance,
        })
        return data


def parse_catalog(raw: Iterable[Any]) -> Tuple[Problem, ...]:
    """
    Accepts ``problemset.problems`` dicts or ``Problem`` objects. A tuple that
    is already all ``Problem`` values is returned as is, so callers holding a
    parsed catalog share its instances.
    """
    if isinstance(raw, tuple) and all(isinstance(item, Problem) for item in raw):
        return raw
    problems: List[Problem] = []
    for item in raw or ():
        if isinstance(item, Problem):
            problems.append(item)
        elif isinstance(item, dict):
            problems.append(Problem.from_api(item))
    return tuple(problems)


def _matching_pattern(problem: Problem, patterns: Sequence[WrongPattern]) -> Optional[WrongPattern]:
    if problem.rating is None:
        return None
    for pattern in patterns:
        if (pattern.tag in problem.tags
                and abs(problem.rating - pattern.rating) <= PATTERN_RATING_WINDOW):
            return pattern
    return None


def weak_tag_candidates(
    catalog: Iterable[Problem],
    weak_tags: Collection[str],
    solved_ids: Collection[str],
    difficulty: DifficultyRange = DEFAULT_RANGE,
    tag_filter: Collection[str] = (),
) -> List[Problem]:
    weak = set(weak_tags)
    wanted = set(tag_filter)
    return [
        p for p in catalog
        if p.problem_id not in solved_ids
        and weak.intersection(p.tags)
        and difficulty.contains(p.rating)
        and (not wanted or wanted.intersection(p.tags))
    ]


def pattern_candidates(
    catalog: Iterable[Problem],
    patterns: Sequence[WrongPattern],
    solved_ids: Collection[str],
) -> List[Problem]:
    return [
        p for p in catalog
        if p.problem_id not in solved_ids and _matching_pattern(p, patterns) is not None
    ]


def explain(
    problem: Problem,
    weak_tags: Sequence[str],
    patterns: Sequence[WrongPattern],
) -> Tuple[RecommendationReason, str]:
    """Single reason per problem: weak tag, then wrong pattern, then skill level."""
    for tag in weak_tags:
        if tag in problem.tags:
            return RecommendationReason.WEAK_TAG, f"Targets your weak topic: {tag}"

    pattern = _matching_pattern(problem, patterns)
    if pattern is not None:
        return (
            RecommendationReason.WRONG_PATTERN,
            f"Similar to problems you missed: {pattern.tag} around {pattern.rating}",
        )

    return RecommendationReason.SKILL_LEVEL, "Matches your skill level"


def recommend_problems(
    catalog: Sequence[Problem],
    snapshot: Optional[AnalyticsSnapshot],
    user_rating: Optional[int],
    tag_filter: Collection[str] = (),
    difficulty: DifficultyRange = DEFAULT_RANGE,
    limit: int = RECOMMENDATION_LIMIT,
) -> Tuple[Recommendation, ...]:
    """
    Rank candidate problems for a user.

    Args:
        catalog: Parsed problem catalog
        snapshot: The user's analytics; nothing is recommended without it
        user_rating: Current (or best known) rating; nothing is recommended without it
        tag_filter: Restricts weak-tag candidates to these tags; empty means no restriction
        difficulty: Inclusive rating range for weak-tag candidates
        limit: Maximum number of recommendations

    Returns:
        Recommendations sorted by distance to ``user_rating + 150``
    """
    if snapshot is None or user_rating is None:
        logger.debug("Skipping recommendations: no rating or no analytics")
        return ()

    solved = snapshot.solved_problem_ids
    candidates = weak_tag_candidates(
        catalog, snapshot.weak_tags, solved, difficulty, tag_filter
    ) + pattern_candidates(catalog, snapshot.wrong_patterns, solved)

    target = user_rating + TARGET_OFFSET
    candidates.sort(key=lambda p: abs(p.rating - target))

    recommendations = []
    for problem in candidates[:limit]:
        reason, message = explain(problem, snapshot.weak_tags, snapshot.wrong_patterns)
        recommendations.append(Recommendation(
            problem=problem,
            reason=reason,
            message=message,
            distance=abs(problem.rating - target),
        ))
    return tuple(recommendations)
