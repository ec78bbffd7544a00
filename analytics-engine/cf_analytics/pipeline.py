"""
Analytics Pipeline

Explicit recomputation graph over the engine stages. Inputs are
version-stamped: setting an input to a value equal to the current one is a
no-op, otherwise its version is bumped. A stage reruns only when the version
of one of its declared dependencies moved since its last run, and its own
version only moves when the recomputed value differs.

Also home of ``FetchTokens``, the per-feed request tokens used to drop
responses that were overtaken by a newer fetch.
"""

import itertools
import logging
from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import Any, Callable, Dict, Hashable, Iterable, Optional, Tuple

from .contests import (
    ContestPerformance, analyze_contest_performance, normalize_rating_history,
)
from .gamification import Insights, Progression, compute_progression, derive_insights
from .models import UserProfile, local_today
from .normalizer import NormalizedSubmissions, normalize_submissions
from .recommender import (
    DEFAULT_RANGE, DifficultyRange, Recommendation, parse_catalog, recommend_problems,
)
from .snapshot import AnalyticsSnapshot, build_snapshot

logger = logging.getLogger(__name__)


class FetchTokens:
    """
    Monotonically increasing request tokens, one "latest" slot per feed.

    A fetch takes a token when it starts; when it completes, its result is
    applied only if that token is still the latest issued for the feed.
    """

    def __init__(self):
        self._counter = itertools.count(1)
        self._latest: Dict[Hashable, int] = {}

    def issue(self, feed: Hashable) -> int:
        token = next(self._counter)
        self._latest[feed] = token
        return token

    def is_current(self, feed: Hashable, token: int) -> bool:
        return self._latest.get(feed) == token

    def latest(self, feed: Hashable) -> Optional[int]:
        return self._latest.get(feed)

    def discard(self, feed: Hashable) -> None:
        """Forget ``feed``; any fetch still in flight for it becomes stale."""
        self._latest.pop(feed, None)


@dataclass
class _Input:
    value: Any
    version: int = 0


@dataclass
class _Stage:
    deps: Tuple[str, ...]
    compute: Callable[..., Any]
    value: Any = None
    version: int = 0
    seen: Optional[Tuple[int, ...]] = None
    runs: int = 0


@dataclass
class _Graph:
    inputs: Dict[str, _Input] = field(default_factory=dict)
    stages: Dict[str, _Stage] = field(default_factory=dict)

    def set(self, name: str, value: Any) -> bool:
        node = self.inputs[name]
        if node.value == value:
            return False
        node.value = value
        node.version += 1
        return True

    def resolve(self, name: str) -> Tuple[Any, int]:
        if name in self.inputs:
            node = self.inputs[name]
            return node.value, node.version

        stage = self.stages[name]
        resolved = [self.resolve(dep) for dep in stage.deps]
        versions = tuple(v for _, v in resolved)
        if stage.seen != versions:
            value = stage.compute(*(val for val, _ in resolved))
            stage.runs += 1
            stage.seen = versions
            if stage.runs == 1 or value != stage.value:
                stage.value = value
                stage.version += 1
            logger.debug(f"Recomputed stage {name} (run {stage.runs})")
        return stage.value, stage.version


class AnalyticsPipeline:
    """
    Coordinator for one user's analytics.

    Usage:
        pipeline = AnalyticsPipeline()
        pipeline.set_submissions(raw_submissions)
        pipeline.set_profile(UserProfile.from_api(info))
        pipeline.set_catalog(problems)
        pipeline.recommendations
    """

    def __init__(self, tz: Optional[tzinfo] = None, today: Optional[date] = None):
        self.tz = tz
        self._graph = _Graph()

        for name, default in (
            ("submissions", ()),
            ("rating_history", ()),
            ("catalog", ()),
            ("profile", None),
            ("tag_filter", frozenset()),
            ("difficulty", DEFAULT_RANGE),
            ("today", today or local_today(tz)),
        ):
            self._graph.inputs[name] = _Input(default)

        self._stage("normalized", ("submissions",), normalize_submissions)
        self._stage("snapshot", ("normalized", "today"), self._build_snapshot)
        self._stage("problems", ("catalog",), parse_catalog)
        self._stage(
            "recommendations",
            ("problems", "snapshot", "profile", "tag_filter", "difficulty"),
            self._recommend,
        )
        self._stage("history", ("rating_history",), normalize_rating_history)
        self._stage("contest_performance", ("history",), analyze_contest_performance)
        self._stage("progression", ("snapshot",), lambda s: compute_progression(s) if s else None)
        self._stage("insights", ("snapshot",), lambda s: derive_insights(s) if s else None)

    def _stage(self, name: str, deps: Tuple[str, ...], compute: Callable[..., Any]):
        self._graph.stages[name] = _Stage(deps=deps, compute=compute)

    def _build_snapshot(self, normalized: NormalizedSubmissions, today: date):
        if normalized.is_empty:
            return None
        return build_snapshot(normalized, today, self.tz)

    @staticmethod
    def _recommend(problems, snapshot, profile, tag_filter, difficulty):
        rating = profile.effective_rating if profile is not None else None
        return recommend_problems(problems, snapshot, rating, tag_filter, difficulty)

    # ── Inputs ──

    def set_submissions(self, raw: Iterable[Any]) -> bool:
        return self._graph.set("submissions", tuple(raw or ()))

    def set_rating_history(self, raw: Iterable[Any]) -> bool:
        return self._graph.set("rating_history", tuple(raw or ()))

    def set_catalog(self, raw: Iterable[Any]) -> bool:
        catalog = raw if isinstance(raw, tuple) else tuple(raw or ())
        return self._graph.set("catalog", catalog)

    def set_profile(self, profile: Optional[UserProfile]) -> bool:
        return self._graph.set("profile", profile)

    def set_tag_filter(self, tags: Iterable[str]) -> bool:
        return self._graph.set("tag_filter", frozenset(tags or ()))

    def set_difficulty_range(self, low: int, high: int) -> bool:
        return self._graph.set("difficulty", DifficultyRange(low, high))

    def set_today(self, today: Optional[date] = None) -> bool:
        return self._graph.set("today", today or local_today(self.tz))

    # ── Outputs ──

    def _get(self, name: str) -> Any:
        return self._graph.resolve(name)[0]

    @property
    def profile(self) -> Optional[UserProfile]:
        return self._get("profile")

    @property
    def normalized(self) -> NormalizedSubmissions:
        return self._get("normalized")

    @property
    def snapshot(self) -> Optional[AnalyticsSnapshot]:
        return self._get("snapshot")

    @property
    def recommendations(self) -> Tuple[Recommendation, ...]:
        return self._get("recommendations")

    @property
    def rating_history(self):
        return self._get("history")

    @property
    def contest_performance(self) -> Optional[ContestPerformance]:
        return self._get("contest_performance")

    @property
    def progression(self) -> Optional[Progression]:
        return self._get("progression")

    @property
    def insights(self) -> Optional[Insights]:
        return self._get("insights")

    def runs(self, stage: str) -> int:
        """How many times ``stage`` has been computed."""
        return self._graph.stages[stage].runs
