"""
Dashboard Service

Fetch-cycle coordinator between the Codeforces client and the analytics
engine. One ``AnalyticsPipeline`` per handle, kept for at most
``MAX_CACHED_USERS`` handles with the least recently used evicted first. The
contest and problem catalogs are shared by every handle and only fetched
again on demand; the problem catalog is parsed once and every pipeline holds
the same tuple of ``Problem`` values.

Each feed fetch takes a token from ``FetchTokens`` before awaiting the
network; a result whose token was overtaken by a newer fetch of the same
feed is dropped. Failures are recorded on the feed's ``FeedStatus`` as
``FeedState.FAILED`` and the feed's data is reset to empty.
"""

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from cf_analytics.contests import upcoming_contests
from cf_analytics.models import Contest, Problem
from cf_analytics.pipeline import AnalyticsPipeline, FetchTokens
from cf_analytics.recommender import parse_catalog

from config import MAX_CACHED_USERS

from services.codeforces import CodeforcesAPIError, CodeforcesClient, CodeforcesError

logger = logging.getLogger(__name__)

USER_FEEDS = ("profile", "submissions", "rating")
CATALOG_FEEDS = ("contests", "problems")


class FeedState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class FeedStatus:
    state: FeedState = FeedState.IDLE
    error: Optional[str] = None
    updated_at: Optional[datetime] = None
    exception: Optional[CodeforcesError] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "error": self.error,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class UserDashboard:
    handle: str
    pipeline: AnalyticsPipeline
    feeds: Dict[str, FeedStatus] = field(
        default_factory=lambda: {name: FeedStatus() for name in USER_FEEDS}
    )

    @property
    def handle_not_found(self) -> bool:
        """The API rejected the handle itself (user.info answered FAILED)."""
        return isinstance(self.feeds["profile"].exception, CodeforcesAPIError)

    @property
    def needs_fetch(self) -> bool:
        """Some feed was never loaded or its last fetch failed."""
        return any(s.state in (FeedState.IDLE, FeedState.FAILED) for s in self.feeds.values())


class DashboardService:
    """
    Usage:
        service = DashboardService(CodeforcesClient())
        dashboard = await service.load_user("tourist")
        dashboard.pipeline.snapshot
    """

    def __init__(
        self,
        client: Optional[CodeforcesClient] = None,
        tz: Optional[tzinfo] = None,
        max_users: int = MAX_CACHED_USERS,
    ):
        self.client = client or CodeforcesClient()
        self.tz = tz
        self.tokens = FetchTokens()
        self.max_users = max_users
        self._dashboards: "OrderedDict[str, UserDashboard]" = OrderedDict()
        self.catalog_feeds: Dict[str, FeedStatus] = {name: FeedStatus() for name in CATALOG_FEEDS}
        self._contests: List[Dict] = []
        self._problems: Tuple[Problem, ...] = ()

    # ── Feed plumbing ──

    async def _run_feed(
        self,
        key: Any,
        status: FeedStatus,
        fetch: Callable[[], Awaitable[Any]],
        apply: Callable[[Any], None],
    ) -> None:
        token = self.tokens.issue(key)
        status.state = FeedState.LOADING

        try:
            value = await fetch()
        except CodeforcesError as e:
            if not self.tokens.is_current(key, token):
                logger.info(f"Discarding stale failure for {key}: {e}")
                return
            logger.error(f"Fetching {key} failed: {e}")
            apply(None)
            status.state = FeedState.FAILED
            status.error = str(e)
            status.exception = e
            status.updated_at = datetime.now(timezone.utc)
            return

        if not self.tokens.is_current(key, token):
            logger.info(f"Discarding stale result for {key}")
            return

        apply(value)
        status.state = FeedState.READY if value else FeedState.EMPTY
        status.error = None
        status.exception = None
        status.updated_at = datetime.now(timezone.utc)

    def _set_contests(self, value: Optional[List[Dict]]):
        self._contests = value or []

    def _set_problems(self, value: Optional[List[Dict]]):
        self._problems = parse_catalog(value or ())
        for dashboard in self._dashboards.values():
            dashboard.pipeline.set_catalog(self._problems)

    def _catalog_jobs(self, refresh: bool) -> List[Awaitable[None]]:
        jobs = []
        sources = {
            "contests": (self.client.fetch_contests, self._set_contests),
            "problems": (self.client.fetch_problemset, self._set_problems),
        }
        for name, (fetch, apply) in sources.items():
            status = self.catalog_feeds[name]
            if refresh or status.state in (FeedState.IDLE, FeedState.FAILED):
                jobs.append(self._run_feed(name, status, fetch, apply))
        return jobs

    # ── Public API ──

    def get(self, handle: str) -> Optional[UserDashboard]:
        return self._dashboards.get(handle.lower())

    def forget(self, handle: str) -> None:
        key = handle.lower()
        self._dashboards.pop(key, None)
        for feed in USER_FEEDS:
            self.tokens.discard((key, feed))

    def _evict(self):
        while len(self._dashboards) > self.max_users:
            key = next(iter(self._dashboards))
            self.forget(key)
            logger.info(f"Evicted dashboard for {key}")

    async def load_user(self, handle: str, refresh: bool = False) -> UserDashboard:
        """
        Return the dashboard for ``handle``, running a fetch cycle when a feed
        still needs fetching or ``refresh`` is set.

        All three user feeds and any catalog that still needs loading are
        fetched concurrently.
        """
        key = handle.lower()
        dashboard = self._dashboards.get(key)
        if dashboard is None:
            pipeline = AnalyticsPipeline(tz=self.tz)
            pipeline.set_catalog(self._problems)
            dashboard = UserDashboard(handle=handle, pipeline=pipeline)
            self._dashboards[key] = dashboard
            self._evict()
        else:
            self._dashboards.move_to_end(key)
            if not dashboard.needs_fetch and not refresh:
                dashboard.pipeline.set_today()
                return dashboard

        pipeline = dashboard.pipeline
        feeds = dashboard.feeds
        await asyncio.gather(
            self._run_feed(
                (key, "profile"), feeds["profile"],
                lambda: self.client.fetch_user_info(handle),
                pipeline.set_profile,
            ),
            self._run_feed(
                (key, "submissions"), feeds["submissions"],
                lambda: self.client.fetch_user_submissions(handle),
                pipeline.set_submissions,
            ),
            self._run_feed(
                (key, "rating"), feeds["rating"],
                lambda: self.client.fetch_user_rating(handle),
                pipeline.set_rating_history,
            ),
            *self._catalog_jobs(refresh),
        )
        pipeline.set_today()

        logger.info(
            f"Loaded {handle}: "
            + ", ".join(f"{name}={s.state.value}" for name, s in feeds.items())
        )
        return dashboard

    async def upcoming_contests(self, refresh: bool = False) -> List[Contest]:
        status = self.catalog_feeds["contests"]
        if refresh or status.state in (FeedState.IDLE, FeedState.FAILED):
            await self._run_feed("contests", status, self.client.fetch_contests, self._set_contests)
        return list(upcoming_contests(self._contests))
