from fastapi import FastAPI, APIRouter, Depends, HTTPException, Query
from starlette.middleware.cors import CORSMiddleware
import logging
from typing import Optional

from cf_analytics.contests import rating_timeline
from cf_analytics.recommender import DEFAULT_MAX_RATING, DEFAULT_MIN_RATING

from config import CORS_ORIGINS, LOG_LEVEL, BACKEND_HOST, BACKEND_PORT
from models.analytics import (
    AnalyticsResponse,
    ContestPerformanceResponse,
    RecommendationsResponse,
    UpcomingContestsResponse,
)
from services.dashboard import DashboardService, UserDashboard


# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create the main app without a prefix
app = FastAPI(title="CF Analytics API")

# Create a router with the /api prefix
api_router = APIRouter(prefix="/api")

_service: Optional[DashboardService] = None


def get_dashboard_service() -> DashboardService:
    """Process-wide dashboard service, created on first use."""
    global _service
    if _service is None:
        _service = DashboardService()
    return _service


def _feeds(dashboard: UserDashboard) -> dict:
    return {name: status.to_dict() for name, status in dashboard.feeds.items()}


async def _load(service: DashboardService, handle: str, refresh: bool) -> UserDashboard:
    handle = handle.strip()
    if not handle:
        raise HTTPException(status_code=400, detail="Handle is required")

    dashboard = await service.load_user(handle, refresh=refresh)
    if dashboard.handle_not_found:
        service.forget(handle)
        raise HTTPException(status_code=404, detail=f"User {handle} not found")
    return dashboard


@api_router.get("/")
async def root():
    return {"message": "CF Analytics API"}

@api_router.get("/health")
async def health():
    return {"status": "ok"}


@api_router.get("/analytics/{handle}", response_model=AnalyticsResponse)
async def get_analytics(
    handle: str,
    refresh: bool = False,
    service: DashboardService = Depends(get_dashboard_service),
):
    """
    Full dashboard for a handle: profile, submission analytics, progression,
    insights and contest performance, plus the state of every feed.
    """
    dashboard = await _load(service, handle, refresh)
    pipeline = dashboard.pipeline

    snapshot = pipeline.snapshot
    progression = pipeline.progression
    insights = pipeline.insights
    performance = pipeline.contest_performance
    profile = pipeline.profile

    return AnalyticsResponse(
        handle=profile.handle if profile and profile.handle else dashboard.handle,
        profile=profile.to_dict() if profile else None,
        analytics=snapshot.to_dict() if snapshot else None,
        progression=progression.to_dict() if progression else None,
        insights=insights.to_dict() if insights else None,
        contest_performance=performance.to_dict() if performance else None,
        rating_timeline=rating_timeline(pipeline.rating_history),
        feeds=_feeds(dashboard),
    )


@api_router.get("/recommendations/{handle}", response_model=RecommendationsResponse)
async def get_recommendations(
    handle: str,
    tags: Optional[str] = Query(None, description="Comma separated tag filter"),
    min_rating: int = Query(DEFAULT_MIN_RATING, alias="minRating", ge=0),
    max_rating: int = Query(DEFAULT_MAX_RATING, alias="maxRating", ge=0),
    refresh: bool = False,
    service: DashboardService = Depends(get_dashboard_service),
):
    """
    Practice problems ranked around the user's rating + 150. Empty when the
    user is unrated or has no submissions yet.
    """
    if min_rating > max_rating:
        raise HTTPException(status_code=400, detail="minRating must not exceed maxRating")

    dashboard = await _load(service, handle, refresh)
    pipeline = dashboard.pipeline

    tag_filter = [t.strip() for t in (tags or "").split(",") if t.strip()]
    pipeline.set_tag_filter(tag_filter)
    pipeline.set_difficulty_range(min_rating, max_rating)

    profile = pipeline.profile
    return RecommendationsResponse(
        handle=dashboard.handle,
        user_rating=profile.effective_rating if profile else None,
        tags=tag_filter,
        min_rating=min_rating,
        max_rating=max_rating,
        recommendations=[r.to_dict() for r in pipeline.recommendations],
        feeds={**_feeds(dashboard), "problems": service.catalog_feeds["problems"].to_dict()},
    )


@api_router.get("/contests/upcoming", response_model=UpcomingContestsResponse)
async def get_upcoming_contests(
    refresh: bool = False,
    service: DashboardService = Depends(get_dashboard_service),
):
    contests = await service.upcoming_contests(refresh=refresh)
    return UpcomingContestsResponse(
        contests=[c.to_dict() for c in contests],
        feed=service.catalog_feeds["contests"].to_dict(),
    )


@api_router.get("/contests/performance/{handle}", response_model=ContestPerformanceResponse)
async def get_contest_performance(
    handle: str,
    refresh: bool = False,
    service: DashboardService = Depends(get_dashboard_service),
):
    dashboard = await _load(service, handle, refresh)
    pipeline = dashboard.pipeline
    performance = pipeline.contest_performance

    return ContestPerformanceResponse(
        handle=dashboard.handle,
        performance=performance.to_dict() if performance else None,
        rating_timeline=rating_timeline(pipeline.rating_history),
        feed=dashboard.feeds["rating"].to_dict(),
    )


# Include the router in the main app
app.include_router(api_router)

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=BACKEND_HOST, port=BACKEND_PORT)
