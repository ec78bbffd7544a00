"""
Analytics API Models

Pydantic response schemas for the analytics routes. Engine objects are
converted with their ``to_dict`` output.
"""

from pydantic import BaseModel
from typing import Any, Dict, List, Optional


class FeedStatusModel(BaseModel):
    state: str = "idle"  # idle, loading, ready, empty, failed
    error: Optional[str] = None
    updated_at: Optional[str] = None


class ProfileModel(BaseModel):
    handle: str
    rating: Optional[int] = None
    max_rating: Optional[int] = None
    rank: str = "unrated"
    max_rank: Optional[str] = None
    avatar: Optional[str] = None


class BadgeModel(BaseModel):
    name: str
    icon: str
    description: str


class ProgressionModel(BaseModel):
    xp: int = 0
    level: int = 1
    next_level_xp: int = 500
    progress: float = 0.0
    badges: List[BadgeModel] = []


class InsightsModel(BaseModel):
    strengths: List[str] = []
    improvements: List[str] = []


class ContestResultModel(BaseModel):
    contest_id: Optional[int] = None
    contest_name: str = ""
    rank: Optional[int] = None
    old_rating: int
    new_rating: int
    rating_change: int
    performance: str  # "Good" or "Needs Improvement"


class ContestPerformanceModel(BaseModel):
    results: List[ContestResultModel] = []
    average_change: int = 0
    best_contest: ContestResultModel
    worst_contest: ContestResultModel
    total_contests: int = 0
    positive_contests: int = 0


class AnalyticsResponse(BaseModel):
    handle: str
    profile: Optional[ProfileModel] = None
    analytics: Optional[Dict[str, Any]] = None  # AnalyticsSnapshot.to_dict()
    progression: Optional[ProgressionModel] = None
    insights: Optional[InsightsModel] = None
    contest_performance: Optional[ContestPerformanceModel] = None
    rating_timeline: List[Dict[str, Any]] = []
    feeds: Dict[str, FeedStatusModel] = {}


class RecommendationModel(BaseModel):
    problem_id: str
    contest_id: Optional[int] = None
    index: str
    name: str = ""
    rating: Optional[int] = None
    tags: List[str] = []
    url: str
    reason: str  # weak_tag, wrong_pattern, skill_level
    message: str
    distance: int


class RecommendationsResponse(BaseModel):
    handle: str
    user_rating: Optional[int] = None
    tags: List[str] = []
    min_rating: int
    max_rating: int
    recommendations: List[RecommendationModel] = []
    feeds: Dict[str, FeedStatusModel] = {}


class ContestModel(BaseModel):
    contest_id: int
    name: str
    phase: str
    start_time: int = 0
    duration_seconds: int = 0
    type: str = ""
    url: str


class UpcomingContestsResponse(BaseModel):
    contests: List[ContestModel] = []
    feed: FeedStatusModel


class ContestPerformanceResponse(BaseModel):
    handle: str
    performance: Optional[ContestPerformanceModel] = None
    rating_timeline: List[Dict[str, Any]] = []
    feed: FeedStatusModel
