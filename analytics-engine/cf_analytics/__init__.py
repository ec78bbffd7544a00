"""
CF Analytics - Codeforces Activity Analytics & Practice Recommendations

Pure, synchronous engine that turns a user's Codeforces feeds into metrics,
weakness/strength classifications and a ranked practice list.

Layers:
1. Submission Normalizer (dedup, time order, problem identity) - normalizer.py
2. Metric Aggregator (accuracy, histograms, tag counters) - metrics.py
3. Streak Calculator (consecutive solve days) - streaks.py
4. Weakness/Strength Classifier (tag ranking) - classifier.py
5. Wrong-Pattern Miner (tag x rating bucket) - patterns.py
6. Recommendation Engine (catalog filtering & ranking) - recommender.py
7. Contest Performance Analyzer (rating history) - contests.py

Glue:
- Analytics Snapshot (immutable bundle of 1-5) - snapshot.py
- Gamification & Insights (XP, badges, notes) - gamification.py
- Analytics Pipeline (versioned recomputation, fetch tokens) - pipeline.py
"""

from .models import (
    Verdict,
    Problem,
    Submission,
    UserProfile,
    ContestRatingChange,
    Contest,
    make_problem_id,
)

from .normalizer import (
    NormalizedSubmissions,
    normalize_submissions,
)

from .metrics import (
    MetricSummary,
    HourBucket,
    RatingPoint,
    ContestActivity,
    UNKNOWN_RATING,
    aggregate_metrics,
    compute_accuracy,
)

from .streaks import (
    StreakRecord,
    calculate_streaks,
)

from .classifier import (
    TagPerformance,
    classify_weak_tags,
    classify_strong_tags,
)

from .patterns import (
    WrongPattern,
    mine_wrong_patterns,
)

from .snapshot import (
    AnalyticsSnapshot,
    build_snapshot,
)

from .recommender import (
    DifficultyRange,
    Recommendation,
    RecommendationReason,
    parse_catalog,
    recommend_problems,
)

from .contests import (
    ContestResult,
    ContestPerformance,
    analyze_contest_performance,
    normalize_rating_history,
    upcoming_contests,
)

from .gamification import (
    Badge,
    Progression,
    Insights,
    compute_progression,
    derive_insights,
)

from .pipeline import (
    AnalyticsPipeline,
    FetchTokens,
)

__version__ = "1.0.0"
__all__ = [
    # Models
    "Verdict",
    "Problem",
    "Submission",
    "UserProfile",
    "ContestRatingChange",
    "Contest",
    "make_problem_id",
    # Normalizer
    "NormalizedSubmissions",
    "normalize_submissions",
    # Metrics
    "MetricSummary",
    "HourBucket",
    "RatingPoint",
    "ContestActivity",
    "UNKNOWN_RATING",
    "aggregate_metrics",
    "compute_accuracy",
    # Streaks
    "StreakRecord",
    "calculate_streaks",
    # Classifier
    "TagPerformance",
    "classify_weak_tags",
    "classify_strong_tags",
    # Patterns
    "WrongPattern",
    "mine_wrong_patterns",
    # Snapshot
    "AnalyticsSnapshot",
    "build_snapshot",
    # Recommender
    "DifficultyRange",
    "Recommendation",
    "RecommendationReason",
    "parse_catalog",
    "recommend_problems",
    # Contests
    "ContestResult",
    "ContestPerformance",
    "analyze_contest_performance",
    "normalize_rating_history",
    "upcoming_contests",
    # Gamification
    "Badge",
    "Progression",
    "Insights",
    "compute_progression",
    "derive_insights",
    # Pipeline
    "AnalyticsPipeline",
    "FetchTokens",
]
