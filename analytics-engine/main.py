#!/usr/bin/env python3
"""
CF Analytics - Main Runner

Local runner for the analytics engine over saved Codeforces API payloads.

Usage:
    python main.py demo                                   # Run on built-in sample data
    python main.py analyze --submissions status.json      # Analyze saved user.status output
    python main.py analyze --submissions status.json \\
        --rating rating.json --problems problems.json --user-rating 1500 --tags dp,greedy
"""

import argparse
import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from cf_analytics.models import UserProfile
from cf_analytics.pipeline import AnalyticsPipeline
from cf_analytics.recommender import DEFAULT_MAX_RATING, DEFAULT_MIN_RATING


def load_payload(path: Optional[str]) -> List[Any]:
    """
    Load a saved API response. Accepts the full ``{"status": ..., "result": ...}``
    envelope or the bare result. ``problemset.problems`` results are unwrapped
    to their problem list.
    """
    if not path:
        return []
    with open(Path(path), "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict) and "result" in data:
        if data.get("status") != "OK":
            raise SystemExit(f"{path}: upstream status {data.get('status')!r}: {data.get('comment', '')}")
        data = data["result"]
    if isinstance(data, dict) and "problems" in data:
        data = data["problems"]
    if not isinstance(data, list):
        raise SystemExit(f"{path}: expected a list of records")
    return data


def sample_data() -> Dict[str, List[Dict]]:
    """Small deterministic activity history ending today."""
    now = datetime.now(timezone.utc).replace(hour=12, minute=0, second=0, microsecond=0)
    plan = [
        # (days ago, contest, index, rating, tags, verdict)
        (9, 1850, "A", 800, ["implementation"], "OK"),
        (8, 1850, "B", 1100, ["greedy", "sortings"], "OK"),
        (6, 1851, "C", 1400, ["dp"], "WRONG_ANSWER"),
        (6, 1851, "C", 1400, ["dp"], "WRONG_ANSWER"),
        (5, 1851, "C", 1400, ["dp"], "OK"),
        (2, 1852, "D", 1600, ["dp", "graphs"], "TIME_LIMIT_EXCEEDED"),
        (1, 1852, "D", 1600, ["dp", "graphs"], "WRONG_ANSWER"),
        (1, 1853, "B", 1200, ["math"], "OK"),
        (0, 1854, "A", 900, ["math", "greedy"], "OK"),
    ]
    submissions = []
    for i, (days_ago, contest, index, rating, tags, verdict) in enumerate(plan):
        submissions.append({
            "id": i + 1,
            "contestId": contest,
            "creationTimeSeconds": int((now - timedelta(days=days_ago)).timestamp()),
            "problem": {"contestId": contest, "index": index, "rating": rating, "tags": tags},
            "author": {"participantType": "PRACTICE"},
            "verdict": verdict,
        })

    problems = [
        {"contestId": 1900 + i, "index": "C", "name": f"Practice {i}", "rating": 1300 + 100 * i, "tags": tags}
        for i, tags in enumerate([["dp"], ["dp", "graphs"], ["graphs"], ["math"], ["dp", "math"]])
    ]
    rating = [
        {"contestId": 1852, "contestName": "Round 3", "oldRating": 1450, "newRating": 1420, "ratingUpdateTimeSeconds": 3},
        {"contestId": 1851, "contestName": "Round 2", "oldRating": 1400, "newRating": 1450, "ratingUpdateTimeSeconds": 2},
        {"contestId": 1850, "contestName": "Round 1", "oldRating": 1500, "newRating": 1400, "ratingUpdateTimeSeconds": 1},
    ]
    return {"submissions": submissions, "problems": problems, "rating": rating}


def print_header(text: str):
    print("\n" + "=" * 60)
    print(f"  {text}")
    print("=" * 60)


def print_section(text: str):
    print(f"\n--- {text} ---")


def report(pipeline: AnalyticsPipeline, as_json: bool = False):
    snapshot = pipeline.snapshot
    performance = pipeline.contest_performance
    recommendations = pipeline.recommendations

    if as_json:
        print(json.dumps({
            "analytics": snapshot.to_dict() if snapshot else None,
            "progression": pipeline.progression.to_dict() if pipeline.progression else None,
            "insights": pipeline.insights.to_dict() if pipeline.insights else None,
            "contest_performance": performance.to_dict() if performance else None,
            "recommendations": [r.to_dict() for r in recommendations],
        }, indent=2, ensure_ascii=False))
        return

    print_header("CF Analytics Report")
    if snapshot is None:
        print("  No submissions to analyze.")
    else:
        print_section("Overview")
        print(f"  Solved: {snapshot.solved_count} / {snapshot.total_count} submissions")
        print(f"  Accuracy: {snapshot.accuracy}%")
        print(f"  Unique problems solved: {snapshot.metrics.unique_solved}")
        print(f"  Average difficulty: {snapshot.average_difficulty}")
        print(f"  Streak: {snapshot.streaks.current} (max {snapshot.streaks.max})")

        print_section("Tags")
        print(f"  Strong: {', '.join(snapshot.strong_tags) or '-'}")
        print(f"  Weak: {', '.join(snapshot.weak_tags) or '-'}")
        for pattern in snapshot.wrong_patterns:
            print(f"  Pattern: {pattern.tag} @ {pattern.rating} x{pattern.count}")

        progression = pipeline.progression
        print_section("Progress")
        print(f"  Level {progression.level} ({progression.xp}/{progression.next_level_xp} XP)")
        for badge in progression.badges:
            print(f"  {badge.icon} {badge.name} - {badge.description}")
        for line in pipeline.insights.strengths:
            print(f"  + {line}")
        for line in pipeline.insights.improvements:
            print(f"  > {line}")

    if performance is not None:
        print_section("Contests")
        print(f"  Contests: {performance.total_contests} ({performance.positive_contests} positive)")
        print(f"  Average change: {performance.average_change:+d}")
        print(f"  Best: {performance.best.change.contest_name} ({performance.best.rating_change:+d})")
        print(f"  Worst: {performance.worst.change.contest_name} ({performance.worst.rating_change:+d})")

    print_section("Recommendations")
    if not recommendations:
        print("  None (needs a rating, analytics and a problem catalog)")
    for rec in recommendations:
        p = rec.problem
        print(f"  {p.problem_id:>8} [{p.rating}] {p.name} - {rec.message}")


def run(args):
    pipeline = AnalyticsPipeline()

    if args.mode == "demo":
        data = sample_data()
        pipeline.set_submissions(data["submissions"])
        pipeline.set_catalog(data["problems"])
        pipeline.set_rating_history(data["rating"])
        pipeline.set_profile(UserProfile(handle="demo", rating=args.user_rating or 1420))
    else:
        if not args.submissions:
            raise SystemExit("analyze mode needs --submissions")
        pipeline.set_submissions(load_payload(args.submissions))
        pipeline.set_rating_history(load_payload(args.rating))
        pipeline.set_catalog(load_payload(args.problems))
        if args.user_rating is not None:
            pipeline.set_profile(UserProfile(handle=args.handle, rating=args.user_rating))

    if args.tags:
        pipeline.set_tag_filter(t.strip() for t in args.tags.split(",") if t.strip())
    pipeline.set_difficulty_range(args.min_rating, args.max_rating)

    report(pipeline, as_json=args.json)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="CF Analytics - Codeforces activity analytics & practice recommendations"
    )
    parser.add_argument(
        "mode",
        nargs="?",
        default="demo",
        choices=["demo", "analyze"],
        help="Run mode: demo (built-in sample) or analyze (saved payloads)"
    )
    parser.add_argument("--submissions", help="Saved user.status response")
    parser.add_argument("--rating", help="Saved user.rating response")
    parser.add_argument("--problems", help="Saved problemset.problems response")
    parser.add_argument("--handle", default="local", help="Handle shown in the report")
    parser.add_argument("--user-rating", type=int, help="Rating used to rank recommendations")
    parser.add_argument("--tags", help="Comma separated tag filter for recommendations")
    parser.add_argument("--min-rating", type=int, default=DEFAULT_MIN_RATING)
    parser.add_argument("--max-rating", type=int, default=DEFAULT_MAX_RATING)
    parser.add_argument("--json", action="store_true", help="Print machine-readable JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    run(args)


if __name__ == "__main__":
    main()
