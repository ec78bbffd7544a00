"""
Tests for the HTTP routes

The dashboard service is swapped for one whose Codeforces client talks to an
httpx.MockTransport.
"""

import httpx
import pytest
import sys
from datetime import timezone
from pathlib import Path

# Add backend and engine to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "analytics-engine"))

from fastapi.testclient import TestClient

from server import app, get_dashboard_service
from services.codeforces import CodeforcesClient
from services.dashboard import DashboardService

SUBMISSIONS = [
    {"id": 3, "creationTimeSeconds": 1700000300, "verdict": "WRONG_ANSWER",
     "problem": {"contestId": 2, "index": "B", "rating": 1400, "tags": ["dp"]}},
    {"id": 2, "creationTimeSeconds": 1700000200, "verdict": "TIME_LIMIT_EXCEEDED",
     "problem": {"contestId": 2, "index": "B", "rating": 1400, "tags": ["dp"]}},
    {"id": 1, "creationTimeSeconds": 1700000100, "verdict": "OK",
     "problem": {"contestId": 1, "index": "A", "rating": 1200, "tags": ["dp"]}},
]

API = {
    "user.info": [{"handle": "alice", "rating": 1500, "maxRating": 1550, "rank": "specialist"}],
    "user.status": SUBMISSIONS,
    "user.rating": [
        {"contestId": 9, "contestName": "Round 9", "oldRating": 1450, "newRating": 1420, "ratingUpdateTimeSeconds": 2},
        {"contestId": 8, "contestName": "Round 8", "oldRating": 1400, "newRating": 1450, "ratingUpdateTimeSeconds": 1},
    ],
    "contest.list": [
        {"id": 20, "name": "Later Round", "phase": "BEFORE", "startTimeSeconds": 2000},
        {"id": 19, "name": "Next Round", "phase": "BEFORE", "startTimeSeconds": 1000},
        {"id": 18, "name": "Past Round", "phase": "FINISHED", "startTimeSeconds": 10},
    ],
    "problemset.problems": {"problems": [
        {"contestId": 1, "index": "A", "name": "Solved", "rating": 1200, "tags": ["dp"]},
        {"contestId": 4, "index": "A", "name": "Knapsack", "rating": 1700, "tags": ["dp"]},
        {"contestId": 5, "index": "C", "name": "Paths", "rating": 1900, "tags": ["dp", "graphs"]},
    ]},
}


def handler(request):
    method = request.url.path.rsplit("/", 1)[-1]
    handle = request.url.params.get("handle") or request.url.params.get("handles")
    if handle == "ghost":
        return httpx.Response(400, json={
            "status": "FAILED", "comment": f"handle: User with handle {handle} not found",
        })
    if handle == "flaky" and method == "user.status":
        return httpx.Response(503, text="unavailable")
    return httpx.Response(200, json={"status": "OK", "result": API[method]})


@pytest.fixture
def client():
    cf_client = CodeforcesClient(base_url="https://cf.test/api", transport=httpx.MockTransport(handler))
    service = DashboardService(cf_client, tz=timezone.utc)
    app.dependency_overrides[get_dashboard_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestAnalytics:

    def test_full_dashboard(self, client):
        response = client.get("/api/analytics/alice")
        assert response.status_code == 200
        data = response.json()

        assert data["profile"]["rating"] == 1500
        assert data["analytics"]["solved"] == 1
        assert data["analytics"]["total"] == 3
        assert data["analytics"]["weak_tags"] == ["dp"]
        assert data["progression"]["level"] == 1
        assert data["contest_performance"]["average_change"] == 10
        assert [p["contest_id"] for p in data["rating_timeline"]] == [8, 9]
        assert {name: f["state"] for name, f in data["feeds"].items()} == {
            "profile": "ready", "submissions": "ready", "rating": "ready",
        }

    def test_unknown_handle(self, client):
        response = client.get("/api/analytics/ghost")

        assert response.status_code == 404
        assert "ghost" in response.json()["detail"]

    def test_failed_feed_is_reported(self, client):
        response = client.get("/api/analytics/flaky")
        assert response.status_code == 200
        data = response.json()

        assert data["analytics"] is None
        assert data["feeds"]["submissions"]["state"] == "failed"
        assert "503" in data["feeds"]["submissions"]["error"]
        assert data["contest_performance"] is not None


class TestRecommendations:

    def test_default_range(self, client):
        response = client.get("/api/recommendations/alice")
        assert response.status_code == 200
        data = response.json()

        assert data["user_rating"] == 1500
        assert [r["problem_id"] for r in data["recommendations"]] == ["4A", "5C"]
        assert data["recommendations"][0]["reason"] == "weak_tag"
        assert data["feeds"]["problems"]["state"] == "ready"

    def test_tag_filter(self, client):
        response = client.get("/api/recommendations/alice", params={"tags": "graphs"})
        assert [r["problem_id"] for r in response.json()["recommendations"]] == ["5C"]

    def test_rating_range(self, client):
        response = client.get(
            "/api/recommendations/alice", params={"minRating": 1800, "maxRating": 2000}
        )
        data = response.json()

        assert (data["min_rating"], data["max_rating"]) == (1800, 2000)
        assert [r["problem_id"] for r in data["recommendations"]] == ["5C"]

    def test_inverted_range_rejected(self, client):
        response = client.get(
            "/api/recommendations/alice", params={"minRating": 2000, "maxRating": 1000}
        )
        assert response.status_code == 400

    def test_unknown_handle(self, client):
        assert client.get("/api/recommendations/ghost").status_code == 404


class TestContests:

    def test_upcoming(self, client):
        response = client.get("/api/contests/upcoming")
        assert response.status_code == 200
        data = response.json()

        assert [c["contest_id"] for c in data["contests"]] == [19, 20]
        assert data["contests"][0]["url"] == "https://codeforces.com/contest/19"
        assert data["feed"]["state"] == "ready"

    def test_performance(self, client):
        response = client.get("/api/contests/performance/alice")
        assert response.status_code == 200
        perf = response.json()["performance"]

        assert perf["best_contest"]["contest_id"] == 8
        assert perf["worst_contest"]["contest_id"] == 9
        assert perf["positive_contests"] == 1
