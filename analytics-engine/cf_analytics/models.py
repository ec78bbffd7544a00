"""
Domain Models

Typed, immutable views over the Codeforces API payloads the engine consumes.
Every ``from_api`` constructor accepts the raw JSON dict exactly as the API
returns it and tolerates missing optional fields.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Verdict(Enum):
    """Judge outcome of a single submission."""
    OK = "OK"
    WRONG_ANSWER = "WRONG_ANSWER"
    TIME_LIMIT_EXCEEDED = "TIME_LIMIT_EXCEEDED"
    MEMORY_LIMIT_EXCEEDED = "MEMORY_LIMIT_EXCEEDED"
    RUNTIME_ERROR = "RUNTIME_ERROR"
    COMPILATION_ERROR = "COMPILATION_ERROR"
    OTHER = "OTHER"  # Anything else, including submissions still in queue

    @classmethod
    def parse(cls, raw: Optional[str]) -> "Verdict":
        if raw is None:
            return cls.OTHER
        try:
            return cls(raw)
        except ValueError:
            return cls.OTHER

    @property
    def is_accepted(self) -> bool:
        return self is Verdict.OK


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _unique_tags(tags: Any) -> Tuple[str, ...]:
    """Tags as an ordered tuple with duplicates dropped."""
    if not tags:
        return ()
    return tuple(dict.fromkeys(str(t) for t in tags))


def make_problem_id(contest_id: Any, index: Any) -> str:
    """Stable problem identity: contest id followed by problem index (e.g. "1850C")."""
    return f"{contest_id if contest_id is not None else ''}{index or ''}"


@dataclass(frozen=True)
class Problem:
    """A problem from the global catalog."""
    contest_id: Optional[int]
    index: str
    name: str = ""
    rating: Optional[int] = None
    tags: Tuple[str, ...] = ()

    @property
    def problem_id(self) -> str:
        return make_problem_id(self.contest_id, self.index)

    @property
    def url(self) -> str:
        return f"https://codeforces.com/problemset/problem/{self.contest_id}/{self.index}"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Problem":
        return cls(
            contest_id=_optional_int(data.get("contestId")),
            index=str(data.get("index", "")),
            name=data.get("name", ""),
            rating=_optional_int(data.get("rating")),
            tags=_unique_tags(data.get("tags")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "problem_id": self.problem_id,
            "contest_id": self.contest_id,
            "index": self.index,
            "name": self.name,
            "rating": self.rating,
            "tags": list(self.tags),
            "url": self.url,
        }


@dataclass(frozen=True)
class Submission:
    """One judged submission, flattened with the problem it targets."""
    submission_id: Optional[int]
    problem: Problem
    verdict: Verdict
    submitted_at: int  # epoch seconds
    participant_type: str = ""
    contest_id: Optional[int] = None

    @property
    def problem_id(self) -> str:
        return self.problem.problem_id

    @property
    def rating(self) -> Optional[int]:
        return self.problem.rating

    @property
    def tags(self) -> Tuple[str, ...]:
        return self.problem.tags

    @property
    def is_accepted(self) -> bool:
        return self.verdict.is_accepted

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Submission":
        problem_data = data.get("problem")
        if not isinstance(problem_data, dict):
            raise ValueError("submission has no problem")
        author = data.get("author") or {}
        return cls(
            submission_id=_optional_int(data.get("id")),
            problem=Problem.from_api(problem_data),
            verdict=Verdict.parse(data.get("verdict")),
            submitted_at=_optional_int(data.get("creationTimeSeconds")) or 0,
            participant_type=author.get("participantType", ""),
            contest_id=_optional_int(data.get("contestId")),
        )


@dataclass(frozen=True)
class UserProfile:
    handle: str
    rating: Optional[int] = None
    max_rating: Optional[int] = None
    rank: str = "unrated"
    max_rank: Optional[str] = None
    avatar: Optional[str] = None

    @property
    def effective_rating(self) -> Optional[int]:
        """Current rating, falling back to the historical maximum."""
        return self.rating if self.rating is not None else self.max_rating

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "UserProfile":
        return cls(
            handle=data.get("handle", ""),
            rating=_optional_int(data.get("rating")),
            max_rating=_optional_int(data.get("maxRating")),
            rank=data.get("rank") or "unrated",
            max_rank=data.get("maxRank"),
            avatar=data.get("titlePhoto") or data.get("avatar"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "handle": self.handle,
            "rating": self.rating,
            "max_rating": self.max_rating,
            "rank": self.rank,
            "max_rank": self.max_rank,
            "avatar": self.avatar,
        }


@dataclass(frozen=True)
class ContestRatingChange:
    contest_id: Optional[int]
    old_rating: int
    new_rating: int
    rating_update_time: int
    contest_name: str = ""
    rank: Optional[int] = None

    @property
    def rating_change(self) -> int:
        return self.new_rating - self.old_rating

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ContestRatingChange":
        return cls(
            contest_id=_optional_int(data.get("contestId")),
            old_rating=_optional_int(data.get("oldRating")) or 0,
            new_rating=_optional_int(data.get("newRating")) or 0,
            rating_update_time=_optional_int(data.get("ratingUpdateTimeSeconds")) or 0,
            contest_name=data.get("contestName", ""),
            rank=_optional_int(data.get("rank")),
        )


@dataclass(frozen=True)
class Contest:
    """An entry of the contest catalog."""
    contest_id: int
    name: str
    phase: str
    start_time: int = 0
    duration_seconds: int = 0
    kind: str = ""

    @property
    def url(self) -> str:
        return f"https://codeforces.com/contest/{self.contest_id}"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Contest":
        return cls(
            contest_id=_optional_int(data.get("id")) or 0,
            name=data.get("name", ""),
            phase=data.get("phase", ""),
            start_time=_optional_int(data.get("startTimeSeconds")) or 0,
            duration_seconds=_optional_int(data.get("durationSeconds")) or 0,
            kind=data.get("type", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contest_id": self.contest_id,
            "name": self.name,
            "phase": self.phase,
            "start_time": self.start_time,
            "duration_seconds": self.duration_seconds,
            "type": self.kind,
            "url": self.url,
        }


def local_datetime(epoch_seconds: int, tz: Optional[tzinfo] = None) -> datetime:
    """Epoch seconds as a datetime in ``tz`` (the machine's local zone when None)."""
    return datetime.fromtimestamp(epoch_seconds, tz)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity."""
    return int(math.floor(value + 0.5))


def local_today(tz: Optional[tzinfo] = None) -> date:
    return datetime.now(tz).date()
