"""
Wrong-Pattern Miner

Finds the (tag, rating bucket) combinations that show up most often among
rejected submissions, e.g. "dp around 1200".
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, Tuple

from .models import Submission

BUCKET_SIZE = 100
PATTERN_LIMIT = 5


@dataclass(frozen=True)
class WrongPattern:
    tag: str
    rating: int
    count: int

    @property
    def key(self) -> str:
        return f"{self.tag}-{self.rating}"

    def to_dict(self) -> Dict:
        return {"tag": self.tag, "rating": self.rating, "count": self.count}


def rating_bucket(rating: int) -> int:
    """Nearest hundred (halves go to the even hundred: 1250 -> 1200)."""
    return round(rating / BUCKET_SIZE) * BUCKET_SIZE


def mine_wrong_patterns(
    submissions: Iterable[Submission],
    limit: int = PATTERN_LIMIT,
) -> Tuple[WrongPattern, ...]:
    """
    Count rejected submissions per (tag, rating bucket).

    Unrated problems are skipped. Buckets are returned most frequent first;
    equal counts keep first-seen order.
    """
    counts: Counter = Counter()
    for sub in submissions:
        if sub.is_accepted or sub.rating is None:
            continue
        bucket = rating_bucket(sub.rating)
        for tag in sub.tags:
            counts[(tag, bucket)] += 1

    return tuple(
        WrongPattern(tag=tag, rating=bucket, count=n)
        for (tag, bucket), n in counts.most_common(limit)
    )
