"""
Gamification & Insights

XP, levels and badges earned from recent activity, plus the short
strength/improvement notes shown next to the charts.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

from .metrics import top_tags
from .snapshot import AnalyticsSnapshot

XP_PER_ACCEPTED = 10
XP_PER_LEVEL = 500


@dataclass(frozen=True)
class Badge:
    name: str
    icon: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "icon": self.icon, "description": self.description}


@dataclass(frozen=True)
class BadgeRule:
    badge: Badge
    earned: Callable[[AnalyticsSnapshot, int], bool]


BADGE_RULES: Tuple[BadgeRule, ...] = (
    BadgeRule(Badge("Thinker", "🧠", "Solved 50+ problems"),
              lambda snap, accepted: accepted >= 50),
    BadgeRule(Badge("Sprinter", "🥇", "Solved 100+ problems"),
              lambda snap, accepted: accepted >= 100),
    BadgeRule(Badge("Sharpshooter", "🎯", "60%+ accuracy"),
              lambda snap, accepted: snap.accuracy >= 60),
    BadgeRule(Badge("Consistent", "🔥", "7-day streak"),
              lambda snap, accepted: snap.streaks.current >= 7),
    BadgeRule(Badge("Challenger", "⚔️", "Hard problems solver"),
              lambda snap, accepted: snap.average_difficulty >= 1600),
)


@dataclass(frozen=True)
class Progression:
    xp: int
    level: int
    next_level_xp: int
    progress: float  # percent of the current level
    badges: Tuple[Badge, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "xp": self.xp,
            "level": self.level,
            "next_level_xp": self.next_level_xp,
            "progress": round(self.progress, 2),
            "badges": [b.to_dict() for b in self.badges],
        }


@dataclass(frozen=True)
class Insights:
    strengths: Tuple[str, ...] = field(default_factory=tuple)
    improvements: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, List[str]]:
        return {"strengths": list(self.strengths), "improvements": list(self.improvements)}


def recent_accepted(snapshot: AnalyticsSnapshot) -> int:
    """Accepted submissions inside the recent verdict window."""
    return dict(snapshot.metrics.verdict_distribution).get("Accepted", 0)


def compute_progression(snapshot: AnalyticsSnapshot) -> Progression:
    accepted = recent_accepted(snapshot)
    xp = accepted * XP_PER_ACCEPTED
    level = xp // XP_PER_LEVEL + 1
    return Progression(
        xp=xp,
        level=level,
        next_level_xp=level * XP_PER_LEVEL,
        progress=(xp % XP_PER_LEVEL) / XP_PER_LEVEL * 100,
        badges=tuple(rule.badge for rule in BADGE_RULES if rule.earned(snapshot, accepted)),
    )


def derive_insights(snapshot: AnalyticsSnapshot) -> Insights:
    ranked = top_tags(snapshot.tag_stats)

    strengths = [f"Strong in {tag} ({count} solved)" for tag, count in ranked[:3]]
    if snapshot.streaks.current >= 3:
        strengths.append(f"Consistent practice ({snapshot.streaks.current} day streak)")
    if snapshot.accuracy >= 70:
        strengths.append(f"High accuracy rate ({snapshot.accuracy}%)")

    improvements = []
    if len(ranked) > 3:
        improvements.append(f"Explore {', '.join(tag for tag, _ in ranked[-3:])}")
    if snapshot.average_difficulty < 1400:
        improvements.append("Try harder problems (1400+ rating)")
    if snapshot.accuracy < 50:
        improvements.append("Focus on accuracy - review before submitting")

    return Insights(strengths=tuple(strengths), improvements=tuple(improvements))
