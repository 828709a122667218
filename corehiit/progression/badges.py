"""Badge table unlocked by training level."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from corehiit.progression.levels import calculate_level, minutes_for_level


@dataclass(frozen=True)
class BadgeDefinition:
    level: int
    name: str
    description: str
    key: str

    @property
    def minutes_required(self) -> int:
        return minutes_for_level(self.level)


@dataclass(frozen=True)
class BadgeStatus:
    badge: BadgeDefinition
    unlocked: bool

    @property
    def caption(self) -> str:
        if self.unlocked:
            return self.badge.description
        return f"Unlocks at Level {self.badge.level}"


class BadgeTier(Enum):
    STANDARD = "standard"
    ELITE = "elite"
    MASTER = "master"
    LEGEND = "legend"

    @property
    def color(self) -> str:
        return _TIER_COLORS[self]


_TIER_COLORS = {
    BadgeTier.STANDARD: "#38bdf8",
    BadgeTier.ELITE: "#ef4444",
    BadgeTier.MASTER: "#a855f7",
    BadgeTier.LEGEND: "#eab308",
}


BADGES: tuple[BadgeDefinition, ...] = (
    BadgeDefinition(1, "Rookie", "First steps taken.", "badge_1"),
    BadgeDefinition(3, "Challenger", "Rising to the challenge.", "badge_3"),
    BadgeDefinition(5, "Achiever", "Serious dedication.", "badge_5"),
    BadgeDefinition(10, "Master", "True mastery of self.", "badge_10"),
    BadgeDefinition(15, "Grandmaster", "Among the elite.", "badge_15"),
    BadgeDefinition(20, "Legend", "A fitness god.", "badge_20"),
)


def badge_tier(level: int) -> BadgeTier:
    if level >= 20:
        return BadgeTier.LEGEND
    if level >= 15:
        return BadgeTier.MASTER
    if level >= 10:
        return BadgeTier.ELITE
    return BadgeTier.STANDARD


def is_unlocked(badge: BadgeDefinition, minutes: float | None) -> bool:
    return calculate_level(minutes) >= badge.level


def badge_statuses(minutes: float | None) -> list[BadgeStatus]:
    level = calculate_level(minutes)
    return [BadgeStatus(badge=badge, unlocked=level >= badge.level) for badge in BADGES]


def unlocked_badges(minutes: float | None) -> list[BadgeDefinition]:
    return [status.badge for status in badge_statuses(minutes) if status.unlocked]


def next_badge(minutes: float | None) -> BadgeDefinition | None:
    level = calculate_level(minutes)
    return next((badge for badge in BADGES if badge.level > level), None)
