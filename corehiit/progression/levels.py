"""Level thresholds and progress derived from cumulative training minutes."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


MAX_LEVEL = 20


def generate_thresholds(max_level: int = MAX_LEVEL) -> tuple[int, ...]:
    """Cumulative minute floors for levels 0..max_level.

    Level 1 needs 10 minutes, level 2 another 60, then every increment doubles.
    """
    thresholds = [0]
    increment = 10
    for level in range(1, max_level + 1):
        if level == 1:
            increment = 10
        elif level == 2:
            increment = 60
        else:
            increment *= 2
        thresholds.append(thresholds[-1] + increment)
    return tuple(thresholds)


LEVEL_THRESHOLDS: tuple[int, ...] = generate_thresholds()


@dataclass(frozen=True)
class ProgressionSnapshot:
    level: int
    current_level_floor: int
    next_level_floor: int
    progress_percent: float
    minutes_to_next_level: int

    @property
    def is_max_level(self) -> bool:
        return self.level >= MAX_LEVEL


def calculate_level(minutes: float | None) -> int:
    if not minutes or minutes < 0:
        return 0
    return max(0, bisect_right(LEVEL_THRESHOLDS, minutes) - 1)


def calculate_next_level_progress(minutes: float | None) -> ProgressionSnapshot:
    safe_minutes = minutes if minutes and minutes > 0 else 0
    level = calculate_level(safe_minutes)

    if level >= MAX_LEVEL:
        cap = LEVEL_THRESHOLDS[MAX_LEVEL]
        return ProgressionSnapshot(
            level=level,
            current_level_floor=cap,
            next_level_floor=cap,
            progress_percent=100.0,
            minutes_to_next_level=0,
        )

    floor = LEVEL_THRESHOLDS[level]
    ceiling = LEVEL_THRESHOLDS[level + 1]
    into_level = max(0, safe_minutes - floor)
    percent = min(100.0, max(0.0, (into_level / (ceiling - floor)) * 100.0))
    return ProgressionSnapshot(
        level=level,
        current_level_floor=floor,
        next_level_floor=ceiling,
        progress_percent=percent,
        minutes_to_next_level=int(max(0, ceiling - safe_minutes)),
    )


def minutes_for_level(level: int) -> int:
    clamped = min(MAX_LEVEL, max(0, level))
    return LEVEL_THRESHOLDS[clamped]
