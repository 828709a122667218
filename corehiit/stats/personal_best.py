"""Personal bests computed from a user's workout logs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Sequence

from corehiit.workout.stats_store import WorkoutLogRecord


@dataclass(frozen=True)
class BestWeek:
    count: int
    start: date | None
    end: date | None

    @property
    def label(self) -> str:
        if self.start is None or self.end is None:
            return "No data"
        return f"{_fmt_day(self.start)} - {_fmt_day(self.end)}"


@dataclass(frozen=True)
class PersonalBests:
    longest_streak: int
    longest_workout_minutes: int
    best_week: BestWeek


def _fmt_day(value: date) -> str:
    return f"{value.strftime('%b')} {value.day}"


def _workout_days(logs: Iterable[WorkoutLogRecord]) -> list[date]:
    return [log.completed_at_dt.date() for log in logs]


def longest_streak(days: Iterable[date]) -> int:
    unique = sorted(set(days))
    if not unique:
        return 0
    best = current = 1
    for prev, curr in zip(unique, unique[1:]):
        current = current + 1 if curr - prev == timedelta(days=1) else 1
        best = max(best, current)
    return best


def longest_workout(logs: Sequence[WorkoutLogRecord]) -> int:
    return max((int(log.duration_minutes) for log in logs), default=0)


def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def best_week(logs: Sequence[WorkoutLogRecord]) -> BestWeek:
    counts: dict[date, int] = {}
    for day in sorted(_workout_days(logs)):
        monday = week_start(day)
        counts[monday] = counts.get(monday, 0) + 1
    if not counts:
        return BestWeek(count=0, start=None, end=None)

    best_start, best_count = None, 0
    for monday, count in counts.items():
        if count > best_count:
            best_start, best_count = monday, count
    assert best_start is not None
    return BestWeek(count=best_count, start=best_start, end=best_start + timedelta(days=6))


def workouts_this_week(logs: Sequence[WorkoutLogRecord], today: date) -> int:
    monday = week_start(today)
    return sum(1 for day in _workout_days(logs) if monday <= day <= today)


def compute_personal_bests(logs: Sequence[WorkoutLogRecord], current_streak: int = 0) -> PersonalBests:
    return PersonalBests(
        longest_streak=max(current_streak, longest_streak(_workout_days(logs))),
        longest_workout_minutes=longest_workout(logs),
        best_week=best_week(logs),
    )
