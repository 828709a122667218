"""Workout logs and aggregated user stats persisted locally."""

from __future__ import annotations

import json
import threading
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Protocol


DEFAULT_WEEKLY_GOAL = 3


def default_data_dir() -> Path:
    return Path.home() / ".core-hiit"


@dataclass(frozen=True)
class WorkoutLogRecord:
    user_id: str
    duration_minutes: int
    workout_type: str
    completed_at: str

    @property
    def completed_at_dt(self) -> datetime:
        return parse_timestamp(self.completed_at)


@dataclass(frozen=True)
class UserStats:
    user_id: str
    total_workouts: int = 0
    total_minutes: int = 0
    current_streak: int = 0
    last_workout_date: str | None = None
    weekly_goal: int = DEFAULT_WEEKLY_GOAL


class StatsStore(Protocol):
    def has_log_since(self, user_id: str, since: datetime) -> bool: ...

    def insert_log(self, record: WorkoutLogRecord) -> None: ...


def now_utc() -> datetime:
    return datetime.now(tz=timezone.utc)


def parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def next_streak(current_streak: int, last_workout_date: str | None, workout_day: date) -> int:
    if last_workout_date is None:
        return 1
    last_day = date.fromisoformat(last_workout_date)
    if workout_day == last_day:
        return max(1, current_streak)
    if workout_day - last_day == timedelta(days=1):
        return current_streak + 1
    if workout_day < last_day:
        return current_streak
    return 1


def _accumulate(raw: dict | None, record: WorkoutLogRecord) -> UserStats:
    current = UserStats(**raw) if raw is not None else UserStats(user_id=record.user_id)
    workout_day = record.completed_at_dt.date()
    streak = next_streak(current.current_streak, current.last_workout_date, workout_day)
    last_day = current.last_workout_date
    if last_day is None or workout_day.isoformat() > last_day:
        last_day = workout_day.isoformat()
    return UserStats(
        user_id=record.user_id,
        total_workouts=current.total_workouts + 1,
        total_minutes=current.total_minutes + int(record.duration_minutes),
        current_streak=streak,
        last_workout_date=last_day,
        weekly_goal=current.weekly_goal,
    )


class LocalStatsStore:
    """JSON-lines workout log plus a per-user stats file.

    Inserting a log updates the user's aggregate in the same call, the way the
    hosted store's insert trigger does.
    """

    def __init__(self, base_dir: Path | None = None) -> None:
        self._base_dir = base_dir or default_data_dir()
        self._lock = threading.Lock()

    @property
    def logs_path(self) -> Path:
        return self._base_dir / "workout_logs.jsonl"

    @property
    def stats_path(self) -> Path:
        return self._base_dir / "user_stats.json"

    def has_log_since(self, user_id: str, since: datetime) -> bool:
        for record in self.load_logs(user_id=user_id):
            if record.completed_at_dt >= since:
                return True
        return False

    def insert_log(self, record: WorkoutLogRecord) -> None:
        with self._lock:
            self._base_dir.mkdir(parents=True, exist_ok=True)
            previous = self._read_stats()
            payload = dict(previous)
            payload[record.user_id] = asdict(_accumulate(previous.get(record.user_id), record))
            # Aggregate first, log last: a failed write leaves neither side changed.
            self._write_stats(payload)
            try:
                with self.logs_path.open("a", encoding="utf-8") as handle:
                    handle.write(json.dumps(asdict(record), ensure_ascii=True) + "\n")
            except OSError:
                self._write_stats(previous)
                raise

    def load_logs(self, user_id: str | None = None, limit: int | None = None) -> list[WorkoutLogRecord]:
        if not self.logs_path.exists():
            return []

        lines = self.logs_path.read_text(encoding="utf-8").splitlines()
        out: list[WorkoutLogRecord] = []
        for raw in reversed(lines):
            if not raw.strip():
                continue
            try:
                record = WorkoutLogRecord(**json.loads(raw))
            except Exception:
                continue
            if user_id is not None and record.user_id != user_id:
                continue
            out.append(record)
            if limit is not None and len(out) >= limit:
                break
        return out

    def get_user_stats(self, user_id: str) -> UserStats | None:
        raw = self._read_stats().get(user_id)
        if raw is None:
            return None
        return UserStats(**raw)

    def ensure_user_stats(self, user_id: str) -> bool:
        if not user_id:
            raise ValueError("No user ID provided")
        with self._lock:
            payload = self._read_stats()
            if user_id in payload:
                return False
            payload[user_id] = asdict(UserStats(user_id=user_id))
            self._write_stats(payload)
        print(f"[STATS] created stats for user {user_id}")
        return True

    def _read_stats(self) -> dict[str, dict]:
        if not self.stats_path.exists():
            return {}
        try:
            data = json.loads(self.stats_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            print(f"[STATS] stats file unreadable, rebuilding from workout log: {exc}")
            return self._rebuild_stats()
        if not isinstance(data, dict):
            print("[STATS] stats file malformed, rebuilding from workout log")
            return self._rebuild_stats()
        return data

    def _rebuild_stats(self) -> dict[str, dict]:
        payload: dict[str, dict] = {}
        for record in reversed(self.load_logs()):
            payload[record.user_id] = asdict(_accumulate(payload.get(record.user_id), record))
        return payload

    def _write_stats(self, payload: dict[str, dict]) -> None:
        self._base_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = self.stats_path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(payload, ensure_ascii=True, indent=2), encoding="utf-8")
        tmp_path.replace(self.stats_path)
