from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from corehiit.workout.stats_store import LocalStatsStore, WorkoutLogRecord, next_streak


def _record(user_id: str, day: str, minutes: int = 10) -> WorkoutLogRecord:
    return WorkoutLogRecord(
        user_id=user_id,
        duration_minutes=minutes,
        workout_type="Core HIIT",
        completed_at=f"{day}T07:30:00+00:00",
    )


def test_insert_and_load_recent_logs(tmp_path: Path) -> None:
    store = LocalStatsStore(tmp_path)
    store.insert_log(_record("u1", "2026-02-25", 10))
    store.insert_log(_record("u2", "2026-02-25", 5))
    store.insert_log(_record("u1", "2026-02-26", 20))

    loaded = store.load_logs(user_id="u1", limit=5)

    assert len(loaded) == 2
    assert loaded[0].duration_minutes == 20
    assert loaded[1].duration_minutes == 10
    assert len(store.load_logs()) == 3
    assert len(store.load_logs(limit=1)) == 1


def test_unreadable_log_lines_are_skipped(tmp_path: Path) -> None:
    store = LocalStatsStore(tmp_path)
    store.insert_log(_record("u1", "2026-02-25"))
    with store.logs_path.open("a", encoding="utf-8") as handle:
        handle.write("{not json\n\n")

    assert len(store.load_logs(user_id="u1")) == 1


def test_stats_aggregate_and_streak(tmp_path: Path) -> None:
    store = LocalStatsStore(tmp_path)
    store.insert_log(_record("u1", "2026-03-01", 10))
    store.insert_log(_record("u1", "2026-03-01", 5))
    store.insert_log(_record("u1", "2026-03-02", 15))

    stats = store.get_user_stats("u1")
    assert stats is not None
    assert stats.total_workouts == 3
    assert stats.total_minutes == 30
    assert stats.current_streak == 2
    assert stats.last_workout_date == "2026-03-02"

    store.insert_log(_record("u1", "2026-03-05", 10))
    stats = store.get_user_stats("u1")
    assert stats is not None
    assert stats.current_streak == 1
    assert stats.last_workout_date == "2026-03-05"


def test_ensure_user_stats_is_idempotent(tmp_path: Path) -> None:
    store = LocalStatsStore(tmp_path)

    assert store.ensure_user_stats("u1") is True
    assert store.ensure_user_stats("u1") is False
    stats = store.get_user_stats("u1")
    assert stats is not None
    assert stats.total_workouts == 0
    assert stats.weekly_goal == 3
    assert store.get_user_stats("nobody") is None

    with pytest.raises(ValueError):
        store.ensure_user_stats("")


def test_has_log_since(tmp_path: Path) -> None:
    store = LocalStatsStore(tmp_path)
    store.insert_log(_record("u1", "2026-02-25"))

    assert store.has_log_since("u1", datetime(2026, 2, 25, 7, 0, tzinfo=timezone.utc))
    assert not store.has_log_since("u1", datetime(2026, 2, 25, 8, 0, tzinfo=timezone.utc))
    assert not store.has_log_since("u2", datetime(2026, 2, 1, tzinfo=timezone.utc))


def test_next_streak_rules() -> None:
    assert next_streak(0, None, date(2026, 3, 1)) == 1
    assert next_streak(4, "2026-03-01", date(2026, 3, 1)) == 4
    assert next_streak(4, "2026-03-01", date(2026, 3, 2)) == 5
    assert next_streak(4, "2026-03-01", date(2026, 3, 4)) == 1


def test_failed_log_append_restores_aggregate(tmp_path: Path) -> None:
    store = LocalStatsStore(tmp_path)
    store.insert_log(_record("u1", "2026-03-01", 10))
    store.logs_path.unlink()
    store.logs_path.mkdir()

    with pytest.raises(OSError):
        store.insert_log(_record("u1", "2026-03-02", 20))

    stats = store.get_user_stats("u1")
    assert stats is not None
    assert stats.total_workouts == 1
    assert stats.total_minutes == 10


def test_corrupt_stats_file_is_rebuilt_from_log(tmp_path: Path) -> None:
    store = LocalStatsStore(tmp_path)
    store.insert_log(_record("alice", "2026-03-01", 500))
    store.insert_log(_record("bob", "2026-03-01", 500))
    store.stats_path.write_text('{"alice": {"user_id": "al', encoding="utf-8")

    store.insert_log(_record("alice", "2026-03-02", 5))

    alice = store.get_user_stats("alice")
    bob = store.get_user_stats("bob")
    assert alice is not None and bob is not None
    assert alice.total_workouts == 2
    assert alice.total_minutes == 505
    assert alice.current_streak == 2
    assert bob.total_minutes == 500
    assert len(store.load_logs()) == 3
