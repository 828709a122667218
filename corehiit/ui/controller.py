"""Async controller shared by the web UI and the terminal runner."""

from __future__ import annotations

import random
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from corehiit.core.engine import CueCallback, TimerSnapshot
from corehiit.progression.badges import BadgeStatus, badge_statuses
from corehiit.progression.levels import ProgressionSnapshot, calculate_next_level_progress
from corehiit.stats.personal_best import PersonalBests, compute_personal_bests, workouts_this_week
from corehiit.workout.catalog import load_catalog
from corehiit.workout.completion import CommitResult
from corehiit.workout.generator import generate_workout
from corehiit.workout.library import Catalog, default_catalog
from corehiit.workout.model import WorkoutPlan
from corehiit.workout.runner import WorkoutRunner
from corehiit.workout.stats_store import LocalStatsStore, UserStats, WorkoutLogRecord, now_utc


class UIController:
    def __init__(
        self,
        user_id: str = "local",
        data_dir: Path | None = None,
        catalog_path: Path | None = None,
        tick_interval_sec: float = 1.0,
        seed: int | None = None,
        debug_timer: bool = False,
    ) -> None:
        self._user_id = user_id
        self._store = LocalStatsStore(data_dir)
        self._catalog: Catalog = load_catalog(catalog_path) if catalog_path else default_catalog()
        self._rng = random.Random(seed)
        self._runner = WorkoutRunner(
            self._store,
            user_id,
            tick_interval_sec=tick_interval_sec,
            debug=debug_timer,
        )
        self._store.ensure_user_stats(user_id)

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def store(self) -> LocalStatsStore:
        return self._store

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def generate(self, equipment: list[str], total_minutes: int, workout_type: str) -> WorkoutPlan | None:
        return generate_workout(
            equipment,
            total_minutes,
            workout_type,
            catalog=self._catalog,
            rng=self._rng,
        )

    async def start_workout(
        self,
        plan: WorkoutPlan,
        on_progress: Callable[[TimerSnapshot], None],
        on_finish: Callable[[bool], None],
        on_cue: Optional[CueCallback] = None,
        on_commit: Optional[Callable[[CommitResult], None]] = None,
    ) -> None:
        await self._runner.start(plan, on_progress, on_finish, on_cue=on_cue, on_commit=on_commit)

    async def stop_workout(self) -> None:
        await self._runner.stop()

    async def wait_for_workout(self) -> CommitResult | None:
        await self._runner.wait()
        return await self._runner.wait_for_commit()

    def toggle_pause(self) -> bool:
        return self._runner.toggle_pause()

    def skip(self) -> bool:
        return self._runner.skip()

    def snapshot(self) -> TimerSnapshot | None:
        return self._runner.snapshot()

    @property
    def workout_running(self) -> bool:
        return self._runner.is_running

    def user_stats(self) -> UserStats:
        return self._store.get_user_stats(self._user_id) or UserStats(user_id=self._user_id)

    def recent_logs(self, limit: int = 20) -> list[WorkoutLogRecord]:
        return self._store.load_logs(user_id=self._user_id, limit=limit)

    def progression(self) -> ProgressionSnapshot:
        return calculate_next_level_progress(self.user_stats().total_minutes)

    def badges(self) -> list[BadgeStatus]:
        return badge_statuses(self.user_stats().total_minutes)

    def personal_bests(self) -> PersonalBests:
        logs = self._store.load_logs(user_id=self._user_id)
        return compute_personal_bests(logs, current_streak=self.user_stats().current_streak)

    def workouts_this_week(self, today: date | None = None) -> int:
        logs = self._store.load_logs(user_id=self._user_id)
        return workouts_this_week(logs, today or now_utc().date())
