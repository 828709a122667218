"""Exactly-once persistence of a finished workout."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Literal

from corehiit.core.engine import CompletionRequest
from corehiit.workout.stats_store import StatsStore, WorkoutLogRecord, now_utc


WORKOUT_TYPE = "Core HIIT"
DUPLICATE_WINDOW_SEC = 30
SAVE_FAILED_MESSAGE = "Your workout was completed but stats couldn't be saved."

CommitOutcome = Literal["saved", "duplicate", "failed", "skipped"]


@dataclass(frozen=True)
class CommitResult:
    outcome: CommitOutcome
    record: WorkoutLogRecord | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome != "failed"


async def commit_completion(
    store: StatsStore,
    user_id: str | None,
    request: CompletionRequest,
    *,
    now: datetime | None = None,
) -> CommitResult:
    if not user_id:
        return CommitResult(outcome="skipped", message="No signed-in user")

    completed_at = now or now_utc()
    since = completed_at - timedelta(seconds=DUPLICATE_WINDOW_SEC)
    try:
        if await asyncio.to_thread(store.has_log_since, user_id, since):
            print(f"[STATS] duplicate save prevented for user {user_id}")
            return CommitResult(outcome="duplicate")

        record = WorkoutLogRecord(
            user_id=user_id,
            duration_minutes=request.duration_minutes,
            workout_type=WORKOUT_TYPE,
            completed_at=completed_at.isoformat(),
        )
        await asyncio.to_thread(store.insert_log, record)
    except Exception as exc:
        print(f"[STATS] save failed: {exc}")
        return CommitResult(outcome="failed", message=SAVE_FAILED_MESSAGE)

    print(f"[STATS] workout saved ({record.duration_minutes} min)")
    return CommitResult(outcome="saved", record=record)
