from __future__ import annotations

import asyncio
import threading
from datetime import datetime

import pytest

from corehiit.core.engine import TimerSnapshot
from corehiit.core.state import TimerPhase
from corehiit.workout.completion import CommitResult
from corehiit.workout.model import Exercise, PlanValidationError, WorkoutPlan, WorkoutSettings
from corehiit.workout.runner import WorkoutRunner
from corehiit.workout.stats_store import WorkoutLogRecord

FAST_TICK = 0.001


class FakeStore:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.records: list[WorkoutLogRecord] = []
        self.checks = 0

    def has_log_since(self, user_id: str, since: datetime) -> bool:
        self.checks += 1
        return False

    def insert_log(self, record: WorkoutLogRecord) -> None:
        if self.fail:
            raise OSError("network unreachable")
        self.records.append(record)


def _plan(rounds: int = 1, count: int = 2, work: int = 2, rest: int = 1) -> WorkoutPlan:
    return WorkoutPlan(
        exercises=tuple(
            Exercise(name=f"Move {i + 1}", equipment="Bodyweight", category="full-body")
            for i in range(count)
        ),
        settings=WorkoutSettings(
            rounds=rounds,
            exercise_time_sec=work,
            rest_time_sec=rest,
            exercises_per_round=count,
        ),
        total_duration_sec=90,
    )


def test_runner_completes_and_commits_once() -> None:
    async def _run() -> None:
        store = FakeStore()
        runner = WorkoutRunner(store, "user-1", tick_interval_sec=FAST_TICK)
        progresses: list[TimerSnapshot] = []
        finishes: list[bool] = []
        commits: list[CommitResult] = []

        await runner.start(
            _plan(),
            on_progress=progresses.append,
            on_finish=finishes.append,
            on_commit=commits.append,
        )
        assert runner.is_running
        await asyncio.wait_for(runner.wait(), timeout=5.0)
        result = await runner.wait_for_commit()

        assert finishes == [True]
        assert not runner.is_running
        assert result is not None and result.outcome == "saved"
        assert [c.outcome for c in commits] == ["saved"]
        assert len(store.records) == 1
        assert store.records[0].duration_minutes == 2
        assert store.records[0].workout_type == "Core HIIT"
        assert progresses[-1].phase is TimerPhase.FINISHED
        assert any(p.phase is TimerPhase.RESTING for p in progresses)

    asyncio.run(_run())


def test_skip_spam_commits_once() -> None:
    async def _run() -> None:
        store = FakeStore()
        runner = WorkoutRunner(store, "user-1", tick_interval_sec=0.05)
        finishes: list[bool] = []

        await runner.start(_plan(rounds=2, count=3), on_progress=lambda _p: None, on_finish=finishes.append)
        while runner.is_running:
            runner.skip()
        for _ in range(5):
            assert runner.skip() is False
        await asyncio.sleep(0.12)
        await runner.wait_for_commit()

        assert finishes == [True]
        assert len(store.records) == 1
        assert store.checks == 1

    asyncio.run(_run())


def test_stop_before_finish_never_commits() -> None:
    async def _run() -> None:
        store = FakeStore()
        runner = WorkoutRunner(store, "user-1", tick_interval_sec=0.01)
        finishes: list[bool] = []

        await runner.start(_plan(work=30), on_progress=lambda _p: None, on_finish=finishes.append)
        await asyncio.sleep(0.05)
        await runner.stop()
        await runner.wait()

        assert finishes == [False]
        assert await runner.wait_for_commit() is None
        assert store.records == []
        assert store.checks == 0
        assert runner.skip() is False

    asyncio.run(_run())


def test_commit_failure_does_not_block_completion() -> None:
    async def _run() -> None:
        runner = WorkoutRunner(FakeStore(fail=True), "user-1", tick_interval_sec=FAST_TICK)
        finishes: list[bool] = []
        commits: list[CommitResult] = []

        await runner.start(
            _plan(count=1),
            on_progress=lambda _p: None,
            on_finish=finishes.append,
            on_commit=commits.append,
        )
        await asyncio.wait_for(runner.wait(), timeout=5.0)
        result = await runner.wait_for_commit()

        assert finishes == [True]
        assert result is not None
        assert result.outcome == "failed"
        assert not result.ok
        assert "couldn't be saved" in result.message
        assert commits == [result]

    asyncio.run(_run())


def test_pause_freezes_remaining_time() -> None:
    async def _run() -> None:
        runner = WorkoutRunner(FakeStore(), "user-1", tick_interval_sec=0.01)
        await runner.start(_plan(work=60), on_progress=lambda _p: None, on_finish=lambda _d: None)
        runner.skip()
        runner.pause()
        frozen = runner.snapshot()
        await asyncio.sleep(0.06)
        after = runner.snapshot()

        assert frozen is not None and after is not None
        assert after.is_paused
        assert after.remaining_sec == frozen.remaining_sec
        assert after.phase is frozen.phase

        assert runner.toggle_pause() is False
        await asyncio.sleep(0.06)
        resumed = runner.snapshot()
        assert resumed is not None
        assert resumed.remaining_sec < frozen.remaining_sec
        await runner.stop()

    asyncio.run(_run())


def test_runner_rejects_concurrent_and_malformed_sessions() -> None:
    async def _run() -> None:
        runner = WorkoutRunner(FakeStore(), "user-1", tick_interval_sec=0.01)
        bad_plan = WorkoutPlan(
            exercises=(),
            settings=WorkoutSettings(rounds=1, exercise_time_sec=30, rest_time_sec=10),
            total_duration_sec=60,
        )
        with pytest.raises(PlanValidationError):
            await runner.start(bad_plan, on_progress=lambda _p: None, on_finish=lambda _d: None)
        assert not runner.is_running

        await runner.start(_plan(work=30), on_progress=lambda _p: None, on_finish=lambda _d: None)
        with pytest.raises(RuntimeError):
            await runner.start(_plan(), on_progress=lambda _p: None, on_finish=lambda _d: None)
        await runner.stop()

    asyncio.run(_run())


class GatedStore(FakeStore):
    def __init__(self) -> None:
        super().__init__()
        self.gate = threading.Event()

    def insert_log(self, record: WorkoutLogRecord) -> None:
        self.gate.wait(timeout=5.0)
        super().insert_log(record)


def test_previous_commit_survives_a_new_session() -> None:
    async def _run() -> None:
        store = GatedStore()
        runner = WorkoutRunner(store, "user-1", tick_interval_sec=FAST_TICK)
        first: list[CommitResult] = []
        second: list[CommitResult] = []

        await runner.start(
            _plan(),
            on_progress=lambda _p: None,
            on_finish=lambda _ok: None,
            on_commit=first.append,
        )
        await asyncio.wait_for(runner.wait(), timeout=5.0)
        assert runner.pending_commits == 1

        await runner.start(
            _plan(),
            on_progress=lambda _p: None,
            on_finish=lambda _ok: None,
            on_commit=second.append,
        )
        await asyncio.wait_for(runner.wait(), timeout=5.0)
        store.gate.set()

        async def _drain() -> None:
            while runner.pending_commits:
                await asyncio.sleep(0.01)

        await asyncio.wait_for(_drain(), timeout=5.0)
        assert [r.outcome for r in first] == ["saved"]
        assert [r.outcome for r in second] == ["saved"]
        assert len(store.records) == 2

    asyncio.run(_run())
