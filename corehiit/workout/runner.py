"""Workout execution on an asyncio 1-second clock."""

from __future__ import annotations

import asyncio
import contextlib
from typing import Callable, Optional

from corehiit.core.engine import (
    CompletionRequest,
    CueCallback,
    TimerEngine,
    TimerSnapshot,
)
from corehiit.workout.completion import CommitResult, commit_completion
from corehiit.workout.model import WorkoutPlan
from corehiit.workout.stats_store import StatsStore


ProgressCallback = Callable[[TimerSnapshot], None]
FinishCallback = Callable[[bool], None]
CommitCallback = Callable[[CommitResult], None]


class WorkoutRunner:
    def __init__(
        self,
        store: StatsStore,
        user_id: str | None,
        *,
        tick_interval_sec: float = 1.0,
        debug: bool = False,
    ) -> None:
        self._store = store
        self._user_id = user_id
        self._tick_interval_sec = tick_interval_sec
        self._debug = debug
        self._engine: Optional[TimerEngine] = None
        self._countdown: Optional[asyncio.Task[None]] = None
        self._commit_task: Optional[asyncio.Task[CommitResult]] = None
        self._pending_commits: set[asyncio.Task[CommitResult]] = set()
        self._done_event = asyncio.Event()
        self._on_finish: Optional[FinishCallback] = None
        self._on_commit: Optional[CommitCallback] = None
        self._active = False

    @property
    def is_running(self) -> bool:
        return self._active

    @property
    def pending_commits(self) -> int:
        return len(self._pending_commits)

    @property
    def engine(self) -> TimerEngine | None:
        return self._engine

    def snapshot(self) -> TimerSnapshot | None:
        return self._engine.snapshot() if self._engine is not None else None

    async def start(
        self,
        plan: WorkoutPlan,
        on_progress: ProgressCallback,
        on_finish: FinishCallback,
        on_cue: Optional[CueCallback] = None,
        on_commit: Optional[CommitCallback] = None,
    ) -> None:
        if self.is_running:
            raise RuntimeError("Workout already running")

        engine = TimerEngine(
            plan,
            on_change=on_progress,
            on_cue=on_cue,
            on_finish=self._on_engine_finish,
            debug=self._debug,
        )
        self._engine = engine
        self._on_finish = on_finish
        self._on_commit = on_commit
        self._commit_task = None
        self._done_event = asyncio.Event()
        self._active = True
        engine.start()
        self._restart_countdown()

    def pause(self) -> None:
        if not self.is_running or self._engine is None:
            return
        self._engine.pause()
        self._cancel_countdown()

    def resume(self) -> None:
        if not self.is_running or self._engine is None:
            return
        self._engine.resume()
        self._restart_countdown()

    def toggle_pause(self) -> bool:
        if self._engine is None:
            return False
        if self._engine.is_paused:
            self.resume()
        else:
            self.pause()
        return self._engine.is_paused

    def skip(self) -> bool:
        if not self.is_running or self._engine is None:
            return False
        if not self._engine.skip():
            return False
        if self.is_running:
            self._restart_countdown()
        return True

    async def stop(self) -> None:
        if not self.is_running:
            return

        self._active = False
        task = self._countdown
        self._cancel_countdown()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if self._debug:
            print("[RUNNER] workout stopped before completion")
        self._done_event.set()
        if self._on_finish is not None:
            self._on_finish(False)

    async def wait(self) -> None:
        await self._done_event.wait()

    async def wait_for_commit(self) -> CommitResult | None:
        if self._commit_task is None:
            return None
        return await self._commit_task

    def _restart_countdown(self) -> None:
        self._cancel_countdown()
        self._countdown = asyncio.create_task(self._countdown_loop())

    def _cancel_countdown(self) -> None:
        task = self._countdown
        self._countdown = None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

    async def _countdown_loop(self) -> None:
        engine = self._engine
        assert engine is not None
        while not engine.is_finished:
            await asyncio.sleep(self._tick_interval_sec)
            engine.tick()

    def _on_engine_finish(self, request: CompletionRequest) -> None:
        self._cancel_countdown()
        self._active = False
        self._commit_task = asyncio.create_task(self._commit(request, self._on_commit))
        self._pending_commits.add(self._commit_task)
        self._commit_task.add_done_callback(self._pending_commits.discard)
        self._done_event.set()
        if self._on_finish is not None:
            self._on_finish(True)

    async def _commit(self, request: CompletionRequest, on_commit: Optional[CommitCallback]) -> CommitResult:
        result = await commit_completion(self._store, self._user_id, request)
        if on_commit is not None:
            on_commit(result)
        return result
