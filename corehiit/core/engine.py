"""Interval timer state machine: get ready, work, rest, finished."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from corehiit.core.state import GET_READY_SEC, TimerPhase, TimerState
from corehiit.workout.model import Exercise, WorkoutPlan, validate_plan


Cue = Literal["start", "countdown", "go", "rest", "complete"]


@dataclass(frozen=True)
class TimerSnapshot:
    phase: TimerPhase
    current_round: int
    round_total: int
    current_exercise_index: int
    exercise_total: int
    exercise: Exercise
    upcoming_exercise: Exercise | None
    remaining_sec: int
    total_phase_sec: int
    progress_percent: float
    time_label: str
    is_paused: bool
    has_committed: bool


@dataclass(frozen=True)
class CompletionRequest:
    plan_name: str
    workout_type: str
    duration_minutes: int
    rounds: int
    exercise_count: int


ChangeCallback = Callable[[TimerSnapshot], None]
CueCallback = Callable[[Cue], None]
FinishCallback = Callable[[CompletionRequest], None]


def format_time(seconds: int) -> str:
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{secs:02d}"


def duration_minutes(plan: WorkoutPlan) -> int:
    return int(math.ceil(plan.total_duration_sec / 60))


class TimerEngine:
    """Drives one workout session through its phases.

    The engine never touches a clock. Callers feed it one ``tick()`` per
    elapsed second and may ``skip()`` at any time; both end up in the same
    expiry transition, so a skip can never leave the round/exercise counters
    in a state natural expiry would not produce.
    """

    def __init__(
        self,
        plan: WorkoutPlan,
        *,
        on_change: Optional[ChangeCallback] = None,
        on_cue: Optional[CueCallback] = None,
        on_finish: Optional[FinishCallback] = None,
        debug: bool = False,
    ) -> None:
        self._plan = validate_plan(plan)
        self._on_change = on_change
        self._on_cue = on_cue
        self._on_finish = on_finish
        self._debug = debug
        self._started = False
        self.state = TimerState()

    @property
    def is_finished(self) -> bool:
        return self.state.phase is TimerPhase.FINISHED

    @property
    def is_paused(self) -> bool:
        return self.state.is_paused

    @property
    def progress_percent(self) -> float:
        if self.state.total_phase_sec <= 0:
            return 0.0
        return (self.state.remaining_sec / self.state.total_phase_sec) * 100.0

    @property
    def current_exercise(self) -> Exercise:
        return self._plan.exercises[self.state.current_exercise_index]

    def upcoming_exercise(self) -> Exercise | None:
        if self.state.phase is TimerPhase.GET_READY:
            return self.current_exercise
        if self.state.phase is TimerPhase.FINISHED or self._is_last_slot():
            return None
        next_index = (self.state.current_exercise_index + 1) % len(self._plan.exercises)
        return self._plan.exercises[next_index]

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            phase=self.state.phase,
            current_round=self.state.current_round,
            round_total=self._plan.settings.rounds,
            current_exercise_index=self.state.current_exercise_index,
            exercise_total=len(self._plan.exercises),
            exercise=self.current_exercise,
            upcoming_exercise=self.upcoming_exercise(),
            remaining_sec=self.state.remaining_sec,
            total_phase_sec=self.state.total_phase_sec,
            progress_percent=self.progress_percent,
            time_label=format_time(self.state.remaining_sec),
            is_paused=self.state.is_paused,
            has_committed=self.state.has_committed,
        )

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        self._emit_cue("start")
        self._enter_get_ready()

    def tick(self) -> bool:
        """Advance the active countdown by one second."""
        if self.is_finished or self.state.is_paused:
            return False

        self.state.remaining_sec = max(0, self.state.remaining_sec - 1)
        if self.state.phase is TimerPhase.GET_READY and self.state.remaining_sec > 0:
            self._emit_cue("countdown")

        if self.state.remaining_sec <= 0:
            self._expire()
        else:
            self._notify()
        return True

    def skip(self) -> bool:
        if self.is_finished or self.state.has_committed:
            return False
        self.state.is_paused = False
        self._expire()
        return True

    def force_expire(self) -> bool:
        return self.skip()

    def pause(self) -> None:
        if self.is_finished or self.state.is_paused:
            return
        self.state.is_paused = True
        self._notify()

    def resume(self) -> None:
        if self.is_finished or not self.state.is_paused:
            return
        self.state.is_paused = False
        self._notify()

    def toggle_pause(self) -> bool:
        if self.state.is_paused:
            self.resume()
        else:
            self.pause()
        return self.state.is_paused

    def _is_last_slot(self) -> bool:
        last_exercise = self.state.current_exercise_index >= len(self._plan.exercises) - 1
        last_round = self.state.current_round >= self._plan.settings.rounds - 1
        return last_exercise and last_round

    def _expire(self) -> None:
        phase = self.state.phase
        if phase is TimerPhase.FINISHED:
            return
        if phase is TimerPhase.GET_READY:
            self._enter_working()
        elif phase is TimerPhase.WORKING:
            if self._is_last_slot():
                self._finish()
            elif self._plan.settings.rest_time_sec > 0:
                self._enter_resting()
            else:
                self._advance_after_rest()
        else:
            self._advance_after_rest()

    def _advance_after_rest(self) -> None:
        next_index = self.state.current_exercise_index + 1
        if next_index < len(self._plan.exercises):
            self.state.current_exercise_index = next_index
            self._enter_get_ready()
            return

        if self.state.current_round + 1 < self._plan.settings.rounds:
            self.state.current_round += 1
            self.state.current_exercise_index = 0
            self._enter_get_ready()
            return

        # Working on the last slot finishes first; kept as a fallback.
        self._finish()

    def _set_phase(self, phase: TimerPhase, duration_sec: int) -> None:
        self.state.phase = phase
        self.state.remaining_sec = duration_sec
        self.state.total_phase_sec = duration_sec
        if self._debug:
            print(
                f"[TIMER] {phase.value} round={self.state.current_round + 1}"
                f"/{self._plan.settings.rounds} exercise={self.state.current_exercise_index + 1}"
                f"/{len(self._plan.exercises)} duration={duration_sec}s"
            )

    def _enter_get_ready(self) -> None:
        self.state.is_paused = False
        self._set_phase(TimerPhase.GET_READY, GET_READY_SEC)
        self._emit_cue("countdown")
        self._notify()

    def _enter_working(self) -> None:
        self._set_phase(TimerPhase.WORKING, self._plan.settings.exercise_time_sec)
        self._emit_cue("go")
        self._notify()

    def _enter_resting(self) -> None:
        self._set_phase(TimerPhase.RESTING, self._plan.settings.rest_time_sec)
        self._emit_cue("rest")
        self._notify()

    def _finish(self) -> None:
        if self.state.has_committed:
            return
        self.state.has_committed = True
        self.state.phase = TimerPhase.FINISHED
        self.state.remaining_sec = 0
        self.state.is_paused = False
        if self._debug:
            print("[TIMER] finished")
        self._emit_cue("complete")
        self._notify()

        if self._on_finish is not None:
            self._on_finish(
                CompletionRequest(
                    plan_name=self._plan.name,
                    workout_type=self._plan.workout_type,
                    duration_minutes=duration_minutes(self._plan),
                    rounds=self._plan.settings.rounds,
                    exercise_count=len(self._plan.exercises),
                )
            )

    def _emit_cue(self, cue: Cue) -> None:
        if self._on_cue is not None:
            self._on_cue(cue)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.snapshot())
