"""Mutable state owned by a single timer session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


GET_READY_SEC = 3


class TimerPhase(str, Enum):
    GET_READY = "get_ready"
    WORKING = "working"
    RESTING = "resting"
    FINISHED = "finished"


@dataclass
class TimerState:
    phase: TimerPhase = TimerPhase.GET_READY
    current_round: int = 0
    current_exercise_index: int = 0
    remaining_sec: int = GET_READY_SEC
    total_phase_sec: int = GET_READY_SEC
    is_paused: bool = False
    # Set once, before the completion commit is handed off.
    has_committed: bool = False
