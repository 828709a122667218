"""Workout domain models."""

from __future__ import annotations

from dataclasses import dataclass


class PlanValidationError(ValueError):
    """Raised when a workout plan cannot drive a timer session."""


@dataclass(frozen=True)
class Exercise:
    name: str
    equipment: str
    category: str
    video_url: str = ""
    key: str = ""


@dataclass(frozen=True)
class WorkoutSettings:
    rounds: int
    exercise_time_sec: int
    rest_time_sec: int
    round_rest_time_sec: int = 0
    exercises_per_round: int = 0


@dataclass(frozen=True)
class WorkoutPlan:
    exercises: tuple[Exercise, ...]
    settings: WorkoutSettings
    total_duration_sec: int
    workout_type: str = "full-body"
    name: str = "HIIT Workout"

    @property
    def total_minutes(self) -> int:
        return self.total_duration_sec // 60

    @property
    def total_time_label(self) -> str:
        return f"{self.total_minutes} min"


def validate_plan(plan: WorkoutPlan | None) -> WorkoutPlan:
    if plan is None:
        raise PlanValidationError("No workout plan provided")
    if not plan.exercises:
        raise PlanValidationError("Workout must include at least one exercise")

    settings = plan.settings
    if settings.rounds < 1:
        raise PlanValidationError("Workout must have at least one round")
    if settings.exercise_time_sec <= 0:
        raise PlanValidationError("Exercise time must be > 0 seconds")
    if settings.rest_time_sec < 0:
        raise PlanValidationError("Rest time must be >= 0 seconds")
    if settings.round_rest_time_sec != 0:
        raise PlanValidationError("Round rest is not supported; use rest time between exercises")
    return plan
