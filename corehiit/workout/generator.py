"""Randomized HIIT plan generation from an exercise catalog."""

from __future__ import annotations

import random
from typing import Iterable

from corehiit.workout.catalog import canonical_category
from corehiit.workout.library import Catalog, default_catalog
from corehiit.workout.model import Exercise, WorkoutPlan, WorkoutSettings


FALLBACK_EXERCISES: tuple[Exercise, ...] = (
    Exercise("Burpees (Fallback)", "Bodyweight", "full-body", key="fallback-1"),
    Exercise("Jumping Jacks (Fallback)", "Bodyweight", "full-body", key="fallback-2"),
    Exercise("Squats (Fallback)", "Bodyweight", "full-body", key="fallback-3"),
)


def settings_for_minutes(total_minutes: int) -> tuple[WorkoutSettings, int]:
    """Round/work/rest layout and exercise count for a requested duration."""
    if total_minutes <= 5:
        rounds, work, rest, count = 2, 30, 15, 3
    elif total_minutes <= 10:
        rounds, work, rest, count = 3, 30, 15, 4
    elif total_minutes <= 15:
        rounds, work, rest, count = 3, 40, 20, 5
    else:
        rounds, work, rest, count = 4, 40, 20, 4

    if total_minutes >= 20:
        count = 5
    if total_minutes >= 30:
        count = 6

    settings = WorkoutSettings(
        rounds=rounds,
        exercise_time_sec=work,
        rest_time_sec=rest,
        round_rest_time_sec=0,
    )
    return settings, count


def _candidate_pool(catalog: Catalog, equipment: Iterable[str], target_category: str) -> list[Exercise]:
    pool: list[Exercise] = []
    for equipment_key in equipment:
        groups = catalog.get(equipment_key)
        if not groups:
            continue
        if target_category == "full-body":
            for category in ("full-body", "upper-body", "lower-body", "core"):
                pool.extend(groups.get(category, []))
        else:
            pool.extend(groups.get(target_category, []))

    unique: dict[str, Exercise] = {}
    for exercise in pool:
        unique.setdefault(exercise.name, exercise)
    return list(unique.values())


def generate_workout(
    equipment: list[str] | tuple[str, ...],
    total_minutes: int,
    workout_type: str,
    *,
    catalog: Catalog | None = None,
    rng: random.Random | None = None,
) -> WorkoutPlan | None:
    if not equipment:
        return None

    source = catalog if catalog is not None else default_catalog()
    picker = rng or random.Random()
    target_category = canonical_category(workout_type)

    search_equipment = list(equipment)
    if workout_type == "core" and "core" not in search_equipment:
        search_equipment.append("core")

    base_settings, exercise_count = settings_for_minutes(total_minutes)
    pool = _candidate_pool(source, search_equipment, target_category)
    picker.shuffle(pool)
    selected = tuple(pool[:exercise_count]) or FALLBACK_EXERCISES

    settings = WorkoutSettings(
        rounds=base_settings.rounds,
        exercise_time_sec=base_settings.exercise_time_sec,
        rest_time_sec=base_settings.rest_time_sec,
        round_rest_time_sec=0,
        exercises_per_round=len(selected),
    )
    return WorkoutPlan(
        exercises=selected,
        settings=settings,
        total_duration_sec=total_minutes * 60,
        workout_type=workout_type,
        name=f"{target_category.replace('-', ' ').title()} HIIT ({total_minutes} min)",
    )
