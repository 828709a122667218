"""Built-in exercise catalog used when no catalog file is supplied."""

from __future__ import annotations

from corehiit.workout.model import Exercise


Catalog = dict[str, dict[str, list[Exercise]]]

EQUIPMENT_KEYS: tuple[str, ...] = ("bodyweight", "dumbbells", "kettlebell", "core")
CATEGORY_KEYS: tuple[str, ...] = ("full-body", "upper-body", "lower-body", "core")
WORKOUT_TYPES: tuple[str, ...] = CATEGORY_KEYS
DURATION_CHOICES: tuple[int, ...] = (5, 10, 15, 20, 30)


_BUILTIN: tuple[tuple[str, str, str], ...] = (
    ("Burpees", "bodyweight", "full-body"),
    ("Jumping Jacks", "bodyweight", "full-body"),
    ("Mountain Climbers", "bodyweight", "full-body"),
    ("Squat Thrusts", "bodyweight", "full-body"),
    ("Push Ups", "bodyweight", "upper-body"),
    ("Tricep Dips", "bodyweight", "upper-body"),
    ("Plank Shoulder Taps", "bodyweight", "upper-body"),
    ("Air Squats", "bodyweight", "lower-body"),
    ("Alternating Lunges", "bodyweight", "lower-body"),
    ("Glute Bridges", "bodyweight", "lower-body"),
    ("Jump Squats", "bodyweight", "lower-body"),
    ("Crunches", "bodyweight", "core"),
    ("Bicycle Crunches", "bodyweight", "core"),
    ("Dumbbell Thrusters", "dumbbells", "full-body"),
    ("Dumbbell Snatch", "dumbbells", "full-body"),
    ("Renegade Rows", "dumbbells", "full-body"),
    ("Dumbbell Shoulder Press", "dumbbells", "upper-body"),
    ("Dumbbell Bent Over Row", "dumbbells", "upper-body"),
    ("Dumbbell Curl To Press", "dumbbells", "upper-body"),
    ("Goblet Squats", "dumbbells", "lower-body"),
    ("Dumbbell Romanian Deadlift", "dumbbells", "lower-body"),
    ("Dumbbell Reverse Lunges", "dumbbells", "lower-body"),
    ("Weighted Russian Twists", "dumbbells", "core"),
    ("Kettlebell Swings", "kettlebell", "full-body"),
    ("Kettlebell Clean And Press", "kettlebell", "full-body"),
    ("Kettlebell Halo", "kettlebell", "upper-body"),
    ("Kettlebell High Pull", "kettlebell", "upper-body"),
    ("Kettlebell Goblet Squat", "kettlebell", "lower-body"),
    ("Kettlebell Deadlift", "kettlebell", "lower-body"),
    ("Kettlebell Windmill", "kettlebell", "core"),
    ("Plank Hold", "core", "core"),
    ("Hollow Body Rocks", "core", "core"),
    ("Dead Bugs", "core", "core"),
    ("Flutter Kicks", "core", "core"),
    ("V Ups", "core", "core"),
)


def _slug(value: str) -> str:
    return "-".join(value.lower().split())


def empty_catalog() -> Catalog:
    return {equipment: {category: [] for category in CATEGORY_KEYS} for equipment in EQUIPMENT_KEYS}


def default_catalog() -> Catalog:
    catalog = empty_catalog()
    for name, equipment, category in _BUILTIN:
        catalog[equipment][category].append(
            Exercise(
                name=name,
                equipment=equipment.capitalize(),
                category=category,
                key=f"{equipment}/{_slug(name)}",
            )
        )
    return catalog


def list_equipment(catalog: Catalog | None = None) -> list[str]:
    source = catalog if catalog is not None else default_catalog()
    return [key for key, groups in source.items() if any(groups.values())]


def catalog_size(catalog: Catalog) -> int:
    return sum(len(items) for groups in catalog.values() for items in groups.values())
