"""Exercise catalog loader (JSON) and key canonicalization."""

from __future__ import annotations

import json
import re
from pathlib import Path

from corehiit.workout.library import Catalog, catalog_size, empty_catalog
from corehiit.workout.model import Exercise


class CatalogParseError(ValueError):
    """Raised when a catalog file is invalid."""


def _normalize_key(value: str) -> str:
    return re.sub(r"[\s_-]+", "-", value.strip().lower())


def canonical_equipment(label: str) -> str:
    lower = label.lower()
    if "dumbbell" in lower:
        return "dumbbells"
    if "kettlebell" in lower:
        return "kettlebell"
    if "bodyweight" in lower or "body weight" in lower:
        return "bodyweight"
    if lower.strip() == "core":
        return "core"
    return _normalize_key(label)


def canonical_category(label: str) -> str:
    lower = label.lower()
    if "upper" in lower:
        return "upper-body"
    if "lower" in lower or "leg" in lower or "glute" in lower:
        return "lower-body"
    if "core" in lower or "abs" in lower:
        return "core"
    if "full" in lower or "total" in lower or "body" in lower:
        return "full-body"
    return _normalize_key(label)


def load_catalog(path: str | Path) -> Catalog:
    file_path = Path(path)
    if file_path.suffix.lower() != ".json":
        raise CatalogParseError(
            f"Unsupported catalog format '{file_path.suffix}'. Use .json"
        )
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CatalogParseError(f"Invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise CatalogParseError("Catalog JSON must be an object")
    items = data.get("exercises")
    if not isinstance(items, list):
        raise CatalogParseError("Catalog field 'exercises' must be an array")

    catalog = empty_catalog()
    for i, raw in enumerate(items):
        exercise = _build_exercise(raw, index=i)
        equipment_key = canonical_equipment(exercise.equipment)
        catalog.setdefault(equipment_key, {}).setdefault(exercise.category, []).append(exercise)
    print(f"[CATALOG] loaded {catalog_size(catalog)} exercises from {file_path.name}")
    return catalog


def _build_exercise(raw: object, *, index: int) -> Exercise:
    if not isinstance(raw, dict):
        raise CatalogParseError(f"Exercise {index + 1}: must be an object")

    fields: dict[str, str] = {}
    for field in ("name", "equipment", "category"):
        value = raw.get(field)
        if not isinstance(value, str) or not value.strip():
            raise CatalogParseError(f"Exercise {index + 1}: '{field}' must be a non-empty string")
        fields[field] = value.strip()

    video_url = raw.get("video_url", "")
    if not isinstance(video_url, str):
        raise CatalogParseError(f"Exercise {index + 1}: 'video_url' must be a string")

    equipment_key = canonical_equipment(fields["equipment"])
    return Exercise(
        name=fields["name"],
        equipment=equipment_key.capitalize(),
        category=canonical_category(fields["category"]),
        video_url=video_url,
        key=f"{equipment_key}/{_normalize_key(fields['name'])}",
    )
