from __future__ import annotations

from corehiit.progression.levels import (
    LEVEL_THRESHOLDS,
    MAX_LEVEL,
    calculate_level,
    calculate_next_level_progress,
    generate_thresholds,
)

EXPECTED_THRESHOLDS = (
    0, 10, 70, 190, 430, 910, 1870, 3790, 7630, 15310, 30670, 61390, 122830,
    245710, 491470, 982990, 1966030, 3932110, 7864270, 15728590, 31457230,
)


def _sample_minutes() -> list[int]:
    samples = {0, 1, 5, 9, 25, 100, 1000, 50_000, 40_000_000}
    for threshold in LEVEL_THRESHOLDS:
        samples.update({threshold, threshold + 1, max(0, threshold - 1)})
    return sorted(samples)


def test_thresholds_follow_doubling_increments() -> None:
    assert LEVEL_THRESHOLDS == EXPECTED_THRESHOLDS
    assert generate_thresholds() == EXPECTED_THRESHOLDS
    assert len(LEVEL_THRESHOLDS) == MAX_LEVEL + 1


def test_level_exact_at_each_threshold() -> None:
    for level in range(1, MAX_LEVEL + 1):
        assert calculate_level(LEVEL_THRESHOLDS[level]) == level
        assert calculate_level(LEVEL_THRESHOLDS[level] - 1) == level - 1


def test_level_is_monotonic() -> None:
    levels = [calculate_level(m) for m in _sample_minutes()]
    assert levels == sorted(levels)


def test_level_clamps_missing_and_negative_minutes() -> None:
    assert calculate_level(None) == 0
    assert calculate_level(-25) == 0
    assert calculate_level(0) == 0
    assert calculate_next_level_progress(None).progress_percent == 0.0
    assert calculate_next_level_progress(-5).minutes_to_next_level == 10


def test_progress_inside_a_level() -> None:
    snapshot = calculate_next_level_progress(40)

    assert snapshot.level == 1
    assert snapshot.current_level_floor == 10
    assert snapshot.next_level_floor == 70
    assert snapshot.progress_percent == 50.0
    assert snapshot.minutes_to_next_level == 30


def test_progress_is_bounded_and_full_only_at_cap() -> None:
    cap = LEVEL_THRESHOLDS[MAX_LEVEL]
    for minutes in _sample_minutes():
        snapshot = calculate_next_level_progress(minutes)
        assert 0.0 <= snapshot.progress_percent <= 100.0
        assert (snapshot.progress_percent == 100.0) == (minutes >= cap)


def test_max_level_is_capped() -> None:
    cap = LEVEL_THRESHOLDS[MAX_LEVEL]
    snapshot = calculate_next_level_progress(cap + 5000)

    assert snapshot.level == MAX_LEVEL
    assert snapshot.is_max_level
    assert snapshot.current_level_floor == cap
    assert snapshot.next_level_floor == cap
    assert snapshot.minutes_to_next_level == 0
