"""Terminal CLI entrypoint for Core HIIT."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from corehiit.core.engine import Cue, TimerSnapshot
from corehiit.core.state import TimerPhase
from corehiit.progression.badges import badge_statuses
from corehiit.progression.levels import calculate_next_level_progress
from corehiit.ui.controller import UIController
from corehiit.workout.library import DURATION_CHOICES, WORKOUT_TYPES
from corehiit.workout.model import WorkoutPlan


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Core HIIT workout timer")
    parser.add_argument("--generate", action="store_true", help="Generate and print a workout")
    parser.add_argument("--run", action="store_true", help="Generate and run a workout in the terminal")
    parser.add_argument("--stats", action="store_true", help="Show stats, level and badges")
    parser.add_argument(
        "--level",
        type=int,
        default=None,
        metavar="MINUTES",
        help="Show level progress for a number of training minutes",
    )
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI)",
    )
    parser.add_argument("--web-host", default="127.0.0.1", help="Host bind for --ui-web")
    parser.add_argument("--web-port", type=int, default=8090, help="Port for --ui-web")
    parser.add_argument("--user", default="local", help="User id for stats")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory for workout logs and stats (default: ~/.core-hiit)",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="JSON exercise catalog (default: built-in catalog)",
    )
    parser.add_argument(
        "--minutes",
        type=int,
        choices=DURATION_CHOICES,
        default=10,
        help="Workout length in minutes",
    )
    parser.add_argument(
        "--equipment",
        default="bodyweight",
        help="Comma-separated equipment (bodyweight,dumbbells,kettlebell,core)",
    )
    parser.add_argument("--type", dest="workout_type", choices=WORKOUT_TYPES, default="full-body")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for exercise selection")
    parser.add_argument(
        "--tick",
        type=float,
        default=1.0,
        help="Seconds per timer tick (lower values for dry runs)",
    )
    parser.add_argument(
        "--debug-timer",
        action="store_true",
        help="Print every timer phase transition",
    )
    return parser


def _build_controller(args: argparse.Namespace) -> UIController:
    return UIController(
        user_id=args.user,
        data_dir=args.data_dir,
        catalog_path=args.catalog,
        tick_interval_sec=max(0.001, args.tick),
        seed=args.seed,
        debug_timer=args.debug_timer,
    )


def _parse_equipment(raw: str) -> list[str]:
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


def print_plan(plan: WorkoutPlan) -> None:
    settings = plan.settings
    print(f"{plan.name}")
    print(
        f"{settings.rounds} rounds | {settings.exercise_time_sec}s work | "
        f"{settings.rest_time_sec}s rest | {plan.total_time_label}"
    )
    for idx, exercise in enumerate(plan.exercises, start=1):
        print(f"  {idx}. {exercise.name:<32} {exercise.equipment:<12} {exercise.category}")


def print_level(minutes: int) -> None:
    snapshot = calculate_next_level_progress(minutes)
    print(f"Minutes: {minutes}")
    print(f"Level: {snapshot.level}")
    if snapshot.is_max_level:
        print("Progress: max level reached")
    else:
        print(
            f"Progress: {snapshot.progress_percent:.1f}% "
            f"({snapshot.minutes_to_next_level} min to level {snapshot.level + 1})"
        )
    for status in badge_statuses(minutes):
        mark = "x" if status.unlocked else " "
        print(f"  [{mark}] {status.badge.name:<12} {status.caption} ({status.badge.minutes_required} min)")


def run_stats(controller: UIController) -> int:
    stats = controller.user_stats()
    bests = controller.personal_bests()
    print(f"User: {stats.user_id}")
    print(f"Workouts: {stats.total_workouts} | Minutes: {stats.total_minutes}")
    print(f"Current streak: {stats.current_streak} | Longest streak: {bests.longest_streak}")
    print(f"Longest workout: {bests.longest_workout_minutes} min")
    print(f"Best week: {bests.best_week.count} ({bests.best_week.label})")
    print(f"This week: {controller.workouts_this_week()}/{stats.weekly_goal}")
    print_level(stats.total_minutes)
    return 0


async def run_workout(controller: UIController, plan: WorkoutPlan) -> int:
    last_line = ""

    def on_progress(progress: TimerSnapshot) -> None:
        nonlocal last_line
        if progress.phase is TimerPhase.FINISHED:
            return
        line = (
            f"R{progress.current_round + 1}/{progress.round_total} "
            f"{progress.phase.value:<9} {progress.exercise.name:<28} {progress.time_label}"
        )
        if progress.is_paused:
            line += " (paused)"
        if line != last_line:
            print(line)
            last_line = line

    def on_cue(cue: Cue) -> None:
        if cue == "go":
            print("GO!")
        elif cue == "complete":
            print("Workout complete!")

    def on_finish(completed: bool) -> None:
        if not completed:
            print("Workout stopped")

    await controller.start_workout(plan, on_progress=on_progress, on_finish=on_finish, on_cue=on_cue)
    try:
        result = await controller.wait_for_workout()
    except asyncio.CancelledError:
        await controller.stop_workout()
        raise
    if result is not None and result.outcome == "failed":
        print(f"Warning: {result.message}")
    return 0


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    if args.level is not None:
        print_level(args.level)
        return 0

    if args.ui_web:
        from corehiit.ui.web_app import run_web_ui

        return run_web_ui(
            user_id=args.user,
            data_dir=args.data_dir,
            catalog_path=args.catalog,
            host=args.web_host,
            port=args.web_port,
            tick_interval_sec=max(0.001, args.tick),
            debug_timer=args.debug_timer,
        )

    if not (args.generate or args.run or args.stats):
        parser.print_help()
        return 1

    controller = _build_controller(args)
    if args.stats:
        return run_stats(controller)

    plan = controller.generate(_parse_equipment(args.equipment), args.minutes, args.workout_type)
    if plan is None:
        print("No equipment selected")
        return 1
    print_plan(plan)
    if args.generate:
        return 0

    try:
        return asyncio.run(run_workout(controller, plan))
    except KeyboardInterrupt:
        print("Workout abandoned")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
