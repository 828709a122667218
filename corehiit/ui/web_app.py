"""NiceGUI web UI for Core HIIT."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from nicegui import ui

from corehiit.core.engine import Cue, TimerSnapshot, format_time
from corehiit.core.state import TimerPhase
from corehiit.progression.badges import badge_tier
from corehiit.ui.controller import UIController
from corehiit.workout.completion import CommitResult
from corehiit.workout.library import DURATION_CHOICES, WORKOUT_TYPES, list_equipment
from corehiit.workout.model import WorkoutPlan

CUE_FREQUENCIES = {
    "start": 520,
    "countdown": 660,
    "go": 880,
    "rest": 440,
    "complete": 990,
}

PHASE_TITLES = {
    TimerPhase.GET_READY: "GET READY",
    TimerPhase.WORKING: "HIGH INTENSITY",
    TimerPhase.RESTING: "REST & RECOVER",
    TimerPhase.FINISHED: "WORKOUT COMPLETE",
}


@dataclass
class WebState:
    status: str = "Pick a duration and equipment"
    workout: WorkoutPlan | None = None
    progress: TimerSnapshot | None = None
    celebrating: bool = False
    pending_cues: list[Cue] = field(default_factory=list)
    pending_notices: list[tuple[str, str]] = field(default_factory=list)
    stats_dirty: bool = False


def _fmt_minutes(total: int) -> str:
    hours, minutes = divmod(max(0, total), 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes} min"


def _beep_js(frequency: int) -> str:
    return f"""
    (() => {{
      const ctx = new (window.AudioContext || window.webkitAudioContext)();
      const osc = ctx.createOscillator();
      const gain = ctx.createGain();
      osc.type = 'sine';
      osc.frequency.value = {frequency};
      gain.gain.value = 0.03;
      osc.connect(gain);
      gain.connect(ctx.destination);
      osc.start();
      setTimeout(() => {{ osc.stop(); ctx.close(); }}, 140);
    }})();
    """


def run_web_ui(
    *,
    user_id: str = "local",
    data_dir: Path | None = None,
    catalog_path: Path | None = None,
    host: str = "127.0.0.1",
    port: int = 8090,
    tick_interval_sec: float = 1.0,
    debug_timer: bool = False,
) -> int:
    controller = UIController(
        user_id=user_id,
        data_dir=data_dir,
        catalog_path=catalog_path,
        tick_interval_sec=tick_interval_sec,
        debug_timer=debug_timer,
    )
    state = WebState()
    sound_alerts = True

    ui.add_head_html(
        """
        <style>
          body { background: #111111; color: #f5f5f4; font-family: Arial, "Segoe UI", sans-serif; }
          .ch-card { background: #1c1c1a; border: 1px solid rgba(255,255,255,0.12); border-radius: 14px; }
          .ch-timer { font-size: 4rem; font-weight: 800; letter-spacing: 0.05em; }
          .ch-muted { color: #a8a29e; }
        </style>
        """
    )

    equipment_options = list_equipment(controller.catalog)

    with ui.column().classes("w-full gap-4") as setup_view:
        ui.label("CORE HIIT").classes("text-xl font-semibold tracking-wide")
        status_label = ui.label("").classes("text-base")
        with ui.card().classes("w-full ch-card"):
            with ui.row().classes("w-full items-end gap-3"):
                minutes_select = ui.select(
                    {m: f"{m} min" for m in DURATION_CHOICES}, value=10, label="Duration"
                )
                type_select = ui.select(list(WORKOUT_TYPES), value="full-body", label="Workout type")
                generate_btn = ui.button("Roll workout")
            with ui.row().classes("w-full gap-3"):
                equipment_boxes = {
                    key: ui.checkbox(key.capitalize(), value=key == "bodyweight")
                    for key in equipment_options
                }
            plan_label = ui.label("No workout generated").classes("text-sm ch-muted")
            plan_table = ui.table(
                columns=[
                    {"name": "idx", "label": "#", "field": "idx"},
                    {"name": "name", "label": "Exercise", "field": "name"},
                    {"name": "equipment", "label": "Equipment", "field": "equipment"},
                    {"name": "category", "label": "Focus", "field": "category"},
                ],
                rows=[],
            ).classes("w-full")
            start_btn = ui.button("Start workout")
            start_btn.disable()

        with ui.grid().classes("w-full grid-cols-1 md:grid-cols-2 gap-3"):
            with ui.card().classes("w-full ch-card"):
                ui.label("Progress").classes("text-lg font-semibold")
                level_label = ui.label("Level 0")
                level_bar = ui.linear_progress(value=0.0, show_value=False)
                level_hint = ui.label("").classes("text-sm ch-muted")
                totals_label = ui.label("").classes("text-sm")
                badges_row = ui.row().classes("w-full gap-2 flex-wrap")
            with ui.card().classes("w-full ch-card"):
                ui.label("Personal bests").classes("text-lg font-semibold")
                streak_label = ui.label("")
                longest_label = ui.label("")
                best_week_label = ui.label("")
                weekly_goal_label = ui.label("")

        ui.label("Recent workouts").classes("text-base font-medium")
        history = ui.table(
            columns=[
                {"name": "completed", "label": "Completed", "field": "completed"},
                {"name": "type", "label": "Type", "field": "type"},
                {"name": "mins", "label": "Mins", "field": "mins"},
            ],
            rows=[],
        ).classes("w-full")

    with ui.column().classes("w-full items-center gap-3") as workout_view:
        with ui.row().classes("w-full items-center justify-between"):
            phase_label = ui.label("").classes("text-lg font-bold")
            round_label = ui.label("").classes("text-sm ch-muted")
        exercise_label = ui.label("").classes("text-2xl font-semibold")
        upcoming_label = ui.label("").classes("text-sm ch-muted")
        ring = ui.circular_progress(value=100, min=0, max=100, show_value=False, size="220px")
        timer_label = ui.label("0:00").classes("ch-timer")
        with ui.row().classes("gap-3"):
            pause_btn = ui.button("Pause")
            skip_btn = ui.button("Skip")
            exit_btn = ui.button("Exit").props("color=negative")
            sound_toggle = ui.switch("Sound", value=True)
        celebration_label = ui.label("WORKOUT COMPLETE!").classes("text-3xl font-extrabold")
        celebration_label.set_visibility(False)
        done_btn = ui.button("Back to setup")
        done_btn.set_visibility(False)

    def show_setup_screen() -> None:
        setup_view.set_visibility(True)
        workout_view.set_visibility(False)

    def show_workout_screen() -> None:
        setup_view.set_visibility(False)
        workout_view.set_visibility(True)

    def refresh_plan() -> None:
        if state.workout is None:
            plan_label.text = "No workout generated"
            plan_table.rows = []
            start_btn.disable()
        else:
            settings = state.workout.settings
            plan_label.text = (
                f"{state.workout.name} | {settings.rounds} rounds | "
                f"{settings.exercise_time_sec}s work / {settings.rest_time_sec}s rest"
            )
            plan_table.rows = [
                {
                    "idx": idx,
                    "name": exercise.name,
                    "equipment": exercise.equipment,
                    "category": exercise.category,
                }
                for idx, exercise in enumerate(state.workout.exercises, start=1)
            ]
            start_btn.enable()
        plan_table.update()

    def refresh_progression() -> None:
        stats = controller.user_stats()
        snapshot = controller.progression()
        level_label.text = f"Level {snapshot.level}"
        level_bar.value = snapshot.progress_percent / 100.0
        if snapshot.is_max_level:
            level_hint.text = "Max level reached"
        else:
            level_hint.text = (
                f"{snapshot.minutes_to_next_level} min to level {snapshot.level + 1}"
            )
        totals_label.text = (
            f"{stats.total_workouts} workouts | {_fmt_minutes(stats.total_minutes)} | "
            f"streak {stats.current_streak} days"
        )
        badges_row.clear()
        with badges_row:
            for status in controller.badges():
                color = badge_tier(status.badge.level).color if status.unlocked else "#57534e"
                with ui.card().classes("ch-card").style(f"border-color: {color}"):
                    ui.label(status.badge.name).style(f"color: {color}; font-weight: 700;")
                    ui.label(status.caption).classes("text-xs ch-muted")

        bests = controller.personal_bests()
        streak_label.text = f"Longest streak: {bests.longest_streak} days"
        longest_label.text = f"Longest workout: {bests.longest_workout_minutes} min"
        best_week_label.text = f"Best week: {bests.best_week.count} ({bests.best_week.label})"
        weekly_goal_label.text = (
            f"This week: {controller.workouts_this_week()}/{stats.weekly_goal} workouts"
        )

    def refresh_history() -> None:
        history.rows = [
            {
                "completed": log.completed_at_dt.strftime("%Y-%m-%d %H:%M"),
                "type": log.workout_type,
                "mins": log.duration_minutes,
            }
            for log in controller.recent_logs(limit=20)
        ]
        history.update()

    def refresh_ui() -> None:
        status_label.text = state.status
        while state.pending_cues:
            cue = state.pending_cues.pop(0)
            if sound_alerts:
                ui.run_javascript(_beep_js(CUE_FREQUENCIES[cue]))
        while state.pending_notices:
            message, color = state.pending_notices.pop(0)
            ui.notify(message, color=color)
        if state.stats_dirty:
            state.stats_dirty = False
            refresh_progression()
            refresh_history()

        progress = state.progress
        if progress is None:
            return
        phase_label.text = PHASE_TITLES[progress.phase]
        round_label.text = f"Round {progress.current_round + 1} / {progress.round_total}"
        exercise_label.text = progress.exercise.name
        if progress.upcoming_exercise is not None and progress.phase is not TimerPhase.GET_READY:
            upcoming_label.text = f"Next: {progress.upcoming_exercise.name}"
        elif progress.phase is TimerPhase.GET_READY:
            upcoming_label.text = (
                f"Exercise {progress.current_exercise_index + 1} of {progress.exercise_total}"
            )
        else:
            upcoming_label.text = "Last one!"
        ring.value = progress.progress_percent
        timer_label.text = (
            str(progress.remaining_sec)
            if progress.phase is TimerPhase.GET_READY
            else format_time(progress.remaining_sec)
        )
        pause_btn.text = "Resume" if progress.is_paused else "Pause"
        if progress.has_committed:
            pause_btn.disable()
            skip_btn.disable()
        celebration_label.set_visibility(state.celebrating)
        done_btn.set_visibility(state.celebrating)

    def on_progress(progress: TimerSnapshot) -> None:
        state.progress = progress

    def on_cue(cue: Cue) -> None:
        state.pending_cues.append(cue)

    def on_commit(result: CommitResult) -> None:
        if result.outcome == "failed":
            state.pending_notices.append(("Could not save stats. " + result.message, "negative"))
        elif result.outcome == "saved":
            state.pending_notices.append(("Workout saved", "positive"))
        state.stats_dirty = True

    def on_finish(completed: bool) -> None:
        if completed:
            state.celebrating = True
            state.status = "Workout completed"
        else:
            state.progress = None
            state.status = "Workout abandoned"
            show_setup_screen()

    def on_generate() -> None:
        equipment = [key for key, box in equipment_boxes.items() if box.value]
        if not equipment:
            ui.notify("Select at least one piece of equipment", color="negative")
            return
        state.workout = controller.generate(
            equipment,
            int(minutes_select.value or 10),
            str(type_select.value or "full-body"),
        )
        state.status = "Workout ready" if state.workout else "No workout available"
        refresh_plan()
        refresh_ui()

    async def on_start() -> None:
        if state.workout is None:
            return
        state.celebrating = False
        state.progress = None
        pause_btn.enable()
        skip_btn.enable()
        await controller.start_workout(
            state.workout,
            on_progress=on_progress,
            on_finish=on_finish,
            on_cue=on_cue,
            on_commit=on_commit,
        )
        state.status = "Workout started"
        show_workout_screen()
        refresh_ui()

    def on_pause() -> None:
        controller.toggle_pause()
        refresh_ui()

    def on_skip() -> None:
        controller.skip()
        refresh_ui()

    async def on_exit() -> None:
        await controller.stop_workout()
        show_setup_screen()
        refresh_ui()

    def on_done() -> None:
        state.celebrating = False
        state.progress = None
        show_setup_screen()
        refresh_ui()

    def on_sound_toggle() -> None:
        nonlocal sound_alerts
        sound_alerts = bool(sound_toggle.value)

    sound_toggle.on_value_change(lambda _: on_sound_toggle())
    generate_btn.on_click(on_generate)
    start_btn.on_click(on_start)
    pause_btn.on_click(on_pause)
    skip_btn.on_click(on_skip)
    exit_btn.on_click(on_exit)
    done_btn.on_click(on_done)

    refresh_plan()
    refresh_progression()
    refresh_history()
    show_setup_screen()
    ui.timer(0.25, refresh_ui)
    ui.run(host=host, port=port, reload=False, title="Core HIIT")
    return 0
