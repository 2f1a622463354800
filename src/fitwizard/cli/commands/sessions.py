"""Workout commands: init, log-workout, show-history, delete-workout."""

import json
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.exercises.registry import get_exercise
from ...core.models import ExerciseLog, WorkoutLog
from ...core.records import detect_personal_records
from ...io.serializers import (
    ValidationError,
    parse_sets_string,
    personal_record_to_dict,
    validate_date,
    workout_log_to_dict,
)
from .. import views
from ..app import DataDirOption, JsonOption, app, get_store


def _load_or_exit(store):
    if not store.exists():
        views.print_error(f"History file not found: {store.workouts_path}")
        views.print_info("Run 'init' first to create the data directory.")
        raise typer.Exit(1)
    try:
        return store.load_workouts()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)


@app.command()
def init(data_dir: DataDirOption = None) -> None:
    """
    Create the data directory with empty workout and readiness files.

    Existing data is left untouched.
    """
    store = get_store(data_dir)
    existed = store.exists()
    store.init()
    if existed:
        views.print_info(f"Data directory already initialised: {store.root}")
    else:
        views.print_success(f"Initialised data directory: {store.root}")


@app.command("log-workout")
def log_workout(
    exercise: Annotated[
        list[str],
        typer.Option("--exercise", "-e", help="Exercise ID; repeat once per exercise"),
    ],
    sets: Annotated[
        list[str],
        typer.Option(
            "--sets", "-s",
            help="Sets for the matching --exercise as WEIGHTxREPS with optional @RIR, e.g. 100x8@2,100x7@1 "
            "(a trailing ! marks a missed set, 'skip' skips the exercise)",
        ),
    ],
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Workout date (YYYY-MM-DD, default: today)"),
    ] = None,
    workout_id: Annotated[
        Optional[str],
        typer.Option("--id", help="Workout id; reusing an existing id replaces that workout"),
    ] = None,
    unit: Annotated[
        str,
        typer.Option("--unit", "-u", help="Weight unit: kg or lbs"),
    ] = "kg",
    plan_id: Annotated[
        Optional[str],
        typer.Option("--plan-id", help="Plan this workout belongs to"),
    ] = None,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", "-n", help="Workout notes"),
    ] = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Log a workout and report any personal records it set.

      fitwizard log-workout --date 2026-03-02 \\
        -e bench_press -s "100x8@2,100x8@2,100x7@1" \\
        -e back_squat -s "3x140x5@2"
    """
    store = get_store(data_dir)
    _load_or_exit(store)

    if len(exercise) != len(sets):
        views.print_error("Give one --sets value for every --exercise")
        raise typer.Exit(1)
    if unit not in ("kg", "lbs"):
        views.print_error("Unit must be 'kg' or 'lbs'")
        raise typer.Exit(1)

    if date is None:
        date = datetime.now().strftime("%Y-%m-%d")

    try:
        validate_date(date)
        exercises = []
        for exercise_id, sets_str in zip(exercise, sets):
            if sets_str.strip().lower() == "skip":
                exercises.append(ExerciseLog(exercise_id=exercise_id, skipped=True))
            else:
                exercises.append(ExerciseLog(exercise_id=exercise_id, sets=parse_sets_string(sets_str)))
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    for exercise_id in ([] if json_out else exercise):
        if get_exercise(exercise_id) is None:
            views.print_warning(
                f"Unknown exercise '{exercise_id}': logged, but left out of muscle-group totals"
            )

    if workout_id is None:
        workout_id = store.next_workout_id(date)

    try:
        log = WorkoutLog(
            id=workout_id,
            date=date,
            plan_id=plan_id,
            exercises=exercises,
            weight_unit=unit,  # type: ignore[arg-type]
            notes=notes,
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    replaced = store.save_workout(log)
    records = detect_personal_records(store.load_workouts(), log.id)

    if json_out:
        print(json.dumps({
            "workout": workout_log_to_dict(log),
            "replaced": replaced,
            "personal_records": [personal_record_to_dict(r) for r in records],
        }, indent=2))
        return

    verb = "Replaced" if replaced else "Logged"
    views.print_success(f"{verb} workout {log.id} on {log.date}")
    if records:
        views.print_records(records, title="New Personal Records")


@app.command("show-history")
def show_history(
    exercise: Annotated[
        Optional[str],
        typer.Option("--exercise", "-e", help="Only workouts containing this exercise"),
    ] = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Show only the most recent N workouts"),
    ] = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Display logged workouts, oldest first.
    """
    store = get_store(data_dir)
    workouts = _load_or_exit(store)

    if exercise is not None:
        workouts = [w for w in workouts if w.exercise(exercise) is not None]
    if limit is not None and limit > 0:
        workouts = workouts[-limit:]

    if json_out:
        print(json.dumps([workout_log_to_dict(w) for w in workouts], indent=2))
        return

    views.print_history(workouts)


@app.command("delete-workout")
def delete_workout(
    workout_id: Annotated[str, typer.Argument(help="Id of the workout to delete")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Delete a logged workout by id.
    """
    store = get_store(data_dir)
    _load_or_exit(store)
    try:
        store.delete_workout(workout_id)
    except KeyError:
        views.print_error(f"No workout with id '{workout_id}'")
        raise typer.Exit(1)
    views.print_success(f"Deleted workout {workout_id}")
