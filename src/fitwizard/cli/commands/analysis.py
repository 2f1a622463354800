"""Analysis commands: recommend, records, weekly."""

import json
from typing import Annotated, Optional

import typer

from ...core.engine.config_loader import load_progression_config, load_weekly_config
from ...core.exercises.registry import EXERCISE_CATALOG
from ...core.models import ExercisePrescription
from ...core.phases import ALL_PHASES, determine_opt_phase, parse_rep_range, phase_name, prescription_for_phase
from ...core.progression import analyze_performance, analyze_progression
from ...core.records import best_performances, personal_record_history
from ...core.weekly import build_weekly_summaries, detect_volume_warnings
from ...io.serializers import (
    ValidationError,
    personal_record_to_dict,
    recommendation_to_dict,
    weekly_summary_to_dict,
)
from .. import views
from ..app import ConfigOption, DataDirOption, JsonOption, app, get_store


def _load_all_or_exit(store):
    """Workouts and readiness entries, or exit 1 with a readable error."""
    if not store.exists():
        views.print_error(f"History file not found: {store.workouts_path}")
        views.print_info("Run 'init' first to create the data directory.")
        raise typer.Exit(1)
    try:
        return store.load_workouts(), store.load_readiness()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def _prescription(
    exercise_id: str,
    phase: str | None,
    reps: str | None,
    sets: int,
    target_rir: int | None,
) -> ExercisePrescription | None:
    """Prescription from --phase and/or --reps; None when neither is given."""
    if phase is None and reps is None:
        return None
    if phase is not None:
        base = prescription_for_phase(exercise_id, phase)
        rep_min, rep_max = base.rep_min, base.rep_max
        if reps is not None:
            rep_min, rep_max = parse_rep_range(reps)
        return ExercisePrescription(
            exercise_id=exercise_id,
            sets=base.sets,
            rep_min=rep_min,
            rep_max=rep_max,
            target_rir=base.target_rir if target_rir is None else target_rir,
            phase=base.phase,
        )
    rep_min, rep_max = parse_rep_range(reps)  # type: ignore[arg-type]
    return ExercisePrescription(
        exercise_id=exercise_id,
        sets=sets,
        rep_min=rep_min,
        rep_max=rep_max,
        target_rir=2 if target_rir is None else target_rir,
    )


@app.command()
def recommend(
    exercise: Annotated[
        Optional[str],
        typer.Option("--exercise", "-e", help="Analyse only this exercise (default: all)"),
    ] = None,
    phase: Annotated[
        Optional[str],
        typer.Option("--phase", help=f"OPT phase to prescribe for: {', '.join(ALL_PHASES)}"),
    ] = None,
    goal: Annotated[
        Optional[str],
        typer.Option("--goal", help="strength | hypertrophy | general (picks a phase)"),
    ] = None,
    experience: Annotated[
        Optional[str],
        typer.Option("--experience", help="beginner | intermediate | advanced (picks a phase)"),
    ] = None,
    reps: Annotated[
        Optional[str],
        typer.Option("--reps", "-r", help="Prescribed rep range, e.g. 8-12"),
    ] = None,
    sets: Annotated[
        int,
        typer.Option("--sets", "-s", help="Prescribed sets when using --reps without --phase"),
    ] = 3,
    target_rir: Annotated[
        Optional[int],
        typer.Option("--target-rir", help="Prescribed reps in reserve"),
    ] = None,
    config_path: ConfigOption = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Recommend the next prescription change per exercise.

    Without --phase or --reps the advice comes from RIR alone; with them,
    missed reps and the rep range are taken into account too.
    """
    store = get_store(data_dir)
    workouts, readiness = _load_all_or_exit(store)

    if phase is None and (goal is not None or experience is not None):
        phase = determine_opt_phase(goal, experience)

    try:
        config = load_progression_config(config_path)
        if exercise is not None:
            prescription = _prescription(exercise, phase, reps, sets, target_rir)
            recs = [analyze_progression(exercise, workouts, prescription, readiness, config)]
        else:
            exercise_ids = sorted({
                ex.exercise_id for w in workouts for ex in w.exercises if not ex.skipped
            })
            prescriptions = [
                p for p in (_prescription(ex_id, phase, reps, sets, target_rir) for ex_id in exercise_ids)
                if p is not None
            ]
            recs = analyze_performance(workouts, prescriptions, readiness, config)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps([recommendation_to_dict(r) for r in recs], indent=2))
        return

    if phase is not None:
        views.print_info(f"Prescribing for {phase_name(phase)}")
    views.print_recommendations(recs)


@app.command()
def records(
    exercise: Annotated[
        Optional[str],
        typer.Option("--exercise", "-e", help="Only this exercise (default: all)"),
    ] = None,
    all_records: Annotated[
        bool,
        typer.Option("--all", "-a", help="Every record ever set, not just current bests"),
    ] = False,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show personal records (max weight, reps at weight, estimated 1RM).
    """
    store = get_store(data_dir)
    workouts, _ = _load_all_or_exit(store)

    if exercise is not None:
        exercise_ids = [exercise]
    else:
        exercise_ids = sorted({ex.exercise_id for w in workouts for ex in w.exercises})

    found = []
    for exercise_id in exercise_ids:
        if all_records:
            found.extend(personal_record_history(workouts, exercise_id))
        else:
            found.extend(best_performances(workouts, exercise_id).values())

    if json_out:
        print(json.dumps([personal_record_to_dict(r) for r in found], indent=2))
        return

    views.print_records(found, title="Record History" if all_records else "Current Bests")


@app.command()
def weekly(
    weeks: Annotated[
        Optional[int],
        typer.Option("--weeks", "-w", help="Show only the most recent N weeks"),
    ] = None,
    chart: Annotated[
        bool,
        typer.Option("--chart", help="Also draw a weekly volume bar chart"),
    ] = False,
    config_path: ConfigOption = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Weekly volume, sets per muscle group, average readiness and MRV warnings.
    """
    store = get_store(data_dir)
    workouts, readiness = _load_all_or_exit(store)

    try:
        config = load_weekly_config(config_path)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    summaries = build_weekly_summaries(workouts, readiness, EXERCISE_CATALOG, config)
    if weeks is not None and weeks > 0:
        summaries = summaries[-weeks:]
    warnings = {s.week_start: detect_volume_warnings(s, config.mrv_landmarks) for s in summaries}

    if json_out:
        print(json.dumps(
            [weekly_summary_to_dict(s, warnings[s.week_start]) for s in summaries],
            indent=2,
        ))
        return

    views.print_weekly(summaries, warnings, chart=chart)
