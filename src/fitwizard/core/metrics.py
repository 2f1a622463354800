"""
Pure metric computation functions.

Volume is weight × reps over completed sets of non-skipped exercises.
Nothing here raises for empty input: an empty or fully skipped log simply
has zero volume.
"""

import math
from typing import Iterable, Mapping, Sequence

from .config import EPLEY_DIVISOR
from .exercises.base import ExerciseMetadata
from .models import ExerciseLog, SetLog, WorkoutLog


def completed_sets(exercise_log: ExerciseLog) -> list[SetLog]:
    """
    Completed sets of an exercise, or [] if the exercise was skipped.

    Args:
        exercise_log: One exercise's performance

    Returns:
        Sets with completed=True, in logged order
    """
    if exercise_log.skipped:
        return []
    return [s for s in exercise_log.sets if s.completed]


def set_volume(set_log: SetLog) -> float:
    """weight × reps for a completed set, 0 otherwise."""
    if not set_log.completed:
        return 0.0
    return set_log.weight * set_log.reps


def exercise_volume(exercise_log: ExerciseLog) -> float:
    """
    Total volume of one exercise within a session.

    Args:
        exercise_log: One exercise's performance

    Returns:
        Sum of completed set volumes; 0 when the exercise was skipped
    """
    return sum(set_volume(s) for s in completed_sets(exercise_log))


def calculate_volume(log: WorkoutLog) -> float:
    """
    Total completed volume of a session.

    Skipped exercises and uncompleted sets contribute nothing.  Exercises
    are counted whether or not they have muscle-group metadata.

    Args:
        log: Workout session

    Returns:
        Session volume (0.0 for empty or fully skipped logs)
    """
    return float(sum(exercise_volume(ex) for ex in log.exercises))


def muscle_group_volume(
    log: WorkoutLog,
    catalog: Mapping[str, ExerciseMetadata],
) -> dict[str, float]:
    """
    Session volume per muscle group.

    An exercise's full volume is credited to each of its primary muscle
    groups.  Exercises missing from ``catalog`` are left out of the group
    totals (they still count in calculate_volume).

    Args:
        log: Workout session
        catalog: exercise_id -> ExerciseMetadata lookup

    Returns:
        {muscle_group: volume}
    """
    totals: dict[str, float] = {}
    for ex in log.exercises:
        if ex.skipped:
            continue
        meta = catalog.get(ex.exercise_id)
        if meta is None:
            continue
        volume = exercise_volume(ex)
        for group in meta.muscle_groups:
            totals[group] = totals.get(group, 0.0) + volume
    return totals


def muscle_group_sets(
    log: WorkoutLog,
    catalog: Mapping[str, ExerciseMetadata],
) -> dict[str, int]:
    """Completed working sets per muscle group (same attribution as volume)."""
    totals: dict[str, int] = {}
    for ex in log.exercises:
        if ex.skipped:
            continue
        meta = catalog.get(ex.exercise_id)
        if meta is None:
            continue
        n_sets = len(completed_sets(ex))
        for group in meta.muscle_groups:
            totals[group] = totals.get(group, 0) + n_sets
    return totals


def merge_totals(parts: Iterable[Mapping[str, float]]) -> dict:
    """Sum several {key: number} dicts."""
    result: dict = {}
    for part in parts:
        for k, v in part.items():
            result[k] = result.get(k, 0) + v
    return result


def reported_rirs(sets: Sequence[SetLog]) -> list[int]:
    """RIR values of completed sets that carry a rating."""
    return [s.rir_reported for s in sets if s.completed and s.rir_reported is not None]


def average_rir(sets: Sequence[SetLog]) -> float | None:
    """
    Mean reported RIR over completed sets.

    Returns:
        Average RIR, or None when no completed set has a rating
    """
    values = reported_rirs(sets)
    if not values:
        return None
    return sum(values) / len(values)


def rir_spread(values: Sequence[float]) -> float:
    """Population standard deviation of RIR values (0 for fewer than 2)."""
    if len(values) < 2:
        return 0.0
    mean = sum(values) / len(values)
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))


def epley_1rm(weight: float, reps: int) -> float:
    """
    Estimate 1RM using the Epley formula.

    1RM = weight * (1 + reps/30), with a single rep returning the weight
    itself and zero reps returning 0.  Monotonic in weight and reps.

    Args:
        weight: Load lifted
        reps: Reps performed

    Returns:
        Estimated one-rep max in the load's unit
    """
    if reps <= 0:
        return 0.0
    if reps == 1:
        return float(weight)
    return weight * (1 + reps / EPLEY_DIVISOR)


def sort_history(history: Iterable[WorkoutLog]) -> list[WorkoutLog]:
    """Workouts oldest first; same-date workouts keep their given order."""
    return sorted(history, key=lambda w: w.date)


def exercise_history(
    history: Iterable[WorkoutLog],
    exercise_id: str,
) -> list[tuple[WorkoutLog, ExerciseLog]]:
    """
    Per-session performances of one exercise, oldest first.

    Skipped entries are dropped.  When a workout lists the exercise more than
    once, the non-skipped entries are merged into a single ExerciseLog.

    Args:
        history: Workout logs in any order
        exercise_id: Exercise to extract

    Returns:
        List of (workout, merged exercise log) pairs
    """
    result: list[tuple[WorkoutLog, ExerciseLog]] = []
    for workout in sort_history(history):
        entries = [
            ex for ex in workout.exercises
            if ex.exercise_id == exercise_id and not ex.skipped
        ]
        if not entries:
            continue
        if len(entries) == 1:
            result.append((workout, entries[0]))
        else:
            merged = [s for ex in entries for s in ex.sets]
            result.append((workout, ExerciseLog(exercise_id=exercise_id, sets=merged)))
    return result


def top_set(sets: Sequence[SetLog]) -> tuple[float, int] | None:
    """
    Heaviest completed weight and the most reps performed at it.

    Sets logged as completed with 0 reps are ignored: the weight was never
    lifted.

    Returns:
        (weight, reps) or None when there is no completed set with reps
    """
    done = [s for s in sets if s.completed and s.reps > 0]
    if not done:
        return None
    top_weight = max(s.weight for s in done)
    reps = max(s.reps for s in done if s.weight == top_weight)
    return top_weight, reps
