"""
Personal record detection.

Records are derived from log history, never stored as independent truth:
every function here is a pure scan of the history it is given, so running
it twice over the same history prefix yields the same records.

Policy:
- A record needs a strict improvement over all prior sessions; ties are
  not records.
- The first session of an exercise has no baseline and always records all
  three metrics (previous_value=None).
- For max_reps_at_weight the baseline is the most reps any prior completed
  set achieved at a weight at or above this session's top weight.
- Completed sets with 0 reps never count toward max_weight or reps at
  weight.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from .metrics import completed_sets, epley_1rm, exercise_history, top_set
from .models import ExerciseLog, PersonalRecord, SetLog, WorkoutLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionBests:
    """Candidate record metrics of one session for one exercise."""

    max_weight: float
    reps_at_max_weight: int
    estimated_1rm: float


def session_bests(exercise_log: ExerciseLog) -> SessionBests | None:
    """
    Compute candidate metrics from an exercise's completed sets.

    Args:
        exercise_log: One exercise's performance in one session

    Returns:
        SessionBests, or None if the exercise was skipped or has no completed
        set with at least one rep
    """
    done = completed_sets(exercise_log)
    top = top_set(done)
    if top is None:
        return None
    weight, reps = top
    best_e1rm = max(epley_1rm(s.weight, s.reps) for s in done)
    return SessionBests(
        max_weight=weight,
        reps_at_max_weight=reps,
        estimated_1rm=best_e1rm,
    )


def _reps_baseline(prior_sets: Sequence[SetLog], weight: float) -> int | None:
    """Most reps achieved in prior sets at ``weight`` or heavier, None if never."""
    candidates = [s.reps for s in prior_sets if s.weight >= weight and s.reps > 0]
    return max(candidates) if candidates else None


def _records_for_session(
    workout: WorkoutLog,
    exercise_log: ExerciseLog,
    prior_sets: list[SetLog],
    prior_bests: list[SessionBests],
) -> list[PersonalRecord]:
    bests = session_bests(exercise_log)
    if bests is None:
        return []

    exercise_id = exercise_log.exercise_id
    records: list[PersonalRecord] = []

    prev_weight = max((b.max_weight for b in prior_bests), default=None)
    if prev_weight is None or bests.max_weight > prev_weight:
        records.append(PersonalRecord(
            exercise_id=exercise_id,
            metric="max_weight",
            value=bests.max_weight,
            achieved_date=workout.date,
            previous_value=prev_weight,
            workout_id=workout.id,
            weight=bests.max_weight,
        ))

    prev_reps = _reps_baseline(prior_sets, bests.max_weight) if prior_bests else None
    if not prior_bests or prev_reps is None or bests.reps_at_max_weight > prev_reps:
        records.append(PersonalRecord(
            exercise_id=exercise_id,
            metric="max_reps_at_weight",
            value=float(bests.reps_at_max_weight),
            achieved_date=workout.date,
            previous_value=float(prev_reps) if prev_reps is not None else None,
            workout_id=workout.id,
            weight=bests.max_weight,
        ))

    prev_e1rm = max((b.estimated_1rm for b in prior_bests), default=None)
    if prev_e1rm is None or bests.estimated_1rm > prev_e1rm:
        records.append(PersonalRecord(
            exercise_id=exercise_id,
            metric="estimated_1rm",
            value=bests.estimated_1rm,
            achieved_date=workout.date,
            previous_value=prev_e1rm,
            workout_id=workout.id,
            weight=None,
        ))

    if records:
        logger.debug(
            "%s on %s: %s",
            exercise_id,
            workout.date,
            ", ".join(r.metric for r in records),
        )
    return records


def personal_record_history(
    history: Sequence[WorkoutLog],
    exercise_id: str,
) -> list[PersonalRecord]:
    """
    Every personal record set for an exercise, oldest first.

    Args:
        history: Workout logs (any order; sorted by date internally)
        exercise_id: Exercise to scan

    Returns:
        Records in the order they were achieved
    """
    records: list[PersonalRecord] = []
    prior_sets: list[SetLog] = []
    prior_bests: list[SessionBests] = []

    for workout, ex_log in exercise_history(history, exercise_id):
        records.extend(_records_for_session(workout, ex_log, prior_sets, prior_bests))
        bests = session_bests(ex_log)
        if bests is not None:
            prior_bests.append(bests)
            prior_sets.extend(completed_sets(ex_log))

    return records


def detect_personal_records(
    history: Sequence[WorkoutLog],
    workout_id: str,
) -> list[PersonalRecord]:
    """
    Records set in one workout, judged against the sessions before it.

    Only the history prefix up to and including the evaluated workout is
    consulted; later sessions never affect the result.

    Args:
        history: Workout logs including the evaluated workout
        workout_id: Id of the workout to evaluate

    Returns:
        Records for every exercise in that workout

    Raises:
        KeyError: If no workout with ``workout_id`` is in ``history``
    """
    ordered = sorted(history, key=lambda w: w.date)
    for idx, workout in enumerate(ordered):
        if workout.id == workout_id:
            break
    else:
        raise KeyError(f"Workout not found: {workout_id}")

    prefix = ordered[: idx + 1]
    exercise_ids: list[str] = []
    for ex in workout.exercises:
        if not ex.skipped and ex.exercise_id not in exercise_ids:
            exercise_ids.append(ex.exercise_id)

    records: list[PersonalRecord] = []
    for exercise_id in exercise_ids:
        records.extend(
            r for r in personal_record_history(prefix, exercise_id)
            if r.workout_id == workout_id
        )
    return records


def best_performances(
    history: Sequence[WorkoutLog],
    exercise_id: str,
) -> dict[str, PersonalRecord]:
    """
    Current all-time best per metric.

    Returns:
        {metric: latest record for that metric}; empty for an unlogged exercise
    """
    latest: dict[str, PersonalRecord] = {}
    for record in personal_record_history(history, exercise_id):
        latest[record.metric] = record
    return latest
