"""
Progression rules: overreach detection, stagnation detection, double
progression and readiness tempering.

Given the most recent sessions of one exercise and its current prescription,
decide how the next prescription should change.  Every path resolves to a
recommendation; missing history is a normal state, not an error.
"""

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Literal, Sequence

from .config import DEFAULT_PROGRESSION_CONFIG, PLATE_INCREMENT, ProgressionConfig
from .metrics import (
    average_rir,
    completed_sets,
    exercise_history,
    reported_rirs,
    rir_spread,
    top_set,
)
from .models import (
    Confidence,
    ExerciseLog,
    ExercisePrescription,
    MagnitudeUnit,
    ProgressionAction,
    ProgressionRecommendation,
    ReadinessEntry,
    ReasonCode,
    WorkoutLog,
)
from .readiness import readiness_trend
from .units import round_to_increment
from .weekly import week_start

logger = logging.getLogger(__name__)

SessionClass = Literal["easy", "on_target", "hard"]

_CONFIDENCE_LADDER: tuple[Confidence, ...] = ("low", "medium", "high")
_PROGRESSIVE_ACTIONS: frozenset[str] = frozenset({"increase_load", "increase_reps"})

# Display order for batch analysis: progressions first, deloads last.
ACTION_ORDER: tuple[str, ...] = (
    "increase_load",
    "increase_reps",
    "technique_focus",
    "maintain",
    "deload",
)


@dataclass(frozen=True)
class SessionPerformance:
    """What one session of an exercise looked like against its prescription."""

    date: str
    top_weight: float
    top_reps: int  # most reps at top_weight
    average_rir: float | None
    completed_all: bool
    missed_sets: int
    set_rirs: tuple[int, ...] = ()


@dataclass(frozen=True)
class _Decision:
    action: ProgressionAction
    magnitude: float
    confidence: Confidence
    rationale: ReasonCode
    unit: MagnitudeUnit = "percent"
    adjustments: tuple[ReasonCode, ...] = ()


def summarize_session(
    date: str,
    exercise_log: ExerciseLog,
    prescription: ExercisePrescription | None = None,
) -> SessionPerformance:
    """
    Reduce one session of an exercise to the signals the rules use.

    With a prescription, a set counts toward completion only if it was
    completed with at least ``rep_min`` reps, and the session is complete
    when at least ``sets`` such sets were done.  Without one, the session is
    complete when every logged set was completed.

    Args:
        date: Session date
        exercise_log: The exercise's sets that session
        prescription: Prescription in force, if any

    Returns:
        SessionPerformance
    """
    done = completed_sets(exercise_log)
    weight, reps = top_set(done) or (0.0, 0)

    if prescription is not None:
        hit = [s for s in done if s.reps >= prescription.rep_min]
        missed = max(0, prescription.sets - len(hit))
        completed_all = missed == 0
    else:
        missed = sum(1 for s in exercise_log.sets if not s.completed)
        completed_all = missed == 0 and bool(done)

    return SessionPerformance(
        date=date,
        top_weight=weight,
        top_reps=reps,
        average_rir=average_rir(done),
        completed_all=completed_all,
        missed_sets=missed,
        set_rirs=tuple(reported_rirs(done)),
    )


def rir_thresholds(
    prescription: ExercisePrescription | None,
    config: ProgressionConfig = DEFAULT_PROGRESSION_CONFIG,
) -> tuple[float, float]:
    """
    (too_easy, too_hard) RIR thresholds.

    Relative to the prescription's target RIR when there is one, the
    configured absolute thresholds otherwise.
    """
    if prescription is None:
        return config.too_easy_rir, config.too_hard_rir
    easy = prescription.target_rir + config.rir_easy_margin
    hard = max(0.0, prescription.target_rir - config.rir_hard_margin)
    return easy, hard


def classify_session(
    perf: SessionPerformance,
    too_easy_rir: float,
    too_hard_rir: float,
) -> SessionClass:
    """
    Classify a session as easy, on target or hard.

    Missed sets/reps make a session hard regardless of RIR.  A completed
    session without any RIR rating counts as on target.
    """
    if not perf.completed_all:
        return "hard"
    if perf.average_rir is None:
        return "on_target"
    if perf.average_rir <= too_hard_rir:
        return "hard"
    if perf.average_rir >= too_easy_rir:
        return "easy"
    return "on_target"


def is_stagnant(
    perfs: Sequence[SessionPerformance],
    min_weeks: int = 1,
    week_start_weekday: int = 0,
) -> bool:
    """
    True if neither load nor reps at that load went up across ``perfs``.

    The sessions must also span at least ``min_weeks`` calendar weeks.
    """
    if len(perfs) < 2:
        return False
    for prev, cur in zip(perfs, perfs[1:]):
        if cur.top_weight > prev.top_weight:
            return False
        if cur.top_weight == prev.top_weight and cur.top_reps > prev.top_reps:
            return False
    weeks = {week_start(p.date, week_start_weekday) for p in perfs}
    return len(weeks) >= min_weeks


def _trailing_count(classes: Sequence[SessionClass], value: SessionClass) -> int:
    count = 0
    for c in reversed(classes):
        if c != value:
            break
        count += 1
    return count


def _bounded_step(step: float, config: ProgressionConfig) -> float:
    return min(max(step, config.min_load_step), config.max_load_step)


def _lower_confidence(confidence: Confidence) -> Confidence:
    idx = _CONFIDENCE_LADDER.index(confidence)
    return _CONFIDENCE_LADDER[max(0, idx - 1)]


def _decide(
    perfs: Sequence[SessionPerformance],
    prescription: ExercisePrescription | None,
    config: ProgressionConfig,
) -> _Decision:
    """Rule cascade over at least min_sessions_for_signal sessions."""
    easy_rir, hard_rir = rir_thresholds(prescription, config)
    classes = [classify_session(p, easy_rir, hard_rir) for p in perfs]
    full_window = len(perfs) >= config.session_window
    consistent = full_window and len(set(classes)) == 1
    logger.debug("Session classes: %s (easy>=%.1f, hard<=%.1f)", classes, easy_rir, hard_rir)

    # Rule 1: consecutive hard sessions -> deload
    hard_streak = _trailing_count(classes, "hard")
    if hard_streak >= config.deload_after_sessions:
        confidence: Confidence = "high" if hard_streak >= config.session_window else "medium"
        return _Decision("deload", -config.deload_percent, confidence, "repeated_overreach")

    # Rule 2: a single hard session -> hold
    if hard_streak > 0:
        reason: ReasonCode = "near_failure" if perfs[-1].completed_all else "missed_reps"
        return _Decision("maintain", 0.0, "medium", reason)

    # Rule 3: easy and hard sessions in the same window -> no clear signal
    if "hard" in classes and "easy" in classes:
        return _Decision("maintain", 0.0, "low", "mixed_signals")

    # Rule 4: erratic effort ratings -> consolidate technique first
    set_rirs = [r for p in perfs for r in p.set_rirs]
    if rir_spread(set_rirs) > config.rir_spread_limit:
        return _Decision("technique_focus", 0.0, "medium", "inconsistent_effort")

    # Rule 5: every session easy -> add load, more after a plateau
    if all(c == "easy" for c in classes):
        stagnant = full_window and is_stagnant(
            perfs, config.stagnation_min_weeks, config.week_start_weekday
        )
        step = config.stagnation_load_step if stagnant else config.base_load_step
        return _Decision(
            "increase_load",
            _bounded_step(step, config),
            "high" if consistent else "medium",
            "stagnation" if stagnant else "too_easy",
        )

    # Rule 6: on target -> double progression through the rep range
    confidence = "high" if consistent else "medium"
    if prescription is not None and perfs[-1].top_reps < prescription.rep_max:
        return _Decision(
            "increase_reps", float(config.rep_step), confidence, "rep_range_progress", unit="reps"
        )
    return _Decision(
        "increase_load", _bounded_step(config.base_load_step, config), confidence, "rep_range_top"
    )


def _apply_readiness(
    decision: _Decision,
    readiness: Sequence[ReadinessEntry],
    as_of: str,
    config: ProgressionConfig,
) -> _Decision:
    """Temper a progressive decision when the readiness trend is low."""
    if not readiness or decision.action not in _PROGRESSIVE_ACTIONS:
        return decision
    trend = readiness_trend(readiness, as_of, config.readiness_window_days)
    if trend is None or trend >= config.readiness_low_cutoff:
        return decision
    logger.debug(
        "Readiness %.2f below %.2f: %s -> maintain",
        trend, config.readiness_low_cutoff, decision.action,
    )
    return replace(
        decision,
        action="maintain",
        magnitude=0.0,
        unit="percent",
        confidence=_lower_confidence(decision.confidence),
        adjustments=decision.adjustments + ("low_readiness",),
    )


def _recommended_load(current: float, decision: _Decision, unit: str) -> float:
    """Apply a percent change, moving at least one plate increment."""
    if decision.unit != "percent" or decision.magnitude == 0 or current <= 0:
        return current
    target = round_to_increment(current * (1 + decision.magnitude), unit)  # type: ignore[arg-type]
    increment = PLATE_INCREMENT[unit]
    if decision.magnitude > 0 and target <= current:
        target = round(current + increment, 2)
    elif decision.magnitude < 0 and target >= current:
        target = round(max(0.0, current - increment), 2)
    return target


def analyze_progression(
    exercise_id: str,
    history: Sequence[WorkoutLog],
    prescription: ExercisePrescription | None = None,
    readiness: Sequence[ReadinessEntry] = (),
    config: ProgressionConfig = DEFAULT_PROGRESSION_CONFIG,
    as_of: str | None = None,
) -> ProgressionRecommendation:
    """
    Recommend the next prescription change for one exercise.

    Only the last ``config.session_window`` sessions of the exercise are
    considered.  Fewer than ``config.min_sessions_for_signal`` sessions give
    maintain / low / insufficient_history.

    Args:
        exercise_id: Exercise to analyse
        history: Workout logs (any order, may contain other exercises)
        prescription: Most recent prescription for the exercise
        readiness: Readiness entries; may be empty
        config: Thresholds and window sizes
        as_of: Date the readiness trend ends on (default: latest session or
            check-in date, whichever is later)

    Returns:
        ProgressionRecommendation
    """
    sessions = exercise_history(history, exercise_id)
    recent = sessions[-config.session_window:]
    perfs = [summarize_session(w.date, ex, prescription) for w, ex in recent]

    if len(perfs) < config.min_sessions_for_signal:
        decision = _Decision("maintain", 0.0, "low", "insufficient_history")
    else:
        decision = _decide(perfs, prescription, config)

    if perfs:
        if as_of is None:
            dates = [perfs[-1].date] + [e.date for e in readiness]
            as_of = max(dates)
        decision = _apply_readiness(decision, readiness, as_of, config)

    if perfs:
        current_load = perfs[-1].top_weight
        unit = recent[-1][0].weight_unit
    else:
        current_load = prescription.load if prescription and prescription.load else 0.0
        unit = "kg"

    logger.debug(
        "%s: %s %+.3f (%s, %s) from %d sessions",
        exercise_id, decision.action, decision.magnitude,
        decision.confidence, decision.rationale, len(perfs),
    )

    return ProgressionRecommendation(
        exercise_id=exercise_id,
        action=decision.action,
        magnitude=decision.magnitude,
        confidence=decision.confidence,
        rationale=decision.rationale,
        magnitude_unit=decision.unit,
        adjustments=decision.adjustments,
        current_load=current_load,
        recommended_load=_recommended_load(current_load, decision, unit),
        sessions_considered=len(perfs),
    )


def latest_prescription(
    prescriptions: Iterable[ExercisePrescription],
    exercise_id: str,
) -> ExercisePrescription | None:
    """
    Most recent prescription for an exercise.

    Ordered by effective_date (undated sorts first); among equal dates the
    later one in the sequence wins.
    """
    best: ExercisePrescription | None = None
    for p in prescriptions:
        if p.exercise_id != exercise_id:
            continue
        if best is None or (p.effective_date or "") >= (best.effective_date or ""):
            best = p
    return best


def analyze_performance(
    history: Sequence[WorkoutLog],
    prescriptions: Iterable[ExercisePrescription] = (),
    readiness: Sequence[ReadinessEntry] = (),
    config: ProgressionConfig = DEFAULT_PROGRESSION_CONFIG,
) -> list[ProgressionRecommendation]:
    """
    Recommendations for every exercise performed in ``history``.

    Returns:
        One recommendation per exercise, progressions first and deloads last
    """
    prescriptions = list(prescriptions)
    exercise_ids: list[str] = []
    for workout in sorted(history, key=lambda w: w.date):
        for ex in workout.exercises:
            if not ex.skipped and ex.exercise_id not in exercise_ids:
                exercise_ids.append(ex.exercise_id)

    recommendations = [
        analyze_progression(
            exercise_id,
            history,
            latest_prescription(prescriptions, exercise_id),
            readiness,
            config,
        )
        for exercise_id in exercise_ids
    ]
    recommendations.sort(key=lambda r: ACTION_ORDER.index(r.action))
    return recommendations
