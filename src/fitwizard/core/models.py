"""
Data models for fitwizard.

All core dataclasses representing logged workouts, readiness check-ins,
prescriptions and the derived analytics records.  Logged records are frozen:
a correction replaces the whole WorkoutLog rather than patching it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

WeightUnit = Literal["kg", "lbs"]

OptPhase = Literal[
    "stabilization_endurance",
    "strength_endurance",
    "muscular_development",
    "maximal_strength",
    "power",
]

ProgressionAction = Literal[
    "increase_load",
    "increase_reps",
    "maintain",
    "deload",
    "technique_focus",
]
Confidence = Literal["low", "medium", "high"]
MagnitudeUnit = Literal["percent", "reps"]
RecordMetric = Literal["max_weight", "max_reps_at_weight", "estimated_1rm"]

# Closed set of reasons; presentation layers localize these codes.
ReasonCode = Literal[
    "insufficient_history",
    "stagnation",
    "too_easy",
    "rep_range_progress",
    "rep_range_top",
    "repeated_overreach",
    "near_failure",
    "missed_reps",
    "mixed_signals",
    "inconsistent_effort",
    "low_readiness",
]

REASON_CODES: tuple[str, ...] = (
    "insufficient_history",
    "stagnation",
    "too_easy",
    "rep_range_progress",
    "rep_range_top",
    "repeated_overreach",
    "near_failure",
    "missed_reps",
    "mixed_signals",
    "inconsistent_effort",
    "low_readiness",
)

READINESS_RATING_MIN = 1
READINESS_RATING_MAX = 5


def validate_iso_date(date_str: str) -> None:
    """Validate date string is ISO format YYYY-MM-DD."""
    import re

    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


@dataclass(frozen=True)
class SetLog:
    """
    A single performed set.

    ``rir_reported`` is the lifter's perceived difficulty expressed as reps in
    reserve (0 = failure).  None when the user skipped the rating.
    """

    weight: float
    reps: int
    completed: bool = True
    rir_reported: int | None = None

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.weight < 0:
            raise ValueError("weight must be non-negative")
        if isinstance(self.reps, bool) or not isinstance(self.reps, int):
            raise ValueError(f"reps must be an integer, got {self.reps!r}")
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.rir_reported is not None:
            if isinstance(self.rir_reported, bool) or not isinstance(self.rir_reported, int):
                raise ValueError(f"rir_reported must be an integer, got {self.rir_reported!r}")
            if self.rir_reported < 0:
                raise ValueError("rir_reported must be non-negative")


@dataclass(frozen=True)
class ExerciseLog:
    """One exercise's performance within a session."""

    exercise_id: str
    sets: list[SetLog] = field(default_factory=list)
    skipped: bool = False
    skip_reason: str | None = None

    def __post_init__(self) -> None:
        if not self.exercise_id or not self.exercise_id.strip():
            raise ValueError("exercise_id must be a non-empty string")


@dataclass(frozen=True)
class WorkoutLog:
    """
    One completed training session.

    ``plan_id`` is a lookup-only reference to the prescribed plan.  A log is
    never edited in place; corrections replace the log with the same ``id``.
    """

    id: str
    date: str  # ISO format: YYYY-MM-DD
    plan_id: str | None = None
    exercises: list[ExerciseLog] = field(default_factory=list)
    weight_unit: WeightUnit = "kg"
    notes: str | None = None

    def __post_init__(self) -> None:
        """Validate session data."""
        if not self.id:
            raise ValueError("WorkoutLog.id must be non-empty")
        validate_iso_date(self.date)
        if self.weight_unit not in ("kg", "lbs"):
            raise ValueError(f"Invalid weight_unit: {self.weight_unit}")

    def exercise(self, exercise_id: str) -> ExerciseLog | None:
        """Return the first non-skipped log for ``exercise_id`` in this session."""
        for ex in self.exercises:
            if ex.exercise_id == exercise_id and not ex.skipped:
                return ex
        return None


@dataclass(frozen=True)
class ExercisePrescription:
    """
    Planned sets/reps/load/RIR target for one exercise.

    ``load`` is None when the plan leaves the working weight to the lifter.
    """

    exercise_id: str
    sets: int
    rep_min: int
    rep_max: int
    target_rir: int = 2
    load: float | None = None
    phase: OptPhase | None = None
    effective_date: str | None = None

    def __post_init__(self) -> None:
        if self.sets <= 0:
            raise ValueError("sets must be positive")
        if self.rep_min < 0 or self.rep_max < self.rep_min:
            raise ValueError(
                f"Invalid rep range {self.rep_min}-{self.rep_max}"
            )
        if self.target_rir < 0:
            raise ValueError("target_rir must be non-negative")
        if self.load is not None and self.load < 0:
            raise ValueError("load must be non-negative")
        if self.effective_date is not None:
            validate_iso_date(self.effective_date)


@dataclass(frozen=True)
class ReadinessEntry:
    """
    Daily readiness check-in.

    sleep_quality and energy_level: higher is better.
    muscle_soreness and stress_level: higher is worse.
    overall_score is derived on construction.
    """

    date: str
    sleep_quality: int
    muscle_soreness: int
    energy_level: int
    stress_level: int
    overall_score: float = field(init=False)

    def __post_init__(self) -> None:
        validate_iso_date(self.date)
        for name in ("sleep_quality", "muscle_soreness", "energy_level", "stress_level"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer rating, got {value!r}")
            if not READINESS_RATING_MIN <= value <= READINESS_RATING_MAX:
                raise ValueError(
                    f"{name} must be between {READINESS_RATING_MIN} and "
                    f"{READINESS_RATING_MAX}, got {value}"
                )

        from .readiness import readiness_score

        object.__setattr__(
            self,
            "overall_score",
            readiness_score(
                self.sleep_quality,
                self.muscle_soreness,
                self.energy_level,
                self.stress_level,
            ),
        )


@dataclass(frozen=True)
class ProgressionRecommendation:
    """
    Prescription change for the next session of one exercise.

    ``magnitude`` is a fraction of the current load when ``magnitude_unit`` is
    "percent" (0.025 = +2.5 %, negative for a deload) or a rep delta when it
    is "reps".
    """

    exercise_id: str
    action: ProgressionAction
    magnitude: float
    confidence: Confidence
    rationale: ReasonCode
    magnitude_unit: MagnitudeUnit = "percent"
    adjustments: tuple[ReasonCode, ...] = ()
    current_load: float = 0.0
    recommended_load: float = 0.0
    sessions_considered: int = 0


@dataclass(frozen=True)
class PersonalRecord:
    """
    A strict improvement over every prior session for one metric.

    previous_value is None for baseline records set by the first session.
    For max_reps_at_weight, ``value`` is a rep count and ``weight`` the load.
    """

    exercise_id: str
    metric: RecordMetric
    value: float
    achieved_date: str
    previous_value: float | None
    workout_id: str = ""
    weight: float | None = None


@dataclass(frozen=True)
class WeeklySummary:
    """
    Aggregates for one calendar week.

    average_readiness is None when no readiness entry falls inside the week.
    """

    week_start: str
    muscle_group_volume: dict[str, float]
    session_count: int
    average_readiness: float | None = None
    total_volume: float = 0.0
    muscle_group_sets: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class VolumeWarning:
    """Weekly working sets for a muscle group above its MRV landmark."""

    muscle_group: str
    sets: int
    mrv: int
