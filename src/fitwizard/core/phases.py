"""
NASM OPT model phases.

Single source of truth for phase parameters and the goal/experience -> phase
mapping.  Prescriptions built here feed the progression analyzer's rep-range
and RIR targets.
"""

import re
from dataclasses import dataclass
from typing import Final, get_args

from .models import ExercisePrescription, OptPhase


@dataclass(frozen=True)
class PhaseConfig:
    """Training parameters for one OPT phase."""

    reps: str          # Rep range as written in plans, e.g. "8-12"
    sets: int
    tempo: str         # eccentric-isometric-concentric, "X" = explosive
    rest_seconds: int
    intensity: str     # %1RM band
    target_rir: int


PHASE_CONFIGS: Final[dict[str, PhaseConfig]] = {
    "stabilization_endurance": PhaseConfig(
        reps="12-20", sets=2, tempo="4-2-1", rest_seconds=90,
        intensity="50-70%", target_rir=3,
    ),
    "strength_endurance": PhaseConfig(
        reps="8-12", sets=3, tempo="2-0-2", rest_seconds=60,
        intensity="70-80%", target_rir=2,
    ),
    "muscular_development": PhaseConfig(
        reps="6-12", sets=3, tempo="2-0-2", rest_seconds=90,
        intensity="75-85%", target_rir=2,
    ),
    "maximal_strength": PhaseConfig(
        reps="1-5", sets=4, tempo="X-0-X", rest_seconds=180,
        intensity="85-100%", target_rir=1,
    ),
    "power": PhaseConfig(
        reps="1-5", sets=3, tempo="X-0-X", rest_seconds=180,
        intensity="30-45% or 85-100%", target_rir=2,
    ),
}

PHASE_NAMES: Final[dict[str, str]] = {
    "stabilization_endurance": "Phase 1: Stabilization Endurance",
    "strength_endurance": "Phase 2: Strength Endurance",
    "muscular_development": "Phase 3: Muscular Development",
    "maximal_strength": "Phase 4: Maximal Strength",
    "power": "Phase 5: Power",
}

# experience -> goal -> phase
PHASE_MATRIX: Final[dict[str, dict[str, str]]] = {
    "beginner": {
        "strength": "stabilization_endurance",
        "hypertrophy": "stabilization_endurance",
        "general": "stabilization_endurance",
    },
    "intermediate": {
        "strength": "strength_endurance",
        "hypertrophy": "muscular_development",
        "general": "stabilization_endurance",
    },
    "advanced": {
        "strength": "maximal_strength",
        "hypertrophy": "muscular_development",
        "general": "power",
    },
}

DEFAULT_PHASE: Final[str] = "stabilization_endurance"
ALL_PHASES: Final[tuple[str, ...]] = get_args(OptPhase)


def determine_opt_phase(goal: str | None, experience: str | None) -> str:
    """
    Pick the OPT phase for a goal and experience level.

    Unknown or missing values fall back to stabilization endurance, the
    phase that is safe for everyone.
    """
    phases = PHASE_MATRIX.get(experience or "beginner")
    if phases is None:
        return DEFAULT_PHASE
    return phases.get(goal or "general", DEFAULT_PHASE)


def get_phase_config(phase: str) -> PhaseConfig:
    """Parameters for ``phase`` (stabilization endurance if unknown)."""
    return PHASE_CONFIGS.get(phase, PHASE_CONFIGS[DEFAULT_PHASE])


def phase_name(phase: str) -> str:
    """Human-readable phase label."""
    return PHASE_NAMES.get(phase, "Unknown Phase")


def parse_rep_range(reps: str) -> tuple[int, int]:
    """
    Parse a plan rep string.

    "8-12" -> (8, 12); "5" -> (5, 5).  En dashes and spaces are accepted.

    Raises:
        ValueError: If the string is not a rep range
    """
    m = re.fullmatch(r"\s*(\d+)\s*(?:[-–]\s*(\d+))?\s*", reps)
    if m is None:
        raise ValueError(f"Invalid rep range: {reps!r}")
    low = int(m.group(1))
    high = int(m.group(2)) if m.group(2) is not None else low
    if high < low:
        raise ValueError(f"Invalid rep range: {reps!r}")
    return low, high


def prescription_for_phase(
    exercise_id: str,
    phase: str,
    load: float | None = None,
    effective_date: str | None = None,
) -> ExercisePrescription:
    """
    Build the default prescription of an exercise for an OPT phase.

    Args:
        exercise_id: Exercise the prescription is for
        phase: One of ALL_PHASES
        load: Working weight, if known
        effective_date: ISO date the prescription starts applying

    Raises:
        ValueError: If ``phase`` is not an OPT phase
    """
    if phase not in PHASE_CONFIGS:
        raise ValueError(f"Unknown OPT phase {phase!r}. Valid: {', '.join(ALL_PHASES)}")
    cfg = PHASE_CONFIGS[phase]
    rep_min, rep_max = parse_rep_range(cfg.reps)
    return ExercisePrescription(
        exercise_id=exercise_id,
        sets=cfg.sets,
        rep_min=rep_min,
        rep_max=rep_max,
        target_rir=cfg.target_rir,
        load=load,
        phase=phase,  # type: ignore[arg-type]
        effective_date=effective_date,
    )
