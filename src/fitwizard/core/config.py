"""
Configuration constants for the progression and analytics engine.

All adjustable thresholds are centralized here as named defaults.  The typed
ProgressionConfig / WeeklyConfig objects take their defaults from these
constants; YAML overrides are applied by engine/config_loader.py.
"""

from dataclasses import dataclass, field
from typing import Final

# =============================================================================
# READINESS
# =============================================================================

READINESS_DECIMALS: Final[int] = 2  # overall_score rounding
READINESS_INVERT_BASE: Final[int] = 6  # soreness/stress are inverted as 6 - x
READINESS_LOW_CUTOFF: Final[float] = 2.5  # Trend below this tempers progression
READINESS_WINDOW_DAYS: Final[int] = 7  # Days of check-ins averaged into the trend

# =============================================================================
# SESSION WINDOW
# =============================================================================

SESSION_WINDOW: Final[int] = 3  # k: most recent sessions per exercise analysed
MIN_SESSIONS_FOR_SIGNAL: Final[int] = 2  # Fewer sessions -> low confidence

# =============================================================================
# RIR THRESHOLDS (used when no prescription target is available)
# =============================================================================

TOO_EASY_RIR: Final[float] = 3.0  # Avg RIR at or above: session was easy
TOO_HARD_RIR: Final[float] = 1.0  # Avg RIR at or below: session near failure
DEFAULT_TARGET_RIR: Final[int] = 2
RIR_EASY_MARGIN: Final[float] = 1.0  # target_rir + margin -> easy
RIR_HARD_MARGIN: Final[float] = 1.0  # target_rir - margin -> hard
RIR_SPREAD_LIMIT: Final[float] = 1.5  # Std dev of set RIRs above this -> technique focus

# =============================================================================
# LOAD STEPS
# =============================================================================

MIN_LOAD_STEP: Final[float] = 0.025  # Lower bound of an increase_load step
MAX_LOAD_STEP: Final[float] = 0.05  # Upper bound of an increase_load step
BASE_LOAD_STEP: Final[float] = 0.025  # Regular progressive overload
STAGNATION_LOAD_STEP: Final[float] = 0.05  # Bigger jump after a plateau
REP_STEP: Final[int] = 1  # increase_reps magnitude

# =============================================================================
# OVERREACH AND DELOAD
# =============================================================================

DELOAD_AFTER_SESSIONS: Final[int] = 2  # Consecutive hard sessions before deload
DELOAD_PERCENT: Final[float] = 0.10  # Load reduction for a deload

# =============================================================================
# STAGNATION
# =============================================================================

STAGNATION_MIN_WEEKS: Final[int] = 1  # Distinct calendar weeks the window must span

# =============================================================================
# WEEK BOUNDARY
# =============================================================================

WEEK_START_WEEKDAY: Final[int] = 0  # Monday (datetime.weekday())

# =============================================================================
# PERSONAL RECORDS
# =============================================================================

EPLEY_DIVISOR: Final[float] = 30.0  # e1RM = weight * (1 + reps / 30)

# =============================================================================
# UNITS
# =============================================================================

KG_PER_LB: Final[float] = 0.453592
LB_PER_KG: Final[float] = 2.20462
PLATE_INCREMENT: Final[dict[str, float]] = {
    "lbs": 2.5,
    "kg": 1.0,
}

# =============================================================================
# VOLUME LANDMARKS (weekly working sets per muscle group)
# =============================================================================

MRV_LANDMARKS: Final[dict[str, int]] = {
    "chest": 22,
    "front_deltoid": 12,
    "side_deltoid": 26,
    "rear_deltoid": 26,
    "biceps": 26,
    "triceps": 18,
    "forearms": 25,
    "abs": 25,
    "obliques": 25,
    "quads": 20,
    "hamstrings": 20,
    "glutes": 16,
    "calves": 20,
    "upper_back": 25,
    "lats": 25,
    "lower_back": 12,
    "traps": 26,
}


@dataclass(frozen=True)
class ProgressionConfig:
    """Tunable policy of the progression analyzer."""

    session_window: int = SESSION_WINDOW
    min_sessions_for_signal: int = MIN_SESSIONS_FOR_SIGNAL
    too_easy_rir: float = TOO_EASY_RIR
    too_hard_rir: float = TOO_HARD_RIR
    rir_easy_margin: float = RIR_EASY_MARGIN
    rir_hard_margin: float = RIR_HARD_MARGIN
    rir_spread_limit: float = RIR_SPREAD_LIMIT
    min_load_step: float = MIN_LOAD_STEP
    max_load_step: float = MAX_LOAD_STEP
    base_load_step: float = BASE_LOAD_STEP
    stagnation_load_step: float = STAGNATION_LOAD_STEP
    rep_step: int = REP_STEP
    deload_after_sessions: int = DELOAD_AFTER_SESSIONS
    deload_percent: float = DELOAD_PERCENT
    stagnation_min_weeks: int = STAGNATION_MIN_WEEKS
    readiness_low_cutoff: float = READINESS_LOW_CUTOFF
    readiness_window_days: int = READINESS_WINDOW_DAYS
    week_start_weekday: int = WEEK_START_WEEKDAY

    def __post_init__(self) -> None:
        if self.session_window < 1:
            raise ValueError("session_window must be at least 1")
        if self.min_sessions_for_signal < 1:
            raise ValueError("min_sessions_for_signal must be at least 1")
        if self.min_sessions_for_signal > self.session_window:
            raise ValueError(
                f"min_sessions_for_signal ({self.min_sessions_for_signal}) must not exceed "
                f"session_window ({self.session_window})"
            )
        if self.too_hard_rir >= self.too_easy_rir:
            raise ValueError("too_hard_rir must be below too_easy_rir")
        if not 0 < self.min_load_step <= self.max_load_step:
            raise ValueError("load steps must satisfy 0 < min_load_step <= max_load_step")
        if not 0 < self.deload_percent < 1:
            raise ValueError("deload_percent must be in (0, 1)")
        if self.deload_after_sessions < 1:
            raise ValueError("deload_after_sessions must be at least 1")
        if not 0 <= self.week_start_weekday <= 6:
            raise ValueError("week_start_weekday must be 0 (Mon) .. 6 (Sun)")


@dataclass(frozen=True)
class WeeklyConfig:
    """Week boundary policy and weekly volume landmarks."""

    week_start_weekday: int = WEEK_START_WEEKDAY
    mrv_landmarks: dict[str, int] = field(default_factory=lambda: dict(MRV_LANDMARKS))

    def __post_init__(self) -> None:
        if not 0 <= self.week_start_weekday <= 6:
            raise ValueError("week_start_weekday must be 0 (Mon) .. 6 (Sun)")


DEFAULT_PROGRESSION_CONFIG: Final[ProgressionConfig] = ProgressionConfig()
DEFAULT_WEEKLY_CONFIG: Final[WeeklyConfig] = WeeklyConfig()
