"""
Weekly training summaries.

Weeks start on a fixed weekday (Monday by default) and every comparison
between weeks goes through week_start() so the boundary is applied
consistently.  Summaries are recomputed from raw logs on every call.
"""

import logging
from datetime import datetime, timedelta
from typing import Mapping, Sequence

from .config import DEFAULT_WEEKLY_CONFIG, WEEK_START_WEEKDAY, WeeklyConfig
from .exercises.base import ExerciseMetadata
from .metrics import calculate_volume, merge_totals, muscle_group_sets, muscle_group_volume
from .models import ReadinessEntry, VolumeWarning, WeeklySummary, WorkoutLog
from .readiness import average_readiness

logger = logging.getLogger(__name__)


def week_start(date: str, start_weekday: int = WEEK_START_WEEKDAY) -> str:
    """
    First day of the week containing ``date``.

    Args:
        date: ISO date
        start_weekday: 0 = Monday .. 6 = Sunday

    Returns:
        ISO date of the week's first day
    """
    d = datetime.strptime(date, "%Y-%m-%d")
    offset = (d.weekday() - start_weekday) % 7
    return (d - timedelta(days=offset)).strftime("%Y-%m-%d")


def week_end(start: str) -> str:
    """Last day (inclusive) of the week beginning on ``start``."""
    d = datetime.strptime(start, "%Y-%m-%d")
    return (d + timedelta(days=6)).strftime("%Y-%m-%d")


def weekly_summary(
    logs: Sequence[WorkoutLog],
    readiness: Sequence[ReadinessEntry],
    catalog: Mapping[str, ExerciseMetadata],
    start: str,
) -> WeeklySummary:
    """
    Summarise the week beginning on ``start``.

    Logs and readiness entries outside the week are ignored, so callers may
    pass the whole history.

    Args:
        logs: Workout logs
        readiness: Readiness entries
        catalog: exercise_id -> metadata, for muscle-group attribution
        start: ISO date of the week's first day

    Returns:
        WeeklySummary; average_readiness is None without check-ins that week
    """
    end = week_end(start)
    week_logs = [w for w in logs if start <= w.date <= end]

    return WeeklySummary(
        week_start=start,
        muscle_group_volume=merge_totals(muscle_group_volume(w, catalog) for w in week_logs),
        session_count=len(week_logs),
        average_readiness=average_readiness(readiness, start, end),
        total_volume=float(sum(calculate_volume(w) for w in week_logs)),
        muscle_group_sets=merge_totals(muscle_group_sets(w, catalog) for w in week_logs),
    )


def build_weekly_summaries(
    logs: Sequence[WorkoutLog],
    readiness: Sequence[ReadinessEntry],
    catalog: Mapping[str, ExerciseMetadata],
    config: WeeklyConfig = DEFAULT_WEEKLY_CONFIG,
) -> list[WeeklySummary]:
    """
    One summary per week that has at least one session or check-in.

    Returns:
        Summaries ordered oldest week first
    """
    starts = {week_start(w.date, config.week_start_weekday) for w in logs}
    starts |= {week_start(e.date, config.week_start_weekday) for e in readiness}

    summaries = [weekly_summary(logs, readiness, catalog, s) for s in sorted(starts)]
    logger.debug("Built %d weekly summaries", len(summaries))
    return summaries


def detect_volume_warnings(
    summary: WeeklySummary,
    landmarks: Mapping[str, int] | None = None,
) -> list[VolumeWarning]:
    """
    Muscle groups trained beyond their maximum recoverable volume.

    Args:
        summary: Weekly summary to check
        landmarks: {muscle_group: MRV sets/week}; defaults to the configured table.
            Groups without a landmark are not checked.

    Returns:
        Warnings sorted by muscle group
    """
    mrv = DEFAULT_WEEKLY_CONFIG.mrv_landmarks if landmarks is None else landmarks
    warnings: list[VolumeWarning] = []
    for group in sorted(summary.muscle_group_sets):
        sets = summary.muscle_group_sets[group]
        cap = mrv.get(group)
        if cap is not None and sets > cap:
            warnings.append(VolumeWarning(muscle_group=group, sets=sets, mrv=cap))
    return warnings
