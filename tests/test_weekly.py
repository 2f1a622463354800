"""
Tests for weekly summaries: week boundaries, readiness averaging and MRV
volume warnings.
"""

from fitwizard.core.config import WeeklyConfig
from fitwizard.core.exercises.base import ExerciseMetadata
from fitwizard.core.models import ExerciseLog, ReadinessEntry, SetLog, WorkoutLog
from fitwizard.core.weekly import (
    build_weekly_summaries,
    detect_volume_warnings,
    week_end,
    week_start,
    weekly_summary,
)

CATALOG = {
    "bench_press": ExerciseMetadata("bench_press", "Bench Press", ("chest", "triceps"), "horizontal_push"),
    "back_squat": ExerciseMetadata("back_squat", "Back Squat", ("quads", "glutes"), "squat"),
}


def _workout(date: str, exercise_id: str = "bench_press", n_sets: int = 3, weight: float = 100, reps: int = 8) -> WorkoutLog:
    sets = [SetLog(weight=weight, reps=reps) for _ in range(n_sets)]
    return WorkoutLog(id=date, date=date, exercises=[ExerciseLog(exercise_id, sets)])


def _readiness(date: str, level: int) -> ReadinessEntry:
    return ReadinessEntry(date, level, 6 - level, level, 6 - level)


class TestWeekBoundaries:

    def test_monday_is_its_own_week_start(self):
        assert week_start("2026-03-02") == "2026-03-02"

    def test_sunday_belongs_to_previous_monday(self):
        assert week_start("2026-03-08") == "2026-03-02"

    def test_next_monday_starts_new_week(self):
        assert week_start("2026-03-09") == "2026-03-09"

    def test_custom_start_weekday(self):
        # Sunday-start weeks: 2026-03-04 (Wed) -> 2026-03-01 (Sun)
        assert week_start("2026-03-04", start_weekday=6) == "2026-03-01"

    def test_week_end_inclusive(self):
        assert week_end("2026-03-02") == "2026-03-08"


class TestWeeklySummary:

    def test_aggregates_within_week(self):
        logs = [
            _workout("2026-03-02"),
            _workout("2026-03-05", "back_squat", n_sets=2, weight=140, reps=5),
            _workout("2026-03-09"),  # next week
        ]
        summary = weekly_summary(logs, [], CATALOG, "2026-03-02")
        assert summary.session_count == 2
        assert summary.total_volume == 2400 + 1400
        assert summary.muscle_group_volume == {
            "chest": 2400.0,
            "triceps": 2400.0,
            "quads": 1400.0,
            "glutes": 1400.0,
        }
        assert summary.muscle_group_sets == {"chest": 3, "triceps": 3, "quads": 2, "glutes": 2}

    def test_readiness_absent_not_zero(self):
        summary = weekly_summary([_workout("2026-03-02")], [], CATALOG, "2026-03-02")
        assert summary.average_readiness is None

    def test_readiness_averaged_over_week_only(self):
        readiness = [
            _readiness("2026-03-01", 1),  # previous week
            _readiness("2026-03-03", 5),
            _readiness("2026-03-08", 3),
        ]
        summary = weekly_summary([_workout("2026-03-02")], readiness, CATALOG, "2026-03-02")
        assert summary.average_readiness == 4.0

    def test_empty_week(self):
        summary = weekly_summary([], [], CATALOG, "2026-03-02")
        assert summary.session_count == 0
        assert summary.total_volume == 0.0
        assert summary.muscle_group_volume == {}

    def test_unknown_exercise_only_in_total(self):
        summary = weekly_summary([_workout("2026-03-02", "sled_push")], [], CATALOG, "2026-03-02")
        assert summary.muscle_group_volume == {}
        assert summary.total_volume == 2400.0


class TestBuildWeeklySummaries:

    def test_one_summary_per_active_week_sorted(self):
        logs = [_workout("2026-03-16"), _workout("2026-03-02"), _workout("2026-03-04")]
        summaries = build_weekly_summaries(logs, [], CATALOG)
        assert [s.week_start for s in summaries] == ["2026-03-02", "2026-03-16"]
        assert [s.session_count for s in summaries] == [2, 1]

    def test_readiness_only_week_included(self):
        summaries = build_weekly_summaries(
            [_workout("2026-03-02")], [_readiness("2026-03-10", 4)], CATALOG
        )
        assert [s.week_start for s in summaries] == ["2026-03-02", "2026-03-09"]
        assert summaries[0].average_readiness is None
        assert summaries[1].session_count == 0
        assert summaries[1].average_readiness == 4.0

    def test_week_start_from_config(self):
        cfg = WeeklyConfig(week_start_weekday=6)
        summaries = build_weekly_summaries(
            [_workout("2026-03-01"), _workout("2026-03-02")], [], CATALOG, cfg
        )
        # Sunday 03-01 starts the week that contains Monday 03-02
        assert [s.week_start for s in summaries] == ["2026-03-01"]

    def test_recomputed_from_logs(self):
        logs = [_workout("2026-03-02")]
        first = build_weekly_summaries(logs, [], CATALOG)
        logs.append(_workout("2026-03-04"))
        second = build_weekly_summaries(logs, [], CATALOG)
        assert first[0].session_count == 1
        assert second[0].session_count == 2


class TestVolumeWarnings:

    def test_23_chest_sets_exceed_mrv(self):
        logs = [_workout("2026-03-02", n_sets=12), _workout("2026-03-05", n_sets=11)]
        summary = weekly_summary(logs, [], CATALOG, "2026-03-02")
        warnings = detect_volume_warnings(summary)
        chest = [w for w in warnings if w.muscle_group == "chest"]
        assert len(chest) == 1
        assert chest[0].sets == 23
        assert chest[0].mrv == 22

    def test_at_mrv_is_fine(self):
        summary = weekly_summary([_workout("2026-03-02", n_sets=22)], [], CATALOG, "2026-03-02")
        warnings = detect_volume_warnings(summary, {"chest": 22})
        assert warnings == []

    def test_groups_without_landmark_unchecked(self):
        summary = weekly_summary([_workout("2026-03-02", n_sets=40)], [], CATALOG, "2026-03-02")
        assert detect_volume_warnings(summary, {}) == []
