"""
Formula-focused unit tests for the analytics engine.

Values are hand-computed from the formulas so the tests double as a
reference for the scoring, volume and estimation rules.
"""

import itertools

import pytest

from fitwizard.core.config import EPLEY_DIVISOR, READINESS_INVERT_BASE
from fitwizard.core.exercises.base import ExerciseMetadata
from fitwizard.core.metrics import (
    average_rir,
    calculate_volume,
    epley_1rm,
    exercise_history,
    muscle_group_sets,
    muscle_group_volume,
    rir_spread,
    top_set,
)
from fitwizard.core.models import ExerciseLog, ReadinessEntry, SetLog, WorkoutLog
from fitwizard.core.phases import (
    determine_opt_phase,
    parse_rep_range,
    prescription_for_phase,
)
from fitwizard.core.readiness import (
    average_readiness,
    readiness_score,
    readiness_trend,
    upsert_readiness,
)
from fitwizard.core.units import convert_weight, round_to_increment

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

CATALOG = {
    "bench_press": ExerciseMetadata(
        exercise_id="bench_press",
        display_name="Bench Press",
        muscle_groups=("chest", "triceps"),
        movement_pattern="horizontal_push",
    ),
    "back_squat": ExerciseMetadata(
        exercise_id="back_squat",
        display_name="Back Squat",
        muscle_groups=("quads", "glutes"),
        movement_pattern="squat",
    ),
}


def _set(weight: float, reps: int, completed: bool = True, rir: int | None = None) -> SetLog:
    return SetLog(weight=weight, reps=reps, completed=completed, rir_reported=rir)


def _workout(date: str, *exercises: ExerciseLog, wid: str | None = None) -> WorkoutLog:
    return WorkoutLog(id=wid or date, date=date, exercises=list(exercises))


def _readiness(date: str, sleep=3, soreness=3, energy=3, stress=3) -> ReadinessEntry:
    return ReadinessEntry(
        date=date,
        sleep_quality=sleep,
        muscle_soreness=soreness,
        energy_level=energy,
        stress_level=stress,
    )


# ---------------------------------------------------------------------------
# Readiness score
# ---------------------------------------------------------------------------


class TestReadinessScore:
    """overall = mean(sleep, energy, 6 - soreness, 6 - stress), 2 dp."""

    def test_best_case_is_five(self):
        assert readiness_score(5, 1, 5, 1) == 5.0

    def test_worst_case_is_one(self):
        assert readiness_score(1, 5, 1, 5) == 1.0

    def test_mixed_inputs(self):
        # (4 + 3 + (6-2) + (6-5)) / 4 = 12 / 4 = 3.0
        assert readiness_score(4, 2, 3, 5) == 3.0

    def test_rounds_to_two_decimals(self):
        # (4 + 4 + 3 + 2) / 4 = 3.25 ; (5 + 4 + 4 + 4) / 4 = 4.25
        assert readiness_score(4, 3, 4, 4) == 3.25
        assert readiness_score(5, 2, 4, 2) == 4.25

    def test_always_within_one_and_five(self):
        for ratings in itertools.product(range(1, 6), repeat=4):
            score = readiness_score(*ratings)
            assert 1.0 <= score <= 5.0

    def test_invert_base(self):
        assert READINESS_INVERT_BASE == 6

    def test_entry_derives_score(self):
        entry = _readiness("2026-03-02", sleep=4, soreness=2, energy=3, stress=5)
        assert entry.overall_score == 3.0

    @pytest.mark.parametrize("bad", [0, 6, -1])
    def test_entry_rejects_out_of_range(self, bad):
        with pytest.raises(ValueError):
            _readiness("2026-03-02", sleep=bad)

    def test_entry_rejects_bool_rating(self):
        with pytest.raises(ValueError):
            _readiness("2026-03-02", energy=True)

    def test_entry_rejects_bad_date(self):
        with pytest.raises(ValueError):
            _readiness("02/03/2026")


class TestReadinessLog:

    def test_upsert_replaces_same_date(self):
        entries = [_readiness("2026-03-02", sleep=1)]
        result = upsert_readiness(entries, _readiness("2026-03-02", sleep=5))
        assert len(result) == 1
        assert result[0].sleep_quality == 5

    def test_upsert_keeps_dates_sorted(self):
        entries = [_readiness("2026-03-04")]
        result = upsert_readiness(entries, _readiness("2026-03-02"))
        assert [e.date for e in result] == ["2026-03-02", "2026-03-04"]

    def test_upsert_does_not_mutate_input(self):
        entries = [_readiness("2026-03-02")]
        upsert_readiness(entries, _readiness("2026-03-03"))
        assert len(entries) == 1

    def test_average_none_without_entries(self):
        assert average_readiness([], "2026-03-02", "2026-03-08") is None

    def test_average_only_counts_range(self):
        entries = [
            _readiness("2026-03-01", sleep=1, soreness=5, energy=1, stress=5),  # 1.0, outside
            _readiness("2026-03-02", sleep=5, soreness=1, energy=5, stress=1),  # 5.0
            _readiness("2026-03-03"),  # 3.0
        ]
        assert average_readiness(entries, "2026-03-02", "2026-03-08") == 4.0

    def test_trend_window_is_inclusive(self):
        entries = [
            _readiness("2026-03-01", sleep=5, soreness=1, energy=5, stress=1),  # 5.0
            _readiness("2026-03-07"),  # 3.0
        ]
        # 7-day window ending 03-07 starts 03-01
        assert readiness_trend(entries, "2026-03-07", 7) == 4.0
        # 6-day window starts 03-02
        assert readiness_trend(entries, "2026-03-07", 6) == 3.0


# ---------------------------------------------------------------------------
# Volume
# ---------------------------------------------------------------------------


class TestVolume:
    """volume = sum(weight * reps) over completed sets of non-skipped exercises."""

    def test_sums_completed_sets(self):
        log = _workout("2026-03-02", ExerciseLog("bench_press", [_set(100, 8), _set(100, 6)]))
        assert calculate_volume(log) == 1400.0

    def test_empty_log_is_zero(self):
        assert calculate_volume(_workout("2026-03-02")) == 0.0

    def test_all_sets_uncompleted_is_zero(self):
        log = _workout(
            "2026-03-02",
            ExerciseLog("bench_press", [_set(100, 8, completed=False), _set(90, 5, completed=False)]),
        )
        assert calculate_volume(log) == 0.0

    def test_skipped_exercise_contributes_nothing(self):
        log = _workout(
            "2026-03-02",
            ExerciseLog("bench_press", [_set(100, 8)], skipped=True),
            ExerciseLog("back_squat", [_set(140, 5)]),
        )
        assert calculate_volume(log) == 700.0

    def test_skipped_ignores_completed_flags(self):
        log = _workout(
            "2026-03-02",
            ExerciseLog("bench_press", [_set(100, 8), _set(100, 8, completed=False)], skipped=True),
        )
        assert calculate_volume(log) == 0.0

    def test_uncompleted_set_excluded_among_completed(self):
        log = _workout(
            "2026-03-02",
            ExerciseLog("bench_press", [_set(100, 8), _set(100, 5, completed=False)]),
        )
        assert calculate_volume(log) == 800.0

    def test_muscle_groups_get_full_exercise_volume(self):
        log = _workout(
            "2026-03-02",
            ExerciseLog("bench_press", [_set(100, 8)]),
            ExerciseLog("back_squat", [_set(100, 5), _set(100, 5)]),
        )
        assert muscle_group_volume(log, CATALOG) == {
            "chest": 800.0,
            "triceps": 800.0,
            "quads": 1000.0,
            "glutes": 1000.0,
        }

    def test_unknown_exercise_excluded_from_groups_only(self):
        log = _workout(
            "2026-03-02",
            ExerciseLog("bench_press", [_set(100, 8)]),
            ExerciseLog("mystery_machine", [_set(50, 10)]),
        )
        assert muscle_group_volume(log, CATALOG) == {"chest": 800.0, "triceps": 800.0}
        assert calculate_volume(log) == 1300.0

    def test_muscle_group_sets_count_completed_only(self):
        log = _workout(
            "2026-03-02",
            ExerciseLog("bench_press", [_set(100, 8), _set(100, 8), _set(100, 4, completed=False)]),
        )
        assert muscle_group_sets(log, CATALOG) == {"chest": 2, "triceps": 2}


# ---------------------------------------------------------------------------
# Set-level metrics
# ---------------------------------------------------------------------------


class TestSetMetrics:

    def test_epley_formula(self):
        # 100 * (1 + 10/30) = 133.33
        assert epley_1rm(100, 10) == pytest.approx(100 * (1 + 10 / EPLEY_DIVISOR))
        assert epley_1rm(100, 10) == pytest.approx(133.333, abs=1e-3)

    def test_epley_single_rep_is_weight(self):
        assert epley_1rm(140, 1) == 140

    def test_epley_zero_reps_is_zero(self):
        assert epley_1rm(140, 0) == 0.0

    def test_epley_monotonic(self):
        assert epley_1rm(100, 9) > epley_1rm(100, 8)
        assert epley_1rm(102.5, 8) > epley_1rm(100, 8)

    def test_average_rir_ignores_unrated(self):
        sets = [_set(100, 8, rir=2), _set(100, 8), _set(100, 8, rir=4)]
        assert average_rir(sets) == 3.0

    def test_average_rir_none_without_ratings(self):
        assert average_rir([_set(100, 8)]) is None

    def test_rir_spread_population_std(self):
        # values 1, 3 -> mean 2, variance 1
        assert rir_spread([1, 3]) == pytest.approx(1.0)
        assert rir_spread([]) == 0.0

    def test_top_set_reps_at_heaviest(self):
        sets = [_set(100, 8), _set(105, 5), _set(105, 6), _set(95, 10)]
        assert top_set(sets) == (105, 6)

    def test_top_set_empty(self):
        assert top_set([]) is None

    def test_exercise_history_oldest_first_skips_skipped(self):
        history = [
            _workout("2026-03-06", ExerciseLog("bench_press", [_set(100, 8)])),
            _workout("2026-03-02", ExerciseLog("bench_press", [_set(95, 8)])),
            _workout("2026-03-04", ExerciseLog("bench_press", [_set(97.5, 8)], skipped=True)),
        ]
        dates = [w.date for w, _ in exercise_history(history, "bench_press")]
        assert dates == ["2026-03-02", "2026-03-06"]

    def test_exercise_history_merges_duplicate_entries(self):
        history = [
            _workout(
                "2026-03-02",
                ExerciseLog("bench_press", [_set(100, 8)]),
                ExerciseLog("bench_press", [_set(80, 12)]),
            )
        ]
        [(_, merged)] = exercise_history(history, "bench_press")
        assert len(merged.sets) == 2


class TestModelValidation:

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError):
            SetLog(weight=-1, reps=5)

    def test_negative_reps_rejected(self):
        with pytest.raises(ValueError):
            SetLog(weight=100, reps=-1)

    def test_negative_rir_rejected(self):
        with pytest.raises(ValueError):
            SetLog(weight=100, reps=5, rir_reported=-1)

    def test_fractional_reps_rejected(self):
        with pytest.raises(ValueError, match="reps must be an integer"):
            SetLog(weight=100, reps=8.9)  # type: ignore[arg-type]

    def test_fractional_rir_rejected(self):
        with pytest.raises(ValueError, match="rir_reported must be an integer"):
            SetLog(weight=100, reps=8, rir_reported=1.7)  # type: ignore[arg-type]

    def test_workout_requires_id(self):
        with pytest.raises(ValueError):
            WorkoutLog(id="", date="2026-03-02")


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------


class TestUnits:

    def test_lbs_to_kg(self):
        assert convert_weight(100, "lbs", "kg") == pytest.approx(45.3592)

    def test_kg_to_lbs(self):
        assert convert_weight(100, "kg", "lbs") == pytest.approx(220.462)

    def test_same_unit_identity(self):
        assert convert_weight(80, "kg", "kg") == 80

    def test_round_kg_to_whole(self):
        assert round_to_increment(102.4, "kg") == 102.0
        assert round_to_increment(102.6, "kg") == 103.0

    def test_half_rounds_up(self):
        assert round_to_increment(20.5, "kg") == 21.0
        assert round_to_increment(21.5, "kg") == 22.0
        assert round_to_increment(223.75, "lbs") == 225.0

    def test_round_lbs_to_two_and_a_half(self):
        assert round_to_increment(226.0, "lbs") == 225.0
        assert round_to_increment(228.0, "lbs") == 227.5

    def test_unknown_unit_rejected(self):
        with pytest.raises(ValueError):
            round_to_increment(100, "stone")  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# OPT phases
# ---------------------------------------------------------------------------


class TestPhases:

    def test_beginner_always_stabilization(self):
        assert determine_opt_phase("strength", "beginner") == "stabilization_endurance"

    def test_advanced_strength_is_maximal(self):
        assert determine_opt_phase("strength", "advanced") == "maximal_strength"

    def test_unknown_falls_back(self):
        assert determine_opt_phase("zumba", "elite") == "stabilization_endurance"

    def test_parse_rep_range(self):
        assert parse_rep_range("8-12") == (8, 12)
        assert parse_rep_range("5") == (5, 5)
        assert parse_rep_range("1 – 5") == (1, 5)

    @pytest.mark.parametrize("bad", ["", "x", "12-8"])
    def test_parse_rep_range_invalid(self, bad):
        with pytest.raises(ValueError):
            parse_rep_range(bad)

    def test_prescription_for_phase(self):
        p = prescription_for_phase("bench_press", "maximal_strength", load=120.0)
        assert p.exercise_id == "bench_press"
        assert p.phase == "maximal_strength"
        assert p.target_rir == 1
        assert p.load == 120.0
        assert p.rep_min <= p.rep_max

    def test_prescription_unknown_phase(self):
        with pytest.raises(ValueError):
            prescription_for_phase("bench_press", "bulking")
