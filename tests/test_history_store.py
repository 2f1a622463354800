"""
Tests for the file-backed store and the JSON serializers it uses.
"""

import json

import pytest

from fitwizard.core.models import (
    ExerciseLog,
    PersonalRecord,
    ProgressionRecommendation,
    ReadinessEntry,
    SetLog,
    VolumeWarning,
    WeeklySummary,
    WorkoutLog,
)
from fitwizard.io.history_store import HistoryStore
from fitwizard.io.serializers import (
    ValidationError,
    dict_to_set_log,
    dict_to_workout_log,
    json_line_to_workout,
    parse_sets_string,
    personal_record_to_dict,
    recommendation_to_dict,
    weekly_summary_to_dict,
    workout_to_json_line,
)


@pytest.fixture
def store(tmp_path):
    s = HistoryStore(tmp_path / "data")
    s.init()
    return s


def _workout(wid: str, date: str, weight: float = 100, reps: int = 8) -> WorkoutLog:
    return WorkoutLog(
        id=wid,
        date=date,
        exercises=[ExerciseLog("bench_press", [SetLog(weight, reps, rir_reported=2)])],
    )


def _readiness(date: str, sleep: int = 3) -> ReadinessEntry:
    return ReadinessEntry(date, sleep, 3, 3, 3)


class TestHistoryStore:

    def test_init_creates_files(self, store):
        assert store.exists()
        assert store.workouts_path.exists()
        assert store.readiness_path.exists()
        assert store.load_workouts() == []
        assert store.load_readiness() == []

    def test_load_before_init_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            HistoryStore(tmp_path / "nowhere").load_workouts()

    def test_workouts_sorted_by_date(self, store):
        store.save_workout(_workout("b", "2026-03-04"))
        store.save_workout(_workout("a", "2026-03-02"))
        assert [w.id for w in store.load_workouts()] == ["a", "b"]

    def test_round_trip_preserves_workout(self, store):
        original = WorkoutLog(
            id="w1",
            date="2026-03-02",
            plan_id="plan-7",
            weight_unit="lbs",
            notes="felt strong",
            exercises=[
                ExerciseLog("bench_press", [SetLog(225, 5, rir_reported=1), SetLog(225, 3, completed=False)]),
                ExerciseLog("back_squat", skipped=True, skip_reason="knee"),
            ],
        )
        store.save_workout(original)
        assert store.load_workouts() == [original]

    def test_correction_replaces_whole_workout(self, store):
        store.save_workout(_workout("w1", "2026-03-02", weight=100))
        replaced = store.save_workout(_workout("w1", "2026-03-03", weight=110))
        workouts = store.load_workouts()
        assert replaced
        assert len(workouts) == 1
        assert workouts[0].date == "2026-03-03"
        assert workouts[0].exercises[0].sets[0].weight == 110

    def test_delete_workout(self, store):
        store.save_workout(_workout("w1", "2026-03-02"))
        store.save_workout(_workout("w2", "2026-03-04"))
        store.delete_workout("w1")
        assert [w.id for w in store.load_workouts()] == ["w2"]

    def test_delete_unknown_raises(self, store):
        with pytest.raises(KeyError):
            store.delete_workout("missing")

    def test_next_workout_id(self, store):
        assert store.next_workout_id("2026-03-02") == "2026-03-02"
        store.save_workout(_workout("2026-03-02", "2026-03-02"))
        assert store.next_workout_id("2026-03-02") == "2026-03-02-2"

    def test_malformed_line_names_line(self, store):
        store.save_workout(_workout("w1", "2026-03-02"))
        with open(store.workouts_path, "a") as f:
            f.write('{"id": "w2", "date": "2026-03-04", "exercises": [{"exercise_id": "x", "sets": [{"weight": -5, "reps": 3}]}]}\n')
        with pytest.raises(ValidationError, match="line 2"):
            store.load_workouts()

    def test_readiness_upsert_one_entry_per_date(self, store):
        store.log_readiness(_readiness("2026-03-02", sleep=1))
        store.log_readiness(_readiness("2026-03-03"))
        store.log_readiness(_readiness("2026-03-02", sleep=5))
        entries = store.load_readiness()
        assert [e.date for e in entries] == ["2026-03-02", "2026-03-03"]
        assert entries[0].sleep_quality == 5

    def test_readiness_score_recomputed_on_load(self, store):
        store.log_readiness(_readiness("2026-03-02"))
        data = json.loads(store.readiness_path.read_text())
        data[0]["overall_score"] = 99
        store.readiness_path.write_text(json.dumps(data))
        assert store.load_readiness()[0].overall_score == 3.0

    def test_readiness_out_of_range_rejected(self, store):
        store.readiness_path.write_text(json.dumps([{
            "date": "2026-03-02", "sleep_quality": 9, "muscle_soreness": 3,
            "energy_level": 3, "stress_level": 3,
        }]))
        with pytest.raises(ValidationError, match="entry 0"):
            store.load_readiness()


class TestSerializers:

    def test_json_line_is_single_line(self):
        line = workout_to_json_line(_workout("w1", "2026-03-02"))
        assert "\n" not in line
        assert json_line_to_workout(line).id == "w1"

    def test_invalid_json(self):
        with pytest.raises(ValidationError, match="Invalid JSON"):
            json_line_to_workout("{not json")

    def test_missing_field(self):
        with pytest.raises(ValidationError, match="date"):
            dict_to_workout_log({"id": "w1"})

    def test_bad_date(self):
        with pytest.raises(ValidationError):
            dict_to_workout_log({"id": "w1", "date": "2026-13-40"})

    def test_bad_unit(self):
        with pytest.raises(ValidationError, match="weight_unit"):
            dict_to_workout_log({"id": "w1", "date": "2026-03-02", "weight_unit": "stone"})

    @pytest.mark.parametrize("field, value", [
        ("reps", 8.9),
        ("reps", True),
        ("rir", 1.7),
        ("rir", "2"),
    ])
    def test_fractional_or_non_integer_counts_rejected(self, field, value):
        data = {"weight": 100, "reps": 8, "rir": 1}
        data[field] = value
        with pytest.raises(ValidationError, match=field):
            dict_to_set_log(data)

    def test_integer_set_accepted(self):
        assert dict_to_set_log({"weight": 100, "reps": 8, "rir": 1}) == SetLog(100.0, 8, True, 1)

    def test_recommendation_contract(self):
        rec = ProgressionRecommendation(
            exercise_id="bench_press",
            action="maintain",
            magnitude=0.0,
            confidence="medium",
            rationale="stagnation",
            adjustments=("low_readiness",),
            current_load=100.0,
            recommended_load=100.0,
            sessions_considered=3,
        )
        d = recommendation_to_dict(rec)
        assert d["action"] == "maintain"
        assert d["rationale"] == "stagnation"
        assert d["adjustments"] == ["low_readiness"]
        assert json.loads(json.dumps(d)) == d

    def test_personal_record_baseline_is_null(self):
        rec = PersonalRecord("bench_press", "max_weight", 60.0, "2026-03-02", None, "w1", 60.0)
        assert personal_record_to_dict(rec)["previous_value"] is None

    def test_weekly_summary_readiness_null(self):
        summary = WeeklySummary("2026-03-02", {"chest": 800.0}, 1, None, 800.0, {"chest": 23})
        d = weekly_summary_to_dict(summary, [VolumeWarning("chest", 23, 22)])
        assert d["average_readiness"] is None
        assert d["volume_warnings"] == [{"muscle_group": "chest", "sets": 23, "mrv": 22}]


class TestParseSets:

    def test_basic(self):
        sets = parse_sets_string("100x8@2, 100x7@1")
        assert sets == [SetLog(100.0, 8, True, 2), SetLog(100.0, 7, True, 1)]

    def test_unrated_and_decimal_weight(self):
        assert parse_sets_string("62.5x10") == [SetLog(62.5, 10)]

    def test_missed_set(self):
        [s] = parse_sets_string("100x5@0!")
        assert not s.completed
        assert s.rir_reported == 0

    def test_repeat_prefix(self):
        sets = parse_sets_string("3x140x5@2")
        assert len(sets) == 3
        assert all(s == SetLog(140.0, 5, True, 2) for s in sets)

    @pytest.mark.parametrize("bad", ["", "  ", "abc", "100x", "x8", "100x8@"])
    def test_invalid(self, bad):
        with pytest.raises(ValidationError):
            parse_sets_string(bad)
