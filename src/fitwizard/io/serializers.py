"""
JSON serialization for fitwizard data models.

Handles conversion between dataclasses and JSON-compatible dicts, plus the
compact set syntax used by the CLI.
"""

import json
import re
from typing import Any

from ..core.models import (
    ExerciseLog,
    ExercisePrescription,
    PersonalRecord,
    ProgressionRecommendation,
    ReadinessEntry,
    SetLog,
    VolumeWarning,
    WeeklySummary,
    WorkoutLog,
    validate_iso_date,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate an ISO date string.

    Raises:
        ValidationError: If date format is invalid
    """
    try:
        validate_iso_date(date_str)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    return date_str


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative or not a number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_non_negative_int(value: Any, name: str) -> int:
    """
    Validate that a value is a non-negative integer.

    Raises:
        ValidationError: If value is negative, fractional or not an integer
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def _require(data: dict[str, Any], key: str, what: str) -> Any:
    if key not in data:
        raise ValidationError(f"{what} is missing required field '{key}'")
    return data[key]


# ---------------------------------------------------------------------------
# Workout logs
# ---------------------------------------------------------------------------


def set_log_to_dict(set_log: SetLog) -> dict[str, Any]:
    """Convert SetLog to a JSON-compatible dict (rir omitted when unrated)."""
    d: dict[str, Any] = {
        "weight": set_log.weight,
        "reps": set_log.reps,
        "completed": set_log.completed,
    }
    if set_log.rir_reported is not None:
        d["rir"] = set_log.rir_reported
    return d


def dict_to_set_log(data: dict[str, Any]) -> SetLog:
    """
    Convert dict to SetLog.

    Raises:
        ValidationError: If a field is missing, negative or of the wrong type
    """
    weight = validate_non_negative(_require(data, "weight", "set"), "weight")
    reps = validate_non_negative_int(_require(data, "reps", "set"), "reps")
    rir = data.get("rir")
    if rir is not None:
        rir = validate_non_negative_int(rir, "rir")
    return SetLog(
        weight=float(weight),
        reps=reps,
        completed=bool(data.get("completed", True)),
        rir_reported=rir,
    )


def exercise_log_to_dict(exercise_log: ExerciseLog) -> dict[str, Any]:
    """Convert ExerciseLog to a JSON-compatible dict."""
    d: dict[str, Any] = {
        "exercise_id": exercise_log.exercise_id,
        "sets": [set_log_to_dict(s) for s in exercise_log.sets],
    }
    if exercise_log.skipped:
        d["skipped"] = True
        if exercise_log.skip_reason:
            d["skip_reason"] = exercise_log.skip_reason
    return d


def dict_to_exercise_log(data: dict[str, Any]) -> ExerciseLog:
    """Convert dict to ExerciseLog."""
    exercise_id = _require(data, "exercise_id", "exercise")
    if not isinstance(exercise_id, str) or not exercise_id.strip():
        raise ValidationError(f"Invalid exercise_id: {exercise_id!r}")
    return ExerciseLog(
        exercise_id=exercise_id,
        sets=[dict_to_set_log(s) for s in data.get("sets", [])],
        skipped=bool(data.get("skipped", False)),
        skip_reason=data.get("skip_reason"),
    )


def workout_log_to_dict(log: WorkoutLog) -> dict[str, Any]:
    """Convert WorkoutLog to a JSON-compatible dict."""
    return {
        "id": log.id,
        "date": log.date,
        "plan_id": log.plan_id,
        "weight_unit": log.weight_unit,
        "exercises": [exercise_log_to_dict(ex) for ex in log.exercises],
        "notes": log.notes,
    }


def dict_to_workout_log(data: dict[str, Any]) -> WorkoutLog:
    """
    Convert dict to WorkoutLog.

    Raises:
        ValidationError: If data is invalid
    """
    log_id = _require(data, "id", "workout")
    validate_date(_require(data, "date", "workout"))
    unit = data.get("weight_unit", "kg")
    if unit not in ("kg", "lbs"):
        raise ValidationError(f"Invalid weight_unit: {unit!r}. Must be 'kg' or 'lbs'")
    try:
        return WorkoutLog(
            id=str(log_id),
            date=data["date"],
            plan_id=data.get("plan_id"),
            exercises=[dict_to_exercise_log(ex) for ex in data.get("exercises", [])],
            weight_unit=unit,
            notes=data.get("notes"),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def workout_to_json_line(log: WorkoutLog) -> str:
    """Serialize a workout to a single JSON line (no trailing newline)."""
    return json.dumps(workout_log_to_dict(log), separators=(",", ":"))


def json_line_to_workout(line: str) -> WorkoutLog:
    """
    Deserialize a JSON line to a WorkoutLog.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(line.strip())
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Workout record must be a JSON object")
    return dict_to_workout_log(data)


# ---------------------------------------------------------------------------
# Readiness and prescriptions
# ---------------------------------------------------------------------------


def readiness_to_dict(entry: ReadinessEntry) -> dict[str, Any]:
    """Convert ReadinessEntry to dict; overall_score is informational only."""
    return {
        "date": entry.date,
        "sleep_quality": entry.sleep_quality,
        "muscle_soreness": entry.muscle_soreness,
        "energy_level": entry.energy_level,
        "stress_level": entry.stress_level,
        "overall_score": entry.overall_score,
    }


def dict_to_readiness(data: dict[str, Any]) -> ReadinessEntry:
    """
    Convert dict to ReadinessEntry (the score is always recomputed).

    Raises:
        ValidationError: If a rating is missing or outside 1-5
    """
    try:
        return ReadinessEntry(
            date=_require(data, "date", "readiness entry"),
            sleep_quality=_require(data, "sleep_quality", "readiness entry"),
            muscle_soreness=_require(data, "muscle_soreness", "readiness entry"),
            energy_level=_require(data, "energy_level", "readiness entry"),
            stress_level=_require(data, "stress_level", "readiness entry"),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def prescription_to_dict(p: ExercisePrescription) -> dict[str, Any]:
    """Convert ExercisePrescription to dict."""
    return {
        "exercise_id": p.exercise_id,
        "sets": p.sets,
        "rep_min": p.rep_min,
        "rep_max": p.rep_max,
        "target_rir": p.target_rir,
        "load": p.load,
        "phase": p.phase,
        "effective_date": p.effective_date,
    }


def dict_to_prescription(data: dict[str, Any]) -> ExercisePrescription:
    """Convert dict to ExercisePrescription."""
    try:
        return ExercisePrescription(
            exercise_id=_require(data, "exercise_id", "prescription"),
            sets=validate_non_negative_int(_require(data, "sets", "prescription"), "sets"),
            rep_min=validate_non_negative_int(_require(data, "rep_min", "prescription"), "rep_min"),
            rep_max=validate_non_negative_int(_require(data, "rep_max", "prescription"), "rep_max"),
            target_rir=validate_non_negative_int(data.get("target_rir", 2), "target_rir"),
            load=float(data["load"]) if data.get("load") is not None else None,
            phase=data.get("phase"),
            effective_date=data.get("effective_date"),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


# ---------------------------------------------------------------------------
# Engine output (one-way: consumers read these, nothing parses them back)
# ---------------------------------------------------------------------------


def recommendation_to_dict(rec: ProgressionRecommendation) -> dict[str, Any]:
    """Stable JSON contract for a progression recommendation."""
    return {
        "exercise_id": rec.exercise_id,
        "action": rec.action,
        "magnitude": round(rec.magnitude, 4),
        "magnitude_unit": rec.magnitude_unit,
        "confidence": rec.confidence,
        "rationale": rec.rationale,
        "adjustments": list(rec.adjustments),
        "current_load": rec.current_load,
        "recommended_load": rec.recommended_load,
        "sessions_considered": rec.sessions_considered,
    }


def personal_record_to_dict(record: PersonalRecord) -> dict[str, Any]:
    """Stable JSON contract for a personal record."""
    return {
        "exercise_id": record.exercise_id,
        "metric": record.metric,
        "value": round(record.value, 2),
        "weight": record.weight,
        "achieved_date": record.achieved_date,
        "previous_value": (
            round(record.previous_value, 2) if record.previous_value is not None else None
        ),
        "workout_id": record.workout_id,
    }


def weekly_summary_to_dict(
    summary: WeeklySummary,
    warnings: list[VolumeWarning] | None = None,
) -> dict[str, Any]:
    """Stable JSON contract for a weekly summary (average_readiness may be null)."""
    d: dict[str, Any] = {
        "week_start": summary.week_start,
        "session_count": summary.session_count,
        "total_volume": summary.total_volume,
        "muscle_group_volume": dict(sorted(summary.muscle_group_volume.items())),
        "muscle_group_sets": dict(sorted(summary.muscle_group_sets.items())),
        "average_readiness": summary.average_readiness,
    }
    if warnings is not None:
        d["volume_warnings"] = [
            {"muscle_group": w.muscle_group, "sets": w.sets, "mrv": w.mrv} for w in warnings
        ]
    return d


# ---------------------------------------------------------------------------
# Compact CLI set syntax
# ---------------------------------------------------------------------------

_SET_RE = re.compile(
    r"^(?P<weight>\d+(?:\.\d+)?)\s*[xX×]\s*(?P<reps>\d+)"
    r"(?:\s*@\s*(?P<rir>\d+))?"
    r"(?P<missed>\s*!)?$"
)


def parse_sets_string(sets_str: str) -> list[SetLog]:
    """
    Parse a comma-separated sets string.

    Each set is ``WEIGHTxREPS[@RIR][!]``:
        100x8        completed, unrated
        100x8@2      completed, 2 reps in reserve
        100x5@0!     attempted but not completed (missed)

    ``NxWEIGHTxREPS`` repeats a set, e.g. ``3x100x8@2``.

    Raises:
        ValidationError: If format is invalid
    """
    if not sets_str or not sets_str.strip():
        raise ValidationError("Sets string cannot be empty")

    sets: list[SetLog] = []
    for part in (p.strip() for p in sets_str.split(",")):
        if not part:
            continue
        repeat = 1
        m_repeat = re.match(r"^(\d+)\s*[xX×]\s*(?=\d+(?:\.\d+)?\s*[xX×])", part)
        if m_repeat:
            repeat = int(m_repeat.group(1))
            part = part[m_repeat.end():]
        m = _SET_RE.match(part)
        if m is None or repeat < 1:
            raise ValidationError(
                f"Invalid set format: '{part}'.\n"
                "Use: WEIGHTxREPS[@RIR][!] (e.g. 100x8@2, 60x10, 100x5@0! for a missed set)"
            )
        set_log = SetLog(
            weight=float(m.group("weight")),
            reps=int(m.group("reps")),
            completed=m.group("missed") is None,
            rir_reported=int(m.group("rir")) if m.group("rir") is not None else None,
        )
        sets.extend([set_log] * repeat)

    if not sets:
        raise ValidationError("No valid sets found in sets string")
    return sets
