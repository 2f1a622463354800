"""
JSONL-based storage for workout logs and readiness check-ins.

Handles reading, writing, and managing the files under the data directory.
"""

import json
import logging
from pathlib import Path

from ..core.models import ReadinessEntry, WorkoutLog
from ..core.readiness import upsert_readiness
from .serializers import (
    ValidationError,
    dict_to_readiness,
    json_line_to_workout,
    readiness_to_dict,
    workout_to_json_line,
)

logger = logging.getLogger(__name__)


class HistoryStore:
    """
    Manages training data stored under a single directory.

    - ``workouts.jsonl``: one WorkoutLog per line, kept in date order
    - ``readiness.json``: list of readiness check-ins, one per date
    """

    def __init__(self, root: str | Path):
        """
        Initialize the store.

        Args:
            root: Data directory
        """
        self.root = Path(root)
        self.workouts_path = self.root / "workouts.jsonl"
        self.readiness_path = self.root / "readiness.json"

    def exists(self) -> bool:
        """Check if the workouts file exists."""
        return self.workouts_path.exists()

    def init(self) -> None:
        """
        Create the data directory and empty files if they don't exist.
        """
        self.root.mkdir(parents=True, exist_ok=True)

        if not self.workouts_path.exists():
            self.workouts_path.touch()
        if not self.readiness_path.exists():
            self.readiness_path.write_text("[]\n")

    def _require_init(self) -> None:
        if not self.workouts_path.exists():
            raise FileNotFoundError(
                f"History file not found: {self.workouts_path}. Run 'init' first."
            )

    # -- workouts -----------------------------------------------------------

    def load_workouts(self) -> list[WorkoutLog]:
        """
        Load all workouts.

        Returns:
            List of WorkoutLog, sorted by date

        Raises:
            FileNotFoundError: If the workouts file doesn't exist
            ValidationError: If a line cannot be parsed
        """
        self._require_init()

        workouts: list[WorkoutLog] = []
        with open(self.workouts_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                if not line.strip():
                    continue
                try:
                    workouts.append(json_line_to_workout(line))
                except ValidationError as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.workouts_path}: {e}"
                    ) from e

        workouts.sort(key=lambda w: w.date)
        return workouts

    def get_workout(self, workout_id: str) -> WorkoutLog | None:
        """Workout with the given id, or None."""
        for workout in self.load_workouts():
            if workout.id == workout_id:
                return workout
        return None

    def save_workout(self, workout: WorkoutLog) -> bool:
        """
        Store a workout.

        A workout whose id is already stored replaces the old record entirely
        (corrections never merge with the previous version).

        Args:
            workout: Workout to store

        Returns:
            True if an existing workout was replaced
        """
        workouts = self.load_workouts()

        replaced = False
        for i, existing in enumerate(workouts):
            if existing.id == workout.id:
                workouts[i] = workout
                replaced = True
                break
        if not replaced:
            workouts.append(workout)

        workouts.sort(key=lambda w: w.date)
        self._write_workouts(workouts)
        logger.debug("%s workout %s (%s)", "Replaced" if replaced else "Stored", workout.id, workout.date)
        return replaced

    def delete_workout(self, workout_id: str) -> None:
        """
        Delete a workout by id.

        Raises:
            KeyError: If no workout has that id
        """
        workouts = self.load_workouts()
        remaining = [w for w in workouts if w.id != workout_id]
        if len(remaining) == len(workouts):
            raise KeyError(f"Workout not found: {workout_id}")
        self._write_workouts(remaining)

    def next_workout_id(self, date: str) -> str:
        """First free id of the form ``<date>`` / ``<date>-2`` / ``<date>-3`` ..."""
        taken = {w.id for w in self.load_workouts()}
        candidate, n = date, 1
        while candidate in taken:
            n += 1
            candidate = f"{date}-{n}"
        return candidate

    def _write_workouts(self, workouts: list[WorkoutLog]) -> None:
        with open(self.workouts_path, "w", encoding="utf-8") as f:
            for workout in workouts:
                f.write(workout_to_json_line(workout) + "\n")

    # -- readiness ----------------------------------------------------------

    def load_readiness(self) -> list[ReadinessEntry]:
        """
        Load readiness check-ins.

        Returns:
            Entries sorted by date; empty if the file doesn't exist yet

        Raises:
            ValidationError: If the file or an entry is malformed
        """
        if not self.readiness_path.exists():
            return []

        try:
            with open(self.readiness_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {self.readiness_path}: {e}") from e
        if not isinstance(data, list):
            raise ValidationError(f"{self.readiness_path} must contain a JSON list")

        entries: list[ReadinessEntry] = []
        for idx, item in enumerate(data):
            try:
                entries.append(dict_to_readiness(item))
            except ValidationError as e:
                raise ValidationError(
                    f"Error parsing entry {idx} in {self.readiness_path}: {e}"
                ) from e
        entries.sort(key=lambda e: e.date)
        return entries

    def log_readiness(self, entry: ReadinessEntry) -> None:
        """
        Store a check-in, replacing any earlier check-in for the same date.
        """
        self.root.mkdir(parents=True, exist_ok=True)
        entries = upsert_readiness(self.load_readiness(), entry)
        with open(self.readiness_path, "w", encoding="utf-8") as f:
            json.dump([readiness_to_dict(e) for e in entries], f, indent=2)


def get_default_root() -> Path:
    """Default data directory (~/.fitwizard)."""
    return Path.home() / ".fitwizard"


def get_default_store() -> HistoryStore:
    """HistoryStore at the default location."""
    return HistoryStore(get_default_root())
