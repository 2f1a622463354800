"""
YAML → ExerciseMetadata loader.

Loads exercise metadata from individual YAML files in the bundled
``src/fitwizard/exercises/`` directory.  Each file (e.g. bench_press.yaml)
holds one flat record matching the ExerciseMetadata schema.

User overrides: place matching files in ``~/.fitwizard/exercises/``.
A user file is deep-merged over the bundled record, so only changed keys
need to be listed.  A user file with no bundled counterpart adds a new
exercise to the catalog.

Usage (internal, called by registry.py):
    from .loader import load_exercises_from_yaml
    exercises = load_exercises_from_yaml()   # dict or None on failure
"""

from __future__ import annotations

import logging
import os
import warnings
from pathlib import Path

import yaml

from .base import ExerciseMetadata

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS: frozenset[str] = frozenset(
    {
        "exercise_id",
        "display_name",
        "muscle_groups",
        "movement_pattern",
    }
)


def exercise_from_dict(d: dict) -> ExerciseMetadata:
    """Convert a raw dict (from YAML) to ExerciseMetadata.

    Raises ValueError if any required field is absent or muscle_groups is empty.
    """
    missing = _REQUIRED_FIELDS - set(d)
    if missing:
        raise ValueError(f"ExerciseMetadata missing fields: {sorted(missing)}")

    muscle_groups = tuple(str(m) for m in d["muscle_groups"] or ())
    if not muscle_groups:
        raise ValueError("muscle_groups must list at least one muscle group")

    return ExerciseMetadata(
        exercise_id=str(d["exercise_id"]),
        display_name=str(d["display_name"]),
        muscle_groups=muscle_groups,
        movement_pattern=str(d["movement_pattern"]),
        secondary_muscles=tuple(str(m) for m in d.get("secondary_muscles") or ()),
        equipment=tuple(str(e) for e in d.get("equipment") or ()),
    )


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; warn and return {} if it cannot be read or parsed."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"fitwizard: ignoring unreadable {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _get_bundled_exercises_dir() -> Path | None:
    """Return path to the bundled exercises/ data directory, or None if not found."""
    # loader.py lives at src/fitwizard/core/exercises/loader.py
    # three levels up → src/fitwizard/
    candidate = Path(__file__).parent.parent.parent / "exercises"
    return candidate if candidate.is_dir() else None


def _get_user_exercises_dir() -> Path | None:
    """Return ~/.fitwizard/exercises/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".fitwizard" / "exercises"
    return p if p.is_dir() else None


def load_exercises_from_dirs(
    bundled_dir: Path | None,
    user_dir: Path | None = None,
) -> dict[str, ExerciseMetadata]:
    """Load ``<exercise_id>.yaml`` records from a bundled and a user directory.

    Invalid records are skipped with a warning rather than aborting the load.
    """
    result: dict[str, ExerciseMetadata] = {}

    stems: dict[str, Path] = {}
    if bundled_dir is not None:
        for p in sorted(bundled_dir.glob("*.yaml")):
            stems[p.stem] = p

    user_only: list[Path] = []
    if user_dir is not None:
        for p in sorted(user_dir.glob("*.yaml")):
            if p.stem not in stems:
                user_only.append(p)

    for stem, bundled_path in stems.items():
        raw = _load_yaml_file(bundled_path)
        if not raw:
            continue
        if user_dir is not None:
            user_path = user_dir / f"{stem}.yaml"
            if user_path.exists():
                user_raw = _load_yaml_file(user_path)
                if user_raw:
                    raw = _deep_merge(raw, user_raw)
        try:
            ex = exercise_from_dict(raw)
            result[ex.exercise_id] = ex
        except ValueError as exc:
            warnings.warn(
                f"fitwizard: skipping exercise '{stem}': {exc}",
                stacklevel=2,
            )

    for p in user_only:
        raw = _load_yaml_file(p)
        if not raw:
            continue
        try:
            ex = exercise_from_dict(raw)
            result[ex.exercise_id] = ex
        except ValueError as exc:
            warnings.warn(
                f"fitwizard: skipping user exercise '{p.stem}': {exc}",
                stacklevel=2,
            )

    logger.debug("Loaded %d exercise records", len(result))
    return result


def load_exercises_from_yaml() -> dict[str, ExerciseMetadata] | None:
    """Return {exercise_id: ExerciseMetadata} from the bundled and user directories.

    Returns None when neither directory exists or nothing could be loaded.
    """
    bundled_dir = _get_bundled_exercises_dir()
    user_dir = _get_user_exercises_dir()

    if bundled_dir is None and user_dir is None:
        return None

    result = load_exercises_from_dirs(bundled_dir, user_dir)
    return result if result else None
