"""
Exercise catalog.

The bundled catalog is loaded from per-exercise YAML files in
``src/fitwizard/exercises/`` at import time.  If nothing can be loaded a
RuntimeError is raised: the catalog ships with the package.

User overrides: place matching files in ``~/.fitwizard/exercises/``.

Lookups are tolerant: the analytics engine treats an unknown exercise_id as
"no muscle-group mapping" rather than an error.
"""

from typing import Mapping

from .base import ExerciseMetadata


def _build_registry() -> dict[str, ExerciseMetadata]:
    from .loader import load_exercises_from_yaml

    loaded = load_exercises_from_yaml()
    if not loaded:
        raise RuntimeError(
            "fitwizard: no exercise metadata could be loaded from YAML. "
            "Check that src/fitwizard/exercises/*.yaml files are present and valid."
        )
    return loaded


EXERCISE_CATALOG: dict[str, ExerciseMetadata] = _build_registry()


def get_exercise(
    exercise_id: str,
    catalog: Mapping[str, ExerciseMetadata] | None = None,
) -> ExerciseMetadata | None:
    """
    Return metadata for ``exercise_id``, or None when it is not catalogued.

    Args:
        exercise_id: Exercise identifier, e.g. "bench_press"
        catalog: Catalog to search (default: the bundled catalog)
    """
    source = EXERCISE_CATALOG if catalog is None else catalog
    return source.get(exercise_id)


def display_name(exercise_id: str, catalog: Mapping[str, ExerciseMetadata] | None = None) -> str:
    """Human-readable name, falling back to the raw id for unknown exercises."""
    meta = get_exercise(exercise_id, catalog)
    return meta.display_name if meta is not None else exercise_id
