"""
Exercise metadata for fitwizard.

Each exercise is described by an ExerciseMetadata record used to attribute
training volume to muscle groups.
"""

from .base import ExerciseMetadata
from .registry import EXERCISE_CATALOG, display_name, get_exercise

__all__ = [
    "ExerciseMetadata",
    "EXERCISE_CATALOG",
    "display_name",
    "get_exercise",
]
