"""
Base type for exercise metadata.

ExerciseMetadata is the lookup record the analytics engine consults to
attribute volume to muscle groups.  The engine accepts any mapping of
exercise_id -> ExerciseMetadata, so callers can supply their own catalog.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ExerciseMetadata:
    """
    Static description of one exercise.

    ``muscle_groups`` are the primary movers; an exercise's full volume is
    credited to each of them.
    """

    exercise_id: str                  # e.g. "bench_press"
    display_name: str                 # e.g. "Bench Press"
    muscle_groups: tuple[str, ...]    # e.g. ("chest", "triceps")
    movement_pattern: str             # e.g. "horizontal_push"
    secondary_muscles: tuple[str, ...] = field(default_factory=tuple)
    equipment: tuple[str, ...] = field(default_factory=tuple)
