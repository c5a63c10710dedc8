from typing import Iterable, Optional

from models import Exercise, MuscleGroup, Routine

CATALOG_TABLE: tuple[tuple[str, MuscleGroup], ...] = (
    # Chest
    ("Bench Press", MuscleGroup.CHEST),
    ("Incline Dumbbell Press", MuscleGroup.CHEST),
    ("Dumbbell Press", MuscleGroup.CHEST),
    ("Cable Fly", MuscleGroup.CHEST),
    ("Dips", MuscleGroup.CHEST),
    # Back
    ("Row (Barbell)", MuscleGroup.BACK),
    ("Lat Pulldown", MuscleGroup.BACK),
    ("Cable Row", MuscleGroup.BACK),
    ("Face Pull", MuscleGroup.BACK),
    ("Shrugs", MuscleGroup.BACK),
    # Shoulders
    ("Overhead Press", MuscleGroup.SHOULDERS),
    ("Lateral Raise", MuscleGroup.SHOULDERS),
    ("Rear Delt Fly", MuscleGroup.SHOULDERS),
    # Arms
    ("Dumbbell Curl", MuscleGroup.BICEPS),
    ("Hammer Curl", MuscleGroup.BICEPS),
    ("Triceps Pushdown", MuscleGroup.TRICEPS),
    ("Skull Crushers", MuscleGroup.TRICEPS),
    # Legs
    ("Back Squat", MuscleGroup.QUADS),
    ("Leg Press", MuscleGroup.QUADS),
    ("Romanian Deadlift", MuscleGroup.HAMSTRINGS),
    ("Leg Curl", MuscleGroup.HAMSTRINGS),
    ("Calf Raise", MuscleGroup.CALVES),
    # Core
    ("Plank", MuscleGroup.CORE),
    ("Cable Crunch", MuscleGroup.CORE),
)


def catalog_exercises() -> list[Exercise]:
    """Return fresh ``Exercise`` records for the built-in catalog."""
    return [Exercise(name=name, group=group) for name, group in CATALOG_TABLE]


def group_exercises(
    exercises: Iterable[Exercise], query: Optional[str] = None
) -> list[tuple[MuscleGroup, list[Exercise]]]:
    """Filter by ``query`` and group in anatomical order.

    Groups without matches are omitted; exercises are sorted by name.
    """
    items = list(exercises)
    if query:
        needle = query.lower()
        items = [e for e in items if needle in e.name.lower()]
    grouped: dict[MuscleGroup, list[Exercise]] = {}
    for ex in items:
        grouped.setdefault(ex.group, []).append(ex)
    return [
        (group, sorted(grouped[group], key=lambda e: e.name))
        for group in MuscleGroup.sort_order()
        if grouped.get(group)
    ]


def unknown_exercises(routine: Routine, names: Iterable[str]) -> list[str]:
    known = set(names)
    missing: list[str] = []
    for day in routine.days:
        for item in day.items:
            if item.exercise_name not in known and item.exercise_name not in missing:
                missing.append(item.exercise_name)
    return missing
