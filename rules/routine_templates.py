import logging
from typing import Optional

from models import Gym, Routine, RoutineDay, RoutineItem, SetScheme, SplitType

logger = logging.getLogger(__name__)

# split -> [(day label, [(exercise, sets, rep_min, rep_max[, rpe_note])])]
SPLIT_TEMPLATES: dict[SplitType, list[tuple[str, list[tuple]]]] = {
    SplitType.UPPER_LOWER: [
        (
            "Upper",
            [
                ("Bench Press", 4, 6, 10, "RPE 8"),
                ("Row (Barbell)", 4, 8, 12),
                ("Overhead Press", 3, 6, 10),
                ("Lat Pulldown", 3, 8, 12),
                ("Dumbbell Curl", 3, 10, 15),
                ("Triceps Pushdown", 3, 10, 15),
            ],
        ),
        (
            "Lower",
            [
                ("Back Squat", 4, 5, 8, "RPE 8"),
                ("Romanian Deadlift", 3, 6, 10),
                ("Leg Press", 3, 10, 15),
                ("Leg Curl", 3, 10, 15),
                ("Calf Raise", 3, 12, 20),
            ],
        ),
    ],
    SplitType.PUSH_PULL_LEGS: [
        (
            "Push",
            [
                ("Bench Press", 4, 6, 10, "RPE 8"),
                ("Overhead Press", 3, 6, 10),
                ("Incline Dumbbell Press", 3, 8, 12),
                ("Triceps Pushdown", 3, 10, 15),
                ("Lateral Raise", 3, 12, 15),
            ],
        ),
        (
            "Pull",
            [
                ("Row (Barbell)", 4, 6, 10, "RPE 8"),
                ("Lat Pulldown", 3, 8, 12),
                ("Face Pull", 3, 12, 15),
                ("Dumbbell Curl", 3, 10, 15),
                ("Hammer Curl", 3, 10, 15),
            ],
        ),
        (
            "Legs",
            [
                ("Back Squat", 4, 5, 8, "RPE 8"),
                ("Romanian Deadlift", 3, 6, 10),
                ("Leg Press", 3, 10, 15),
                ("Leg Curl", 3, 10, 15),
                ("Calf Raise", 4, 12, 20),
            ],
        ),
    ],
    SplitType.FULL_BODY: [
        (
            "Full Body A",
            [
                ("Back Squat", 3, 5, 8, "RPE 8"),
                ("Bench Press", 3, 6, 10),
                ("Row (Barbell)", 3, 8, 12),
                ("Overhead Press", 2, 8, 12),
                ("Dumbbell Curl", 2, 10, 15),
            ],
        ),
        (
            "Full Body B",
            [
                ("Romanian Deadlift", 3, 6, 10, "RPE 8"),
                ("Incline Dumbbell Press", 3, 8, 12),
                ("Lat Pulldown", 3, 8, 12),
                ("Leg Press", 3, 10, 15),
                ("Triceps Pushdown", 2, 10, 15),
            ],
        ),
        (
            "Full Body C",
            [
                ("Leg Press", 3, 8, 12),
                ("Dumbbell Press", 3, 8, 12),
                ("Cable Row", 3, 10, 12),
                ("Lateral Raise", 3, 12, 15),
                ("Calf Raise", 3, 12, 20),
            ],
        ),
    ],
    SplitType.BRO_SPLIT: [
        (
            "Chest",
            [
                ("Bench Press", 4, 6, 10, "RPE 8"),
                ("Incline Dumbbell Press", 3, 8, 12),
                ("Cable Fly", 3, 10, 15),
                ("Dips", 3, 8, 12),
            ],
        ),
        (
            "Back",
            [
                ("Row (Barbell)", 4, 6, 10, "RPE 8"),
                ("Lat Pulldown", 3, 8, 12),
                ("Cable Row", 3, 10, 12),
                ("Face Pull", 3, 12, 15),
            ],
        ),
        (
            "Shoulders",
            [
                ("Overhead Press", 4, 6, 10, "RPE 8"),
                ("Lateral Raise", 4, 12, 15),
                ("Rear Delt Fly", 3, 12, 15),
                ("Shrugs", 3, 10, 15),
            ],
        ),
        (
            "Arms",
            [
                ("Dumbbell Curl", 3, 8, 12),
                ("Hammer Curl", 3, 10, 15),
                ("Triceps Pushdown", 3, 10, 15),
                ("Skull Crushers", 3, 8, 12),
            ],
        ),
        (
            "Legs",
            [
                ("Back Squat", 4, 5, 8, "RPE 8"),
                ("Romanian Deadlift", 3, 6, 10),
                ("Leg Press", 3, 10, 15),
                ("Leg Curl", 3, 10, 15),
                ("Calf Raise", 4, 12, 20),
            ],
        ),
    ],
    SplitType.CUSTOM: [("Day 1", [])],
}


def _make_item(
    name: str, sets: int, rep_min: int, rep_max: int, rpe_note: Optional[str] = None
) -> RoutineItem:
    return RoutineItem(
        exercise_name=name,
        set_scheme=SetScheme(sets=sets, rep_min=rep_min, rep_max=rep_max, rpe_note=rpe_note),
    )


class RoutineTemplates:
    """Builds canned routines from the split tables."""

    @staticmethod
    def make_routine(split: SplitType, gym: Optional[Gym] = None) -> Routine:
        split = SplitType(split)
        days = [
            RoutineDay(label=label, items=[_make_item(*row) for row in rows])
            for label, rows in SPLIT_TEMPLATES[split]
        ]
        logger.debug("built %s template with %d days", split.value, len(days))
        return Routine(name=split.display_name, gym=gym, days=days)

    @classmethod
    def make_ul(cls, days: int) -> Routine:
        """Legacy Upper/Lower routine repeated to ``days`` sessions.

        Session ``i`` copies template day ``i % 2``, so odd counts finish on
        an Upper day.
        """
        routine = cls.make_routine(SplitType.UPPER_LOWER)
        if days <= 2:
            return routine
        template = routine.days
        return Routine(
            name=f"UL {days}x",
            days=[template[i % 2].model_copy(deep=True) for i in range(days)],
        )

    @staticmethod
    def available_splits() -> list[dict]:
        return [
            {
                "split": split.value,
                "description": split.description,
                "day_labels": split.default_day_labels,
            }
            for split in SplitType
        ]
