import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from models import Exercise, MuscleGroup, Routine, RoutineDay, RoutineItem, SetScheme
from rules.exercise_catalog import (
    CATALOG_TABLE,
    catalog_exercises,
    group_exercises,
    unknown_exercises,
)


class ExerciseCatalogTestCase(unittest.TestCase):
    def test_catalog_contents(self) -> None:
        exercises = catalog_exercises()
        self.assertEqual(len(exercises), 24)
        self.assertEqual(len({e.name for e in exercises}), 24)
        self.assertEqual(exercises[0], Exercise(name="Bench Press", group=MuscleGroup.CHEST))
        self.assertTrue(all(not e.is_bodyweight for e in exercises))

    def test_grouping_follows_anatomical_order(self) -> None:
        groups = [g for g, _ in group_exercises(catalog_exercises())]
        order = MuscleGroup.sort_order()
        self.assertEqual(groups, [g for g in order if g in groups])
        self.assertNotIn(MuscleGroup.GLUTES, groups)
        self.assertEqual(groups[0], MuscleGroup.CHEST)
        self.assertEqual(groups[-1], MuscleGroup.CORE)

    def test_exercises_sorted_within_group(self) -> None:
        grouped = dict(group_exercises(catalog_exercises()))
        self.assertEqual(
            [e.name for e in grouped[MuscleGroup.CHEST]],
            ["Bench Press", "Cable Fly", "Dips", "Dumbbell Press", "Incline Dumbbell Press"],
        )

    def test_query_filter(self) -> None:
        grouped = group_exercises(catalog_exercises(), "CURL")
        self.assertEqual(
            [(g, [e.name for e in ex]) for g, ex in grouped],
            [
                (MuscleGroup.BICEPS, ["Dumbbell Curl", "Hammer Curl"]),
                (MuscleGroup.HAMSTRINGS, ["Leg Curl"]),
            ],
        )
        self.assertEqual(group_exercises(catalog_exercises(), "zzz"), [])

    def test_unknown_exercises(self) -> None:
        scheme = SetScheme(sets=3, rep_min=8, rep_max=12)
        routine = Routine(
            name="R",
            days=[
                RoutineDay(
                    label="Day 1",
                    items=[
                        RoutineItem(exercise_name="Bench Press", set_scheme=scheme),
                        RoutineItem(exercise_name="Sled Push", set_scheme=scheme),
                        RoutineItem(exercise_name="Sled Push", set_scheme=scheme),
                    ],
                )
            ],
        )
        names = [n for n, _ in CATALOG_TABLE]
        self.assertEqual(unknown_exercises(routine, names), ["Sled Push"])


if __name__ == "__main__":
    unittest.main()
