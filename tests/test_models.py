import os
import sys
import unittest

from pydantic import ValidationError

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from models import (
    Gym,
    MuscleGroup,
    ProgressionRule,
    RoutineDraft,
    RoutineItem,
    SetScheme,
    SplitType,
    WeightUnit,
)


class EnumTestCase(unittest.TestCase):
    def test_weight_unit_symbol(self) -> None:
        self.assertEqual(WeightUnit.KG.symbol, "kg")
        self.assertEqual(WeightUnit("lb").symbol, "lb")

    def test_muscle_group_order(self) -> None:
        self.assertEqual(MuscleGroup.sort_order(), list(MuscleGroup))
        self.assertEqual(MuscleGroup.HAMSTRINGS.display_name, "Hamstrings")

    def test_split_metadata(self) -> None:
        self.assertEqual(SplitType.UPPER_LOWER.default_day_labels, ["Upper", "Lower"])
        self.assertEqual(SplitType.CUSTOM.default_day_labels, [])
        self.assertEqual(SplitType.BRO_SPLIT.description, "5 days/week, one muscle group per day")
        self.assertEqual(SplitType("Push/Pull/Legs").display_name, "Push/Pull/Legs")

    def test_progression_raw_values(self) -> None:
        self.assertEqual(ProgressionRule("linearSmallLoad"), ProgressionRule.LINEAR_SMALL_LOAD)


class SetSchemeTestCase(unittest.TestCase):
    def test_frozen(self) -> None:
        scheme = SetScheme(sets=3, rep_min=8, rep_max=12)
        with self.assertRaises(ValidationError):
            scheme.sets = 4

    def test_replaced_wholesale(self) -> None:
        item = RoutineItem(exercise_name="Dips", set_scheme=SetScheme(sets=3, rep_min=8, rep_max=12))
        item.set_scheme = SetScheme(sets=4, rep_min=6, rep_max=8, rpe_note="RPE 9")
        self.assertEqual(item.set_scheme.rpe_note, "RPE 9")

    def test_malformed_values_accepted(self) -> None:
        scheme = SetScheme(sets=-1, rep_min=12, rep_max=6)
        self.assertEqual((scheme.sets, scheme.rep_min, scheme.rep_max), (-1, 12, 6))


class RoutineDraftTestCase(unittest.TestCase):
    def test_to_routine(self) -> None:
        draft = RoutineDraft(
            name="Chest day",
            days=[
                {
                    "label": "Chest & Shoulders",
                    "items": [
                        {"exercise_name": "Bench Press", "sets": 4, "rep_min": 6, "rep_max": 10, "unit": "LB"},
                        {"exercise_name": "Lateral Raise", "sets": 3, "rep_min": 12, "rep_max": 15, "unit": "stone"},
                        {"exercise_name": "Dips", "sets": 3, "rep_min": 8, "rep_max": 12},
                    ],
                }
            ],
        )
        gym = Gym(id=1, name="Gym A")
        routine = draft.to_routine(gym)
        self.assertEqual(routine.name, "Chest day")
        self.assertIs(routine.gym, gym)
        items = routine.days[0].items
        self.assertEqual([i.unit_override for i in items], [WeightUnit.LB, None, None])
        self.assertTrue(all(i.progression == ProgressionRule.DOUBLE_PROGRESSION for i in items))
        self.assertEqual(items[0].set_scheme, SetScheme(sets=4, rep_min=6, rep_max=10))

    def test_empty_name_uses_day_count(self) -> None:
        draft = RoutineDraft(days=[{"label": "Day 1"}, {"label": "Day 2"}, {"label": "Day 3"}])
        routine = draft.to_routine()
        self.assertEqual(routine.name, "UL 3x")
        self.assertIsNone(routine.gym)
        self.assertEqual([d.items for d in routine.days], [[], [], []])


if __name__ == "__main__":
    unittest.main()
