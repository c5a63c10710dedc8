from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WeightUnit(str, Enum):
    KG = "kg"
    LB = "lb"

    @property
    def symbol(self) -> str:
        return self.value


class MuscleGroup(str, Enum):
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    QUADS = "quads"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CALVES = "calves"
    CORE = "core"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def sort_order(cls) -> list["MuscleGroup"]:
        """Groups ordered from the top of the body to the bottom."""
        return [
            cls.CHEST,
            cls.BACK,
            cls.SHOULDERS,
            cls.BICEPS,
            cls.TRICEPS,
            cls.QUADS,
            cls.HAMSTRINGS,
            cls.GLUTES,
            cls.CALVES,
            cls.CORE,
            cls.OTHER,
        ]


class SplitType(str, Enum):
    UPPER_LOWER = "Upper/Lower"
    PUSH_PULL_LEGS = "Push/Pull/Legs"
    FULL_BODY = "Full Body"
    BRO_SPLIT = "Bro Split"
    CUSTOM = "Custom"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def default_day_labels(self) -> list[str]:
        return list(_SPLIT_DAY_LABELS[self])

    @property
    def description(self) -> str:
        return _SPLIT_DESCRIPTIONS[self]


_SPLIT_DAY_LABELS = {
    SplitType.UPPER_LOWER: ("Upper", "Lower"),
    SplitType.PUSH_PULL_LEGS: ("Push", "Pull", "Legs"),
    SplitType.FULL_BODY: ("Day A", "Day B", "Day C"),
    SplitType.BRO_SPLIT: ("Chest", "Back", "Shoulders", "Arms", "Legs"),
    SplitType.CUSTOM: (),
}

_SPLIT_DESCRIPTIONS = {
    SplitType.UPPER_LOWER: "4-6 days/week, alternating upper and lower body",
    SplitType.PUSH_PULL_LEGS: "3-6 days/week, push/pull/legs rotation",
    SplitType.FULL_BODY: "3-4 days/week, full body each session",
    SplitType.BRO_SPLIT: "5 days/week, one muscle group per day",
    SplitType.CUSTOM: "Create your own structure",
}


class ProgressionRule(str, Enum):
    DOUBLE_PROGRESSION = "doubleProgression"
    LINEAR_SMALL_LOAD = "linearSmallLoad"


class SetScheme(BaseModel):
    """Prescribed sets and rep range for one routine entry."""

    model_config = ConfigDict(frozen=True)

    sets: int
    rep_min: int
    rep_max: int
    rpe_note: Optional[str] = None


class Gym(BaseModel):
    id: Optional[int] = None
    name: str
    default_unit: WeightUnit = WeightUnit.KG
    location_note: Optional[str] = None


class Exercise(BaseModel):
    name: str
    group: MuscleGroup
    default_unit: WeightUnit = WeightUnit.KG
    is_bodyweight: bool = False


class Calibration(BaseModel):
    """Linear correction ``real = a * marked + b`` in the machine's unit."""

    id: Optional[int] = None
    gym_id: Optional[int] = None
    base_exercise_name: str
    alias: str
    a: float
    b: float
    machine_unit: WeightUnit


class RoutineItem(BaseModel):
    exercise_name: str
    set_scheme: SetScheme
    progression: ProgressionRule = ProgressionRule.DOUBLE_PROGRESSION
    unit_override: Optional[WeightUnit] = None


class RoutineDay(BaseModel):
    label: str
    items: list[RoutineItem] = Field(default_factory=list)


class Routine(BaseModel):
    id: Optional[int] = None
    name: str
    gym: Optional[Gym] = None
    days: list[RoutineDay] = Field(default_factory=list)


class WorkoutSet(BaseModel):
    id: Optional[int] = None
    exercise_name: str
    order: int
    reps: int
    weight_value: float
    weight_unit: WeightUnit = WeightUnit.KG
    rpe: Optional[float] = None
    note: Optional[str] = None
    calibration_alias: Optional[str] = None


class Workout(BaseModel):
    id: Optional[int] = None
    date: str
    gym: Optional[Gym] = None
    routine_id: Optional[int] = None
    entries: list[WorkoutSet] = Field(default_factory=list)


class DraftItem(BaseModel):
    exercise_name: str
    sets: int
    rep_min: int
    rep_max: int
    unit: Optional[str] = None


class DraftDay(BaseModel):
    label: str
    items: list[DraftItem] = Field(default_factory=list)


class RoutineDraft(BaseModel):
    """Structured routine document produced by a generator or an import."""

    name: str = ""
    days: list[DraftDay] = Field(default_factory=list)

    @staticmethod
    def _parse_unit(unit: Optional[str]) -> Optional[WeightUnit]:
        if unit is None:
            return None
        try:
            return WeightUnit(unit.lower())
        except ValueError:
            return None

    def to_routine(self, gym: Optional[Gym] = None) -> Routine:
        days = [
            RoutineDay(
                label=day.label,
                items=[
                    RoutineItem(
                        exercise_name=item.exercise_name,
                        set_scheme=SetScheme(
                            sets=item.sets,
                            rep_min=item.rep_min,
                            rep_max=item.rep_max,
                        ),
                        progression=ProgressionRule.DOUBLE_PROGRESSION,
                        unit_override=self._parse_unit(item.unit),
                    )
                    for item in day.items
                ],
            )
            for day in self.days
        ]
        name = self.name or f"UL {len(self.days)}x"
        return Routine(name=name, gym=gym, days=days)
