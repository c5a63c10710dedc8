from __future__ import annotations

import datetime
import logging

from db import (
    GymRepository,
    CalibrationRepository,
    RoutineRepository,
    WorkoutRepository,
    SetRepository,
)
from models import (
    Calibration,
    Gym,
    RoutineDraft,
    SplitType,
    WeightUnit,
    Workout,
    WorkoutSet,
)
from rules import CalibrationMath, ProgressionRules, RoutineTemplates

logger = logging.getLogger(__name__)


class PlannerService:
    """Turns routines into logged workouts and proposes next loads."""

    DEFAULT_WEIGHT = 20.0
    DEFAULT_REPS = 10
    DEFAULT_RPE = 7.5

    def __init__(
        self,
        gym_repo: GymRepository,
        calibration_repo: CalibrationRepository,
        routine_repo: RoutineRepository,
        workout_repo: WorkoutRepository,
        set_repo: SetRepository,
    ) -> None:
        self.gyms = gym_repo
        self.calibrations = calibration_repo
        self.routines = routine_repo
        self.workouts = workout_repo
        self.sets = set_repo

    def _gym(self, gym_id: int | None) -> Gym | None:
        return self.gyms.fetch_detail(gym_id) if gym_id is not None else None

    def create_routine_from_template(
        self, split: SplitType, gym_id: int | None = None
    ) -> int:
        routine = RoutineTemplates.make_routine(split, self._gym(gym_id))
        return self.routines.save(routine)

    def import_draft(self, draft: RoutineDraft, gym_id: int | None = None) -> int:
        routine = draft.to_routine(self._gym(gym_id))
        return self.routines.save(routine)

    def start_workout(
        self,
        routine_id: int,
        date: str | None = None,
        gym_id: int | None = None,
    ) -> int:
        """Create a workout pre-filled with one set per item of the first day."""
        routine = self.routines.fetch(routine_id)
        gym = self._gym(gym_id) if gym_id is not None else routine.gym
        date = date or datetime.date.today().isoformat()
        workout_id = self.workouts.create(
            date, gym.id if gym else None, routine_id
        )
        if not routine.days:
            return workout_id
        default_unit = gym.default_unit if gym else WeightUnit.KG
        for order, item in enumerate(routine.days[0].items, start=1):
            self.sets.add(
                workout_id,
                item.exercise_name,
                order,
                item.set_scheme.rep_min,
                self.DEFAULT_WEIGHT,
                item.unit_override or default_unit,
                self.DEFAULT_RPE,
            )
        logger.info("started workout %s from routine %s", workout_id, routine_id)
        return workout_id

    def load_workout(self, workout_id: int) -> Workout:
        wid, date, gym_id, routine_id = self.workouts.fetch_detail(workout_id)
        return Workout(
            id=wid,
            date=date,
            gym=self._gym(gym_id),
            routine_id=routine_id,
            entries=self.sets.fetch_for_workout(wid),
        )

    def add_set(
        self,
        workout_id: int,
        exercise_name: str,
        reps: int | None = None,
        weight_value: float | None = None,
        weight_unit: WeightUnit | None = None,
        rpe: float | None = None,
        calibration_alias: str | None = None,
    ) -> int:
        """Append a set, copying defaults from the exercise's first set."""
        workout = self.load_workout(workout_id)
        existing = next(
            (s for s in workout.entries if s.exercise_name == exercise_name), None
        )
        gym_unit = workout.gym.default_unit if workout.gym else WeightUnit.KG
        if existing is not None:
            reps = reps if reps is not None else existing.reps
            weight_value = weight_value if weight_value is not None else existing.weight_value
            weight_unit = weight_unit or existing.weight_unit
            rpe = rpe if rpe is not None else existing.rpe
            calibration_alias = calibration_alias or existing.calibration_alias
        return self.sets.add(
            workout_id,
            exercise_name,
            self.sets.max_order(workout_id) + 1,
            reps if reps is not None else self.DEFAULT_REPS,
            weight_value if weight_value is not None else self.DEFAULT_WEIGHT,
            weight_unit or gym_unit,
            rpe if rpe is not None else self.DEFAULT_RPE,
            None,
            calibration_alias,
        )

    def _calibration(self, workout: Workout, entry: WorkoutSet) -> Calibration | None:
        if not entry.calibration_alias:
            return None
        gym_id = workout.gym.id if workout.gym else None
        cal = self.calibrations.find(gym_id, entry.exercise_name, entry.calibration_alias)
        if cal is None:
            logger.warning(
                "calibration %r not found for %s", entry.calibration_alias, entry.exercise_name
            )
        return cal

    def real_weight(self, workout: Workout, entry: WorkoutSet) -> float:
        """Resolve a logged weight through its machine calibration, if any."""
        cal = self._calibration(workout, entry)
        if cal is None:
            return entry.weight_value
        return CalibrationMath.display_weight(entry.weight_value, cal, entry.weight_unit)

    def next_loads(
        self,
        workout_id: int,
        routine_id: int | None = None,
        day_label: str | None = None,
    ) -> list[dict]:
        """Propose next-session loads for every routine item that was logged.

        ``current_real`` and ``next_real`` are true resistance in ``unit``.
        ``weight_value`` and ``next_marked`` are dial readings; for a
        calibrated machine ``next_marked`` is in ``marked_unit`` and is
        ``None`` when the calibration cannot be inverted.
        """
        workout = self.load_workout(workout_id)
        routine_id = routine_id if routine_id is not None else workout.routine_id
        if routine_id is None:
            raise ValueError("routine not found")
        routine = self.routines.fetch(routine_id)
        if not routine.days:
            return []
        day = next((d for d in routine.days if d.label == day_label), routine.days[0])
        proposals: list[dict] = []
        for item in day.items:
            logged = [s for s in workout.entries if s.exercise_name == item.exercise_name]
            if not logged:
                continue
            last = logged[-1]
            cal = self._calibration(workout, last)
            if cal is None:
                current_real = last.weight_value
            else:
                current_real = CalibrationMath.display_weight(
                    last.weight_value, cal, last.weight_unit
                )
            next_real = ProgressionRules.next_load(
                current_real, last.reps, item.set_scheme, item.progression
            )
            if cal is None:
                next_marked = next_real
                marked_unit = last.weight_unit
            else:
                next_marked = CalibrationMath.marked_weight(next_real, cal, last.weight_unit)
                marked_unit = cal.machine_unit
            proposals.append(
                {
                    "exercise_name": item.exercise_name,
                    "achieved_reps": last.reps,
                    "weight_value": last.weight_value,
                    "current_real": current_real,
                    "next_real": next_real,
                    "next_marked": next_marked,
                    "unit": last.weight_unit.value,
                    "marked_unit": marked_unit.value,
                    "calibration_alias": cal.alias if cal else None,
                }
            )
        return proposals
