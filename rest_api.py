import logging
from typing import Optional

from fastapi import APIRouter, FastAPI, HTTPException

from db import (
    GymRepository,
    ExerciseCatalogRepository,
    CalibrationRepository,
    RoutineRepository,
    WorkoutRepository,
    SetRepository,
    SettingsRepository,
)
from models import (
    MuscleGroup,
    ProgressionRule,
    RoutineDraft,
    SetScheme,
    SplitType,
    WeightUnit,
)
from planner_service import PlannerService
from rules import CalibrationMath, ProgressionRules, RoutineTemplates, WeightConverter

logger = logging.getLogger(__name__)


def _parse_floats(raw: str) -> list[float]:
    try:
        return [float(v) for v in raw.split(",") if v.strip()]
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid number list")


def _not_found_or_bad(e: ValueError) -> HTTPException:
    status = 404 if "not found" in str(e) else 400
    return HTTPException(status_code=status, detail=str(e))


class GymAPI:
    """Provides REST endpoints for routines, calibrations and logging."""

    def __init__(
        self,
        db_path: str = "gymrar.db",
        yaml_path: str = "settings.yaml",
    ) -> None:
        self.db_path = db_path
        self.settings = SettingsRepository(db_path, yaml_path)
        self.gyms = GymRepository(db_path)
        self.exercise_catalog = ExerciseCatalogRepository(db_path)
        self.calibrations = CalibrationRepository(db_path, self.gyms, self.exercise_catalog)
        self.routines = RoutineRepository(db_path, self.gyms)
        self.workouts = WorkoutRepository(db_path)
        self.sets = SetRepository(db_path)
        self.planner = PlannerService(
            self.gyms,
            self.calibrations,
            self.routines,
            self.workouts,
            self.sets,
        )
        self.app = FastAPI(
            title="GYMRar API",
            description="REST API for routine templates, machine calibrations and workout logging",
        )
        self._setup_routes()

    def _setup_routes(self) -> None:
        gyms_router = APIRouter(prefix="/gyms", tags=["Gyms"])
        calibrations_router = APIRouter(prefix="/calibrations", tags=["Calibrations"])
        routines_router = APIRouter(prefix="/routines", tags=["Routines"])
        workouts_router = APIRouter(prefix="/workouts", tags=["Workouts"])

        @self.app.get(
            "/health",
            summary="Health check",
            description="Verify API and database connectivity.",
        )
        def health():
            """Return API and database connection status."""
            try:
                self.gyms.fetch_all_gyms()
                return {"status": "ok"}
            except Exception as e:  # pragma: no cover - connectivity failure
                raise HTTPException(status_code=500, detail=str(e))

        @self.app.get("/units/convert")
        def convert(value: float, from_unit: WeightUnit, to_unit: WeightUnit):
            return {
                "value": WeightConverter.convert(value, from_unit, to_unit),
                "unit": to_unit.value,
            }

        @self.app.get("/progression/next_load")
        def next_load(
            current: float,
            achieved_reps: int,
            sets: int,
            rep_min: int,
            rep_max: int,
            rule: ProgressionRule = ProgressionRule.DOUBLE_PROGRESSION,
        ):
            scheme = SetScheme(sets=sets, rep_min=rep_min, rep_max=rep_max)
            return {
                "next_load": ProgressionRules.next_load(current, achieved_reps, scheme, rule)
            }

        @self.app.get("/templates")
        def list_templates():
            return RoutineTemplates.available_splits()

        @self.app.get("/templates/preview")
        def preview_template(split: SplitType, legacy_days: Optional[int] = None):
            if legacy_days is not None:
                routine = RoutineTemplates.make_ul(legacy_days)
            else:
                routine = RoutineTemplates.make_routine(split)
            return routine.model_dump(mode="json")

        @self.app.get("/exercises")
        def list_exercises(query: Optional[str] = None):
            return [
                {
                    "group": group.value,
                    "display_name": group.display_name,
                    "exercises": [e.model_dump(mode="json") for e in exercises],
                }
                for group, exercises in self.exercise_catalog.grouped(query)
            ]

        @self.app.post("/exercises")
        def add_exercise(
            name: str,
            group: MuscleGroup,
            default_unit: WeightUnit = WeightUnit.KG,
            is_bodyweight: bool = False,
        ):
            try:
                eid = self.exercise_catalog.add(name, group, default_unit, is_bodyweight)
                return {"id": eid}
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @gyms_router.post("")
        def add_gym(
            name: str,
            default_unit: WeightUnit = WeightUnit.KG,
            location_note: Optional[str] = None,
        ):
            try:
                return {"id": self.gyms.add(name, default_unit, location_note)}
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @gyms_router.get("")
        def list_gyms():
            return [g.model_dump(mode="json") for g in self.gyms.fetch_all_gyms()]

        @gyms_router.get("/inventory")
        def gym_inventory(name: Optional[str] = None):
            return self.calibrations.inventory(name)

        @gyms_router.get("/{gym_id}")
        def get_gym(gym_id: int):
            try:
                return self.gyms.fetch_detail(gym_id).model_dump(mode="json")
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @gyms_router.put("/{gym_id}")
        def update_gym(
            gym_id: int,
            name: Optional[str] = None,
            default_unit: Optional[WeightUnit] = None,
            location_note: Optional[str] = None,
        ):
            try:
                self.gyms.update(gym_id, name, default_unit, location_note)
                return {"status": "updated"}
            except ValueError as e:
                raise _not_found_or_bad(e)

        @gyms_router.delete("/{gym_id}")
        def delete_gym(gym_id: int):
            try:
                self.gyms.delete(gym_id)
                return {"status": "deleted"}
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @calibrations_router.post("")
        def add_calibration(
            base_exercise_name: str,
            alias: str,
            a: float,
            b: float,
            machine_unit: WeightUnit,
            gym_id: Optional[int] = None,
        ):
            try:
                cid = self.calibrations.add(gym_id, base_exercise_name, alias, a, b, machine_unit)
                return {"id": cid}
            except ValueError as e:
                raise _not_found_or_bad(e)

        @calibrations_router.get("")
        def list_calibrations(gym_id: Optional[int] = None, exercise: Optional[str] = None):
            return [
                c.model_dump(mode="json")
                for c in self.calibrations.fetch_for(gym_id, exercise)
            ]

        @calibrations_router.get("/fit")
        def fit_calibration(marked: str, real: str):
            try:
                a, b = CalibrationMath.fit(_parse_floats(marked), _parse_floats(real))
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"a": a, "b": b}

        @calibrations_router.get("/{calibration_id}")
        def get_calibration(calibration_id: int):
            try:
                return self.calibrations.fetch_detail(calibration_id).model_dump(mode="json")
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @calibrations_router.put("/{calibration_id}")
        def update_calibration(
            calibration_id: int,
            alias: Optional[str] = None,
            a: Optional[float] = None,
            b: Optional[float] = None,
            machine_unit: Optional[WeightUnit] = None,
        ):
            try:
                self.calibrations.update(calibration_id, alias, a, b, machine_unit)
                return {"status": "updated"}
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @calibrations_router.delete("/{calibration_id}")
        def delete_calibration(calibration_id: int):
            try:
                self.calibrations.delete(calibration_id)
                return {"status": "deleted"}
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @calibrations_router.get("/{calibration_id}/real_weight")
        def calibrated_weight(
            calibration_id: int,
            marked: float,
            output_unit: WeightUnit = WeightUnit.KG,
        ):
            try:
                cal = self.calibrations.fetch_detail(calibration_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            real = CalibrationMath.real_weight(marked, cal.machine_unit, cal.a, cal.b, output_unit)
            return {"real_weight": real, "unit": output_unit.value}

        @routines_router.post("")
        def create_routine(split: SplitType, gym_id: Optional[int] = None):
            try:
                return {"id": self.planner.create_routine_from_template(split, gym_id)}
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @routines_router.post("/import")
        def import_routine(draft: RoutineDraft, gym_id: Optional[int] = None):
            try:
                return {"id": self.planner.import_draft(draft, gym_id)}
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @routines_router.get("")
        def list_routines():
            return [
                {"id": rid, "name": name, "gym_id": gym_id}
                for rid, name, gym_id in self.routines.fetch_all_routines()
            ]

        @routines_router.get("/{routine_id}")
        def get_routine(routine_id: int):
            try:
                return self.routines.fetch(routine_id).model_dump(mode="json")
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @routines_router.put("/{routine_id}")
        def rename_routine(routine_id: int, name: str):
            try:
                self.routines.rename(routine_id, name)
                return {"status": "updated"}
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @routines_router.delete("/{routine_id}")
        def delete_routine(routine_id: int):
            try:
                self.routines.delete(routine_id)
                return {"status": "deleted"}
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @routines_router.post("/{routine_id}/workouts")
        def start_workout(
            routine_id: int, date: Optional[str] = None, gym_id: Optional[int] = None
        ):
            try:
                return {"id": self.planner.start_workout(routine_id, date, gym_id)}
            except ValueError as e:
                raise _not_found_or_bad(e)

        @workouts_router.get("")
        def list_workouts():
            return [{"id": wid, "date": date} for wid, date in self.workouts.fetch_all_workouts()]

        @workouts_router.get("/{workout_id}")
        def get_workout(workout_id: int):
            try:
                return self.planner.load_workout(workout_id).model_dump(mode="json")
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @workouts_router.post("/{workout_id}/sets")
        def add_set(
            workout_id: int,
            exercise_name: str,
            reps: Optional[int] = None,
            weight_value: Optional[float] = None,
            weight_unit: Optional[WeightUnit] = None,
            rpe: Optional[float] = None,
            calibration_alias: Optional[str] = None,
        ):
            try:
                sid = self.planner.add_set(
                    workout_id,
                    exercise_name,
                    reps,
                    weight_value,
                    weight_unit,
                    rpe,
                    calibration_alias,
                )
                return {"id": sid}
            except ValueError as e:
                raise _not_found_or_bad(e)

        @workouts_router.delete("/{workout_id}/sets/{set_id}")
        def remove_set(workout_id: int, set_id: int):
            if all(s.id != set_id for s in self.sets.fetch_for_workout(workout_id)):
                raise HTTPException(status_code=404, detail="set not found")
            self.sets.remove(set_id)
            return {"status": "deleted"}

        @workouts_router.delete("/{workout_id}")
        def delete_workout(workout_id: int):
            try:
                self.workouts.delete(workout_id)
                return {"status": "deleted"}
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @workouts_router.get("/{workout_id}/next_loads")
        def next_loads(workout_id: int, day_label: Optional[str] = None):
            try:
                return self.planner.next_loads(workout_id, day_label=day_label)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @self.app.get("/settings")
        def get_settings():
            return self.settings.all_settings()

        @self.app.post("/settings/general")
        def update_settings(
            weight_unit: Optional[WeightUnit] = None,
            default_split: Optional[SplitType] = None,
            default_gym: Optional[str] = None,
            log_level: Optional[str] = None,
        ):
            values = {
                "weight_unit": weight_unit,
                "default_split": default_split,
                "default_gym": default_gym,
                "log_level": log_level,
            }
            try:
                self.settings.update({k: v for k, v in values.items() if v is not None})
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            logger.info("settings updated: %s", sorted(k for k, v in values.items() if v is not None))
            return {"status": "updated"}

        self.app.include_router(gyms_router)
        self.app.include_router(calibrations_router)
        self.app.include_router(routines_router)
        self.app.include_router(workouts_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(GymAPI().app)
