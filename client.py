from typing import Optional

import requests


class RoutineClient:
    """Simple REST client for the routine API."""

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 10) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get(self, path: str, **params):
        resp = requests.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def _post(self, path: str, json=None, **params):
        resp = requests.post(
            f"{self.base_url}{path}", params=params, json=json, timeout=self.timeout
        )
        resp.raise_for_status()
        return resp.json()

    def convert(self, value: float, from_unit: str, to_unit: str) -> float:
        data = self._get("/units/convert", value=value, from_unit=from_unit, to_unit=to_unit)
        return data["value"]

    def next_load(
        self, current: float, achieved_reps: int, sets: int, rep_min: int, rep_max: int
    ) -> float:
        data = self._get(
            "/progression/next_load",
            current=current,
            achieved_reps=achieved_reps,
            sets=sets,
            rep_min=rep_min,
            rep_max=rep_max,
        )
        return data["next_load"]

    def create_routine(self, split: str, gym_id: Optional[int] = None) -> int:
        params = {"split": split}
        if gym_id is not None:
            params["gym_id"] = gym_id
        return self._post("/routines", **params)["id"]

    def import_routine(self, draft: dict, gym_id: Optional[int] = None) -> int:
        params = {"gym_id": gym_id} if gym_id is not None else {}
        return self._post("/routines/import", json=draft, **params)["id"]

    def get_routine(self, routine_id: int) -> dict:
        return self._get(f"/routines/{routine_id}")

    def start_workout(self, routine_id: int, date: Optional[str] = None) -> int:
        params = {"date": date} if date else {}
        return self._post(f"/routines/{routine_id}/workouts", **params)["id"]

    def add_set(self, workout_id: int, exercise_name: str, **fields) -> int:
        return self._post(
            f"/workouts/{workout_id}/sets", exercise_name=exercise_name, **fields
        )["id"]

    def next_loads(self, workout_id: int, day_label: Optional[str] = None) -> list:
        params = {"day_label": day_label} if day_label else {}
        return self._get(f"/workouts/{workout_id}/next_loads", **params)
