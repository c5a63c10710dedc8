import os
import sys
import unittest

import yaml
from fastapi.testclient import TestClient

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from rest_api import GymAPI


class APITestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_gymrar.db"
        self.yaml_path = "test_settings.yaml"
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)
        self.api = GymAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        self.client = TestClient(self.api.app)

    def tearDown(self) -> None:
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_convert(self) -> None:
        response = self.client.get(
            "/units/convert", params={"value": 10, "from_unit": "kg", "to_unit": "lb"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertAlmostEqual(response.json()["value"], 22.0462262185, places=6)
        self.assertEqual(response.json()["unit"], "lb")

        response = self.client.get(
            "/units/convert", params={"value": 10, "from_unit": "stone", "to_unit": "lb"}
        )
        self.assertEqual(response.status_code, 422)

    def test_next_load(self) -> None:
        params = {"current": 100, "achieved_reps": 10, "sets": 3, "rep_min": 8, "rep_max": 10}
        response = self.client.get("/progression/next_load", params=params)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"next_load": 103})
        params["achieved_reps"] = 7
        params["rule"] = "linearSmallLoad"
        response = self.client.get("/progression/next_load", params=params)
        self.assertEqual(response.json(), {"next_load": 98})

        params = {"current": 1e30, "achieved_reps": 12, "sets": 3, "rep_min": 8, "rep_max": 10}
        response = self.client.get("/progression/next_load", params=params)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["next_load"], 1.025e30)

    def test_templates(self) -> None:
        response = self.client.get("/templates")
        self.assertEqual(len(response.json()), 5)
        self.assertEqual(response.json()[0]["day_labels"], ["Upper", "Lower"])

        response = self.client.get("/templates/preview", params={"split": "Bro Split"})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["name"], "Bro Split")
        self.assertEqual([d["label"] for d in data["days"]], ["Chest", "Back", "Shoulders", "Arms", "Legs"])

        response = self.client.get(
            "/templates/preview", params={"split": "Upper/Lower", "legacy_days": 3}
        )
        self.assertEqual(response.json()["name"], "UL 3x")

        response = self.client.get("/templates/preview", params={"split": "Arnold"})
        self.assertEqual(response.status_code, 422)

    def test_exercises(self) -> None:
        response = self.client.get("/exercises", params={"query": "curl"})
        self.assertEqual(
            [(g["group"], [e["name"] for e in g["exercises"]]) for g in response.json()],
            [("biceps", ["Dumbbell Curl", "Hammer Curl"]), ("hamstrings", ["Leg Curl"])],
        )
        response = self.client.post("/exercises", params={"name": "Sled Push", "group": "quads"})
        self.assertEqual(response.status_code, 200)
        response = self.client.post("/exercises", params={"name": "Sled Push", "group": "quads"})
        self.assertEqual(response.status_code, 400)
        groups = {g["group"]: g for g in self.client.get("/exercises").json()}
        self.assertEqual(groups["quads"]["display_name"], "Quads")
        self.assertIn("Sled Push", [e["name"] for e in groups["quads"]["exercises"]])

    def test_gyms(self) -> None:
        response = self.client.post("/gyms", params={"name": "Gym A"})
        self.assertEqual(response.json(), {"id": 1})
        self.assertEqual(self.client.post("/gyms", params={"name": "Gym A"}).status_code, 400)
        self.client.post("/gyms", params={"name": "Gym B", "default_unit": "lb"})

        response = self.client.put("/gyms/2", params={"location_note": "mall"})
        self.assertEqual(response.json(), {"status": "updated"})
        self.assertEqual(
            self.client.get("/gyms/2").json(),
            {"id": 2, "name": "Gym B", "default_unit": "lb", "location_note": "mall"},
        )
        self.assertEqual(self.client.put("/gyms/2", params={"name": "Gym A"}).status_code, 400)
        self.assertEqual(self.client.post("/gyms", params={"name": "gym b"}).status_code, 400)
        self.assertEqual(self.client.put("/gyms/9", params={"name": "X"}).status_code, 404)
        self.assertEqual(self.client.get("/gyms/9").status_code, 404)

        self.assertEqual(self.client.delete("/gyms/2").json(), {"status": "deleted"})
        self.assertEqual([g["name"] for g in self.client.get("/gyms").json()], ["Gym A"])
        self.assertEqual(self.client.delete("/gyms/2").status_code, 404)

    def test_calibrations(self) -> None:
        self.client.post("/gyms", params={"name": "Gym A"})
        params = {
            "base_exercise_name": "Leg Press",
            "alias": "Sled",
            "a": 1,
            "b": 35,
            "machine_unit": "kg",
            "gym_id": 1,
        }
        response = self.client.post("/calibrations", params=params)
        self.assertEqual(response.json(), {"id": 1})
        self.assertEqual(self.client.post("/calibrations", params=params).status_code, 400)
        params["gym_id"] = 9
        self.assertEqual(self.client.post("/calibrations", params=params).status_code, 404)

        listing = self.client.get("/calibrations", params={"gym_id": 1, "exercise": "Leg Press"}).json()
        self.assertEqual([c["alias"] for c in listing], ["Sled"])

        response = self.client.get("/calibrations/1/real_weight", params={"marked": 10})
        self.assertEqual(response.json(), {"real_weight": 45.0, "unit": "kg"})

        self.client.put("/calibrations/1", params={"machine_unit": "lb"})
        response = self.client.get(
            "/calibrations/1/real_weight", params={"marked": 10, "output_unit": "lb"}
        )
        self.assertAlmostEqual(response.json()["real_weight"], 45.0)
        self.assertEqual(self.client.get("/calibrations/9").status_code, 404)

        inventory = self.client.get("/gyms/inventory", params={"name": "gym a"}).json()
        self.assertEqual(inventory["gym"], "Gym A")
        self.assertEqual(inventory["calibrations"][0]["base_exercise"], "Leg Press")

        self.assertEqual(self.client.delete("/calibrations/1").json(), {"status": "deleted"})
        self.assertEqual(self.client.get("/calibrations", params={"gym_id": 1}).json(), [])

    def test_fit(self) -> None:
        response = self.client.get("/calibrations/fit", params={"marked": "0,10,20", "real": "35,45,55"})
        self.assertEqual(response.status_code, 200)
        self.assertAlmostEqual(response.json()["a"], 1.0)
        self.assertAlmostEqual(response.json()["b"], 35.0)
        response = self.client.get("/calibrations/fit", params={"marked": "10", "real": "45"})
        self.assertEqual(response.status_code, 400)
        response = self.client.get("/calibrations/fit", params={"marked": "a,b", "real": "1,2"})
        self.assertEqual(response.status_code, 400)

    def test_routine_workflow(self) -> None:
        self.client.post("/gyms", params={"name": "Gym A"})
        response = self.client.post("/routines", params={"split": "Upper/Lower", "gym_id": 1})
        self.assertEqual(response.json(), {"id": 1})
        routine = self.client.get("/routines/1").json()
        self.assertEqual(routine["gym"]["name"], "Gym A")
        self.assertEqual(len(routine["days"][0]["items"]), 6)
        self.assertEqual(
            self.client.get("/routines").json(), [{"id": 1, "name": "Upper/Lower", "gym_id": 1}]
        )

        response = self.client.post("/routines/1/workouts", params={"date": "2024-01-01"})
        self.assertEqual(response.json(), {"id": 1})
        workout = self.client.get("/workouts/1").json()
        self.assertEqual(len(workout["entries"]), 6)

        response = self.client.post(
            "/workouts/1/sets", params={"exercise_name": "Bench Press", "reps": 10}
        )
        self.assertEqual(response.json(), {"id": 7})
        response = self.client.post(
            "/workouts/1/sets", params={"exercise_name": "Bench Press", "reps": 0}
        )
        self.assertEqual(response.status_code, 400)

        loads = {p["exercise_name"]: p for p in self.client.get("/workouts/1/next_loads").json()}
        self.assertEqual(loads["Bench Press"]["next_real"], 21)
        self.assertEqual(loads["Bench Press"]["next_marked"], 21)
        self.assertEqual(self.client.get("/workouts/9").status_code, 404)

        self.assertEqual(self.client.delete("/routines/1").json(), {"status": "deleted"})
        self.assertEqual(self.client.get("/routines/1").status_code, 404)
        self.assertEqual(self.client.post("/routines/1/workouts").status_code, 404)

    def test_workout_management(self) -> None:
        self.client.post("/routines", params={"split": "Full Body"})
        self.assertEqual(self.client.put("/routines/1", params={"name": "Mine"}).json(), {"status": "updated"})
        self.assertEqual(self.client.get("/routines/1").json()["name"], "Mine")
        self.assertEqual(self.client.put("/routines/9", params={"name": "X"}).status_code, 404)

        self.client.post("/routines/1/workouts", params={"date": "2024-01-01"})
        self.client.post("/routines/1/workouts", params={"date": "2024-01-03"})
        self.assertEqual(
            self.client.get("/workouts").json(),
            [{"id": 1, "date": "2024-01-01"}, {"id": 2, "date": "2024-01-03"}],
        )

        self.assertEqual(self.client.delete("/workouts/1/sets/1").json(), {"status": "deleted"})
        self.assertEqual(len(self.client.get("/workouts/1").json()["entries"]), 4)
        self.assertEqual(self.client.delete("/workouts/1/sets/6").status_code, 404)

        self.assertEqual(self.client.delete("/workouts/2").json(), {"status": "deleted"})
        self.assertEqual(self.client.delete("/workouts/2").status_code, 404)
        self.assertEqual([w["id"] for w in self.client.get("/workouts").json()], [1])

    def test_import_routine(self) -> None:
        draft = {
            "name": "",
            "days": [
                {"label": "Day 1", "items": [{"exercise_name": "Dips", "sets": 3, "rep_min": 8, "rep_max": 12, "unit": "KG"}]},
                {"label": "Day 2", "items": []},
            ],
        }
        response = self.client.post("/routines/import", json=draft)
        self.assertEqual(response.status_code, 200)
        routine = self.client.get(f"/routines/{response.json()['id']}").json()
        self.assertEqual(routine["name"], "UL 2x")
        self.assertEqual(routine["days"][0]["items"][0]["unit_override"], "kg")
        self.assertEqual(self.client.post("/routines/import", json=draft, params={"gym_id": 5}).status_code, 404)

    def test_settings(self) -> None:
        settings = self.client.get("/settings").json()
        self.assertEqual(settings["weight_unit"], "kg")
        response = self.client.post(
            "/settings/general", params={"weight_unit": "lb", "default_split": "Full Body"}
        )
        self.assertEqual(response.json(), {"status": "updated"})
        with open(self.yaml_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        self.assertEqual(data["weight_unit"], "lb")
        self.assertEqual(data["default_split"], "Full Body")
        response = self.client.post("/settings/general", params={"log_level": "LOUD"})
        self.assertEqual(response.status_code, 400)


if __name__ == "__main__":
    unittest.main()
