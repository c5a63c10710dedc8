import logging
import sqlite3
from contextlib import contextmanager
from typing import List, Optional, Tuple

from config import APP_VERSION, YamlConfig
from models import (
    Calibration,
    Exercise,
    Gym,
    MuscleGroup,
    ProgressionRule,
    Routine,
    RoutineDay,
    RoutineItem,
    SetScheme,
    WeightUnit,
    WorkoutSet,
)
from rules.exercise_catalog import catalog_exercises, group_exercises
from settings_schema import validate_settings

logger = logging.getLogger(__name__)


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "gyms": (
            """CREATE TABLE gyms (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE,
                    default_unit TEXT NOT NULL DEFAULT 'kg',
                    location_note TEXT
                );""",
            ["id", "name", "default_unit", "location_note"],
        ),
        "exercise_catalog": (
            """CREATE TABLE exercise_catalog (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE,
                    muscle_group TEXT NOT NULL,
                    default_unit TEXT NOT NULL DEFAULT 'kg',
                    is_bodyweight INTEGER NOT NULL DEFAULT 0,
                    is_custom INTEGER NOT NULL DEFAULT 0
                );""",
            ["id", "name", "muscle_group", "default_unit", "is_bodyweight", "is_custom"],
        ),
        "calibrations": (
            """CREATE TABLE calibrations (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    gym_id INTEGER,
                    base_exercise_name TEXT NOT NULL,
                    alias TEXT NOT NULL,
                    a REAL NOT NULL,
                    b REAL NOT NULL,
                    machine_unit TEXT NOT NULL,
                    FOREIGN KEY(gym_id) REFERENCES gyms(id) ON DELETE CASCADE
                );""",
            ["id", "gym_id", "base_exercise_name", "alias", "a", "b", "machine_unit"],
        ),
        "routines": (
            """CREATE TABLE routines (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    gym_id INTEGER,
                    FOREIGN KEY(gym_id) REFERENCES gyms(id) ON DELETE SET NULL
                );""",
            ["id", "name", "gym_id"],
        ),
        "routine_days": (
            """CREATE TABLE routine_days (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    routine_id INTEGER NOT NULL,
                    position INTEGER NOT NULL,
                    label TEXT NOT NULL,
                    FOREIGN KEY(routine_id) REFERENCES routines(id) ON DELETE CASCADE
                );""",
            ["id", "routine_id", "position", "label"],
        ),
        "routine_items": (
            """CREATE TABLE routine_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    day_id INTEGER NOT NULL,
                    position INTEGER NOT NULL,
                    exercise_name TEXT NOT NULL,
                    sets INTEGER NOT NULL,
                    rep_min INTEGER NOT NULL,
                    rep_max INTEGER NOT NULL,
                    rpe_note TEXT,
                    progression TEXT NOT NULL DEFAULT 'doubleProgression',
                    unit_override TEXT,
                    FOREIGN KEY(day_id) REFERENCES routine_days(id) ON DELETE CASCADE
                );""",
            [
                "id",
                "day_id",
                "position",
                "exercise_name",
                "sets",
                "rep_min",
                "rep_max",
                "rpe_note",
                "progression",
                "unit_override",
            ],
        ),
        "workouts": (
            """CREATE TABLE workouts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    date TEXT NOT NULL,
                    gym_id INTEGER,
                    routine_id INTEGER,
                    FOREIGN KEY(gym_id) REFERENCES gyms(id) ON DELETE SET NULL,
                    FOREIGN KEY(routine_id) REFERENCES routines(id) ON DELETE SET NULL
                );""",
            ["id", "date", "gym_id", "routine_id"],
        ),
        "workout_sets": (
            """CREATE TABLE workout_sets (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    workout_id INTEGER NOT NULL,
                    exercise_name TEXT NOT NULL,
                    position INTEGER NOT NULL DEFAULT 0,
                    reps INTEGER NOT NULL,
                    weight_value REAL NOT NULL,
                    weight_unit TEXT NOT NULL DEFAULT 'kg',
                    rpe REAL,
                    note TEXT,
                    calibration_alias TEXT,
                    FOREIGN KEY(workout_id) REFERENCES workouts(id) ON DELETE CASCADE
                );""",
            [
                "id",
                "workout_id",
                "exercise_name",
                "position",
                "reps",
                "weight_value",
                "weight_unit",
                "rpe",
                "note",
                "calibration_alias",
            ],
        ),
        "settings": (
            """CREATE TABLE settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["key", "value"],
        ),
    }

    def __init__(self, db_path: str = "gymrar.db") -> None:
        self._db_path = db_path
        self._ensure_schema()
        self._import_exercise_catalog_data()
        self._init_settings()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        connection.execute("PRAGMA foreign_keys=on;")
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute("PRAGMA foreign_keys=off;")
            cursor.execute("PRAGMA legacy_alter_table=on;")
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)
            cursor.execute("PRAGMA legacy_alter_table=off;")
            cursor.execute("PRAGMA foreign_keys=on;")

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return

        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols == columns:
            return

        logger.info("migrating table %s", table)
        conn.execute(f"DROP TABLE IF EXISTS {table}_old;")
        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)

        common = [c for c in existing_cols if c in columns]
        if common:
            cols = ", ".join(common)
            missing = [c for c in columns if c not in existing_cols]
            if missing:
                def default_val(col: str) -> str:
                    if col in ("default_unit", "weight_unit"):
                        return "'kg'"
                    if col == "progression":
                        return "'doubleProgression'"
                    if col in ("position", "is_bodyweight", "is_custom"):
                        return "0"
                    return "NULL"

                defaults = ", ".join(default_val(c) for c in missing)
                conn.execute(
                    f"INSERT INTO {table} ({cols}, {', '.join(missing)}) SELECT {cols}, {defaults} FROM {table}_old;"
                )
            else:
                conn.execute(
                    f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;"
                )
        conn.execute(f"DROP TABLE {table}_old;")

    def _import_exercise_catalog_data(self) -> None:
        with self._connection() as conn:
            for ex in catalog_exercises():
                conn.execute(
                    "INSERT OR IGNORE INTO exercise_catalog (name, muscle_group, default_unit, is_bodyweight, is_custom) "
                    "VALUES (?, ?, ?, ?, 0);",
                    (ex.name, ex.group.value, ex.default_unit.value, int(ex.is_bodyweight)),
                )

    def _init_settings(self) -> None:
        defaults = {
            "weight_unit": "kg",
            "default_split": "Upper/Lower",
            "default_gym": "",
            "log_level": "INFO",
            "app_version": APP_VERSION,
        }
        with self._connection() as conn:
            for key, value in defaults.items():
                conn.execute(
                    "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?);",
                    (key, value),
                )


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.lastrowid

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()


class GymRepository(BaseRepository):
    """Repository for gym table operations."""

    @staticmethod
    def _row_to_gym(row: Tuple) -> Gym:
        gid, name, unit, note = row
        return Gym(id=gid, name=name, default_unit=WeightUnit(unit), location_note=note)

    def _name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        rows = self.fetch_all(
            "SELECT id FROM gyms WHERE lower(trim(name)) = lower(trim(?)) AND id IS NOT ?;",
            (name, exclude_id),
        )
        return bool(rows)

    def add(
        self,
        name: str,
        default_unit: WeightUnit = WeightUnit.KG,
        location_note: Optional[str] = None,
    ) -> int:
        if self._name_taken(name):
            raise ValueError("gym exists")
        gid = self.execute(
            "INSERT INTO gyms (name, default_unit, location_note) VALUES (?, ?, ?);",
            (name, WeightUnit(default_unit).value, location_note),
        )
        logger.info("added gym %s (%s)", gid, name)
        return gid

    def fetch_all_gyms(self) -> List[Gym]:
        rows = self.fetch_all(
            "SELECT id, name, default_unit, location_note FROM gyms ORDER BY id;"
        )
        return [self._row_to_gym(r) for r in rows]

    def fetch_detail(self, gym_id: int) -> Gym:
        rows = self.fetch_all(
            "SELECT id, name, default_unit, location_note FROM gyms WHERE id = ?;",
            (gym_id,),
        )
        if not rows:
            raise ValueError("gym not found")
        return self._row_to_gym(rows[0])

    def find_by_name(self, name: Optional[str]) -> Optional[Gym]:
        """Case-insensitive lookup; a blank name selects the first gym."""
        gyms = self.fetch_all_gyms()
        needle = (name or "").strip().lower()
        if not needle:
            return gyms[0] if gyms else None
        for gym in gyms:
            if gym.name.strip().lower() == needle:
                return gym
        return None

    def update(
        self,
        gym_id: int,
        name: Optional[str] = None,
        default_unit: Optional[WeightUnit] = None,
        location_note: Optional[str] = None,
    ) -> None:
        gym = self.fetch_detail(gym_id)
        if name is not None and name != gym.name:
            if self._name_taken(name, gym_id):
                raise ValueError("gym exists")
            gym.name = name
        if default_unit is not None:
            gym.default_unit = WeightUnit(default_unit)
        if location_note is not None:
            gym.location_note = location_note
        self.execute(
            "UPDATE gyms SET name = ?, default_unit = ?, location_note = ? WHERE id = ?;",
            (gym.name, gym.default_unit.value, gym.location_note, gym_id),
        )

    def delete(self, gym_id: int) -> None:
        self.fetch_detail(gym_id)
        self.execute("DELETE FROM gyms WHERE id = ?;", (gym_id,))
        logger.info("deleted gym %s", gym_id)


class ExerciseCatalogRepository(BaseRepository):
    """Repository for the exercise catalog."""

    @staticmethod
    def _row_to_exercise(row: Tuple) -> Exercise:
        name, group, unit, bodyweight = row
        return Exercise(
            name=name,
            group=MuscleGroup(group),
            default_unit=WeightUnit(unit),
            is_bodyweight=bool(bodyweight),
        )

    def fetch_exercises(self) -> List[Exercise]:
        rows = self.fetch_all(
            "SELECT name, muscle_group, default_unit, is_bodyweight FROM exercise_catalog ORDER BY id;"
        )
        return [self._row_to_exercise(r) for r in rows]

    def fetch_names(self) -> List[str]:
        rows = self.fetch_all("SELECT name FROM exercise_catalog ORDER BY id;")
        return [r[0] for r in rows]

    def fetch_detail(self, name: str) -> Exercise:
        rows = self.fetch_all(
            "SELECT name, muscle_group, default_unit, is_bodyweight FROM exercise_catalog WHERE name = ?;",
            (name,),
        )
        if not rows:
            raise ValueError("exercise not found")
        return self._row_to_exercise(rows[0])

    def add(
        self,
        name: str,
        group: MuscleGroup,
        default_unit: WeightUnit = WeightUnit.KG,
        is_bodyweight: bool = False,
    ) -> int:
        if self.fetch_all("SELECT id FROM exercise_catalog WHERE name = ?;", (name,)):
            raise ValueError("exercise exists")
        return self.execute(
            "INSERT INTO exercise_catalog (name, muscle_group, default_unit, is_bodyweight, is_custom) "
            "VALUES (?, ?, ?, ?, 1);",
            (name, MuscleGroup(group).value, WeightUnit(default_unit).value, int(is_bodyweight)),
        )

    def grouped(self, query: Optional[str] = None) -> List[Tuple[MuscleGroup, List[Exercise]]]:
        return group_exercises(self.fetch_exercises(), query)


class CalibrationRepository(BaseRepository):
    """Repository for per-machine calibrations."""

    _COLUMNS = "id, gym_id, base_exercise_name, alias, a, b, machine_unit"

    def __init__(
        self,
        db_path: str = "gymrar.db",
        gyms: Optional[GymRepository] = None,
        catalog: Optional[ExerciseCatalogRepository] = None,
    ) -> None:
        super().__init__(db_path)
        self.gyms = gyms or GymRepository(db_path)
        self.catalog = catalog or ExerciseCatalogRepository(db_path)

    @staticmethod
    def _row_to_calibration(row: Tuple) -> Calibration:
        cid, gym_id, base, alias, a, b, unit = row
        return Calibration(
            id=cid,
            gym_id=gym_id,
            base_exercise_name=base,
            alias=alias,
            a=a,
            b=b,
            machine_unit=WeightUnit(unit),
        )

    def _exists(self, gym_id: Optional[int], base_exercise_name: str, alias: str) -> bool:
        rows = self.fetch_all(
            "SELECT id FROM calibrations WHERE gym_id IS ? AND base_exercise_name = ? AND alias = ?;",
            (gym_id, base_exercise_name, alias),
        )
        return bool(rows)

    def add(
        self,
        gym_id: Optional[int],
        base_exercise_name: str,
        alias: str,
        a: float,
        b: float,
        machine_unit: WeightUnit,
    ) -> int:
        if gym_id is not None:
            self.gyms.fetch_detail(gym_id)
        if self._exists(gym_id, base_exercise_name, alias):
            raise ValueError("calibration exists")
        cid = self.execute(
            "INSERT INTO calibrations (gym_id, base_exercise_name, alias, a, b, machine_unit) VALUES (?, ?, ?, ?, ?, ?);",
            (gym_id, base_exercise_name, alias, a, b, WeightUnit(machine_unit).value),
        )
        logger.info("added calibration %s (%s / %s)", cid, base_exercise_name, alias)
        return cid

    def fetch_detail(self, calibration_id: int) -> Calibration:
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM calibrations WHERE id = ?;",
            (calibration_id,),
        )
        if not rows:
            raise ValueError("calibration not found")
        return self._row_to_calibration(rows[0])

    def fetch_for(
        self, gym_id: Optional[int], base_exercise_name: Optional[str] = None
    ) -> List[Calibration]:
        """Return calibrations of ``gym_id`` sorted by alias."""
        query = f"SELECT {self._COLUMNS} FROM calibrations WHERE gym_id IS ?"
        params: list = [gym_id]
        if base_exercise_name is not None:
            query += " AND base_exercise_name = ?"
            params.append(base_exercise_name)
        query += " ORDER BY alias, id;"
        return [self._row_to_calibration(r) for r in self.fetch_all(query, tuple(params))]

    def find(
        self, gym_id: Optional[int], base_exercise_name: str, alias: str
    ) -> Optional[Calibration]:
        for cal in self.fetch_for(gym_id, base_exercise_name):
            if cal.alias == alias:
                return cal
        return None

    def update(
        self,
        calibration_id: int,
        alias: Optional[str] = None,
        a: Optional[float] = None,
        b: Optional[float] = None,
        machine_unit: Optional[WeightUnit] = None,
    ) -> None:
        cal = self.fetch_detail(calibration_id)
        if alias is not None:
            cal.alias = alias
        if a is not None:
            cal.a = a
        if b is not None:
            cal.b = b
        if machine_unit is not None:
            cal.machine_unit = WeightUnit(machine_unit)
        self.execute(
            "UPDATE calibrations SET alias = ?, a = ?, b = ?, machine_unit = ? WHERE id = ?;",
            (cal.alias, cal.a, cal.b, cal.machine_unit.value, calibration_id),
        )

    def delete(self, calibration_id: int) -> None:
        self.fetch_detail(calibration_id)
        self.execute("DELETE FROM calibrations WHERE id = ?;", (calibration_id,))

    def inventory(self, gym_name: Optional[str] = None) -> dict:
        """Return catalog names and the gym's calibrations grouped by exercise."""
        gym = self.gyms.find_by_name(gym_name)
        gym_id = gym.id if gym else None
        groups: dict[str, list[dict]] = {}
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM calibrations WHERE gym_id IS ? ORDER BY id;",
            (gym_id,),
        )
        for row in rows:
            cal = self._row_to_calibration(row)
            groups.setdefault(cal.base_exercise_name, []).append(
                {
                    "alias": cal.alias,
                    "a": cal.a,
                    "b": cal.b,
                    "unit": cal.machine_unit.value,
                }
            )
        return {
            "gym": gym.name if gym else None,
            "exercises": self.catalog.fetch_names(),
            "calibrations": [
                {"base_exercise": base, "items": items}
                for base, items in sorted(groups.items(), key=lambda kv: kv[0].lower())
            ],
        }


class RoutineRepository(BaseRepository):
    """Stores routines together with their days and items."""

    def __init__(self, db_path: str = "gymrar.db", gyms: Optional[GymRepository] = None) -> None:
        super().__init__(db_path)
        self.gyms = gyms or GymRepository(db_path)

    def save(self, routine: Routine) -> int:
        gym_id = routine.gym.id if routine.gym is not None else None
        with self._connection() as conn:
            cur = conn.execute(
                "INSERT INTO routines (name, gym_id) VALUES (?, ?);",
                (routine.name, gym_id),
            )
            routine_id = cur.lastrowid
            for day_pos, day in enumerate(routine.days):
                cur = conn.execute(
                    "INSERT INTO routine_days (routine_id, position, label) VALUES (?, ?, ?);",
                    (routine_id, day_pos, day.label),
                )
                day_id = cur.lastrowid
                for item_pos, item in enumerate(day.items):
                    scheme = item.set_scheme
                    conn.execute(
                        "INSERT INTO routine_items (day_id, position, exercise_name, sets, rep_min, rep_max, rpe_note, progression, unit_override) "
                        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?);",
                        (
                            day_id,
                            item_pos,
                            item.exercise_name,
                            scheme.sets,
                            scheme.rep_min,
                            scheme.rep_max,
                            scheme.rpe_note,
                            item.progression.value,
                            item.unit_override.value if item.unit_override else None,
                        ),
                    )
        logger.info("saved routine %s (%s)", routine_id, routine.name)
        return routine_id

    def fetch_all_routines(self) -> List[Tuple[int, str, Optional[int]]]:
        return self.fetch_all("SELECT id, name, gym_id FROM routines ORDER BY id;")

    def fetch(self, routine_id: int) -> Routine:
        rows = self.fetch_all(
            "SELECT id, name, gym_id FROM routines WHERE id = ?;", (routine_id,)
        )
        if not rows:
            raise ValueError("routine not found")
        rid, name, gym_id = rows[0]
        gym = self.gyms.fetch_detail(gym_id) if gym_id is not None else None
        days: List[RoutineDay] = []
        day_rows = self.fetch_all(
            "SELECT id, label FROM routine_days WHERE routine_id = ? ORDER BY position;",
            (rid,),
        )
        for day_id, label in day_rows:
            item_rows = self.fetch_all(
                "SELECT exercise_name, sets, rep_min, rep_max, rpe_note, progression, unit_override "
                "FROM routine_items WHERE day_id = ? ORDER BY position;",
                (day_id,),
            )
            items = [
                RoutineItem(
                    exercise_name=ex,
                    set_scheme=SetScheme(sets=sets, rep_min=rmin, rep_max=rmax, rpe_note=rpe),
                    progression=ProgressionRule(prog),
                    unit_override=WeightUnit(unit) if unit else None,
                )
                for ex, sets, rmin, rmax, rpe, prog, unit in item_rows
            ]
            days.append(RoutineDay(label=label, items=items))
        return Routine(id=rid, name=name, gym=gym, days=days)

    def rename(self, routine_id: int, name: str) -> None:
        self.fetch(routine_id)
        self.execute("UPDATE routines SET name = ? WHERE id = ?;", (name, routine_id))

    def delete(self, routine_id: int) -> None:
        self.fetch(routine_id)
        self.execute("DELETE FROM routines WHERE id = ?;", (routine_id,))
        logger.info("deleted routine %s", routine_id)


class WorkoutRepository(BaseRepository):
    """Repository for workout table operations."""

    def create(
        self,
        date: str,
        gym_id: Optional[int] = None,
        routine_id: Optional[int] = None,
    ) -> int:
        return self.execute(
            "INSERT INTO workouts (date, gym_id, routine_id) VALUES (?, ?, ?);",
            (date, gym_id, routine_id),
        )

    def fetch_all_workouts(self) -> List[Tuple[int, str]]:
        return self.fetch_all("SELECT id, date FROM workouts ORDER BY id;")

    def fetch_detail(self, workout_id: int) -> Tuple[int, str, Optional[int], Optional[int]]:
        rows = self.fetch_all(
            "SELECT id, date, gym_id, routine_id FROM workouts WHERE id = ?;",
            (workout_id,),
        )
        if not rows:
            raise ValueError("workout not found")
        return rows[0]

    def delete(self, workout_id: int) -> None:
        self.fetch_detail(workout_id)
        self.execute("DELETE FROM workouts WHERE id = ?;", (workout_id,))


class SetRepository(BaseRepository):
    """Repository for logged sets."""

    def add(
        self,
        workout_id: int,
        exercise_name: str,
        order: int,
        reps: int,
        weight_value: float,
        weight_unit: WeightUnit = WeightUnit.KG,
        rpe: Optional[float] = None,
        note: Optional[str] = None,
        calibration_alias: Optional[str] = None,
    ) -> int:
        if reps <= 0:
            raise ValueError("reps must be positive")
        if weight_value < 0:
            raise ValueError("weight must be non-negative")
        return self.execute(
            "INSERT INTO workout_sets (workout_id, exercise_name, position, reps, weight_value, weight_unit, rpe, note, calibration_alias) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?);",
            (
                workout_id,
                exercise_name,
                order,
                reps,
                weight_value,
                WeightUnit(weight_unit).value,
                rpe,
                note,
                calibration_alias,
            ),
        )

    def remove(self, set_id: int) -> None:
        self.execute("DELETE FROM workout_sets WHERE id = ?;", (set_id,))

    def fetch_for_workout(self, workout_id: int) -> List[WorkoutSet]:
        rows = self.fetch_all(
            "SELECT id, exercise_name, position, reps, weight_value, weight_unit, rpe, note, calibration_alias "
            "FROM workout_sets WHERE workout_id = ? ORDER BY position, id;",
            (workout_id,),
        )
        return [
            WorkoutSet(
                id=sid,
                exercise_name=name,
                order=pos,
                reps=reps,
                weight_value=weight,
                weight_unit=WeightUnit(unit),
                rpe=rpe,
                note=note,
                calibration_alias=alias,
            )
            for sid, name, pos, reps, weight, unit, rpe, note, alias in rows
        ]

    def max_order(self, workout_id: int) -> int:
        rows = self.fetch_all(
            "SELECT MAX(position) FROM workout_sets WHERE workout_id = ?;",
            (workout_id,),
        )
        return rows[0][0] or 0


class SettingsRepository(BaseRepository):
    """Repository for general application settings synchronized with YAML."""

    def __init__(
        self, db_path: str = "gymrar.db", yaml_path: str = "settings.yaml"
    ) -> None:
        super().__init__(db_path)
        self._yaml = YamlConfig(yaml_path)
        self._sync_from_yaml()
        self._sync_to_yaml()

    def _raw_all_settings(self) -> dict:
        rows = self.fetch_all("SELECT key, value FROM settings ORDER BY key;")
        return {k: v for k, v in rows}

    def _sync_from_yaml(self) -> None:
        data = self._yaml.load()
        if not data:
            return
        validate_settings(data)
        with self._connection() as conn:
            for key, value in data.items():
                conn.execute(
                    "INSERT INTO settings (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
                    (key, str(value)),
                )

    def _sync_to_yaml(self) -> None:
        self._yaml.save(self._raw_all_settings())

    def get_text(self, key: str, default: str) -> str:
        self._sync_from_yaml()
        rows = self.fetch_all("SELECT value FROM settings WHERE key = ?;", (key,))
        return rows[0][0] if rows else default

    def set_text(self, key: str, value: str) -> None:
        self.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, value),
        )
        self._sync_to_yaml()

    def update(self, values: dict) -> None:
        """Validate and store several settings at once."""
        values = {k: str(getattr(v, "value", v)) for k, v in values.items()}
        merged = {**self._raw_all_settings(), **values}
        validate_settings(merged)
        for key, value in values.items():
            self.execute(
                "INSERT INTO settings (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
                (key, value),
            )
        self._sync_to_yaml()

    def all_settings(self) -> dict:
        self._sync_from_yaml()
        return self._raw_all_settings()
