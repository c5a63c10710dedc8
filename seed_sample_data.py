import logging

from db import CalibrationRepository, GymRepository, RoutineRepository
from models import WeightUnit
from rules import RoutineTemplates

logger = logging.getLogger(__name__)


def seed(db_path: str = "gymrar.db") -> bool:
    """Insert sample gyms, calibrations and a routine into an empty database."""
    gyms = GymRepository(db_path)
    if gyms.fetch_all_gyms():
        logger.info("database already contains gyms; skipping seed")
        return False
    calibrations = CalibrationRepository(db_path, gyms)
    routines = RoutineRepository(db_path, gyms)

    gym_a = gyms.add("Gym A", WeightUnit.KG)
    gym_b = gyms.add("Gym B", WeightUnit.LB)
    calibrations.add(gym_a, "Leg Press", "Prensa A (Trineo 35kg)", 1.0, 35.0, WeightUnit.KG)
    calibrations.add(gym_b, "Lat Pulldown", "Lat Pulldown B (0.5x)", 0.5, 0.0, WeightUnit.LB)

    routine = RoutineTemplates.make_ul(4)
    routine.gym = gyms.fetch_detail(gym_a)
    routines.save(routine)
    logger.info("seed data inserted")
    return True


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed()
