from .weight_converter import WeightConverter
from .calibration_math import CalibrationMath
from .progression import ProgressionRules
from .routine_templates import RoutineTemplates

__all__ = ["WeightConverter", "CalibrationMath", "ProgressionRules", "RoutineTemplates"]
