from typing import Iterable, Optional, Tuple

import numpy as np

from models import Calibration, WeightUnit
from .weight_converter import WeightConverter


class CalibrationMath:
    """Maps a machine's marked load to the real resistance."""

    @staticmethod
    def real_weight(
        marked: float,
        machine_unit: WeightUnit,
        a: float,
        b: float,
        output_unit: WeightUnit,
    ) -> float:
        """Apply ``real = a * marked + b`` in ``machine_unit`` and convert."""
        real_in_machine_unit = a * marked + b
        return WeightConverter.convert(real_in_machine_unit, machine_unit, output_unit)

    @classmethod
    def display_weight(
        cls, marked: float, calibration: Calibration, display_unit: WeightUnit
    ) -> float:
        """Return the real load of a logged set expressed in the set's unit."""
        real_kg = cls.real_weight(
            marked,
            calibration.machine_unit,
            calibration.a,
            calibration.b,
            WeightUnit.KG,
        )
        if display_unit == WeightUnit.KG:
            return real_kg
        return WeightConverter.convert(real_kg, WeightUnit.KG, WeightUnit.LB)

    @staticmethod
    def marked_weight(
        real: float, calibration: Calibration, real_unit: WeightUnit
    ) -> Optional[float]:
        """Dial reading that yields ``real``; ``None`` when ``a`` is zero."""
        if calibration.a == 0:
            return None
        real_in_machine_unit = WeightConverter.convert(
            real, real_unit, calibration.machine_unit
        )
        return (real_in_machine_unit - calibration.b) / calibration.a

    @staticmethod
    def fit(marked: Iterable[float], real: Iterable[float]) -> Tuple[float, float]:
        """Least-squares estimate of ``(a, b)`` from reference readings."""
        x = np.array(list(marked), dtype=float)
        y = np.array(list(real), dtype=float)
        if len(x) != len(y):
            raise ValueError("marked and real must have the same length")
        if len(x) < 2 or np.all(x == x[0]):
            raise ValueError("at least two distinct marked values are required")
        x_mean = np.mean(x)
        y_mean = np.mean(y)
        num = np.sum((x - x_mean) * (y - y_mean))
        den = np.sum((x - x_mean) ** 2)
        a = num / den
        b = y_mean - a * x_mean
        return float(a), float(b)
