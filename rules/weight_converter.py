from models import WeightUnit


class WeightConverter:
    """Utility for converting between kg and lb."""

    KG_PER_LB = 0.45359237

    @staticmethod
    def to_kg(value: float, unit: WeightUnit) -> float:
        if unit == WeightUnit.KG:
            return value
        return value * WeightConverter.KG_PER_LB

    @staticmethod
    def to_lb(value: float, unit: WeightUnit) -> float:
        if unit == WeightUnit.LB:
            return value
        return value / WeightConverter.KG_PER_LB

    @classmethod
    def convert(cls, value: float, from_unit: WeightUnit, to_unit: WeightUnit) -> float:
        """Convert ``value`` between units without rounding."""
        if from_unit == to_unit:
            return value
        if to_unit == WeightUnit.KG:
            return cls.to_kg(value, from_unit)
        return cls.to_lb(value, from_unit)

    @staticmethod
    def format_weight(value: float, unit: WeightUnit) -> str:
        return f"{value:.1f} {WeightUnit(unit).symbol}"
