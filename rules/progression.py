import logging
from decimal import Decimal, ROUND_HALF_UP, localcontext

from models import ProgressionRule, SetScheme

logger = logging.getLogger(__name__)


class ProgressionRules:
    """Next-session load proposals for a routine item."""

    STEP_UP = Decimal("1.025")
    STEP_DOWN = Decimal("0.975")
    # wide enough for the integer part of any finite double
    PRECISION = 400

    @staticmethod
    def round_half_away(value: Decimal) -> float:
        """Round to the nearest integer, ties away from zero."""
        with localcontext() as ctx:
            ctx.prec = ProgressionRules.PRECISION
            return float(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @classmethod
    def _scaled(cls, current: float, factor: Decimal) -> float:
        with localcontext() as ctx:
            ctx.prec = cls.PRECISION
            return cls.round_half_away(Decimal(str(current)) * factor)

    @classmethod
    def next_load(
        cls,
        current: float,
        achieved_reps: int,
        scheme: SetScheme,
        rule: ProgressionRule = ProgressionRule.DOUBLE_PROGRESSION,
    ) -> float:
        """Return the load for the next session.

        Reaching the top of the rep range adds 2.5%, falling below the bottom
        removes 2.5%, anything in between keeps ``current``.
        """
        if rule != ProgressionRule.DOUBLE_PROGRESSION:
            # linearSmallLoad has no policy of its own yet
            logger.debug("rule %s falls back to double progression", rule)
        logger.debug(
            "next load: current=%s reps=%s range=%s-%s",
            current,
            achieved_reps,
            scheme.rep_min,
            scheme.rep_max,
        )
        if achieved_reps >= scheme.rep_max:
            return cls._scaled(current, cls.STEP_UP)
        if achieved_reps < scheme.rep_min:
            return cls._scaled(current, cls.STEP_DOWN)
        return current
