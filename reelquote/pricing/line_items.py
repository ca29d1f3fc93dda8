"""
Line-item totals and base cost aggregation.

Sloppy input is expected here: negative or malformed quantities, days and
rates are clamped to 0 before multiplying. None of these functions raise.
"""

import logging
import math
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable, Optional

from .types import BaseCosts, CrewLine, GearLine, OOPCosts

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")
# Enough digits to quantize the largest finite float (~1.8e308) to cents.
_PRECISION = 400


def round_currency(value: float) -> float:
    """Round to 2 decimals, half away from zero (never banker's rounding)."""
    if not math.isfinite(value):
        # A product of finite inputs can still overflow to inf.
        logger.debug("Non-finite amount %r treated as 0", value)
        return 0.0
    # str() gives the shortest repr, so 1.005 rounds to 1.01 rather than
    # falling victim to its binary expansion 1.00499999...
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return float(Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def to_number(value) -> float:
    """Coerce user input to a finite float. Anything unparseable becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug("Non-numeric value %r treated as 0", value)
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def clamp_non_negative(value) -> float:
    number = to_number(value)
    if number < 0:
        logger.debug("Negative value %s clamped to 0", number)
        return 0.0
    return number


def line_total(qty, days, rate_per_day) -> float:
    """max(0, qty) * max(0, days) * max(0, rate), rounded to cents."""
    return round_currency(
        clamp_non_negative(qty) * clamp_non_negative(days) * clamp_non_negative(rate_per_day)
    )


def normalise_crew_line(line: CrewLine) -> CrewLine:
    return replace(line, line_total=line_total(line.qty, line.days, line.rate_per_day))


def normalise_gear_line(line: GearLine) -> GearLine:
    return replace(line, line_total=line_total(line.qty, line.days, line.rate_per_day))


def sum_lines(lines: Iterable) -> float:
    """Rounded sum of already-totaled lines."""
    return round_currency(sum(line.line_total or 0.0 for line in lines))


def sum_oop(oop: Optional[OOPCosts]) -> float:
    """Each expense is clamped and rounded on its own, then the sum is rounded."""
    if oop is None:
        return 0.0
    transport = round_currency(clamp_non_negative(oop.transport))
    fnb = round_currency(clamp_non_negative(oop.fnb))
    misc = round_currency(clamp_non_negative(oop.misc))
    return round_currency(transport + fnb + misc)


def aggregate_base_costs(crew: Iterable[CrewLine], gear: Iterable[GearLine],
                         oop: Optional[OOPCosts] = None) -> BaseCosts:
    """
    Sum crew, gear and out-of-pocket costs into the base cost.

    Lines without a line_total are totaled first. Empty inputs yield 0.
    """
    crew = [line if line.line_total is not None else normalise_crew_line(line) for line in crew]
    gear = [line if line.line_total is not None else normalise_gear_line(line) for line in gear]

    base_crew = sum_lines(crew)
    base_gear = sum_lines(gear)
    base_oop = sum_oop(oop)
    return BaseCosts(
        base_crew=base_crew,
        base_gear=base_gear,
        base_oop=base_oop,
        base_cost=round_currency(base_crew + base_gear + base_oop),
    )
