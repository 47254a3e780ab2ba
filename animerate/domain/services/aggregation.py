"""Overall rating aggregation.

``overall = round_to_half(mean(values) / 2)``: category scores (0-10) are
averaged over every category, zeroes included, and rescaled to the 0-5
overall domain. Halves round up (away from zero), computed in decimal so a
binary float never flips a tie.
"""
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from animerate.constants import CATEGORY_SCALE_MAX, OVERALL_SCALE_MAX

_SCALE_FACTOR = CATEGORY_SCALE_MAX / OVERALL_SCALE_MAX


def round_to_half(value: float) -> float:
    """Round to the nearest 0.5, ties away from zero."""
    doubled = Decimal(repr(float(value))) * 2
    return float(doubled.quantize(Decimal("1"), rounding=ROUND_HALF_UP) / 2)


def compute_overall_rating(category_values: Iterable[float]) -> float:
    """Aggregate category values into the overall 0-5 rating.

    Returns 0.0 for an empty sequence.
    """
    values = [float(v) for v in category_values]
    if not values:
        return 0.0
    mean = math.fsum(values) / len(values)
    return round_to_half(mean / _SCALE_FACTOR)
