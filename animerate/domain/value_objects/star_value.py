"""Half-step star values shared by category and overall ratings."""
import math

from animerate.constants import RATING_STEP
from animerate.core.exceptions import ValidationError


def is_half_step(value: float) -> bool:
    """Check that a number sits on the 0.5 grid."""
    doubled = float(value) / RATING_STEP
    return math.isfinite(doubled) and doubled == round(doubled)


def validate_star_value(value, scale_max: float, label: str = "Rating") -> float:
    """Return ``value`` as float or raise ValidationError.

    Accepts ints and floats (not bools) in ``[0, scale_max]`` on the 0.5 grid.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{label} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ValidationError(f"{label} must be a finite number, got {value}")
    if value < 0:
        raise ValidationError(f"{label} cannot be negative, got {value}")
    if value > scale_max:
        raise ValidationError(f"{label} cannot exceed {scale_max}, got {value}")
    if not is_half_step(value):
        raise ValidationError(f"{label} must be a multiple of {RATING_STEP}, got {value}")
    return value

