import math
from datetime import datetime, timezone
from typing import Optional

import numpy as np


def wrap_to_range(angle, min_val, max_val):
    """
    Wraps an angle to a given range [min_val, max_val).

    The length of the range (max_val - min_val) is assumed to be a full circle (2*pi or 360).

    Args:
        angle (float): The angle value to wrap.
        min_val (float): The minimum value of the range (inclusive).
        max_val (float): The maximum value of the range (exclusive).

    Returns:
        float: The wrapped angle.
    """
    span = max_val - min_val
    if span <= 0:
        raise ValueError("max_val must be greater than min_val.")

    # Wrap the angle to the range [min_val, max_val)
    wrapped = (angle - min_val) % span + min_val

    # Snap to min_val if the result is very close to max_val (due to float inaccuracies)
    if np.isclose(wrapped, max_val):
        return min_val

    return wrapped


def WrapTo360(deg):
    """
    Transform an angle in degrees to the range [0, 360).
    """
    return wrap_to_range(deg, 0.0, 360.0)


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from negative infinity.

    Python's round() uses banker's rounding (round(0.5) == 0); range, CPA,
    TCPA and priority weights all use the conventional half-up rule instead.
    """
    return int(math.floor(value + 0.5))


def clamp(value, min_val, max_val):
    """Clamp value into [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def is_finite(value: Optional[float]) -> bool:
    """True for a real, finite number. None and NaN/inf are not finite."""
    if value is None or isinstance(value, bool):
        return False
    try:
        return bool(np.isfinite(value))
    except TypeError:
        return False


def as_utc(value: datetime) -> datetime:
    """Treat a naive datetime as UTC; aware values are returned unchanged."""
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
