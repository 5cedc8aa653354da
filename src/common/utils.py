"""Common utility functions."""

import math
from typing import Any


def is_numeric(value: Any) -> bool:
    """True for finite ints, floats and numeric strings. Booleans are not numbers here."""
    if isinstance(value, bool) or value is None:
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str):
        try:
            return math.isfinite(float(value.strip()))
        except ValueError:
            return False
    return False
