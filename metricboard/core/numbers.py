"""Metricboard — Numeric Coercion for backend values."""

import math
from typing import Any, Optional


def safe_float(value: Any) -> Optional[float]:
    """Convert a backend value to a finite float; None if it is not one.

    Booleans, unparseable strings, NaN and infinity all count as missing.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def num(value: Any, default: float = 0.0) -> float:
    """Like safe_float, but missing values become ``default``."""
    result = safe_float(value)
    return default if result is None else result
