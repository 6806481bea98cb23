"""Scalar helpers shared by the projectors."""

from __future__ import annotations

import numpy as np


def round_half_up(value: float) -> float:
    """Round to the nearest integer, ties towards +∞."""
    return float(np.floor(value + 0.5))


def round_to(value: float, digits: int) -> float:
    """Decimal rounding with ties away from zero."""
    scale = 10.0 ** digits
    return float(np.sign(value) * np.floor(abs(value) * scale + 0.5) / scale)
