"""
Shock overlay — direct population effect of active shock events.

For each shock active in year y (0 ≤ y − shock.year ≤ recoveryYears):

    phase         = distance / max(1, recoveryYears)
    recoveryCurve = 1 − exp(−5 · phase)
    modifier     += severity · recoveryCurve · 0.04

populationAfterShock = max(0, steppedPopulation · (1 + modifier)).

The recovery curve is zero in the impact year itself and saturates towards
one as the window closes.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from ..core.params import DEFAULT_PARAMS, ForecastParams
from ..core.types import ShockEvent


def recovery_curve(
    shock: ShockEvent, year: int, params: ForecastParams = DEFAULT_PARAMS
) -> float:
    """Recovery-curve value of an active shock (caller checks activity)."""
    distance = year - shock.year
    phase = distance / max(1, shock.recovery_years)
    return float(1.0 - np.exp(-params.recovery_curve_rate * phase))


def active_shocks(shocks: Sequence[ShockEvent], year: int) -> Tuple[ShockEvent, ...]:
    return tuple(s for s in shocks if s.is_active(year))


def shock_modifier(
    shocks: Sequence[ShockEvent],
    year: int,
    params: ForecastParams = DEFAULT_PARAMS,
) -> float:
    """Summed population modifier of all shocks active in year."""
    modifier = 0.0
    for shock in active_shocks(shocks, year):
        modifier += shock.severity * recovery_curve(shock, year, params) \
            * params.shock_population_multiplier
    return modifier


def apply_shock_modifier(
    population: float,
    year: int,
    shocks: Sequence[ShockEvent],
    params: ForecastParams = DEFAULT_PARAMS,
) -> Tuple[float, float]:
    """Returns (population_after_shock, modifier)."""
    modifier = shock_modifier(shocks, year, params)
    return max(0.0, population * (1.0 + modifier)), modifier


def active_severity(shocks: Sequence[ShockEvent], year: int) -> float:
    """Sum of severities of the shocks active in year."""
    return float(sum(s.severity for s in active_shocks(shocks, year)))
