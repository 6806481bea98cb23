"""
Dynamic carrying capacity K from macro indicators.

    baseK          = P · 1.3
    econEffect     = 1 + 0.05 · ln(1 + gdpGrowth / 100)
    conflictPenalty = exp(conflictIndex · 0.1)
    supportBoost   = 1 + sentiment · 0.05
    K              = max(baseK · econEffect · supportBoost / conflictPenalty, P · 1.01)

The support boost is driven by the macro sentiment, not by the scenario's
internationalSupport dial.
"""

from __future__ import annotations

import numpy as np

from .params import DEFAULT_PARAMS, ForecastParams
from .types import MacroIndicators


def compute_carrying_capacity(
    population: float,
    macro: MacroIndicators,
    params: ForecastParams = DEFAULT_PARAMS,
) -> float:
    """Logistic ceiling for a base population under the given macro regime.

    Args:
        population: Base population (≥ 0).
        macro:      Macro indicators, constant across the horizon.
        params:     Forecast parameters.

    Returns:
        K ≥ population × capacity_floor_multiplier.
    """
    base_k = population * params.capacity_base_multiplier
    econ_effect = 1.0 + params.capacity_econ_coeff * np.log1p(macro.gdp_growth / 100.0)
    conflict_penalty = np.exp(macro.conflict_index * params.capacity_conflict_coeff)
    support_boost = 1.0 + macro.sentiment * params.capacity_support_coeff
    capacity = base_k * econ_effect * support_boost / conflict_penalty
    return float(max(capacity, population * params.capacity_floor_multiplier))
