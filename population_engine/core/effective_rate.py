"""
Static effective growth rate r_eff (used by the non-iterative baseline only).

    r_eff = base
          + w_birth     · tanh(Δbirth / 10)
          − w_death     · tanh(Δdeath / 10)
          + w_migration · tanh(Δmigration / 10)
          + w_econ      · econ(economicSituation)
          − w_conflict  · conflict(conflictIntensity)
          + w_support   · support(familySupport)

clamped to [−0.02, +0.02].
"""

from __future__ import annotations

from typing import Dict

import numpy as np

from .params import DEFAULT_PARAMS, ForecastParams
from .types import (
    ConflictIntensity,
    EconomicSituation,
    FamilySupport,
    PredictionInput,
    require_complete,
)

ECONOMIC_EFFECT: Dict[EconomicSituation, float] = {
    EconomicSituation.WEAK: -1.0,
    EconomicSituation.STABLE: 0.0,
    EconomicSituation.GROWING: 1.0,
}

CONFLICT_EFFECT: Dict[ConflictIntensity, float] = {
    ConflictIntensity.PEACE: -0.2,
    ConflictIntensity.TENSION: 0.5,
    ConflictIntensity.WAR: 1.0,
}

FAMILY_SUPPORT_EFFECT: Dict[FamilySupport, float] = {
    FamilySupport.LOW: 0.0,
    FamilySupport.MEDIUM: 0.4,
    FamilySupport.STRONG: 1.0,
}

require_complete(ECONOMIC_EFFECT, EconomicSituation, "ECONOMIC_EFFECT")
require_complete(CONFLICT_EFFECT, ConflictIntensity, "CONFLICT_EFFECT")
require_complete(FAMILY_SUPPORT_EFFECT, FamilySupport, "FAMILY_SUPPORT_EFFECT")


def effective_rate(
    base_rate: float,
    prediction_input: PredictionInput,
    params: ForecastParams = DEFAULT_PARAMS,
) -> float:
    """Fold scenario deltas into a single bounded annual rate."""
    scale = params.rate_change_scale
    r_eff = (
        base_rate
        + params.w_birth * np.tanh(prediction_input.birth_rate_change / scale)
        - params.w_death * np.tanh(prediction_input.death_rate_change / scale)
        + params.w_migration * np.tanh(prediction_input.migration_change / scale)
        + params.w_economic * ECONOMIC_EFFECT[prediction_input.economic_situation]
        - params.w_conflict * CONFLICT_EFFECT[prediction_input.conflict_intensity]
        + params.w_support * FAMILY_SUPPORT_EFFECT[prediction_input.family_support]
    )
    limit = params.max_effective_rate
    return float(np.clip(r_eff, -limit, limit))
