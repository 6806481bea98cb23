"""
Regional feedback — coupling of active shocks back into the growth rate.

Each active shock contributes, weighted by the share of the regional
coefficient mass it touches:

    intensity       = severity · recoveryCurve
    migrationDrift += intensity · weight · 0.0035
    supportLift    += intensity · weight · 0.002      (only if intensity > 0)

weight = Σ coeff(affected) / Σ coeff(all)  if regions are given and known,
         1.0                                if no regions are given,
         0.2                                if none of the regions is known.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.params import DEFAULT_PARAMS, ForecastParams
from ..core.types import ShockEvent
from ..forecast.tables import RegionTable
from .shocks import active_shocks, recovery_curve


@dataclass(frozen=True)
class RegionalFeedback:
    migration_drift: float = 0.0
    support_lift: float = 0.0


def regional_weight(
    regions_affected: Sequence[str],
    table: Optional[RegionTable],
    params: ForecastParams = DEFAULT_PARAMS,
) -> float:
    if not regions_affected:
        return 1.0
    total = table.total_coefficient if table is not None else 0.0
    affected = sum(table.coefficient(r) for r in regions_affected) if table is not None else 0.0
    if affected <= 0.0 or total <= 0.0:
        return params.unknown_region_weight
    return affected / total


def compute_regional_feedback(
    shocks: Sequence[ShockEvent],
    year: int,
    table: Optional[RegionTable],
    params: ForecastParams = DEFAULT_PARAMS,
) -> RegionalFeedback:
    migration_drift = 0.0
    support_lift = 0.0
    for shock in active_shocks(shocks, year):
        intensity = shock.severity * recovery_curve(shock, year, params)
        weight = regional_weight(shock.regions_affected, table, params)
        migration_drift += intensity * weight * params.migration_drift_multiplier
        if intensity > 0:
            support_lift += intensity * weight * params.support_lift_multiplier
    return RegionalFeedback(migration_drift=migration_drift, support_lift=support_lift)
