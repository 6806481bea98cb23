"""Support softening: international support dampens negative growth only."""

from __future__ import annotations

from ..core.params import DEFAULT_PARAMS, ForecastParams


def apply_support_softening(
    adjusted_rate: float,
    support_level: float,
    params: ForecastParams = DEFAULT_PARAMS,
) -> float:
    """adjusted · (1 − support · factor) when negative, unchanged otherwise."""
    if adjusted_rate < 0:
        return adjusted_rate * (1.0 - support_level * params.support_softening_factor)
    return adjusted_rate
