"""
ForecastParams — Immutable hyperparameter pack for the forecast engine.

All growth, capacity, swing, shock and support constants live here.
Changing one number changes the demography of the projection.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict


@dataclass(frozen=True)
class ForecastParams:
    """
    Complete parameter specification for one forecast run.

    Organized by subsystem:
      - Growth-rate estimation
      - Carrying capacity
      - Static effective rate
      - Baseline projector
      - Swing factors (economic cycle, geopolitics, support, sentiment, noise)
      - Shocks and regional feedback
      - Support softening
    """

    # ── Growth-rate estimation ─────────────────────────────────────────── #
    lookback_years: int = 30
    """Historical window (years before base year) used by the estimator."""
    min_points_for_weighted: int = 3
    """Minimum in-window points before recency-weighted averaging is used."""

    # ── Carrying capacity ──────────────────────────────────────────────── #
    capacity_base_multiplier: float = 1.3
    """Maximum potential population as a multiple of the base population."""
    capacity_econ_coeff: float = 0.05
    capacity_conflict_coeff: float = 0.1
    capacity_support_coeff: float = 0.05
    capacity_floor_multiplier: float = 1.01
    """K never drops below population × this factor."""

    # ── Static effective rate ──────────────────────────────────────────── #
    w_birth: float = 0.002
    w_death: float = 0.002
    w_migration: float = 0.001
    w_economic: float = 0.0003
    w_conflict: float = 0.0015
    w_support: float = 0.0008
    rate_change_scale: float = 10.0
    """Divisor applied to percentage deltas before tanh saturation."""
    max_effective_rate: float = 0.02
    """r_eff is clamped to [-max_effective_rate, +max_effective_rate]."""

    # ── Baseline projector ─────────────────────────────────────────────── #
    logistic_exponent: float = -0.3
    world_influence_coeff: float = 0.02
    uncertainty_band: float = 0.03

    # ── Swing factors ──────────────────────────────────────────────────── #
    cycle_length: float = 9.5
    """Nominal economic cycle length (years) used for cyclePhase."""
    cycle_period_base: float = 9.5
    cycle_period_sentiment_slope: float = 2.0
    cycle_period_min: float = 6.5
    cycle_period_max: float = 11.5
    cycle_amplitude_base: float = 0.01
    cycle_amplitude_gdp_slope: float = 0.004
    cycle_geo_coupling: float = 0.4
    cycle_position_scale: float = 100.0
    geopolitical_multiplier: float = 0.008
    conflict_penalty_factor: float = 0.6
    conflict_penalty_min: float = 0.25
    conflict_penalty_max: float = 1.0
    support_base_multiplier: float = 0.004
    support_sentiment_multiplier: float = 0.003
    sentiment_multiplier: float = 0.003
    volatility_base: float = 0.01
    volatility_conflict_coeff: float = 0.5

    # ── Shocks and regional feedback ───────────────────────────────────── #
    recovery_curve_rate: float = 5.0
    shock_population_multiplier: float = 0.04
    migration_drift_multiplier: float = 0.0035
    support_lift_multiplier: float = 0.002
    unknown_region_weight: float = 0.2

    # ── Support softening ──────────────────────────────────────────────── #
    support_softening_factor: float = 0.5
    """Negative growth is scaled by (1 - supportLevel × factor)."""

    def __post_init__(self) -> None:
        assert self.lookback_years >= 0, "lookback_years must be >= 0"
        assert self.min_points_for_weighted >= 2
        assert self.capacity_floor_multiplier > 1.0, \
            "capacity_floor_multiplier must exceed 1.0 so K > population"
        assert self.max_effective_rate > 0.0
        assert self.rate_change_scale > 0.0
        assert self.cycle_length > 0.0
        assert 0.0 < self.cycle_period_min <= self.cycle_period_max
        assert self.conflict_penalty_min <= self.conflict_penalty_max
        assert 0.0 <= self.support_softening_factor <= 1.0, \
            "support_softening_factor outside [0, 1] would flip the sign of growth"
        assert self.uncertainty_band >= 0.0

    def copy_with(self, **kwargs: Any) -> "ForecastParams":
        """Return a new ForecastParams with selected fields overridden."""
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to plain dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_PARAMS = ForecastParams()
