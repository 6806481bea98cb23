"""
Swing factors — multi-factor yearly adjustment of the baseline growth rate.

Components (all additive, per year):
  ecoCycle      sin(2π(t + cyclePos·100) / period) · amplitude · (1 + geo·0.4)
                period    = clamp(9.5 − sentiment·2, 6.5, 11.5)
                amplitude = 0.01 + |clamp(gdp/5, −2, 2)| · 0.004
  geopolitical  geo · 0.008 · clamp(1 − conflictIndex·0.6, 0.25, 1)
  support       internationalSupport · (0.004 + max(sentiment, 0) · 0.003)
  sentiment     sentiment · 0.003
  volatility    (u − 0.5) · 0.01 · volatility · (1 + conflictIndex·0.5),
                u ~ U[0, 1) drawn from the injected generator

The regional-feedback slot is filled later by the dynamics engine.
"""

from __future__ import annotations

import numpy as np

from ..core.params import DEFAULT_PARAMS, ForecastParams
from ..core.types import MacroIndicators, SwingComponentBreakdown, SwingInputs


def cycle_period(macro: MacroIndicators, params: ForecastParams = DEFAULT_PARAMS) -> float:
    """Sentiment-dependent length of the economic cycle in years."""
    return float(np.clip(
        params.cycle_period_base - macro.sentiment * params.cycle_period_sentiment_slope,
        params.cycle_period_min,
        params.cycle_period_max,
    ))


def cycle_amplitude(macro: MacroIndicators, params: ForecastParams = DEFAULT_PARAMS) -> float:
    normalized_gdp = float(np.clip(macro.gdp_growth / 5.0, -2.0, 2.0))
    return params.cycle_amplitude_base + abs(normalized_gdp) * params.cycle_amplitude_gdp_slope


def swing_components(
    base_rate: float,
    year_offset: int,
    inputs: SwingInputs,
    macro: MacroIndicators,
    rng: np.random.Generator,
    params: ForecastParams = DEFAULT_PARAMS,
) -> SwingComponentBreakdown:
    """Compute one year's swing decomposition.

    Exactly one uniform draw is taken from rng per call, whether or not
    volatility is zero, so runs that differ only in dial values consume
    identical random streams.

    Args:
        base_rate:   Historical baseline growth rate.
        year_offset: Years since the projection start (1 for the first year).
        inputs:      Scenario swing dials.
        macro:       Macro indicators.
        rng:         Per-call random source.
        params:      Forecast parameters.

    Returns:
        SwingComponentBreakdown with regional_feedback = 0.
    """
    geo = inputs.geopolitical_index

    angle = (
        2.0 * np.pi
        * (year_offset + inputs.economic_cycle_position * params.cycle_position_scale)
        / cycle_period(macro, params)
    )
    eco_cycle = (
        np.sin(angle) * cycle_amplitude(macro, params) * (1.0 + geo * params.cycle_geo_coupling)
    )

    conflict_penalty = np.clip(
        1.0 - macro.conflict_index * params.conflict_penalty_factor,
        params.conflict_penalty_min,
        params.conflict_penalty_max,
    )
    geopolitical = geo * params.geopolitical_multiplier * conflict_penalty

    support = inputs.international_support * (
        params.support_base_multiplier
        + max(macro.sentiment, 0.0) * params.support_sentiment_multiplier
    )
    sentiment = macro.sentiment * params.sentiment_multiplier

    draw = rng.random()
    volatility = (
        (draw - 0.5)
        * params.volatility_base
        * inputs.volatility
        * (1.0 + macro.conflict_index * params.volatility_conflict_coeff)
    )

    return SwingComponentBreakdown(
        base=float(base_rate),
        eco_cycle=float(eco_cycle),
        geopolitical=float(geopolitical),
        support=float(support),
        sentiment=float(sentiment),
        volatility=float(volatility),
        regional_feedback=0.0,
    )
