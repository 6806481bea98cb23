"""
Baseline projector — hybrid exponential/logistic single-step predictions.

For a horizon of Δ years from the fixed base population P₀:

    P_exp       = P₀ · exp(r_eff · Δ)
    safeLogistic = σ(1 − P₀ / K)
    P_log       = P_exp · safeLogistic^(−0.3)
    predicted   = P_log · (1 + sentiment · 0.02)     ± 3 %

project_baseline_series() evaluates this independently for every year of
the horizon.  Each point is recomputed from P₀; nothing is chained from the
previous year, so the series is a family of single-step predictions rather
than a simulated trajectory.  The chained simulator lives in dynamics.py.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np
from scipy.special import expit

from ..errors import ComputationError
from .capacity import compute_carrying_capacity
from .effective_rate import effective_rate
from .numeric import round_half_up
from .params import DEFAULT_PARAMS, ForecastParams
from .results import StaticPrediction
from .types import MacroIndicators, PopulationPoint, PredictionInput


def predict_static(
    base_population: float,
    base_rate: float,
    prediction_input: PredictionInput,
    macro: MacroIndicators,
    carrying_capacity: Optional[float] = None,
    params: ForecastParams = DEFAULT_PARAMS,
) -> StaticPrediction:
    """Point prediction with ±band for prediction_input.target_year.

    Args:
        base_population:   Population at prediction_input.base_year.
        base_rate:         Historical baseline growth rate.
        prediction_input:  Scenario; only base/target years and deltas are read.
        macro:             Macro indicators.
        carrying_capacity: Precomputed K; computed from macro when omitted.
        params:            Forecast parameters.

    Returns:
        StaticPrediction with rounded, non-negative population figures.

    Raises:
        ComputationError: If the prediction is NaN or infinite.
    """
    years = max(0, prediction_input.target_year - prediction_input.base_year)
    r_eff = effective_rate(base_rate, prediction_input, params)
    capacity = (
        compute_carrying_capacity(base_population, macro, params)
        if carrying_capacity is None
        else carrying_capacity
    )

    p_exp = base_population * np.exp(r_eff * years)
    logistic_term = 1.0 - base_population / capacity
    safe_logistic = expit(logistic_term)
    p_log = p_exp * safe_logistic ** params.logistic_exponent
    world_influence = 1.0 + macro.sentiment * params.world_influence_coeff
    predicted = float(p_log * world_influence)

    if not np.isfinite(predicted):
        raise ComputationError(
            f"Non-finite prediction for {prediction_input.target_year} "
            f"(base={base_population}, r_eff={r_eff}, K={capacity})"
        )

    uncertainty = predicted * params.uncertainty_band
    return StaticPrediction(
        predicted=max(0.0, round_half_up(predicted)),
        lower=max(0.0, round_half_up(predicted - uncertainty)),
        upper=max(0.0, round_half_up(predicted + uncertainty)),
        adjusted_rate=r_eff,
        carrying_capacity=round_half_up(capacity),
    )


def project_baseline_series(
    base_population: float,
    base_rate: float,
    prediction_input: PredictionInput,
    macro: MacroIndicators,
    params: ForecastParams = DEFAULT_PARAMS,
) -> List[PopulationPoint]:
    """One independent prediction per year base_year+1 … target_year."""
    capacity = compute_carrying_capacity(base_population, macro, params)
    series: List[PopulationPoint] = []
    for year in range(prediction_input.base_year + 1, prediction_input.target_year + 1):
        step_input = prediction_input.copy_with(target_year=year)
        prediction = predict_static(
            base_population, base_rate, step_input, macro, capacity, params
        )
        series.append(
            PopulationPoint(
                year=year,
                value=prediction.predicted,
                lower_bound=prediction.lower,
                upper_bound=prediction.upper,
            )
        )
    return series
