"""
Baseline growth-rate estimation from a noisy historical series.

Two regimes:
  1. ≥ min_points_for_weighted points inside [base_year − lookback, base_year]:
     pairwise log-growth rates, recency-weighted with w_k = exp(k / n)
     (k = 1 for the oldest pair, n = number of rates).
  2. Otherwise: two-point log-growth between the base point and its
     comparison point.

Values are floored at 1 before taking logs. The result is a plain float;
callers still guard against residual non-finiteness.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from .params import DEFAULT_PARAMS, ForecastParams
from .types import PopulationPoint, sorted_series


def _log_rate(earlier: PopulationPoint, later: PopulationPoint) -> float:
    year_diff = max(1, later.year - earlier.year)
    safe_earlier = max(1.0, float(earlier.value))
    safe_later = max(1.0, float(later.value))
    return float(np.log(safe_later / safe_earlier) / year_diff)


def select_base_point(series: Sequence[PopulationPoint], base_year: int) -> PopulationPoint:
    """Latest point with year ≤ base_year; the earliest point if none qualifies.

    Raises:
        ValueError: If the series is empty.
    """
    if not series:
        raise ValueError("select_base_point requires a non-empty series")
    ordered = sorted_series(series)
    candidate = ordered[0]
    for point in ordered:
        if point.year <= base_year and point.year >= candidate.year:
            candidate = point
    return candidate


def select_comparison_point(
    series: Sequence[PopulationPoint], base: PopulationPoint
) -> PopulationPoint:
    """Nearest later point; else the second-to-last point; else base itself."""
    ordered = sorted_series(series)
    for point in ordered:
        if point.year > base.year:
            return point
    if len(ordered) >= 2:
        return ordered[-2]
    return base


def recency_weighted_mean(rates: Sequence[float]) -> float:
    """Weighted mean with weights exp(k / n), k = 1..n from oldest to newest."""
    n = len(rates)
    weights = np.exp(np.arange(1, n + 1, dtype=np.float64) / n)
    return float(np.average(np.asarray(rates, dtype=np.float64), weights=weights))


def estimate_base_growth_rate(
    series: Sequence[PopulationPoint],
    base_year: int,
    lookback_years: Optional[int] = None,
    params: ForecastParams = DEFAULT_PARAMS,
) -> float:
    """Estimate the annual baseline growth rate.

    Args:
        series:         Historical points, any order.
        base_year:      Last year the estimate may look at.
        lookback_years: Window length; defaults to params.lookback_years.
        params:         Forecast parameters.

    Returns:
        Continuous annual growth rate (e.g. 0.0095 for ~0.95 %/yr).

    Raises:
        ValueError: If the series is empty.
    """
    if not series:
        raise ValueError("estimate_base_growth_rate requires a non-empty series")
    lookback = params.lookback_years if lookback_years is None else lookback_years

    ordered = sorted_series(series)
    window = [p for p in ordered if base_year - lookback <= p.year <= base_year]

    if len(window) >= params.min_points_for_weighted:
        rates: List[float] = []
        for prev, curr in zip(window[:-1], window[1:]):
            rate = _log_rate(prev, curr)
            if np.isfinite(rate):
                rates.append(rate)
        if rates:
            return recency_weighted_mean(rates)

    base = select_base_point(ordered, base_year)
    comparison = select_comparison_point(ordered, base)
    return _log_rate(base, comparison)
