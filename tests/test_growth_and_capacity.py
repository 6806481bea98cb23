"""
Tests for the growth-rate estimator, carrying capacity and effective rate.
"""

import numpy as np
import pytest

from population_engine.core.capacity import compute_carrying_capacity
from population_engine.core.effective_rate import effective_rate
from population_engine.core.growth_rate import (
    estimate_base_growth_rate,
    recency_weighted_mean,
    select_base_point,
    select_comparison_point,
)
from population_engine.core.params import DEFAULT_PARAMS
from population_engine.core.types import MacroIndicators, PopulationPoint


def test_two_point_estimate():
    """Two points 10 years apart give ln(44/40)/10."""
    series = [PopulationPoint(2010, 40_000_000.0), PopulationPoint(2020, 44_000_000.0)]
    rate = estimate_base_growth_rate(series, 2010)
    assert rate == pytest.approx(np.log(44 / 40) / 10)
    assert rate == pytest.approx(0.00953, abs=1e-5)


def test_weighted_estimate_favours_recent_rates():
    series = [
        PopulationPoint(2000, 100.0),
        PopulationPoint(2001, 110.0),
        PopulationPoint(2002, 110.0),
        PopulationPoint(2003, 110.0),
    ]
    rate = estimate_base_growth_rate(series, 2003)
    rates = [np.log(1.1), 0.0, 0.0]
    assert rate == pytest.approx(recency_weighted_mean(rates))
    # The oldest rate carries the smallest weight.
    assert rate < np.mean(rates)


def test_estimate_on_fallback_series_is_negative(fallback_series):
    rate = estimate_base_growth_rate(fallback_series, 2023)
    assert np.isfinite(rate)
    assert -0.02 < rate < 0.0


def test_lookback_window_limits_points(fallback_series):
    # Only 2021..2023 fall inside a 2-year window.
    rate = estimate_base_growth_rate(fallback_series, 2023, lookback_years=2)
    expected = recency_weighted_mean([
        np.log(41_100_000 / 41_500_000),
        np.log(40_800_000 / 41_100_000),
    ])
    assert rate == pytest.approx(expected)


def test_zero_values_are_floored():
    series = [PopulationPoint(2000, 0.0), PopulationPoint(2005, 0.0)]
    assert estimate_base_growth_rate(series, 2000) == 0.0


def test_empty_series_raises():
    with pytest.raises(ValueError):
        estimate_base_growth_rate([], 2020)


def test_base_and_comparison_points(fallback_series):
    base = select_base_point(fallback_series, 2030)
    assert base.year == 2023
    assert select_comparison_point(fallback_series, base).year == 2022

    early = select_base_point(fallback_series, 1990)
    assert early.year == 2010
    assert select_comparison_point(fallback_series, early).year == 2011


def test_capacity_never_below_floor():
    population = 41_100_000.0
    for gdp in (-50.0, -5.0, 0.0, 2.8, 10.0):
        for conflict in (0.0, 0.5, 1.0):
            for sentiment in (-1.0, 0.0, 1.0):
                macro = MacroIndicators(gdp_growth=gdp, conflict_index=conflict, sentiment=sentiment)
                capacity = compute_carrying_capacity(population, macro)
                assert capacity >= population * 1.01


def test_capacity_formula(macro):
    population = 41_100_000.0
    expected = (
        population * 1.3
        * (1 + 0.05 * np.log(1 + 2.8 / 100))
        * (1 + 0.2 * 0.05)
        / np.exp(0.6 * 0.1)
    )
    assert compute_carrying_capacity(population, macro) == pytest.approx(expected)


def test_effective_rate_is_clamped(war_input):
    assert effective_rate(0.5, war_input) == DEFAULT_PARAMS.max_effective_rate
    assert effective_rate(-0.5, war_input) == -DEFAULT_PARAMS.max_effective_rate


def test_effective_rate_categorical_terms(war_input):
    neutral = war_input.copy_with(
        birth_rate_change=0.0,
        death_rate_change=0.0,
        migration_change=0.0,
    )
    # weak economy, war, medium family support
    expected = -0.0003 - 0.0015 + 0.0008 * 0.4
    assert effective_rate(0.0, neutral) == pytest.approx(expected)
