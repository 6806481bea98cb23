"""
Tests for the one-at-a-time sensitivity analyzer.
"""

import numpy as np
import pytest

from population_engine.analysis.sensitivity import (
    SENSITIVITY_AXES,
    SensitivityAnalyzer,
    SensitivityAxis,
)
from population_engine.core.dynamics import project_with_dynamics
from population_engine.core.types import MacroIndicators, ShockEvent, SwingInputs

_RUN = dict(
    initial_population=40_800_000.0,
    base_rate=-0.03,
    carrying_capacity=45_000_000.0,
    start_year=2023,
    end_year=2035,
)


@pytest.fixture
def shrinking_macro():
    return MacroIndicators(gdp_growth=0.0, conflict_index=0.5, sentiment=0.0)


@pytest.fixture
def shrinking_inputs():
    return SwingInputs(
        geopolitical_index=-0.5,
        economic_cycle_position=0.4,
        international_support=0.6,
        volatility=0.2,
    )


def test_axes_order_and_labels():
    assert [a.id for a in SENSITIVITY_AXES] == [
        "geo-plus", "geo-minus",
        "support-plus", "support-minus",
        "volatility-plus", "volatility-minus",
        "cycle-plus",
    ]
    assert SENSITIVITY_AXES[0].delta_label == "+0.1"
    assert SENSITIVITY_AXES[1].delta_label == "-0.1"


def test_axis_apply_clamps():
    axis = SensitivityAxis("support-plus", "International support",
                           "international_support", 0.1, 0.0, 1.0)
    assert axis.apply(SwingInputs(international_support=0.95)).international_support == 1.0
    assert axis.apply(SwingInputs(international_support=0.5)).international_support == \
        pytest.approx(0.6)


def test_more_support_never_hurts_a_shrinking_population(shrinking_macro, shrinking_inputs):
    primary = project_with_dynamics(
        inputs=shrinking_inputs, macro=shrinking_macro,
        rng=np.random.default_rng(17), **_RUN,
    )
    assert all(p.growth_rate < 0 for p in primary.series)

    result = SensitivityAnalyzer().analyze(
        inputs=shrinking_inputs, macro=shrinking_macro, seed=17, **_RUN
    )
    plus = result.variation("support-plus")
    minus = result.variation("support-minus")
    assert plus.predicted_population >= minus.predicted_population
    assert plus.predicted_population >= result.baseline_population >= minus.predicted_population


def test_baseline_matches_primary_run_with_same_seed(shrinking_macro, shrinking_inputs):
    primary = project_with_dynamics(
        inputs=shrinking_inputs, macro=shrinking_macro,
        rng=np.random.default_rng(99), **_RUN,
    )
    result = SensitivityAnalyzer().analyze(
        inputs=shrinking_inputs, macro=shrinking_macro, seed=99, **_RUN
    )
    assert result.baseline_population == primary.final_value
    assert result.baseline_volatility == primary.metadata.volatility_range


def test_variant_at_bound_equals_baseline(shrinking_macro):
    inputs = SwingInputs(international_support=1.0, volatility=0.4)
    result = SensitivityAnalyzer().analyze(inputs=inputs, macro=shrinking_macro, seed=3, **_RUN)
    assert result.variation("support-plus").predicted_population == result.baseline_population
    assert result.variation("support-minus").predicted_population != result.baseline_population


def test_same_seed_is_deterministic(macro):
    inputs = SwingInputs(volatility=0.8, shock_events=(ShockEvent(2027, -0.7, 3),))
    analyzer = SensitivityAnalyzer()
    first = analyzer.analyze(inputs=inputs, macro=macro, seed=5, **_RUN)
    second = analyzer.analyze(inputs=inputs, macro=macro, seed=5, **_RUN)
    assert first.to_dict() == second.to_dict()
    assert len(first.variations) == 7


def test_seed_drawn_from_rng_is_reproducible(macro):
    inputs = SwingInputs(volatility=0.8)
    analyzer = SensitivityAnalyzer()
    first = analyzer.analyze(inputs=inputs, macro=macro, rng=np.random.default_rng(1), **_RUN)
    second = analyzer.analyze(inputs=inputs, macro=macro, rng=np.random.default_rng(1), **_RUN)
    assert first == second


def test_empty_horizon_reports_initial_population(macro):
    run = dict(_RUN, end_year=2023)
    result = SensitivityAnalyzer().analyze(inputs=SwingInputs(), macro=macro, seed=0, **run)
    assert result.baseline_population == 40_800_000.0
    assert result.baseline_volatility == 0.0
    assert all(v.predicted_population == 40_800_000.0 for v in result.variations)


def test_unknown_variation_raises(macro):
    result = SensitivityAnalyzer().analyze(inputs=SwingInputs(), macro=macro, seed=0, **_RUN)
    with pytest.raises(KeyError):
        result.variation("gdp-plus")
