"""
Tests for the swing, shock, policy, regional-feedback and support systems.
"""

import numpy as np
import pytest

from population_engine.core.params import DEFAULT_PARAMS
from population_engine.core.types import MacroIndicators, ShockEvent, SwingInputs
from population_engine.systems.policy import (
    apply_policy_responses,
    select_policy_template,
)
from population_engine.systems.regional_feedback import (
    compute_regional_feedback,
    regional_weight,
)
from population_engine.systems.shocks import (
    active_severity,
    apply_shock_modifier,
    recovery_curve,
    shock_modifier,
)
from population_engine.systems.support import apply_support_softening
from population_engine.systems.swing import cycle_amplitude, cycle_period, swing_components


# ─── Policy ─────────────────────────────────────────────────────────────── #

def test_policy_template_thresholds():
    assert select_policy_template(0.9).label == "Гуманітарний прорив"
    assert select_policy_template(0.7).label == "Гуманітарний прорив"
    assert select_policy_template(0.69).label == "Стабілізаційна місія"
    assert select_policy_template(0.4).label == "Стабілізаційна місія"
    assert select_policy_template(0.39).label == "Обмежена реакція"
    assert select_policy_template(0.0).label == "Обмежена реакція"


def test_no_shocks_no_policy():
    assert apply_policy_responses((), 0.9) == ((), ())


def test_high_support_mitigates_shocks():
    shock = ShockEvent(2025, -0.5, 3, ("UA-14",))
    adjusted, policies = apply_policy_responses((shock,), 0.8)

    assert adjusted[0].severity == pytest.approx(-0.41)
    assert adjusted[0].recovery_years == 2  # round(2.4)
    assert adjusted[0].regions_affected == ("UA-14",)
    assert shock.severity == -0.5
    assert len(policies) == 1
    assert policies[0].severity_modifier == 0.82
    assert policies[0].recovery_modifier == 0.8


def test_low_support_amplifies_shocks():
    adjusted, policies = apply_policy_responses((ShockEvent(2025, -0.5, 3),), 0.1)
    assert adjusted[0].severity == pytest.approx(-0.525)
    assert adjusted[0].recovery_years == 3  # round(3.3)
    assert policies[0].label == "Обмежена реакція"


def test_recovery_never_below_one_year():
    adjusted, _ = apply_policy_responses((ShockEvent(2025, -0.5, 1),), 0.9)
    assert adjusted[0].recovery_years == 1


def test_one_policy_summary_for_many_shocks():
    shocks = (ShockEvent(2025, -0.5, 3), ShockEvent(2027, 0.3, 2))
    adjusted, policies = apply_policy_responses(shocks, 0.5)
    assert len(adjusted) == 2
    assert len(policies) == 1


# ─── Shocks ─────────────────────────────────────────────────────────────── #

def test_recovery_curve_shape():
    shock = ShockEvent(2024, -0.5, 4)
    assert recovery_curve(shock, 2024) == 0.0
    assert recovery_curve(shock, 2026) == pytest.approx(1 - np.exp(-2.5))
    assert recovery_curve(shock, 2028) == pytest.approx(1 - np.exp(-5.0))


def test_shock_modifiers_add_up():
    shocks = (ShockEvent(2024, -0.5, 4), ShockEvent(2025, 0.25, 2))
    expected = (
        -0.5 * (1 - np.exp(-5 * 2 / 4)) * 0.04
        + 0.25 * (1 - np.exp(-5 * 1 / 2)) * 0.04
    )
    assert shock_modifier(shocks, 2026) == pytest.approx(expected)
    assert active_severity(shocks, 2026) == pytest.approx(-0.25)
    assert shock_modifier(shocks, 2030) == 0.0


def test_shock_overlay_never_negative():
    params = DEFAULT_PARAMS.copy_with(shock_population_multiplier=2.0)
    population, modifier = apply_shock_modifier(
        100.0, 2028, (ShockEvent(2024, -1.0, 4),), params
    )
    assert modifier < -1.0
    assert population == 0.0


# ─── Regional feedback ──────────────────────────────────────────────────── #

def test_regional_weight_cases(region_table):
    assert regional_weight((), region_table) == 1.0
    assert regional_weight(("Atlantis",), region_table) == DEFAULT_PARAMS.unknown_region_weight
    assert regional_weight(("UA-14",), None) == DEFAULT_PARAMS.unknown_region_weight
    assert regional_weight(("UA-14",), region_table) == pytest.approx(
        4.06 / region_table.total_coefficient
    )
    # Names and labels resolve to the same entry as codes.
    assert regional_weight(("Donetsk Oblast",), region_table) == regional_weight(
        ("UA-14",), region_table
    )


def test_feedback_drift_and_lift(region_table):
    negative = ShockEvent(2024, -0.6, 4)
    feedback = compute_regional_feedback((negative,), 2026, region_table)
    intensity = -0.6 * (1 - np.exp(-2.5))
    assert feedback.migration_drift == pytest.approx(intensity * 0.0035)
    assert feedback.support_lift == 0.0

    positive = ShockEvent(2024, 0.6, 4, ("UA-14",))
    feedback = compute_regional_feedback((positive,), 2026, region_table)
    weight = 4.06 / region_table.total_coefficient
    assert feedback.migration_drift == pytest.approx(-intensity * weight * 0.0035)
    assert feedback.support_lift == pytest.approx(-intensity * weight * 0.002)


def test_feedback_outside_window_is_zero(region_table):
    feedback = compute_regional_feedback((ShockEvent(2024, -0.6, 2),), 2027, region_table)
    assert feedback.migration_drift == 0.0
    assert feedback.support_lift == 0.0


# ─── Support softening ──────────────────────────────────────────────────── #

def test_softening_only_touches_negative_growth():
    assert apply_support_softening(-0.01, 0.6) == pytest.approx(-0.01 * 0.7)
    assert apply_support_softening(-0.01, 0.0) == -0.01
    assert apply_support_softening(0.01, 1.0) == 0.01
    assert apply_support_softening(0.0, 1.0) == 0.0


# ─── Swing ──────────────────────────────────────────────────────────────── #

def test_cycle_period_and_amplitude_clamps():
    assert cycle_period(MacroIndicators(sentiment=-1.0)) == 11.5
    assert cycle_period(MacroIndicators(sentiment=1.0)) == 7.5
    assert cycle_period(MacroIndicators(sentiment=0.0)) == 9.5
    assert cycle_amplitude(MacroIndicators(gdp_growth=20.0)) == pytest.approx(0.018)
    assert cycle_amplitude(MacroIndicators(gdp_growth=-5.0)) == pytest.approx(0.014)


def test_swing_component_values():
    macro = MacroIndicators(gdp_growth=0.0, conflict_index=1.0, sentiment=0.5)
    inputs = SwingInputs(
        geopolitical_index=-1.0,
        economic_cycle_position=0.0,
        international_support=0.6,
        volatility=0.0,
    )
    comps = swing_components(-0.005, 2, inputs, macro, np.random.default_rng(0))

    assert comps.base == -0.005
    assert comps.geopolitical == pytest.approx(-0.008 * 0.4)
    assert comps.support == pytest.approx(0.6 * (0.004 + 0.5 * 0.003))
    assert comps.sentiment == pytest.approx(0.0015)
    assert comps.volatility == 0.0
    assert comps.regional_feedback == 0.0
    assert comps.eco_cycle == pytest.approx(np.sin(2 * np.pi * 2 / 8.5) * 0.01 * 0.6)


def test_swing_draws_exactly_once():
    macro = MacroIndicators()
    for volatility in (0.0, 0.7):
        rng = np.random.default_rng(42)
        reference = np.random.default_rng(42)
        swing_components(-0.01, 1, SwingInputs(volatility=volatility), macro, rng)
        reference.random()
        assert rng.random() == reference.random()


def test_volatility_noise_is_centred():
    macro = MacroIndicators(conflict_index=0.0)
    inputs = SwingInputs(volatility=1.0)
    rng = np.random.default_rng(7)
    draws = [
        swing_components(0.0, 1, inputs, macro, rng).volatility for _ in range(2000)
    ]
    assert max(abs(d) for d in draws) <= 0.005
    assert abs(np.mean(draws)) < 5e-4
