"""
Tests for the YAML configuration loader.
"""

import os

import pytest

from population_engine.config import build_macro, build_params, load_config, load_scenario
from population_engine.core.params import DEFAULT_PARAMS
from population_engine.core.types import ConflictIntensity, MacroIndicators
from population_engine.errors import ValidationError

DEFAULT_CONFIG = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "configs", "default.yaml"
)


def test_packaged_config_round_trips_to_defaults():
    config = load_config(DEFAULT_CONFIG)
    assert build_params(config) == DEFAULT_PARAMS
    assert build_macro(config) == MacroIndicators(gdp_growth=2.8, conflict_index=0.6, sentiment=0.2)


def test_packaged_scenario():
    scenario = load_scenario(load_config(DEFAULT_CONFIG))
    assert scenario is not None
    assert (scenario.base_year, scenario.target_year) == (2023, 2035)
    assert scenario.conflict_intensity is ConflictIntensity.WAR
    swing = scenario.swing_inputs
    assert swing.international_support == 0.6
    assert len(swing.shock_events) == 1
    shock = swing.shock_events[0]
    assert (shock.year, shock.severity, shock.recovery_years) == (2026, -0.5, 4)
    assert shock.regions_affected == ("UA-14", "UA-09")


def test_overrides_apply_per_section():
    params = build_params({
        "swing": {"geopolitical_multiplier": 0.01},
        "support": {"support_softening_factor": 0.25},
    })
    assert params.geopolitical_multiplier == 0.01
    assert params.support_softening_factor == 0.25
    assert params.volatility_base == DEFAULT_PARAMS.volatility_base


def test_unknown_keys_warn():
    with pytest.warns(UserWarning, match="not_a_param"):
        params = build_params({"swing": {"not_a_param": 1.0, "volatility_base": 0.02}})
    assert params.volatility_base == 0.02

    with pytest.warns(UserWarning, match="mystery"):
        build_params({"mystery": {"x": 1}})


def test_field_in_wrong_section_is_ignored():
    with pytest.warns(UserWarning):
        params = build_params({"growth": {"w_birth": 0.5}})
    assert params.w_birth == DEFAULT_PARAMS.w_birth


def test_empty_and_missing_files(tmp_path):
    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    assert load_config(empty) == {}
    assert load_scenario({}) is None
    assert build_macro({}) is None

    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")

    listing = tmp_path / "list.yaml"
    listing.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_config(listing)


def test_camel_case_scenario_keys_are_accepted():
    scenario = load_scenario({
        "scenario": {
            "baseYear": 2023,
            "targetYear": 2030,
            "birthRateChange": 0.0,
            "deathRateChange": 0.0,
            "migrationChange": 0.0,
            "economicSituation": "stable",
            "conflictIntensity": "peace",
            "familySupport": "strong",
        }
    })
    assert scenario.horizon == 7
    assert scenario.swing_inputs is None


def test_invalid_scenario_raises_validation_error():
    with pytest.raises(ValidationError):
        load_scenario({"scenario": {"base_year": 2023, "target_year": 2020}})


def test_scenario_shock_regions_must_be_a_list():
    block = {
        "base_year": 2023,
        "target_year": 2030,
        "birth_rate_change": 0.0,
        "death_rate_change": 0.0,
        "migration_change": 0.0,
        "economic_situation": "stable",
        "conflict_intensity": "tension",
        "family_support": "medium",
        "swing_inputs": {
            "shock_events": [
                {"year": 2026, "severity": -0.4, "recovery_years": 2, "regions_affected": "UA-46"},
            ],
        },
    }
    with pytest.raises(ValidationError) as excinfo:
        load_scenario({"scenario": block})
    assert excinfo.value.field == "shockEvent.regionsAffected"
