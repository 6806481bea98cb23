"""Shared fixtures for the population engine test suite."""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
import pytest

from population_engine.core.types import MacroIndicators, PredictionInput, SwingInputs
from population_engine.data.sources import (
    FALLBACK_POPULATION,
    StaticHistoricalSource,
    StaticMacroFactorsProvider,
)
from population_engine.forecast.tables import RegionTable, load_default_tables
from population_engine.service import PredictionService


@pytest.fixture
def fallback_series():
    return list(FALLBACK_POPULATION)


@pytest.fixture
def macro():
    """Macro indicators of the static provider (gdp 2.8, conflict 0.6, sentiment 0.2)."""
    return StaticMacroFactorsProvider().fetch()


@pytest.fixture
def neutral_macro():
    return MacroIndicators(gdp_growth=0.0, conflict_index=0.0, sentiment=0.0)


@pytest.fixture
def quiet_inputs():
    """Swing dials with no support, no geopolitics and no noise."""
    return SwingInputs(
        geopolitical_index=0.0,
        economic_cycle_position=0.0,
        international_support=0.0,
        volatility=0.0,
    )


@pytest.fixture
def region_table():
    return RegionTable.from_yaml()


@pytest.fixture
def tables():
    return load_default_tables()


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def war_input():
    return PredictionInput(
        base_year=2023,
        target_year=2030,
        birth_rate_change=-2.0,
        death_rate_change=1.5,
        migration_change=-3.0,
        economic_situation="weak",
        conflict_intensity="war",
        family_support="medium",
    )


@pytest.fixture
def offline_service():
    return PredictionService(
        history=StaticHistoricalSource(),
        macro=StaticMacroFactorsProvider(),
        seed=2024,
    )


@pytest.fixture
def war_payload():
    return {
        "baseYear": 2023,
        "targetYear": 2030,
        "birthRateChange": -2.0,
        "deathRateChange": 1.5,
        "migrationChange": -3.0,
        "economicSituation": "weak",
        "conflictIntensity": "war",
        "familySupport": "medium",
    }
