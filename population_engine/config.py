"""
config.py — YAML configuration loader for the forecast engine.

Loads a forecast config and converts it into the objects the engine
consumes.  A config has optional parameter sections that override
ForecastParams fields, an optional ``macro`` block and an optional
``scenario`` block describing one PredictionInput:

    growth:          {lookback_years: 30}
    capacity:        {capacity_base_multiplier: 1.3, ...}
    effective_rate:  {w_birth: 0.002, ..., max_effective_rate: 0.02}
    baseline:        {logistic_exponent: -0.3, ...}
    swing:           {geopolitical_multiplier: 0.008, ...}
    shocks:          {shock_population_multiplier: 0.04, ...}
    support:         {support_softening_factor: 0.5}
    macro:           {gdp_growth: 2.8, conflict_index: 0.6, sentiment: 0.2}
    scenario:
      base_year: 2023
      target_year: 2035
      ...
      swing_inputs:
        international_support: 0.6
        shock_events:
          - {year: 2026, severity: -0.5, recovery_years: 4}

Keys may be snake_case or camelCase inside ``scenario``.

Public API:
    load_config(path)      -> raw config dict
    build_params(config)   -> ForecastParams
    build_macro(config)    -> MacroIndicators or None
    load_scenario(config)  -> PredictionInput or None
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from .core.params import DEFAULT_PARAMS, ForecastParams
from .core.types import MacroIndicators, PredictionInput
from .errors import ValidationError

logger = logging.getLogger("population_engine.config")


# ─────────────────────────────────────────────────────────────────────────── #
# YAML loading                                                                 #
# ─────────────────────────────────────────────────────────────────────────── #

def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load a forecast configuration YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError:        If the top level is not a mapping.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path.resolve()}")

    with open(path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"{path}: top level must be a mapping.")
    return config


# ─────────────────────────────────────────────────────────────────────────── #
# Config → ForecastParams                                                      #
# ─────────────────────────────────────────────────────────────────────────── #

# Section name → ForecastParams fields it may override.
_SECTION_MAP: Dict[str, Tuple[str, ...]] = {
    "growth": (
        "lookback_years",
        "min_points_for_weighted",
    ),
    "capacity": (
        "capacity_base_multiplier",
        "capacity_econ_coeff",
        "capacity_conflict_coeff",
        "capacity_support_coeff",
        "capacity_floor_multiplier",
    ),
    "effective_rate": (
        "w_birth",
        "w_death",
        "w_migration",
        "w_economic",
        "w_conflict",
        "w_support",
        "rate_change_scale",
        "max_effective_rate",
    ),
    "baseline": (
        "logistic_exponent",
        "world_influence_coeff",
        "uncertainty_band",
    ),
    "swing": (
        "cycle_length",
        "cycle_period_base",
        "cycle_period_sentiment_slope",
        "cycle_period_min",
        "cycle_period_max",
        "cycle_amplitude_base",
        "cycle_amplitude_gdp_slope",
        "cycle_geo_coupling",
        "cycle_position_scale",
        "geopolitical_multiplier",
        "conflict_penalty_factor",
        "conflict_penalty_min",
        "conflict_penalty_max",
        "support_base_multiplier",
        "support_sentiment_multiplier",
        "sentiment_multiplier",
        "volatility_base",
        "volatility_conflict_coeff",
    ),
    "shocks": (
        "recovery_curve_rate",
        "shock_population_multiplier",
        "migration_drift_multiplier",
        "support_lift_multiplier",
        "unknown_region_weight",
    ),
    "support": (
        "support_softening_factor",
    ),
}

_NON_PARAM_SECTIONS = frozenset({"macro", "scenario"})


def build_params(
    config: Mapping[str, Any],
    base: ForecastParams = DEFAULT_PARAMS,
) -> ForecastParams:
    """Convert a config dict to a ForecastParams instance.

    Fields not present in the config keep their values from ``base``.
    Unknown sections and unknown keys are ignored with a warning.

    Args:
        config: Dict from load_config().
        base:   Parameters to override.

    Returns:
        ForecastParams configured from the file.
    """
    overrides: Dict[str, Any] = {}

    for section_name, section in config.items():
        if section_name in _NON_PARAM_SECTIONS:
            continue
        if section_name not in _SECTION_MAP:
            warnings.warn(f"Unknown config section ignored: {section_name!r}")
            continue
        if not isinstance(section, dict):
            warnings.warn(f"Config section {section_name!r} is not a mapping; ignored")
            continue
        allowed = _SECTION_MAP[section_name]
        unknown = set(section) - set(allowed)
        if unknown:
            warnings.warn(
                f"Unknown ForecastParams fields in {section_name!r} ignored: {sorted(unknown)}"
            )
        for key in allowed:
            if key in section:
                overrides[key] = section[key]

    if overrides:
        logger.info("Overriding %d forecast parameters from config", len(overrides))
    return base.copy_with(**overrides)


def build_macro(config: Mapping[str, Any]) -> Optional[MacroIndicators]:
    """Macro indicators from the ``macro`` block (None if absent)."""
    block = config.get("macro")
    if block is None:
        return None
    if not isinstance(block, dict):
        raise ValidationError("macro section must be a mapping", field="macro")
    return MacroIndicators.from_dict(_camelize(block))


# ─────────────────────────────────────────────────────────────────────────── #
# Scenario                                                                     #
# ─────────────────────────────────────────────────────────────────────────── #

def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _camelize(value: Any) -> Any:
    """Recursively convert snake_case mapping keys to camelCase."""
    if isinstance(value, dict):
        return {_camel(str(k)): _camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_camelize(v) for v in value]
    return value


def load_scenario(config: Mapping[str, Any]) -> Optional[PredictionInput]:
    """Parse the ``scenario`` block into a PredictionInput.

    Returns:
        PredictionInput, or None if the config has no scenario.

    Raises:
        ValidationError: If the scenario is malformed or out of range.
    """
    block = config.get("scenario")
    if block is None:
        return None
    if not isinstance(block, dict):
        raise ValidationError("scenario section must be a mapping", field="scenario")
    return PredictionInput.from_dict(_camelize(block))
