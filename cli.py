#!/usr/bin/env python3
"""
cli.py — Population forecast engine CLI entry point.

Provides a command-line interface for running forecasts, splitting a
national total across regions and printing the sensitivity table.

Usage:
    # Forecast from flags (live historical data, fallback on failure)
    python cli.py forecast --base-year 2023 --target-year 2035 --conflict war

    # Forecast from a config file, offline, reproducible
    python cli.py forecast --config configs/default.yaml --offline --seed 7

    # Save the full response and a per-year trace
    python cli.py forecast --config configs/default.yaml --output out/forecast.json --trace

    # Regional split of a national total
    python cli.py regions --population 41100000 --year 2024

    # Sensitivity table
    python cli.py sensitivity --config configs/default.yaml --offline --seed 7
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from population_engine.analysis.recorder import ProjectionRecorder
from population_engine.config import build_macro, build_params, load_config, load_scenario
from population_engine.core.types import (
    ConflictIntensity,
    EconomicSituation,
    FamilySupport,
    PredictionInput,
    default_swing_inputs,
)
from population_engine.data.sources import (
    HttpHistoricalSource,
    StaticHistoricalSource,
    StaticMacroFactorsProvider,
)
from population_engine.errors import ForecastError
from population_engine.forecast.distribution import RegionalDistributor
from population_engine.service import PredictionService

logger = logging.getLogger("population_engine.cli")


# ─────────────────────────────────────────────────────────────────────────── #
# Helpers                                                                      #
# ─────────────────────────────────────────────────────────────────────────── #

def _dials_from_args(args: argparse.Namespace) -> Dict[str, float]:
    dials: Dict[str, float] = {}
    for name in ("geopolitical_index", "international_support", "volatility",
                 "economic_cycle_position"):
        value = getattr(args, name, None)
        if value is not None:
            dials[name] = value
    return dials


def _scenario_from_args(args: argparse.Namespace, config: Dict[str, Any]) -> PredictionInput:
    """Scenario from the config's ``scenario`` block, else from flags.

    Dial flags (--geo, --support, ...) override the scenario's swing inputs
    and keep its shock events.
    """
    dials = _dials_from_args(args)
    scenario = load_scenario(config)
    if scenario is not None:
        if not dials:
            return scenario
        swing = scenario.swing_inputs
        if swing is None:
            swing = default_swing_inputs(scenario.conflict_intensity)
        swing = swing.copy_with(**dials)
        return scenario.copy_with(swing_inputs=swing)
    return PredictionInput(
        base_year=args.base_year,
        target_year=args.target_year,
        birth_rate_change=args.birth_rate_change,
        death_rate_change=args.death_rate_change,
        migration_change=args.migration_change,
        economic_situation=args.economy,
        conflict_intensity=args.conflict,
        family_support=args.family_support,
        swing_inputs=(
            default_swing_inputs(ConflictIntensity(args.conflict)).copy_with(**dials)
            if dials else None
        ),
    )


def _build_service(args: argparse.Namespace, config: Dict[str, Any],
                   sensitivity: bool = True) -> PredictionService:
    macro = build_macro(config)
    provider = StaticMacroFactorsProvider(
        gdp_growth=macro.gdp_growth,
        conflict_index=macro.conflict_index,
        sentiment=macro.sentiment,
    ) if macro is not None else StaticMacroFactorsProvider()
    history = StaticHistoricalSource() if args.offline else HttpHistoricalSource()
    return PredictionService(
        history=history,
        macro=provider,
        params=build_params(config),
        seed=args.seed,
        sensitivity=sensitivity,
    )


def _write_json(path: str, payload: Any) -> None:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    print(f"\n  Results saved to {output_path}")


# ─────────────────────────────────────────────────────────────────────────── #
# Commands                                                                     #
# ─────────────────────────────────────────────────────────────────────────── #

def cmd_forecast(args: argparse.Namespace) -> int:
    """Run one forecast and print the summary."""
    config = load_config(args.config) if args.config else {}
    scenario = _scenario_from_args(args, config)
    service = _build_service(args, config)

    recorder = ProjectionRecorder() if args.trace else None
    hooks = [recorder.record] if recorder is not None else None
    result = service.predict(scenario, hooks=hooks)

    print(f"\n  {result.message}")
    print(f"  Range:             {result.lower_bound:,.0f} – {result.upper_bound:,.0f}")
    print(f"  Base growth rate:  {result.growth_rate:+.5f}")
    print(f"  Adjusted rate:     {result.adjusted_rate:+.5f}")
    print(f"  Carrying capacity: {result.carrying_capacity:,.0f}")
    if result.swing_metadata is not None:
        meta = result.swing_metadata
        print(f"  Volatility range:  {meta.volatility_range:.5f}")
        for policy in meta.policy_impacts:
            print(f"  Policy response:   {policy.label}")
    for warning in result.warnings:
        print(f"  ! {warning}")

    if args.output:
        payload = result.to_dict()
        if recorder is not None:
            payload["trace"] = recorder.to_dicts()
        _write_json(args.output, payload)
    elif recorder is not None:
        print("\n  Year  Population      Growth     Shock")
        for record in recorder.records():
            print(f"  {record.year}  {record.population:>14,.0f}  "
                  f"{record.adjusted_growth:+.5f}  {record.shock_impact:+.4f}")
    print()
    return 0


def cmd_regions(args: argparse.Namespace) -> int:
    """Split a national population across regions."""
    forecasts = RegionalDistributor().distribute(args.population, args.year)
    if not forecasts:
        print("No regional coefficients configured.")
        return 1

    print(f"\n  Regional split of {args.population:,.0f} for {args.year}:")
    for region in forecasts:
        print(f"    {region.code:<6s} {region.region:<28s} {region.population:>12,d}  "
              f"{region.percent:5.2f}%  M {region.male:>11,d}  F {region.female:>11,d}")
    print()
    if args.output:
        _write_json(args.output, [r.to_dict() for r in forecasts])
    return 0


def cmd_sensitivity(args: argparse.Namespace) -> int:
    """Print the one-at-a-time sensitivity table for a scenario."""
    config = load_config(args.config) if args.config else {}
    scenario = _scenario_from_args(args, config)
    result = _build_service(args, config).predict(scenario)
    if result.sensitivity is None:
        return 1

    sens = result.sensitivity
    print(f"\n  Baseline: {sens.baseline_population:,.0f} "
          f"(volatility range {sens.baseline_volatility:.5f})")
    for point in sens.variations:
        delta = point.predicted_population - sens.baseline_population
        print(f"    {point.label:<26s} {point.delta_label:>5s}  "
              f"{point.predicted_population:>14,.0f}  ({delta:+,.0f})")
    print()
    return 0


# ─────────────────────────────────────────────────────────────────────────── #
# Argument parsing                                                             #
# ─────────────────────────────────────────────────────────────────────────── #

def _add_scenario_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", type=str, default=None,
                   help="Path to forecast config YAML")
    p.add_argument("--base-year", type=int, default=2023)
    p.add_argument("--target-year", type=int, default=2035)
    p.add_argument("--birth-rate-change", type=float, default=0.0)
    p.add_argument("--death-rate-change", type=float, default=0.0)
    p.add_argument("--migration-change", type=float, default=0.0)
    p.add_argument("--economy", default=EconomicSituation.STABLE.value,
                   choices=[e.value for e in EconomicSituation])
    p.add_argument("--conflict", default=ConflictIntensity.TENSION.value,
                   choices=[c.value for c in ConflictIntensity])
    p.add_argument("--family-support", default=FamilySupport.MEDIUM.value,
                   choices=[f.value for f in FamilySupport])
    p.add_argument("--geo", dest="geopolitical_index", type=float, default=None)
    p.add_argument("--support", dest="international_support", type=float, default=None)
    p.add_argument("--volatility", type=float, default=None)
    p.add_argument("--cycle", dest="economic_cycle_position", type=float, default=None)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--offline", action="store_true",
                   help="Use the built-in historical series instead of the API")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="population-engine",
        description="Population forecast engine — hybrid logistic projections with scenario swings",
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # ── forecast ─────────────────────────────────────────────────── #
    p_forecast = subparsers.add_parser("forecast", help="Run a population forecast")
    _add_scenario_args(p_forecast)
    p_forecast.add_argument("--output", type=str, default=None,
                            help="Save the response JSON to this path")
    p_forecast.add_argument("--trace", action="store_true",
                            help="Record every simulated year")
    p_forecast.set_defaults(func=cmd_forecast)

    # ── regions ──────────────────────────────────────────────────── #
    p_regions = subparsers.add_parser("regions", help="Regional split of a national total")
    p_regions.add_argument("--population", type=float, required=True)
    p_regions.add_argument("--year", type=int, required=True)
    p_regions.add_argument("--output", type=str, default=None)
    p_regions.set_defaults(func=cmd_regions)

    # ── sensitivity ──────────────────────────────────────────────── #
    p_sens = subparsers.add_parser("sensitivity", help="Sensitivity of the swing dials")
    _add_scenario_args(p_sens)
    p_sens.set_defaults(func=cmd_sensitivity)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if not args.command:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except (ForecastError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
