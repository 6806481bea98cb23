"""
Dynamics engine — chained, scenario-aware yearly simulation.

Unlike the baseline projector, every year here starts from the previous
year's output.  Two populations are carried forward:

    baseline_population  pure logistic reference (base rate only)
    current_population   scenario trajectory (swing, feedback, softening,
                         shock overlay)

Per year y = start_year+1 … end_year:
  1. baseline ← logistic_step(baseline, base_rate, K)
  2. swing components from the dials (one uniform draw)
  3. regional feedback: migration drift added to the rate, support lift
  4. support softening of negative growth
  5. stepped ← logistic_step(current, adjusted_growth, K)
  6. shock overlay: current ← stepped · (1 + modifier)
  7. emit an immutable YearRecord

step_year() is a pure function of (state, year, context, rng); the engine is
a fold over it.  Run-level metadata is assembled afterwards from the records
by analysis.metrics, so nothing accumulates inside the loop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

import numpy as np

from ..analysis.metrics import summarise_records
from ..forecast.tables import RegionTable
from ..systems.policy import apply_policy_responses
from ..systems.regional_feedback import compute_regional_feedback
from ..systems.shocks import active_severity, apply_shock_modifier
from ..systems.support import apply_support_softening
from ..systems.swing import swing_components
from .params import DEFAULT_PARAMS, ForecastParams
from .results import DynamicProjection, YearRecord
from .types import MacroIndicators, ShockEvent, SwingInputs

logger = logging.getLogger("population_engine.core.dynamics")

# Observer signature: hook(record) -> None
YearHook = Callable[[YearRecord], None]


def logistic_step(population: float, rate: float, carrying_capacity: float) -> float:
    """One discrete logistic step, never negative.

    The effective capacity is at least 1 % above the current population so
    the crowding term never flips sign.
    """
    capacity = max(carrying_capacity, population * 1.01)
    return max(0.0, population + rate * population * (1.0 - population / capacity))


# ─────────────────────────────────────────────────────────────────────────── #
# State and context                                                            #
# ─────────────────────────────────────────────────────────────────────────── #

@dataclass(frozen=True)
class DynamicsState:
    """The two populations carried from one year to the next."""

    current_population: float
    baseline_population: float

    def copy_with(self, **kwargs: float) -> "DynamicsState":
        return replace(self, **kwargs)


@dataclass(frozen=True)
class DynamicsContext:
    """Inputs that stay fixed for a whole run.

    Attributes:
        base_rate:         Historical baseline growth rate.
        carrying_capacity: K, fixed for the run.
        start_year:        Year of the initial population.
        inputs:            Swing dials (shocks are taken from effective_shocks).
        macro:             Macro indicators.
        effective_shocks:  Shock events after the policy response.
        region_table:      Coefficient table used for regional weights.
        params:            Forecast parameters.
    """

    base_rate: float
    carrying_capacity: float
    start_year: int
    inputs: SwingInputs
    macro: MacroIndicators
    effective_shocks: Tuple[ShockEvent, ...] = ()
    region_table: Optional[RegionTable] = None
    params: ForecastParams = DEFAULT_PARAMS


def cycle_phase(year_offset: int, cycle_position: float, cycle_length: float) -> float:
    """Position within the economic cycle, in [0, 1)."""
    within = ((year_offset % cycle_length) + cycle_length) % cycle_length
    return float((within / cycle_length + cycle_position) % 1.0)


# ─────────────────────────────────────────────────────────────────────────── #
# Step                                                                         #
# ─────────────────────────────────────────────────────────────────────────── #

def step_year(
    state: DynamicsState,
    year: int,
    context: DynamicsContext,
    rng: np.random.Generator,
) -> Tuple[DynamicsState, YearRecord]:
    """Advance the simulation by one calendar year.

    Args:
        state:   Populations at year − 1.
        year:    Year being simulated.
        context: Run-level constants.
        rng:     Random source for the volatility component.

    Returns:
        (new_state, record) — the input state is never modified.
    """
    params = context.params
    inputs = context.inputs
    year_offset = year - context.start_year

    baseline = logistic_step(
        state.baseline_population, context.base_rate, context.carrying_capacity
    )

    components = swing_components(
        context.base_rate, year_offset, inputs, context.macro, rng, params
    )
    feedback = compute_regional_feedback(
        context.effective_shocks, year, context.region_table, params
    )
    components = components.copy_with(regional_feedback=feedback.migration_drift)
    adjusted = components.total()

    support_level = float(np.clip(inputs.international_support + feedback.support_lift, 0.0, 1.0))
    adjusted = apply_support_softening(adjusted, support_level, params)

    stepped = logistic_step(state.current_population, adjusted, context.carrying_capacity)
    current, shock_impact = apply_shock_modifier(
        stepped, year, context.effective_shocks, params
    )

    record = YearRecord(
        year=year,
        year_offset=year_offset,
        population=current,
        baseline_population=baseline,
        adjusted_growth=adjusted,
        shock_impact=shock_impact,
        shock_severity=active_severity(context.effective_shocks, year),
        cycle_phase=cycle_phase(year_offset, inputs.economic_cycle_position, params.cycle_length),
        components=components,
        support_level=support_level,
        policy_modifier=support_level - inputs.international_support,
    )
    new_state = DynamicsState(current_population=current, baseline_population=baseline)
    return new_state, record


# ─────────────────────────────────────────────────────────────────────────── #
# Projection                                                                   #
# ─────────────────────────────────────────────────────────────────────────── #

def project_with_dynamics(
    initial_population: float,
    base_rate: float,
    carrying_capacity: float,
    start_year: int,
    end_year: int,
    inputs: SwingInputs,
    macro: MacroIndicators = MacroIndicators(),
    rng: Optional[np.random.Generator] = None,
    region_table: Optional[RegionTable] = None,
    params: ForecastParams = DEFAULT_PARAMS,
    hooks: Optional[List[YearHook]] = None,
) -> DynamicProjection:
    """Run the chained simulation from start_year to end_year.

    Args:
        initial_population: Population at start_year.
        base_rate:          Historical baseline growth rate.
        carrying_capacity:  K for the whole run.
        start_year:         Year of initial_population (not emitted).
        end_year:           Last simulated year; no points if ≤ start_year.
        inputs:             Swing dials including raw shock events.
        macro:              Macro indicators.
        rng:                Volatility random source.  A fresh generator is
                            created per call when omitted.
        region_table:       Regional coefficients for shock weighting.  With
                            no table, region-scoped shocks use the
                            unknown-region weight.
        params:             Forecast parameters.
        hooks:              Callables notified with every YearRecord.

    Returns:
        DynamicProjection with one PopulationPoint per simulated year and
        the run's SwingMetadata.
    """
    if rng is None:
        rng = np.random.default_rng()

    effective_shocks, policies = apply_policy_responses(
        inputs.shock_events, inputs.international_support
    )
    context = DynamicsContext(
        base_rate=float(base_rate),
        carrying_capacity=float(carrying_capacity),
        start_year=start_year,
        inputs=inputs,
        macro=macro,
        effective_shocks=effective_shocks,
        region_table=region_table,
        params=params,
    )

    state = DynamicsState(
        current_population=float(initial_population),
        baseline_population=float(initial_population),
    )
    records: List[YearRecord] = []
    for year in range(start_year + 1, end_year + 1):
        state, record = step_year(state, year, context, rng)
        records.append(record)
        for hook in hooks or ():
            hook(record)

    logger.debug(
        "Projected %d years from %d (K=%.0f, base_rate=%.5f, shocks=%d)",
        len(records), start_year, carrying_capacity, base_rate, len(effective_shocks),
    )
    metadata = summarise_records(records, base_rate, inputs, policies)
    return DynamicProjection(
        series=tuple(r.to_point() for r in records),
        metadata=metadata,
    )
