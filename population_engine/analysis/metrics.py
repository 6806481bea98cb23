"""
Projection metrics.

Folds the immutable per-year records of one dynamics run into a
SwingMetadata summary.  Pure functions over lists of YearRecord; no side
effects, so primary and sensitivity runs never share accumulators.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from ..core.numeric import round_to
from ..core.results import (
    PolicyImpactSummary,
    ShockImpactSummary,
    SwingMetadata,
    YearRecord,
)
from ..core.types import SwingComponentBreakdown, SwingInputs


def growth_extremes(records: Sequence[YearRecord], base_rate: float) -> Tuple[float, float]:
    """(max, min) adjusted growth; both equal base_rate for an empty run."""
    if not records:
        return float(base_rate), float(base_rate)
    rates = np.array([r.adjusted_growth for r in records], dtype=np.float64)
    return float(rates.max()), float(rates.min())


def volatility_range(records: Sequence[YearRecord]) -> float:
    """Spread of the adjusted growth rate over the run (0 if empty)."""
    if not records:
        return 0.0
    rates = np.array([r.adjusted_growth for r in records], dtype=np.float64)
    return float(rates.max() - rates.min())


def average_cycle_amplitude(records: Sequence[YearRecord], base_rate: float) -> float:
    """Mean absolute deviation of the adjusted rate from the base rate."""
    if not records:
        return 0.0
    deviations = [abs(r.adjusted_growth - base_rate) for r in records]
    return float(np.mean(deviations))


def component_averages(records: Sequence[YearRecord]) -> SwingComponentBreakdown:
    """Per-component averages, divided by max(1, number of years)."""
    totals = np.zeros(7, dtype=np.float64)
    for record in records:
        totals += record.components.to_array()
    return SwingComponentBreakdown.from_array(totals / max(1, len(records)))


def shock_impact_summaries(records: Sequence[YearRecord]) -> Tuple[ShockImpactSummary, ...]:
    """One summary per year whose shock overlay was non-zero."""
    return tuple(
        ShockImpactSummary(
            year=r.year,
            percent=round_to(r.shock_impact * 100.0, 2),
            severity=round_to(r.shock_severity, 2),
        )
        for r in records
        if r.shock_impact != 0.0
    )


def summarise_records(
    records: Sequence[YearRecord],
    base_rate: float,
    inputs: SwingInputs,
    policies: Sequence[PolicyImpactSummary] = (),
) -> SwingMetadata:
    """Fold a run's records into its SwingMetadata.

    Args:
        records:   Year records in chronological order.
        base_rate: Historical baseline growth rate of the run.
        inputs:    Swing dials the run was made with.
        policies:  Policy templates applied to the run's shocks.

    Returns:
        SwingMetadata for the run.
    """
    max_growth, min_growth = growth_extremes(records, base_rate)
    averages = component_averages(records)
    return SwingMetadata(
        max_adjusted_growth=max_growth,
        min_adjusted_growth=min_growth,
        volatility_range=volatility_range(records),
        average_cycle_amplitude=average_cycle_amplitude(records, base_rate),
        support_softening=inputs.international_support,
        shock_impacts=shock_impact_summaries(records),
        average_regional_feedback=averages.regional_feedback,
        policy_impacts=tuple(policies),
        component_averages=averages,
    )
