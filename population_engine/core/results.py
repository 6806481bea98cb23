"""
Output containers produced by the projectors, distributor and analyzer.

Every container is created fresh per request and is never mutated after it
is placed into an output collection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .numeric import round_half_up
from .types import PopulationPoint, SwingComponentBreakdown, SwingInputs


@dataclass(frozen=True)
class StaticPrediction:
    """Single-step hybrid exponential/logistic prediction for one year."""

    predicted: float
    lower: float
    upper: float
    adjusted_rate: float
    carrying_capacity: float


@dataclass(frozen=True)
class YearRecord:
    """Immutable output of one dynamics step, before rounding.

    Attributes:
        year:                Calendar year of the record.
        year_offset:         year − start_year (≥ 1).
        population:          Scenario-affected population after shocks.
        baseline_population: Pure-logistic reference population.
        adjusted_growth:     Growth rate after softening, used for the step.
        shock_impact:        Population modifier applied by the shock overlay.
        shock_severity:      Sum of severities of active effective shocks.
        cycle_phase:         Economic-cycle phase ∈ [0, 1).
        components:          Additive decomposition of the pre-softening rate.
        support_level:       internationalSupport + supportLift, clamped to [0, 1].
        policy_modifier:     support_level − internationalSupport.
    """

    year: int
    year_offset: int
    population: float
    baseline_population: float
    adjusted_growth: float
    shock_impact: float
    shock_severity: float
    cycle_phase: float
    components: SwingComponentBreakdown
    support_level: float
    policy_modifier: float

    def to_point(self) -> PopulationPoint:
        """Emit the chart-facing PopulationPoint (rounded populations)."""
        value = round_half_up(self.population)
        return PopulationPoint(
            year=self.year,
            value=value,
            swing_value=value,
            baseline_value=round_half_up(self.baseline_population),
            growth_rate=self.adjusted_growth,
            shock_impact=self.shock_impact,
            cycle_phase=self.cycle_phase,
            swing_components=self.components,
            policy_modifier=self.policy_modifier,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "yearOffset": self.year_offset,
            "population": self.population,
            "baselinePopulation": self.baseline_population,
            "adjustedGrowth": self.adjusted_growth,
            "shockImpact": self.shock_impact,
            "shockSeverity": self.shock_severity,
            "cyclePhase": self.cycle_phase,
            "components": self.components.to_dict(),
            "supportLevel": self.support_level,
            "policyModifier": self.policy_modifier,
        }


@dataclass(frozen=True)
class ShockImpactSummary:
    year: int
    percent: float
    severity: float

    def to_dict(self) -> Dict[str, Any]:
        return {"year": self.year, "percent": self.percent, "severity": self.severity}


@dataclass(frozen=True)
class PolicyImpactSummary:
    label: str
    severity_modifier: float
    recovery_modifier: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "severityModifier": self.severity_modifier,
            "recoveryModifier": self.recovery_modifier,
        }


@dataclass(frozen=True)
class SwingMetadata:
    """Run-level summary folded from the per-year records."""

    max_adjusted_growth: float
    min_adjusted_growth: float
    volatility_range: float
    average_cycle_amplitude: float
    support_softening: float
    shock_impacts: Tuple[ShockImpactSummary, ...]
    average_regional_feedback: float
    policy_impacts: Tuple[PolicyImpactSummary, ...]
    component_averages: SwingComponentBreakdown

    def to_dict(self) -> Dict[str, Any]:
        return {
            "maxAdjustedGrowth": self.max_adjusted_growth,
            "minAdjustedGrowth": self.min_adjusted_growth,
            "volatilityRange": self.volatility_range,
            "averageCycleAmplitude": self.average_cycle_amplitude,
            "supportSoftening": self.support_softening,
            "shockImpacts": [s.to_dict() for s in self.shock_impacts],
            "averageRegionalFeedback": self.average_regional_feedback,
            "policyImpacts": [p.to_dict() for p in self.policy_impacts],
            "componentAverages": self.component_averages.to_dict(),
        }


@dataclass(frozen=True)
class DynamicProjection:
    """Scenario-aware trajectory plus its metadata. Owned by the caller."""

    series: Tuple[PopulationPoint, ...]
    metadata: SwingMetadata

    @property
    def final_value(self) -> Optional[float]:
        return self.series[-1].value if self.series else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "series": [p.to_dict() for p in self.series],
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True)
class RegionForecast:
    code: str
    region: str
    label: str
    population: int
    male: int
    female: int
    percent: float
    year: int
    lower_bound: int
    upper_bound: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "region": self.region,
            "label": self.label,
            "population": self.population,
            "male": self.male,
            "female": self.female,
            "percent": self.percent,
            "year": self.year,
            "lowerBound": self.lower_bound,
            "upperBound": self.upper_bound,
        }


@dataclass(frozen=True)
class SensitivityPoint:
    id: str
    label: str
    delta_label: str
    predicted_population: float
    volatility_range: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "deltaLabel": self.delta_label,
            "predictedPopulation": self.predicted_population,
            "volatilityRange": self.volatility_range,
        }


@dataclass(frozen=True)
class SensitivityResult:
    baseline_population: float
    baseline_volatility: float
    variations: Tuple[SensitivityPoint, ...]

    def variation(self, variation_id: str) -> SensitivityPoint:
        """Look up one axis by id.

        Raises:
            KeyError: If no variation has that id.
        """
        for point in self.variations:
            if point.id == variation_id:
                return point
        raise KeyError(variation_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baselinePopulation": self.baseline_population,
            "baselineVolatility": self.baseline_volatility,
            "variations": [v.to_dict() for v in self.variations],
        }


@dataclass(frozen=True)
class PredictionResult:
    """Full response of one forecast request."""

    predicted_population: float
    growth_rate: float
    adjusted_rate: float
    message: str
    carrying_capacity: float
    lower_bound: float
    upper_bound: float
    data: Tuple[PopulationPoint, ...]
    regions: Tuple[RegionForecast, ...] = ()
    swing_inputs: Optional[SwingInputs] = None
    swing_metadata: Optional[SwingMetadata] = None
    sensitivity: Optional[SensitivityResult] = None
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "predictedPopulation": self.predicted_population,
            "growthRate": self.growth_rate,
            "adjustedRate": self.adjusted_rate,
            "message": self.message,
            "carryingCapacity": self.carrying_capacity,
            "lowerBound": self.lower_bound,
            "upperBound": self.upper_bound,
            "data": [p.to_dict() for p in self.data],
            "regions": [r.to_dict() for r in self.regions],
        }
        if self.swing_inputs is not None:
            out["swingInputs"] = self.swing_inputs.to_dict()
        if self.swing_metadata is not None:
            out["swingMetadata"] = self.swing_metadata.to_dict()
        if self.sensitivity is not None:
            out["sensitivity"] = self.sensitivity.to_dict()
        if self.warnings:
            out["warnings"] = list(self.warnings)
        return out
