"""
Input and per-year record containers for the population forecast engine.

Tiers:
  - Scenario inputs  : PredictionInput, SwingInputs, ShockEvent, MacroIndicators
  - Per-year records : PopulationPoint, SwingComponentBreakdown

All containers are frozen dataclasses. Inputs are range-checked at
construction time and raise ValidationError; nothing is clamped or coerced
into range behind the caller's back. Mutation produces new objects via
copy_with(), identical to the rest of the engine.

Serialisation uses the camelCase keys of the request/response contract.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Type

import numpy as np
from numpy.typing import NDArray

from ..errors import ValidationError


# --------------------------------------------------------------------------- #
# Categorical scenario fields                                                  #
# --------------------------------------------------------------------------- #


class EconomicSituation(str, Enum):
    WEAK = "weak"
    STABLE = "stable"
    GROWING = "growing"


class ConflictIntensity(str, Enum):
    PEACE = "peace"
    TENSION = "tension"
    WAR = "war"


class FamilySupport(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    STRONG = "strong"


def require_complete(table: Mapping[Enum, float], enum_cls: Type[Enum], name: str) -> None:
    """Fail at import time if an enum-to-value table misses a member."""
    missing = [m.value for m in enum_cls if m not in table]
    if missing:
        raise RuntimeError(f"{name} has no entry for {missing}")


# Default geopolitical index when the scenario carries no explicit swing inputs.
CONFLICT_GEOPOLITICAL_DEFAULT: Dict[ConflictIntensity, float] = {
    ConflictIntensity.WAR: -0.9,
    ConflictIntensity.TENSION: -0.3,
    ConflictIntensity.PEACE: 0.5,
}
require_complete(CONFLICT_GEOPOLITICAL_DEFAULT, ConflictIntensity, "CONFLICT_GEOPOLITICAL_DEFAULT")


# --------------------------------------------------------------------------- #
# Validation helpers                                                           #
# --------------------------------------------------------------------------- #


def _check_finite(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise ValidationError(f"{name} must be a number, got {value!r}", field=name)
    if not np.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value}", field=name)
    return float(value)


def _check_range(name: str, value: Any, low: float, high: float) -> float:
    number = _check_finite(name, value)
    if not (low <= number <= high):
        raise ValidationError(f"{name} must be in [{low}, {high}], got {number}", field=name)
    return number


def _check_int(name: str, value: Any, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValidationError(f"{name} must be an integer, got {value!r}", field=name)
    if not (low <= value <= high):
        raise ValidationError(f"{name} must be in [{low}, {high}], got {value}", field=name)
    return int(value)


def _parse_enum(name: str, enum_cls: Type[Enum], value: Any) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = [m.value for m in enum_cls]
        raise ValidationError(
            f"{name} must be one of {allowed}, got {value!r}", field=name
        ) from None


def _require(data: Mapping[str, Any], key: str) -> Any:
    if key not in data:
        raise ValidationError(f"{key} is required", field=key)
    return data[key]


def _check_mapping(name: str, value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValidationError(f"{name} must be an object, got {value!r}", field=name)
    return value


def _check_list(name: str, value: Any) -> Tuple[Any, ...]:
    """A JSON array (list or tuple); None counts as empty. Strings are rejected."""
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{name} must be a list, got {value!r}", field=name)
    return tuple(value)


# --------------------------------------------------------------------------- #
# Shock events                                                                 #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class ShockEvent:
    """One-time severity impulse with an exponential recovery window.

    Attributes:
        year:             Year the shock hits.
        severity:         Signed magnitude; negative shocks remove population.
        recovery_years:   Length of the recovery window (≥ 1).
        regions_affected: Region identifiers (code, name or label); empty
                          means the whole country.

    Policy templates may push severity beyond ±1 and recovery beyond 30
    years, so only structural invariants are enforced here.  Payload bounds
    are checked by validate_payload_bounds().
    """

    year: int
    severity: float
    recovery_years: int
    regions_affected: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _check_finite("shockEvent.severity", self.severity)
        if isinstance(self.recovery_years, bool) or not isinstance(
            self.recovery_years, (int, np.integer)
        ):
            raise ValidationError(
                f"shockEvent.recoveryYears must be an integer, got {self.recovery_years!r}",
                field="shockEvent.recoveryYears",
            )
        if self.recovery_years < 1:
            raise ValidationError(
                f"shockEvent.recoveryYears must be >= 1, got {self.recovery_years}",
                field="shockEvent.recoveryYears",
            )
        object.__setattr__(self, "regions_affected", tuple(self.regions_affected or ()))

    def validate_payload_bounds(self) -> None:
        """Enforce the request-contract bounds on a user-supplied shock."""
        _check_int("shockEvent.year", self.year, 1900, 2300)
        _check_range("shockEvent.severity", self.severity, -1.0, 1.0)
        _check_int("shockEvent.recoveryYears", self.recovery_years, 1, 30)

    def is_active(self, year: int) -> bool:
        """True iff 0 ≤ year − shock.year ≤ recovery_years."""
        distance = year - self.year
        return 0 <= distance <= self.recovery_years

    def copy_with(self, **kwargs: Any) -> "ShockEvent":
        """Return a new ShockEvent with selected fields overridden."""
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "year": self.year,
            "severity": self.severity,
            "recoveryYears": self.recovery_years,
        }
        if self.regions_affected:
            out["regionsAffected"] = list(self.regions_affected)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShockEvent":
        data = _check_mapping("shockEvent", data)
        regions = _check_list("shockEvent.regionsAffected", data.get("regionsAffected"))
        for region in regions:
            if not isinstance(region, str):
                raise ValidationError(
                    f"shockEvent.regionsAffected entries must be strings, got {region!r}",
                    field="shockEvent.regionsAffected",
                )
        shock = cls(
            year=_check_int("shockEvent.year", _require(data, "year"), 1900, 2300),
            severity=_check_range("shockEvent.severity", _require(data, "severity"), -1.0, 1.0),
            recovery_years=_check_int(
                "shockEvent.recoveryYears", _require(data, "recoveryYears"), 1, 30
            ),
            regions_affected=regions,
        )
        return shock


# --------------------------------------------------------------------------- #
# Swing inputs and macro indicators                                            #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class SwingInputs:
    """Scenario dials that perturb the baseline growth rate each year.

    Attributes:
        geopolitical_index:      [-1, 1]; negative = hostile environment.
        economic_cycle_position: [0, 1]; phase offset of the business cycle.
        international_support:   [0, 1]; drives policy templates and softening.
        volatility:              [0, 1]; scale of the stochastic component.
        shock_events:            Discrete shocks (tuple, never shared).
    """

    geopolitical_index: float = 0.1
    economic_cycle_position: float = 0.4
    international_support: float = 0.5
    volatility: float = 0.3
    shock_events: Tuple[ShockEvent, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _check_range("geopoliticalIndex", self.geopolitical_index, -1.0, 1.0)
        _check_range("economicCyclePosition", self.economic_cycle_position, 0.0, 1.0)
        _check_range("internationalSupport", self.international_support, 0.0, 1.0)
        _check_range("volatility", self.volatility, 0.0, 1.0)
        object.__setattr__(self, "shock_events", tuple(self.shock_events or ()))

    def copy_with(self, **kwargs: Any) -> "SwingInputs":
        """Return a new SwingInputs with selected fields overridden."""
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "geopoliticalIndex": self.geopolitical_index,
            "economicCyclePosition": self.economic_cycle_position,
            "internationalSupport": self.international_support,
            "volatility": self.volatility,
            "shockEvents": [s.to_dict() for s in self.shock_events],
        }

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], defaults: Optional["SwingInputs"] = None
    ) -> "SwingInputs":
        """Parse a camelCase swingInputs object.

        Args:
            data:     Payload object.
            defaults: Values for omitted dials (built-in defaults when None).

        Raises:
            ValidationError: If the object, its shock list or any shock is
                malformed or out of range.
        """
        data = _check_mapping("swingInputs", data)
        if defaults is None:
            defaults = cls()
        return cls(
            geopolitical_index=data.get("geopoliticalIndex", defaults.geopolitical_index),
            economic_cycle_position=data.get(
                "economicCyclePosition", defaults.economic_cycle_position
            ),
            international_support=data.get(
                "internationalSupport", defaults.international_support
            ),
            volatility=data.get("volatility", defaults.volatility),
            shock_events=tuple(
                ShockEvent.from_dict(s)
                for s in _check_list("shockEvents", data.get("shockEvents"))
            ),
        )


@dataclass(frozen=True)
class MacroIndicators:
    """Externally supplied macro environment, constant over the horizon.

    Attributes:
        gdp_growth:     Annual GDP growth in percent.
        conflict_index: 0 (peace) → 1 (war).
        sentiment:      -1 (pessimistic) → +1 (optimistic).
    """

    gdp_growth: float = 2.0
    conflict_index: float = 0.5
    sentiment: float = 0.0

    def __post_init__(self) -> None:
        _check_finite("gdpGrowth", self.gdp_growth)
        if self.gdp_growth <= -100.0:
            raise ValidationError(
                f"gdpGrowth must be > -100, got {self.gdp_growth}", field="gdpGrowth"
            )
        _check_range("conflictIndex", self.conflict_index, 0.0, 1.0)
        _check_range("sentiment", self.sentiment, -1.0, 1.0)

    def to_dict(self) -> Dict[str, float]:
        return {
            "gdpGrowth": self.gdp_growth,
            "conflictIndex": self.conflict_index,
            "sentiment": self.sentiment,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MacroIndicators":
        defaults = cls()
        return cls(
            gdp_growth=data.get("gdpGrowth", defaults.gdp_growth),
            conflict_index=data.get("conflictIndex", defaults.conflict_index),
            sentiment=data.get("sentiment", defaults.sentiment),
        )


# --------------------------------------------------------------------------- #
# Prediction input                                                             #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class PredictionInput:
    """Validated scenario for one forecast request."""

    base_year: int
    target_year: int
    birth_rate_change: float
    death_rate_change: float
    migration_change: float
    economic_situation: EconomicSituation
    conflict_intensity: ConflictIntensity
    family_support: FamilySupport
    swing_inputs: Optional[SwingInputs] = None

    def __post_init__(self) -> None:
        _check_int("baseYear", self.base_year, 1900, 2100)
        _check_int("targetYear", self.target_year, 1901, 2200)
        if self.target_year <= self.base_year:
            raise ValidationError(
                "Target year must be greater than base year.", field="targetYear"
            )
        _check_finite("birthRateChange", self.birth_rate_change)
        _check_finite("deathRateChange", self.death_rate_change)
        _check_finite("migrationChange", self.migration_change)
        object.__setattr__(
            self,
            "economic_situation",
            _parse_enum("economicSituation", EconomicSituation, self.economic_situation),
        )
        object.__setattr__(
            self,
            "conflict_intensity",
            _parse_enum("conflictIntensity", ConflictIntensity, self.conflict_intensity),
        )
        object.__setattr__(
            self,
            "family_support",
            _parse_enum("familySupport", FamilySupport, self.family_support),
        )
        if self.swing_inputs is not None:
            for shock in self.swing_inputs.shock_events:
                shock.validate_payload_bounds()

    @property
    def horizon(self) -> int:
        """Number of projected years."""
        return self.target_year - self.base_year

    def copy_with(self, **kwargs: Any) -> "PredictionInput":
        """Return a new PredictionInput with selected fields overridden."""
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "baseYear": self.base_year,
            "targetYear": self.target_year,
            "birthRateChange": self.birth_rate_change,
            "deathRateChange": self.death_rate_change,
            "migrationChange": self.migration_change,
            "economicSituation": self.economic_situation.value,
            "conflictIntensity": self.conflict_intensity.value,
            "familySupport": self.family_support.value,
        }
        if self.swing_inputs is not None:
            out["swingInputs"] = self.swing_inputs.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PredictionInput":
        """Parse a camelCase request payload.

        Raises:
            ValidationError: On any missing, malformed or out-of-range field.
        """
        if not isinstance(data, Mapping):
            raise ValidationError("Invalid payload: expected an object")
        swing_raw = data.get("swingInputs")
        swing_inputs = None
        if swing_raw is not None:
            conflict = _parse_enum(
                "conflictIntensity", ConflictIntensity, _require(data, "conflictIntensity")
            )
            # Omitted dials fall back per field, with the conflict-keyed geopolitics.
            swing_inputs = SwingInputs.from_dict(swing_raw, default_swing_inputs(conflict))
        return cls(
            base_year=_require(data, "baseYear"),
            target_year=_require(data, "targetYear"),
            birth_rate_change=_require(data, "birthRateChange"),
            death_rate_change=_require(data, "deathRateChange"),
            migration_change=_require(data, "migrationChange"),
            economic_situation=_require(data, "economicSituation"),
            conflict_intensity=_require(data, "conflictIntensity"),
            family_support=_require(data, "familySupport"),
            swing_inputs=swing_inputs,
        )


def default_swing_inputs(conflict_intensity: ConflictIntensity) -> SwingInputs:
    """Built-in dials with the geopolitical index keyed on conflict intensity."""
    return SwingInputs(geopolitical_index=CONFLICT_GEOPOLITICAL_DEFAULT[conflict_intensity])


def resolve_swing_inputs(prediction_input: PredictionInput) -> SwingInputs:
    """Explicit swing inputs win; otherwise defaults keyed on conflict intensity."""
    if prediction_input.swing_inputs is not None:
        return prediction_input.swing_inputs
    return default_swing_inputs(prediction_input.conflict_intensity)


# --------------------------------------------------------------------------- #
# Per-year records                                                             #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class SwingComponentBreakdown:
    """Additive decomposition of one year's adjusted growth rate.

    Invariant: total() equals the adjusted growth before support softening.
    """

    base: float = 0.0
    eco_cycle: float = 0.0
    geopolitical: float = 0.0
    support: float = 0.0
    sentiment: float = 0.0
    volatility: float = 0.0
    regional_feedback: float = 0.0

    def total(self) -> float:
        return float(np.sum(self.to_array()))

    def to_array(self) -> NDArray[np.float64]:
        """Return components as float64 array of shape (7,)."""
        return np.array(
            [
                self.base,
                self.eco_cycle,
                self.geopolitical,
                self.support,
                self.sentiment,
                self.volatility,
                self.regional_feedback,
            ],
            dtype=np.float64,
        )

    @classmethod
    def from_array(cls, arr: NDArray[np.float64]) -> "SwingComponentBreakdown":
        """Construct from a length-7 float64 array."""
        if arr.shape != (7,):
            raise ValueError(
                f"SwingComponentBreakdown.from_array expects shape (7,), got {arr.shape}"
            )
        return cls(*(float(v) for v in arr))

    def copy_with(self, **kwargs: float) -> "SwingComponentBreakdown":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, float]:
        return {
            "base": self.base,
            "ecoCycle": self.eco_cycle,
            "geopolitical": self.geopolitical,
            "support": self.support,
            "sentiment": self.sentiment,
            "volatility": self.volatility,
            "regionalFeedback": self.regional_feedback,
        }


@dataclass(frozen=True)
class PopulationPoint:
    """One year of a historical or projected series. Immutable once emitted."""

    year: int
    value: float
    lower_bound: Optional[float] = None
    upper_bound: Optional[float] = None
    baseline_value: Optional[float] = None
    swing_value: Optional[float] = None
    growth_rate: Optional[float] = None
    shock_impact: Optional[float] = None
    cycle_phase: Optional[float] = None
    swing_components: Optional[SwingComponentBreakdown] = None
    policy_modifier: Optional[float] = None

    def copy_with(self, **kwargs: Any) -> "PopulationPoint":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise, omitting fields that were never set."""
        out: Dict[str, Any] = {"year": self.year, "value": self.value}
        optional = {
            "lowerBound": self.lower_bound,
            "upperBound": self.upper_bound,
            "baselineValue": self.baseline_value,
            "swingValue": self.swing_value,
            "growthRate": self.growth_rate,
            "shockImpact": self.shock_impact,
            "cyclePhase": self.cycle_phase,
            "policyModifier": self.policy_modifier,
        }
        out.update({k: v for k, v in optional.items() if v is not None})
        if self.swing_components is not None:
            out["swingComponents"] = self.swing_components.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PopulationPoint":
        return cls(year=int(data["year"]), value=float(data["value"]))


def sorted_series(points: Iterable[PopulationPoint]) -> Tuple[PopulationPoint, ...]:
    """Return the points ascending by year (stable for equal years)."""
    return tuple(sorted(points, key=lambda p: p.year))
