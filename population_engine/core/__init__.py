"""Core: scenario types, parameters, growth estimation, baseline and dynamics projectors."""
from .params import DEFAULT_PARAMS, ForecastParams
from .types import (
    ConflictIntensity,
    EconomicSituation,
    FamilySupport,
    MacroIndicators,
    PopulationPoint,
    PredictionInput,
    ShockEvent,
    SwingComponentBreakdown,
    SwingInputs,
    resolve_swing_inputs,
)
from .growth_rate import estimate_base_growth_rate, select_base_point
from .capacity import compute_carrying_capacity
from .effective_rate import effective_rate
from .baseline import predict_static, project_baseline_series
from .dynamics import logistic_step, project_with_dynamics, step_year

__all__ = [
    "DEFAULT_PARAMS",
    "ForecastParams",
    "ConflictIntensity",
    "EconomicSituation",
    "FamilySupport",
    "MacroIndicators",
    "PopulationPoint",
    "PredictionInput",
    "ShockEvent",
    "SwingComponentBreakdown",
    "SwingInputs",
    "resolve_swing_inputs",
    "estimate_base_growth_rate",
    "select_base_point",
    "compute_carrying_capacity",
    "effective_rate",
    "predict_static",
    "project_baseline_series",
    "logistic_step",
    "project_with_dynamics",
    "step_year",
]
