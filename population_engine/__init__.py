"""
Population Forecast Engine.

Hybrid exponential/logistic population projections with scenario swing
factors, shock events, policy responses, regional split and sensitivity
analysis.

Public API:
    PredictionInput       — validated scenario for one request
    SwingInputs           — scenario dials and shock events
    MacroIndicators       — GDP growth, conflict index, sentiment
    ForecastParams        — immutable parameter pack
    predict_static        — single-step baseline prediction
    project_with_dynamics — chained scenario simulation
    RegionalDistributor   — regional and gender split
    SensitivityAnalyzer   — one-at-a-time dial perturbations
    PredictionService     — end-to-end request orchestration
"""

from .core.params import DEFAULT_PARAMS, ForecastParams
from .core.types import (
    ConflictIntensity,
    EconomicSituation,
    FamilySupport,
    MacroIndicators,
    PopulationPoint,
    PredictionInput,
    ShockEvent,
    SwingInputs,
)
from .core.baseline import predict_static, project_baseline_series
from .core.dynamics import logistic_step, project_with_dynamics
from .forecast.distribution import RegionalDistributor
from .analysis.sensitivity import SensitivityAnalyzer
from .analysis.recorder import ProjectionRecorder
from .service import PredictionService
from .errors import (
    ComputationError,
    DataUnavailableError,
    ForecastError,
    InternalError,
    ValidationError,
)

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
    "SwingInputs",
    "predict_static",
    "project_baseline_series",
    "logistic_step",
    "project_with_dynamics",
    "RegionalDistributor",
    "SensitivityAnalyzer",
    "ProjectionRecorder",
    "PredictionService",
    "ComputationError",
    "DataUnavailableError",
    "ForecastError",
    "InternalError",
    "ValidationError",
]
