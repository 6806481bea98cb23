"""
PredictionService — end-to-end orchestration of one forecast request.

Data flow:
    payload → PredictionInput (validated)
            → historical series (fallback on DataUnavailableError)
            → base point, base growth rate, macro indicators
            → static prediction  (ComputationError if non-finite)
            → baseline series + dynamics projection → chart data
            → regional split, sensitivity sweep
            → PredictionResult

handle() is the transport-agnostic boundary: it maps the error hierarchy to
(status, body) pairs so an HTTP layer only has to serialise them.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .analysis.sensitivity import SensitivityAnalyzer
from .core.baseline import predict_static, project_baseline_series
from .core.capacity import compute_carrying_capacity
from .core.dynamics import YearHook, project_with_dynamics
from .core.growth_rate import estimate_base_growth_rate, select_base_point
from .core.params import DEFAULT_PARAMS, ForecastParams
from .core.results import DynamicProjection, PredictionResult
from .core.types import (
    PopulationPoint,
    PredictionInput,
    resolve_swing_inputs,
    sorted_series,
)
from .data.sources import (
    FALLBACK_POPULATION,
    HistoricalDataSource,
    HttpHistoricalSource,
    MacroFactorsProvider,
    StaticMacroFactorsProvider,
)
from .errors import (
    ComputationError,
    DataUnavailableError,
    ForecastError,
    InternalError,
    ValidationError,
)
from .forecast.distribution import RegionalDistributor
from .forecast.tables import GenderRatioTable, RegionTable, load_default_tables

logger = logging.getLogger("population_engine.service")

INVALID_PAYLOAD_MESSAGE = "Invalid payload"
COMPUTATION_FAILED_MESSAGE = "Unable to calculate prediction with the provided data."
INTERNAL_ERROR_MESSAGE = "Unexpected error while processing prediction request."


def build_chart_data(
    historical: Sequence[PopulationPoint],
    base: PopulationPoint,
    start_year: int,
    baseline_series: Sequence[PopulationPoint],
    projection: DynamicProjection,
) -> List[PopulationPoint]:
    """Merge history, the baseline series and the dynamics fields by year.

    Historical points up to start_year are kept as-is.  Each later year takes
    value and bounds from the baseline series, and swing/shock fields from
    the dynamics projection for the same year.
    """
    chart: Dict[int, PopulationPoint] = {}
    for point in sorted_series(historical):
        if point.year <= start_year:
            chart[point.year] = PopulationPoint(year=point.year, value=point.value)

    max_historical = max(chart) if chart else base.year
    dynamic_by_year = {p.year: p for p in projection.series}

    for point in baseline_series:
        if point.year <= max_historical:
            continue
        dynamic = dynamic_by_year.get(point.year)
        if dynamic is not None:
            point = point.copy_with(
                swing_value=dynamic.swing_value,
                baseline_value=dynamic.baseline_value,
                growth_rate=dynamic.growth_rate,
                shock_impact=dynamic.shock_impact,
                cycle_phase=dynamic.cycle_phase,
                swing_components=dynamic.swing_components,
                policy_modifier=dynamic.policy_modifier,
            )
        chart[point.year] = point

    return [chart[year] for year in sorted(chart)]


class PredictionService:
    """Runs forecast requests against pluggable data collaborators.

    Attributes:
        history:      Historical population source.
        macro:        Macro-factor provider.
        params:       Forecast parameters.
        seed:         Fixed seed for the volatility noise (None = fresh per
                      request).
        sensitivity:  Whether to run the sensitivity sweep.
    """

    def __init__(
        self,
        history: Optional[HistoricalDataSource] = None,
        macro: Optional[MacroFactorsProvider] = None,
        region_table: Optional[RegionTable] = None,
        gender_ratios: Optional[GenderRatioTable] = None,
        params: ForecastParams = DEFAULT_PARAMS,
        seed: Optional[int] = None,
        sensitivity: bool = True,
    ) -> None:
        if region_table is None or gender_ratios is None:
            default_regions, default_ratios = load_default_tables()
            region_table = region_table if region_table is not None else default_regions
            gender_ratios = gender_ratios if gender_ratios is not None else default_ratios

        self.history: HistoricalDataSource = history if history is not None else HttpHistoricalSource()
        self.macro: MacroFactorsProvider = macro if macro is not None else StaticMacroFactorsProvider()
        self.region_table = region_table
        self.params = params
        self.seed = seed
        self.sensitivity = sensitivity
        self._distributor = RegionalDistributor(region_table, gender_ratios, params)
        self._analyzer = SensitivityAnalyzer(region_table=region_table, params=params)

    # ------------------------------------------------------------------ #
    # Collaborators                                                       #
    # ------------------------------------------------------------------ #

    def _load_history(self, warnings: List[str]) -> List[PopulationPoint]:
        try:
            series = list(self.history.fetch())
            if not series:
                raise DataUnavailableError("Historical source returned an empty series.")
            return series
        except DataUnavailableError as exc:
            logger.warning("Historical data unavailable (%s); using fallback series", exc)
            warnings.append("Historical data unavailable; using the built-in fallback series.")
            return list(FALLBACK_POPULATION)

    def _resolve_seed(self, rng: Optional[np.random.Generator]) -> int:
        if self.seed is not None:
            return int(self.seed)
        source = rng if rng is not None else np.random.default_rng()
        return int(source.integers(0, 2**32))

    # ------------------------------------------------------------------ #
    # Prediction                                                          #
    # ------------------------------------------------------------------ #

    def predict(
        self,
        prediction_input: PredictionInput,
        rng: Optional[np.random.Generator] = None,
        hooks: Optional[List[YearHook]] = None,
    ) -> PredictionResult:
        """Run one forecast.

        Args:
            prediction_input: Validated scenario.
            rng:              Source for the per-request seed when the
                              service has no fixed seed.
            hooks:            Observers for the primary dynamics run.

        Returns:
            PredictionResult.

        Raises:
            ValidationError:  If the data cannot support the scenario.
            ComputationError: If the static prediction is non-finite.
            InternalError:    On any other failure.
        """
        try:
            return self._predict(prediction_input, rng, hooks)
        except ForecastError:
            raise
        except Exception as exc:
            logger.exception(
                "Prediction failed for scenario %s", prediction_input.to_dict()
            )
            raise InternalError(INTERNAL_ERROR_MESSAGE) from exc

    def _predict(
        self,
        prediction_input: PredictionInput,
        rng: Optional[np.random.Generator],
        hooks: Optional[List[YearHook]],
    ) -> PredictionResult:
        params = self.params
        warnings: List[str] = []

        historical = self._load_history(warnings)
        base = select_base_point(historical, prediction_input.base_year)
        if base.year >= prediction_input.target_year:
            raise ValidationError(
                f"No historical data before target year {prediction_input.target_year}.",
                field="targetYear",
            )

        base_rate = estimate_base_growth_rate(
            historical, prediction_input.base_year, params.lookback_years, params
        )
        if not np.isfinite(base_rate):
            logger.warning("Non-finite base growth rate %r; using 0.0", base_rate)
            warnings.append("Base growth rate could not be estimated; assuming zero growth.")
            base_rate = 0.0

        normalized = prediction_input.copy_with(base_year=base.year)
        macro = self.macro.fetch()
        capacity = compute_carrying_capacity(base.value, macro, params)

        static = predict_static(base.value, base_rate, normalized, macro, capacity, params)

        swing_inputs = resolve_swing_inputs(normalized)
        seed = self._resolve_seed(rng)
        projection = project_with_dynamics(
            base.value,
            base_rate,
            capacity,
            normalized.base_year,
            normalized.target_year,
            swing_inputs,
            macro=macro,
            rng=np.random.default_rng(seed),
            region_table=self.region_table,
            params=params,
            hooks=hooks,
        )

        baseline_series = project_baseline_series(base.value, base_rate, normalized, macro, params)
        start_year = max(base.year, prediction_input.base_year)
        data = build_chart_data(historical, base, start_year, baseline_series, projection)
        if not any(p.year == normalized.target_year for p in data):
            data.append(
                PopulationPoint(
                    year=normalized.target_year,
                    value=static.predicted,
                    lower_bound=static.lower,
                    upper_bound=static.upper,
                )
            )

        regions = self._distributor.distribute(
            static.predicted,
            normalized.target_year,
            static.lower,
            static.upper,
            normalized.conflict_intensity,
        )

        sensitivity = None
        if self.sensitivity:
            sensitivity = self._analyzer.analyze(
                base.value,
                base_rate,
                capacity,
                normalized.base_year,
                normalized.target_year,
                swing_inputs,
                macro=macro,
                seed=seed,
            )

        logger.info(
            "Forecast %d→%d: %.0f (base %.0f, rate %.5f, K %.0f)",
            normalized.base_year, normalized.target_year, static.predicted,
            base.value, base_rate, capacity,
        )
        return PredictionResult(
            predicted_population=static.predicted,
            growth_rate=base_rate,
            adjusted_rate=static.adjusted_rate,
            message=(
                f"Predicted population for {normalized.target_year}: "
                f"{static.predicted:,.0f} (±{params.uncertainty_band:.0%})"
            ),
            carrying_capacity=static.carrying_capacity,
            lower_bound=static.lower,
            upper_bound=static.upper,
            data=tuple(sorted(data, key=lambda p: p.year)),
            regions=tuple(regions),
            swing_inputs=swing_inputs,
            swing_metadata=projection.metadata,
            sensitivity=sensitivity,
            warnings=warnings,
        )

    # ------------------------------------------------------------------ #
    # Boundary                                                            #
    # ------------------------------------------------------------------ #

    def handle(
        self,
        payload: Mapping[str, Any],
        rng: Optional[np.random.Generator] = None,
    ) -> Tuple[int, Dict[str, Any]]:
        """Validate a raw request payload, predict, and map errors to status codes.

        Returns:
            (200, result dict), (400, validation error), (422, computation
            error) or (500, generic error).
        """
        try:
            prediction_input = PredictionInput.from_dict(payload)
            result = self.predict(prediction_input, rng=rng)
        except ValidationError as exc:
            logger.info("Rejected prediction payload: %s", exc)
            return 400, {
                "error": INVALID_PAYLOAD_MESSAGE,
                "message": str(exc),
                "details": exc.details,
            }
        except ComputationError as exc:
            logger.warning("Prediction not computable: %s", exc)
            return 422, {"error": COMPUTATION_FAILED_MESSAGE}
        except ForecastError as exc:
            logger.error("Prediction request failed: %s", exc)
            return 500, {"error": INTERNAL_ERROR_MESSAGE}
        except Exception:
            logger.exception("Unhandled failure while processing prediction payload")
            return 500, {"error": INTERNAL_ERROR_MESSAGE}
        return 200, result.to_dict()
