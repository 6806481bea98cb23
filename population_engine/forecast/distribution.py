"""
Regional distributor — splits a national total across regions.

    regionPop = total · coeff / Σcoeff
    percent   = round(coeff / Σcoeff · 100, 2)
    bounds    = overall bounds scaled by the same share, or regionPop ± 3 %

Male/female counts come from the gender-ratio table (region-specific where
listed, the default ratio otherwise).
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..core.numeric import round_half_up, round_to
from ..core.params import DEFAULT_PARAMS, ForecastParams
from ..core.results import RegionForecast
from ..core.types import ConflictIntensity
from .tables import GenderRatioTable, RegionCoefficient, RegionTable, load_default_tables

logger = logging.getLogger("population_engine.forecast.distribution")


def apply_gender_split(
    region: RegionCoefficient,
    population: float,
    ratios: GenderRatioTable,
) -> Tuple[int, int]:
    """Returns (male, female), each rounded independently."""
    ratio = ratios.ratio_for(region)
    male = int(round_half_up(population * ratio.male))
    female = int(round_half_up(population * ratio.female))
    return male, female


class RegionalDistributor:
    """Distributes a national population over a regional coefficient table.

    Attributes:
        regions: Regional coefficient table.
        ratios:  Gender-ratio table.
    """

    def __init__(
        self,
        regions: Optional[RegionTable] = None,
        ratios: Optional[GenderRatioTable] = None,
        params: ForecastParams = DEFAULT_PARAMS,
    ) -> None:
        if regions is None or ratios is None:
            default_regions, default_ratios = load_default_tables()
            regions = regions if regions is not None else default_regions
            ratios = ratios if ratios is not None else default_ratios
        self.regions: RegionTable = regions
        self.ratios: GenderRatioTable = ratios
        self.params: ForecastParams = params

    def distribute(
        self,
        total_population: float,
        year: int,
        lower_bound: Optional[float] = None,
        upper_bound: Optional[float] = None,
        conflict_intensity: Optional[ConflictIntensity] = None,
    ) -> List[RegionForecast]:
        """Split total_population across all configured regions.

        Args:
            total_population: National population to distribute.
            year:             Year the figures refer to.
            lower_bound:      Overall lower bound, scaled per region if given.
            upper_bound:      Overall upper bound, scaled per region if given.
            conflict_intensity: Accepted for interface compatibility; it does
                              not change the weighting.

        Returns:
            One RegionForecast per table entry, in table order.  Empty when
            the table has no entries or no positive coefficient mass.
        """
        total_coeff = self.regions.total_coefficient
        if len(self.regions) == 0 or total_coeff <= 0:
            logger.warning("No regional coefficients configured; skipping regional split")
            return []

        band = self.params.uncertainty_band
        forecasts: List[RegionForecast] = []
        for entry in self.regions:
            share = entry.coefficient / total_coeff
            region_population = total_population * share
            male, female = apply_gender_split(entry, region_population, self.ratios)

            if lower_bound is not None:
                region_lower = round_half_up(lower_bound * share)
            else:
                region_lower = round_half_up(region_population * (1.0 - band))
            if upper_bound is not None:
                region_upper = round_half_up(upper_bound * share)
            else:
                region_upper = round_half_up(region_population * (1.0 + band))

            forecasts.append(
                RegionForecast(
                    code=entry.code,
                    region=entry.name,
                    label=entry.label,
                    population=int(round_half_up(region_population)),
                    male=male,
                    female=female,
                    percent=round_to(share * 100.0, 2),
                    year=year,
                    lower_bound=int(region_lower),
                    upper_bound=int(region_upper),
                )
            )
        return forecasts
