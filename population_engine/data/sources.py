"""
External data collaborators: historical population series and macro factors.

HistoricalDataSource implementations return an ascending list of
PopulationPoint restricted to whole-population totals.  Failures are
reported as DataUnavailableError; substituting the fallback series is the
caller's decision, so degradation stays visible.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple

import requests

from ..core.types import MacroIndicators, PopulationPoint, sorted_series
from ..errors import DataUnavailableError

logger = logging.getLogger("population_engine.data.sources")

DEFAULT_POPULATION_URL = "https://country.space/api/v0.1/population/ukraine"
DEFAULT_TIMEOUT_S = 5.0

# Ukraine, annual totals 2010–2023.
FALLBACK_POPULATION: Tuple[PopulationPoint, ...] = tuple(
    PopulationPoint(year=year, value=float(value))
    for year, value in (
        (2010, 45_870_700),
        (2011, 45_750_000),
        (2012, 45_550_000),
        (2013, 45_400_000),
        (2014, 45_000_000),
        (2015, 44_400_000),
        (2016, 42_800_000),
        (2017, 42_400_000),
        (2018, 42_100_000),
        (2019, 41_900_000),
        (2020, 41_700_000),
        (2021, 41_500_000),
        (2022, 41_100_000),
        (2023, 40_800_000),
    )
)

# Row "sex" values that denote the whole population.
_TOTAL_SEX_VALUES = frozenset({"", "total", "both", "both sexes", "all"})


class HistoricalDataSource(Protocol):
    def fetch(self) -> List[PopulationPoint]:
        ...


class MacroFactorsProvider(Protocol):
    def fetch(self) -> MacroIndicators:
        ...


# ─────────────────────────────────────────────────────────────────────────── #
# Historical series                                                            #
# ─────────────────────────────────────────────────────────────────────────── #

class StaticHistoricalSource:
    """Serves a fixed series (the packaged fallback by default)."""

    def __init__(self, points: Sequence[PopulationPoint] = FALLBACK_POPULATION) -> None:
        self._points = sorted_series(points)

    def fetch(self) -> List[PopulationPoint]:
        if not self._points:
            raise DataUnavailableError("Static historical series is empty.")
        return list(self._points)


def parse_population_counts(rows: Iterable[Mapping[str, Any]]) -> List[PopulationPoint]:
    """Convert raw populationCounts rows into an ascending total series.

    Rows segmented by sex and rows without a usable year/value are dropped.
    When a year appears more than once, the last row wins.
    """
    by_year: Dict[int, PopulationPoint] = {}
    for row in rows:
        if not isinstance(row, Mapping):
            continue
        sex = str(row.get("sex") or "").strip().lower()
        if sex not in _TOTAL_SEX_VALUES:
            continue
        try:
            year = int(row["year"])
            value = float(row["value"])
        except (KeyError, TypeError, ValueError):
            continue
        by_year[year] = PopulationPoint(year=year, value=value)
    return list(sorted_series(by_year.values()))


class HttpHistoricalSource:
    """Fetches the historical series over HTTP.

    The endpoint returns ``{"data": {"populationCounts": [...]}}``.

    Attributes:
        url:     Endpoint URL.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        url: str = DEFAULT_POPULATION_URL,
        timeout: float = DEFAULT_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._session = session

    def _get(self) -> requests.Response:
        getter = self._session.get if self._session is not None else requests.get
        return getter(self.url, timeout=self.timeout)

    def fetch(self) -> List[PopulationPoint]:
        """Download and parse the series.

        Raises:
            DataUnavailableError: On transport errors, non-200 responses,
                unexpected payloads or an empty series.
        """
        try:
            resp = self._get()
        except requests.RequestException as exc:
            raise DataUnavailableError(f"Request to {self.url} failed: {exc}") from exc

        if resp.status_code != 200:
            raise DataUnavailableError(
                f"HTTP {resp.status_code} from {self.url}: {resp.reason}"
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise DataUnavailableError(f"Invalid JSON from {self.url}") from exc

        data = payload.get("data") if isinstance(payload, Mapping) else None
        rows = data.get("populationCounts") if isinstance(data, Mapping) else None
        if not isinstance(rows, list) or not rows:
            raise DataUnavailableError(f"No populationCounts in response from {self.url}")

        points = parse_population_counts(rows)
        if not points:
            raise DataUnavailableError(f"No whole-population rows in response from {self.url}")
        logger.debug("Fetched %d historical points from %s", len(points), self.url)
        return points


# ─────────────────────────────────────────────────────────────────────────── #
# Macro factors                                                                #
# ─────────────────────────────────────────────────────────────────────────── #

class StaticMacroFactorsProvider:
    """Constant macro indicators (GDP growth %, conflict index, sentiment)."""

    def __init__(
        self,
        gdp_growth: float = 2.8,
        conflict_index: float = 0.6,
        sentiment: float = 0.2,
    ) -> None:
        self._macro = MacroIndicators(
            gdp_growth=gdp_growth, conflict_index=conflict_index, sentiment=sentiment
        )

    def fetch(self) -> MacroIndicators:
        return self._macro
