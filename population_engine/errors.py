"""
Exception hierarchy for the population forecast engine.

  ValidationError       — malformed or out-of-range scenario input (fail fast)
  DataUnavailableError  — historical source failed or returned nothing
                          (recovered by substituting the fallback series)
  ComputationError      — static prediction turned non-finite (never retried)
  InternalError         — anything else, reported generically at the boundary
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ForecastError(Exception):
    """Base class for every error raised by population_engine."""


class ValidationError(ForecastError, ValueError):
    """Scenario input rejected before any computation.

    Attributes:
        field:   Name of the offending field (camelCase, as in the payload).
        details: Optional mapping of field name → message.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.details: Dict[str, Any] = dict(details or {})
        if field is not None and field not in self.details:
            self.details[field] = message


class DataUnavailableError(ForecastError):
    """Historical data source failed or returned an empty series."""


class ComputationError(ForecastError):
    """Numeric pipeline produced a non-finite prediction."""


class InternalError(ForecastError):
    """Unexpected failure, surfaced to callers without internal detail."""
