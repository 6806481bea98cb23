"""
Projection recorder.

Provides ProjectionRecorder — a lightweight observer that records the
YearRecord objects produced by a dynamics run into an in-memory list.
Supports serialisation to list-of-dicts for tracing and export.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..core.results import YearRecord

_COMPONENT_NAMES = (
    "base",
    "eco_cycle",
    "geopolitical",
    "support",
    "sentiment",
    "volatility",
    "regional_feedback",
)


class ProjectionRecorder:
    """Records YearRecord objects produced during a projection.

    Intended for use as a hook with project_with_dynamics:

        recorder = ProjectionRecorder()
        project_with_dynamics(..., hooks=[recorder.record])

    Attributes:
        max_records: Maximum number of records to retain (None = unlimited).
    """

    def __init__(self, max_records: Optional[int] = None) -> None:
        """Initialise an empty recorder.

        Args:
            max_records: If set, older records are discarded when the buffer
                         exceeds this limit (FIFO).
        """
        if max_records is not None and max_records <= 0:
            raise ValueError(
                f"max_records must be > 0 or None, got {max_records}"
            )
        self.max_records: Optional[int] = max_records
        self._records: List[YearRecord] = []

    def record(self, year_record: YearRecord) -> None:
        """Append a record to the log."""
        self._records.append(year_record)
        if self.max_records is not None and len(self._records) > self.max_records:
            self._records.pop(0)  # FIFO eviction

    def records(self) -> List[YearRecord]:
        """Return all recorded years in chronological order (copy)."""
        return list(self._records)

    def clear(self) -> None:
        self._records = []

    def __len__(self) -> int:
        return len(self._records)

    def to_dicts(self) -> List[Dict[str, Any]]:
        """Serialise all records to a list of plain dictionaries."""
        return [r.to_dict() for r in self._records]

    def component_series(self) -> Dict[str, List[float]]:
        """Return the time-series of each swing component.

        Returns:
            Dictionary mapping component name to a list of yearly values.
        """
        return {
            name: [getattr(r.components, name) for r in self._records]
            for name in _COMPONENT_NAMES
        }
