"""
Static regional configuration: coefficient table and gender-ratio table.

Both are loaded from YAML (package defaults under population_engine/data/)
and are plain immutable values; callers own the instances and pass them
into the engine explicitly.

Region identifiers are matched through normalised key variants, so
"UA-46", "UA46", "46", "Lviv Oblast", "Lviv" and "Львівська" all resolve to
the same entry.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

import yaml

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_COEFFICIENTS_PATH = _DATA_DIR / "regional_coefficients.yaml"
DEFAULT_GENDER_RATIOS_PATH = _DATA_DIR / "gender_ratios.yaml"


def normalize_region_key(value: str) -> str:
    """Lowercase, strip diacritics and keep only letters and digits."""
    decomposed = unicodedata.normalize("NFD", value.lower())
    return "".join(
        ch for ch in decomposed
        if not unicodedata.combining(ch) and ch.isalnum()
    )


# ─────────────────────────────────────────────────────────────────────────── #
# Regional coefficients                                                        #
# ─────────────────────────────────────────────────────────────────────────── #

@dataclass(frozen=True)
class RegionCoefficient:
    code: str
    name: str
    label: str
    coefficient: float

    def key_variants(self) -> Tuple[str, ...]:
        raw = [self.name, self.label, self.code]
        if self.code.upper().startswith("UA-"):
            raw.append(self.code[3:])
        if self.name.endswith(" Oblast"):
            raw.append(self.name[: -len(" Oblast")])
        if " (" in self.label:
            raw.append(self.label.split(" (", 1)[0])
        variants = []
        for item in raw:
            key = normalize_region_key(item)
            if key and key not in variants:
                variants.append(key)
        return tuple(variants)


@dataclass(frozen=True)
class RegionTable:
    """Per-region relative weights."""

    entries: Tuple[RegionCoefficient, ...]

    def __post_init__(self) -> None:
        for entry in self.entries:
            if entry.coefficient < 0:
                raise ValueError(
                    f"Region {entry.code} has negative coefficient {entry.coefficient}"
                )
        lookup: Dict[str, RegionCoefficient] = {}
        for entry in self.entries:
            for key in entry.key_variants():
                lookup.setdefault(key, entry)
        object.__setattr__(self, "_lookup", lookup)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def total_coefficient(self) -> float:
        return float(sum(e.coefficient for e in self.entries))

    def find(self, identifier: Optional[str]) -> Optional[RegionCoefficient]:
        """Resolve a code, name or label to its entry (None if unknown)."""
        if not identifier:
            return None
        key = normalize_region_key(identifier)
        return self._lookup.get(key) if key else None  # type: ignore[attr-defined]

    def coefficient(self, identifier: Optional[str]) -> float:
        """Coefficient for a region identifier, 0.0 if unknown."""
        entry = self.find(identifier)
        return entry.coefficient if entry is not None else 0.0

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "RegionTable":
        entries = tuple(
            RegionCoefficient(
                code=str(r["code"]),
                name=str(r.get("name", r["code"])),
                label=str(r.get("label", r.get("name", r["code"]))),
                coefficient=float(r["coefficient"]),
            )
            for r in records
        )
        return cls(entries=entries)

    @classmethod
    def from_yaml(cls, path: Union[str, Path] = DEFAULT_COEFFICIENTS_PATH) -> "RegionTable":
        """Load a coefficient table from YAML.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError:        If the file has no 'regions' list.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Regional coefficients not found: {path.resolve()}")
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
        if not isinstance(config.get("regions"), list):
            raise ValueError(f"{path}: must include a 'regions' list.")
        return cls.from_records(config["regions"])


# ─────────────────────────────────────────────────────────────────────────── #
# Gender ratios                                                                #
# ─────────────────────────────────────────────────────────────────────────── #

@dataclass(frozen=True)
class GenderRatio:
    male: float
    female: float

    def __post_init__(self) -> None:
        if self.male < 0 or self.female < 0:
            raise ValueError(f"Gender ratio must be non-negative, got {self}")


@dataclass(frozen=True)
class GenderRatioTable:
    """Per-region male/female shares with a default fallback."""

    default: GenderRatio
    by_region: Tuple[Tuple[str, GenderRatio], ...] = ()

    def ratio_for(self, region: RegionCoefficient) -> GenderRatio:
        """Region-specific ratio matched by any key variant, else the default."""
        variants = set(region.key_variants())
        for key, ratio in self.by_region:
            if normalize_region_key(key) in variants:
                return ratio
        return self.default

    @classmethod
    def from_yaml(
        cls, path: Union[str, Path] = DEFAULT_GENDER_RATIOS_PATH
    ) -> "GenderRatioTable":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Gender ratios not found: {path.resolve()}")
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
        if "default" not in config:
            raise ValueError(f"{path}: must include a 'default' ratio.")
        default = GenderRatio(**config["default"])
        by_region = tuple(
            (str(key), GenderRatio(**value))
            for key, value in (config.get("regions") or {}).items()
        )
        return cls(default=default, by_region=by_region)


def load_default_tables() -> Tuple[RegionTable, GenderRatioTable]:
    """Read the packaged coefficient and gender-ratio tables."""
    return RegionTable.from_yaml(), GenderRatioTable.from_yaml()
