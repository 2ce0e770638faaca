"""
Category, grouping and filter schemas for cleaned storm events.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional


class EventCategory(str, Enum):
    COLD = "COLD"
    HAIL = "HAIL"
    FLOOD = "FLOOD"
    HURRICANE = "HURRICANE"
    THUNDERSTORM = "THUNDERSTORM"
    HEAT_DRY = "HEAT_DRY"
    TORNADO = "TORNADO"
    WIND = "WIND"
    SNOW = "SNOW"
    FIRE = "FIRE"
    VOLCANO = "VOLCANO"
    FOG = "FOG"


class GroupBy(str, Enum):
    CATEGORY = "category"
    CATEGORY_YEAR = "category_year"
    CATEGORY_REGION = "category_region"
    CATEGORY_STATE = "category_state"

    @property
    def keys(self) -> list[str]:
        """Cleaned-table columns to group on."""
        return {
            GroupBy.CATEGORY: ["EVCAT"],
            GroupBy.CATEGORY_YEAR: ["EVCAT", "YEAR"],
            GroupBy.CATEGORY_REGION: ["EVCAT", "FIPS"],
            GroupBy.CATEGORY_STATE: ["EVCAT", "STATENAME"],
        }[self]

    @property
    def is_geographic(self) -> bool:
        return self in (GroupBy.CATEGORY_REGION, GroupBy.CATEGORY_STATE)


@dataclass
class EventFilter:
    """Restricts cleaned events by year range, category and state."""
    start_year: Optional[int] = None
    end_year: Optional[int] = None
    category: Optional[str] = None       # EVCAT value
    state: Optional[str] = None          # two-letter STATE code

    def resolve(self) -> tuple[Optional[int], Optional[int]]:
        """Return (start_year, end_year), swapped if given in reverse."""
        s, e = self.start_year, self.end_year
        if s is not None and e is not None and s > e:
            return e, s
        return s, e

    @property
    def is_empty(self) -> bool:
        return all(v is None for v in (self.start_year, self.end_year, self.category, self.state))

    @property
    def label(self) -> str:
        """Human-readable label for the filter."""
        parts = []
        start, end = self.resolve()
        if start is not None and end is not None:
            parts.append(str(start) if start == end else f"{start} to {end}")
        elif start is not None:
            parts.append(f"{start} onward")
        elif end is not None:
            parts.append(f"through {end}")
        else:
            parts.append("All Years")
        if self.category:
            parts.append(self.category.upper())
        if self.state:
            parts.append(self.state.upper())
        return "  |  ".join(parts)


@dataclass
class RepairDiagnostics:
    """Counts of records touched by each pipeline step."""
    rows_loaded: int = 0
    summary_rows_dropped: int = 0
    rows_below_support: int = 0
    categories_dropped: int = 0
    damage_coefficient_defaulted: int = 0
    exponent_code_defaulted: int = 0
    begin_date_unparsed: int = 0
    end_date_unparsed: int = 0
    coordinates_missing: int = 0
    outside_conus: int = 0
    region_id_missing: int = 0
    rows_cleaned: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)
