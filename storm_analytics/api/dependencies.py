"""
FastAPI dependencies — DataStore singleton, filter parsing.
"""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Query

from storm_analytics.data.store import DataStore
from storm_analytics.data.schemas import EventFilter, GroupBy

# ---------------------------------------------------------------------------
# Global store singleton (set during startup)
# ---------------------------------------------------------------------------
_store: DataStore | None = None


def set_store(store: DataStore) -> None:
    global _store
    _store = store


def get_store() -> DataStore:
    if _store is None or not _store.is_loaded:
        raise HTTPException(503, "Data not loaded yet")
    return _store


def get_store_or_empty() -> DataStore:
    """Return the store even if it has no data (for health/reload endpoints)."""
    if _store is None:
        raise HTTPException(503, "Server not initialized yet")
    return _store


# ---------------------------------------------------------------------------
# Query parsing
# ---------------------------------------------------------------------------

def parse_filter(
    year_start: Optional[int] = Query(None),
    year_end: Optional[int] = Query(None),
    category: Optional[str] = Query(None, description="EVCAT value, e.g. TORNADO"),
    state: Optional[str] = Query(None, description="Two-letter state code"),
) -> EventFilter | None:
    """Parse filter query parameters into an EventFilter."""
    filt = EventFilter(start_year=year_start, end_year=year_end, category=category, state=state)
    return None if filt.is_empty else filt


def parse_group_by(by: str = Query("category", description="category|category_year|category_region|category_state")) -> GroupBy:
    try:
        return GroupBy(by)
    except ValueError:
        raise HTTPException(400, f"Invalid grouping: {by}")
