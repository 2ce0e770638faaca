"""
DataStore — In-memory cleaned storm events backed by pandas.

Loaded once at startup, queried on every request or CLI command. A reload
builds a complete new snapshot and swaps it in with a single assignment, so
readers see either the old data or the new data, never a mix.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from storm_analytics.config import INBOX_FOLDER, MIN_SUPPORT
from storm_analytics.data.pipeline import PipelineResult, run_pipeline
from storm_analytics.data.schemas import EventFilter, GroupBy, RepairDiagnostics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    df: pd.DataFrame = field(default_factory=pd.DataFrame)
    geographic: pd.DataFrame = field(default_factory=pd.DataFrame)
    category_counts: pd.Series = field(default_factory=lambda: pd.Series(dtype="int64"))
    dropped_categories: list[str] = field(default_factory=list)
    diagnostics: RepairDiagnostics = field(default_factory=RepairDiagnostics)
    source: Path | pd.DataFrame = INBOX_FOLDER
    loaded: bool = False

    @classmethod
    def from_result(cls, result: PipelineResult, source: Path | pd.DataFrame) -> "_Snapshot":
        df = result.cleaned
        return cls(
            df=df,
            geographic=df[df["IS_CONUS"] & df["FIPS"].notna()],
            category_counts=result.category_counts,
            dropped_categories=result.dropped_categories,
            diagnostics=result.diagnostics,
            source=source,
            loaded=True,
        )


class DataStore:
    """Cleaned storm events with filtered accessors."""

    def __init__(self, min_support: int = MIN_SUPPORT) -> None:
        self.min_support = min_support
        self._snapshot = _Snapshot()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, source: Path | pd.DataFrame = INBOX_FOLDER) -> "DataStore":
        """Run the cleaning pipeline and keep its result.

        On failure the previously loaded data is left in place.
        """
        snapshot = _Snapshot.from_result(run_pipeline(source, self.min_support), source)
        self._snapshot = snapshot
        logger.info("Store ready: %s events, %s with usable geography",
                    f"{len(snapshot.df):,}", f"{len(snapshot.geographic):,}")
        return self

    @property
    def is_loaded(self) -> bool:
        return self._snapshot.loaded

    @property
    def df(self) -> pd.DataFrame:
        return self._snapshot.df

    @property
    def category_counts(self) -> pd.Series:
        """Per-category record counts before the support filter."""
        return self._snapshot.category_counts

    @property
    def dropped_categories(self) -> list[str]:
        return self._snapshot.dropped_categories

    @property
    def diagnostics(self) -> RepairDiagnostics:
        return self._snapshot.diagnostics

    @property
    def source(self) -> Path | pd.DataFrame:
        return self._snapshot.source

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    @staticmethod
    def _apply_filter(df: pd.DataFrame, filt: EventFilter) -> pd.DataFrame:
        start, end = filt.resolve()
        if start is not None:
            df = df[(df["YEAR"] >= start).fillna(False)]
        if end is not None:
            df = df[(df["YEAR"] <= end).fillna(False)]
        if filt.category:
            df = df[df["EVCAT"] == filt.category.upper()]
        if filt.state:
            df = df[(df["STATE"].str.strip().str.upper() == filt.state.upper()).fillna(False)]
        return df

    def get_events(self, filt: EventFilter | None = None) -> pd.DataFrame:
        """Cleaned events, optionally filtered.

        Returns a filtered view (not a copy). Callers that need to mutate
        should call .copy() themselves.
        """
        df = self._snapshot.df
        if filt and not df.empty:
            df = self._apply_filter(df, filt)
        return df

    def get_geographic(self, filt: EventFilter | None = None) -> pd.DataFrame:
        """Events usable for geographic grouping (contiguous US, region id present)."""
        snapshot = self._snapshot
        if not snapshot.loaded:
            return snapshot.df
        df = snapshot.geographic
        if filt:
            df = self._apply_filter(df, filt)
        return df

    def events_for(self, by: GroupBy, filt: EventFilter | None = None) -> pd.DataFrame:
        """The right event subset for a grouping."""
        return self.get_geographic(filt) if by.is_geographic else self.get_events(filt)

    # ------------------------------------------------------------------
    # Metadata queries
    # ------------------------------------------------------------------

    def categories(self) -> list[str]:
        """Surviving categories sorted by record count desc."""
        df = self._snapshot.df
        if df.empty:
            return []
        return df["EVCAT"].value_counts().index.tolist()

    def years_available(self) -> list[int]:
        df = self._snapshot.df
        if df.empty:
            return []
        return sorted(int(y) for y in df["YEAR"].dropna().unique())

    def year_range(self, filt: EventFilter | None = None) -> str:
        """Human-readable year range string."""
        df = self.get_events(filt)
        if df.empty:
            return "N/A"
        years = df["YEAR"].dropna()
        if years.empty:
            return "N/A"
        return f"{int(years.min())} to {int(years.max())}"

    def row_count(self) -> int:
        return len(self._snapshot.df)

    def geographic_count(self) -> int:
        return len(self._snapshot.geographic)
