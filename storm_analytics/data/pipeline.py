"""
Cleaning pipeline: normalize → classify → support filter → field repair.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

import pandas as pd

from storm_analytics.config import INBOX_FOLDER, MIN_SUPPORT
from storm_analytics.data.loader import load_all_files, load_raw_frame
from storm_analytics.data.normalize import normalize_labels, classify_events
from storm_analytics.data.repair import repair_fields
from storm_analytics.data.schemas import RepairDiagnostics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    cleaned: pd.DataFrame
    category_counts: pd.Series          # counts before the support filter
    dropped_categories: list[str] = field(default_factory=list)
    diagnostics: RepairDiagnostics = field(default_factory=RepairDiagnostics)

    @property
    def categories(self) -> list[str]:
        return sorted(self.cleaned["EVCAT"].unique().tolist())


# ---------------------------------------------------------------------------
# Frequency filter
# ---------------------------------------------------------------------------

def filter_by_support(
    df: pd.DataFrame,
    min_support: int = MIN_SUPPORT,
) -> tuple[pd.DataFrame, pd.Series, list[str]]:
    """Keep only categories with more than min_support records.

    Counting finishes over the whole table before any row is dropped.
    Returns (filtered_df, counts_before_filter, dropped_categories).
    """
    counts = df["EVCAT"].value_counts()
    retained = counts[counts > min_support].index
    dropped = sorted(counts[counts <= min_support].index.tolist())

    out = df[df["EVCAT"].isin(retained)].reset_index(drop=True)
    removed = len(df) - len(out)
    if dropped:
        logger.info(
            "Support filter (min %d): excluded %s rows across %d categories, %d categories retained",
            min_support, f"{removed:,}", len(dropped), len(retained),
        )
    return out, counts, dropped


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

def clean_events(raw: pd.DataFrame, min_support: int = MIN_SUPPORT) -> PipelineResult:
    """Run every cleaning step over a validated raw frame."""
    diagnostics = RepairDiagnostics(rows_loaded=len(raw))

    normalized, summary_dropped = normalize_labels(raw)
    classified = classify_events(normalized)
    filtered, counts, dropped = filter_by_support(classified, min_support)
    repaired, diagnostics = repair_fields(filtered, diagnostics)

    diagnostics = replace(
        diagnostics,
        summary_rows_dropped=summary_dropped,
        rows_below_support=len(classified) - len(filtered),
        categories_dropped=len(dropped),
        rows_cleaned=len(repaired),
    )
    logger.info(
        "Cleaned %s of %s rows into %d categories",
        f"{len(repaired):,}", f"{len(raw):,}", repaired["EVCAT"].nunique(),
    )
    return PipelineResult(
        cleaned=repaired,
        category_counts=counts,
        dropped_categories=dropped,
        diagnostics=diagnostics,
    )


def run_pipeline(source: Path | pd.DataFrame = INBOX_FOLDER, min_support: int = MIN_SUPPORT) -> PipelineResult:
    """Load (path) or validate (DataFrame) raw records, then clean them."""
    if isinstance(source, pd.DataFrame):
        raw = load_raw_frame(source)
    else:
        raw = load_all_files(Path(source))
    return clean_events(raw, min_support)
