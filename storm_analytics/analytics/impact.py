"""
Impact analytics — dataset totals, category rankings by human and economic harm.
"""
from __future__ import annotations

import pandas as pd

from storm_analytics.analytics.common import pct_of_total
from storm_analytics.config import RANKING_METRICS

_TOTAL_COLS = {
    "fatalities": "FATALITIES",
    "injuries": "INJURIES",
    "property_damage": "PROPDMG_TOT",
    "crop_damage": "CROPDMG_TOT",
    "total_damage": "TOTAL_DMG",
}


def impact_totals(df: pd.DataFrame) -> dict:
    """Dataset-wide KPIs."""
    if df.empty:
        return {"events": 0, "categories": 0, **{k: 0 for k in _TOTAL_COLS}}
    totals = {k: float(df[c].sum()) for k, c in _TOTAL_COLS.items()}
    totals["fatalities"] = int(totals["fatalities"])
    totals["injuries"] = int(totals["injuries"])
    return {"events": len(df), "categories": int(df["EVCAT"].nunique()), **totals}


def rank_categories(df: pd.DataFrame, metric: str = "HARM", top: int | None = None) -> pd.DataFrame:
    """Categories ranked by the total of one impact metric.

    Ties keep alphabetical order so rankings are stable.
    """
    metric = metric.upper()
    if metric not in RANKING_METRICS:
        raise ValueError(f"Unknown ranking metric: {metric}")

    cols = ["rank", "EVCAT", "events", "total", "mean", "pct_of_total"]
    if df.empty:
        return pd.DataFrame(columns=cols)

    g = df.groupby("EVCAT", observed=True)[metric].agg(events="count", total="sum", mean="mean")
    g = g.reset_index().sort_values(["total", "EVCAT"], ascending=[False, True], kind="mergesort")
    grand = g["total"].sum()
    g["pct_of_total"] = g["total"].apply(lambda v: round(pct_of_total(v, grand), 2))
    g["rank"] = range(1, len(g) + 1)
    if top:
        g = g.head(top)
    return g[cols].reset_index(drop=True)


def yearly_trend(df: pd.DataFrame, metric: str = "HARM") -> pd.DataFrame:
    """Category × year totals of a metric (years as rows, categories as columns)."""
    metric = metric.upper()
    if metric not in RANKING_METRICS:
        raise ValueError(f"Unknown ranking metric: {metric}")
    data = df.dropna(subset=["YEAR"]) if not df.empty else df
    if data.empty:
        return pd.DataFrame()
    pivot = data.pivot_table(index="YEAR", columns="EVCAT", values=metric, aggfunc="sum", fill_value=0)
    pivot.columns.name = None
    return pivot.sort_index()
