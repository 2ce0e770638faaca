"""
Grouped summary statistics — count, sum, mean and quartiles per group.
"""
from __future__ import annotations

import pandas as pd

from storm_analytics.config import QUANTILES, SUMMARY_FIELDS
from storm_analytics.data.schemas import GroupBy


def _quantile_label(q: float) -> str:
    return f"q{int(round(q * 100))}"


def summary_columns(by: GroupBy, fields: list[str]) -> list[str]:
    """Output column order for summarize()."""
    stats = ["sum", "mean"] + [_quantile_label(q) for q in QUANTILES]
    return by.keys + ["count"] + [f"{f}_{s}" for f in fields for s in stats]


def summarize(
    df: pd.DataFrame,
    by: GroupBy | str = GroupBy.CATEGORY,
    fields: list[str] | None = None,
) -> pd.DataFrame:
    """Per-group count plus sum/mean/quartiles of each field.

    Rows missing a group key (no YEAR, no FIPS, no STATENAME) are left out,
    and region or state groupings keep only contiguous-US records.
    Quartiles interpolate linearly between order statistics, so results
    are reproducible. Output is sorted by group key.
    """
    by = GroupBy(by)
    fields = list(fields or SUMMARY_FIELDS)
    keys = by.keys
    columns = summary_columns(by, fields)

    data = df.dropna(subset=keys) if not df.empty else df
    if by.is_geographic and "IS_CONUS" in data.columns:
        data = data[data["IS_CONUS"].astype(bool)]
    if data.empty:
        return pd.DataFrame(columns=columns)

    g = data.groupby(keys, sort=True, observed=True)
    out = g.size().rename("count").to_frame()
    for f in fields:
        col = g[f]
        out[f"{f}_sum"] = col.sum()
        out[f"{f}_mean"] = col.mean()
        quants = col.quantile(list(QUANTILES), interpolation="linear").unstack()
        for q in QUANTILES:
            out[f"{f}_{_quantile_label(q)}"] = quants[q]

    return out.reset_index()[columns]


def category_counts(df: pd.DataFrame) -> pd.DataFrame:
    """Record count and share per category, most frequent first."""
    if df.empty:
        return pd.DataFrame(columns=["EVCAT", "count", "pct_of_events"])
    counts = df["EVCAT"].value_counts().rename_axis("EVCAT").reset_index(name="count")
    counts["pct_of_events"] = (counts["count"] / counts["count"].sum() * 100).round(2)
    return counts
