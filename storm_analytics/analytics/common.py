"""
Safe math helpers used across all analytics modules.
"""
from __future__ import annotations

import math

import numpy as np
import pandas as pd

from storm_analytics.config import QUANTILES


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide safely, returning default if denominator is zero or NaN."""
    if denominator == 0 or pd.isna(denominator):
        return default
    result = numerator / denominator
    return default if pd.isna(result) else result


def pct_of_total(part: float, total: float) -> float:
    """Percentage of total."""
    return safe_divide(part, total) * 100


def quartiles(values, qs: tuple[float, ...] = QUANTILES) -> tuple[float, ...]:
    """Quantiles by linear interpolation between order statistics.

    For sorted x of length n, q → x[h] + (h - floor(h)) * (x[h+1] - x[h])
    with h = (n - 1) * q. NaNs are ignored; an empty input gives NaNs.
    """
    arr = np.asarray(values, dtype=float)
    arr = np.sort(arr[~np.isnan(arr)])
    if arr.size == 0:
        return tuple(math.nan for _ in qs)
    out = []
    for q in qs:
        h = (arr.size - 1) * q
        lo = math.floor(h)
        hi = min(lo + 1, arr.size - 1)
        out.append(float(arr[lo] + (h - lo) * (arr[hi] - arr[lo])))
    return tuple(out)


def sanitize_for_json(obj):
    """Recursively convert numpy/pandas types to native Python for JSON serialization."""
    if isinstance(obj, dict):
        clean = {}
        for k, v in obj.items():
            if k is None:
                continue
            if isinstance(k, (float, np.floating)) and (math.isnan(float(k)) or math.isinf(float(k))):
                continue
            clean[k if isinstance(k, str) else str(k)] = sanitize_for_json(v)
        return clean
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating, float)):
        v = float(obj)
        return None if (math.isnan(v) or math.isinf(v)) else v
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())
    if isinstance(obj, pd.Timestamp):
        return obj.date().isoformat()
    if pd.api.types.is_scalar(obj) and pd.isna(obj):
        return None
    return obj
