"""
Field repairs: damage exponents, packed coordinates, region ids, dates.

Each repair exists as a scalar function and a column-wise version that
produces the same values over a whole DataFrame.
"""
from __future__ import annotations

import datetime as dt
import logging
import math
from dataclasses import replace
from typing import Optional

import numpy as np
import pandas as pd

from storm_analytics.config import (
    EXPONENT_CODES, DATE_FORMAT, STATE_NAMES, CONUS_STATES,
    CONUS_LAT_RANGE, CONUS_LON_RANGE,
)
from storm_analytics.data.schemas import RepairDiagnostics

logger = logging.getLogger(__name__)


def _to_float(value) -> float:
    """float(value), or NaN for None/NA/garbage."""
    if value is None:
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


# ---------------------------------------------------------------------------
# Damage amounts
# ---------------------------------------------------------------------------

def exponent_value(code) -> int:
    """Decimal exponent for a damage exponent code (unknown → 0)."""
    if code is None or (not isinstance(code, str) and pd.isna(code)):
        return 0
    if isinstance(code, (int, np.integer)) and 0 <= code <= 9:
        return int(code)
    text = str(code).strip().upper()
    if len(text) == 1 and text.isdigit():
        return int(text)
    return EXPONENT_CODES.get(text, 0)


def is_known_exponent(code) -> bool:
    """True for blank codes and codes with a defined meaning."""
    if code is None or (not isinstance(code, str) and pd.isna(code)):
        return True
    text = str(code).strip().upper()
    return text == "" or (len(text) == 1 and text.isdigit()) or text in EXPONENT_CODES


def repair_damage(coefficient, code) -> float:
    """coefficient × 10^exponent; missing, negative or infinite coefficients count as 0."""
    coef = _to_float(coefficient)
    if not math.isfinite(coef) or coef < 0:
        coef = 0.0
    return coef * 10.0 ** exponent_value(code)


def damage_amounts(coefficients: pd.Series, codes: pd.Series) -> tuple[pd.Series, int, int]:
    """Vectorized repair_damage.

    Returns (amounts, coefficients_defaulted, codes_defaulted).
    """
    coef = pd.to_numeric(coefficients, errors="coerce").astype(float)
    bad_coef = ~np.isfinite(coef) | (coef < 0)
    coef = coef.mask(bad_coef, 0.0)

    codes = codes.astype(object).where(codes.notna(), "")
    distinct = codes.unique()
    exp_lookup = {c: exponent_value(c) for c in distinct}
    unknown = {c for c in distinct if not is_known_exponent(c)}

    exponents = codes.map(exp_lookup).astype(float)
    amounts = coef * np.power(10.0, exponents)
    return amounts, int(bad_coef.sum()), int(codes.isin(unknown).sum())


# ---------------------------------------------------------------------------
# Coordinates
# ---------------------------------------------------------------------------

def _decode_packed(raw) -> float:
    value = _to_float(raw)
    if math.isnan(value):
        return math.nan
    return math.floor(value / 100) + (value % 100) / 100


def repair_latitude(raw) -> float:
    """Packed DDMM latitude → decimal degrees."""
    return _decode_packed(raw)


def repair_longitude(raw) -> float:
    """Packed DDDMM longitude → decimal degrees, always west (≤ 0)."""
    value = _decode_packed(raw)
    return -value if value > 0 else value


def _decode_packed_series(raw: pd.Series) -> pd.Series:
    v = pd.to_numeric(raw, errors="coerce").astype(float)
    return np.floor(v / 100) + np.mod(v, 100) / 100


def latitudes(raw: pd.Series) -> pd.Series:
    return _decode_packed_series(raw)


def longitudes(raw: pd.Series) -> pd.Series:
    v = _decode_packed_series(raw)
    return v.mask(v > 0, -v)


def in_conus(state, lat: float, lon: float) -> bool:
    """True when the state is contiguous-US and the point lies in its bounding box."""
    if not isinstance(state, str) or state.strip().upper() not in CONUS_STATES:
        return False
    if lat is None or lon is None or math.isnan(lat) or math.isnan(lon):
        return False
    return (CONUS_LAT_RANGE[0] <= lat <= CONUS_LAT_RANGE[1]
            and CONUS_LON_RANGE[0] <= lon <= CONUS_LON_RANGE[1])


def conus_mask(states: pd.Series, lat: pd.Series, lon: pd.Series) -> pd.Series:
    state_ok = states.astype("string").str.strip().str.upper().isin(CONUS_STATES).fillna(False)
    lat_ok = lat.between(*CONUS_LAT_RANGE)
    lon_ok = lon.between(*CONUS_LON_RANGE)
    return (state_ok & lat_ok & lon_ok).astype(bool)


# ---------------------------------------------------------------------------
# Region identifier
# ---------------------------------------------------------------------------

def region_id(state, county) -> Optional[int]:
    """state × 1000 + county, or None when either code is missing."""
    s, c = _to_float(state), _to_float(county)
    if math.isnan(s) or math.isnan(c):
        return None
    return int(round(s)) * 1000 + int(round(c))


def region_ids(states: pd.Series, counties: pd.Series) -> pd.Series:
    s = pd.to_numeric(states, errors="coerce").round()
    c = pd.to_numeric(counties, errors="coerce").round()
    return (s * 1000 + c).astype("Int64")


def state_names(states: pd.Series) -> pd.Series:
    """Two-letter codes → lowercase state names (contiguous states only)."""
    return states.astype("string").str.strip().str.upper().map(STATE_NAMES).astype(object)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

def parse_event_date(text) -> Optional[dt.date]:
    """'4/18/1950 0:00:00' → date(1950, 4, 18); None when unparseable."""
    if not isinstance(text, str):
        return None
    try:
        return dt.datetime.strptime(text.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def event_dates(texts: pd.Series) -> pd.Series:
    """Vectorized parse_event_date; NaT where unparseable, time of day dropped."""
    stripped = texts.astype("string").str.strip()
    return pd.to_datetime(stripped, format=DATE_FORMAT, errors="coerce").dt.normalize()


# ---------------------------------------------------------------------------
# Whole-table repair
# ---------------------------------------------------------------------------

def repair_fields(
    df: pd.DataFrame,
    diagnostics: RepairDiagnostics | None = None,
) -> tuple[pd.DataFrame, RepairDiagnostics]:
    """Derive every repaired column. Records are never dropped here."""
    diagnostics = diagnostics or RepairDiagnostics()

    prop, prop_coef_bad, prop_exp_bad = damage_amounts(df["PROPDMG"], df["PROPDMGEXP"])
    crop, crop_coef_bad, crop_exp_bad = damage_amounts(df["CROPDMG"], df["CROPDMGEXP"])

    lat = latitudes(df["LATITUDE"])
    lon = longitudes(df["LONGITUDE"])
    conus = conus_mask(df["STATE"], lat, lon)

    bgn = event_dates(df["BGN_DATE"])
    end = event_dates(df["END_DATE"])
    fips = region_ids(df["STATE__"], df["COUNTY"])

    fatalities = pd.to_numeric(df["FATALITIES"], errors="coerce").fillna(0)
    injuries = pd.to_numeric(df["INJURIES"], errors="coerce").fillna(0)

    out = df.assign(
        BGN_DT=bgn,
        END_DT=end,
        YEAR=bgn.dt.year.astype("Int64"),
        LAT_DEC=lat,
        LON_DEC=lon,
        FIPS=fips,
        STATENAME=state_names(df["STATE"]),
        IS_CONUS=conus,
        PROPDMG_TOT=prop,
        CROPDMG_TOT=crop,
        TOTAL_DMG=prop + crop,
        HARM=fatalities + injuries,
    )

    diagnostics = replace(
        diagnostics,
        damage_coefficient_defaulted=prop_coef_bad + crop_coef_bad,
        exponent_code_defaulted=prop_exp_bad + crop_exp_bad,
        begin_date_unparsed=int(bgn.isna().sum()),
        end_date_unparsed=int(end.isna().sum()),
        coordinates_missing=int((lat.isna() | lon.isna()).sum()),
        outside_conus=int((~conus).sum()),
        region_id_missing=int(fips.isna().sum()),
    )
    logger.info(
        "Repaired fields: %d damage coefficients and %d exponent codes defaulted, "
        "%d begin dates unparsed, %d records outside contiguous US",
        diagnostics.damage_coefficient_defaulted,
        diagnostics.exponent_code_defaulted,
        diagnostics.begin_date_unparsed,
        diagnostics.outside_conus,
    )
    return out, diagnostics
