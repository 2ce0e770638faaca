"""
Pytest configuration and shared fixtures.
"""
import pandas as pd
import pytest

from storm_analytics.config import REQUIRED_COLUMNS
from storm_analytics.data.store import DataStore


def make_row(evtype, **overrides) -> dict:
    """One raw storm record with sensible defaults (a Missouri county event)."""
    row = {
        "EVTYPE": evtype,
        "BGN_DATE": "4/18/1950 0:00:00",
        "END_DATE": "4/18/1950 0:00:00",
        "STATE": "MO",
        "STATE__": 29,
        "COUNTY": 97,
        "LATITUDE": 3706,
        "LONGITUDE": 9430,
        "FATALITIES": 0,
        "INJURIES": 0,
        "PROPDMG": 0.0,
        "PROPDMGEXP": "",
        "CROPDMG": 0.0,
        "CROPDMGEXP": "",
        "REMARKS": "",
    }
    row.update(overrides)
    return row


def make_frame(rows: list[dict]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=REQUIRED_COLUMNS)


@pytest.fixture
def scenario_frame():
    """6 tornado variants, 3 summary rows, 1 hailstorm."""
    tornadoes = ["TORNADO F3", "tornado f3", " Tornado F3 ", "TORNADO F3", "Tornado F3", "TORNADO F3  "]
    rows = [make_row(label) for label in tornadoes]
    rows += [make_row("SUMMARY OF MARCH") for _ in range(3)]
    rows.append(make_row("HAILSTORM"))
    return make_frame(rows)


@pytest.fixture
def mixed_frame():
    """Several categories with known damage, casualties, years and places."""
    rows = [
        # TORNADO: property damage 0, 0, 0, 100, 100, 1,000,000
        make_row("TORNADO", PROPDMG=0, PROPDMGEXP="K", FATALITIES=2, INJURIES=10),
        make_row("TORNADO", PROPDMG=0, PROPDMGEXP="", FATALITIES=0, INJURIES=5),
        make_row("TORNADO", PROPDMG=None, PROPDMGEXP="M", BGN_DATE="5/1/1951 0:00:00"),
        make_row("TORNADO", PROPDMG=1, PROPDMGEXP="H", BGN_DATE="5/1/1951 0:00:00", INJURIES=1),
        make_row("TORNADO", PROPDMG=1, PROPDMGEXP="h", STATE="AK", STATE__=2, COUNTY=20,
                 LATITUDE=6112, LONGITUDE=14990),
        make_row("TORNADO", PROPDMG=1, PROPDMGEXP="M", BGN_DATE="not a date", LATITUDE=None),
        # FLOOD: one storm surge, one flash flood
        make_row("STORM SURGE", PROPDMG=2.5, PROPDMGEXP="B", STATE="LA", STATE__=22, COUNTY=71,
                 LATITUDE=2957, LONGITUDE=-9004, BGN_DATE="8/29/2005 0:00:00"),
        make_row("FLASH FLOOD", PROPDMG=5, PROPDMGEXP="K", CROPDMG=3, CROPDMGEXP="m",
                 BGN_DATE="6/10/2005 0:00:00", FATALITIES=1),
        make_row("HURRICANE/TYPHOON STORM SURGE", PROPDMG=10, PROPDMGEXP="?",
                 BGN_DATE="8/29/2005 0:00:00", STATE="LA", STATE__=22, COUNTY=71,
                 LATITUDE=2957, LONGITUDE=9004),
        # rare label, below any positive threshold
        make_row("LIGHTNING", FATALITIES=1),
        # administrative row
        make_row("Summary August 10", PROPDMG=99, PROPDMGEXP="B"),
    ]
    return make_frame(rows)


@pytest.fixture
def loaded_store(mixed_frame):
    return DataStore(min_support=0).load(mixed_frame)


@pytest.fixture
def csv_path(tmp_path, scenario_frame):
    path = tmp_path / "inbox" / "storm_data.csv"
    path.parent.mkdir()
    scenario_frame.to_csv(path, index=False)
    return path
