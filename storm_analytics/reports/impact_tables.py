"""
Impact tables — aggregate tables handed to downstream reporting, as JSON or Excel.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from storm_analytics.data.store import DataStore
from storm_analytics.data.schemas import EventFilter, GroupBy
from storm_analytics.analytics.common import sanitize_for_json
from storm_analytics.analytics.impact import impact_totals, rank_categories, yearly_trend
from storm_analytics.analytics.summary import summarize, category_counts
from storm_analytics.excel.writer import ExcelWriter


RANK_COLS = [
    ("rank", "number", "Rank"),
    ("EVCAT", "text", "Category"),
    ("events", "number", "Events"),
    ("total", "number", "Total"),
    ("mean", "decimal", "Mean per Event"),
    ("pct_of_total", "percent", "% of Total"),
]

DAMAGE_RANK_COLS = [
    c if c[0] not in ("total", "mean") else (c[0], "currency", c[2]) for c in RANK_COLS
]

COUNT_COLS = [
    ("EVCAT", "text", "Category"),
    ("count", "number", "Events"),
    ("pct_of_events", "percent", "% of Events"),
]

DIAGNOSTIC_COLS = [
    ("step", "text", "Step"),
    ("rows", "number", "Rows"),
]

# Diagnostics rows counting records whose fields were defaulted or left blank
DEFAULTED_STEPS = {
    "damage_coefficient_defaulted",
    "exponent_code_defaulted",
    "begin_date_unparsed",
    "end_date_unparsed",
    "coordinates_missing",
    "region_id_missing",
}


def _summary_cols(by: GroupBy, df: pd.DataFrame) -> list[tuple[str, str, str]]:
    cols = []
    for key in df.columns:
        if key in by.keys:
            cols.append((key, "text", key))
        elif key == "count":
            cols.append((key, "number", "Events"))
        elif "DMG" in key:
            cols.append((key, "currency", key))
        else:
            cols.append((key, "decimal", key))
    return cols


def generate_json(store: DataStore, filt: EventFilter | None = None) -> dict:
    events = store.get_events(filt)
    return sanitize_for_json({
        "years": store.year_range(filt),
        "filter": (filt or EventFilter()).label,
        "totals": impact_totals(events),
        "categories": category_counts(events).to_dict("records"),
        "health_ranking": rank_categories(events, "HARM").to_dict("records"),
        "economic_ranking": rank_categories(events, "TOTAL_DMG").to_dict("records"),
        "by_category": summarize(events, GroupBy.CATEGORY).to_dict("records"),
        "by_year": summarize(events, GroupBy.CATEGORY_YEAR).to_dict("records"),
        "harm_by_year": yearly_trend(events, "HARM").reset_index().to_dict("records"),
        "by_state": summarize(store.get_geographic(filt), GroupBy.CATEGORY_STATE).to_dict("records"),
        "dropped_categories": store.dropped_categories,
        "diagnostics": store.diagnostics.as_dict(),
    })


def generate_excel(
    store: DataStore,
    output_path: str | Path,
    filt: EventFilter | None = None,
) -> Path:
    events = store.get_events(filt)
    totals = impact_totals(events)
    ew = ExcelWriter()

    ws = ew.add_sheet("Overview")
    ew.write_title(ws, "STORM EVENT IMPACT",
                   f"{store.year_range(filt)}  |  {(filt or EventFilter()).label}  |  Generated {pd.Timestamp.now():%B %d, %Y}")

    row = ew.write_section(ws, 5, "HUMAN IMPACT")
    row = ew.write_kpi_row(ws, row, [
        (totals["events"], "EVENTS", "number"),
        (totals["fatalities"], "FATALITIES", "number"),
        (totals["injuries"], "INJURIES", "number"),
    ])
    row = ew.write_section(ws, row, "ECONOMIC IMPACT")
    ew.write_kpi_row(ws, row, [
        (totals["property_damage"], "PROPERTY DAMAGE", "currency"),
        (totals["crop_damage"], "CROP DAMAGE", "currency"),
        (totals["total_damage"], "TOTAL DAMAGE", "currency"),
    ])

    def top_three(idx, _row):
        return "top" if idx < 3 else None

    def flag_defaulted(_idx, record):
        return "warning" if record["step"] in DEFAULTED_STEPS and record["rows"] > 0 else None

    ws_h = ew.add_sheet("Health Ranking")
    ew.write_table(ws_h, 1, RANK_COLS, rank_categories(events, "HARM"), highlight_fn=top_three)

    ws_e = ew.add_sheet("Economic Ranking")
    ew.write_table(ws_e, 1, DAMAGE_RANK_COLS, rank_categories(events, "TOTAL_DMG"), highlight_fn=top_three)

    ws_c = ew.add_sheet("Categories")
    ew.write_table(ws_c, 1, COUNT_COLS, category_counts(events))

    for sheet_name, by, source in [
        ("By Category", GroupBy.CATEGORY, events),
        ("By Year", GroupBy.CATEGORY_YEAR, events),
        ("By State", GroupBy.CATEGORY_STATE, store.get_geographic(filt)),
    ]:
        table = summarize(source, by)
        ew.write_table(ew.add_sheet(sheet_name), 1, _summary_cols(by, table), table)

    diag = pd.DataFrame(list(store.diagnostics.as_dict().items()), columns=["step", "rows"])
    ew.write_table(ew.add_sheet("Diagnostics"), 1, DIAGNOSTIC_COLS, diag, highlight_fn=flag_defaulted)

    return ew.save(output_path)
