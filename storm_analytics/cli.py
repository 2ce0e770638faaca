#!/usr/bin/env python3
"""
Storm Analytics CLI — clean storm event data, print impact tables, export, serve.

USAGE:
  python -m storm_analytics.cli categories                         # Surviving categories + counts
  python -m storm_analytics.cli categories --dropped               # Also list filtered-out labels

  python -m storm_analytics.cli summary                            # Stats per category
  python -m storm_analytics.cli summary --by category_year --year-start 1996
  python -m storm_analytics.cli summary --by category_state --category TORNADO

  python -m storm_analytics.cli rank --metric HARM --top 10        # Most harmful to health
  python -m storm_analytics.cli rank --metric TOTAL_DMG --top 10   # Costliest

  python -m storm_analytics.cli clean --output cleaned.csv         # Write the cleaned table
  python -m storm_analytics.cli export                             # Excel + JSON impact tables
  python -m storm_analytics.cli serve --port 8000                  # Start API server (data from STORM_DATA_DIR)

Every command except serve accepts --input PATH (file or folder), --min-support N and --log-level.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

import pandas as pd

from storm_analytics.config import INBOX_FOLDER, LOG_LEVEL, MIN_SUPPORT, RANKING_METRICS, REPORTS_FOLDER
from storm_analytics.data.loader import SchemaError
from storm_analytics.data.store import DataStore
from storm_analytics.data.schemas import EventFilter, GroupBy


def _build_filter(args) -> EventFilter | None:
    """Build an EventFilter from CLI args."""
    filt = EventFilter(
        start_year=getattr(args, "year_start", None),
        end_year=getattr(args, "year_end", None),
        category=getattr(args, "category", None),
        state=getattr(args, "state", None),
    )
    return None if filt.is_empty else filt


def _load_store(args) -> DataStore:
    return DataStore(min_support=args.min_support).load(Path(args.input))


def _print_table(df: pd.DataFrame) -> None:
    if df.empty:
        print("  (no rows)")
        return
    with pd.option_context("display.max_rows", None, "display.width", 200,
                           "display.float_format", "{:,.2f}".format):
        print(df.to_string(index=False))


def cmd_categories(args):
    """List categories that survived the support filter."""
    store = _load_store(args)
    counts = store.df["EVCAT"].value_counts()
    print(f"\nCATEGORIES ({len(counts)}, min support {store.min_support}):\n")
    for i, (cat, n) in enumerate(counts.items(), 1):
        print(f"{i:<4}{cat[:40]:<42}{n:>12,}")

    if args.dropped:
        print(f"\nDROPPED ({len(store.dropped_categories)}):\n")
        for cat in store.dropped_categories:
            print(f"    {cat[:60]:<62}{store.category_counts[cat]:>8,}")


def cmd_summary(args):
    """Print grouped summary statistics."""
    from storm_analytics.analytics.summary import summarize

    store = _load_store(args)
    filt = _build_filter(args)
    by = GroupBy(args.by)
    table = summarize(store.events_for(by, filt), by, args.fields)
    print(f"\n  {(filt or EventFilter()).label}  |  {store.year_range(filt)}\n")
    _print_table(table)


def cmd_rank(args):
    """Rank categories by an impact metric."""
    from storm_analytics.analytics.impact import rank_categories

    store = _load_store(args)
    filt = _build_filter(args)
    table = rank_categories(store.get_events(filt), args.metric, args.top)
    print(f"\n  {args.metric.upper()} ranking  |  {(filt or EventFilter()).label}\n")
    _print_table(table)


def cmd_clean(args):
    """Write the cleaned event table to CSV."""
    store = _load_store(args)
    out = Path(args.output)
    out.parent.mkdir(parents=True, exist_ok=True)
    store.df.to_csv(out, index=False)

    d = store.diagnostics
    print(f"\n  Cleaned {d.rows_cleaned:,} of {d.rows_loaded:,} rows → {out}")
    print(f"  Summary rows dropped:   {d.summary_rows_dropped:,}")
    print(f"  Below support ({store.min_support}):  {d.rows_below_support:,} rows in {d.categories_dropped:,} categories")
    print(f"  Outside contiguous US:  {d.outside_conus:,}")
    print(f"  Unparsed begin dates:   {d.begin_date_unparsed:,}\n")


def cmd_export(args):
    """Export impact tables as Excel + JSON."""
    from storm_analytics.analytics.common import sanitize_for_json
    from storm_analytics.reports.impact_tables import generate_excel, generate_json

    print("\n" + "=" * 70)
    print("  STORM ANALYTICS — IMPACT TABLE EXPORT")
    print("=" * 70)
    print(f"  Started: {datetime.now():%Y-%m-%d %H:%M:%S}")

    store = _load_store(args)
    filt = _build_filter(args)

    output_folder = Path(args.output) if args.output else REPORTS_FOLDER / datetime.now().strftime("%Y%m%d_%H%M%S")
    output_folder.mkdir(parents=True, exist_ok=True)

    generate_excel(store, output_folder / "Storm_Impact_Tables.xlsx", filt)
    print("   Storm_Impact_Tables.xlsx")

    with open(output_folder / "storm_impact.json", "w") as f:
        json.dump(sanitize_for_json(generate_json(store, filt)), f, separators=(",", ":"), default=str)
    print("   storm_impact.json")

    store.df.to_csv(output_folder / "cleaned.csv", index=False)
    print("   cleaned.csv")

    print(f"\n  Saved to: {output_folder}")
    print("=" * 70 + "\n")


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Storm Analytics API on port {args.port}...")
    uvicorn.run("storm_analytics.main:app", host="0.0.0.0", port=args.port, reload=args.reload)


def _add_filter_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--year-start", type=int, help="First year (inclusive)")
    p.add_argument("--year-end", type=int, help="Last year (inclusive)")
    p.add_argument("--category", help="Restrict to one category")
    p.add_argument("--state", help="Restrict to one two-letter state code")


def main(argv: list[str] | None = None) -> int:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--input", default=str(INBOX_FOLDER), help=f"Data file or folder (default {INBOX_FOLDER})")
    common.add_argument("--min-support", type=int, default=MIN_SUPPORT,
                        help=f"Drop categories with this many events or fewer (default {MIN_SUPPORT})")
    common.add_argument("--log-level", default=LOG_LEVEL, help="Logging level (default INFO)")

    parser = argparse.ArgumentParser(
        description="Storm Analytics — severe-weather event categorization and impact statistics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    cat_parser = subparsers.add_parser("categories", parents=[common], help="List categories")
    cat_parser.add_argument("--dropped", action="store_true", help="Also list categories below support")
    cat_parser.set_defaults(func=cmd_categories)

    summary_parser = subparsers.add_parser("summary", parents=[common], help="Grouped summary statistics")
    summary_parser.add_argument("--by", choices=[g.value for g in GroupBy], default=GroupBy.CATEGORY.value)
    summary_parser.add_argument("--fields", nargs="+", help="Numeric columns to summarize")
    _add_filter_args(summary_parser)
    summary_parser.set_defaults(func=cmd_summary)

    rank_parser = subparsers.add_parser("rank", parents=[common], help="Rank categories by impact")
    rank_parser.add_argument("--metric", type=str.upper, choices=RANKING_METRICS, default="HARM")
    rank_parser.add_argument("--top", type=int, help="Only the top N categories")
    _add_filter_args(rank_parser)
    rank_parser.set_defaults(func=cmd_rank)

    clean_parser = subparsers.add_parser("clean", parents=[common], help="Write the cleaned table to CSV")
    clean_parser.add_argument("--output", default="cleaned.csv", help="Output CSV path")
    clean_parser.set_defaults(func=cmd_clean)

    export_parser = subparsers.add_parser("export", parents=[common], help="Export Excel + JSON impact tables")
    export_parser.add_argument("--output", help="Output folder (default: timestamped folder under reports/)")
    _add_filter_args(export_parser)
    export_parser.set_defaults(func=cmd_export)

    serve_parser = subparsers.add_parser("serve", help="Start API server (reads STORM_DATA_DIR)")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    logging.basicConfig(level=getattr(args, "log_level", LOG_LEVEL).upper(), format="%(asctime)s - %(levelname)s - %(message)s")
    try:
        args.func(args)
    except (FileNotFoundError, SchemaError) as exc:
        print(f"  Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
