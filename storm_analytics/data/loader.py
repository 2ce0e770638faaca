"""
Storm event file discovery, loading, and schema validation.
"""
from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from storm_analytics.config import (
    INBOX_FOLDER, INPUT_SUFFIXES, REQUIRED_COLUMNS, TEXT_COLUMNS, NUMERIC_COLUMNS,
)

logger = logging.getLogger(__name__)


class SchemaError(ValueError):
    """Input is unreadable or lacks required columns."""


# ---------------------------------------------------------------------------
# File discovery
# ---------------------------------------------------------------------------

def _has_input_suffix(path: Path) -> bool:
    name = path.name.lower()
    return any(name.endswith(s) for s in INPUT_SUFFIXES)


def discover_inputs(inbox: Path = INBOX_FOLDER) -> list[Path]:
    """Recursively find storm data files in inbox, sorted by name."""
    if not inbox.exists():
        return []
    return sorted(p for p in inbox.rglob("*") if p.is_file() and _has_input_suffix(p))


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def validate_columns(columns, source: str = "input") -> None:
    """Raise SchemaError if any required column is absent."""
    present = set(columns)
    missing = [c for c in REQUIRED_COLUMNS if c not in present]
    if missing:
        raise SchemaError(f"{source} is missing required columns: {', '.join(missing)}")


def _coerce_types(df: pd.DataFrame) -> pd.DataFrame:
    """Numeric columns → float (garbage → NaN), text columns → str with NaN kept."""
    df = df.copy()
    for col in NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce")
    for col in TEXT_COLUMNS:
        df[col] = df[col].astype("string")
    return df


def load_raw_frame(df: pd.DataFrame, source: str = "input") -> pd.DataFrame:
    """Validate and type an already-constructed raw DataFrame."""
    validate_columns(df.columns, source)
    return _coerce_types(df[REQUIRED_COLUMNS])


# Free-text REMARKS carry stray non-UTF-8 bytes; they become U+FFFD
_READ_OPTIONS = {"encoding": "utf-8", "encoding_errors": "replace"}

_UNREADABLE = (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError)


def load_single_file(filepath: Path) -> pd.DataFrame:
    """Load one storm data file, keeping only the required columns."""
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Input not found: {filepath}")

    try:
        header = pd.read_csv(filepath, nrows=0, **_READ_OPTIONS)
        validate_columns(header.columns, filepath.name)
        df = pd.read_csv(
            filepath,
            usecols=REQUIRED_COLUMNS,
            dtype={c: str for c in TEXT_COLUMNS},
            low_memory=False,
            **_READ_OPTIONS,
        )
    except _UNREADABLE as exc:
        raise SchemaError(f"{filepath.name} is unreadable: {exc}") from exc
    logger.info("Loaded %s: %s rows", filepath.name, f"{len(df):,}")
    return _coerce_types(df)


def load_all_files(source: Path = INBOX_FOLDER) -> pd.DataFrame:
    """Load a single file, or every storm data file under a directory.

    Raises FileNotFoundError when nothing can be found, SchemaError when any
    file lacks the required columns. Either aborts the whole run.
    """
    source = Path(source)
    if source.is_file():
        return load_single_file(source)

    files = discover_inputs(source)
    if not files:
        raise FileNotFoundError(f"No storm data files found in {source}")

    frames = [load_single_file(f) for f in files]
    df = pd.concat(frames, ignore_index=True)
    logger.info("Total: %s raw rows from %d files", f"{len(df):,}", len(files))
    return df
