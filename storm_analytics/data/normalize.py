"""
Event-type label normalization and category classification.
"""
from __future__ import annotations

import logging
import re
import string
from dataclasses import dataclass
from typing import Callable

import pandas as pd

from storm_analytics.config import CATEGORY_RULES, SUMMARY_MARKER
from storm_analytics.data.schemas import EventCategory

logger = logging.getLogger(__name__)

# a-z only; other letters keep their case
_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


# ---------------------------------------------------------------------------
# Label normalization
# ---------------------------------------------------------------------------

def normalize_label(raw) -> tuple[str, bool]:
    """Return (normalized_label, keep) for a raw EVTYPE value.

    keep is False for administrative summary rows.
    """
    if raw is None or (not isinstance(raw, str) and pd.isna(raw)):
        return "", True
    label = str(raw).translate(_ASCII_UPPER).strip()
    return label, SUMMARY_MARKER not in label


def normalize_labels(df: pd.DataFrame) -> tuple[pd.DataFrame, int]:
    """Add EVTYPE_NORM, drop summary rows. Returns (new_df, rows_dropped)."""
    labels = df["EVTYPE"].astype("string").str.translate(_ASCII_UPPER).str.strip().fillna("")
    keep = ~labels.str.contains(SUMMARY_MARKER, regex=False)
    out = df.assign(EVTYPE_NORM=labels.astype(object))[keep.to_numpy(dtype=bool)]
    dropped = int(len(df) - len(out))
    if dropped:
        logger.info("Dropped %s administrative summary rows", f"{dropped:,}")
    return out.reset_index(drop=True), dropped


# ---------------------------------------------------------------------------
# Category classification
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CategoryRule:
    """One (predicate, category) pair in the classifier."""
    category: str
    predicate: Callable[[str], bool]

    def matches(self, label: str) -> bool:
        return self.predicate(label)


def _token_predicate(tokens: list[str]) -> Callable[[str], bool]:
    pattern = re.compile("|".join(re.escape(t) for t in tokens))
    return lambda label: pattern.search(label) is not None


def build_rules(rules: list[tuple[str, list[str]]] = CATEGORY_RULES) -> tuple[CategoryRule, ...]:
    """Compile (category, tokens) pairs into ordered rules.

    Every rule must name an EventCategory; anything else raises ValueError.
    """
    return tuple(
        CategoryRule(EventCategory(cat).value, _token_predicate(tokens))
        for cat, tokens in rules
    )


RULES = build_rules()


def classify_label(label: str, rules: tuple[CategoryRule, ...] = RULES) -> str:
    """Return the category of a normalized label.

    Rules are tried top to bottom and the first hit wins; a label matching
    nothing is its own category.
    """
    for rule in rules:
        if rule.matches(label):
            return rule.category
    return label


def classify_labels(labels: pd.Series, rules: tuple[CategoryRule, ...] = RULES) -> pd.Series:
    """Classify a Series of normalized labels (each distinct label once)."""
    lookup = {label: classify_label(label, rules) for label in labels.unique()}
    return labels.map(lookup)


def classify_events(df: pd.DataFrame, rules: tuple[CategoryRule, ...] = RULES) -> pd.DataFrame:
    """Return a new frame with EVCAT assigned from EVTYPE_NORM."""
    return df.assign(EVCAT=classify_labels(df["EVTYPE_NORM"], rules))
