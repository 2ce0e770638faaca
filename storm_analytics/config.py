"""
Storm Analytics — Configuration: paths, constants, classification rules.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths (override with STORM_DATA_DIR env var)
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("STORM_DATA_DIR", str(Path.home() / "storm-analytics")))
BASE_FOLDER = _data_dir
INBOX_FOLDER = _data_dir / "inbox"
REPORTS_FOLDER = _data_dir / "reports"

# File suffixes picked up from the inbox (compression inferred by pandas)
INPUT_SUFFIXES = (".csv", ".csv.bz2", ".csv.gz", ".csv.zip")

LOG_LEVEL = os.environ.get("STORM_LOG_LEVEL", "INFO")

# ---------------------------------------------------------------------------
# Input schema
# ---------------------------------------------------------------------------
REQUIRED_COLUMNS = [
    "EVTYPE",
    "BGN_DATE",
    "END_DATE",
    "STATE",
    "STATE__",
    "COUNTY",
    "LATITUDE",
    "LONGITUDE",
    "FATALITIES",
    "INJURIES",
    "PROPDMG",
    "PROPDMGEXP",
    "CROPDMG",
    "CROPDMGEXP",
    "REMARKS",
]

# Read as str so exponent digits and labels survive untouched
TEXT_COLUMNS = ["EVTYPE", "BGN_DATE", "END_DATE", "STATE", "PROPDMGEXP", "CROPDMGEXP", "REMARKS"]

NUMERIC_COLUMNS = ["STATE__", "COUNTY", "LATITUDE", "LONGITUDE", "FATALITIES", "INJURIES", "PROPDMG", "CROPDMG"]

DATE_FORMAT = "%m/%d/%Y %H:%M:%S"

# ---------------------------------------------------------------------------
# Label normalization & classification
# ---------------------------------------------------------------------------
SUMMARY_MARKER = "SUMMARY"

# Order matters: first match wins. SURGE is listed under FLOOD and
# HURRICANE, WHIRL under TORNADO and WIND; the earlier rule always takes it.
CATEGORY_RULES = [
    ("COLD", ["BLIZZARD", "WINT", "FREEZE", "COLD", "ICE", "SLEET", "ICY"]),
    ("HAIL", ["HAIL"]),
    ("FLOOD", ["FLOOD", "TSUNAMI", "FLD", "HIGH TIDE", "SURF", "SEICHE", "SURGE"]),
    ("HURRICANE", ["HURRICANE", "TYPHOON", "TROPICAL", "SURGE"]),
    ("THUNDERSTORM", ["THUN", " TSTM", "RAIN", "PRECIP"]),
    ("HEAT_DRY", ["DROUGHT", "DRY", "HOT", "WARM", "HEAT"]),
    ("TORNADO", ["TORNAD", "SPOUT", "WHIRL", "FUNNEL", "ROTATING WALL CLOUD", "DUST DEVIL"]),
    ("WIND", ["WIND", "BURST", "WHIRL"]),
    ("SNOW", ["SNOW"]),
    ("FIRE", ["FIRE", "SMOKE"]),
    ("VOLCANO", ["VOLCA"]),
    ("FOG", ["FOG"]),
]

# Categories with this many records or fewer are dropped from the dataset
MIN_SUPPORT = int(os.environ.get("STORM_MIN_SUPPORT", "500"))

# ---------------------------------------------------------------------------
# Damage exponent codes (digits map to themselves, anything else to 0)
# ---------------------------------------------------------------------------
EXPONENT_CODES = {
    "H": 2,
    "K": 3,
    "M": 6,
    "B": 9,
}

# ---------------------------------------------------------------------------
# Geography: 48 contiguous states and their bounding box
# ---------------------------------------------------------------------------
STATE_NAMES = {
    "AL": "alabama", "AZ": "arizona", "AR": "arkansas", "CA": "california",
    "CO": "colorado", "CT": "connecticut", "DE": "delaware", "FL": "florida",
    "GA": "georgia", "ID": "idaho", "IL": "illinois", "IN": "indiana",
    "IA": "iowa", "KS": "kansas", "KY": "kentucky", "LA": "louisiana",
    "ME": "maine", "MD": "maryland", "MA": "massachusetts", "MI": "michigan",
    "MN": "minnesota", "MS": "mississippi", "MO": "missouri", "MT": "montana",
    "NE": "nebraska", "NV": "nevada", "NH": "new hampshire", "NJ": "new jersey",
    "NM": "new mexico", "NY": "new york", "NC": "north carolina", "ND": "north dakota",
    "OH": "ohio", "OK": "oklahoma", "OR": "oregon", "PA": "pennsylvania",
    "RI": "rhode island", "SC": "south carolina", "SD": "south dakota", "TN": "tennessee",
    "TX": "texas", "UT": "utah", "VT": "vermont", "VA": "virginia",
    "WA": "washington", "WV": "west virginia", "WI": "wisconsin", "WY": "wyoming",
}
CONUS_STATES = frozenset(STATE_NAMES)

CONUS_LAT_RANGE = (24.0, 50.0)
CONUS_LON_RANGE = (-125.0, -66.0)

# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------
SUMMARY_FIELDS = ["FATALITIES", "INJURIES", "PROPDMG_TOT", "CROPDMG_TOT"]

RANKING_METRICS = ["HARM", "FATALITIES", "INJURIES", "TOTAL_DMG", "PROPDMG_TOT", "CROPDMG_TOT"]

QUANTILES = (0.25, 0.50, 0.75)
