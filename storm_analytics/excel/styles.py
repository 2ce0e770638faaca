"""
Single source of truth for Excel colors, fonts, fills, borders, alignments.
"""
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

# ---------------------------------------------------------------------------
# Color constants
# ---------------------------------------------------------------------------
STORM_BLUE = "1565C0"
NAVY = "0D2A4A"
LIGHT_BLUE = "E3F2FD"
LIGHT_AMBER = "FFF3E0"
STRIPE = "F5F7FA"
GRID = "CCCCCC"
WHITE = "FFFFFF"
BLACK = "000000"
GRAY_666 = "666666"


def _solid(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------
TITLE_FONT = Font(name="Calibri", size=20, bold=True, color=NAVY)
SUBTITLE_FONT = Font(name="Calibri", size=11, italic=True, color=GRAY_666)
SECTION_FONT = Font(name="Calibri", size=14, bold=True, color=NAVY)
HEADER_FONT = Font(name="Calibri", size=11, bold=True, color=WHITE)
DATA_FONT = Font(name="Calibri", size=10, color=BLACK)
KPI_VALUE_FONT = Font(name="Calibri", size=22, bold=True, color=STORM_BLUE)
KPI_LABEL_FONT = Font(name="Calibri", size=10, color=GRAY_666)

# ---------------------------------------------------------------------------
# Fills
# ---------------------------------------------------------------------------
HEADER_FILL = _solid(NAVY)
STRIPE_FILL = _solid(STRIPE)

# highlight_fn return value → fill
HIGHLIGHT_FILLS = {
    "top": _solid(LIGHT_BLUE),        # leading categories in a ranking
    "warning": _solid(LIGHT_AMBER),   # diagnostics steps that touched records
}

# ---------------------------------------------------------------------------
# Borders
# ---------------------------------------------------------------------------
_thin = Side(style="thin", color=GRID)
CELL_BORDER = Border(left=_thin, right=_thin, top=_thin, bottom=_thin)
HEADER_BORDER = Border(
    left=Side(style="thin", color=NAVY),
    right=Side(style="thin", color=NAVY),
    top=Side(style="thin", color=NAVY),
    bottom=Side(style="medium", color=NAVY),
)

# ---------------------------------------------------------------------------
# Alignments
# ---------------------------------------------------------------------------
CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")
