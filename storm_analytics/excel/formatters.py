"""
Cell and row formatting helpers for impact table workbooks.
"""
from __future__ import annotations

from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from storm_analytics.excel.styles import (
    HEADER_FONT, HEADER_FILL, HEADER_BORDER,
    DATA_FONT, CELL_BORDER, STRIPE_FILL,
    KPI_VALUE_FONT, KPI_LABEL_FONT,
    CENTER, LEFT, RIGHT,
    HIGHLIGHT_FILLS,
)

# Column type → Excel number format. Types not listed are written as text.
NUMBER_FORMATS = {
    "currency": '"$"#,##0',
    "number": "#,##0",
    "decimal": "#,##0.00",
    "percent": '0.00"%"',
}


def format_header_row(ws: Worksheet, row_num: int, labels: list[str]) -> None:
    """Write and style a header row."""
    for col, label in enumerate(labels, 1):
        cell = ws.cell(row=row_num, column=col, value=label)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = CENTER
        cell.border = HEADER_BORDER


def format_data_cell(
    ws: Worksheet,
    row_num: int,
    col_num: int,
    value,
    col_type: str = "text",
    highlight: str | None = None,
) -> None:
    """Write one table cell; highlighted rows override the zebra stripe."""
    cell = ws.cell(row=row_num, column=col_num, value=value)
    cell.font = DATA_FONT
    cell.border = CELL_BORDER

    number_format = NUMBER_FORMATS.get(col_type)
    cell.alignment = RIGHT if number_format else LEFT
    if number_format:
        cell.number_format = number_format

    fill = HIGHLIGHT_FILLS.get(highlight) if highlight else None
    if fill is None and row_num % 2 == 0:
        fill = STRIPE_FILL
    if fill is not None:
        cell.fill = fill


def auto_column_width(ws: Worksheet, min_width: int = 10, max_width: int = 45) -> None:
    """Size each column to its longest value, within bounds."""
    for column in ws.columns:
        longest = max((len(str(c.value)) for c in column if c.value is not None), default=0)
        letter = get_column_letter(column[0].column)
        ws.column_dimensions[letter].width = min(max(longest + 2, min_width), max_width)


def add_kpi_card(ws: Worksheet, row: int, col: int, value, label: str, col_type: str = "number") -> None:
    """Large KPI value with a small caption underneath."""
    value_cell = ws.cell(row=row, column=col, value=value)
    value_cell.font = KPI_VALUE_FONT
    value_cell.alignment = CENTER
    if col_type in NUMBER_FORMATS:
        value_cell.number_format = NUMBER_FORMATS[col_type]

    label_cell = ws.cell(row=row + 1, column=col, value=label)
    label_cell.font = KPI_LABEL_FONT
    label_cell.alignment = CENTER
