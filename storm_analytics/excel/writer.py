"""
ExcelWriter — builds styled workbooks out of aggregate DataFrames.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from storm_analytics.excel.styles import TITLE_FONT, SUBTITLE_FONT, SECTION_FONT
from storm_analytics.excel.formatters import (
    add_kpi_card,
    auto_column_width,
    format_data_cell,
    format_header_row,
)


ColSpec = tuple[str, str, str]  # (column, col_type, header label)
HighlightFn = Callable[[int, pd.Series], Optional[str]]

# Excel rejects sheet titles longer than this
MAX_SHEET_TITLE = 31


class ExcelWriter:
    """One workbook, one sheet per impact table."""

    def __init__(self) -> None:
        self.wb = Workbook()
        self._sheets: list[Worksheet] = []

    def add_sheet(self, title: str) -> Worksheet:
        """New worksheet; the workbook's default sheet is reused for the first one."""
        title = title[:MAX_SHEET_TITLE]
        if self._sheets:
            ws = self.wb.create_sheet(title=title)
        else:
            ws = self.wb.active
            ws.title = title
        self._sheets.append(ws)
        return ws

    def write_title(self, ws: Worksheet, title: str, subtitle: str, width: int = 6) -> int:
        """Title and subtitle across the first rows. Returns the next free row."""
        for row, text, font in ((1, title, TITLE_FONT), (2, subtitle, SUBTITLE_FONT)):
            ws.cell(row=row, column=1, value=text).font = font
            ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=width)
        return 4

    def write_section(self, ws: Worksheet, row: int, title: str) -> int:
        ws.cell(row=row, column=1, value=title).font = SECTION_FONT
        return row + 2

    def write_kpi_row(self, ws: Worksheet, row: int, kpis: list[tuple], spacing: int = 2) -> int:
        """kpis is [(value, caption, col_type), ...]. Returns the row after the cards."""
        for i, (value, caption, col_type) in enumerate(kpis):
            add_kpi_card(ws, row, 1 + i * spacing, value, caption, col_type)
        return row + 3

    def write_table(
        self,
        ws: Worksheet,
        start_row: int,
        columns: list[ColSpec],
        data: pd.DataFrame,
        highlight_fn: HighlightFn | None = None,
    ) -> int:
        """Header plus one row per record; missing values stay blank.

        highlight_fn(position, record) names a fill ('top', 'warning') or
        returns None. Returns the row after the last record.
        """
        format_header_row(ws, start_row, [label for _, _, label in columns])

        row = start_row
        for pos, (_, record) in enumerate(data.iterrows()):
            row += 1
            hl = highlight_fn(pos, record) if highlight_fn else None
            for col_num, (key, col_type, _) in enumerate(columns, 1):
                value = record.get(key)
                if value is not None and pd.isna(value):
                    value = None
                format_data_cell(ws, row, col_num, value, col_type, highlight=hl)

        auto_column_width(ws)
        ws.freeze_panes = ws.cell(row=start_row + 1, column=1)
        return row + 1

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(path)
        return path
