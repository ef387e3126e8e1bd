"""
Cell Grid Source
================
Reads the first worksheet of an ``.xlsx`` file into a grid of string cells.
Every parser works on :class:`Sheet`, so tests can build grids in memory.
"""

import datetime
import logging

from openpyxl import load_workbook

logger = logging.getLogger(__name__)


def cell_text(value) -> str:
    """Render an openpyxl cell value the way it reads in the spreadsheet."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    return str(value).replace("\r\n", "\n")


class Sheet:
    """A rectangular-ish grid of string cells; missing cells read as ``""``."""

    def __init__(self, rows):
        self.rows = [list(row) for row in rows]

    def cell(self, row: int, col: int) -> str:
        if row < 0 or row >= len(self.rows):
            return ""
        values = self.rows[row]
        if col < 0 or col >= len(values):
            return ""
        return values[col]

    def row(self, row: int) -> list:
        if row < 0 or row >= len(self.rows):
            return []
        return self.rows[row]

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def row_width(self, row: int) -> int:
        return len(self.row(row))


def read_sheet(path) -> Sheet:
    """Load the first worksheet of the workbook at *path*."""
    wb = load_workbook(path, read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        rows = [[cell_text(value) for value in row]
                for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()

    # trailing empty rows are noise from formatting
    while rows and not any(rows[-1]):
        rows.pop()
    logger.debug(f"Read {len(rows)} rows from {path}")
    return Sheet(rows)
