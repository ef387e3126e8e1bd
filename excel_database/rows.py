"""
Row Validator
=============
Reads the data region of a Convert table against its validated columns.
"""

from dataclasses import dataclass, field

from . import type_registry
from .errors import RowError
from .schema import EXCLUDE_PREFIX, ID_COL, ID_NAME
from .type_registry import ColumnKind

DATA_START_ROW = 2
ARRAY_SEPARATOR = "\n"


@dataclass
class Row:
    id: str
    cells: dict = field(default_factory=dict)

    def __post_init__(self):
        self.cells = {ID_NAME: self.id, **self.cells}


def split_cell(text: str) -> list:
    return text.split(ARRAY_SEPARATOR)


def validate_rows(sheet, table_name, columns, resolver,
                  start_row=DATA_START_ROW) -> list:
    """Validate every data row and return them in sheet order.

    Scanning stops at the first row whose ID cell is empty.  Rows whose ID
    starts with ``#`` are skipped.
    """
    rows = []
    seen = set()
    for r in range(start_row, sheet.row_count):
        row_id = sheet.cell(r, ID_COL)
        if not row_id:
            break
        if row_id.startswith(EXCLUDE_PREFIX):
            continue
        if row_id in seen:
            raise RowError(table_name, f"Duplicate ID '{row_id}'")
        seen.add(row_id)

        row = Row(row_id)
        for col in columns:
            cell = sheet.cell(r, col.index)
            if cell.startswith(EXCLUDE_PREFIX):
                continue
            values = check_cell(table_name, row_id, col.name, col.type,
                                col.kind, col.is_array, cell, resolver)
            row.cells[col.key] = values if col.is_array else cell
        rows.append(row)
    return rows


def check_cell(table_name, row_id, col_name, type_name, kind, is_array,
               cell, resolver=None) -> list:
    """Validate one non-excluded cell and return its array elements."""
    if cell == "":
        raise RowError(table_name,
                       f"An empty cell exists in '{col_name}' of '{row_id}'")

    values = split_cell(cell)
    if not is_array and len(values) > 1:
        raise RowError(
            table_name,
            f"The cell in '{col_name}' of '{row_id}' is array, "
            f"but its type is not an array")

    if kind is ColumnKind.PRIMITIVE:
        if not all(type_registry.validate(type_name, v) for v in values):
            raise RowError(table_name,
                           f"The cell in '{col_name}' of '{row_id}' type mismatch")
    elif kind is ColumnKind.ENUMERATION:
        members = resolver.enum_members(type_name)
        if members is None or not all(v in members for v in values):
            raise RowError(table_name,
                           f"The cell in '{col_name}' of '{row_id}' type mismatch")
    return values
