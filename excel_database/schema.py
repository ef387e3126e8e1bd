"""
Schema Validator
================
Turns the two header rows of a Convert table (names, types) into an ordered
list of :class:`Column` descriptors.  The first problem found is raised as a
:class:`~excel_database.errors.SchemaError`.
"""

import keyword
from dataclasses import dataclass

from .errors import SchemaError
from .type_registry import ColumnKind, classify

NAME_ROW = 0
TYPE_ROW = 1
ID_COL = 0
ID_NAME = "ID"
ID_TYPE = "string"

EXCLUDE_PREFIX = "#"
ARRAY_MARKER = "[]"


def normalize(text: str) -> str:
    """Drop all whitespace and the array marker from a header token."""
    return "".join(text.split()).replace(ARRAY_MARKER, "")


@dataclass(frozen=True)
class Column:
    index: int
    name: str
    type: str
    is_array: bool
    kind: ColumnKind

    @classmethod
    def from_header(cls, index, raw_name, raw_type):
        type_name = normalize(raw_type)
        return cls(
            index=index,
            name=normalize(raw_name),
            type=type_name,
            is_array="".join(raw_type.split()).endswith(ARRAY_MARKER),
            kind=classify(type_name),
        )

    @property
    def is_reference(self) -> bool:
        return self.kind is ColumnKind.TABLE_REFERENCE

    @property
    def key(self) -> str:
        """Key the column's cells are stored under in emitted records."""
        return "_id" + self.name if self.is_reference else self.name


def is_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def check_name(table_name, name, seen, what="Column name"):
    """Apply the shared naming rules; adds *name* to *seen*."""
    if name[0].isdigit():
        raise SchemaError(table_name, f"{what} '{name}' starts with a number")
    if name in seen:
        raise SchemaError(table_name, f"Duplicate {what.lower()} '{name}'")
    seen.add(name)


def scan_header(sheet, table_name, row=NAME_ROW, start=0, seen=None):
    """Yield ``(index, name)`` for each named header cell of *row*.

    ``#`` names are skipped and the first empty name ends the header.
    """
    seen = set() if seen is None else seen
    for index in range(start, sheet.row_width(row)):
        name = normalize(sheet.cell(row, index))
        if name.startswith(EXCLUDE_PREFIX):
            continue
        if not name:
            break
        check_name(table_name, name, seen)
        yield index, name


def validate_id_column(sheet, table_name):
    if (sheet.cell(NAME_ROW, ID_COL) != ID_NAME
            or sheet.cell(TYPE_ROW, ID_COL) != ID_TYPE):
        raise SchemaError(table_name, "Invalid ID column")


def validate_columns(sheet, table_name, resolver) -> list:
    """Validate the header of a Convert table.

    Args:
        sheet: Grid of the table
        table_name: Name used in error messages
        resolver: :class:`~excel_database.type_registry.TypeResolver` for ``Tb``/``Em`` types

    Returns:
        Columns in sheet order, stopping at the first empty name
    """
    validate_id_column(sheet, table_name)

    columns = []
    # a second "ID" would overwrite the record identifier
    seen = {ID_NAME}
    for index, _ in scan_header(sheet, table_name, start=ID_COL + 1, seen=seen):
        column = Column.from_header(index, sheet.cell(NAME_ROW, index),
                                    sheet.cell(TYPE_ROW, index))
        if not is_identifier(column.name):
            raise SchemaError(
                table_name, f"Column name '{column.name}' is not an identifier")
        if not _type_exists(column, resolver):
            raise SchemaError(
                table_name,
                f"Column type '{column.type}' in '{column.name}' is invalid")
        columns.append(column)
    return columns


def _type_exists(column, resolver):
    if column.kind in (ColumnKind.PRIMITIVE, ColumnKind.VARIABLE):
        return True
    if column.kind is ColumnKind.TABLE_REFERENCE:
        return resolver.table_exists(column.type)
    if column.kind is ColumnKind.ENUMERATION:
        return resolver.enum_members(column.type) is not None
    return False
