"""
Table parsers
=============
One parser per table kind.  ``parse()`` validates the sheet, renders the
generated source, writes every output and returns the manifest entry.
Nothing is written unless validation succeeded.
"""

import enum
import logging
import os

from . import type_registry
from .emitter import write_json, write_script
from .errors import RowError, SchemaError, UnknownTableKindError
from .grid import read_sheet
from .manifest import ParseResult
from .rows import check_cell, validate_rows
from .schema import (
    EXCLUDE_PREFIX,
    Column,
    check_name,
    is_identifier,
    normalize,
    scan_header,
    validate_columns,
)
from .renderer import (
    CONVERT_TEMPLATES,
    ENUM_TEMPLATES,
    VARIABLE_TEMPLATES,
    read_templates,
    render_convert,
    render_enum,
    render_variable,
)
from .type_registry import ColumnKind, TypeResolver

logger = logging.getLogger(__name__)

EXCEL_EXTENSION = ".xlsx"
LOCK_FILE_PREFIX = "~$"


class TableKind(str, enum.Enum):
    CONVERT = "Convert"
    ENUM = "Enum"
    VARIABLE = "Variable"

    def __str__(self):
        return self.value

    @classmethod
    def parse(cls, label):
        """Accept a kind or its label in any case; raise for anything else."""
        if isinstance(label, cls):
            return label
        for kind in cls:
            if str(label).lower() == kind.value.lower():
                return kind
        raise UnknownTableKindError(label)


def table_name_for(path) -> str:
    stem = os.path.splitext(os.path.basename(path))[0]
    return normalize(stem)


def is_excel_file(path) -> bool:
    name = os.path.basename(path)
    return (os.path.splitext(name)[1] == EXCEL_EXTENSION
            and not name.startswith(EXCLUDE_PREFIX)
            and not name.startswith(LOCK_FILE_PREFIX))


class TableParser:
    kind = None
    template_names = ()

    def __init__(self, sheet, table_name, source_path, settings):
        if not is_identifier(table_name):
            raise SchemaError(table_name,
                              f"Table name '{table_name}' is not an identifier")
        self.sheet = sheet
        self.table_name = table_name
        self.source_path = source_path
        self.settings = settings
        self.resolver = TypeResolver(settings, current_table=table_name)

    @classmethod
    def from_file(cls, path, settings):
        return cls(read_sheet(path), table_name_for(path), path, settings)

    def templates(self):
        return read_templates(self.settings.template_dir, str(self.kind),
                              self.template_names)

    def parse(self) -> ParseResult:
        raise NotImplementedError


# ------------------------------------------------------------------
# Convert
# ------------------------------------------------------------------

class ConvertParser(TableParser):
    """Record tables: ``ID`` column plus typed columns, emitted as JSON."""

    kind = TableKind.CONVERT
    template_names = CONVERT_TEMPLATES

    def parse(self):
        columns = validate_columns(self.sheet, self.table_name, self.resolver)
        rows = validate_rows(self.sheet, self.table_name, columns, self.resolver)
        script = render_convert(self.templates(), self.table_name, columns)
        json_path = write_json(self.settings, self.table_name, rows)
        script_path = write_script(self.settings, self.kind, self.table_name, script)
        logger.info(f"Parsed Convert table '{self.table_name}': "
                    f"{len(columns)} columns, {len(rows)} rows")
        return ParseResult(str(self.kind), self.table_name, self.source_path,
                           (script_path, json_path))


# ------------------------------------------------------------------
# Enum
# ------------------------------------------------------------------

ENUM_NAME_ROW = 0
ENUM_MEMBER_START_ROW = 1


class EnumParser(TableParser):
    """Each header cell names an enumeration; the cells below are its members."""

    kind = TableKind.ENUM
    template_names = ENUM_TEMPLATES

    def parse(self):
        enums = self.validate_enums()
        script = render_enum(self.templates(), self.table_name, enums)
        script_path = write_script(self.settings, self.kind, self.table_name, script)
        logger.info(f"Parsed Enum table '{self.table_name}': {len(enums)} enums")
        return ParseResult(str(self.kind), self.table_name, self.source_path,
                           (script_path,))

    def validate_enums(self):
        enums = []
        for index, enum_name in scan_header(self.sheet, self.table_name,
                                            row=ENUM_NAME_ROW):
            if not is_identifier(enum_name):
                raise SchemaError(self.table_name,
                                  f"Enum name '{enum_name}' is not an identifier")
            enums.append((enum_name, self._members(index, enum_name)))
        return enums

    def _members(self, col, enum_name):
        members = []
        seen = set()
        for r in range(ENUM_MEMBER_START_ROW, self.sheet.row_count):
            member = normalize(self.sheet.cell(r, col))
            if member.startswith(EXCLUDE_PREFIX):
                continue
            if not member:
                break
            check_name(self.table_name, member, seen, what="Enum member")
            if not is_identifier(member) or member.startswith("_"):
                raise RowError(self.table_name,
                               f"Member '{member}' of '{enum_name}' is not a valid name")
            members.append(member)

        if not members:
            raise RowError(self.table_name, f"Enum '{enum_name}' has no members")
        return members


# ------------------------------------------------------------------
# Variable
# ------------------------------------------------------------------

VARIABLE_HEADER = ("ID", "Type", "Value")
VARIABLE_START_ROW = 1


class VariableParser(TableParser):
    """One typed constant per row: ``ID | Type | Value``."""

    kind = TableKind.VARIABLE
    template_names = VARIABLE_TEMPLATES

    def parse(self):
        variables = self.validate_variables()
        script = render_variable(self.templates(), self.table_name, variables)
        script_path = write_script(self.settings, self.kind, self.table_name, script)
        logger.info(f"Parsed Variable table '{self.table_name}': "
                    f"{len(variables)} variables")
        return ParseResult(str(self.kind), self.table_name, self.source_path,
                           (script_path,))

    def validate_variables(self):
        header = tuple(self.sheet.cell(0, c) for c in range(len(VARIABLE_HEADER)))
        if header != VARIABLE_HEADER:
            raise SchemaError(self.table_name,
                              f"Header must be {', '.join(VARIABLE_HEADER)}")

        variables = []
        seen = set()
        for r in range(VARIABLE_START_ROW, self.sheet.row_count):
            name = normalize(self.sheet.cell(r, 0))
            if name.startswith(EXCLUDE_PREFIX):
                continue
            if not name:
                break
            check_name(self.table_name, name, seen, what="Variable name")
            if not is_identifier(name):
                raise SchemaError(self.table_name,
                                  f"Variable name '{name}' is not an identifier")

            column = Column.from_header(0, name, self.sheet.cell(r, 1))
            if column.kind is not ColumnKind.PRIMITIVE:
                raise SchemaError(self.table_name,
                                  f"Variable type '{column.type}' of '{name}' is invalid")

            values = check_cell(self.table_name, name, "Value", column.type,
                                column.kind, column.is_array,
                                self.sheet.cell(r, 2))
            variables.append(_variable_entry(column, values))
        return variables


def _variable_entry(column, values):
    parse = type_registry.PRIMITIVE_PARSERS[column.type]
    annotation = type_registry.PYTHON_TYPES[column.type]
    if column.is_array:
        return (column.name, f"list[{annotation}]", repr([parse(v) for v in values]))
    return column.name, annotation, repr(parse(values[0]))


PARSERS = {
    TableKind.CONVERT: ConvertParser,
    TableKind.ENUM: EnumParser,
    TableKind.VARIABLE: VariableParser,
}


def make_parser(kind, path, settings) -> TableParser:
    """Build the parser for *kind*; raises UnknownTableKindError first."""
    parser_cls = PARSERS[TableKind.parse(kind)]
    return parser_cls.from_file(path, settings)
