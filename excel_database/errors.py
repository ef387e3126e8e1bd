"""
Error types raised while parsing tables and managing generated output.
"""


class ExcelDatabaseError(Exception):
    """Base class for every error raised by ``excel_database``."""


class ParseError(ExcelDatabaseError):
    """A table failed validation.  Fatal to that table only."""

    def __init__(self, table_name, message):
        super().__init__(message)
        self.table_name = table_name
        self.message = message

    def __str__(self):
        return self.message


class SchemaError(ParseError):
    """Malformed header: ID column, column names or column types."""


class RowError(ParseError):
    """Malformed data: duplicate IDs, empty cells, type or shape mismatches."""


class UnknownTableKindError(ExcelDatabaseError):
    """A table kind label that no parser can be constructed for."""

    def __init__(self, label):
        super().__init__(f"Unknown table kind '{label}'")
        self.label = label


class TemplateError(ExcelDatabaseError):
    """A template references a slot that was not supplied."""


class RecordError(ExcelDatabaseError):
    """A record edit names an unknown ID or column."""
