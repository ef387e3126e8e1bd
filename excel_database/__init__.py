"""Excel Database.

Turns spreadsheet-authored game data into generated Python source and JSON
data files, and keeps a manifest of every parsed table:

  * **Convert** tables – typed records, emitted as a JSON data file plus a
    generated record class with typed accessors.
  * **Enum** tables – each column declares an enumeration.
  * **Variable** tables – one typed constant per row.
"""

from .config import Settings, load_config, setup_logging
from .dispatcher import Dispatcher
from .errors import (
    ExcelDatabaseError,
    ParseError,
    RecordError,
    RowError,
    SchemaError,
    TemplateError,
    UnknownTableKindError,
)
from .manifest import ParseResult, ResultManifest
from .parsers import ConvertParser, EnumParser, TableKind, VariableParser, make_parser

__all__ = [
    "Settings",
    "load_config",
    "setup_logging",
    "Dispatcher",
    "ExcelDatabaseError",
    "ParseError",
    "RecordError",
    "RowError",
    "SchemaError",
    "TemplateError",
    "UnknownTableKindError",
    "ParseResult",
    "ResultManifest",
    "ConvertParser",
    "EnumParser",
    "TableKind",
    "VariableParser",
    "make_parser",
]
