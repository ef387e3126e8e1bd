"""
Type Registry
=============
Classifies the type tokens found in a table's type row and validates cell
text against primitive types.

Non-primitive type tokens are classified by a two-letter prefix:

  * ``Tb`` – reference to another Convert table (``TbItem`` -> table ``Item``)
  * ``Em`` – enumeration declared by an Enum table (``EmItem.Grade``)
  * ``Va`` – opaque value, never validated
"""

import enum
import importlib.util
import logging
import os
import re

logger = logging.getLogger(__name__)

TABLE_PREFIX = "Tb"
ENUM_PREFIX = "Em"
VARIABLE_PREFIX = "Va"


class ColumnKind(enum.Enum):
    PRIMITIVE = "Primitive"
    TABLE_REFERENCE = "TableReference"
    ENUMERATION = "Enumeration"
    VARIABLE = "Variable"
    INVALID = "Invalid"


_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_TYPE_TOKEN_RE = re.compile(r"[A-Za-z_]\w*(\.[A-Za-z_]\w*)*")


def _integer_validator(bits):
    low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1

    def validate(text):
        return bool(_INT_RE.fullmatch(text)) and low <= int(text) <= high

    return validate


def _is_float(text):
    return bool(_FLOAT_RE.fullmatch(text))


def _is_bool(text):
    return text.lower() in ("true", "false")


PRIMITIVE_VALIDATORS = {
    "int": _integer_validator(32),
    "long": _integer_validator(64),
    "float": _is_float,
    "double": _is_float,
    "bool": _is_bool,
    "string": lambda text: True,
}

# Python values and annotations for each primitive, used by generated code.
PRIMITIVE_PARSERS = {
    "int": int,
    "long": int,
    "float": float,
    "double": float,
    "bool": lambda text: text.lower() == "true",
    "string": str,
}

PYTHON_TYPES = {
    "int": "int",
    "long": "int",
    "float": "float",
    "double": "float",
    "bool": "bool",
    "string": "str",
}


def is_primitive(type_name: str) -> bool:
    return type_name in PRIMITIVE_VALIDATORS


def validate(type_name: str, text: str) -> bool:
    """Return True when *text* is a valid value of primitive *type_name*."""
    return PRIMITIVE_VALIDATORS[type_name](text)


def classify(type_name: str) -> ColumnKind:
    """Classify a normalized type token (array marker already removed)."""
    if is_primitive(type_name):
        return ColumnKind.PRIMITIVE
    # tokens are embedded in generated source as string literals
    if not _TYPE_TOKEN_RE.fullmatch(type_name):
        return ColumnKind.INVALID
    if type_name.startswith(TABLE_PREFIX):
        return ColumnKind.TABLE_REFERENCE
    if type_name.startswith(ENUM_PREFIX):
        return ColumnKind.ENUMERATION
    if type_name.startswith(VARIABLE_PREFIX):
        return ColumnKind.VARIABLE
    return ColumnKind.INVALID


def referenced_table(type_name: str) -> str:
    """``TbItem`` -> ``Item``."""
    return type_name[len(TABLE_PREFIX):]


def load_module_from_path(path, module_name):
    """Import the Python source at *path* without touching ``sys.modules``."""
    spec = importlib.util.spec_from_file_location(module_name, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TypeResolver:
    """Resolves reference and enumeration types against generated source.

    Generated modules under ``dist_dir`` play the role of the host type
    system: a ``Tb`` type exists once its Convert table has been generated,
    and an ``Em`` type exists once its Enum table has been generated and
    declares the nested enumeration.
    """

    def __init__(self, settings, current_table=None):
        self.settings = settings
        self.current_table = current_table
        self._enum_cache = {}

    def table_exists(self, type_name: str) -> bool:
        name = referenced_table(type_name)
        if not name:
            return False
        if name == self.current_table:
            return True
        return os.path.exists(self.settings.script_path("Convert", name))

    def enum_members(self, type_name: str):
        """Return the member names of enumeration *type_name*, or None."""
        if type_name not in self._enum_cache:
            self._enum_cache[type_name] = self._resolve_enum(type_name)
        return self._enum_cache[type_name]

    def _resolve_enum(self, type_name):
        container_name, _, nested = type_name.partition(".")
        table_name = container_name[len(ENUM_PREFIX):]
        if not table_name or not nested:
            return None

        path = self.settings.script_path("Enum", table_name)
        if not os.path.exists(path):
            return None

        try:
            module = load_module_from_path(
                path, f"excel_database_generated.enum.{table_name}")
        except Exception as exc:
            logger.warning(f"Could not load enum module {path}: {exc}")
            return None

        target = getattr(module, container_name, None)
        for part in nested.split("."):
            if target is None:
                return None
            target = getattr(target, part, None)

        if not (isinstance(target, type) and issubclass(target, enum.Enum)):
            return None
        return frozenset(target.__members__)
