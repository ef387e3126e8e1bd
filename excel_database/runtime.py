"""
Runtime support imported by generated source.

Generated Convert modules declare a :class:`Record` subclass whose
attributes are :class:`Field` / :class:`Reference` descriptors, and a
:class:`Table` that loads ``<data_dir>/<name>.json`` the first time it is
used::

    from excel_database import runtime

    runtime.configure("ExcelDatabase/Resources")
    runtime.load_generated("ExcelDatabase/Dist")
    sword = runtime.table("Item")["001"]
    sword.Tags   # ['Sharp', 'Heavy']
"""

import json
import os

from . import type_registry
from .schema import ID_NAME
from .type_registry import ColumnKind

GENERATED_KINDS = ("Enum", "Variable", "Convert")

_data_dir = os.path.join("ExcelDatabase", "Resources")
_tables = {}
_enum_containers = {}


def configure(data_dir):
    """Point every table at *data_dir* and drop already loaded rows."""
    global _data_dir
    _data_dir = data_dir
    for tbl in _tables.values():
        tbl.unload()


def table(name):
    return _tables[name]


def register_enums(container):
    """Class decorator used by generated Enum modules."""
    _enum_containers[container.__name__] = container
    return container


def enum_type(type_name):
    """``EmItem.Grade`` -> the registered enumeration class."""
    container_name, _, nested = type_name.partition(".")
    target = _enum_containers[container_name]
    for part in nested.split("."):
        target = getattr(target, part)
    return target


def convert(type_name, text):
    """Turn stored cell text into a Python value."""
    kind = type_registry.classify(type_name)
    if kind is ColumnKind.PRIMITIVE:
        return type_registry.PRIMITIVE_PARSERS[type_name](text)
    if kind is ColumnKind.ENUMERATION:
        return enum_type(type_name)[text]
    return text


def load_generated(dist_dir):
    """Import every generated module under *dist_dir*.

    Enum modules are loaded first so Convert tables can resolve their
    enumeration columns.
    """
    modules = []
    for kind in GENERATED_KINDS:
        directory = os.path.join(dist_dir, kind)
        if not os.path.isdir(directory):
            continue
        for file_name in sorted(os.listdir(directory)):
            if not file_name.endswith(".py"):
                continue
            name = os.path.splitext(file_name)[0]
            modules.append(type_registry.load_module_from_path(
                os.path.join(directory, file_name),
                f"excel_database_generated.{kind.lower()}.{name}"))
    return modules


class Field:
    """A column holding primitive, enumeration or opaque values."""

    def __init__(self, type_name, array=False):
        self.type_name = type_name
        self.array = array
        self.name = None

    def __set_name__(self, owner, name):
        self.name = name

    @property
    def key(self):
        return self.name

    def __get__(self, record, owner=None):
        if record is None:
            return self
        raw = record._row.get(self.key)
        if raw is None:
            return None
        if self.array:
            return [self.resolve(v) for v in raw]
        return self.resolve(raw)

    def resolve(self, text):
        return convert(self.type_name, text)


class Reference(Field):
    """A column holding IDs of rows in another Convert table."""

    @property
    def key(self):
        return "_id" + self.name

    def resolve(self, text):
        return table(type_registry.referenced_table(self.type_name))[text]


class Record:
    """One row of a generated table."""

    def __init__(self, row):
        self._row = row

    @property
    def ID(self):
        return self._row[ID_NAME]

    def __eq__(self, other):
        return type(self) is type(other) and self._row == other._row

    def __hash__(self):
        return hash((type(self), self.ID))

    def __repr__(self):
        return f"{type(self).__name__}(ID={self.ID!r})"


class Table:
    """Lazily loaded, ID-indexed rows of one Convert table."""

    def __init__(self, name, record_type):
        self.name = name
        self.record_type = record_type
        self._records = None
        _tables[name] = self

    @property
    def path(self):
        return os.path.join(_data_dir, f"{self.name}.json")

    def unload(self):
        self._records = None

    def _load(self):
        if self._records is None:
            with open(self.path, "r", encoding="utf-8") as f:
                rows = json.load(f)
            self._records = {row[ID_NAME]: self.record_type(row) for row in rows}
        return self._records

    def __getitem__(self, record_id):
        return self._load()[record_id]

    def get(self, record_id, default=None):
        return self._load().get(record_id, default)

    def __iter__(self):
        return iter(self._load().values())

    def __len__(self):
        return len(self._load())

    def __contains__(self, record_id):
        return record_id in self._load()

    def ids(self):
        return list(self._load())
