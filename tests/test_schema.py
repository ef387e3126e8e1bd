"""Tests for header (schema) validation of Convert tables."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from excel_database.errors import SchemaError
from excel_database.schema import Column, normalize, validate_columns
from excel_database.type_registry import ColumnKind, TypeResolver
from tests.create_sample_tables import sheet


def _columns(names, types, settings, table="Item"):
    grid = sheet([["ID"] + names, ["string"] + types])
    return validate_columns(grid, table, TypeResolver(settings, current_table=table))


class TestNormalize:
    def test_whitespace_and_array_marker_removed(self):
        assert normalize("  string [] ") == "string"
        assert normalize("Max Level") == "MaxLevel"

    def test_column_from_header(self):
        col = Column.from_header(3, " Tags ", "string []")
        assert col.index == 3
        assert col.name == "Tags"
        assert col.type == "string"
        assert col.is_array
        assert col.kind is ColumnKind.PRIMITIVE
        assert col.key == "Tags"

    def test_reference_column_key(self):
        col = Column.from_header(1, "Owner", "TbItem")
        assert col.is_reference
        assert col.key == "_idOwner"


class TestValidateColumns:

    def test_order_follows_header(self, settings):
        cols = _columns(["Name", "Power", "Tags"], ["string", "int", "string[]"],
                        settings)
        assert [c.name for c in cols] == ["Name", "Power", "Tags"]
        assert [c.index for c in cols] == [1, 2, 3]
        assert [c.is_array for c in cols] == [False, False, True]

    def test_excluded_columns_are_skipped(self, settings):
        cols = _columns(["Name", "#Note", "Power"], ["string", "", "int"], settings)
        assert [(c.index, c.name) for c in cols] == [(1, "Name"), (3, "Power")]

    def test_empty_name_ends_schema(self, settings):
        cols = _columns(["Name", "", "Garbage", "1Bad"],
                        ["string", "", "nonsense", "int"], settings)
        assert [c.name for c in cols] == ["Name"]

    @pytest.mark.parametrize("names,types", [
        (["ID"], ["int"]),
        (["ID", "Name"], ["int", "string"]),
    ])
    def test_invalid_id_column(self, names, types, settings):
        grid = sheet([names, types])
        with pytest.raises(SchemaError, match="Invalid ID column") as info:
            validate_columns(grid, "Item", TypeResolver(settings))
        assert info.value.table_name == "Item"

    def test_name_starting_with_digit(self, settings):
        with pytest.raises(SchemaError, match="'2Hand' starts with a number"):
            _columns(["Name", "2Hand"], ["string", "Vector3"], settings)

    def test_duplicate_name(self, settings):
        with pytest.raises(SchemaError, match="Duplicate column name 'Name'"):
            _columns(["Name", "Power", "Name"], ["string", "int", "string"], settings)

    def test_second_id_column_is_duplicate(self, settings):
        with pytest.raises(SchemaError, match="Duplicate column name 'ID'"):
            _columns(["ID"], ["string"], settings)

    @pytest.mark.parametrize("name", ["class", "None", "Max-HP", "Item.Power"])
    def test_name_must_be_identifier(self, name, settings):
        with pytest.raises(SchemaError, match=f"Column name '{name}' is not an identifier"):
            _columns(["Name", name], ["string", "int"], settings)

    def test_quote_in_variable_type(self, settings):
        with pytest.raises(SchemaError, match="Column type 'Va\"x' in 'Power' is invalid"):
            _columns(["Power"], ['Va"x'], settings)

    def test_enum_module_failing_at_import(self, settings):
        path = settings.script_path("Enum", "Broken")
        os.makedirs(os.path.dirname(path))
        with open(path, "w") as f:
            f.write("class EmBroken:\n    Grade = undefined_name\n")
        with pytest.raises(SchemaError, match="Column type 'EmBroken.Grade' in 'Power' is invalid"):
            _columns(["Power"], ["EmBroken.Grade"], settings)

    def test_names_are_case_sensitive(self, settings):
        cols = _columns(["name", "Name"], ["string", "string"], settings)
        assert [c.name for c in cols] == ["name", "Name"]

    @pytest.mark.parametrize("type_name", ["Vector3", "", "integer", "TbMonster",
                                           "EmItem.Grade"])
    def test_invalid_type(self, type_name, settings):
        with pytest.raises(SchemaError,
                           match=f"Column type '{type_name}' in 'Power' is invalid"):
            _columns(["Power"], [type_name], settings)

    def test_variable_type_is_not_resolved(self, settings):
        cols = _columns(["Limit"], ["VaConfig.MaxLevel"], settings)
        assert cols[0].kind is ColumnKind.VARIABLE

    def test_self_reference_is_valid(self, settings):
        cols = _columns(["Parent"], ["TbItem"], settings)
        assert cols[0].kind is ColumnKind.TABLE_REFERENCE
