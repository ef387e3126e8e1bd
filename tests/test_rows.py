"""Tests for data-row validation of Convert tables."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from excel_database.errors import RowError
from excel_database.parsers import EnumParser
from excel_database.rows import validate_rows
from excel_database.schema import validate_columns
from excel_database.type_registry import TypeResolver
from tests.create_sample_tables import ITEM_GRADE_ROWS, ITEM_ROWS, sheet


def _validate(rows, settings, table="Item"):
    grid = sheet(rows)
    resolver = TypeResolver(settings, current_table=table)
    columns = validate_columns(grid, table, resolver)
    return validate_rows(grid, table, columns, resolver)


HEADER = [["ID", "Name", "Power", "Tags"], ["string", "string", "int", "string[]"]]


class TestValidateRows:

    def test_item_scenario(self, settings):
        rows = _validate(ITEM_ROWS, settings)
        assert len(rows) == 2
        assert rows[0].id == "001"
        assert rows[0].cells == {"ID": "001", "Name": "Sword",
                                 "Tags": ["Sharp", "Heavy"]}
        assert rows[1].cells == {"ID": "002", "Name": "Shield", "Tags": ["Heavy"]}

    def test_cells_keep_schema_order(self, settings):
        rows = _validate(HEADER + [["a", "A", "1", "x"]], settings)
        assert list(rows[0].cells) == ["ID", "Name", "Power", "Tags"]

    def test_empty_id_ends_data(self, settings):
        rows = _validate(HEADER + [["a", "A", "1", "x"], ["", "", "", ""],
                                   ["b", "B", "not a number", "y"]], settings)
        assert [r.id for r in rows] == ["a"]

    def test_excluded_row_is_skipped(self, settings):
        rows = _validate(HEADER + [["#draft", "", "", ""], ["a", "A", "1", "x"]],
                         settings)
        assert [r.id for r in rows] == ["a"]

    def test_duplicate_id(self, settings):
        with pytest.raises(RowError, match="Duplicate ID 'a'"):
            _validate(HEADER + [["a", "A", "1", "x"], ["a", "B", "2", "y"]], settings)

    def test_empty_cell_names_column_and_row(self, settings):
        with pytest.raises(RowError,
                           match="An empty cell exists in 'Power' of 'a'") as info:
            _validate(HEADER + [["a", "A", "", "x"]], settings)
        assert info.value.table_name == "Item"

    def test_excluded_cell_is_not_recorded(self, settings):
        rows = _validate(HEADER + [["a", "A", "#tbd", "x"]], settings)
        assert "Power" not in rows[0].cells

    def test_line_break_only_allowed_in_arrays(self, settings):
        with pytest.raises(RowError, match="is array, but its type is not an array"):
            _validate(HEADER + [["a", "A\nB", "1", "x"]], settings)

    def test_every_array_element_is_validated(self, settings):
        header = [["ID", "Levels"], ["string", "int[]"]]
        assert _validate(header + [["a", "1\n2\n3"]], settings)[0].cells["Levels"] \
            == ["1", "2", "3"]
        with pytest.raises(RowError, match="The cell in 'Levels' of 'b' type mismatch"):
            _validate(header + [["b", "1\ntwo"]], settings)

    def test_primitive_type_mismatch(self, settings):
        with pytest.raises(RowError, match="type mismatch"):
            _validate(HEADER + [["a", "A", "1.5", "x"]], settings)

    def test_reference_stored_under_decorated_key(self, settings):
        header = [["ID", "Parent", "Children"], ["string", "TbItem", "TbItem[]"]]
        rows = _validate(header + [["a", "b", "b\nc"]], settings)
        assert rows[0].cells == {"ID": "a", "_idParent": "b",
                                 "_idChildren": ["b", "c"]}

    def test_variable_cells_are_not_validated(self, settings):
        header = [["ID", "Limit"], ["string", "VaConfig"]]
        assert _validate(header + [["a", "anything"]], settings)[0].cells["Limit"] \
            == "anything"

    def test_variable_cells_are_still_required(self, settings):
        header = [["ID", "Limit"], ["string", "VaConfig"]]
        with pytest.raises(RowError, match="empty cell"):
            _validate(header + [["a", ""]], settings)


class TestEnumerationCells:

    @pytest.fixture(autouse=True)
    def _generated_enum(self, settings):
        EnumParser(sheet(ITEM_GRADE_ROWS), "ItemGrade", "ItemGrade.xlsx",
                   settings).parse()

    def test_members_accepted(self, settings):
        header = [["ID", "Grade", "Slots"],
                  ["string", "EmItemGrade.Grade", "EmItemGrade.Slot[]"]]
        rows = _validate(header + [["a", "Rare", "Head\nHand"]], settings)
        assert rows[0].cells == {"ID": "a", "Grade": "Rare", "Slots": ["Head", "Hand"]}

    def test_unknown_member_rejected(self, settings):
        header = [["ID", "Grade"], ["string", "EmItemGrade.Grade"]]
        with pytest.raises(RowError, match="The cell in 'Grade' of 'a' type mismatch"):
            _validate(header + [["a", "Legendary"]], settings)
