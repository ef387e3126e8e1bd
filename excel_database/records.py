"""
Editing of emitted data files.

Records are the JSON objects written by :func:`excel_database.emitter.write_json`.
List-valued cells are edited as ``"\\n"``-separated text and stay lists.
"""

import json

from .emitter import dump_records, write_text_atomic
from .errors import RecordError
from .rows import ARRAY_SEPARATOR, split_cell
from .schema import ID_NAME


def load_records(path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def save_records(path, records):
    write_text_atomic(path, dump_records(records))


def find_record(records, record_id):
    for record in records:
        if record.get(ID_NAME) == record_id:
            return record
    raise RecordError(f"No record with ID '{record_id}'")


def cell_as_text(value) -> str:
    """Render a stored cell for editing."""
    if isinstance(value, list):
        return ARRAY_SEPARATOR.join(value)
    return value


def set_cell(records, record_id, column, text):
    """Replace one cell of the record *record_id*; returns the record."""
    record = find_record(records, record_id)
    if column == ID_NAME:
        raise RecordError("The ID column cannot be edited")
    if column not in record:
        raise RecordError(f"Record '{record_id}' has no column '{column}'")

    record[column] = split_cell(text) if isinstance(record[column], list) else text
    return record
