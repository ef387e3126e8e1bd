"""
Data Emitter
============
Writes generated source and emitted data files.  All writes replace the
target atomically so an interrupted run never leaves a half-written file.
"""

import json
import logging
import os
import tempfile

logger = logging.getLogger(__name__)


def write_text_atomic(path, text):
    """Write *text* to *path* via a temporary file in the same directory."""
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=".part")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def dump_records(records) -> str:
    """Serialize a list of string-keyed records with stable formatting."""
    return json.dumps(records, indent=2, ensure_ascii=False) + "\n"


def write_json(settings, table_name, rows) -> str:
    """Emit the validated *rows* of *table_name*; returns the data file path."""
    path = settings.data_path(table_name)
    write_text_atomic(path, dump_records([row.cells for row in rows]))
    logger.info(f"  Wrote {len(rows)} rows to {path}")
    return path


def write_script(settings, kind, table_name, script) -> str:
    """Write generated source for *table_name*; returns its path."""
    path = settings.script_path(kind, table_name)
    write_text_atomic(path, script)
    logger.info(f"  Wrote script to {path}")
    return path
