#!/usr/bin/env python
"""
Excel Database – CLI entry point.

Usage:
    # Parse spreadsheets as Convert / Enum / Variable tables
    python -m excel_database.main parse --kind convert Item.xlsx Weapon.xlsx

    # List, re-parse or remove parsed tables
    python -m excel_database.main list
    python -m excel_database.main reparse [Item ...]
    python -m excel_database.main remove Item

    # Inspect or edit the emitted records of a Convert table
    python -m excel_database.main show Item [--id 001]
    python -m excel_database.main edit Item 001 Name "Long Sword"
"""

import argparse
import logging
import sys

from .config import Settings, load_config, setup_logging
from .dispatcher import Dispatcher
from .errors import RecordError
from .manifest import ResultManifest
from .parsers import TableKind
from .records import cell_as_text, find_record, load_records, save_records, set_cell

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        description="Generate Python source and JSON data from Excel tables"
    )
    parser.add_argument(
        "--config", "-c", default="config.yaml",
        help="Path to config YAML file (default: config.yaml)",
    )
    parser.add_argument(
        "--log-level", default=None,
        help="Logging level: DEBUG, INFO, WARNING, ERROR",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_parse = sub.add_parser("parse", help="Parse spreadsheets into tables")
    p_parse.add_argument(
        "--kind", "-k", default="convert",
        choices=[kind.value.lower() for kind in TableKind],
        help="Table kind of every file (default: convert)",
    )
    p_parse.add_argument("files", nargs="+", help="Spreadsheet files (.xlsx)")

    sub.add_parser("list", help="List parsed tables")

    p_reparse = sub.add_parser("reparse", help="Parse recorded tables again")
    p_reparse.add_argument("names", nargs="*",
                           help="Table names (default: every table)")

    p_remove = sub.add_parser("remove", help="Remove tables and their outputs")
    p_remove.add_argument("names", nargs="+", help="Table names")

    p_show = sub.add_parser("show", help="Print the records of a Convert table")
    p_show.add_argument("name", help="Table name")
    p_show.add_argument("--id", default=None, help="Only this record")

    p_edit = sub.add_parser("edit", help="Edit one cell of a Convert table record")
    p_edit.add_argument("name", help="Table name")
    p_edit.add_argument("id", help="Record ID")
    p_edit.add_argument("column", help="Column key as stored in the data file")
    p_edit.add_argument("value", help="New text; use newlines for list cells")

    return parser


def _select(manifest, names):
    if not names:
        return list(manifest)
    missing = [n for n in names if n not in manifest]
    for name in missing:
        logger.error(f"{name}: Not a parsed table")
    return [manifest.get(n) for n in names if n in manifest]


def _convert_data_path(manifest, settings, name):
    result = manifest.get(name)
    if result is None or result.kind != TableKind.CONVERT.value:
        logger.error(f"{name}: Not a parsed Convert table")
        return None
    return settings.data_path(name)


def main(argv=None):
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    setup_logging(args.log_level or config.get("log_level", "INFO"))

    settings = Settings.from_config(config)
    manifest = ResultManifest.from_settings(settings)
    dispatcher = Dispatcher(settings, manifest)

    if args.command == "parse":
        dispatcher.parse_tables(args.files, args.kind)

    elif args.command == "list":
        for result in manifest:
            print(result)

    elif args.command == "reparse":
        dispatcher.reparse(_select(manifest, args.names))

    elif args.command == "remove":
        dispatcher.remove_tables(_select(manifest, args.names))

    elif args.command in ("show", "edit"):
        path = _convert_data_path(manifest, settings, args.name)
        if path is None:
            return 1
        records = load_records(path)
        try:
            if args.command == "show":
                shown = [find_record(records, args.id)] if args.id else records
                for record in shown:
                    print(record["ID"])
                    for key, value in list(record.items())[1:]:
                        print(f"  {key}: {cell_as_text(value)!r}")
            else:
                set_cell(records, args.id, args.column, args.value)
                save_records(path, records)
                logger.info(f"Updated '{args.column}' of '{args.id}' in {path}")
        except RecordError as e:
            logger.error(f"{args.name}: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
