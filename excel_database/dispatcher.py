"""
Parse Dispatcher
================
Runs batches of spreadsheets through their parsers.  A failing table is
logged and skipped; the rest of the batch still runs.
"""

import logging
import zipfile
from collections import defaultdict

from openpyxl.utils.exceptions import InvalidFileException

from .errors import ParseError, UnknownTableKindError
from .parsers import is_excel_file, make_parser, table_name_for

logger = logging.getLogger(__name__)


class Dispatcher:
    """Parses, re-parses and removes tables recorded in a manifest.

    Args:
        settings: :class:`~excel_database.config.Settings`
        manifest: :class:`~excel_database.manifest.ResultManifest` to update
        listeners: Callables invoked once after every batch (asset refresh,
            open editors, ...)
    """

    def __init__(self, settings, manifest, listeners=()):
        self.settings = settings
        self.manifest = manifest
        self.listeners = list(listeners)

    def parse_tables(self, paths, kind):
        """Parse every spreadsheet in *paths* as a table of *kind*.

        Returns:
            The parse results that were added to the manifest
        """
        results = []
        try:
            for path in filter(is_excel_file, paths):
                try:
                    parser = make_parser(kind, path, self.settings)
                    result = parser.parse()
                except ParseError as e:
                    logger.error(f"{e.table_name}: {e.message}")
                    continue
                except UnknownTableKindError:
                    logger.error(f"{table_name_for(path)}: Please remove and parse again")
                    continue
                except (OSError, InvalidFileException, zipfile.BadZipFile) as e:
                    logger.error(f"{table_name_for(path)}: Could not read {path}: {e}")
                    continue

                self.manifest.add(result)
                results.append(result)
        finally:
            self._refresh()

        logger.info("Excel Database: Parsing has been completed")
        return results

    def reparse(self, results):
        """Parse the sources of manifest entries again, grouped by kind."""
        groups = defaultdict(list)
        for result in results:
            groups[result.kind].append(result.source_path)

        parsed = []
        for kind, paths in groups.items():
            parsed.extend(self.parse_tables(paths, kind))
        return parsed

    def remove_tables(self, results):
        try:
            self.manifest.remove(results)
        finally:
            self._refresh()
        logger.info("Excel Database: Removing has been completed")

    def _refresh(self):
        for listener in self.listeners:
            listener()
