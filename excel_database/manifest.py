"""
Result Manifest
===============
Persistent record of every successfully parsed table.

The manifest is a set of :class:`ParseResult` keyed by table name and
iterated in name order.  Each mutation is written back to disk before the
method returns, so the in-memory and on-disk views stay identical.
"""

import json
import logging
import os
import threading
from dataclasses import dataclass

from .emitter import write_text_atomic

logger = logging.getLogger(__name__)

CONVERT_KIND = "Convert"


@dataclass(frozen=True)
class ParseResult:
    """Manifest entry for one parsed table."""
    kind: str
    name: str
    source_path: str
    output_paths: tuple = ()

    def to_json(self):
        return {
            "kind": self.kind,
            "name": self.name,
            "sourcePath": self.source_path,
            "outputPaths": list(self.output_paths),
        }

    @classmethod
    def from_json(cls, data):
        return cls(
            kind=data["kind"],
            name=data["name"],
            source_path=data["sourcePath"],
            output_paths=tuple(data.get("outputPaths") or ()),
        )

    def __str__(self):
        return f"{self.kind}: {self.name}"


class ResultManifest:
    """Ordered, deduplicated set of parse results backed by a JSON file.

    Parameters
    ----------
    path : str
        Location of the persisted manifest.
    data_dir : str or None
        Where Convert tables emit their data files; used by :meth:`remove`.
    """

    def __init__(self, path, data_dir=None, results=()):
        self.path = path
        self.data_dir = data_dir
        self._results = {}
        self._lock = threading.RLock()
        for result in results:
            self._results[result.name] = result

    @classmethod
    def load(cls, path, data_dir=None):
        """Read the manifest at *path*, or start empty if it does not exist."""
        results = []
        if os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                results = [ParseResult.from_json(item) for item in json.load(f)]
            logger.debug(f"Loaded {len(results)} parse results from {path}")
        return cls(path, data_dir=data_dir, results=results)

    @classmethod
    def from_settings(cls, settings):
        return cls.load(settings.manifest_path, data_dir=settings.data_dir)

    # -- queries -------------------------------------------------------

    def __iter__(self):
        with self._lock:
            results = [self._results[name] for name in sorted(self._results)]
        return iter(results)

    def __len__(self):
        with self._lock:
            return len(self._results)

    def __contains__(self, name):
        with self._lock:
            return name in self._results

    def get(self, name):
        with self._lock:
            return self._results.get(name)

    def names(self):
        return [result.name for result in self]

    # -- mutations -----------------------------------------------------

    def add(self, result):
        """Insert *result*, replacing any entry with the same name, then persist."""
        with self._lock:
            self._results[result.name] = result
            self.persist()

    def remove(self, results):
        """Delete each result's generated files, drop it, then persist.

        An entry is dropped only once all of its files are gone; the
        backing file is rewritten even when a deletion fails.
        """
        with self._lock:
            try:
                for result in results:
                    for path in self._files_of(result):
                        if os.path.exists(path):
                            os.remove(path)
                            logger.info(f"  Deleted {path}")
                    self._results.pop(result.name, None)
            finally:
                self.persist()

    def _files_of(self, result):
        paths = list(result.output_paths)
        if result.kind == CONVERT_KIND and self.data_dir is not None:
            data_path = os.path.join(self.data_dir, f"{result.name}.json")
            if data_path not in paths:
                paths.append(data_path)
        return paths

    def dumps(self) -> str:
        return json.dumps([result.to_json() for result in self],
                          indent=2, ensure_ascii=False) + "\n"

    def persist(self):
        """Overwrite the backing file with the full ordered set."""
        with self._lock:
            write_text_atomic(self.path, self.dumps())
