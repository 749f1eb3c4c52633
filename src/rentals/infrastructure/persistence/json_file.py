"""A JSON array on disk, shared safely between threads of one process.

Every repository instance pointing at the same path shares one lock, so
read-modify-write sequences never interleave.  Writes go to a temporary
file that then replaces the original, so readers never see half a file.
"""

from __future__ import annotations

import json
import os
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

_LOCKS: dict[Path, threading.RLock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = path.resolve()
    with _LOCKS_GUARD:
        lock = _LOCKS.get(key)
        if lock is None:
            lock = _LOCKS[key] = threading.RLock()
        return lock


class JsonFile:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = _lock_for(file_path)
        self._ensure_file()

    def read(self) -> list[dict]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    @contextmanager
    def editing(self) -> Iterator[list[dict]]:
        """Yield the records for in-place edits; persist them on success."""
        with self._lock:
            records = self.read()
            yield records
            self._write(records)

    def upsert(self, record: dict, key: Callable[[dict], object]) -> None:
        """Replace the record with the same key, or append it."""
        with self.editing() as records:
            for i, raw in enumerate(records):
                if key(raw) == key(record):
                    records[i] = record
                    break
            else:
                records.append(record)

    # --- File helpers ---------------------------------------------------------

    def _write(self, records: list[dict]) -> None:
        tmp = self._file_path.with_name(self._file_path.name + ".tmp")
        tmp.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp, self._file_path)

    def _ensure_file(self) -> None:
        with self._lock:
            if not self._file_path.exists():
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                self._file_path.write_text("[]", encoding="utf-8")
