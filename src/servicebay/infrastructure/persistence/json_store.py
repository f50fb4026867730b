"""Shared file handling for the JSON repositories.

Every file is guarded by a lock per resolved path, made of an in-process
``RLock`` and an OS-level lock on a sidecar ``<name>.lock`` file (via
``filelock``), so a read-modify-write cycle is atomic with respect to
other threads and to other ``servicebay`` processes sharing the data
directory.  Writes go to a temporary file in the same directory and are
moved into place with ``os.replace``, so a crash never leaves a
half-written file behind.

Locks are re-entrant within a thread.  When a unit of work touches more
than one file it takes the service request file first.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Iterator

from filelock import FileLock


class _PathLock:

    def __init__(self, path: Path) -> None:
        self._thread_lock = threading.RLock()
        self._file_lock = FileLock(str(path.with_name(path.name + ".lock")))

    def __enter__(self) -> _PathLock:
        self._thread_lock.acquire()
        try:
            self._file_lock.acquire()
        except BaseException:
            self._thread_lock.release()
            raise
        return self

    def __exit__(self, *exc_info) -> None:
        try:
            self._file_lock.release()
        finally:
            self._thread_lock.release()


_locks: dict[Path, _PathLock] = {}
_registry_lock = threading.Lock()


def _lock_for(path: Path) -> _PathLock:
    with _registry_lock:
        lock = _locks.get(path)
        if lock is None:
            lock = _locks[path] = _PathLock(path)
        return lock


def next_id(records: list[dict]) -> int:
    return max((r["id"] for r in records), default=0) + 1


class JsonFile:

    def __init__(self, file_path: Path, empty: Callable[[], Any] = list) -> None:
        self._file_path = file_path.resolve()
        self._empty = empty
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = _lock_for(self._file_path)
        self._ensure_file()

    @property
    def path(self) -> Path:
        return self._file_path

    def read(self) -> Any:
        with self._lock:
            return self._load_raw()

    @contextmanager
    def hold(self) -> Iterator[Any]:
        """Yield the file's data and keep every other writer out until exit.

        Nothing is written on exit; nested ``transaction()`` calls on the
        same file from this thread still go through.
        """
        with self._lock:
            yield self._load_raw()

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        """Yield the file's data under the lock; persist it on clean exit.

        If the body raises, nothing is written.
        """
        with self._lock:
            data = self._load_raw()
            yield data
            self._persist_raw(data)

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> Any:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, data: Any) -> None:
        fd, tmp = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=f".{self._file_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(data, indent=2) + "\n")
            os.replace(tmp, self._file_path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def _ensure_file(self) -> None:
        with self._lock:
            if not self._file_path.exists():
                self._persist_raw(self._empty())


# --- Field encoding -----------------------------------------------------------
# Decimals are stored as strings so no precision is lost to float.


def dump_decimal(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


def load_decimal(raw: str | None) -> Decimal | None:
    return None if raw is None else Decimal(raw)


def dump_dt(value: datetime | None) -> str | None:
    return None if value is None else value.isoformat()


def load_dt(raw: str | None) -> datetime | None:
    return None if raw is None else datetime.fromisoformat(raw)
