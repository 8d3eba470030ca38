"""
Whole-snapshot document store.

The store holds one document with three top-level collections:

    {"users": [...], "orders": [...], "tickets": [...]}

Callers read the entire snapshot, mutate it in memory and write the entire
snapshot back. transaction() wraps that cycle in an in-process lock so
concurrent requests in one process cannot clobber each other's writes.
Nothing here protects against a second process writing the same file.
"""

import copy
import json
import shutil
import tempfile
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

from ..utils.exceptions import StoreUnavailable
from ..utils.logger import get_logger

logger = get_logger(__name__)

COLLECTIONS = ("users", "orders", "tickets")

Snapshot = Dict[str, List[Dict[str, Any]]]


def empty_snapshot() -> Snapshot:
    return {name: [] for name in COLLECTIONS}


def _normalize(raw: Any) -> Snapshot:
    """Ensure every collection exists and is a list; keep unknown keys."""
    if not isinstance(raw, dict):
        return empty_snapshot()
    for name in COLLECTIONS:
        if not isinstance(raw.get(name), list):
            raw[name] = []
    return raw


class DocumentStore(ABC):
    """Store interface: readAll / writeAll over the full snapshot."""

    def __init__(self):
        self._write_lock = threading.RLock()

    @abstractmethod
    def read_all(self, strict: bool = False) -> Snapshot:
        """
        Return a fresh, mutable copy of the whole snapshot.

        With strict=False an unreadable store reads as empty collections;
        with strict=True it raises StoreUnavailable.
        """

    @abstractmethod
    def write_all(self, snapshot: Snapshot) -> None:
        """Replace the stored snapshot."""

    @contextmanager
    def transaction(self) -> Generator[Snapshot, None, None]:
        """
        Read-modify-write under the store's write lock.

        The snapshot is written back only if the block exits normally; an
        exception leaves the stored data untouched.
        """
        with self._write_lock:
            snapshot = self.read_all(strict=True)
            yield snapshot
            self.write_all(snapshot)


class JsonFileStore(DocumentStore):
    """Single JSON file, created with empty collections on first access."""

    def __init__(self, path):
        super().__init__()
        self.path = Path(path)

    def _load(self) -> Snapshot:
        """Read the file, raising StoreUnavailable if it cannot be used as-is."""
        if not self.path.exists():
            self.write_all(empty_snapshot())
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            raise StoreUnavailable(f"Failed to read {self.path}: {e}")
        if not isinstance(raw, dict):
            raise StoreUnavailable(f"{self.path} does not contain a JSON object")
        return _normalize(raw)

    def read_all(self, strict: bool = False) -> Snapshot:
        if strict:
            return self._load()
        try:
            return self._load()
        except StoreUnavailable as e:
            # Keep serving with empty collections rather than failing every request
            logger.warning("Failed to read document store", path=str(self.path), error=str(e))
            return empty_snapshot()

    def write_all(self, snapshot: Snapshot) -> None:
        """Atomically replace the JSON file"""
        temp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w", dir=str(self.path.parent), delete=False, encoding="utf-8"
            ) as tf:
                temp_path = Path(tf.name)
                json.dump(snapshot, tf, indent=2, ensure_ascii=False)
        except (OSError, TypeError, ValueError) as e:
            if temp_path is not None and temp_path.exists():
                temp_path.unlink()
            raise StoreUnavailable(f"Failed to write {self.path}: {e}")

        try:
            shutil.move(str(temp_path), str(self.path))
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise StoreUnavailable(f"Failed to write {self.path}: {e}")


class MemoryStore(DocumentStore):
    """In-process store; every read and write is a deep copy."""

    def __init__(self, snapshot: Optional[Snapshot] = None):
        super().__init__()
        self._snapshot = _normalize(copy.deepcopy(snapshot) if snapshot is not None else empty_snapshot())

    def read_all(self, strict: bool = False) -> Snapshot:
        return copy.deepcopy(self._snapshot)

    def write_all(self, snapshot: Snapshot) -> None:
        self._snapshot = _normalize(copy.deepcopy(snapshot))
