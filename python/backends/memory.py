"""In-process record backend.

Records live in a dict keyed by name. Every call stores and returns deep
copies, so callers only ever hold transient snapshots, the same way they
would with a remote backend.
"""

from __future__ import annotations

import copy
import threading
from typing import Dict, List, Optional

from backends.base import RecordBackend
from backends.types import Record, RecordExistsError, RecordNotFoundError
from common.logger import get_logger


class MemoryBackend(RecordBackend):
    def __init__(self, records: Optional[Dict[str, Record]] = None):
        self._lock = threading.Lock()
        self._records: Dict[str, Record] = {}
        for name, record in (records or {}).items():
            self._records[name] = copy.deepcopy(record)

    def fetch(self, name: str) -> Record:
        with self._lock:
            record = self._records.get(name)
            if record is None:
                raise RecordNotFoundError(name)
            return copy.deepcopy(record)

    def create(self, record: Record) -> Record:
        name = record["name"]
        with self._lock:
            if name in self._records:
                raise RecordExistsError(name)
            self._records[name] = copy.deepcopy(record)
            stored = copy.deepcopy(self._records[name])
        get_logger(__name__).debug("memory backend: created record name=%s", name)
        return stored

    def update(self, record: Record) -> Record:
        name = record["name"]
        with self._lock:
            if name not in self._records:
                raise RecordNotFoundError(name)
            self._records[name] = copy.deepcopy(record)
            return copy.deepcopy(self._records[name])

    def delete(self, name: str) -> None:
        with self._lock:
            if self._records.pop(name, None) is None:
                raise RecordNotFoundError(name)
        get_logger(__name__).debug("memory backend: deleted record name=%s", name)

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._records)

    def peek(self, name: str) -> Optional[Record]:
        """Return a copy of the stored record without the not-found signal."""
        with self._lock:
            record = self._records.get(name)
            return copy.deepcopy(record) if record is not None else None
