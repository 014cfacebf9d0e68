"""Record backend base class (abstract).

BucketStore depends on this type only, so any store of named string
mappings (in-memory, Kubernetes ConfigMaps, ...) can be injected without
changing bucket logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from backends.types import Record


class RecordBackend(ABC):
    @abstractmethod
    def fetch(self, name: str) -> Record:
        """Return the record named `name`.

        Must raise `RecordNotFoundError` when it does not exist; any other
        exception is treated as a backend failure.
        """
        ...

    @abstractmethod
    def create(self, record: Record) -> Record:
        """Create a new record and return the stored version."""
        ...

    @abstractmethod
    def update(self, record: Record) -> Record:
        """Replace the stored record (labels and data) with `record`."""
        ...

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove the record named `name`."""
        ...
