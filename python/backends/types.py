"""Common types shared by record backends."""
from typing import Any, Dict, Optional, TypedDict

RecordData = Dict[str, str]


class _RecordFields(TypedDict):
    name: str
    labels: Dict[str, str]
    data: Optional[RecordData]


class Record(_RecordFields, total=False):
    """A named record: labels set at creation, plus a string data mapping.

    `data` may be None on records fetched from a backend that never
    initialized it; consumers normalize it to an empty dict. `metadata`
    holds whatever else the backend keeps about the record and must be
    handed back unchanged on update.
    """
    metadata: Dict[str, Any]


class RecordNotFoundError(LookupError):
    """The backend has no record with the requested name."""

    def __init__(self, name: str):
        super().__init__(f"record not found: {name}")
        self.name = name


class RecordExistsError(Exception):
    """A record with this name already exists and cannot be created again."""

    def __init__(self, name: str):
        super().__init__(f"record already exists: {name}")
        self.name = name
