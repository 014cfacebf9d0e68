from backends.base import RecordBackend
from backends.configmap import ConfigMapBackend
from backends.memory import MemoryBackend
from backends.types import Record, RecordData, RecordExistsError, RecordNotFoundError

__all__ = [
    "RecordBackend",
    "MemoryBackend",
    "ConfigMapBackend",
    "Record",
    "RecordData",
    "RecordExistsError",
    "RecordNotFoundError",
]
