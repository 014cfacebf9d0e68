"""Exception hierarchy for k8s-kv."""

from typing import Optional


class KVError(Exception):
    """Base exception for all k8s-kv errors."""


class NotFoundError(KVError, KeyError):
    """Raised by get() when the key is not present in the bucket."""

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"not found: {self.key}"


class BackendError(KVError):
    """A backend fetch/create/update/delete call failed.

    The original exception is chained as `__cause__`. The record's state on
    the server is unknown after this error.
    """

    def __init__(self, operation: str, bucket: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"backend {operation} failed for bucket {bucket!r}{detail}")
        self.operation = operation
        self.bucket = bucket
