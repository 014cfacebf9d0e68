"""BucketStore: a key/value bucket backed by exactly one backend record.

Every operation round-trips to the backend: the record is fetched (or
created on first use), read or modified, and written back whole. Nothing is
cached between calls.

Operations on one instance are serialized by a reader-writer lock, so local
read-modify-write cycles never interleave. There is no coordination across
instances or processes; concurrent writers elsewhere race and the last
update wins.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, TypeVar

from backends.base import RecordBackend
from backends.types import Record, RecordNotFoundError
from common.logger import get_logger
from common.rwlock import RWLock
from kv.codec import TextCodec, ValueCodec
from kv.exceptions import BackendError, NotFoundError

OWNER = "K8S-KV"

T = TypeVar("T")


def build_labels(app_name: str, bucket_name: str) -> Dict[str, str]:
    """Metadata labels attached to a newly created bucket record."""
    return {
        "BUCKET": bucket_name,
        "APP": app_name,
        "OWNER": OWNER,
    }


class BucketStore:
    """Put/Get/Delete/List over the record named after the bucket.

    The record holds at most ~1MB (backend limit); this class does not
    check sizes, an oversized write fails as BackendError.
    """

    def __init__(
        self,
        backend: RecordBackend,
        app_name: str,
        bucket_name: str,
        codec: Optional[ValueCodec] = None,
    ):
        if not app_name:
            raise ValueError("app_name must be a non-empty string")
        if not bucket_name:
            raise ValueError("bucket_name must be a non-empty string")
        self.backend = backend
        self.app_name = app_name
        self.bucket_name = bucket_name
        self.codec: ValueCodec = codec or TextCodec()
        self._lock = RWLock()

        with self._lock.write_locked():
            self._resolve()
        get_logger(__name__).debug(
            "bucket store: ready app=%s bucket=%s", self.app_name, self.bucket_name
        )

    def _call(self, operation: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except Exception as e:
            get_logger(__name__).warning(
                "bucket store: backend %s failed bucket=%s error=%s",
                operation,
                self.bucket_name,
                e,
            )
            raise BackendError(operation, self.bucket_name, e) from e

    def _resolve(self) -> Record:
        """Fetch the bucket record, creating it if the backend has none."""
        log = get_logger(__name__)
        try:
            record = self.backend.fetch(self.bucket_name)
        except RecordNotFoundError:
            log.info(
                "bucket store: record missing, creating app=%s bucket=%s",
                self.app_name,
                self.bucket_name,
            )
            new_record: Record = {
                "name": self.bucket_name,
                "labels": build_labels(self.app_name, self.bucket_name),
                "data": {},
            }
            record = self._call("create", lambda: self.backend.create(new_record))
        except Exception as e:
            log.warning(
                "bucket store: backend fetch failed bucket=%s error=%s", self.bucket_name, e
            )
            raise BackendError("fetch", self.bucket_name, e) from e

        if record.get("data") is None:
            record["data"] = {}
        return record

    def _save(self, record: Record) -> None:
        self._call("update", lambda: self.backend.update(record))

    def put(self, key: str, value: bytes) -> None:
        """Store value under key, replacing any existing value."""
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError(f"value must be bytes, got {type(value).__name__}")
        with self._lock.write_locked():
            record = self._resolve()
            record["data"][key] = self.codec.encode(bytes(value))
            self._save(record)
        get_logger(__name__).debug(
            "bucket store: put bucket=%s key=%s len=%d", self.bucket_name, key, len(value)
        )

    def get(self, key: str) -> bytes:
        """Return the value for key; raises NotFoundError if absent."""
        with self._lock.read_locked():
            record = self._resolve()
        try:
            text = record["data"][key]
        except KeyError:
            raise NotFoundError(key) from None
        return self.codec.decode(text)

    def delete(self, key: str) -> None:
        """Remove key from the bucket. A missing key is not an error."""
        with self._lock.write_locked():
            record = self._resolve()
            record["data"].pop(key, None)
            self._save(record)
        get_logger(__name__).debug("bucket store: delete bucket=%s key=%s", self.bucket_name, key)

    def list(self, prefix: str = "") -> Dict[str, bytes]:
        """Return all entries whose key starts with prefix (order undefined)."""
        with self._lock.read_locked():
            record = self._resolve()
        return {
            key: self.codec.decode(text)
            for key, text in record["data"].items()
            if key.startswith(prefix)
        }

    def teardown(self) -> None:
        """Delete the bucket record and all of its data.

        The instance stays usable: the next operation recreates an empty
        record.
        """
        with self._lock.write_locked():
            self._call("delete", lambda: self.backend.delete(self.bucket_name))
        get_logger(__name__).info(
            "bucket store: teardown app=%s bucket=%s", self.app_name, self.bucket_name
        )
