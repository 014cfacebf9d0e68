import sys
from pathlib import Path

# Ensure `python/` directory is on sys.path when running as a script.
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from backends import MemoryBackend
from kv import Base64Codec, BucketStore, NotFoundError


def main() -> int:
    backend = MemoryBackend()

    # ===== BucketStore (all methods, in-memory backend) =====
    kv = BucketStore(backend, "demo-app", "demo-bucket")
    print("[kv] record after construction:", backend.peek("demo-bucket"))

    kv.put("users/alice", b'{"role": "admin"}')
    kv.put("users/bob", b'{"role": "viewer"}')
    kv.put("settings/theme", b"dark")
    print("[kv] get users/alice:", kv.get("users/alice"))
    print("[kv] list users/:", kv.list("users/"))
    print("[kv] list all keys:", sorted(kv.list()))

    kv.delete("users/bob")
    kv.delete("users/bob")  # deleting a missing key is fine
    try:
        kv.get("users/bob")
    except NotFoundError as e:
        print("[kv] after delete:", e)

    kv.teardown()
    print("[kv] records after teardown:", backend.names())
    print("[kv] list after teardown:", kv.list())
    print("[kv] records after reuse:", backend.names())

    # ===== Binary values with Base64Codec =====
    blobs = BucketStore(backend, "demo-app", "demo-blobs", codec=Base64Codec())
    blobs.put("raw", bytes(range(8)))
    print("[blobs] stored:", backend.peek("demo-blobs")["data"])
    print("[blobs] get raw:", blobs.get("raw"))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
