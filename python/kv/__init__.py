from kv.codec import Base64Codec, CodecError, EncryptedCodec, TextCodec, ValueCodec
from kv.exceptions import BackendError, KVError, NotFoundError
from kv.store import OWNER, BucketStore, build_labels

__all__ = [
    "BucketStore",
    "build_labels",
    "OWNER",
    "KVError",
    "NotFoundError",
    "BackendError",
    "CodecError",
    "ValueCodec",
    "TextCodec",
    "Base64Codec",
    "EncryptedCodec",
]
