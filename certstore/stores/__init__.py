"""Object store backends for certificates, keys and lock records."""

from .base import ObjectInfo, ObjectStore
from .memory import MemoryObjectStore

__all__ = [
    "ObjectInfo",
    "ObjectStore",
    "MemoryObjectStore",
    "FileObjectStore",
    "RedisObjectStore",
    "S3ObjectStore",
]


def __getattr__(name: str) -> type:
    if name == "RedisObjectStore":
        from .redis import RedisObjectStore

        return RedisObjectStore
    if name == "S3ObjectStore":
        from .s3 import S3ObjectStore

        return S3ObjectStore
    if name == "FileObjectStore":
        from .file import FileObjectStore

        return FileObjectStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
