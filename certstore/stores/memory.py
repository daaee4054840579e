"""In-memory object store implementation."""

import threading
from datetime import datetime

from ..exceptions import NotFoundError, ObjectExistsError
from ..utils import utcnow
from .base import ObjectInfo, ObjectStore


class MemoryObjectStore(ObjectStore):
    """Thread-safe in-memory object store.

    Note: This store does NOT persist across processes or restarts.
    Use FileObjectStore, RedisObjectStore or S3ObjectStore to share locks
    and certificates between processes.
    """

    def __init__(self) -> None:
        self._objects: dict[str, tuple[bytes, datetime]] = {}
        self._global_lock = threading.Lock()

    def get(self, key: str) -> bytes:
        with self._global_lock:
            if key not in self._objects:
                raise NotFoundError(key)
            return self._objects[key][0]

    def put(self, key: str, data: bytes, *, if_absent: bool = False) -> None:
        with self._global_lock:
            if if_absent and key in self._objects:
                raise ObjectExistsError(key)
            self._objects[key] = (bytes(data), utcnow())

    def delete(self, key: str) -> None:
        with self._global_lock:
            if self._objects.pop(key, None) is None:
                raise NotFoundError(key)

    def list(self, prefix: str = "") -> list[str]:
        with self._global_lock:
            return sorted(key for key in self._objects if key.startswith(prefix))

    def stat(self, key: str) -> ObjectInfo:
        with self._global_lock:
            if key not in self._objects:
                raise NotFoundError(key)
            data, modified = self._objects[key]
            return ObjectInfo(key=key, size=len(data), modified=modified)

    def clear(self) -> None:
        """Remove all objects (useful for testing)."""
        with self._global_lock:
            self._objects.clear()
