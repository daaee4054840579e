"""Redis-based object store implementation."""

import re
from datetime import datetime
from typing import TYPE_CHECKING

from ..exceptions import NotFoundError, ObjectExistsError
from ..utils import utcnow
from .base import ObjectInfo, ObjectStore

if TYPE_CHECKING:
    from redis import Redis

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


class RedisObjectStore(ObjectStore):
    """Redis-based object store.

    Each object is a plain string value; its modification time is kept in a
    companion key. Create-if-absent uses SET NX, so two processes racing for
    the same lock cannot both win.

    Args:
        client: Redis client instance (``decode_responses=False``)
        prefix: Key prefix for namespacing (default: "certstore:")
    """

    def __init__(self, client: "Redis", prefix: str = "certstore:") -> None:
        self.client = client
        self.prefix = prefix

    def _data_key(self, key: str) -> str:
        return f"{self.prefix}obj:{key}"

    def _mtime_key(self, key: str) -> str:
        return f"{self.prefix}mtime:{key}"

    def get(self, key: str) -> bytes:
        data = self.client.get(self._data_key(key))
        if data is None:
            raise NotFoundError(key)
        return bytes(data)

    def put(self, key: str, data: bytes, *, if_absent: bool = False) -> None:
        stamp = utcnow().isoformat()
        if if_absent:
            if not self.client.set(self._data_key(key), data, nx=True):
                raise ObjectExistsError(key)
            self.client.set(self._mtime_key(key), stamp)
            return

        pipe = self.client.pipeline()
        pipe.set(self._data_key(key), data)
        pipe.set(self._mtime_key(key), stamp)
        pipe.execute()

    def delete(self, key: str) -> None:
        pipe = self.client.pipeline()
        pipe.delete(self._data_key(key))
        pipe.delete(self._mtime_key(key))
        removed, _ = pipe.execute()
        if not removed:
            raise NotFoundError(key)

    def list(self, prefix: str = "") -> list[str]:
        head = f"{self.prefix}obj:"
        pattern = _GLOB_SPECIAL.sub(r"\\\1", head + prefix) + "*"
        keys = []
        cursor = 0

        while True:
            cursor, found = self.client.scan(cursor, match=pattern, count=100)
            for raw in found:
                name = raw.decode() if isinstance(raw, bytes) else raw
                keys.append(name[len(head):])
            if cursor == 0:
                break
        return sorted(set(keys))

    def stat(self, key: str) -> ObjectInfo:
        pipe = self.client.pipeline()
        pipe.exists(self._data_key(key))
        pipe.strlen(self._data_key(key))
        pipe.get(self._mtime_key(key))
        exists, size, stamp = pipe.execute()
        if not exists:
            raise NotFoundError(key)
        if isinstance(stamp, bytes):
            stamp = stamp.decode()
        modified = datetime.fromisoformat(stamp) if stamp else utcnow()
        return ObjectInfo(key=key, size=int(size), modified=modified)

    def clear(self) -> None:
        """Clear all objects with this prefix (useful for testing)."""
        pattern = _GLOB_SPECIAL.sub(r"\\\1", self.prefix) + "*"
        cursor = 0

        while True:
            cursor, keys = self.client.scan(cursor, match=pattern, count=100)
            if keys:
                self.client.delete(*keys)
            if cursor == 0:
                break
