"""Certificate storage on top of an object store.

:class:`Storage` is what a certificate manager talks to: it locks names
across processes, stores and loads (optionally encrypted) certificates and
keys, and passes everything else straight through to the object store.

Example:
    storage = Storage.from_s3(S3Options(endpoint="minio:9000", bucket="certs"))

    with storage.locked("example.com", timeout=60):
        if not storage.exists("example.com/cert.pem"):
            storage.store("example.com/cert.pem", issue_certificate())
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime

from .config import LockPolicy, S3Options
from .crypto import PayloadWrapper, select_wrapper
from .exceptions import NotFoundError
from .keys import ObjectNamer
from .lock import LockManager
from .record import LockRecord
from .stores import ObjectStore


@dataclass(frozen=True)
class KeyInfo:
    """What the certificate manager gets back from :meth:`Storage.stat`."""

    key: str
    size: int
    modified: datetime
    is_terminal: bool = True


class Storage:
    """Lockable, optionally encrypted certificate storage.

    The encryption key is checked before anything else, so a key of the
    wrong length fails here without touching the store.

    Only :meth:`lock` can be cancelled. Every other operation is a single
    backend call and is bounded by the backend's transport timeout
    (``S3Options.request_timeout`` on S3).

    Args:
        store: Object store backend
        prefix: Object key prefix for every logical key
        encryption_key: None for clear text, or exactly 32 bytes
        policy: Lock thresholds (defaults to DEFAULT_LOCK_POLICY)
        wrapper: Pre-selected payload wrapper; overrides ``encryption_key``
        clock: Wall clock used to date and age lock records
    """

    def __init__(
        self,
        store: ObjectStore,
        prefix: str = "",
        encryption_key: bytes | None = None,
        policy: LockPolicy | None = None,
        wrapper: PayloadWrapper | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.wrapper = wrapper or select_wrapper(encryption_key)
        self.backend = store
        self.namer = ObjectNamer(prefix)
        self.locks = LockManager(store, namer=self.namer, policy=policy, clock=clock)

    @classmethod
    def from_s3(
        cls,
        options: S3Options,
        policy: LockPolicy | None = None,
        client: object | None = None,
    ) -> "Storage":
        """Create storage on an S3 bucket.

        Raises:
            ConfigurationError: On a bad encryption key (before any network
                access) or when the bucket does not exist
        """
        wrapper = select_wrapper(options.encryption_key)

        from .stores.s3 import S3ObjectStore

        store = S3ObjectStore.from_options(options, client=client)
        return cls(store, prefix=options.prefix, policy=policy, wrapper=wrapper)

    # Locking

    def lock(
        self,
        key: str,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> LockRecord:
        """Acquire the lock for ``key``; see :meth:`LockManager.acquire`."""
        return self.locks.acquire(key, timeout=timeout, cancel=cancel)

    def unlock(self, key: str) -> None:
        """Release the lock for ``key``; see :meth:`LockManager.release`."""
        self.locks.release(key)

    @contextmanager
    def locked(
        self,
        key: str,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> Iterator[LockRecord]:
        """Hold the lock for ``key`` for the duration of a ``with`` block."""
        record = self.lock(key, timeout=timeout, cancel=cancel)
        try:
            yield record
        finally:
            self.unlock(key)

    # Payloads. None of these can be cancelled; each is bounded by the
    # backend transport timeout (S3Options.request_timeout on S3).

    def store(self, key: str, value: bytes) -> None:
        """Encrypt (if configured) and write ``value`` under ``key``."""
        self.backend.put(self.namer.object_key(key), self.wrapper.encode(value))

    def load(self, key: str) -> bytes:
        """Load and decrypt ``key``.

        Raises:
            NotFoundError: If nothing is stored under ``key``
            AuthenticationError: If the stored payload fails authentication
        """
        payload = self.backend.get(self.namer.object_key(key))
        return self.wrapper.decode(payload)

    def delete(self, key: str) -> None:
        self.backend.delete(self.namer.object_key(key))

    def exists(self, key: str) -> bool:
        """Whether ``key`` is stored; errors other than not found propagate."""
        try:
            self.backend.stat(self.namer.object_key(key))
        except NotFoundError:
            return False
        return True

    def list(self, prefix: str = "", recursive: bool = True) -> list[str]:
        """List logical keys starting with ``prefix``.

        Lock records are included. Without ``recursive`` keys are cut at the
        first slash after ``prefix`` (a slash directly following it is
        skipped), the way S3 groups keys by delimiter.
        """
        object_keys = self.backend.list(self.namer.object_key(prefix))
        keys = [self.namer.relative_key(object_key) for object_key in object_keys]
        if recursive:
            return keys

        children = set()
        for key in keys:
            start = len(prefix)
            if key.startswith("/", start):
                start += 1
            end = key.find("/", start)
            children.add(key if end == -1 else key[:end])
        return sorted(children)

    def stat(self, key: str) -> KeyInfo:
        """Describe ``key``.

        Raises:
            NotFoundError: If nothing is stored under ``key``
        """
        info = self.backend.stat(self.namer.object_key(key))
        return KeyInfo(key=key, size=info.size, modified=info.modified)
