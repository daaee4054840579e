"""certstore - Lockable, encrypted certificate storage on object stores.

Coordinates certificate issuance across processes sharing one object store
(S3, Redis or a directory) using lock records, and keeps certificates and
keys encrypted at rest with NaCl secretbox.

Example:
    storage = Storage(FileObjectStore("/var/lib/certs"), encryption_key=key)

    with storage.locked("example.com"):
        storage.store("example.com/cert.pem", pem)
"""

from .config import DEFAULT_LOCK_POLICY, LockPolicy, S3Options
from .crypto import CleartextWrapper, PayloadWrapper, SecretBoxWrapper, select_wrapper
from .exceptions import (
    AuthenticationError,
    CertStoreError,
    ConfigurationError,
    LockNotAcquiredError,
    NotFoundError,
    ObjectExistsError,
)
from .lock import LockManager
from .record import LockRecord
from .storage import KeyInfo, Storage
from .stores import MemoryObjectStore, ObjectStore

__version__ = "0.1.0"

__all__ = [
    "Storage",
    "KeyInfo",
    "LockManager",
    "LockRecord",
    "LockPolicy",
    "DEFAULT_LOCK_POLICY",
    "S3Options",
    "PayloadWrapper",
    "CleartextWrapper",
    "SecretBoxWrapper",
    "select_wrapper",
    "ObjectStore",
    "MemoryObjectStore",
    "CertStoreError",
    "ConfigurationError",
    "NotFoundError",
    "ObjectExistsError",
    "LockNotAcquiredError",
    "AuthenticationError",
]
