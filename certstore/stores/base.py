"""Base interface for object store backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ObjectInfo:
    """Metadata of a stored object.

    Attributes:
        key: Object key
        size: Payload size in bytes
        modified: Last modification time (aware, UTC)
    """

    key: str
    size: int
    modified: datetime


class ObjectStore(ABC):
    """Abstract base class for key/blob object stores.

    Stores are responsible for:
    - Persisting byte blobs by key
    - Reporting missing objects as NotFoundError, distinct from other failures
    - Creating an object only if it is absent, when asked to

    Stores offer no locking of their own; the lock protocol is built on top
    of these operations.
    """

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Read an object.

        Args:
            key: The object key

        Returns:
            The stored bytes

        Raises:
            NotFoundError: If the object does not exist
        """
        pass

    @abstractmethod
    def put(self, key: str, data: bytes, *, if_absent: bool = False) -> None:
        """Write an object, replacing any previous content.

        Args:
            key: The object key
            data: Bytes to store
            if_absent: Only create the object if it does not exist yet

        Raises:
            ObjectExistsError: If ``if_absent`` is set and the object exists
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete an object.

        Args:
            key: The object key

        Raises:
            NotFoundError: If the object does not exist
        """
        pass

    @abstractmethod
    def list(self, prefix: str = "") -> list[str]:
        """List object keys starting with ``prefix``, sorted."""
        pass

    @abstractmethod
    def stat(self, key: str) -> ObjectInfo:
        """Describe an object.

        Raises:
            NotFoundError: If the object does not exist
        """
        pass
