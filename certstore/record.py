"""Lock record stored in the object store."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from certstore.utils import format_timestamp, parse_timestamp, utcnow


@dataclass
class LockRecord:
    """Represents a held (or possibly held) lock.

    The record's only content on the wire is its acquisition time, written as
    an RFC 3339 timestamp. It carries no owner, so anyone may release it.

    Attributes:
        key: Logical key the lock protects
        acquired_at: When the lock was written
    """

    key: str
    acquired_at: datetime = field(default_factory=utcnow)

    def encode(self) -> bytes:
        """Serialize the record to the blob stored in the object store."""
        return format_timestamp(self.acquired_at).encode("ascii")

    @classmethod
    def decode(cls, key: str, data: bytes) -> "LockRecord | None":
        """Parse a stored blob, returning None when it is corrupt."""
        try:
            text = data.decode("ascii")
        except UnicodeDecodeError:
            return None
        acquired_at = parse_timestamp(text)
        if acquired_at is None:
            return None
        return cls(key=key, acquired_at=acquired_at)

    def age(self, now: datetime) -> timedelta:
        """Time elapsed between acquisition and ``now``."""
        return now - self.acquired_at
