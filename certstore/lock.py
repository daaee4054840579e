"""Named locks built on plain object store reads and writes.

The object store has no locking primitive, so a lock is simply an object
next to the protected key whose content is the time it was taken. A lock
holder that crashed can only be detected by the age of that object:

* younger than ``expire_after``: held, poll again later
* older than ``expire_after``: expired, overwrite it
* older than ``abandon_after``: abandoned, delete it and take it afresh

A holder that is alive but stalls past these thresholds loses its lock, so
the work done under a lock must be safe to repeat. Ages are computed from
wall clocks, which therefore have to be roughly in sync across processes.
"""

import logging
import threading
import time
from collections.abc import Callable
from datetime import datetime

from .config import DEFAULT_LOCK_POLICY, LockPolicy
from .exceptions import LockNotAcquiredError, NotFoundError, ObjectExistsError
from .keys import ObjectNamer
from .record import LockRecord
from .stores import ObjectStore
from .utils import format_timestamp, utcnow

logger = logging.getLogger(__name__)


class LockManager:
    """Acquires and releases named locks stored in an object store.

    Args:
        store: Object store holding the lock records
        namer: Maps logical keys to lock record keys
        policy: Expiry, abandonment and polling thresholds
        clock: Returns the current time as an aware datetime
    """

    def __init__(
        self,
        store: ObjectStore,
        namer: ObjectNamer | None = None,
        policy: LockPolicy | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.namer = namer or ObjectNamer()
        self.policy = policy or DEFAULT_LOCK_POLICY
        self.clock = clock or utcnow

    def acquire(
        self,
        key: str,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> LockRecord:
        """Block until the lock for ``key`` is ours.

        Args:
            key: Logical key to lock
            timeout: Give up after this many seconds (None = wait forever)
            cancel: Give up as soon as this event is set

        Returns:
            The lock record that was written

        Raises:
            LockNotAcquiredError: If the deadline passed or ``cancel`` was set
                while the lock was held elsewhere
        """
        lock_key = self.namer.lock_key(key)
        deadline = None if timeout is None else time.monotonic() + timeout

        while True:
            record = self._try_acquire(key, lock_key)
            if record is not None:
                logger.debug("acquired lock %s", lock_key)
                return record

            if cancel is not None and cancel.is_set():
                raise LockNotAcquiredError(key)

            wait = self.policy.poll_interval.total_seconds()
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise LockNotAcquiredError(key, timeout)
                wait = min(wait, remaining)

            logger.debug("waiting %.3f secs to acquire lock %s", wait, lock_key)
            if cancel is None:
                time.sleep(wait)
            elif cancel.wait(wait):
                raise LockNotAcquiredError(key)

    def release(self, key: str) -> None:
        """Delete the lock record for ``key``.

        Releasing a lock that no longer exists is not an error. There is no
        ownership check: any caller can release any lock.
        """
        lock_key = self.namer.lock_key(key)
        try:
            self.store.delete(lock_key)
        except NotFoundError:
            logger.debug("lock %s was already released", lock_key)
            return
        logger.debug("released lock %s", lock_key)

    def _try_acquire(self, key: str, lock_key: str) -> LockRecord | None:
        """One round of the protocol; None means the lock is held elsewhere."""
        try:
            data = self.store.get(lock_key)
        except NotFoundError:
            return self._create(key, lock_key)

        current = LockRecord.decode(key, data)
        if current is None:
            logger.warning("Lock file for '%s' does not make sense; overwriting: %s", key, lock_key)
            return self._overwrite(key, lock_key)

        age = current.age(self.clock())
        if age > self.policy.abandon_after:
            logger.info(
                "Lock for '%s' is stale (locked at: %s); removing then retrying: %s",
                key,
                format_timestamp(current.acquired_at),
                lock_key,
            )
            try:
                self.store.delete(lock_key)
            except NotFoundError:
                pass
            return self._create(key, lock_key)

        if age > self.policy.expire_after:
            logger.debug("lock %s expired (locked at: %s); overwriting", lock_key, current.acquired_at)
            return self._overwrite(key, lock_key)

        return None

    def _create(self, key: str, lock_key: str) -> LockRecord | None:
        record = LockRecord(key=key, acquired_at=self.clock())
        try:
            self.store.put(lock_key, record.encode(), if_absent=True)
        except ObjectExistsError:
            logger.debug("lost the race creating lock %s", lock_key)
            return None
        return record

    def _overwrite(self, key: str, lock_key: str) -> LockRecord:
        record = LockRecord(key=key, acquired_at=self.clock())
        self.store.put(lock_key, record.encode())
        return record
