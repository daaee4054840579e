"""Mapping of logical keys to object store keys."""

LOCK_SUFFIX = ".lock"


class ObjectNamer:
    """Derives object keys from the host's logical keys.

    Every logical key lives under ``prefix/``; its lock record sits next to it
    with a ``.lock`` suffix. The mapping is stateless so any process configured
    with the same prefix resolves the same object for the same key.

    An empty prefix leaves keys bare (``cert.pem``, not ``/cert.pem``).
    Buckets written by tools that always join with a slash, and so start
    keys with ``/`` when the prefix is empty, are not readable without a
    prefix; such data has to be copied to unslashed keys first.

    Args:
        prefix: Object key prefix; surrounding slashes are ignored
    """

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix.strip("/")

    def object_key(self, key: str) -> str:
        """Object key holding the payload for ``key``."""
        return f"{self.prefix}/{key}" if self.prefix else key

    def lock_key(self, key: str) -> str:
        """Object key holding the lock record for ``key``."""
        return self.object_key(key) + LOCK_SUFFIX

    def relative_key(self, object_key: str) -> str:
        """Inverse of :meth:`object_key`."""
        if not self.prefix:
            return object_key
        head = self.prefix + "/"
        if not object_key.startswith(head):
            raise ValueError(f"{object_key!r} is outside prefix {self.prefix!r}")
        return object_key[len(head):]
