"""Exceptions for certstore."""


class CertStoreError(Exception):
    """Base exception for certstore errors."""


class ConfigurationError(CertStoreError):
    """Raise when the storage is misconfigured (bad key, missing bucket, ...)."""


class NotFoundError(CertStoreError):
    """Raise when the requested object does not exist."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Object does not exist: {key}")


class ObjectExistsError(CertStoreError):
    """Raise when a create-if-absent write finds the object already present."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Object already exists: {key}")


class LockNotAcquiredError(CertStoreError):
    """Raise when a lock could not be obtained before cancellation or deadline."""

    def __init__(self, key: str, timeout: float | None = None) -> None:
        self.key = key
        self.timeout = timeout
        if timeout is None:
            message = f"Lock acquisition for key '{key}' was cancelled"
        else:
            message = f"Failed to acquire lock for key '{key}' within {timeout}s"
        super().__init__(message)


class AuthenticationError(CertStoreError):
    """Raise when an encrypted payload fails its integrity check."""
