"""Construction-time configuration for certstore."""

import base64
import binascii
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta

from .exceptions import ConfigurationError

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class LockPolicy:
    """Timing thresholds for the object-store lock protocol.

    Attributes:
        expire_after: Age past which a lock record is expired and reclaimed
        abandon_after: Age past which a lock record is treated as abandoned,
            force-removed and reclaimed
        poll_interval: Wait between reads while a lock is held elsewhere
    """

    expire_after: timedelta = timedelta(seconds=15)
    abandon_after: timedelta = timedelta(minutes=2)
    poll_interval: timedelta = timedelta(seconds=1)

    def __post_init__(self) -> None:
        for name in ("expire_after", "abandon_after", "poll_interval"):
            if getattr(self, name) <= timedelta(0):
                raise ConfigurationError(f"{name} must be positive")
        if self.abandon_after < self.expire_after:
            raise ConfigurationError("abandon_after must not be shorter than expire_after")


DEFAULT_LOCK_POLICY = LockPolicy()


@dataclass
class S3Options:
    """Connection settings for an S3-compatible bucket.

    Args:
        endpoint: Host (and port) of the S3 endpoint, optionally with a scheme
        bucket: Name of an existing bucket
        access_key_id: Access key for static credentials
        secret_access_key: Secret key for static credentials
        prefix: Object key prefix every logical key is stored under
        insecure: Talk plain HTTP instead of HTTPS
        encryption_key: Optional 32-byte key; leave empty for clear text storage
        region: Signing region
        request_timeout: Connect/read timeout for each request (seconds)
    """

    endpoint: str
    bucket: str
    access_key_id: str | None = None
    secret_access_key: str | None = None
    prefix: str = ""
    insecure: bool = False
    encryption_key: bytes | None = field(default=None, repr=False)
    region: str = "us-east-1"
    request_timeout: float = 10.0

    @property
    def endpoint_url(self) -> str:
        if "://" in self.endpoint:
            return self.endpoint
        scheme = "http" if self.insecure else "https"
        return f"{scheme}://{self.endpoint}"

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, prefix: str = "CERTSTORE_"
    ) -> "S3Options":
        """Build options from environment variables.

        Reads ``{prefix}S3_ENDPOINT``, ``{prefix}S3_BUCKET``,
        ``{prefix}S3_ACCESS_KEY_ID``, ``{prefix}S3_SECRET_ACCESS_KEY``,
        ``{prefix}S3_PREFIX``, ``{prefix}S3_INSECURE``, ``{prefix}S3_REGION``
        and ``{prefix}ENCRYPTION_KEY`` (base64).
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            value = env.get(prefix + name)
            return value if value else None

        endpoint = get("S3_ENDPOINT")
        bucket = get("S3_BUCKET")
        if not endpoint or not bucket:
            raise ConfigurationError(
                f"{prefix}S3_ENDPOINT and {prefix}S3_BUCKET must both be set"
            )

        encryption_key = None
        encoded_key = get("ENCRYPTION_KEY")
        if encoded_key:
            try:
                encryption_key = base64.b64decode(encoded_key, validate=True)
            except (binascii.Error, ValueError) as e:
                raise ConfigurationError(
                    f"{prefix}ENCRYPTION_KEY is not valid base64"
                ) from e

        return cls(
            endpoint=endpoint,
            bucket=bucket,
            access_key_id=get("S3_ACCESS_KEY_ID"),
            secret_access_key=get("S3_SECRET_ACCESS_KEY"),
            prefix=get("S3_PREFIX") or "",
            insecure=(get("S3_INSECURE") or "").lower() in _TRUTHY,
            encryption_key=encryption_key,
            region=get("S3_REGION") or "us-east-1",
        )
