"""S3-compatible object store implementation."""

import logging
from typing import Any

import boto3
from botocore.client import BaseClient
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError, ParamValidationError

from ..config import S3Options
from ..exceptions import ConfigurationError, NotFoundError, ObjectExistsError
from .base import ObjectInfo, ObjectStore

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}
_NO_BUCKET_CODES = {"NoSuchBucket", "404", "NotFound"}
_PRECONDITION_CODES = {"PreconditionFailed", "412", "ConditionalRequestConflict", "409"}


def _error_code(err: ClientError) -> str:
    return str(err.response.get("Error", {}).get("Code", ""))


class S3ObjectStore(ObjectStore):
    """Object store backed by an S3 bucket (AWS, MinIO, Ceph, ...).

    Create-if-absent is sent as ``If-None-Match: *``. Endpoints (or botocore
    releases) that do not understand the precondition get a plain write, which
    leaves lock creation racy the same way it is without conditional writes.

    Args:
        client: boto3 S3 client
        bucket: Name of the bucket holding the objects
    """

    def __init__(self, client: BaseClient, bucket: str) -> None:
        self.client = client
        self.bucket = bucket
        self._conditional_writes = True

    @classmethod
    def from_options(cls, options: S3Options, client: Any = None) -> "S3ObjectStore":
        """Connect to the configured bucket and make sure it exists.

        Raises:
            ConfigurationError: If the bucket is missing or cannot be checked
        """
        if client is None:
            client = boto3.client(
                "s3",
                endpoint_url=options.endpoint_url,
                region_name=options.region,
                aws_access_key_id=options.access_key_id,
                aws_secret_access_key=options.secret_access_key,
                config=BotoConfig(
                    connect_timeout=options.request_timeout,
                    read_timeout=options.request_timeout,
                    retries={"max_attempts": 3, "mode": "standard"},
                ),
            )

        try:
            client.head_bucket(Bucket=options.bucket)
        except ClientError as e:
            if _error_code(e) in _NO_BUCKET_CODES:
                raise ConfigurationError(f"S3 bucket {options.bucket} does not exist") from e
            raise ConfigurationError(f"checking if bucket exists: {e}") from e
        except BotoCoreError as e:
            raise ConfigurationError(f"checking if bucket exists: {e}") from e

        return cls(client, options.bucket)

    def _is_not_found(self, err: Exception) -> bool:
        return isinstance(err, ClientError) and _error_code(err) in _NOT_FOUND_CODES

    def get(self, key: str) -> bytes:
        try:
            resp = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if self._is_not_found(e):
                raise NotFoundError(key) from e
            raise
        body = resp["Body"]
        try:
            return body.read()
        finally:
            body.close()

    def put(self, key: str, data: bytes, *, if_absent: bool = False) -> None:
        kwargs: dict[str, Any] = {"Bucket": self.bucket, "Key": key, "Body": bytes(data)}
        if if_absent and self._conditional_writes:
            try:
                self.client.put_object(IfNoneMatch="*", **kwargs)
                return
            except ClientError as e:
                if _error_code(e) in _PRECONDITION_CODES:
                    raise ObjectExistsError(key) from e
                if _error_code(e) != "NotImplemented":
                    raise
            except ParamValidationError:
                pass
            logger.warning(
                "S3 endpoint does not support conditional writes; lock creation for bucket %s is not atomic",
                self.bucket,
            )
            self._conditional_writes = False

        self.client.put_object(**kwargs)

    def delete(self, key: str) -> None:
        # S3 deletes succeed for missing keys, so check first to report them.
        self.stat(key)
        self.client.delete_object(Bucket=self.bucket, Key=key)

    def list(self, prefix: str = "") -> list[str]:
        keys = []
        paginator = self.client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
            for obj in page.get("Contents", []):
                keys.append(obj["Key"])
        return sorted(keys)

    def stat(self, key: str) -> ObjectInfo:
        try:
            resp = self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if self._is_not_found(e):
                raise NotFoundError(key) from e
            raise
        return ObjectInfo(
            key=key,
            size=int(resp.get("ContentLength", 0)),
            modified=resp["LastModified"],
        )
