"""Object store client used by the bridge, with a boto3 implementation."""

from __future__ import annotations

from typing import Any, Protocol

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from aria_s3.config import AriaS3Config
from aria_s3.errors import ObjectNotFoundError, TransportError

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


class StoreClient(Protocol):
    """Blob operations the bridge needs from an object store connection."""

    def get(self, bucket: str, name: str) -> bytes: ...

    def put(self, bucket: str, name: str, body: bytes) -> None: ...

    def delete(self, bucket: str, name: str) -> None: ...

    def list_prefix(self, bucket: str, prefix: str) -> list[str]: ...

    def exists(self, bucket: str, name: str) -> bool: ...

    def close(self) -> None: ...


def _is_not_found(err: Exception) -> bool:
    if isinstance(err, ClientError):
        code = err.response.get("Error", {}).get("Code", "")
        return code in _NOT_FOUND_CODES
    return False


class S3StoreClient:
    """One connection to an S3-compatible store.

    A connection belongs to a single caller for the duration of one operation;
    it is not meant to be shared between threads.
    """

    def __init__(self, s3: Any) -> None:
        self._s3 = s3

    def __enter__(self) -> S3StoreClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        close = getattr(self._s3, "close", None)
        if close is not None:
            close()

    def get(self, bucket: str, name: str) -> bytes:
        try:
            resp = self._s3.get_object(Bucket=bucket, Key=name)
            return resp["Body"].read()
        except (ClientError, BotoCoreError) as e:
            if _is_not_found(e):
                raise ObjectNotFoundError(bucket, name) from e
            raise TransportError("get_object", name, str(e)) from e

    def put(self, bucket: str, name: str, body: bytes) -> None:
        try:
            self._s3.put_object(Bucket=bucket, Key=name, Body=body)
        except (ClientError, BotoCoreError) as e:
            raise TransportError("put_object", name, str(e)) from e

    def delete(self, bucket: str, name: str) -> None:
        try:
            self._s3.delete_object(Bucket=bucket, Key=name)
        except (ClientError, BotoCoreError) as e:
            if _is_not_found(e):
                raise ObjectNotFoundError(bucket, name) from e
            raise TransportError("delete_object", name, str(e)) from e

    def list_prefix(self, bucket: str, prefix: str) -> list[str]:
        names: list[str] = []
        try:
            paginator = self._s3.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
                for item in page.get("Contents", []):
                    names.append(item["Key"])
        except (ClientError, BotoCoreError) as e:
            raise TransportError("list_objects", prefix, str(e)) from e
        return names

    def exists(self, bucket: str, name: str) -> bool:
        try:
            self._s3.head_object(Bucket=bucket, Key=name)
            return True
        except (ClientError, BotoCoreError) as e:
            if _is_not_found(e):
                return False
            raise TransportError("head_object", name, str(e)) from e


def open_connection(config: AriaS3Config) -> S3StoreClient:
    """Open a fresh connection; callers own it until they close it."""
    try:
        session = boto3.Session(
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region,
        )
        s3 = session.client(
            "s3",
            region_name=config.region,
            endpoint_url=config.endpoint_url,
            config=BotoConfig(
                connect_timeout=config.request_timeout_s,
                read_timeout=config.request_timeout_s,
                retries={"max_attempts": config.max_attempts, "mode": "standard"},
            ),
        )
    except (ClientError, BotoCoreError) as e:
        raise TransportError("open_connection", config.bucket, str(e)) from e
    return S3StoreClient(s3)
