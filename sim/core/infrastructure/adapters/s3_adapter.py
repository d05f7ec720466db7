"""Thin adapter for interacting with Amazon S3."""

from collections.abc import Mapping
from typing import Any, BinaryIO, Protocol

import boto3

from sim.core.infrastructure.adapters.aws_session import boto3_kwargs
from sim.core.models.config import AppConfig


class _Boto3S3Client(Protocol):
    """Internal typing for boto3 S3 client (AWS-facing only)."""

    def upload_fileobj(
        self,
        Fileobj: BinaryIO,
        Bucket: str,
        Key: str,
        ExtraArgs: Mapping[str, Any] | None = None,
    ) -> None: ...

    def download_fileobj(
        self,
        Bucket: str,
        Key: str,
        Fileobj: BinaryIO,
    ) -> None: ...

    def head_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Mapping[str, Any]: ...

    def delete_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Any: ...


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (repository-facing)."""

    @property
    def bucket(self) -> str: ...

    def upload_fileobj(
        self,
        *,
        key: str,
        body: BinaryIO,
        extra_args: dict[str, str],
    ) -> None: ...

    def head_object(self, *, key: str) -> Mapping[str, Any]: ...

    def download_fileobj(self, *, key: str, stream: BinaryIO) -> None: ...

    def delete_object(self, *, key: str) -> None: ...


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps a boto3 S3 client bound to a single bucket
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, config: AppConfig, client: _Boto3S3Client | None = None) -> None:
        """Create S3 client from the application configuration."""
        if not config.storage:
            raise RuntimeError("storage bucket name is not configured")

        self._bucket = config.storage
        self._client: _Boto3S3Client = client or boto3.client("s3", **boto3_kwargs(config))

    @property
    def bucket(self) -> str:
        return self._bucket

    def upload_fileobj(
        self,
        *,
        key: str,
        body: BinaryIO,
        extra_args: dict[str, str],
    ) -> None:
        """Stream an object into S3 (multipart for large bodies).

        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.upload_fileobj(
            body,
            self._bucket,
            key,
            ExtraArgs=extra_args,
        )

    def head_object(self, *, key: str) -> Mapping[str, Any]:
        """Fetch object attributes without the body.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self._client.head_object(
            Bucket=self._bucket,
            Key=key,
        )

    def download_fileobj(self, *, key: str, stream: BinaryIO) -> None:
        """Stream an object from S3 into a writable binary stream.

        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.download_fileobj(self._bucket, key, stream)

    def delete_object(self, *, key: str) -> None:
        """Delete object from S3.

        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.delete_object(
            Bucket=self._bucket,
            Key=key,
        )
