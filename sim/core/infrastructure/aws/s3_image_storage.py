"""S3-backed implementation of ImageStorageRepository."""

from typing import BinaryIO, cast

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from sim.core.infrastructure.adapters.s3_adapter import S3AdapterProtocol
from sim.core.models.errors import ObjectNotFoundError, StorageError
from sim.core.models.image import StoredObject
from sim.core.repositories.storage_repository import ImageStorageRepository
from sim.core.utils.constants import (
    ERROR_CODE_IMAGE_DELETE_FAILED,
    ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
    ERROR_CODE_IMAGE_HEAD_FAILED,
    ERROR_CODE_IMAGE_UPLOAD_FAILED,
    OBJECT_ACL,
    S3_NOT_FOUND_CODES,
    SERVICE_NAME,
)

logger = Logger(service=SERVICE_NAME, child=True)


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class _WriteCounter:
    """Stream wrapper that tracks how far past its starting offset data was written.

    Multipart transfers seek and write chunks out of order, so the size is the
    furthest end reached rather than the final position.
    """

    def __init__(self, inner: BinaryIO) -> None:
        self._inner = inner
        self._seekable = inner.seekable()
        self._start = inner.tell() if self._seekable else 0
        self._offset = 0
        self.size = 0

    def write(self, data: bytes) -> int:
        written = self._inner.write(data)
        if written is None:
            written = len(data)

        if self._seekable:
            end = self._inner.tell() - self._start
        else:
            self._offset += written
            end = self._offset

        self.size = max(self.size, end)
        return written

    def seekable(self) -> bool:
        return self._seekable

    def seek(self, offset: int, whence: int = 0) -> int:
        return self._inner.seek(offset, whence)

    def tell(self) -> int:
        return self._inner.tell()

    def flush(self) -> None:
        self._inner.flush()


class S3ImageStorage(ImageStorageRepository):
    """Image storage implementation backed by Amazon S3."""

    def __init__(self, adapter: S3AdapterProtocol) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3 = adapter

    @property
    def storage_name(self) -> str:
        return self._s3.bucket

    def upload_image(self, *, key: str, body: BinaryIO, content_type: str) -> None:
        """Stream image bytes to S3 as a private object."""
        logger.debug(
            "Uploading image",
            extra={"key": key, "content_type": content_type},
        )

        try:
            self._s3.upload_fileobj(
                key=key,
                body=body,
                extra_args={"ACL": OBJECT_ACL, "ContentType": content_type},
            )
            logger.info("Image uploaded successfully", extra={"key": key})

        except ClientError as exc:
            logger.error("S3 upload failed", extra={"key": key, "code": _error_code(exc)})
            raise StorageError(
                message="Unable to upload image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error uploading image")
            raise StorageError(
                message="Unable to upload image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"key": key},
            ) from exc

    def head_image(self, *, key: str) -> StoredObject:
        """Return the ETag and content length of an uploaded object."""
        logger.debug("Heading image", extra={"key": key})

        try:
            response = self._s3.head_object(key=key)

        except ClientError as exc:
            code = _error_code(exc)
            logger.error("S3 head failed", extra={"key": key, "code": code})

            if code in S3_NOT_FOUND_CODES:
                raise ObjectNotFoundError(details={"key": key}) from exc

            raise StorageError(
                message="Unable to read image attributes",
                error_code=ERROR_CODE_IMAGE_HEAD_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error heading image")
            raise StorageError(
                message="Unable to read image attributes",
                error_code=ERROR_CODE_IMAGE_HEAD_FAILED,
                details={"key": key},
            ) from exc

        etag = response.get("ETag")
        content_length = response.get("ContentLength")

        if etag is None or content_length is None:
            logger.error(
                "Head response is missing etag or content length",
                extra={"key": key},
            )
            raise StorageError(
                message="etag and/or content length is missing, unable to save metadata",
                error_code=ERROR_CODE_IMAGE_HEAD_FAILED,
                details={"key": key},
            )

        return StoredObject(etag=etag, content_length=content_length)

    def download_image(self, *, key: str, stream: BinaryIO) -> int:
        """Stream image bytes from S3 into the given writable stream."""
        logger.debug("Downloading image", extra={"key": key})

        try:
            counter = _WriteCounter(stream)
            self._s3.download_fileobj(key=key, stream=cast(BinaryIO, counter))

        except ClientError as exc:
            code = _error_code(exc)
            logger.error("S3 download failed", extra={"key": key, "code": code})

            if code in S3_NOT_FOUND_CODES:
                raise ObjectNotFoundError(details={"key": key}) from exc

            raise StorageError(
                message="Unable to download image at this time",
                error_code=ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error downloading image")
            raise StorageError(
                message="Unable to download image at this time",
                error_code=ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
                details={"key": key},
            ) from exc

        logger.info("Image downloaded successfully", extra={"key": key, "size": counter.size})

        return counter.size

    def remove_image(self, *, key: str) -> None:
        """Delete an image object from S3. A missing object counts as deleted."""
        logger.debug("Deleting image", extra={"key": key})

        try:
            self._s3.delete_object(key=key)
            logger.info("Image deleted successfully", extra={"key": key})

        except ClientError as exc:
            code = _error_code(exc)

            if code in S3_NOT_FOUND_CODES:
                logger.info("Image object not found, nothing to delete", extra={"key": key})
                return

            logger.error("S3 deletion failed", extra={"key": key, "code": code})
            raise StorageError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting image")
            raise StorageError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"key": key},
            ) from exc
