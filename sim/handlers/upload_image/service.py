"""Business logic for image upload operations.

This module coordinates object storage and record persistence for image
uploads while translating failures into domain-specific errors.
"""

import uuid
from typing import BinaryIO

from aws_lambda_powertools import Logger

from sim.core.models.errors import (
    ImageServiceError,
    MetadataOperationFailedError,
    StorageError,
    ValidationError,
)
from sim.core.models.image import ImageRecord
from sim.core.repositories.metadata_repository import ImageRecordWriter
from sim.core.repositories.storage_repository import ImageStorageRepository
from sim.core.utils.constants import (
    DEFAULT_CONTENT_TYPE,
    ERROR_CODE_IMAGE_UPLOAD_FAILED,
    ERROR_CODE_METADATA_CREATE_FAILED,
    IMAGE_KEY_PREFIX,
    MIME_SNIFF_LENGTH,
    SERVICE_NAME,
)
from sim.core.utils.mime import detect_mime_type
from sim.core.utils.time import utc_now_iso
from sim.core.utils.validators import require_dependencies

logger = Logger(service=SERVICE_NAME, child=True)


def upload_key(image_id: str, name: str) -> str:
    """Object key for an upload: ``images/{image_id}/{name}``."""
    return f"{IMAGE_KEY_PREFIX}/{image_id}/{name}"


class UploadService:
    """Application service responsible for image uploads.

    This service orchestrates:
    - Uploading image content to storage
    - Reading back the stored object's ETag and size
    - Persisting the image record that points at the object
    """

    def __init__(
        self,
        *,
        storage: ImageStorageRepository | None,
        writer: ImageRecordWriter | None,
    ) -> None:
        require_dependencies(storage=storage, writer=writer)
        self.storage: ImageStorageRepository = storage
        self.writer: ImageRecordWriter = writer

    @staticmethod
    def generate_image_id() -> str:
        """Generate a unique image identifier."""
        return str(uuid.uuid4())

    @staticmethod
    def sniff_content_type(body: BinaryIO) -> str:
        """Detect the MIME type from the leading bytes, rewinding the stream."""
        if not body.seekable():
            return DEFAULT_CONTENT_TYPE

        position = body.tell()
        head = body.read(MIME_SNIFF_LENGTH)
        body.seek(position)

        return detect_mime_type(head)

    def upload_image(self, *, name: str, body: BinaryIO) -> ImageRecord:
        """Upload an image and persist its record.

        The upload flow is:
        1. Generate the image id and object key
        2. Upload the body to object storage
        3. Head the object to read its ETag and size
        4. Persist the image record

        The object is not removed if the record write fails.

        Args:
            name: Name for the image, part of the object key
            body: Readable binary stream with the image content

        Returns:
            The persisted image record

        Raises:
            ValidationError: If the name cannot be used as a key segment
            StorageError: If the upload or head fails
            DuplicateImageError: If the generated id already has a record
            MetadataOperationFailedError: If record persistence fails
        """
        if not name.strip() or "/" in name or "\\" in name:
            raise ValidationError(
                message="Image name must be a non-empty file name without path separators",
                details={"name": name},
            )

        image_id = self.generate_image_id()
        key = upload_key(image_id, name)
        content_type = self.sniff_content_type(body)

        logger.info(
            "Attempting to upload",
            extra={"image_id": image_id, "image_name": name, "key": key},
        )

        # Step 1: Upload image to storage
        try:
            self.storage.upload_image(key=key, body=body, content_type=content_type)
            stored = self.storage.head_image(key=key)
        except ImageServiceError:
            logger.exception("Image upload to storage failed", extra={"key": key})
            raise
        except Exception as exc:
            logger.exception("Image upload to storage failed", extra={"key": key})
            raise StorageError(
                message="Unable to upload image",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"image_id": image_id},
            ) from exc

        # Step 2: Create the record pointing at the object
        record = ImageRecord(
            id=image_id,
            created_at=utc_now_iso(),
            etag=stored.etag,
            key=key,
            name=name,
            size_in_bytes=stored.content_length,
            storage=self.storage.storage_name,
            content_type=content_type,
        )

        try:
            self.writer.create_record(record=record)
        except ImageServiceError:
            logger.exception("Unable to create image record", extra={"image_id": image_id})
            raise
        except Exception as exc:
            logger.exception("Unable to create image record", extra={"image_id": image_id})
            raise MetadataOperationFailedError(
                message="Unable to save image record",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"image_id": image_id},
            ) from exc

        logger.info(
            "Image uploaded successfully",
            extra={"image_id": image_id, "size": record.size_in_bytes},
        )
        return record
