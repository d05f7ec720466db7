"""Business logic for image deletion.

This module coordinates deletion of an image object and the record that
points at it. The object is removed from storage first, followed by record
cleanup, while translating failures into domain-specific errors.
"""

from typing import Any

from aws_lambda_powertools import Logger

from sim.core.models.errors import (
    ImageServiceError,
    MetadataOperationFailedError,
    RecordNotFoundError,
    StorageError,
)
from sim.core.models.image import ImageRecord
from sim.core.repositories.metadata_repository import ImageRecordReader, ImageRecordWriter
from sim.core.repositories.storage_repository import ImageStorageRepository
from sim.core.utils.constants import (
    ERROR_CODE_IMAGE_DELETE_FAILED,
    ERROR_CODE_METADATA_DELETE_FAILED,
    ERROR_CODE_METADATA_FETCH_FAILED,
    SERVICE_NAME,
)
from sim.core.utils.time import utc_now_iso
from sim.core.utils.validators import require_dependencies

logger = Logger(service=SERVICE_NAME, child=True)


class DeleteService:
    """Application service responsible for deleting images.

    This service orchestrates:
    - Validation that the image record exists
    - Deletion of the image object from storage
    - Removal of the record from the metadata store

    It does not perform low-level infrastructure operations directly.
    """

    def __init__(
        self,
        *,
        storage: ImageStorageRepository | None,
        reader: ImageRecordReader | None,
        writer: ImageRecordWriter | None,
    ) -> None:
        require_dependencies(storage=storage, reader=reader, writer=writer)
        self.storage: ImageStorageRepository = storage
        self.reader: ImageRecordReader = reader
        self.writer: ImageRecordWriter = writer

    def delete_image(self, image_id: str) -> dict[str, Any]:
        """Delete an image object and its record.

        The deletion flow is:
        1. Fetch the record to confirm the image exists and obtain the key
        2. Delete the object from storage
        3. Delete the record

        Args:
            image_id: Unique identifier of the image to delete

        Returns:
            A dictionary containing deletion confirmation details

        Raises:
            RecordNotFoundError: If no record exists for the id
            StorageError: If storage deletion fails
            MetadataOperationFailedError: If record lookup or deletion fails
        """
        logger.debug("Starting image deletion", extra={"image_id": image_id})

        # Step 1: Fetch the record to locate the storage object
        record = self._get_record(image_id)

        # Step 2: Delete the object from storage
        try:
            self.storage.remove_image(key=record.key)
        except ImageServiceError:
            logger.exception(
                "Unable to delete object",
                extra={"image_id": image_id, "key": record.key},
            )
            raise
        except Exception as exc:
            logger.exception(
                "Unable to delete object",
                extra={"image_id": image_id, "key": record.key},
            )
            raise StorageError(
                message="Unable to delete image from storage",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc

        # Step 3: Delete the record; a record removed in the meantime is fine
        try:
            self.writer.delete_record(image_id=image_id)
        except RecordNotFoundError:
            logger.info("Record already removed", extra={"image_id": image_id})
        except ImageServiceError:
            logger.exception("Unable to delete record", extra={"image_id": image_id})
            raise
        except Exception as exc:
            logger.exception("Unable to delete record", extra={"image_id": image_id})
            raise MetadataOperationFailedError(
                message="Unable to delete image record",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc

        logger.info("Image deleted successfully", extra={"image_id": image_id})

        return {
            "image_id": image_id,
            "key": record.key,
            "deleted_at": utc_now_iso(),
        }

    def _get_record(self, image_id: str) -> ImageRecord:
        try:
            return self.reader.get_record(image_id=image_id)
        except RecordNotFoundError:
            logger.warning("Image record not found", extra={"image_id": image_id})
            raise
        except ImageServiceError:
            logger.exception("Unable to retrieve image record", extra={"image_id": image_id})
            raise
        except Exception as exc:
            logger.exception("Unable to retrieve image record", extra={"image_id": image_id})
            raise MetadataOperationFailedError(
                message="Unable to retrieve image record",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_id": image_id},
            ) from exc
