"""
Business logic for image download.

This module resolves an image record and streams the object it points at
into a caller-provided binary stream.
"""

from typing import BinaryIO

from aws_lambda_powertools import Logger

from sim.core.models.errors import (
    ImageServiceError,
    MetadataOperationFailedError,
    RecordNotFoundError,
    StorageError,
)
from sim.core.models.image import ImageRecord
from sim.core.repositories.metadata_repository import ImageRecordReader
from sim.core.repositories.storage_repository import ImageStorageRepository
from sim.core.utils.constants import (
    ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
    ERROR_CODE_METADATA_FETCH_FAILED,
    SERVICE_NAME,
)
from sim.core.utils.validators import require_dependencies

logger = Logger(service=SERVICE_NAME, child=True)


class DownloadService:
    """Application service responsible for downloading images.

    This service orchestrates:
    - Fetching the image record
    - Streaming the referenced object out of storage
    """

    def __init__(
        self,
        *,
        storage: ImageStorageRepository | None,
        reader: ImageRecordReader | None,
    ) -> None:
        require_dependencies(storage=storage, reader=reader)
        self.storage: ImageStorageRepository = storage
        self.reader: ImageRecordReader = reader

    def download_image(self, *, image_id: str, stream: BinaryIO) -> ImageRecord:
        """Stream the image identified by ``image_id`` into ``stream``.

        Returns:
            The record of the downloaded image

        Raises:
            RecordNotFoundError: If no record exists for the id
            ObjectNotFoundError: If the record points at a missing object
            StorageError: If the download fails
            MetadataOperationFailedError: If the record lookup fails
        """
        logger.info("Attempting to download object", extra={"image_id": image_id})

        record = self.get_record(image_id)

        try:
            written = self.storage.download_image(key=record.key, stream=stream)
        except ImageServiceError:
            logger.exception(
                "Unable to download file",
                extra={"image_id": image_id, "key": record.key},
            )
            raise
        except Exception as exc:
            logger.exception(
                "Unable to download file",
                extra={"image_id": image_id, "key": record.key},
            )
            raise StorageError(
                message="Unable to download image",
                error_code=ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
                details={"image_id": image_id},
            ) from exc

        logger.info(
            "Successfully downloaded file",
            extra={"image_id": image_id, "size": written},
        )
        return record

    def get_record(self, image_id: str) -> ImageRecord:
        """Fetch the record for ``image_id``, wrapping unexpected failures."""
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
