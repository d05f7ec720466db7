"""
Business logic for image listing.
"""

from aws_lambda_powertools import Logger

from sim.core.models.errors import (
    ImageServiceError,
    MetadataOperationFailedError,
    RecordNotFoundError,
)
from sim.core.models.image import ImageSummary
from sim.core.repositories.metadata_repository import ImageRecordReader
from sim.core.utils.constants import ERROR_CODE_METADATA_LIST_FAILED, SERVICE_NAME
from sim.core.utils.validators import require_dependencies

logger = Logger(service=SERVICE_NAME, child=True)


class ListService:
    """Application service responsible for listing images.

    Records are read from the metadata store and projected to the
    summary view; storage is never touched.
    """

    def __init__(self, *, reader: ImageRecordReader | None) -> None:
        require_dependencies(reader=reader)
        self.reader: ImageRecordReader = reader

    def list_images(self) -> list[ImageSummary]:
        """List every known image.

        Raises:
            RecordNotFoundError: If the store holds no records
            MetadataOperationFailedError: If the listing fails
        """
        try:
            records = self.reader.list_records()
        except RecordNotFoundError:
            logger.debug("No image records found")
            raise
        except ImageServiceError:
            logger.exception("Unable to list records")
            raise
        except Exception as exc:
            logger.exception("Unable to list records")
            raise MetadataOperationFailedError(
                message="Unable to list image records",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
            ) from exc

        return [record.to_summary() for record in records]
