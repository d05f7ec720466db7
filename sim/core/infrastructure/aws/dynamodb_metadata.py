"""DynamoDB-backed implementation of ImageMetadataRepository."""

from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError
from pydantic import ValidationError as PydanticValidationError

from sim.core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapterProtocol
from sim.core.models.errors import (
    DuplicateImageError,
    MetadataOperationFailedError,
    RecordNotFoundError,
)
from sim.core.models.image import ImageRecord
from sim.core.repositories.metadata_repository import ImageMetadataRepository
from sim.core.utils.constants import (
    ERROR_CODE_METADATA_CREATE_FAILED,
    ERROR_CODE_METADATA_DELETE_FAILED,
    ERROR_CODE_METADATA_FETCH_FAILED,
    ERROR_CODE_METADATA_INVALID_FORMAT,
    ERROR_CODE_METADATA_LIST_FAILED,
    RECORD_PARTITION_KEY,
    SERVICE_NAME,
)

logger = Logger(service=SERVICE_NAME, child=True)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


def _is_conditional_failure(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED


def _to_record(item: Any, *, image_id: str | None = None) -> ImageRecord:
    try:
        return ImageRecord.model_validate(item)
    except PydanticValidationError as exc:
        logger.error("Stored item is not a valid image record", extra={"image_id": image_id})
        raise MetadataOperationFailedError(
            message="Invalid image metadata format",
            error_code=ERROR_CODE_METADATA_INVALID_FORMAT,
            details={"image_id": image_id},
        ) from exc


class DynamoDBMetadata(ImageMetadataRepository):
    """DynamoDB-backed metadata storage with error handling.

    All boto3 errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol) -> None:
        """Initialize with DynamoDB adapter."""
        self._db = adapter

    def create_record(self, *, record: ImageRecord) -> None:
        """Insert the record unless one with the same id exists.

        Raises:
            DuplicateImageError: If a record with the id already exists
            MetadataOperationFailedError: If creation fails
        """
        logger.debug("Creating record", extra={"image_id": record.id, "key": record.key})

        try:
            self._db.put_item(
                item=record.model_dump(),
                condition_expression=f"attribute_not_exists({RECORD_PARTITION_KEY})",
            )
            logger.info(
                "Record created",
                extra={"image_id": record.id, "key": record.key, "storage": record.storage},
            )

        except ClientError as exc:
            logger.error("DynamoDB put_item failed", extra={"image_id": record.id})

            if _is_conditional_failure(exc):
                raise DuplicateImageError(
                    message="An image record with this id already exists",
                    details={"image_id": record.id},
                ) from exc

            raise MetadataOperationFailedError(
                message="Unable to save image record at this time",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"image_id": record.id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error creating record")
            raise MetadataOperationFailedError(
                message="Unable to save image record at this time",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"image_id": record.id},
            ) from exc

    def get_record(self, *, image_id: str) -> ImageRecord:
        """Fetch a single record by id.

        Raises:
            RecordNotFoundError: If no item exists
            MetadataOperationFailedError: If fetch fails
        """
        logger.debug("Fetching record", extra={"image_id": image_id})

        try:
            response = self._db.get_item(key={RECORD_PARTITION_KEY: image_id})

        except ClientError as exc:
            logger.error("DynamoDB get_item failed", extra={"image_id": image_id})
            raise MetadataOperationFailedError(
                message="Unable to retrieve image record",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_id": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error fetching record")
            raise MetadataOperationFailedError(
                message="Unable to retrieve image record",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_id": image_id},
            ) from exc

        item = response.get("Item")
        if item is None:
            logger.warning("Record not found", extra={"image_id": image_id})
            raise RecordNotFoundError(details={"image_id": image_id})

        return _to_record(item, image_id=image_id)

    def list_records(self) -> list[ImageRecord]:
        """Scan the whole table.

        NOTE:
        - A scan reads every item and can be slow on large tables.
        - Pages are followed through LastEvaluatedKey.
        """
        logger.debug("Listing records")

        items: list[dict[str, Any]] = []
        scan_kwargs: dict[str, Any] = {}

        try:
            while True:
                response = self._db.scan(**scan_kwargs)
                page_items = response.get("Items", [])

                if not isinstance(page_items, list):
                    raise MetadataOperationFailedError(
                        message="Invalid scan response from DynamoDB",
                        error_code=ERROR_CODE_METADATA_LIST_FAILED,
                    )

                items.extend(page_items)

                last_evaluated_key = response.get("LastEvaluatedKey")
                if not last_evaluated_key:
                    break

                scan_kwargs["ExclusiveStartKey"] = last_evaluated_key

        except MetadataOperationFailedError:
            raise

        except ClientError as exc:
            logger.error("DynamoDB scan failed")
            raise MetadataOperationFailedError(
                message="Unable to list image records",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error listing records")
            raise MetadataOperationFailedError(
                message="Unable to list image records",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
            ) from exc

        if not items:
            raise RecordNotFoundError()

        records = [_to_record(item, image_id=item.get(RECORD_PARTITION_KEY)) for item in items]
        logger.info("Records listed", extra={"count": len(records)})

        return records

    def delete_record(self, *, image_id: str) -> None:
        """Remove a record.

        Raises:
            RecordNotFoundError: If no item exists
            MetadataOperationFailedError: If deletion fails
        """
        logger.debug("Removing record", extra={"image_id": image_id})

        try:
            self._db.delete_item(
                key={RECORD_PARTITION_KEY: image_id},
                condition_expression=f"attribute_exists({RECORD_PARTITION_KEY})",
            )
            logger.info("Record removed", extra={"image_id": image_id})

        except ClientError as exc:
            if _is_conditional_failure(exc):
                logger.warning("Record not found on delete", extra={"image_id": image_id})
                raise RecordNotFoundError(details={"image_id": image_id}) from exc

            logger.error("DynamoDB delete_item failed", extra={"image_id": image_id})
            raise MetadataOperationFailedError(
                message="Unable to delete image record",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error removing record")
            raise MetadataOperationFailedError(
                message="Unable to delete image record",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc
