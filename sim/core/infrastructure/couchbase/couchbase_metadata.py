"""Couchbase-backed implementation of ImageMetadataRepository."""

from typing import Any

from aws_lambda_powertools import Logger
from couchbase.exceptions import (
    CouchbaseException,
    DocumentExistsException,
    DocumentNotFoundException,
)
from pydantic import ValidationError as PydanticValidationError

from sim.core.infrastructure.adapters.couchbase_adapter import CouchbaseAdapterProtocol
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
    SERVICE_NAME,
)

logger = Logger(service=SERVICE_NAME, child=True)


def _to_record(document: Any, *, image_id: str | None = None) -> ImageRecord:
    try:
        return ImageRecord.model_validate(document)
    except PydanticValidationError as exc:
        logger.error("Stored document is not a valid image record", extra={"image_id": image_id})
        raise MetadataOperationFailedError(
            message="Invalid image metadata format",
            error_code=ERROR_CODE_METADATA_INVALID_FORMAT,
            details={"image_id": image_id},
        ) from exc


class CouchbaseMetadata(ImageMetadataRepository):
    """Couchbase-backed metadata storage.

    Records are JSON documents keyed by image id in a single collection.
    Couchbase SDK errors are translated into the same domain errors the
    DynamoDB backend raises.
    """

    def __init__(self, adapter: CouchbaseAdapterProtocol) -> None:
        self._db = adapter

    def create_record(self, *, record: ImageRecord) -> None:
        logger.debug("Creating record", extra={"image_id": record.id, "key": record.key})

        try:
            self._db.insert(key=record.id, document=record.model_dump())
            logger.info(
                "Record created",
                extra={"image_id": record.id, "key": record.key, "storage": record.storage},
            )

        except DocumentExistsException as exc:
            logger.error("Record already exists", extra={"image_id": record.id})
            raise DuplicateImageError(
                message="An image record with this id already exists",
                details={"image_id": record.id},
            ) from exc

        except CouchbaseException as exc:
            logger.error("Couchbase insert failed", extra={"image_id": record.id})
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
        logger.debug("Fetching record", extra={"image_id": image_id})

        try:
            document = self._db.get(key=image_id)

        except DocumentNotFoundException as exc:
            logger.warning("Record not found", extra={"image_id": image_id})
            raise RecordNotFoundError(details={"image_id": image_id}) from exc

        except CouchbaseException as exc:
            logger.error("Couchbase get failed", extra={"image_id": image_id})
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

        return _to_record(document, image_id=image_id)

    def list_records(self) -> list[ImageRecord]:
        """Query every document in the records collection.

        This performs a full collection query which needs a primary index
        and can be slow with many documents.
        """
        statement = f"SELECT r.* FROM {self._db.keyspace} AS r"
        logger.debug("Listing records", extra={"statement": statement})

        try:
            rows = self._db.query(statement)

        except CouchbaseException as exc:
            logger.error("Couchbase query failed")
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

        if not rows:
            raise RecordNotFoundError()

        records = [_to_record(row, image_id=row.get("id")) for row in rows]
        logger.info("Records listed", extra={"count": len(records)})

        return records

    def delete_record(self, *, image_id: str) -> None:
        logger.debug("Removing record", extra={"image_id": image_id})

        try:
            self._db.remove(key=image_id)
            logger.info("Record removed", extra={"image_id": image_id})

        except DocumentNotFoundException as exc:
            logger.warning("Record not found on delete", extra={"image_id": image_id})
            raise RecordNotFoundError(details={"image_id": image_id}) from exc

        except CouchbaseException as exc:
            logger.error("Couchbase remove failed", extra={"image_id": image_id})
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
