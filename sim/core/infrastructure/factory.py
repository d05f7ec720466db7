"""Builds storage and metadata repositories from the application configuration."""

from aws_lambda_powertools import Logger

from sim.core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter
from sim.core.infrastructure.adapters.s3_adapter import S3Adapter
from sim.core.infrastructure.aws.dynamodb_metadata import DynamoDBMetadata
from sim.core.infrastructure.aws.s3_image_storage import S3ImageStorage
from sim.core.models.config import AppConfig
from sim.core.models.errors import ConfigurationError
from sim.core.repositories.metadata_repository import ImageMetadataRepository
from sim.core.repositories.storage_repository import ImageStorageRepository
from sim.core.utils.constants import (
    METADATA_BACKEND_COUCHBASE,
    METADATA_BACKEND_DYNAMODB,
    SERVICE_NAME,
)

logger = Logger(service=SERVICE_NAME, child=True)


def build_storage(config: AppConfig) -> ImageStorageRepository:
    return S3ImageStorage(S3Adapter(config))


def build_metadata(config: AppConfig) -> ImageMetadataRepository:
    """Return the metadata repository selected by ``config.metadata_backend``."""
    logger.debug("Building metadata repository", extra={"backend": config.metadata_backend})

    if config.metadata_backend == METADATA_BACKEND_DYNAMODB:
        return DynamoDBMetadata(DynamoDBAdapter(config))

    if config.metadata_backend == METADATA_BACKEND_COUCHBASE:
        if config.couchbase is None:
            raise ConfigurationError(message="Couchbase connection settings are missing")

        # couchbase is only imported when this backend is selected
        from sim.core.infrastructure.adapters.couchbase_adapter import CouchbaseAdapter
        from sim.core.infrastructure.couchbase.couchbase_metadata import CouchbaseMetadata

        return CouchbaseMetadata(CouchbaseAdapter(config.couchbase))

    raise ConfigurationError(
        message=f"Unknown metadata backend '{config.metadata_backend}'",
        details={"metadata_backend": config.metadata_backend},
    )
