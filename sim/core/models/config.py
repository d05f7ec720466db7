"""Application configuration loaded from environment variables."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, StrictBool, StrictStr

from sim.core.models.errors import ConfigurationError
from sim.core.utils.constants import (
    COUCHBASE_DEFAULT_COLLECTION,
    COUCHBASE_DEFAULT_SCOPE,
    DEFAULT_LOG_LEVEL,
    ENV_COUCHBASE_BUCKET,
    ENV_COUCHBASE_COLLECTION,
    ENV_COUCHBASE_ENDPOINT,
    ENV_COUCHBASE_PASSWORD,
    ENV_COUCHBASE_SCOPE,
    ENV_COUCHBASE_USERNAME,
    ENV_DEBUG,
    ENV_LOCALSTACK_URL,
    ENV_LOG_LEVEL,
    ENV_METADATA_BACKEND,
    ENV_REGION,
    ENV_STORAGE,
    ENV_TABLE_NAME,
    METADATA_BACKEND_COUCHBASE,
    METADATA_BACKEND_DYNAMODB,
    METADATA_BACKENDS,
)

_TRUTHY = {"1", "true", "yes", "on"}


class CouchbaseConfig(BaseModel):
    """Connection settings for the Couchbase metadata backend."""

    endpoint: StrictStr
    username: StrictStr
    password: StrictStr = Field(..., repr=False)
    bucket: StrictStr
    scope: StrictStr = COUCHBASE_DEFAULT_SCOPE
    collection: StrictStr = COUCHBASE_DEFAULT_COLLECTION


class AppConfig(BaseModel):
    """Validated runtime configuration for a single CLI invocation."""

    debug: StrictBool = False
    log_level: StrictStr = DEFAULT_LOG_LEVEL
    localstack_url: StrictStr | None = None
    region: StrictStr
    storage: StrictStr = Field(..., description="S3 bucket holding the image objects")
    metadata_backend: StrictStr = METADATA_BACKEND_DYNAMODB
    table_name: StrictStr | None = None
    couchbase: CouchbaseConfig | None = None

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level.upper()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppConfig":
        """Build the configuration from environment variables.

        Every missing required variable is reported at once.

        Raises:
            ConfigurationError: If required variables are missing or the
                metadata backend is unknown
        """
        env = os.environ if environ is None else environ

        def read(name: str) -> str | None:
            value = env.get(name)
            if value is None or not value.strip():
                return None
            return value.strip()

        backend = (read(ENV_METADATA_BACKEND) or METADATA_BACKEND_DYNAMODB).lower()
        if backend not in METADATA_BACKENDS:
            raise ConfigurationError(
                message=(
                    f"Unknown metadata backend '{backend}'. "
                    f"Allowed backends: {', '.join(sorted(METADATA_BACKENDS))}"
                ),
                details={"metadata_backend": backend},
            )

        required = [ENV_REGION, ENV_STORAGE]
        if backend == METADATA_BACKEND_DYNAMODB:
            required.append(ENV_TABLE_NAME)
        else:
            required.extend(
                [
                    ENV_COUCHBASE_ENDPOINT,
                    ENV_COUCHBASE_USERNAME,
                    ENV_COUCHBASE_PASSWORD,
                    ENV_COUCHBASE_BUCKET,
                ]
            )

        missing = [name for name in required if read(name) is None]
        if missing:
            raise ConfigurationError(
                message=f"Missing required environment variables: {', '.join(missing)}",
                details={"missing": missing},
            )

        couchbase: CouchbaseConfig | None = None
        if backend == METADATA_BACKEND_COUCHBASE:
            couchbase = CouchbaseConfig(
                endpoint=read(ENV_COUCHBASE_ENDPOINT),
                username=read(ENV_COUCHBASE_USERNAME),
                password=read(ENV_COUCHBASE_PASSWORD),
                bucket=read(ENV_COUCHBASE_BUCKET),
                scope=read(ENV_COUCHBASE_SCOPE) or COUCHBASE_DEFAULT_SCOPE,
                collection=read(ENV_COUCHBASE_COLLECTION) or COUCHBASE_DEFAULT_COLLECTION,
            )

        return cls(
            debug=(read(ENV_DEBUG) or "false").lower() in _TRUTHY,
            log_level=read(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL,
            localstack_url=read(ENV_LOCALSTACK_URL),
            region=read(ENV_REGION),
            storage=read(ENV_STORAGE),
            metadata_backend=backend,
            table_name=read(ENV_TABLE_NAME),
            couchbase=couchbase,
        )
