"""Shared boto3 client/resource configuration."""

from typing import Any

from botocore.config import Config

from sim.core.models.config import AppConfig
from sim.core.utils.constants import (
    LOCALSTACK_ACCESS_KEY_ID,
    LOCALSTACK_SECRET_ACCESS_KEY,
)


def boto3_kwargs(config: AppConfig) -> dict[str, Any]:
    """Return keyword arguments for ``boto3.client`` / ``boto3.resource``.

    When a LocalStack URL is configured every AWS call is routed to it, S3 uses
    path-style addressing and static credentials are used.
    """
    kwargs: dict[str, Any] = {"region_name": config.region}

    if config.localstack_url:
        kwargs.update(
            endpoint_url=config.localstack_url,
            aws_access_key_id=LOCALSTACK_ACCESS_KEY_ID,
            aws_secret_access_key=LOCALSTACK_SECRET_ACCESS_KEY,
            config=Config(s3={"addressing_style": "path"}),
        )

    return kwargs
