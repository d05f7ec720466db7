"""Structured logging setup for the CLI.

Modules create child loggers with ``Logger(service=SERVICE_NAME, child=True)``;
the parent logger configured here owns the handler and the JSON formatter.
Records go to stderr so stdout stays reserved for command output.
"""

import logging
import sys

from aws_lambda_powertools import Logger

from sim.core.models.config import AppConfig
from sim.core.utils.constants import DEFAULT_LOG_LEVEL, SERVICE_NAME

logger = Logger(
    service=SERVICE_NAME,
    level=DEFAULT_LOG_LEVEL,
    logger_handler=logging.StreamHandler(sys.stderr),
    UTC=True,
)


def configure_logging(config: AppConfig) -> Logger:
    """Apply the config's level and context keys to the parent ``sim`` logger."""
    logger.setLevel(config.effective_log_level)
    logger.append_keys(metadata_backend=config.metadata_backend, storage=config.storage)
    return logger
