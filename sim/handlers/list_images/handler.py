"""
Command handler responsible for listing known images.
"""

import argparse

from aws_lambda_powertools import Logger

from sim.core.models.context import CommandContext
from sim.core.models.errors import RecordNotFoundError
from sim.core.utils.constants import SERVICE_NAME
from sim.core.utils.decorators import cli_command

from .service import ListService

logger = Logger(service=SERVICE_NAME, child=True)


@cli_command
def handler(args: argparse.Namespace, context: CommandContext) -> int:
    """
    Handle the ``list`` command.

    Prints the summary of every image as an indented JSON array. An empty
    metadata store prints ``[]``.
    """
    logger.info("Received image list command")

    service = ListService(reader=context.metadata)

    try:
        images = service.list_images()
    except RecordNotFoundError:
        return context.output.json([])

    logger.debug("Images listed", extra={"count": len(images)})
    return context.output.json([image.model_dump() for image in images])
