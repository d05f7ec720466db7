"""
Command handler responsible for deleting an image and its record.
"""

import argparse

from aws_lambda_powertools import Logger

from sim.core.models.context import CommandContext
from sim.core.utils.constants import SERVICE_NAME
from sim.core.utils.decorators import cli_command
from sim.core.utils.validators import validate_request

from .models import DeleteImageRequest, DeleteImageResponse
from .service import DeleteService

logger = Logger(service=SERVICE_NAME, child=True)


@cli_command
def handler(args: argparse.Namespace, context: CommandContext) -> int:
    """Handle the ``delete`` command."""
    logger.info("Received image delete command", extra={"image_id": args.image_id})

    request = validate_request(DeleteImageRequest, {"image_id": args.image_id})
    service = DeleteService(
        storage=context.storage,
        reader=context.metadata,
        writer=context.metadata,
    )

    result = service.delete_image(request.image_id)
    response = DeleteImageResponse(**result)

    logger.debug("Image deleted", extra={"image_id": response.image_id, "key": response.key})
    return context.output.ok(response.message)
