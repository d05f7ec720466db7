"""
Command handler responsible for image upload and record creation.
"""

import argparse

from aws_lambda_powertools import Logger

from sim.core.models.context import CommandContext
from sim.core.utils.constants import SERVICE_NAME, format_file_size
from sim.core.utils.decorators import cli_command
from sim.core.utils.validators import validate_request

from .models import UploadImageRequest, UploadImageResponse
from .service import UploadService

logger = Logger(service=SERVICE_NAME, child=True)


@cli_command
def handler(args: argparse.Namespace, context: CommandContext) -> int:
    """
    Handle the ``upload`` command.

    The handler validates the flags, streams the file to object storage
    through the upload service and prints the id of the new image.

    Args:
        args: Parsed flags with ``file`` and ``name``
        context: Repositories and output for this invocation

    Returns:
        Process exit code
    """
    logger.info(
        "Received image upload command",
        extra={"file_path": args.file, "image_name": args.name},
    )

    request = validate_request(
        UploadImageRequest,
        {"file_path": args.file, "name": args.name},
    )
    service = UploadService(storage=context.storage, writer=context.metadata)

    with request.file_path.open("rb") as body:
        record = service.upload_image(name=request.name, body=body)

    response = UploadImageResponse(
        image_id=record.id,
        name=record.name,
        key=record.key,
        size_in_bytes=record.size_in_bytes,
    )

    logger.debug(
        "Successfully uploaded image",
        extra={"image_id": response.image_id, "size": format_file_size(response.size_in_bytes)},
    )
    return context.output.ok(response.message)
