"""
Command handler responsible for downloading an image to a local file.
"""

import argparse
import os
import stat
import tempfile
from pathlib import Path

from aws_lambda_powertools import Logger

from sim.core.models.context import CommandContext
from sim.core.utils.constants import SERVICE_NAME
from sim.core.utils.decorators import cli_command
from sim.core.utils.validators import validate_request

from .models import DownloadImageRequest, DownloadImageResponse
from .service import DownloadService

logger = Logger(service=SERVICE_NAME, child=True)


def _target_mode(destination: Path) -> int:
    """Mode the downloaded file should end up with.

    An existing file keeps its permissions; a new one gets what a plain
    create would give, 0o666 minus the umask.
    """
    if destination.exists():
        return stat.S_IMODE(destination.stat().st_mode)

    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


@cli_command
def handler(args: argparse.Namespace, context: CommandContext) -> int:
    """
    Handle the ``download`` command.

    The object is streamed into a temporary file next to the destination
    which replaces the destination only once the download completed, so a
    failed download never leaves a partial or truncated file behind.

    Args:
        args: Parsed flags with ``image_id`` and ``file``
        context: Repositories and output for this invocation

    Returns:
        Process exit code
    """
    logger.info(
        "Received image download command",
        extra={"image_id": args.image_id, "file_path": args.file},
    )

    request = validate_request(
        DownloadImageRequest,
        {"image_id": args.image_id, "file_path": args.file},
    )
    service = DownloadService(storage=context.storage, reader=context.metadata)

    destination = request.file_path
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{destination.name}.",
        suffix=".part",
        dir=destination.parent,
    )

    try:
        with os.fdopen(fd, "wb") as stream:
            record = service.download_image(image_id=request.image_id, stream=stream)
        os.chmod(tmp_name, _target_mode(destination))
        os.replace(tmp_name, destination)
    except BaseException:
        logger.debug("Removing partial download", extra={"tmp_file": tmp_name})
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    response = DownloadImageResponse(
        image_id=record.id,
        file_path=destination,
        size_in_bytes=destination.stat().st_size,
    )

    logger.debug(
        "Successfully downloaded image",
        extra={"image_id": response.image_id, "size": response.size_in_bytes},
    )
    return context.output.ok(response.message)
