"""CLI entry point for sim: a simple image manager."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Mapping

from aws_lambda_powertools import Logger

from sim import __version__
from sim.core.infrastructure.factory import build_metadata, build_storage
from sim.core.models.config import AppConfig
from sim.core.models.context import CommandContext
from sim.core.models.errors import ImageServiceError
from sim.core.utils.constants import ERROR_CODE_CONFIGURATION, SERVICE_NAME
from sim.core.utils.logging_config import configure_logging
from sim.core.utils.response import ResponseBuilder
from sim.handlers.delete_image.handler import handler as delete_handler
from sim.handlers.download_image.handler import handler as download_handler
from sim.handlers.list_images.handler import handler as list_handler
from sim.handlers.upload_image.handler import handler as upload_handler

logger = Logger(service=SERVICE_NAME, child=True)


def _add_image_id(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument(
        "--image-id", "--imageId",
        dest="image_id", required=True,
        help=help_text,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sim",
        description="A CLI for managing image files in cloud storage.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Delete subcommand
    delete_parser = subparsers.add_parser("delete", help="Delete the image.")
    _add_image_id(delete_parser, "Id of the image to delete (required)")
    delete_parser.set_defaults(handler=delete_handler)

    # Download subcommand
    download_parser = subparsers.add_parser(
        "download", help="Download the image to the specified file path."
    )
    download_parser.add_argument(
        "-f", "--file", required=True,
        help="Path to download the file into (required)",
    )
    _add_image_id(download_parser, "Id of the image to download (required)")
    download_parser.set_defaults(handler=download_handler)

    # List subcommand
    list_parser = subparsers.add_parser("list", help="List all images")
    list_parser.set_defaults(handler=list_handler)

    # Upload subcommand
    upload_parser = subparsers.add_parser("upload", help="Upload an image")
    upload_parser.add_argument(
        "-f", "--file", required=True,
        help="Path to the image file (required)",
    )
    upload_parser.add_argument(
        "-n", "--name", required=True,
        help="Name for the image (required)",
    )
    upload_parser.set_defaults(handler=upload_handler)

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def build_context(config: AppConfig, output: ResponseBuilder | None = None) -> CommandContext:
    """Wire the storage and metadata repositories for one invocation."""
    return CommandContext(
        config=config,
        storage=build_storage(config),
        metadata=build_metadata(config),
        output=output or ResponseBuilder(),
    )


def main(argv: list[str] | None = None, environ: Mapping[str, str] | None = None) -> int:
    args = parse_args(argv)
    output = ResponseBuilder()

    try:
        config = AppConfig.from_env(environ)
    except ImageServiceError as exc:
        return output.error(f"unable to get config: {exc.message}", error_code=exc.error_code)

    configure_logging(config)
    logger.debug("Running command", extra={"command": args.command})

    try:
        context = build_context(config, output)
    except ImageServiceError as exc:
        logger.exception("Unable to initialize repositories")
        return output.error(exc.message, error_code=exc.error_code)
    except Exception as exc:
        logger.exception("Unable to initialize repositories")
        return output.error(
            f"unable to initialize repositories: {exc}",
            error_code=ERROR_CODE_CONFIGURATION,
        )

    return args.handler(args, context)


if __name__ == "__main__":
    sys.exit(main())
