"""
Common decorators and helpers for CLI command handlers.
"""

from __future__ import annotations

import argparse
import traceback
from collections.abc import Callable
from functools import wraps
from typing import Any, Protocol

from aws_lambda_powertools import Logger
from pydantic import ValidationError as PydanticValidationError

from sim.core.models.context import CommandContext
from sim.core.models.errors import ImageServiceError, NotFoundError
from sim.core.utils.constants import ERROR_CODE_INTERNAL_ERROR, ERROR_CODE_VALIDATION_FAILED, SERVICE_NAME
from sim.core.utils.validators import sanitize_validation_errors

logger = Logger(service=SERVICE_NAME, child=True)


class CommandHandlerProtocol(Protocol):
    """Protocol for CLI command handler functions."""

    def __call__(self, args: argparse.Namespace, context: CommandContext) -> int: ...


def _get_user_friendly_message(exc: Exception) -> str:
    """
    Convert OS-level exception messages into user-friendly ones.
    """
    if isinstance(exc, FileNotFoundError):
        return f"File not found: {exc.filename}"

    if isinstance(exc, IsADirectoryError):
        return f"Expected a file but found a directory: {exc.filename}"

    if isinstance(exc, PermissionError):
        return f"Permission denied: {exc.filename}"

    if isinstance(exc, (ConnectionError, TimeoutError)):
        return "Unable to connect to required services. Please try again later."

    return f"Unable to access file: {exc}"


def _log_error(
    message: str,
    *,
    handler_name: str,
    exc: Exception,
    level: str = "warning",
    **extra: Any,
) -> None:
    """
    Log error with consistent structure and full context.

    Args:
        message: Log message
        handler_name: Name of the handler function
        exc: Exception that was raised
        level: Log level ('warning' or 'exception')
    """
    log_extra = {
        "handler": handler_name,
        "error": str(exc),
        "error_type": type(exc).__name__,
        **extra,
    }

    if level == "exception":
        # logger.exception automatically includes traceback
        logger.exception(message, extra=log_extra)
    else:
        log_extra["traceback"] = traceback.format_exc()
        logger.warning(message, extra=log_extra)


def cli_command(
    func: Callable[[argparse.Namespace, CommandContext], int],
) -> CommandHandlerProtocol:
    """
    Decorator for CLI command handlers.

    Provides:
    - Centralized exception handling and exit codes
    - Structured logging of failures
    - User-friendly error messages on stderr

    Example:
        @cli_command
        def handler(args, context):
            return context.output.ok("done")
    """

    @wraps(func)
    def wrapper(args: argparse.Namespace, context: CommandContext) -> int:
        handler_name = getattr(args, "command", None) or func.__module__

        try:
            return func(args, context)

        # Invalid flags
        except PydanticValidationError as exc:
            _log_error(
                "Command validation failed",
                handler_name=handler_name,
                exc=exc,
            )
            return context.output.error(
                "Invalid command arguments",
                error_code=ERROR_CODE_VALIDATION_FAILED,
                details=sanitize_validation_errors(list(exc.errors())),
            )

        # Missing records or objects
        except NotFoundError as exc:
            _log_error(
                "Resource not found",
                handler_name=handler_name,
                exc=exc,
                details=exc.details,
            )
            return context.output.error(exc.message, error_code=exc.error_code)

        # Domain errors already carry a stable message and code
        except ImageServiceError as exc:
            _log_error(
                "Command failed",
                handler_name=handler_name,
                exc=exc,
                level="exception",
                details=exc.details,
            )
            return context.output.error(exc.message, error_code=exc.error_code)

        # Local file system and network issues
        except OSError as exc:
            _log_error(
                "I/O error in handler",
                handler_name=handler_name,
                exc=exc,
                level="exception",
            )
            return context.output.error(_get_user_friendly_message(exc))

        # Catch-all for unexpected errors
        except Exception as exc:
            _log_error(
                "Unexpected error in handler",
                handler_name=handler_name,
                exc=exc,
                level="exception",
            )
            return context.output.error(
                f"Unexpected error: {exc}",
                error_code=ERROR_CODE_INTERNAL_ERROR,
            )

    return wrapper
