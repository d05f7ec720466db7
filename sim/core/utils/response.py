"""
Centralized terminal output for CLI commands.
"""

from __future__ import annotations

import json
import sys
from typing import Any, TextIO

EXIT_OK = 0
EXIT_FAILURE = 1

JsonValue = dict[str, Any] | list[Any]


class ResponseBuilder:
    """Writes command results to stdout and errors to stderr.

    Every method returns the process exit code for the outcome it reports.
    """

    def __init__(self, stdout: TextIO | None = None, stderr: TextIO | None = None) -> None:
        self._stdout = stdout
        self._stderr = stderr

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr or sys.stderr

    def ok(self, message: str) -> int:
        print(message, file=self.stdout)
        return EXIT_OK

    def json(self, payload: JsonValue) -> int:
        print(json.dumps(payload, indent=1), file=self.stdout)
        return EXIT_OK

    def error(
        self,
        message: str,
        *,
        error_code: str | None = None,
        details: list[dict[str, str]] | None = None,
    ) -> int:
        line = f"error: {message}"
        if error_code:
            line = f"{line} [{error_code}]"

        print(line, file=self.stderr)

        for detail in details or []:
            print(f"  {detail['field']}: {detail['message']}", file=self.stderr)

        return EXIT_FAILURE
