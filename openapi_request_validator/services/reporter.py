"""Console output for validation outcomes, colored with colorama."""

from __future__ import annotations

import json
import sys
from typing import Any, TextIO

from colorama import Fore, Style

from openapi_request_validator.config import settings
from openapi_request_validator.schemas.results import ErrorRecord, ValidationResult

ONE_OF_HINT = "This object didn't match any of the expected schemas"


def _format_value(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


class ConsoleReporter:
    """
    Writes success lines to stdout and failures to stderr.
    Per-error detail goes to stdout, after the stderr header.
    """

    def __init__(
        self,
        out: TextIO | None = None,
        err: TextIO | None = None,
        color: bool | None = None,
    ):
        self._out = out
        self._err = err
        self._color = color

    @property
    def out(self) -> TextIO:
        return self._out or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err or sys.stderr

    def _paint(self, text: str, fore: str, stream: TextIO) -> str:
        color = self._color
        if color is None:
            color = not settings.NO_COLOR and stream.isatty()
        return f"{fore}{text}{Style.RESET_ALL}" if color else text

    def success(self, message: str) -> None:
        print(self._paint(f"✅ {message}", Fore.GREEN, self.out), file=self.out)

    def failure(self, message: str) -> None:
        print(self._paint(f"❌ {message}", Fore.RED, self.err), file=self.err)

    def unexpected(self, exc: BaseException) -> None:
        print(f"🚨 Unexpected error: {exc!r}", file=self.err)

    def validation_result(self, result: ValidationResult) -> None:
        if result.valid:
            self.success("Payload is valid!")
            return
        self.failure("Payload validation errors:\n")
        for index, error in enumerate(result.errors, start=1):
            self.error_record(index, error)

    def error_record(self, index: int, error: ErrorRecord) -> None:
        out = self.out
        print(
            f"{self._paint(f'#{index}', Fore.YELLOW, out)} "
            f"{self._paint(error.display_path, Fore.CYAN, out)}: "
            f"{self._paint(error.message, Fore.RED, out)}",
            file=out,
        )
        for hint in self.hints(error):
            print(f"   → {hint}", file=out)
        print("", file=out)

    def hints(self, error: ErrorRecord) -> list[str]:
        """Keyword-specific follow-up lines for an error."""
        out = self.out
        if error.keyword == "enum":
            allowed = ", ".join(_format_value(v) for v in error.params.get("allowed_values", []))
            return [f"Allowed values: {self._paint(allowed, Fore.MAGENTA, out)}"]
        if error.keyword == "required":
            missing = str(error.params.get("missing_property"))
            return [f"Missing property: {self._paint(missing, Fore.MAGENTA, out)}"]
        if error.keyword == "oneOf":
            return [ONE_OF_HINT]
        return []
