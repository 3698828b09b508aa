"""
Console entrypoints.

Installed as:
  validate-request  <openapi-spec> <HTTP-verb> <endpoint-path> [payload-file]
  validate-payload  <openapi-spec> <payload-file>
"""

import logging

from colorama import just_fix_windows_console

from openapi_request_validator.cli.commands import (
    run_fixed_target_validation,
    run_request_validation,
)
from openapi_request_validator.config import settings
from openapi_request_validator.services.reporter import ConsoleReporter

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.WARNING),
    format="%(levelname)s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


def _guarded(command, argv) -> int:
    just_fix_windows_console()
    reporter = ConsoleReporter()
    try:
        return command(argv, reporter)
    except Exception as exc:
        logger.debug("Unhandled error", exc_info=exc)
        reporter.unexpected(exc)
        return 1


def validate_request(argv=None) -> int:
    return _guarded(run_request_validation, argv)


def validate_payload(argv=None) -> int:
    return _guarded(run_fixed_target_validation, argv)
