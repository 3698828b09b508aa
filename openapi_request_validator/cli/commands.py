"""
Command-line surface: argument parsing, input policy and outcome reporting.

Two commands share the validation pipeline:
- validate-request <openapi-spec> <HTTP-verb> <endpoint-path> [payload-file]
- validate-payload <openapi-spec> <payload-file>  (configured default operation)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence
from urllib.parse import urljoin, urlsplit

from openapi_request_validator.exceptions import UsageError, ValidatorError
from openapi_request_validator.pipeline.runner import Pipeline
from openapi_request_validator.pipeline.validation import (
    build_fixed_target_pipeline,
    build_request_pipeline,
    fixed_target_context,
)
from openapi_request_validator.schemas.openapi import (
    PAYLOAD_FILE_EXTENSION,
    SPEC_FILE_EXTENSIONS,
    SUPPORTED_HTTP_VERBS,
)
from openapi_request_validator.services.reporter import ConsoleReporter

logger = logging.getLogger(__name__)

REQUEST_USAGE = "Usage: validate-request <openapi-spec> <HTTP-verb> <endpoint-path> [payload-file]"
PAYLOAD_USAGE = "Usage: validate-payload <openapi.yaml> <payload.json>"

REQUEST_HELP = """\
Parameters:
  openapi-spec: Path to OpenAPI specification file (YAML or JSON)
  HTTP-verb: HTTP method (GET, POST, PUT, PATCH, DELETE, HEAD)
  endpoint-path: API endpoint path with optional querystrings (e.g., /v1/orders?state=SP)
  payload-file: Path to JSON payload file (optional for GET/HEAD requests)

Examples:
  validate-request openapi.yaml POST /v1/orders payload.json
  validate-request openapi.yaml GET /v1/orders?state=SP"""


class _ArgumentParser(argparse.ArgumentParser):
    """Raises UsageError instead of exiting with argparse's status 2."""

    def error(self, message: str):
        raise UsageError(message)


def build_request_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="validate-request",
        usage=REQUEST_USAGE.removeprefix("Usage: "),
        description="Validate a JSON payload against an OpenAPI operation's request body.",
        epilog=REQUEST_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("spec_path", metavar="openapi-spec")
    parser.add_argument("http_verb", metavar="HTTP-verb")
    parser.add_argument("endpoint_path", metavar="endpoint-path")
    parser.add_argument("payload_path", metavar="payload-file", nargs="?")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def build_payload_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="validate-payload",
        usage=PAYLOAD_USAGE.removeprefix("Usage: "),
        description="Validate a JSON payload against the default OpenAPI operation.",
    )
    parser.add_argument("spec_path", metavar="openapi-spec")
    parser.add_argument("payload_path", metavar="payload-file")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def check_request_arguments(args: argparse.Namespace) -> None:
    """Input policy checks that run before the spec is touched."""
    if args.http_verb.upper() not in SUPPORTED_HTTP_VERBS:
        raise UsageError(f"HTTP verb must be one of: {', '.join(SUPPORTED_HTTP_VERBS)}")

    if not args.endpoint_path.startswith("/"):
        raise UsageError("Endpoint path must start with /")

    try:
        urlsplit(urljoin("http://example.com", args.endpoint_path))
    except ValueError:
        raise UsageError("Invalid endpoint path format") from None

    if Path(args.spec_path).suffix.lower() not in SPEC_FILE_EXTENSIONS:
        raise UsageError("OpenAPI spec file must be .yaml, .yml, or .json")

    if args.payload_path and Path(args.payload_path).suffix.lower() != PAYLOAD_FILE_EXTENSION:
        raise UsageError("Payload file must be .json")


def _enable_debug(verbose: bool) -> None:
    if verbose:
        logging.getLogger("openapi_request_validator").setLevel(logging.DEBUG)


def run_pipeline(
    pipeline: Pipeline, context: dict[str, Any], reporter: ConsoleReporter
) -> int:
    """Run a validation pipeline and report its outcome; returns the exit code."""
    summary = pipeline.run(context)
    logger.debug("Pipeline summary: %s", summary)

    failed = pipeline.failure
    if failed is not None:
        if isinstance(failed.error, ValidatorError):
            reporter.failure(str(failed.error))
        else:
            logger.debug("Unexpected failure in step '%s'", failed.name, exc_info=failed.error)
            reporter.unexpected(failed.error)
        return 1

    result = pipeline.context.get("result")
    if result is None:
        reporter.success(pipeline.context["skip_message"])
        return 0

    reporter.validation_result(result)
    return 0 if result.valid else 1


def run_request_validation(
    argv: Sequence[str] | None = None, reporter: ConsoleReporter | None = None
) -> int:
    reporter = reporter or ConsoleReporter()
    parser = build_request_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        print(parser.format_help(), file=sys.stdout)
        print(f"Error: {exc}", file=sys.stdout)
        return 1

    try:
        check_request_arguments(args)
    except UsageError as exc:
        print(REQUEST_USAGE, file=sys.stdout)
        print("", file=sys.stdout)
        print(f"Error: {exc}", file=sys.stdout)
        return 1

    _enable_debug(args.verbose)
    context = {
        "spec_path": args.spec_path,
        "method": args.http_verb,
        "endpoint_path": args.endpoint_path,
        "payload_path": args.payload_path,
    }
    return run_pipeline(build_request_pipeline(), context, reporter)


def run_fixed_target_validation(
    argv: Sequence[str] | None = None, reporter: ConsoleReporter | None = None
) -> int:
    reporter = reporter or ConsoleReporter()
    try:
        args = build_payload_parser().parse_args(argv)
    except UsageError:
        print(PAYLOAD_USAGE, file=sys.stderr)
        return 1

    _enable_debug(args.verbose)
    context = fixed_target_context(args.spec_path, args.payload_path)
    return run_pipeline(build_fixed_target_pipeline(), context, reporter)
