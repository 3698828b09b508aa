"""
Concrete validation pipeline for a request payload.

Load spec (read, check, dereference) -> Resolve operation -> Load payload ->
Select schema -> Validate. Every step receives and returns a context dict;
expected failures are raised as ValidatorError subclasses.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema

from openapi_request_validator.config import settings
from openapi_request_validator.exceptions import (
    PayloadFileError,
    RequestBodyPolicyError,
    SchemaNotFoundError,
)
from openapi_request_validator.pipeline.runner import Pipeline
from openapi_request_validator.schemas.openapi import BODY_METHODS
from openapi_request_validator.schemas.results import Operation
from openapi_request_validator.services.resolver import find_operation
from openapi_request_validator.services.spec_loader import load_spec
from openapi_request_validator.services.validation import validate_against_schema

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Individual pipeline steps (each receives and returns a context dict)
# ---------------------------------------------------------------------------


def load_openapi_spec(context: dict[str, Any]) -> dict[str, Any]:
    """
    Read, check and dereference the spec. OpenAPI 3.1 schemas are
    JSON Schema 2020-12; older documents fall back to Draft 7.
    """
    spec = load_spec(context["spec_path"])
    if str(spec.get("openapi", "")).startswith("3.1."):
        default_validator = jsonschema.Draft202012Validator
    else:
        default_validator = jsonschema.Draft7Validator
    return {"spec": spec, "default_validator": default_validator}


def resolve_operation(context: dict[str, Any]) -> dict[str, Any]:
    operation = find_operation(
        context["spec"],
        context["endpoint_path"],
        context["method"],
        content_type=context.get("content_type", settings.REQUEST_CONTENT_TYPE),
    )
    logger.info("Resolved operation %s %s", operation.verb, operation.path)
    return {"operation": operation}


def load_payload(context: dict[str, Any]) -> dict[str, Any]:
    payload_path = context.get("payload_path")
    if not payload_path:
        return {"payload_given": False, "payload": None}

    path = Path(payload_path)
    try:
        with path.open(encoding="utf-8") as handle:
            payload = json.load(handle)
    except (OSError, UnicodeDecodeError) as exc:
        raise PayloadFileError(f"Could not read payload '{path}': {exc}") from exc
    except json.JSONDecodeError as exc:
        raise PayloadFileError(f"Payload '{path}' is not valid JSON: {exc}") from exc
    return {"payload_given": True, "payload": payload}


def select_schema(context: dict[str, Any]) -> dict[str, Any]:
    """
    Decide what to validate from the operation's request body and whether a
    payload was given. ``schema`` is None when no validation is needed.
    """
    operation: Operation = context["operation"]
    content_type = context.get("content_type", settings.REQUEST_CONTENT_TYPE)
    target = f"{operation.verb} {operation.path}"
    body = operation.request_body

    if context["payload_given"]:
        if body is None:
            raise RequestBodyPolicyError(
                f"Payload provided but {target} does not accept a request body"
            )
        schema = operation.body_schema(content_type)
        if schema is None:
            raise SchemaNotFoundError(f"No JSON schema found for request body of {target}")
        return {"schema": schema}

    if operation.method in BODY_METHODS and body is not None and body.required:
        raise RequestBodyPolicyError(f"Payload required for {target} but not provided")

    logger.info("No payload given for %s; skipping validation", target)
    return {"schema": None, "skip_message": f"No payload validation needed for {target}"}


def validate(context: dict[str, Any]) -> dict[str, Any]:
    schema = context.get("schema")
    if schema is None:
        return {"result": None}
    result = validate_against_schema(
        context["payload"],
        schema,
        default=context.get("default_validator", jsonschema.Draft7Validator),
    )
    logger.info("Validation: %s, %d error(s)", "valid" if result.valid else "invalid", len(result.errors))
    return {"result": result}


# ---------------------------------------------------------------------------
# Pipeline factories
# ---------------------------------------------------------------------------

def build_request_pipeline() -> Pipeline:
    """Construct the full request validation pipeline."""
    pipeline = Pipeline("request_validation")
    pipeline.add_step("load_spec", load_openapi_spec)
    pipeline.add_step("resolve_operation", resolve_operation)
    pipeline.add_step("load_payload", load_payload)
    pipeline.add_step("select_schema", select_schema)
    pipeline.add_step("validate", validate)
    return pipeline


def build_fixed_target_pipeline() -> Pipeline:
    """Same steps; the target operation comes from settings rather than argv."""
    pipeline = build_request_pipeline()
    pipeline.name = "fixed_target_validation"
    return pipeline


def fixed_target_context(spec_path: str, payload_path: str) -> dict[str, Any]:
    return {
        "spec_path": spec_path,
        "payload_path": payload_path,
        "endpoint_path": settings.DEFAULT_ENDPOINT_PATH,
        "method": settings.DEFAULT_HTTP_METHOD,
        "content_type": settings.REQUEST_CONTENT_TYPE,
    }
