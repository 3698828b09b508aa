"""Locate an operation and its request body in a dereferenced spec."""

from __future__ import annotations

import logging
import re
from typing import Any

from openapi_request_validator.exceptions import OperationNotFoundError, SpecFileError
from openapi_request_validator.schemas.openapi import PATH_PARAMETER_PATTERN
from openapi_request_validator.schemas.results import Operation, RequestBody

logger = logging.getLogger(__name__)


def strip_query(endpoint_path: str) -> str:
    return endpoint_path.split("?", 1)[0]


def _template_regex(template: str) -> re.Pattern[str]:
    pieces = PATH_PARAMETER_PATTERN.split(template)
    return re.compile("^" + "[^/]+".join(re.escape(piece) for piece in pieces) + "$")


def match_path(paths: dict[str, Any], lookup_path: str) -> str | None:
    """
    Find the spec key for ``lookup_path``.
    An exact key wins; otherwise the first templated path whose
    segments match (e.g. ``/orders/{id}`` for ``/orders/42``).
    """
    if lookup_path in paths:
        return lookup_path
    for template in paths:
        if "{" in template and _template_regex(template).match(lookup_path):
            logger.debug("Matched %s to path template %s", lookup_path, template)
            return template
    return None


def _swagger_body(parameters: list[dict[str, Any]], content_type: str) -> RequestBody | None:
    for parameter in parameters:
        if isinstance(parameter, dict) and parameter.get("in") == "body":
            return RequestBody(
                required=bool(parameter.get("required", False)),
                content={content_type: {"schema": parameter.get("schema")}},
            )
    return None


def extract_request_body(
    path_item: dict[str, Any],
    method_spec: dict[str, Any],
    content_type: str = "application/json",
) -> RequestBody | None:
    """OpenAPI 3 ``requestBody``, or a Swagger 2.0 ``in: body`` parameter."""
    request_body = method_spec.get("requestBody")
    if isinstance(request_body, dict):
        return RequestBody(
            required=bool(request_body.get("required", False)),
            content=request_body.get("content") or {},
        )
    # Operation-level parameters override path-level ones.
    return _swagger_body(method_spec.get("parameters") or [], content_type) or _swagger_body(
        path_item.get("parameters") or [], content_type
    )


def find_operation(
    spec: dict[str, Any],
    endpoint_path: str,
    method: str,
    content_type: str = "application/json",
) -> Operation:
    lookup_path = strip_query(endpoint_path)
    paths = spec.get("paths") or {}

    key = match_path(paths, lookup_path)
    if key is None:
        raise OperationNotFoundError(f"Path '{lookup_path}' not found in OpenAPI spec")

    path_item = paths[key] if paths[key] is not None else {}
    if not isinstance(path_item, dict):
        raise SpecFileError(f"Path item '{key}' in OpenAPI spec is not an object")
    method_spec = path_item.get(method.lower())
    if not isinstance(method_spec, dict):
        raise OperationNotFoundError(
            f"Method '{method.upper()}' not found for path '{lookup_path}' in OpenAPI spec"
        )

    return Operation(
        path=lookup_path,
        method=method.lower(),
        request_body=extract_request_body(path_item, method_spec, content_type),
    )
