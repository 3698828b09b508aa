"""
OpenAPI constants used for input policy and operation lookup.

Covers the subset of the OpenAPI 2.0 / 3.x vocabulary this tool inspects:
HTTP methods, the methods that normally carry a body, and the file types
accepted for specs and payloads.
"""

import re

SUPPORTED_HTTP_VERBS: tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD")

# Methods for which a missing payload is an error when the body is required.
BODY_METHODS: frozenset[str] = frozenset({"post", "put", "patch"})

SPEC_FILE_EXTENSIONS: tuple[str, ...] = (".yaml", ".yml", ".json")
PAYLOAD_FILE_EXTENSION: str = ".json"

SWAGGER_VERSION: str = "2.0"
OPENAPI_VERSION_PATTERN = re.compile(r"^3\.[01]\.\d+$")

# Path-template placeholder, e.g. ``{orderId}`` in ``/orders/{orderId}``.
PATH_PARAMETER_PATTERN = re.compile(r"\{[^/{}]+\}")
