"""
OpenAPI document loading.

Reads a spec from disk, checks the basic Swagger/OpenAPI structure and
inlines every ``$ref`` with jsonref. Any failure surfaces as SpecFileError.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit
from urllib.request import url2pathname

import jsonref
import yaml

from openapi_request_validator.exceptions import SpecFileError
from openapi_request_validator.schemas.openapi import (
    OPENAPI_VERSION_PATTERN,
    SWAGGER_VERSION,
)

logger = logging.getLogger(__name__)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class SpecYamlLoader(yaml.SafeLoader):
    """SafeLoader that keeps unquoted dates as strings, as JSON would."""


SpecYamlLoader.yaml_implicit_resolvers = {
    first_char: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first_char, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def parse_document(text: str, source: str) -> Any:
    try:
        return yaml.load(text, Loader=SpecYamlLoader)
    except yaml.YAMLError as exc:
        raise SpecFileError(f"Could not parse {source}: {exc}") from exc


def read_spec_document(path: str | Path) -> Any:
    """Read and parse a YAML or JSON spec file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecFileError(f"Could not read OpenAPI spec '{path}': {exc}") from exc
    return parse_document(text, f"OpenAPI spec '{path}'")


def check_openapi_structure(document: Any, source: str) -> None:
    """Reject documents that are not a Swagger 2.0 or OpenAPI 3.0/3.1 definition."""
    if not isinstance(document, dict):
        raise SpecFileError(f"{source} is not a valid Swagger/OpenAPI definition")

    swagger = document.get("swagger")
    openapi = document.get("openapi")
    if swagger is None and openapi is None:
        raise SpecFileError(f"{source} is not a valid Swagger/OpenAPI definition")

    if openapi is None:
        if str(swagger) != SWAGGER_VERSION:
            raise SpecFileError(
                f"{source} is an unsupported Swagger version: {swagger}. "
                f"Only {SWAGGER_VERSION} is supported."
            )
        paths_required = True
    else:
        if not OPENAPI_VERSION_PATTERN.match(str(openapi)):
            raise SpecFileError(
                f"{source} is an unsupported OpenAPI version: {openapi}. "
                "Only 3.0.x and 3.1.x are supported."
            )
        paths_required = str(openapi).startswith("3.0.")

    paths = document.get("paths")
    if paths is None and not paths_required:
        return
    if not isinstance(paths, dict):
        raise SpecFileError(f"{source} has no valid 'paths' object")


def load_local_reference(uri: str) -> Any:
    """jsonref loader for external files; only file:// URIs are followed."""
    parts = urlsplit(uri)
    if parts.scheme != "file":
        raise ValueError(f"only local file references are supported, got '{uri}'")
    ref_path = Path(url2pathname(parts.path))
    logger.debug("Loading external reference %s", ref_path)
    with ref_path.open(encoding="utf-8") as handle:
        return yaml.load(handle, Loader=SpecYamlLoader)


def dereference(document: dict[str, Any], base_uri: str = "") -> dict[str, Any]:
    """
    Return a copy of ``document`` with every ``$ref`` replaced by its target.
    Circular references become cycles in the returned structure.
    """
    try:
        return jsonref.replace_refs(
            document,
            base_uri=base_uri,
            loader=load_local_reference,
            proxies=False,
            lazy_load=False,
        )
    except jsonref.JsonRefError as exc:
        raise SpecFileError(f"Could not resolve $ref in OpenAPI spec: {exc}") from exc


def load_spec(path: str | Path) -> dict[str, Any]:
    """Read, check and dereference an OpenAPI spec file."""
    path = Path(path)
    document = read_spec_document(path)
    check_openapi_structure(document, f"OpenAPI spec '{path}'")
    spec = dereference(document, base_uri=path.resolve().as_uri())
    logger.info("Loaded OpenAPI spec %s with %d path(s)", path, len(spec.get("paths") or {}))
    return spec
