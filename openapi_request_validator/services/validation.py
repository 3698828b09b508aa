"""
JSON Schema validation service.

Compiles a resolved request-body schema and checks a payload against it,
collecting every violation rather than stopping at the first one. Errors are
normalized into ``ErrorRecord`` models so the reporter never touches
jsonschema internals.
"""

from __future__ import annotations

import logging
from typing import Any

import jsonschema
from jsonschema.exceptions import SchemaError, ValidationError
from jsonschema.protocols import Validator

from openapi_request_validator.exceptions import InvalidSchemaError
from openapi_request_validator.schemas.results import ErrorRecord, ValidationResult

logger = logging.getLogger(__name__)


CYCLE_DEFS_KEY = "$defs"


def relink_cycles(schema: dict[str, Any]) -> dict[str, Any]:
    """
    Turn a dereferenced schema that contains cycles (recursive $refs inlined
    by the loader) back into a tree jsonschema can compile.

    Each object reached again from inside itself is stored once under
    ``$defs`` and the repeat is replaced with a local ``$ref`` to it.
    Acyclic schemas are returned as they are.
    """
    names: dict[int, str] = {}
    targets: dict[int, dict[str, Any]] = {}

    def copy(node: Any, ancestors: frozenset[int]) -> Any:
        if isinstance(node, dict):
            if id(node) in ancestors:
                if id(node) not in names:
                    names[id(node)] = f"cycle{len(names)}"
                    targets[id(node)] = node
                return {"$ref": f"#/{CYCLE_DEFS_KEY}/{names[id(node)]}"}
            inner = ancestors | {id(node)}
            return {key: copy(value, inner) for key, value in node.items()}
        if isinstance(node, list):
            return [copy(item, ancestors) for item in node]
        return node

    tree = copy(schema, frozenset())
    if not names:
        return schema

    definitions: dict[str, Any] = {}
    # Copying a definition may discover further cycles, so loop until stable.
    while len(definitions) < len(names):
        for node_id, name in list(names.items()):
            if name not in definitions:
                node = targets[node_id]
                definitions[name] = {
                    key: copy(value, frozenset({node_id})) for key, value in node.items()
                }

    tree[CYCLE_DEFS_KEY] = {**tree.get(CYCLE_DEFS_KEY, {}), **definitions}
    logger.debug("Re-linked %d recursive schema(s) as local $refs", len(names))
    return tree


def build_validator(
    schema: dict[str, Any],
    default: type[Validator] = jsonschema.Draft7Validator,
) -> Validator:
    """
    Compile ``schema`` into a validator with format checking enabled.
    The draft is taken from ``$schema`` when present, otherwise ``default``.
    """
    schema = relink_cycles(schema)
    validator_cls = jsonschema.validators.validator_for(schema, default=default)
    try:
        validator_cls.check_schema(schema)
    except SchemaError as exc:
        raise InvalidSchemaError(f"Request body schema is invalid: {exc.message}") from exc
    return validator_cls(schema, format_checker=validator_cls.FORMAT_CHECKER)


def validate_against_schema(
    data: Any,
    schema: dict[str, Any],
    default: type[Validator] = jsonschema.Draft7Validator,
) -> ValidationResult:
    """
    Validate a payload against a JSON schema.
    Returns a ValidationResult with every error in engine order.
    """
    validator = build_validator(schema, default=default)
    errors = [to_error_record(error) for error in validator.iter_errors(data)]
    logger.debug("Validation finished with %d error(s)", len(errors))
    return ValidationResult(valid=not errors, errors=errors)


def to_error_record(error: ValidationError) -> ErrorRecord:
    params: dict[str, Any] = {}
    if error.validator == "enum":
        params["allowed_values"] = list(error.validator_value)
    elif error.validator == "required":
        params["missing_property"] = _missing_property(error)
    elif error.validator == "additionalProperties" and isinstance(error.instance, dict):
        allowed = error.schema.get("properties", {})
        params["additional_property"] = next(
            (name for name in error.instance if name not in allowed), None
        )

    return ErrorRecord(
        instance_path=json_pointer(error.absolute_path),
        message=error.message,
        keyword=str(error.validator),
        params=params,
    )


def json_pointer(parts) -> str:
    """RFC 6901 pointer for a sequence of path parts; '' for the root."""
    return "".join(
        "/" + str(part).replace("~", "~0").replace("/", "~1") for part in parts
    )


def _missing_property(error: ValidationError) -> str | None:
    # jsonschema emits one error per missing name, formatted "<repr> is a required property".
    instance = error.instance if isinstance(error.instance, dict) else {}
    missing = [name for name in error.validator_value if name not in instance]
    for name in missing:
        if error.message.startswith(repr(name)):
            return name
    return missing[0] if missing else None
