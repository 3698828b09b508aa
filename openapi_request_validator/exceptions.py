"""Error kinds raised by the validation pipeline.

Every expected failure derives from ``ValidatorError`` so the CLI layer can
tell a descriptive, user-facing error apart from an unexpected crash.
"""


class ValidatorError(Exception):
    """Base class for all expected, terminal failures."""


class UsageError(ValidatorError):
    """Missing or malformed command-line arguments."""


class SpecFileError(ValidatorError):
    """The OpenAPI document could not be read, parsed or dereferenced."""


class PayloadFileError(ValidatorError):
    """The payload file could not be read or is not JSON."""


class OperationNotFoundError(ValidatorError):
    """The requested path or method is absent from the spec."""


class SchemaNotFoundError(ValidatorError):
    """The operation has a request body but no JSON schema for it."""


class RequestBodyPolicyError(ValidatorError):
    """A payload was given where none is accepted, or omitted where required."""


class InvalidSchemaError(ValidatorError):
    """The resolved schema is not a valid JSON Schema."""
