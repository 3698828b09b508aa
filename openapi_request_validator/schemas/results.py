"""Pydantic models for resolved operations and validation results."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Operation lookup
# ---------------------------------------------------------------------------

class RequestBody(BaseModel):
    """The request body definition of an operation, after dereferencing."""
    required: bool = False
    content: dict[str, dict[str, Any]] = Field(default_factory=dict)


class Operation(BaseModel):
    path: str
    method: str
    request_body: RequestBody | None = None

    @property
    def verb(self) -> str:
        return self.method.upper()

    def body_schema(self, content_type: str) -> dict[str, Any] | None:
        """Return the schema declared for ``content_type``, if any."""
        if self.request_body is None:
            return None
        media_type = self.request_body.content.get(content_type) or {}
        schema = media_type.get("schema")
        return schema if isinstance(schema, dict) else None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class ErrorRecord(BaseModel):
    """A single schema violation found in the payload."""
    instance_path: str
    message: str
    keyword: str
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def display_path(self) -> str:
        return self.instance_path or "(root)"


class ValidationResult(BaseModel):
    valid: bool
    errors: list[ErrorRecord] = Field(default_factory=list)
