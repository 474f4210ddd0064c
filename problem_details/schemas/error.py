"""Extension schemas for problems raised by the framework integration."""

from __future__ import annotations

from pydantic import BaseModel


class ValidationIssue(BaseModel):
    """Single field-level validation issue."""

    field: str
    issue: str


class ValidationProblemExtensions(BaseModel):
    """Extension members of a request validation problem."""

    errors: list[ValidationIssue]
