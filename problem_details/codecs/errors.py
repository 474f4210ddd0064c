"""Error taxonomy for problem details encoders and decoders."""

from __future__ import annotations


class ProblemCodecError(ValueError):
    """Base error raised by problem details codec operations."""


class EncodeError(ProblemCodecError):
    """Raised when a problem cannot be written in the requested format."""


class DecodeError(ProblemCodecError):
    """Raised when input is not a well-formed problem document in the declared format."""


class SchemaError(ProblemCodecError):
    """Raised when a fixed problem member is present with the wrong kind of value."""

    def __init__(self, field: str, expected_kind: str) -> None:
        super().__init__(f"Problem member `{field}` must be {expected_kind}")
        self.field = field
        self.expected_kind = expected_kind


class ExtensionDecodeError(ProblemCodecError):
    """Raised when the extension payload rejects the residual members."""
