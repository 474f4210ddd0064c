"""RFC 9457 / RFC 7807 problem details value and its fluent builder."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from dataclasses import replace
from http import HTTPStatus
import re
from typing import Any
from typing import Generic
from typing import TypeVar
from urllib.parse import urlsplit

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from problem_details.schemas.extensions import ExtT
from problem_details.schemas.extensions import NoExtensions
from problem_details.schemas.extensions import coerce_extensions
from problem_details.schemas.extensions import extension_fields

NewExtT = TypeVar("NewExtT")

FIXED_FIELDS: tuple[str, ...] = ("type", "status", "title", "detail", "instance")

_URI_FORBIDDEN = re.compile(r"[\s\x00-\x1f\x7f<>\"{}|\\^`]")


class InvalidUriError(ValueError):
    """Raised when a value is not a usable URI reference."""


class ExtensionCollisionError(ValueError):
    """Raised when extension members reuse a fixed problem member name."""

    def __init__(self, names: list[str]) -> None:
        super().__init__(f"Extension members collide with reserved problem members: {', '.join(names)}")
        self.names = names


def parse_uri_reference(value: Any) -> str:
    """Validate an absolute or relative URI reference and return it unchanged."""
    if not isinstance(value, str) or not value:
        raise InvalidUriError(f"URI reference must be a non-empty string, got {value!r}")
    if _URI_FORBIDDEN.search(value):
        raise InvalidUriError(f"URI reference contains invalid characters: {value!r}")
    try:
        urlsplit(value)
    except ValueError as exc:
        raise InvalidUriError(f"Invalid URI reference {value!r}: {exc}") from exc
    return value


@dataclass(frozen=True)
class ProblemType:
    """URI reference identifying the problem type."""

    uri: str

    def __post_init__(self) -> None:
        parse_uri_reference(self.uri)

    def __str__(self) -> str:
        return self.uri


ABOUT_BLANK = ProblemType("about:blank")


class FixedMembers(BaseModel):
    """Strict wire schema for the five reserved problem members."""

    model_config = ConfigDict(strict=True)

    type: str | None = None
    status: int | None = Field(default=None, ge=100, le=999)
    title: str | None = None
    detail: str | None = None
    instance: str | None = None


@dataclass(frozen=True)
class ProblemDetails(Generic[ExtT]):
    """A problem details object.

    Values are immutable: every ``with_*`` method returns a new object.
    ``with_extensions`` swaps the extension payload, and with it the
    extension type, for example::

        problem = (
            ProblemDetails.new()
            .with_type("https://example.com/probs/out-of-credit")
            .with_title("You do not have enough credit.")
            .with_extensions(OutOfCredit(balance=30, accounts=[...]))
        )

    A ``type`` of ``about:blank`` is the RFC default and is not written out.
    Extension members are flattened next to the fixed members when encoded,
    so their names must not clash with ``type``, ``status``, ``title``,
    ``detail`` or ``instance``.
    """

    type: ProblemType = ABOUT_BLANK
    status: int | None = None
    title: str | None = None
    detail: str | None = None
    instance: str | None = None
    extensions: ExtT = field(default_factory=NoExtensions)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "extensions", coerce_extensions(self.extensions))
        if not isinstance(self.type, ProblemType):
            object.__setattr__(self, "type", ProblemType(self.type))
        if self.instance is not None:
            parse_uri_reference(self.instance)
        clashes = [name for name in extension_fields(self.extensions) if name in FIXED_FIELDS]
        if clashes:
            raise ExtensionCollisionError(clashes)

    @classmethod
    def new(cls) -> ProblemDetails[NoExtensions]:
        """Create an empty problem details object."""
        return cls()

    @classmethod
    def from_status_code(cls, status: int | HTTPStatus) -> ProblemDetails[NoExtensions]:
        """Create a problem with ``status`` set and ``title`` set to its reason phrase."""
        return cls(status=int(status), title=_reason_phrase(int(status)))

    def with_type(self, problem_type: str | ProblemType) -> ProblemDetails[ExtT]:
        """Return a copy with the problem type URI replaced."""
        if not isinstance(problem_type, ProblemType):
            problem_type = ProblemType(problem_type)
        return replace(self, type=problem_type)

    def with_status(self, status: int | HTTPStatus) -> ProblemDetails[ExtT]:
        """Return a copy with the HTTP status code replaced."""
        return replace(self, status=int(status))

    def with_title(self, title: str) -> ProblemDetails[ExtT]:
        """Return a copy with the human-readable summary replaced."""
        return replace(self, title=title)

    def with_detail(self, detail: str) -> ProblemDetails[ExtT]:
        """Return a copy with the occurrence-specific explanation replaced."""
        return replace(self, detail=detail)

    def with_instance(self, instance: str) -> ProblemDetails[ExtT]:
        """Return a copy with the occurrence URI reference replaced."""
        return replace(self, instance=instance)

    def with_extensions(self, extensions: NewExtT) -> ProblemDetails[NewExtT]:
        """Return a copy carrying a private copy of ``extensions``; plain dicts become `DynamicExtensions`."""
        return ProblemDetails(
            type=self.type,
            status=self.status,
            title=self.title,
            detail=self.detail,
            instance=self.instance,
            extensions=extensions,
        )

    def extension_fields(self) -> dict[str, Any]:
        """Return the extension members in the order they are written out."""
        return extension_fields(self.extensions)

    def __str__(self) -> str:
        text = f"[{self.type}"
        text += f" {self.status}]" if self.status is not None else "]"

        title = self.title
        if title is None and self.status is not None:
            title = _reason_phrase(self.status)
        if title is not None:
            text += f" {title}"

        if self.detail is not None:
            if title is not None:
                text += ":"
            text += f" {self.detail}"
        return text


def _reason_phrase(status: int) -> str | None:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return None


class ProblemDetailsSchema(BaseModel):
    """OpenAPI description of a problem document.

    Subclass it and add fields to document a problem type's extension
    members; they are written next to the fixed members.
    """

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={"description": "RFC 9457 / RFC 7807 problem details"},
    )

    type: str | None = Field(
        default=None,
        description="URI reference identifying the problem type. Defaults to `about:blank` when absent.",
        json_schema_extra={"format": "uri-reference"},
    )
    status: int | None = Field(default=None, ge=100, le=999, description="HTTP status code of this occurrence.")
    title: str | None = Field(default=None, description="Short, human-readable summary of the problem type.")
    detail: str | None = Field(default=None, description="Explanation specific to this occurrence.")
    instance: str | None = Field(
        default=None,
        description="URI reference identifying this occurrence.",
        json_schema_extra={"format": "uri-reference"},
    )
