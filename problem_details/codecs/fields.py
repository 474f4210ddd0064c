"""Format-neutral flattening of problems into, and out of, ordered member mappings.

Every wire format goes through these two functions: encoders serialize the
mapping built by `flatten`, decoders parse into a mapping and hand it to
`split`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from problem_details.codecs.errors import EncodeError
from problem_details.codecs.errors import ExtensionDecodeError
from problem_details.codecs.errors import SchemaError
from problem_details.schemas.extensions import ExtT
from problem_details.schemas.extensions import load_extensions
from problem_details.schemas.problem import ABOUT_BLANK
from problem_details.schemas.problem import FIXED_FIELDS
from problem_details.schemas.problem import ExtensionCollisionError
from problem_details.schemas.problem import FixedMembers
from problem_details.schemas.problem import InvalidUriError
from problem_details.schemas.problem import ProblemDetails
from problem_details.schemas.problem import ProblemType
from problem_details.schemas.problem import parse_uri_reference

EXPECTED_KINDS: dict[str, str] = {
    "type": "a URI reference string",
    "status": "an integer status code",
    "title": "a string",
    "detail": "a string",
    "instance": "a URI reference string",
}


def flatten(problem: ProblemDetails[Any]) -> dict[str, Any]:
    """Return fixed members followed by extension members, at one level.

    Raises `EncodeError` when an extension member would overwrite a fixed
    member or the payload cannot be dumped.
    """
    fields: dict[str, Any] = {}
    if problem.type != ABOUT_BLANK:
        fields["type"] = str(problem.type)
    if problem.status is not None:
        fields["status"] = problem.status
    if problem.title is not None:
        fields["title"] = problem.title
    if problem.detail is not None:
        fields["detail"] = problem.detail
    if problem.instance is not None:
        fields["instance"] = problem.instance
    try:
        members = problem.extension_fields()
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"Could not write extension members: {exc}") from exc
    for name, value in members.items():
        if name in FIXED_FIELDS:
            raise EncodeError(f"Extension member `{name}` would overwrite a reserved problem member")
        fields[name] = value
    return fields


def split(fields: Mapping[str, Any], extensions: type[ExtT]) -> ProblemDetails[ExtT]:
    """Rebuild a problem from a flat member mapping.

    Fixed members are consumed and type-checked one by one; whatever remains
    is handed to the extension payload type. ``null`` fixed members count as
    absent.
    """
    residual = dict(fields)
    fixed = {name: residual.pop(name) for name in FIXED_FIELDS if name in residual}
    fixed = {name: value for name, value in fixed.items() if value is not None}

    try:
        members = FixedMembers.model_validate(fixed)
    except ValidationError as exc:
        raise _schema_error(exc) from exc

    problem_type = ABOUT_BLANK
    if members.type is not None:
        try:
            problem_type = ProblemType(members.type)
        except InvalidUriError as exc:
            raise SchemaError("type", EXPECTED_KINDS["type"]) from exc

    if members.instance is not None:
        try:
            parse_uri_reference(members.instance)
        except InvalidUriError as exc:
            raise SchemaError("instance", EXPECTED_KINDS["instance"]) from exc

    try:
        payload = load_extensions(extensions, residual)
    except Exception as exc:
        raise ExtensionDecodeError(f"Could not decode extension members: {exc}") from exc

    try:
        return ProblemDetails(
            type=problem_type,
            status=members.status,
            title=members.title,
            detail=members.detail,
            instance=members.instance,
            extensions=payload,
        )
    except ExtensionCollisionError as exc:
        raise ExtensionDecodeError(str(exc)) from exc


def _schema_error(exc: ValidationError) -> SchemaError:
    location = exc.errors()[0].get("loc", ())
    field = str(location[0]) if location else "problem"
    return SchemaError(field, EXPECTED_KINDS.get(field, "a valid value"))
