"""JSON encoding and decoding of problem details (`application/problem+json`)."""

from __future__ import annotations

import json
from typing import Any

from problem_details.codecs.errors import DecodeError
from problem_details.codecs.errors import EncodeError
from problem_details.codecs.fields import flatten
from problem_details.codecs.fields import split
from problem_details.schemas.extensions import ExtT
from problem_details.schemas.extensions import NoExtensions
from problem_details.schemas.problem import ProblemDetails

JSON_MEDIA_TYPE = "application/problem+json"


def encode_json(problem: ProblemDetails[Any]) -> bytes:
    """Write a problem as compact UTF-8 JSON with extension members flattened."""
    fields = flatten(problem)
    try:
        return json.dumps(
            fields,
            ensure_ascii=False,
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
        ).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"Could not write problem details as JSON: {exc}") from exc


def decode_json(
    raw: bytes | str,
    extensions: type[ExtT] = NoExtensions,  # type: ignore[assignment]
) -> ProblemDetails[ExtT]:
    """Parse a JSON problem document, rebuilding extension members as ``extensions``."""
    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"Invalid problem details JSON: {exc}") from exc

    if not isinstance(document, dict):
        raise DecodeError("Problem details JSON must be an object")
    return split(document, extensions)
