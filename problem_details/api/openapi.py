"""OpenAPI response documentation for routes that answer with problems."""

from __future__ import annotations

from collections.abc import Sequence
from http import HTTPStatus
from typing import Any

from problem_details.api.negotiation import ProblemFormat
from problem_details.schemas.problem import ProblemDetailsSchema


def problem_openapi_responses(
    *status_codes: int,
    model: type[ProblemDetailsSchema] = ProblemDetailsSchema,
    formats: Sequence[ProblemFormat] = (ProblemFormat.JSON, ProblemFormat.XML),
    description: str | None = None,
) -> dict[int | str, dict[str, Any]]:
    """Build a FastAPI ``responses=`` mapping documenting problem bodies.

    Every status code gets the same schema under each format's media type.
    The schema is inlined rather than registered as a component, so
    ``model`` must not contain nested models whose ``$defs`` would not resolve.
    """
    if not formats:
        raise ValueError("At least one problem format must be documented")

    responses: dict[int | str, dict[str, Any]] = {}
    for code in status_codes:
        responses[code] = {
            "description": description or _reason_phrase(code),
            "content": {
                problem_format.media_type: {"schema": model.model_json_schema()} for problem_format in formats
            },
        }
    return responses


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Problem"
