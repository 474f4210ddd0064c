"""Render problem details as HTTP responses."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Sequence
from dataclasses import dataclass
import logging
from typing import Any

from starlette import status
from starlette.responses import Response

from problem_details.api.negotiation import ProblemFormat
from problem_details.api.negotiation import parse_accept
from problem_details.api.negotiation import select_format
from problem_details.codecs.errors import EncodeError
from problem_details.codecs.json_codec import encode_json
from problem_details.codecs.xml_codec import encode_xml
from problem_details.core.config import DEFAULT_STATUS_CODE
from problem_details.core.config import ProblemSettings
from problem_details.core.config import get_problem_settings
from problem_details.schemas.problem import ProblemDetails

logger = logging.getLogger(__name__)

_ENCODERS: dict[ProblemFormat, Callable[[ProblemDetails[Any]], bytes]] = {
    ProblemFormat.JSON: encode_json,
    ProblemFormat.XML: encode_xml,
}


@dataclass(frozen=True)
class RenderedProblem:
    """Framework-neutral status line, content type and body of a problem response."""

    status_code: int
    media_type: str
    body: bytes


def render_problem(
    problem: ProblemDetails[Any],
    problem_format: ProblemFormat = ProblemFormat.JSON,
    *,
    default_status: int = DEFAULT_STATUS_CODE,
) -> RenderedProblem:
    """Encode a problem in ``problem_format``; raises `EncodeError` on failure."""
    status_code = problem.status if problem.status is not None else default_status
    return RenderedProblem(
        status_code=status_code,
        media_type=problem_format.media_type,
        body=_ENCODERS[problem_format](problem),
    )


def problem_response(
    problem: ProblemDetails[Any],
    *,
    accept: str | None = None,
    formats: Sequence[ProblemFormat] | None = None,
    settings: ProblemSettings | None = None,
) -> Response:
    """Build a Starlette response for ``problem`` negotiated against ``accept``.

    ``formats`` narrows the formats on offer; it defaults to the configured
    ones. A problem that cannot be encoded yields a bare 500 response.
    """
    settings = settings or get_problem_settings()
    available = formats if formats is not None else settings.formats
    problem_format = select_format(available, parse_accept(accept))
    logger.debug("Selected problem format=%s for accept=%r", problem_format.value, accept)

    try:
        rendered = render_problem(problem, problem_format, default_status=settings.default_status)
    except EncodeError:
        logger.exception("Could not render problem details as %s", problem_format.value)
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(
        content=rendered.body,
        status_code=rendered.status_code,
        media_type=rendered.media_type,
    )
