"""Problem details exception and FastAPI exception handler registration."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from problem_details.api.negotiation import ProblemFormat
from problem_details.api.responses import problem_response
from problem_details.core.config import get_problem_settings
from problem_details.schemas.error import ValidationIssue
from problem_details.schemas.error import ValidationProblemExtensions
from problem_details.schemas.problem import ProblemDetails

logger = logging.getLogger(__name__)


class ProblemDetailsError(Exception):
    """Application exception rendered as a problem details response."""

    def __init__(
        self,
        problem: ProblemDetails[Any],
        *,
        formats: Sequence[ProblemFormat] | None = None,
    ) -> None:
        super().__init__(str(problem))
        self.problem = problem
        self.formats = tuple(formats) if formats is not None else None


def _validation_issues(exc: RequestValidationError) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for error in exc.errors():
        location = error.get("loc", ())
        field = _format_location(location)
        message = str(error.get("msg", "Invalid value"))
        issues.append(ValidationIssue(field=field, issue=message))
    return issues


def _format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    if not isinstance(location, (tuple, list)):
        return str(location)

    prefixes = {"body", "query", "path", "header", "cookie"}
    filtered = [str(part) for part in location if part not in prefixes]
    if filtered:
        return ".".join(filtered)

    if not location:
        return "request"

    return str(location[0])


def _respond(request: Request, problem: ProblemDetails[Any], formats: Sequence[ProblemFormat] | None = None) -> Response:
    return problem_response(problem, accept=request.headers.get("accept"), formats=formats)


async def problem_details_error_handler(request: Request, exc: ProblemDetailsError) -> Response:
    """Render explicitly raised problems."""

    logger.warning("Problem raised while handling %s %s: %s", request.method, request.url.path, exc.problem)
    return _respond(request, exc.problem, exc.formats)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
    """Describe FastAPI validation errors as a 400 problem with an `errors` member."""

    problem = (
        ProblemDetails.from_status_code(status.HTTP_400_BAD_REQUEST)
        .with_detail("Request validation failed")
        .with_extensions(ValidationProblemExtensions(errors=_validation_issues(exc)))
    )
    return _respond(request, problem)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Describe HTTP exceptions as problems titled with the status reason phrase."""

    problem = ProblemDetails.from_status_code(exc.status_code)
    if isinstance(exc.detail, str) and exc.detail and exc.detail != problem.title:
        problem = problem.with_detail(exc.detail)

    response = _respond(request, problem)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    """Avoid leaking internal exceptions while keeping the problem shape."""

    logger.exception("Unhandled %s while handling %s %s", type(exc).__name__, request.method, request.url.path)
    return _respond(request, ProblemDetails.from_status_code(status.HTTP_500_INTERNAL_SERVER_ERROR))


def register_problem_handlers(app: FastAPI) -> None:
    """Attach all problem details handlers to a FastAPI app instance."""

    logger.info("Registering problem handlers with settings=%s", get_problem_settings().safe_for_logging())
    app.add_exception_handler(ProblemDetailsError, problem_details_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
