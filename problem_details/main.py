"""FastAPI demo application serving problem details responses."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi import status
from pydantic import BaseModel

from problem_details.api.negotiation import ProblemFormat
from problem_details.api.openapi import problem_openapi_responses
from problem_details.core.errors import ProblemDetailsError
from problem_details.core.errors import register_problem_handlers
from problem_details.schemas.problem import ProblemDetails
from problem_details.schemas.problem import ProblemDetailsSchema

OUT_OF_CREDIT_TYPE = "https://example.com/probs/out-of-credit"

app = FastAPI(title="problem-details")
register_problem_handlers(app)


class OutOfCredit(BaseModel):
    """Extension members of the out-of-credit problem."""

    balance: int
    accounts: list[str]


class OutOfCreditProblem(ProblemDetailsSchema):
    """Documented shape of the out-of-credit problem."""

    balance: int
    accounts: list[str]


def _teapot() -> ProblemDetails:
    return ProblemDetails.from_status_code(status.HTTP_418_IM_A_TEAPOT).with_detail("short and stout")


@app.get("/health")
def health() -> dict[str, str]:
    """Health check stub endpoint for service readiness."""
    return {"status": "ok"}


@app.get("/teapot", responses=problem_openapi_responses(status.HTTP_418_IM_A_TEAPOT))
def teapot() -> None:
    """Always fail; the format follows the Accept header."""
    raise ProblemDetailsError(_teapot())


@app.get("/teapot/json", responses=problem_openapi_responses(status.HTTP_418_IM_A_TEAPOT, formats=[ProblemFormat.JSON]))
def teapot_json() -> None:
    raise ProblemDetailsError(_teapot(), formats=[ProblemFormat.JSON])


@app.get("/teapot/xml", responses=problem_openapi_responses(status.HTTP_418_IM_A_TEAPOT, formats=[ProblemFormat.XML]))
def teapot_xml() -> None:
    # some browsers refuse to display application/problem+xml; use curl
    raise ProblemDetailsError(_teapot(), formats=[ProblemFormat.XML])


@app.get(
    "/account/{account_id}/msgs/{message_id}",
    responses=problem_openapi_responses(status.HTTP_403_FORBIDDEN, model=OutOfCreditProblem),
)
def send_message(account_id: str, message_id: str) -> None:
    """Reject every message with the RFC 9457 out-of-credit example."""
    raise ProblemDetailsError(
        ProblemDetails.new()
        .with_type(OUT_OF_CREDIT_TYPE)
        .with_status(status.HTTP_403_FORBIDDEN)
        .with_title("You do not have enough credit.")
        .with_detail("Your current balance is 30, but that costs 50.")
        .with_instance(f"/account/{account_id}/msgs/{message_id}")
        .with_extensions(OutOfCredit(balance=30, accounts=[f"/account/{account_id}", "/account/67890"]))
    )
