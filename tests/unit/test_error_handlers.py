"""Unit tests for problem details exception handlers."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.exceptions import HTTPException as StarletteHTTPException
import pytest

from problem_details.api.negotiation import ProblemFormat
from problem_details.codecs.xml_codec import decode_xml
from problem_details.core.errors import ProblemDetailsError
from problem_details.core.errors import register_problem_handlers
from problem_details.schemas.problem import ProblemDetails


def _build_client() -> TestClient:
    app = FastAPI()
    register_problem_handlers(app)

    @app.get("/query")
    def query(limit: int) -> dict[str, int]:
        return {"limit": limit}

    @app.get("/problem")
    def problem() -> None:
        raise ProblemDetailsError(
            ProblemDetails.new()
            .with_status(409)
            .with_title("Conflict")
            .with_extensions({"resource": "pipeline"})
        )

    @app.get("/problem/xml")
    def problem_xml() -> None:
        raise ProblemDetailsError(ProblemDetails.new().with_title("Only XML"), formats=[ProblemFormat.XML])

    @app.get("/http")
    def http_error() -> None:
        raise StarletteHTTPException(status_code=404, detail="Client not found", headers={"X-Reason": "gone"})

    @app.get("/boom")
    def boom() -> None:
        raise RuntimeError("database password is hunter2")

    return TestClient(app, raise_server_exceptions=False)


def test_raised_problems_are_rendered_as_json_by_default() -> None:
    client = _build_client()

    response = client.get("/problem")

    assert response.status_code == 409
    assert response.headers["content-type"] == "application/problem+json"
    assert response.json() == {"status": 409, "title": "Conflict", "resource": "pipeline"}


def test_raised_problems_follow_accept_header() -> None:
    client = _build_client()

    response = client.get("/problem", headers={"Accept": "application/problem+xml"})

    assert response.status_code == 409
    assert response.headers["content-type"] == "application/problem+xml"
    assert decode_xml(response.content).title == "Conflict"


def test_problem_without_status_uses_default_status() -> None:
    client = _build_client()

    response = client.get("/problem/xml", headers={"Accept": "application/problem+json"})

    assert response.status_code == 500
    assert response.headers["content-type"] == "application/problem+xml"


def test_request_validation_errors_list_offending_fields() -> None:
    client = _build_client()

    response = client.get("/query")

    assert response.status_code == 400
    payload = response.json()
    assert payload["status"] == 400
    assert payload["title"] == "Bad Request"
    assert payload["detail"] == "Request validation failed"
    assert payload["errors"][0]["field"] == "limit"


def test_http_errors_become_problems() -> None:
    client = _build_client()

    response = client.get("/http")

    assert response.status_code == 404
    assert response.headers["x-reason"] == "gone"
    assert response.json() == {"status": 404, "title": "Not Found", "detail": "Client not found"}


def test_unknown_routes_omit_redundant_detail() -> None:
    client = _build_client()

    response = client.get("/missing")

    assert response.status_code == 404
    assert response.json() == {"status": 404, "title": "Not Found"}


def test_unhandled_errors_do_not_leak_internals() -> None:
    client = _build_client()

    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"status": 500, "title": "Internal Server Error"}
    assert "hunter2" not in response.text


def test_registration_logs_effective_settings(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    monkeypatch.setenv("PROBLEM_DETAILS_FORMATS", "xml")
    monkeypatch.setenv("PROBLEM_DETAILS_DEFAULT_STATUS", "503")

    with caplog.at_level(logging.INFO, logger="problem_details.core.errors"):
        register_problem_handlers(FastAPI())

    assert "Registering problem handlers" in caplog.text
    assert "'formats': 'xml'" in caplog.text
    assert "'default_status': 503" in caplog.text
