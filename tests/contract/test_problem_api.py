"""Contract tests for the demo application's problem responses."""

from __future__ import annotations

from fastapi.testclient import TestClient

from problem_details.codecs.json_codec import decode_json
from problem_details.codecs.xml_codec import decode_xml
from problem_details.main import OutOfCredit
from problem_details.schemas.problem import ProblemDetails


def _assert_problem_contract(payload: dict) -> None:
    for field in ("type", "status", "title", "detail", "instance"):
        if field in payload:
            assert payload[field] is not None
    if "status" in payload:
        assert isinstance(payload["status"], int)


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_teapot_defaults_to_json(client: TestClient) -> None:
    response = client.get("/teapot")

    assert response.status_code == 418
    assert response.headers["content-type"] == "application/problem+json"
    payload = response.json()
    _assert_problem_contract(payload)
    assert payload == {"status": 418, "title": "I'm a Teapot", "detail": "short and stout"}


def test_teapot_negotiates_xml(client: TestClient) -> None:
    response = client.get("/teapot", headers={"Accept": "text/html, application/xml;q=0.9"})

    assert response.status_code == 418
    assert response.headers["content-type"] == "application/problem+xml"
    assert decode_xml(response.content) == ProblemDetails.from_status_code(418).with_detail("short and stout")


def test_fixed_format_routes_ignore_accept(client: TestClient) -> None:
    json_response = client.get("/teapot/json", headers={"Accept": "application/problem+xml"})
    xml_response = client.get("/teapot/xml", headers={"Accept": "application/problem+json"})

    assert json_response.headers["content-type"] == "application/problem+json"
    assert xml_response.headers["content-type"] == "application/problem+xml"
    assert xml_response.status_code == 418


def test_out_of_credit_example(client: TestClient) -> None:
    response = client.get("/account/12345/msgs/abc")

    assert response.status_code == 403
    payload = response.json()
    _assert_problem_contract(payload)
    assert list(payload) == ["type", "status", "title", "detail", "instance", "balance", "accounts"]
    assert payload["instance"] == "/account/12345/msgs/abc"
    assert payload["accounts"] == ["/account/12345", "/account/67890"]

    decoded = decode_json(response.content, OutOfCredit)
    assert decoded.extensions == OutOfCredit(balance=30, accounts=["/account/12345", "/account/67890"])


def test_out_of_credit_example_as_xml(client: TestClient) -> None:
    response = client.get("/account/12345/msgs/abc", headers={"Accept": "application/problem+xml"})

    decoded = decode_xml(response.content, OutOfCredit)

    assert decoded.status == 403
    assert decoded.extensions.balance == 30


def test_method_not_allowed_is_a_problem(client: TestClient) -> None:
    response = client.post("/health")

    assert response.status_code == 405
    assert response.json() == {"status": 405, "title": "Method Not Allowed"}
