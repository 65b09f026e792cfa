from __future__ import annotations

import pytest
import requests

from conftest import NOT_JSON, FakeResponse, FakeSession
from yaps_dashboard.backend.api_server import create_app
from yaps_dashboard.backend.proxy import CORS_HEADERS, forward_yaps
from yaps_dashboard.config import Settings


def _app(responses):
    session = FakeSession(responses)
    app = create_app(Settings(upstream_url="https://upstream.test/yaps", request_timeout=3), session=session)
    app.testing = True
    return app.test_client(), session


def _assert_cors(response) -> None:
    for name, value in CORS_HEADERS.items():
        assert response.headers[name] == value


def test_forward_requires_username() -> None:
    result = forward_yaps(None, session=FakeSession({}))

    assert result.status_code == 400
    assert result.body == {"error": "Username is required"}
    assert result.headers["Access-Control-Allow-Origin"] == "*"


def test_forward_sends_username_upstream(alice_payload) -> None:
    session = FakeSession({"alice": FakeResponse(200, alice_payload)})

    result = forward_yaps("alice", session=session, upstream_url="https://upstream.test/yaps", timeout=3)

    assert result.status_code == 200
    assert result.body == alice_payload
    assert session.calls == [{
        "url": "https://upstream.test/yaps",
        "params": {"username": "alice"},
        "headers": None,
        "timeout": 3,
    }]


@pytest.mark.parametrize("outcome", [
    requests.ConnectionError("connection refused"),
    requests.Timeout("read timed out"),
    FakeResponse(502, NOT_JSON),
])
def test_forward_failure_is_internal_error(outcome) -> None:
    result = forward_yaps("alice", session=FakeSession({"alice": outcome}))

    assert result.status_code == 500
    assert result.body == {"error": "Internal server error"}


def test_missing_username_returns_400() -> None:
    client, session = _app({})

    response = client.get("/yaps")

    assert response.status_code == 400
    assert response.get_json() == {"error": "Username is required"}
    assert session.calls == []
    _assert_cors(response)


@pytest.mark.parametrize("path", ["/yaps", "/api/yaps"])
def test_success_is_relayed(path, alice_payload) -> None:
    client, _ = _app({"alice": FakeResponse(200, alice_payload)})

    response = client.get(path, query_string={"username": "alice"})

    assert response.status_code == 200
    assert response.get_json() == alice_payload
    assert response.headers["Content-Type"] == "application/json"
    _assert_cors(response)


@pytest.mark.parametrize("status, body", [
    (404, {"error": "User not found"}),
    (429, {"error": "Too many requests"}),
    (503, {"message": "maintenance"}),
])
def test_upstream_errors_pass_through(status, body) -> None:
    client, _ = _app({"ghost": FakeResponse(status, body)})

    response = client.get("/api/yaps?username=ghost")

    assert response.status_code == status
    assert response.get_json() == body
    _assert_cors(response)


def test_unreachable_upstream_returns_500() -> None:
    client, _ = _app({"alice": requests.ConnectionError("boom")})

    response = client.get("/yaps?username=alice")

    assert response.status_code == 500
    assert response.get_json() == {"error": "Internal server error"}
    _assert_cors(response)


def test_null_body_is_relayed() -> None:
    client, _ = _app({"nobody": FakeResponse(200, None)})

    response = client.get("/yaps?username=nobody")

    assert response.status_code == 200
    assert response.data.strip() == b"null"
    assert forward_yaps("nobody", session=FakeSession({"nobody": FakeResponse(200, None)})).body_bytes() == b"null"
    _assert_cors(response)


@pytest.mark.parametrize("path", ["/yaps", "/api/yaps"])
def test_preflight_returns_204(path) -> None:
    client, session = _app({})

    response = client.options(path, headers={
        "Origin": "http://localhost:5173",
        "Access-Control-Request-Method": "GET",
    })

    assert response.status_code == 204
    assert response.data == b""
    assert session.calls == []
    _assert_cors(response)


def test_other_routes_get_cors_origin() -> None:
    client, _ = _app({})

    health = client.get("/health", headers={"Origin": "http://localhost:5173"})
    missing = client.get("/nope", headers={"Origin": "http://localhost:5173"})

    assert health.data == b"alive"
    assert health.headers["Access-Control-Allow-Origin"] == "*"
    assert missing.status_code == 404
    assert missing.headers["Access-Control-Allow-Origin"] == "*"
