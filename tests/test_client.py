from __future__ import annotations

import pytest
import requests

from conftest import NOT_JSON, FakeResponse, FakeSession
from yaps_dashboard.client import YapsClient
from yaps_dashboard.errors import (
    InvalidPayloadError,
    RateLimitError,
    UpstreamError,
    UserNotFoundError,
    YapsError,
)


def _client(outcome, username="alice") -> YapsClient:
    return YapsClient("https://proxy.test/yaps", session=FakeSession({username: outcome}), timeout=2)


def test_fetch_parses_record(alice_payload) -> None:
    client = _client(FakeResponse(200, alice_payload))

    record = client.fetch("  alice ")

    assert record.username == "alice"
    assert record.user_id == "1001"
    assert record.yaps_all == pytest.approx(1234.567)
    call = client.session.calls[0]
    assert call["url"] == "https://proxy.test/yaps"
    assert call["params"] == {"username": "alice"}
    assert call["headers"] == {"Accept": "application/json"}
    assert call["timeout"] == 2


def test_empty_username_is_rejected() -> None:
    with pytest.raises(ValueError):
        _client(FakeResponse(200, {})).fetch("   ")


def test_not_found_message() -> None:
    with pytest.raises(UserNotFoundError) as excinfo:
        _client(FakeResponse(404, {"error": "nope"}), "ghost").fetch("ghost")

    assert excinfo.value.message == "User @ghost not found. Please check the username and try again."
    assert excinfo.value.status_code == 404


def test_rate_limit_message() -> None:
    with pytest.raises(RateLimitError) as excinfo:
        _client(FakeResponse(429, {})).fetch("alice")

    assert excinfo.value.message == "Rate limit exceeded. Please wait a moment and try again."


def test_upstream_error_text_is_used() -> None:
    with pytest.raises(UpstreamError) as excinfo:
        _client(FakeResponse(500, {"error": "Internal server error"})).fetch("alice")

    assert excinfo.value.message == "Internal server error"
    assert excinfo.value.status_code == 500


def test_upstream_error_without_text_is_generic() -> None:
    with pytest.raises(UpstreamError) as excinfo:
        _client(FakeResponse(503, {"status": "down"})).fetch("alice")

    assert excinfo.value.message == "Failed to fetch data. Please try again later."


@pytest.mark.parametrize("response", [
    FakeResponse(200, {"username": "alice"}),
    FakeResponse(200, None),
    FakeResponse(200, NOT_JSON),
    FakeResponse(200, {"username": "alice", "yaps_all": "lots"}),
])
def test_malformed_payload(response) -> None:
    with pytest.raises(InvalidPayloadError) as excinfo:
        _client(response).fetch("alice")

    assert excinfo.value.message == "Invalid data received from the server."


def test_network_failure_is_generic() -> None:
    with pytest.raises(YapsError) as excinfo:
        _client(requests.ConnectionError("refused")).fetch("alice")

    assert excinfo.value.message == "An unexpected error occurred. Please try again."
    assert excinfo.value.status_code is None


@pytest.mark.parametrize("response, error", [
    (FakeResponse(404, NOT_JSON), UserNotFoundError),
    (FakeResponse(429, NOT_JSON), RateLimitError),
])
def test_status_wins_over_unreadable_body(response, error) -> None:
    with pytest.raises(error):
        _client(response).fetch("alice")


def test_unreadable_error_body_is_generic() -> None:
    with pytest.raises(UpstreamError) as excinfo:
        _client(FakeResponse(502, NOT_JSON)).fetch("alice")

    assert excinfo.value.message == "Failed to fetch data. Please try again later."
    assert excinfo.value.status_code == 502
