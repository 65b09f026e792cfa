from __future__ import annotations

import pytest

from yaps_dashboard.errors import UserNotFoundError
from yaps_dashboard.models import YapsData


NOT_JSON = object()


class FakeResponse:
    def __init__(self, status_code: int, payload=None) -> None:
        self.status_code = status_code
        self.payload = payload

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self.payload is NOT_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class FakeSession:
    """Stands in for requests.Session; maps username to a response or exception."""

    def __init__(self, responses) -> None:
        self.responses = responses
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        outcome = self.responses[params["username"]]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeClient:
    """Stands in for YapsClient; unknown usernames are not found."""

    def __init__(self, records) -> None:
        self.records = records
        self.fetched = []

    def fetch(self, username: str) -> YapsData:
        self.fetched.append(username)
        outcome = self.records.get(username)
        if outcome is None:
            raise UserNotFoundError(username)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_payload(username: str, user_id: str, scale: float = 1.0) -> dict:
    return {
        "username": username,
        "user_id": user_id,
        "yaps_l24h": 1.5 * scale,
        "yaps_l48h": 3.25 * scale,
        "yaps_l7d": 12.0 * scale,
        "yaps_l30d": 48.125 * scale,
        "yaps_l3m": 140.0 * scale,
        "yaps_l6m": 300.5 * scale,
        "yaps_l12m": 610.0 * scale,
        "yaps_all": 1234.567 * scale,
    }


@pytest.fixture()
def alice_payload() -> dict:
    return make_payload("alice", "1001")


@pytest.fixture()
def bob_payload() -> dict:
    return make_payload("bob", "2002", scale=2.0)


@pytest.fixture()
def alice(alice_payload) -> YapsData:
    return YapsData.from_json(alice_payload)


@pytest.fixture()
def bob(bob_payload) -> YapsData:
    return YapsData.from_json(bob_payload)
