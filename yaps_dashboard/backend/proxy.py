"""
Forwarding core shared by the Flask proxy and the serverless handler
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from yaps_dashboard.config import UPSTREAM_URL


logger = logging.getLogger("yaps.proxy")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}

USERNAME_REQUIRED = {"error": "Username is required"}
INTERNAL_ERROR = {"error": "Internal server error"}


@dataclass
class ProxyResponse:
    status_code: int
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    # False only for preflight; a JSON null body is still a body
    has_body: bool = True

    def body_bytes(self) -> bytes:
        if not self.has_body:
            return b""
        return json.dumps(self.body).encode("utf-8")


def json_headers() -> Dict[str, str]:
    headers = dict(CORS_HEADERS)
    headers["Content-Type"] = "application/json"
    return headers


def preflight() -> ProxyResponse:
    return ProxyResponse(204, None, dict(CORS_HEADERS), has_body=False)


def forward_yaps(username: Optional[str],
                 session: Optional[requests.Session] = None,
                 upstream_url: str = UPSTREAM_URL,
                 timeout: float = 10.0) -> ProxyResponse:
    """
    Forward a username lookup upstream and relay status and body verbatim

    Args:
        username: Value of the ``username`` query parameter
        session: requests session (module-level requests when None)
        upstream_url: Upstream Yaps endpoint
        timeout: Upstream request timeout in seconds

    Returns:
        ProxyResponse carrying the upstream status code and decoded JSON body,
        400 for a missing username, or 500 when the upstream is unreachable
        or answers with something other than JSON
    """
    if not username:
        return ProxyResponse(400, USERNAME_REQUIRED, json_headers())

    http = session or requests
    try:
        upstream = http.get(upstream_url, params={"username": username}, timeout=timeout)
        data = upstream.json()
    except (requests.RequestException, ValueError):
        logger.exception(f"Proxy error for @{username}")
        return ProxyResponse(500, INTERNAL_ERROR, json_headers())

    logger.info(f"@{username} -> HTTP {upstream.status_code}")
    return ProxyResponse(upstream.status_code, data, json_headers())
