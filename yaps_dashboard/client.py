"""
HTTP client for the Yaps API (directly, or through the proxy)
"""

import logging
from typing import Optional

import requests

from yaps_dashboard.config import UPSTREAM_URL
from yaps_dashboard.errors import (
    FETCH_FAILED,
    GENERIC_ERROR,
    InvalidPayloadError,
    RateLimitError,
    UpstreamError,
    UserNotFoundError,
    YapsError,
)
from yaps_dashboard.models import YapsData


class YapsClient:
    """Fetch one metrics record per username"""

    def __init__(self, base_url: str = UPSTREAM_URL,
                 session: Optional[requests.Session] = None,
                 timeout: float = 10.0):
        self.base_url = base_url
        self.session = session or requests.Session()
        self.timeout = timeout
        self.logger = logging.getLogger("yaps.client")

    def fetch(self, username: str) -> YapsData:
        """
        Fetch the Yaps record for a username

        Args:
            username: Account handle, without the leading @

        Returns:
            Parsed YapsData

        Raises:
            ValueError: if username is empty
            YapsError: for every failure the user should see
        """
        username = (username or "").strip()
        if not username:
            raise ValueError("username is required")

        try:
            response = self.session.get(
                self.base_url,
                params={"username": username},
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            self.logger.warning(f"Request for @{username} failed: {e}")
            raise YapsError(GENERIC_ERROR) from e

        status = response.status_code
        if status == 404:
            self.logger.warning(f"HTTP 404 for @{username}")
            raise UserNotFoundError(username)
        if status == 429:
            self.logger.warning(f"HTTP 429 for @{username}")
            raise RateLimitError()

        try:
            data = response.json()
        except ValueError as e:
            self.logger.warning(f"Non-JSON body for @{username} (HTTP {status})")
            if not response.ok:
                raise UpstreamError(FETCH_FAILED, status_code=status) from e
            raise InvalidPayloadError(status_code=status) from e

        if not response.ok:
            self.logger.warning(f"HTTP {status} for @{username}")
            if isinstance(data, dict) and data.get("error"):
                raise UpstreamError(str(data["error"]), status_code=status)
            raise UpstreamError(FETCH_FAILED, status_code=status)

        record = YapsData.from_json(data)
        self.logger.debug(f"Fetched @{username}: all-time {record.yaps_all}")
        return record
