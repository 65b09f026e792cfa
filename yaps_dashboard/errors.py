"""
Errors surfaced to the user while fetching Yaps data
"""

from typing import Optional


GENERIC_ERROR = "An unexpected error occurred. Please try again."
FETCH_FAILED = "Failed to fetch data. Please try again later."
INVALID_DATA = "Invalid data received from the server."
RATE_LIMITED = "Rate limit exceeded. Please wait a moment and try again."


class YapsError(Exception):
    """Base error; the message is meant to be shown as-is."""

    def __init__(self, message: str = GENERIC_ERROR, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UserNotFoundError(YapsError):
    def __init__(self, username: str):
        super().__init__(
            f"User @{username} not found. Please check the username and try again.",
            status_code=404,
        )
        self.username = username


class RateLimitError(YapsError):
    def __init__(self):
        super().__init__(RATE_LIMITED, status_code=429)


class UpstreamError(YapsError):
    pass


class InvalidPayloadError(YapsError):
    def __init__(self, status_code: Optional[int] = None):
        super().__init__(INVALID_DATA, status_code=status_code)
