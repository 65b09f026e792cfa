"""
Yaps Analytics Dashboard

Attention metrics for one or two X accounts from the Kaito Yaps API,
with a CORS proxy, web and terminal dashboards, and chart reports.
"""

__version__ = "1.0.0"

from yaps_dashboard.client import YapsClient
from yaps_dashboard.dashboard import DashboardState
from yaps_dashboard.errors import (
    InvalidPayloadError,
    RateLimitError,
    UpstreamError,
    UserNotFoundError,
    YapsError,
)
from yaps_dashboard.models import YapsData

__all__ = [
    'YapsClient',
    'DashboardState',
    'YapsData',
    'YapsError',
    'UserNotFoundError',
    'RateLimitError',
    'UpstreamError',
    'InvalidPayloadError',
]
