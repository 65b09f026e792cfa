"""
Runtime settings, read from the environment
"""

import os
from dataclasses import dataclass, replace
from typing import Optional


UPSTREAM_URL = "https://api.kaito.ai/api/v1/yaps"
MAX_USERS = 2


@dataclass(frozen=True)
class Settings:
    upstream_url: str = UPSTREAM_URL
    api_url: str = UPSTREAM_URL
    request_timeout: float = 10.0
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    secret_key: Optional[str] = None

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values)


def load_settings() -> Settings:
    upstream_url = os.getenv("YAPS_UPSTREAM_URL", UPSTREAM_URL)
    return Settings(
        upstream_url=upstream_url,
        # The client talks to the upstream directly unless pointed at a proxy
        api_url=os.getenv("YAPS_API_URL", upstream_url),
        request_timeout=float(os.getenv("YAPS_TIMEOUT", "10")),
        host=os.getenv("YAPS_HOST", "0.0.0.0"),
        port=int(os.getenv("YAPS_PORT", "8080")),
        log_level=os.getenv("YAPS_LOG_LEVEL", "INFO").upper(),
        secret_key=os.getenv("YAPS_SECRET_KEY"),
    )
