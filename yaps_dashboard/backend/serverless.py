"""
Serverless function for the Yaps proxy
Endpoint: /yaps

Query Parameters:
  - username: Account handle to look up (required)
"""

import logging
from http.server import BaseHTTPRequestHandler
from urllib.parse import parse_qs, urlparse

from yaps_dashboard.backend.proxy import ProxyResponse, forward_yaps, preflight
from yaps_dashboard.config import load_settings


logger = logging.getLogger("yaps.proxy")


class handler(BaseHTTPRequestHandler):
    def do_OPTIONS(self):
        self._send(preflight())

    def do_GET(self):
        params = parse_qs(urlparse(self.path).query)
        username = params.get("username", [None])[0]

        settings = load_settings()
        self._send(forward_yaps(
            username,
            upstream_url=settings.upstream_url,
            timeout=settings.request_timeout,
        ))

    def _send(self, result: ProxyResponse):
        body = result.body_bytes()
        self.send_response(result.status_code)
        for name, value in result.headers.items():
            self.send_header(name, value)
        if result.has_body:
            self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if result.has_body:
            self.wfile.write(body)

    def log_message(self, format, *args):
        logger.info("%s - %s", self.address_string(), format % args)
