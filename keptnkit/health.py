"""A minimal HTTP endpoint answering health checks on ``/health``."""

from __future__ import annotations

import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

_HEALTH_BODY = json.dumps({"status": "OK"}, separators=(",", ":")).encode()


class _HealthHandler(BaseHTTPRequestHandler):
    def _respond(self) -> None:
        if urlsplit(self.path).path != "/health":
            body = b"404 page not found\n"
            self.send_response(404)
            self.send_header("Content-Type", "text/plain; charset=utf-8")
        else:
            body = _HEALTH_BODY
            self.send_response(200)
            self.send_header("content-type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD":
            try:
                self.wfile.write(body)
            except OSError as exc:
                logger.warning("%s", exc)

    do_GET = do_POST = do_PUT = do_DELETE = do_HEAD = _respond

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        logger.debug(format, *args)


def create_health_server(host: str = "", port: int | str = 8080) -> ThreadingHTTPServer:
    """Create (but do not start) a server answering ``/health``."""
    return ThreadingHTTPServer((host, int(port)), _HealthHandler)


def run_health_endpoint(port: int | str) -> None:
    """Serve the health endpoint on all interfaces until interrupted."""
    try:
        with create_health_server("", port) as server:
            server.serve_forever()
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)