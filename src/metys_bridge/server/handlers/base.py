"""Base HTTP request handler for the bridge endpoint.

This module provides the base request handler class with the CORS policy and
utility methods for plain-text and JSON responses.
"""

import json
import logging
from http.server import BaseHTTPRequestHandler
from typing import Any, Dict

logger = logging.getLogger(__name__)

CORS_HEADERS = (
    ("Access-Control-Allow-Origin", "*"),
    ("Access-Control-Allow-Methods", "POST, OPTIONS"),
    ("Access-Control-Allow-Headers", "Content-Type"),
)


class BridgeRequestHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the tool bridge.

    Every response, including errors, carries the CORS headers since the
    front-end calls from its own origin.
    """

    def log_message(self, format: str, *args) -> None:  # reduce console noise
        logger.debug("Bridge HTTP: " + format, *args)

    @property
    def clean_path(self) -> str:
        return self.path.split("?", 1)[0] if self.path else "/"

    def _is_bridge_path(self) -> bool:
        return self.clean_path == self.server.config.endpoint_path

    def end_headers(self):
        # Covers send_error responses (501, 414, ...) as well as our own
        for name, value in CORS_HEADERS:
            self.send_header(name, value)
        super().end_headers()

    def _send(self, status: int, body: bytes, content_type: str = None, extra_headers=()):
        try:
            self.send_response(status)
            for name, value in extra_headers:
                self.send_header(name, value)
            if content_type:
                self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            if body:
                self.wfile.write(body)
        except (ConnectionAbortedError, BrokenPipeError, ConnectionResetError) as e:
            logger.debug("Bridge HTTP: client went away before response was written: %s", e)

    def _text(self, status: int, message: str, extra_headers=()):
        """Plain-text error response."""
        body = (message + "\n").encode("utf-8")
        self._send(
            status,
            body,
            "text/plain; charset=utf-8",
            (("X-Content-Type-Options", "nosniff"), *extra_headers),
        )

    def _json(self, status: int, data: Dict[str, Any]):
        """Send JSON response; falls back to a 500 when encoding fails."""
        try:
            body = (json.dumps(data) + "\n").encode("utf-8")
        except (TypeError, ValueError) as e:
            logger.error("Error encoding response: %s", e)
            self._text(500, "Internal server error")
            return
        self._send(status, body, "application/json")

    def _read_body(self) -> bytes:
        length = int(self.headers.get("Content-Length") or "0")
        if length < 0:
            raise ValueError(f"invalid Content-Length: {length}")
        return self.rfile.read(length) if length > 0 else b""

    def _discard_body(self):
        try:
            self._read_body()
        except ValueError as e:
            logger.debug("Bridge HTTP: unreadable request body: %s", e)

    # Import route handlers
    from .post_routes import do_POST
    from .options_routes import do_GET, do_OPTIONS
