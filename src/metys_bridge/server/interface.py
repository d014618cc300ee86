"""Lifecycle wrapper around the bridge HTTP server.

This module provides the BridgeInterface class which binds the listening
port, serves requests on a background thread and shuts the server down.
"""

import logging
import threading
from typing import Optional

from ..core.config import BridgeConfig
from .handlers import BridgeRequestHandler
from .server import BridgeHTTPServer, EventObserver

logger = logging.getLogger(__name__)


class BridgeInterface:
    """Owns the bridge listener for the lifetime of the process.

    A port that is already bound is taken as a sign that another bridge
    instance is serving; ``start`` then returns False instead of raising.
    """

    def __init__(self, config: BridgeConfig, runner=None, event_observer: Optional[EventObserver] = None,
                 base_dir: Optional[str] = None):
        self.config = config
        self.runner = runner
        self.event_observer = event_observer
        self.base_dir = base_dir

        self._httpd: Optional[BridgeHTTPServer] = None
        self._server_thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._httpd is not None

    @property
    def server_address(self):
        return self._httpd.server_address if self._httpd else None

    def bind(self) -> bool:
        """Bind the listening socket; False when the port is taken."""
        try:
            self._httpd = BridgeHTTPServer(
                (self.config.host, self.config.port),
                BridgeRequestHandler,
                self.config,
                runner=self.runner,
                event_observer=self.event_observer,
                base_dir=self.base_dir,
            )
        except OSError as e:
            logger.info(f"Port {self.config.port} already in use, assuming server is running ({e})")
            self._httpd = None
            return False
        return True

    def start(self) -> bool:
        """Bind and serve on a daemon thread."""
        if self._httpd is None and not self.bind():
            return False

        httpd = self._httpd

        def _serve():
            try:
                httpd.serve_forever(poll_interval=0.5)
            except Exception:
                logger.exception("HTTP server error")

        self._server_thread = threading.Thread(target=_serve, name="BridgeHTTPServer", daemon=True)
        self._server_thread.start()

        host, port = httpd.server_address[:2]
        logger.info(f"Server started on {host or '0.0.0.0'}:{port}")
        return True

    def shutdown(self):
        """Stop serving and release the port."""
        httpd, self._httpd = self._httpd, None
        if httpd is None:
            return
        if self._server_thread is not None:
            httpd.shutdown()
            self._server_thread.join(timeout=5)
            self._server_thread = None
        httpd.server_close()
