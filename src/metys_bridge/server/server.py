"""HTTP server for the bridge endpoint.

This module provides the BridgeHTTPServer class which holds:
- the bridge configuration (endpoint path, tool name)
- the tool runner used by request handlers
- an optional event observer notified about every request
"""

import logging
import os
import sys
from http.server import ThreadingHTTPServer
from typing import Any, Callable, Dict, Optional, Tuple

from ..core.config import BridgeConfig
from ..execution.tool_runner import ToolRunner

logger = logging.getLogger(__name__)

EventObserver = Callable[[str, Dict[str, Any]], None]

_CLIENT_DISCONNECTS = (ConnectionAbortedError, BrokenPipeError, ConnectionResetError)


class BridgeHTTPServer(ThreadingHTTPServer):
    """Threaded HTTP server; one handler thread per connection.

    Handlers share nothing mutable: each request runs its own tool process.
    """

    daemon_threads = True
    # On Windows SO_REUSEADDR lets a second socket bind an active port, which
    # would hide a running instance.
    allow_reuse_address = os.name != "nt"

    def __init__(
        self,
        server_address: Tuple[str, int],
        RequestHandlerClass,
        config: BridgeConfig,
        runner=None,
        event_observer: Optional[EventObserver] = None,
        base_dir: Optional[str] = None,
    ):
        super().__init__(server_address, RequestHandlerClass)
        self.config = config
        self.runner = runner or ToolRunner(config.tool_path, config.tool_name, config.tool_timeout)
        self.event_observer = event_observer
        # None resolves request paths against the process working directory
        self.base_dir = base_dir

    def emit_event(self, event_name: str, data: Optional[Dict[str, Any]] = None):
        """Notify the observer; never raises into the request handler."""
        if self.event_observer is None:
            return
        try:
            self.event_observer(event_name, data or {})
        except Exception as e:
            logger.debug("Event observer failed for %s: %s", event_name, e)

    def handle_error(self, request, client_address):
        # Suppress benign client disconnects
        exc_type, exc_value, _ = sys.exc_info()
        if exc_type is not None and issubclass(exc_type, _CLIENT_DISCONNECTS):
            logger.debug("Bridge HTTP: suppressed client disconnect from %s: %s", client_address, exc_value)
            return
        logger.error("Bridge HTTP: error while handling request from %s", client_address, exc_info=True)
