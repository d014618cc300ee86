"""HTTP bridge between the front-end and the external disassembly tool.

This module provides the threaded server, its request handler and the
interface that owns the listener's lifecycle.
"""

from .interface import BridgeInterface
from .server import BridgeHTTPServer
from .handlers import BridgeRequestHandler

__all__ = ['BridgeInterface', 'BridgeHTTPServer', 'BridgeRequestHandler']
