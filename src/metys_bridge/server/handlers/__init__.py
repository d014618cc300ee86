"""HTTP request handlers for the bridge endpoint."""

from .base import BridgeRequestHandler

__all__ = ['BridgeRequestHandler']
