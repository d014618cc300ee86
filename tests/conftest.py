"""Shared fixtures for the bridge tests."""

import sys
import threading
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from metys_bridge.core.config import BridgeConfig
from metys_bridge.execution.tool_runner import ToolResult
from metys_bridge.server import BridgeInterface


class FakeRunner:
    """Records tool invocations instead of spawning processes."""

    def __init__(self, output: str = "", error: str = None, return_code: int = 0):
        self.output = output
        self.error = error
        self.return_code = return_code
        self.calls = []
        self._lock = threading.Lock()

    def run(self, args):
        with self._lock:
            self.calls.append(list(args))
        return ToolResult(args=list(args), output=self.output, error=self.error, return_code=self.return_code)


@pytest.fixture
def make_config(tmp_path):
    def _make(**overrides):
        values = dict(
            host="127.0.0.1",
            port=0,
            launch_frontend=False,
            frontend_candidates=[],
            tool_timeout=None,
            data_dir=tmp_path / "data",
        )
        values.update(overrides)
        return BridgeConfig(**values)
    return _make


@pytest.fixture
def bridge(make_config):
    """Start a live bridge server on an ephemeral port.

    Returns a factory ``bridge(runner, **kwargs) -> endpoint url``.
    """
    interfaces = []

    def _start(runner, event_observer=None, base_dir=None):
        interface = BridgeInterface(make_config(), runner=runner, event_observer=event_observer, base_dir=base_dir)
        assert interface.start()
        interfaces.append(interface)
        port = interface.server_address[1]
        return f"http://127.0.0.1:{port}/radare2"

    yield _start

    for interface in interfaces:
        interface.shutdown()
