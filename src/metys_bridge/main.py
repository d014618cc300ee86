#!/usr/bin/env python3
"""
Metys bridge - launches the disassembler front-end and serves its tool endpoint
"""

import argparse
import logging
import signal
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from metys_bridge.core.config import BridgeConfig, ConfigError
from metys_bridge.launcher.frontend import (
    FrontendLaunchError,
    FrontendNotFoundError,
    FrontendProcess,
    find_frontend,
)
from metys_bridge.server import BridgeInterface

logger = logging.getLogger(__name__)


def setup_logging(logs_dir: Path, level: str = "INFO"):
    """Setup logging with a rotating file handler under data/logs/"""

    logs_dir.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        logs_dir / 'bridge.log',
        maxBytes=20 * 1024 * 1024,  # 20MB
        backupCount=10,
        encoding='utf-8'
    )

    console_handler = logging.StreamHandler()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[file_handler, console_handler]
    )


class BridgeRunner:
    """Runs the front-end and the bridge server for one process lifetime.

    With ``launch_frontend`` set, the process lives exactly as long as the
    front-end child. Otherwise the server runs standalone until signalled.
    """

    def __init__(self, config: BridgeConfig, runner=None, event_observer=None):
        self.config = config
        self.interface = BridgeInterface(config, runner=runner, event_observer=event_observer)
        self.frontend: Optional[FrontendProcess] = None
        self._stop = threading.Event()

    def initialize(self) -> bool:
        """Start the front-end (if enabled) and then the listener.

        Raises FrontendNotFoundError / FrontendLaunchError before anything
        is bound. Returns whether this process is serving requests.
        """
        if self.config.launch_frontend:
            executable = find_frontend(self.config.frontend_candidates)
            self.frontend = FrontendProcess(executable).start()

        return self.interface.start()

    def run(self) -> int:
        """Block for the rest of the process lifetime."""
        try:
            if self.frontend is not None:
                self.frontend.wait()
            else:
                while not self._stop.wait(0.5):
                    pass
        finally:
            self.shutdown()
        return 0

    def shutdown(self):
        if self.interface.running:
            logger.info("Shutting down bridge server...")
        self.interface.shutdown()

    def handle_signal(self, sig, frame):
        """Handle system signals"""
        logger.info(f"Received signal {sig}")
        self._stop.set()
        if self.frontend is not None:
            self.frontend.terminate()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="metys-bridge",
        description="Launch the disassembler front-end and bridge its requests to radare2",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file (default: ./config.yaml if present)"
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port for the bridge endpoint"
    )
    parser.add_argument(
        "--tool",
        help="Path to the radare2 executable"
    )
    parser.add_argument(
        "--no-frontend",
        action="store_true",
        help="Run the bridge server standalone without launching the front-end"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console and file log level"
    )
    return parser


def load_config(args: argparse.Namespace) -> BridgeConfig:
    config_path = args.config
    if not config_path:
        default_config = Path.cwd() / "config.yaml"
        if default_config.exists():
            config_path = default_config

    if config_path:
        config = BridgeConfig.from_yaml(config_path)
    else:
        config = BridgeConfig()

    # Command line wins over file and environment
    if args.port is not None:
        config.port = args.port
    if args.tool:
        config.tool_path = args.tool
    if args.no_frontend:
        config.launch_frontend = False
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args)
    except ConfigError as e:
        # Logging is not configured yet
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    setup_logging(config.logs_dir, args.log_level)

    runner = BridgeRunner(config)

    signal.signal(signal.SIGINT, runner.handle_signal)
    signal.signal(signal.SIGTERM, runner.handle_signal)

    try:
        serving = runner.initialize()
    except (FrontendNotFoundError, FrontendLaunchError) as e:
        logger.critical(str(e))
        return 1

    if not serving and not config.launch_frontend:
        # Standalone mode has nothing else to do without the port
        logger.critical(f"Cannot listen on {config.bind_address}: port already in use")
        return 1

    return runner.run()


if __name__ == "__main__":
    raise SystemExit(main())
