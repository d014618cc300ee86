import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
import yaml
from dotenv import load_dotenv

load_dotenv()

DEFAULT_TOOL_PATH = "./tools/radare2-5.9.8-w64/bin/radare2.exe"
DEFAULT_FRONTEND_NAME = "AI-Disassembler.exe"
DEFAULT_PORT = 8080
DEFAULT_TOOL_TIMEOUT = 600.0

# Marks a field left at its default so the environment may fill it in
_UNSET = object()


class ConfigError(ValueError):
    """A configuration value cannot be used."""


def _env_number(name: str, value: str, kind):
    try:
        return kind(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {value!r}") from None


def executable_dir() -> Path:
    """Directory of the running bridge executable.

    Frozen builds report their own binary through sys.executable; a plain
    interpreter run uses the directory of the launched script. Falls back to
    the working directory when neither can be determined.
    """
    try:
        if getattr(sys, "frozen", False):
            return Path(sys.executable).resolve().parent
        if sys.argv and sys.argv[0]:
            return Path(sys.argv[0]).resolve().parent
    except OSError:
        pass
    return Path.cwd()


def default_frontend_candidates(exe_dir: Path, cwd: Path, name: str = DEFAULT_FRONTEND_NAME) -> List[Path]:
    """Ordered front-end locations; earlier entries win."""
    return [
        exe_dir / ".." / "dist" / "win-unpacked" / name,
        exe_dir / "dist" / "win-unpacked" / name,
        exe_dir / "app" / "dist" / "win-unpacked" / name,
        cwd / "dist" / "win-unpacked" / name,
        cwd / "app" / "dist" / "win-unpacked" / name,
    ]


@dataclass
class BridgeConfig:
    """Configuration for the Metys bridge process"""

    # Listener
    host: str = ""  # all interfaces
    port: int = None  # DEFAULT_PORT unless METYS_BRIDGE_PORT is set
    endpoint_path: str = "/radare2"

    # External tool
    tool_name: str = "radare2"
    tool_path: str = None
    tool_timeout: Optional[float] = _UNSET  # seconds; None disables

    # Front-end
    launch_frontend: bool = True
    frontend_name: str = DEFAULT_FRONTEND_NAME
    frontend_candidates: List[Path] = None

    # Paths
    data_dir: Path = None
    logs_dir: Path = None

    def __post_init__(self):
        # Environment fallbacks (explicit fields win)
        if self.tool_path is None:
            self.tool_path = os.getenv("METYS_TOOL_PATH") or DEFAULT_TOOL_PATH

        env_host = os.getenv("METYS_BRIDGE_HOST")
        if env_host is not None and self.host == "":
            self.host = env_host

        if self.port is None:
            env_port = os.getenv("METYS_BRIDGE_PORT")
            self.port = _env_number("METYS_BRIDGE_PORT", env_port, int) if env_port else DEFAULT_PORT

        if self.tool_timeout is _UNSET:
            env_timeout = os.getenv("METYS_TOOL_TIMEOUT")
            if env_timeout is None:
                self.tool_timeout = DEFAULT_TOOL_TIMEOUT
            elif env_timeout.strip():
                self.tool_timeout = _env_number("METYS_TOOL_TIMEOUT", env_timeout, float)
            else:
                self.tool_timeout = None
        if self.tool_timeout is not None and float(self.tool_timeout) <= 0:
            self.tool_timeout = None

        if self.frontend_candidates is None:
            env_paths = os.getenv("METYS_FRONTEND_PATHS")
            if env_paths:
                self.frontend_candidates = [Path(p) for p in env_paths.split(os.pathsep) if p]
            else:
                self.frontend_candidates = default_frontend_candidates(
                    executable_dir(), Path.cwd(), self.frontend_name
                )
        else:
            self.frontend_candidates = [Path(p) for p in self.frontend_candidates]

        if self.data_dir is None:
            self.data_dir = Path(os.getenv("DATA_DIR", Path.cwd() / "data"))
        if self.logs_dir is None:
            self.logs_dir = self.data_dir / "logs"

    @property
    def bind_address(self) -> str:
        return f"{self.host or '0.0.0.0'}:{self.port}"

    @classmethod
    def from_yaml(cls, path: Path) -> "BridgeConfig":
        """Load configuration from YAML file
        Note: Coerce known path-like fields to Path for consistency.
        """
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        path_fields = ['data_dir', 'logs_dir']
        for field in path_fields:
            if field in data and data[field] is not None:
                data[field] = Path(data[field])

        return cls(**data)

    def to_yaml(self, path: Path):
        """Save configuration to YAML file"""
        data = {}
        for k, v in self.__dict__.items():
            if isinstance(v, Path):
                v = str(v)
            elif k == 'frontend_candidates':
                v = [str(p) for p in v]
            data[k] = v
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False)
