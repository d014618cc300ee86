"""Front-end discovery and supervision.

The desktop front-end is an external executable. It is located by probing an
ordered list of candidate paths, started once in its own directory, and its
exit ends the bridge process.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


class FrontendNotFoundError(FileNotFoundError):
    """None of the candidate front-end paths is a regular file."""

    def __init__(self, tried: Sequence[Path]):
        self.tried = [str(p) for p in tried]
        super().__init__(f"Could not find frontend executable; tried: {self.tried}")


class FrontendLaunchError(RuntimeError):
    """The front-end executable exists but could not be started."""


def find_frontend(candidates: Sequence[Path]) -> Path:
    """Return the first candidate that exists and is not a directory."""
    for candidate in candidates:
        path = Path(candidate)
        if path.is_file():
            return path
    raise FrontendNotFoundError(candidates)


class FrontendProcess:
    """Start the front-end and wait for it to exit"""

    def __init__(self, executable: Path, args: Optional[List[str]] = None):
        self.executable = Path(executable)
        self.args = list(args or [])
        self._proc: Optional[subprocess.Popen] = None

    @property
    def pid(self) -> Optional[int]:
        return self._proc.pid if self._proc else None

    def start(self) -> "FrontendProcess":
        logger.info(f"Launching frontend: {self.executable}")
        try:
            # Run in its own directory so it can find its bundled resources
            self._proc = subprocess.Popen(
                [str(self.executable), *self.args],
                cwd=str(self.executable.parent),
            )
        except OSError as e:
            raise FrontendLaunchError(f"Error launching frontend {self.executable}: {e}") from e
        logger.info(f"Frontend process started with PID: {self._proc.pid}")
        return self

    def wait(self) -> int:
        """Block until the front-end exits and return its exit status."""
        if self._proc is None:
            raise RuntimeError("frontend process was never started")
        return_code = self._proc.wait()
        if return_code != 0:
            logger.warning(f"Frontend exited with error: exit status {return_code}")
        else:
            logger.info("Frontend exited")
        return return_code

    def terminate(self):
        if self._proc is not None and self._proc.poll() is None:
            logger.info(f"Terminating frontend (PID {self._proc.pid})")
            self._proc.terminate()
