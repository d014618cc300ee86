import os
import subprocess
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence
import logging

logger = logging.getLogger(__name__)

# Windows process creation flags; values are fixed by the Win32 API
CREATE_NEW_PROCESS_GROUP = getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0x00000200)
CREATE_NO_WINDOW = getattr(subprocess, "CREATE_NO_WINDOW", 0x08000000)


@dataclass
class ToolResult:
    """Outcome of one tool invocation.

    ``output`` holds the combined stdout/stderr capture, ``error`` is None
    only when the tool ran and exited with status 0.
    """
    args: list
    output: str = ""
    error: Optional[str] = None
    return_code: Optional[int] = None
    execution_time: float = 0.0

    @property
    def success(self) -> bool:
        return self.error is None


class ToolRunner:
    """Run the external disassembly tool and capture its combined output"""

    def __init__(self, tool_path: str, tool_name: str = "radare2", timeout: Optional[float] = None):
        self.tool_path = tool_path
        self.tool_name = tool_name
        self.timeout = timeout

    def _popen_kwargs(self) -> dict:
        # Keep the tool from opening a console window on Windows
        if os.name == "nt":
            return {"creationflags": CREATE_NEW_PROCESS_GROUP | CREATE_NO_WINDOW}
        return {}

    def run(self, args: Sequence[str]) -> ToolResult:
        """Execute the tool with ``args`` and wait for it to finish.

        Never raises for tool failures: a missing executable, a non-zero exit
        or a timeout are all reported through ``ToolResult.error`` alongside
        whatever output was captured.
        """
        args = list(args)
        cmd = [self.tool_path, *args]
        start_time = datetime.now()
        result = ToolResult(args=args)

        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                timeout=self.timeout,
                **self._popen_kwargs()
            )
            result.output = _decode(proc.stdout)
            result.return_code = proc.returncode
            if proc.returncode != 0:
                result.error = f"{self.tool_name} error: {_describe_exit(proc.returncode)}"
        except subprocess.TimeoutExpired as e:
            # subprocess.run kills the child before re-raising
            result.output = _decode(e.output)
            result.error = f"{self.tool_name} error: timed out after {self.timeout:g} seconds"
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            result.error = f"{self.tool_name} error: {e}"

        result.execution_time = (datetime.now() - start_time).total_seconds()
        return result


def _decode(data) -> str:
    if not data:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")


def _describe_exit(return_code: int) -> str:
    if return_code < 0:
        return f"terminated by signal {-return_code}"
    return f"exit status {return_code}"
