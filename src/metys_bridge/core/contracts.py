"""Wire contracts for the bridge endpoint.

Defines the request and response bodies exchanged with the front-end and the
path resolution applied to a request before the tool is invoked. Keep minimal
and JSON-friendly.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class RequestValidationError(ValueError):
    """Request body is not valid JSON or does not have the expected shape."""


class PathResolutionError(ValueError):
    """The requested file path cannot be turned into an absolute path."""


@dataclass
class AnalysisRequest:
    """Body of ``POST /radare2``.

    Attributes:
        file_path: Caller-relative or absolute path of the binary to analyze.
            Sent on the wire as ``filepath``.
        params: Tool arguments, passed through in order.
    """
    file_path: str = ""
    params: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "AnalysisRequest":
        """Build a request from a decoded JSON body.

        Missing fields take their zero value. Fields of the wrong type make
        the whole body invalid.
        """
        if not isinstance(data, dict):
            raise RequestValidationError("request body must be a JSON object")

        file_path = data.get("filepath")
        if file_path is None:
            file_path = ""
        elif not isinstance(file_path, str):
            raise RequestValidationError("'filepath' must be a string")

        params = data.get("params")
        if params is None:
            params = []
        elif not isinstance(params, list) or not all(isinstance(p, str) for p in params):
            raise RequestValidationError("'params' must be a list of strings")

        return cls(file_path=file_path, params=list(params))

    def resolve_path(self, base_dir: Optional[str] = None) -> str:
        return resolve_target_path(self.file_path, base_dir)

    def tool_args(self, base_dir: Optional[str] = None) -> List[str]:
        """Argument vector for the tool: params first, absolute path last."""
        return [*self.params, self.resolve_path(base_dir)]


@dataclass
class AnalysisResponse:
    """Body returned for a processed request.

    ``error`` is left out of the JSON when empty.
    """
    output: str = ""
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"output": self.output}
        if self.error:
            data["error"] = self.error
        return data


def resolve_target_path(file_path: str, base_dir: Optional[str] = None) -> str:
    """Make ``file_path`` absolute against ``base_dir`` (default: cwd).

    Resolution is syntactic: the target does not need to exist and symlinks
    are left alone.
    """
    if "\x00" in file_path:
        raise PathResolutionError(f"embedded null byte in {file_path!r}")
    try:
        if base_dir is not None and not os.path.isabs(file_path):
            return os.path.abspath(os.path.join(base_dir, file_path))
        return os.path.abspath(file_path)
    except (OSError, ValueError) as e:
        raise PathResolutionError(str(e)) from e
