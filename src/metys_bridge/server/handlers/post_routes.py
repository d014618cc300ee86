"""POST route handler for the bridge endpoint.

Decodes an analysis request, runs the external tool with the request's
params followed by the resolved target path, and answers with the combined
capture. Tool failures are reported inside a 200 response.
"""

import json
import logging

from ...core.contracts import (
    AnalysisRequest,
    AnalysisResponse,
    PathResolutionError,
)
from ...execution.tool_runner import ToolResult

logger = logging.getLogger(__name__)


def do_POST(self):  # noqa: N802
    """Handle POST requests."""
    if not self._is_bridge_path():
        self._discard_body()
        self._text(404, "404 page not found")
        return

    tool_name = self.server.config.tool_name

    try:
        raw = self._read_body()
        request = AnalysisRequest.from_dict(json.loads(raw.decode("utf-8")))
    except ValueError as e:
        logger.warning(f"[POST] Invalid request body: {e}")
        self.server.emit_event("request.rejected", {"status": 400, "reason": str(e)})
        self._text(400, "Invalid request")
        return

    try:
        args = request.tool_args(self.server.base_dir)
    except PathResolutionError as e:
        logger.error(f"Error getting absolute path: {e}")
        self.server.emit_event("request.rejected", {"status": 400, "reason": str(e)})
        self._text(400, f"Invalid file path: {e}")
        return

    logger.info(f"Running {tool_name} command with args: {args}")
    self.server.emit_event("tool.started", {"args": args})

    try:
        result = self.server.runner.run(args)
    except Exception as e:
        logger.exception(f"Tool runner failed for args {args}")
        result = ToolResult(args=args, error=f"{tool_name} error: {e}")

    if result.error:
        logger.error(f"Error running {tool_name}: {result.error}\nOutput: {result.output}")
    else:
        logger.info(f"{tool_name} output: {result.output}")

    self.server.emit_event("tool.finished", {
        "args": args,
        "output": result.output,
        "error": result.error,
        "return_code": result.return_code,
    })

    self._json(200, AnalysisResponse(output=result.output, error=result.error).to_dict())
