from .tool_runner import ToolResult, ToolRunner

__all__ = ['ToolResult', 'ToolRunner']
