"""Utility functions for vidpipe."""

from vidpipe.utils.logging import get_logger
from vidpipe.utils.tools import ToolInfo, detect_tool, get_tool_info

__all__ = ["ToolInfo", "detect_tool", "get_logger", "get_tool_info"]
