"""Detection of the external media tools vidpipe shells out to."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class ToolInfo:
    """Information about an external binary."""

    name: str
    path: str | None
    version: str | None = None

    @property
    def is_available(self) -> bool:
        return self.path is not None


def detect_tool(name: str) -> ToolInfo:
    """Locate a binary on PATH and read its version banner.

    Args:
        name: Binary name or path, e.g. 'ffprobe'.

    Returns:
        ToolInfo; ``path`` is None when the binary cannot be found.
    """
    path = shutil.which(name)
    if path is None:
        logger.warning(f"{name} not found on PATH")
        return ToolInfo(name=name, path=None)

    try:
        result = subprocess.run(
            [path, "-version"],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning(f"Failed to query {name} version: {e}")
        return ToolInfo(name=name, path=path)

    # First line looks like "ffprobe version 6.1.1 Copyright ..."
    first_line = result.stdout.splitlines()[0] if result.stdout else ""
    parts = first_line.split()
    version = parts[2] if len(parts) > 2 and parts[1] == "version" else None
    return ToolInfo(name=name, path=path, version=version)


def get_tool_info(ffprobe_path: str = "ffprobe", ffmpeg_path: str = "ffmpeg") -> list[ToolInfo]:
    """Return availability info for ffprobe and ffmpeg."""
    return [detect_tool(ffprobe_path), detect_tool(ffmpeg_path)]
