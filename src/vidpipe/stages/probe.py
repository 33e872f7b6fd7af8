"""Probe stage: stream geometry via ffprobe.

This stage handles:
- Running ffprobe against a local file for the first video stream only
- Strict validation of ffprobe's JSON output
- Mapping every failure onto ProbeFailed
"""

from __future__ import annotations

import logging
import subprocess
import time
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field, StrictInt, ValidationError

from vidpipe.errors import FFMPEG_INSTALL_HINT, ProbeFailed, scrub_paths
from vidpipe.models.schema import StreamGeometry

logger = logging.getLogger(__name__)


class MediaInspector(Protocol):
    """Anything that can read the geometry of a local video file."""

    def probe(self, path: Path) -> StreamGeometry: ...


class _ProbeStream(BaseModel):
    width: StrictInt = Field(..., gt=0)
    height: StrictInt = Field(..., gt=0)


class _ProbeOutput(BaseModel):
    """The subset of ffprobe's JSON output we rely on."""

    streams: list[_ProbeStream] = Field(..., min_length=1)


def build_probe_command(source: Path, ffprobe_path: str = "ffprobe") -> list[str]:
    """Build the ffprobe command line for the first video stream's dimensions."""
    return [
        ffprobe_path,
        "-v", "error",
        "-select_streams", "v:0",
        "-show_entries", "stream=width,height",
        "-of", "json",
        str(source),
    ]


def _run_ffprobe(source: Path, ffprobe_path: str, timeout: float | None) -> str:
    """Run ffprobe and return its standard output.

    Raises:
        ProbeFailed: If ffprobe is missing, times out or exits non-zero.
    """
    cmd = build_probe_command(source, ffprobe_path)
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        hint = f"{ffprobe_path} not found. {FFMPEG_INSTALL_HINT}"
        logger.error(hint)
        raise ProbeFailed("ffprobe is not available", diagnostics=hint)
    except subprocess.TimeoutExpired:
        raise ProbeFailed(f"ffprobe timed out after {timeout}s reading {source.name}")

    if result.returncode != 0:
        raise ProbeFailed(
            f"ffprobe failed: {scrub_paths(result.stderr.strip(), source)}",
            diagnostics=result.stderr,
        )

    return result.stdout


def parse_probe_output(output: str) -> StreamGeometry:
    """Parse ffprobe JSON output into a StreamGeometry.

    Args:
        output: Raw standard output of the ffprobe command.

    Returns:
        Geometry of the first listed stream.

    Raises:
        ProbeFailed: If the output is not JSON, lists no video stream, or a
            width/height is missing or not a positive integer.
    """
    try:
        parsed = _ProbeOutput.model_validate_json(output)
    except ValidationError as e:
        raise ProbeFailed(
            f"Unexpected ffprobe output: {e.error_count()} validation error(s)",
            diagnostics=output,
        ) from e

    stream = parsed.streams[0]
    return StreamGeometry(width=stream.width, height=stream.height)


def probe_geometry(
    source: Path,
    ffprobe_path: str = "ffprobe",
    timeout: float | None = None,
) -> StreamGeometry:
    """Read the width and height of the first video stream in a file.

    Args:
        source: Path to a local media file.
        ffprobe_path: ffprobe binary to run.
        timeout: Seconds to wait for ffprobe, or None to wait indefinitely.

    Returns:
        StreamGeometry of the primary video stream.

    Raises:
        ProbeFailed: If probing fails for any reason.
    """
    start_time = time.perf_counter()

    output = _run_ffprobe(source, ffprobe_path, timeout)
    geometry = parse_probe_output(output)

    elapsed = time.perf_counter() - start_time
    logger.debug(f"Probed {source.name} in {elapsed:.2f}s: {geometry.width}x{geometry.height}")

    return geometry


class FFprobeInspector:
    """MediaInspector backed by the ffprobe binary."""

    def __init__(self, ffprobe_path: str = "ffprobe", timeout: float | None = None) -> None:
        self.ffprobe_path = ffprobe_path
        self.timeout = timeout

    def probe(self, path: Path) -> StreamGeometry:
        return probe_geometry(path, ffprobe_path=self.ffprobe_path, timeout=self.timeout)
