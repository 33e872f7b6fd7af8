"""Remux stage: fast-start MP4 via ffmpeg.

Moves the moov atom to the front of the file with stream copy, so the
output plays progressively without any re-encoding.
"""

from __future__ import annotations

import logging
import subprocess
import time
from pathlib import Path
from typing import Protocol

from vidpipe.errors import FFMPEG_INSTALL_HINT, RemuxFailed, scrub_paths

logger = logging.getLogger(__name__)

# Appended to the input path to name the remuxed output
OUTPUT_SUFFIX = ".processed"


class MediaTranscoder(Protocol):
    """Anything that can produce a fast-start copy of a local video file."""

    def fast_start(self, path: Path) -> Path: ...


def output_path_for(source: Path) -> Path:
    """Return where the remuxed copy of ``source`` is written."""
    return source.with_name(source.name + OUTPUT_SUFFIX)


def build_remux_command(source: Path, output: Path, ffmpeg_path: str = "ffmpeg") -> list[str]:
    """Build the ffmpeg command line for a fast-start stream copy."""
    return [
        ffmpeg_path,
        "-y",  # Overwrite output
        "-i", str(source),
        "-movflags", "faststart",
        "-map_metadata", "0",
        "-codec", "copy",
        "-f", "mp4",
        str(output),
    ]


def remux_faststart(
    source: Path,
    ffmpeg_path: str = "ffmpeg",
    timeout: float | None = None,
) -> Path:
    """Write a fast-start copy of ``source`` next to it.

    The caller owns both files afterwards and must delete them. If ffmpeg
    fails, the output path may still hold a partial file.

    Args:
        source: Path to the uploaded MP4.
        ffmpeg_path: ffmpeg binary to run.
        timeout: Seconds to wait for ffmpeg, or None to wait indefinitely.

    Returns:
        Path to the remuxed file (``source`` + ``.processed``).

    Raises:
        RemuxFailed: If ffmpeg is missing, times out or exits non-zero.
    """
    output = output_path_for(source)
    cmd = build_remux_command(source, output, ffmpeg_path)

    logger.info(f"Remuxing {source.name} for fast start")
    logger.debug(f"Running: {' '.join(cmd)}")
    start_time = time.perf_counter()

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        hint = f"{ffmpeg_path} not found. {FFMPEG_INSTALL_HINT}"
        logger.error(hint)
        raise RemuxFailed("ffmpeg is not available", diagnostics=hint)
    except subprocess.TimeoutExpired:
        raise RemuxFailed(f"ffmpeg timed out after {timeout}s remuxing {source.name}")

    if result.returncode != 0:
        raise RemuxFailed(
            f"ffmpeg failed: {scrub_paths(result.stderr.strip(), source)}",
            diagnostics=result.stderr,
        )

    elapsed = time.perf_counter() - start_time
    logger.info(f"Remuxed {source.name} in {elapsed:.2f}s")

    return output


class FFmpegRemuxer:
    """MediaTranscoder backed by the ffmpeg binary."""

    def __init__(self, ffmpeg_path: str = "ffmpeg", timeout: float | None = None) -> None:
        self.ffmpeg_path = ffmpeg_path
        self.timeout = timeout

    def fast_start(self, path: Path) -> Path:
        return remux_faststart(path, ffmpeg_path=self.ffmpeg_path, timeout=self.timeout)
