"""Pytest configuration and fixtures for integration tests.

These tests run the real ffprobe and ffmpeg binaries against tiny clips
generated on the fly, and are skipped when either binary is missing.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest


def _require_ffmpeg() -> None:
    for tool in ("ffprobe", "ffmpeg"):
        if shutil.which(tool) is None:
            pytest.skip(f"{tool} not installed")


def _make_clip(path: Path, width: int, height: int) -> Path:
    """Encode a one-second test pattern without fast start (index at the end)."""
    subprocess.run(
        [
            "ffmpeg",
            "-y",
            "-v", "error",
            "-f", "lavfi",
            "-i", f"testsrc=duration=1:size={width}x{height}:rate=10",
            "-pix_fmt", "yuv420p",
            str(path),
        ],
        check=True,
        capture_output=True,
    )
    return path


@pytest.fixture(scope="session")
def clips_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    _require_ffmpeg()
    return tmp_path_factory.mktemp("clips")


@pytest.fixture(scope="session")
def landscape_clip(clips_dir: Path) -> Path:
    """320x180 MP4."""
    return _make_clip(clips_dir / "landscape.mp4", 320, 180)


@pytest.fixture(scope="session")
def portrait_clip(clips_dir: Path) -> Path:
    """180x320 MP4."""
    return _make_clip(clips_dir / "portrait.mp4", 180, 320)


@pytest.fixture(scope="session")
def square_clip(clips_dir: Path) -> Path:
    """240x240 MP4, which lands in the landscape bucket."""
    return _make_clip(clips_dir / "square.mp4", 240, 240)
