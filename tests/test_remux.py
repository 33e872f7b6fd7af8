"""Tests for the remux stage."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from vidpipe.errors import REDACTED_PATH, RemuxFailed
from vidpipe.stages.remux import (
    FFmpegRemuxer,
    build_remux_command,
    output_path_for,
    remux_faststart,
)


class TestOutputPathFor:
    """Tests for output_path_for function."""

    def test_appends_suffix(self) -> None:
        """Output is the input path plus '.processed'."""
        assert output_path_for(Path("/tmp/abc.mp4")) == Path("/tmp/abc.mp4.processed")


class TestBuildRemuxCommand:
    """Tests for build_remux_command function."""

    def test_faststart_stream_copy(self) -> None:
        """Should move the index to the front, keep metadata, copy codecs and force mp4."""
        cmd = build_remux_command(Path("in.mp4"), Path("in.mp4.processed"))

        assert cmd[0] == "ffmpeg"
        assert cmd[cmd.index("-i") + 1] == "in.mp4"
        assert cmd[cmd.index("-movflags") + 1] == "faststart"
        assert cmd[cmd.index("-map_metadata") + 1] == "0"
        assert cmd[cmd.index("-codec") + 1] == "copy"
        assert cmd[cmd.index("-f") + 1] == "mp4"
        assert cmd[-1] == "in.mp4.processed"


class TestRemuxFaststart:
    """Tests for remux_faststart function."""

    def test_success_returns_output_path(self, sample_video_path: Path) -> None:
        """Should return the deterministic output path."""
        expected = output_path_for(sample_video_path)
        captured_cmd: list[str] = []

        def run_ffmpeg(*args, **kwargs):
            captured_cmd.extend(args[0])
            expected.write_bytes(b"remuxed")
            mock = MagicMock()
            mock.returncode = 0
            mock.stderr = ""
            return mock

        with patch("subprocess.run", side_effect=run_ffmpeg):
            output = remux_faststart(sample_video_path)

        assert output == expected
        assert captured_cmd[-1] == str(expected)
        assert sample_video_path.exists()

    def test_nonzero_exit(self, sample_video_path: Path) -> None:
        """Should raise RemuxFailed with stderr as diagnostics."""
        mock_result = MagicMock()
        mock_result.returncode = 1
        mock_result.stderr = "moov atom not found"

        with patch("subprocess.run", return_value=mock_result):
            with pytest.raises(RemuxFailed, match="moov atom not found") as exc_info:
                remux_faststart(sample_video_path)

        assert exc_info.value.diagnostics == "moov atom not found"

    def test_stderr_paths_redacted(self, sample_video_path: Path) -> None:
        """The temp directory is hidden in the message but kept in diagnostics."""
        stderr = f"{sample_video_path}: Invalid data found when processing input"
        mock_result = MagicMock()
        mock_result.returncode = 1
        mock_result.stderr = stderr

        with patch("subprocess.run", return_value=mock_result):
            with pytest.raises(RemuxFailed) as exc_info:
                remux_faststart(sample_video_path)

        assert str(sample_video_path.parent) not in str(exc_info.value)
        assert f"{REDACTED_PATH}/{sample_video_path.name}" in str(exc_info.value)
        assert exc_info.value.diagnostics == stderr
        assert str(sample_video_path.parent) in exc_info.value.diagnostics

    def test_ffmpeg_not_found(self, sample_video_path: Path) -> None:
        """Should raise a generic RemuxFailed when ffmpeg is not installed."""
        with patch("subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(RemuxFailed, match="ffmpeg is not available") as exc_info:
                remux_faststart(sample_video_path, ffmpeg_path="/srv/internal/tools/ffmpeg")

        assert "/srv/internal" not in str(exc_info.value)
        assert "brew install" not in str(exc_info.value)
        assert "/srv/internal/tools/ffmpeg not found" in exc_info.value.diagnostics

    def test_timeout(self, sample_video_path: Path) -> None:
        """Should raise RemuxFailed on timeout."""
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("ffmpeg", 60)):
            with pytest.raises(RemuxFailed, match="timed out"):
                remux_faststart(sample_video_path, timeout=60)


class TestFFmpegRemuxer:
    """Tests for the FFmpegRemuxer adapter."""

    def test_fast_start_forwards_settings(self, sample_video_path: Path) -> None:
        """Should use the configured binary and timeout."""
        mock_result = MagicMock()
        mock_result.returncode = 0

        with patch("subprocess.run", return_value=mock_result) as mock_run:
            output = FFmpegRemuxer("/opt/ffmpeg", timeout=30).fast_start(sample_video_path)

        assert output == output_path_for(sample_video_path)
        assert mock_run.call_args.args[0][0] == "/opt/ffmpeg"
        assert mock_run.call_args.kwargs["timeout"] == 30
