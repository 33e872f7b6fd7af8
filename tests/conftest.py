"""Pytest configuration and fixtures for vidpipe tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

from helpers import MP4_BYTES, OWNER_ID, VIDEO_ID
from vidpipe.config import PipelineConfig
from vidpipe.models.schema import VideoRecord
from vidpipe.store.records import InMemoryVideoRepository

S3_ENV_KEYS = ("VIDPIPE_S3_BUCKET", "VIDPIPE_S3_REGION", "VIDPIPE_PUBLIC_BASE_URL")


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def work_dir(temp_dir: Path) -> Path:
    """Directory the pipeline writes its temporary artifacts to."""
    path = temp_dir / "work"
    path.mkdir()
    return path


@pytest.fixture
def config(work_dir: Path) -> PipelineConfig:
    """Pipeline config pointing temp artifacts at work_dir."""
    return PipelineConfig(temp_dir=str(work_dir))


@pytest.fixture
def records() -> InMemoryVideoRepository:
    """Repository holding one record owned by OWNER_ID."""
    return InMemoryVideoRepository([VideoRecord(id=VIDEO_ID, owner_id=OWNER_ID, title="Test")])


@pytest.fixture
def sample_video_path(temp_dir: Path) -> Path:
    """Create a mock video file for testing.

    Note: This is not a playable MP4. Tests that need real media live in
    tests/integration.
    """
    video_path = temp_dir / "test_video.mp4"
    video_path.write_bytes(MP4_BYTES)
    return video_path


@pytest.fixture
def s3_env():
    """Set S3 environment variables for tests that read them."""
    original = {k: os.environ.get(k) for k in S3_ENV_KEYS}
    os.environ["VIDPIPE_S3_BUCKET"] = "env-bucket"
    os.environ["VIDPIPE_S3_REGION"] = "eu-west-1"
    os.environ.pop("VIDPIPE_PUBLIC_BASE_URL", None)
    yield "env-bucket"
    for key, value in original.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


@pytest.fixture
def no_s3_env():
    """Ensure S3 environment variables are unset."""
    original = {k: os.environ.pop(k, None) for k in S3_ENV_KEYS}
    yield
    for key, value in original.items():
        if value is not None:
            os.environ[key] = value
