"""Test doubles and builders shared by the vidpipe unit tests."""

from __future__ import annotations

import io
from pathlib import Path

from vidpipe.models.schema import StreamGeometry, UploadedFile, UploadRequest
from vidpipe.stages.remux import output_path_for

OWNER_ID = "user-1"
VIDEO_ID = "video-1"
MP4_BYTES = b"\x00\x00\x00\x18ftypmp42 mock video content for testing"


class FakeInspector:
    """MediaInspector returning canned geometry."""

    def __init__(self, geometry: StreamGeometry | None = None, error: Exception | None = None):
        self.geometry = geometry or StreamGeometry(width=1280, height=720)
        self.error = error
        self.calls: list[Path] = []

    def probe(self, path: Path) -> StreamGeometry:
        assert path.exists(), "probe called on a missing file"
        self.calls.append(path)
        if self.error is not None:
            raise self.error
        return self.geometry


class FakeTranscoder:
    """MediaTranscoder copying the input to the standard output path.

    With ``error`` set it leaves a partial output behind before raising.
    """

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[Path] = []

    def fast_start(self, path: Path) -> Path:
        self.calls.append(path)
        output = output_path_for(path)
        if self.error is not None:
            output.write_bytes(b"partial")
            raise self.error
        output.write_bytes(b"faststart:" + path.read_bytes())
        return output


class FakePublisher:
    """Publisher recording what it was asked to store."""

    def __init__(self, error: Exception | None = None, base_url: str = "https://cdn.example.com"):
        self.error = error
        self.base_url = base_url
        self.published: list[tuple[str, str, bytes]] = []

    def publish(self, local_path: Path, key: str, media_type: str) -> str:
        if self.error is not None:
            raise self.error
        self.published.append((key, media_type, local_path.read_bytes()))
        return f"{self.base_url}/{key}"


def make_upload(
    data: bytes = MP4_BYTES,
    size: int | None = None,
    media_type: str = "video/mp4",
) -> UploadedFile:
    """Build an UploadedFile over in-memory bytes."""
    return UploadedFile(
        content=io.BytesIO(data),
        size=len(data) if size is None else size,
        media_type=media_type,
        filename="clip.mp4",
    )


def make_request(
    upload: object | None = None,
    video_id: str = VIDEO_ID,
    field: str = "video",
) -> UploadRequest:
    """Build an UploadRequest with ``upload`` under ``field``."""
    if upload is None:
        upload = make_upload()
    return UploadRequest(target_video_id=video_id, parts={field: upload})
