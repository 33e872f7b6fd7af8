"""Data models for vidpipe."""

from vidpipe.models.schema import (
    Orientation,
    StreamGeometry,
    UploadedFile,
    UploadRequest,
    VideoRecord,
)

__all__ = ["Orientation", "StreamGeometry", "UploadedFile", "UploadRequest", "VideoRecord"]
