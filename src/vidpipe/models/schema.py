"""Pydantic models shared across the vidpipe pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, BinaryIO, Mapping

from pydantic import BaseModel, ConfigDict, Field


class Orientation(str, Enum):
    """Coarse aspect-ratio bucket used as the storage key prefix."""

    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"
    OTHER = "other"


class StreamGeometry(BaseModel):
    """Dimensions of the primary video stream."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0, description="Frame width in pixels")
    height: int = Field(..., gt=0, description="Frame height in pixels")


@dataclass
class UploadedFile:
    """A file part of a multipart upload.

    ``size`` and ``media_type`` are what the client declared; the body is read
    from ``content`` only after validation passes.
    """

    content: BinaryIO  # Readable binary stream with the file body
    size: int  # Declared size in bytes
    media_type: str  # Declared media type, e.g. 'video/mp4'
    filename: str | None = None


@dataclass
class UploadRequest:
    """A single upload targeting an existing video record."""

    target_video_id: str
    parts: Mapping[str, Any] = field(default_factory=dict)  # Form parts keyed by field name


class VideoRecord(BaseModel):
    """The canonical video record, owned by an external store.

    Records are immutable; use the ``with_*`` helpers to derive an updated
    copy for the store to persist.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Record id")
    owner_id: str = Field(..., description="Id of the owning user")
    title: str = Field(default="", description="Video title")
    description: str = Field(default="", description="Video description")
    thumbnail_url: str | None = Field(default=None, description="Public thumbnail URL")
    video_url: str | None = Field(default=None, description="Public video URL")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def with_video_url(self, url: str) -> VideoRecord:
        """Return a copy of this record with ``video_url`` set."""
        return self.model_copy(
            update={"video_url": url, "updated_at": datetime.now(timezone.utc)}
        )

    def with_thumbnail_url(self, url: str) -> VideoRecord:
        """Return a copy of this record with ``thumbnail_url`` set."""
        return self.model_copy(
            update={"thumbnail_url": url, "updated_at": datetime.now(timezone.utc)}
        )
