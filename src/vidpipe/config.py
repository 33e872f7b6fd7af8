"""Configuration and settings for vidpipe pipelines."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

# 1 GiB
DEFAULT_MAX_UPLOAD_SIZE = 1 << 30
# 10 MiB
DEFAULT_MAX_THUMBNAIL_SIZE = 10 << 20


class StorageConfig(BaseModel):
    """Where processed videos are published."""

    backend: Literal["s3", "local"] = Field(
        default="s3", description="Storage backend: 's3' or 'local'"
    )
    bucket: str | None = Field(
        default=None, description="S3 bucket name. Falls back to VIDPIPE_S3_BUCKET env var."
    )
    region: str | None = Field(
        default=None, description="S3 region. Falls back to VIDPIPE_S3_REGION, then us-east-1."
    )
    endpoint_url: str | None = Field(
        default=None, description="Custom endpoint for S3-compatible storage (MinIO, R2, ...)"
    )
    public_base_url: str | None = Field(
        default=None,
        description=(
            "Base URL objects are served from (CDN distribution or front door). "
            "Falls back to VIDPIPE_PUBLIC_BASE_URL, then the bucket endpoint."
        ),
    )
    local_root: str = Field(
        default="./vidpipe_storage", description="Root directory for the 'local' backend"
    )

    def get_bucket(self) -> str | None:
        """Get the bucket name from config or environment."""
        if self.bucket is not None:
            return self.bucket
        return os.environ.get("VIDPIPE_S3_BUCKET")

    def get_region(self) -> str:
        """Get the region from config or environment."""
        if self.region is not None:
            return self.region
        return os.environ.get("VIDPIPE_S3_REGION", "us-east-1")

    def get_public_base_url(self) -> str | None:
        """Get the public base URL from config or environment."""
        if self.public_base_url is not None:
            return self.public_base_url
        return os.environ.get("VIDPIPE_PUBLIC_BASE_URL")

    def validate_for_s3(self) -> None:
        """Validate that S3 publishing can be configured.

        Raises:
            ValueError: If no bucket is configured.
        """
        if self.backend != "s3":
            return

        if self.get_bucket() is None:
            raise ValueError(
                "S3 publishing requires a bucket name.\n\n"
                "Set it via environment variable:\n"
                "   export VIDPIPE_S3_BUCKET='my-bucket'\n\n"
                "or pass it to StorageConfig(bucket=...), or use the local backend:\n"
                "   StorageConfig(backend='local', local_root='./storage')"
            )


class PipelineConfig(BaseModel):
    """Configuration for an ingestion pipeline."""

    max_upload_size: int = Field(
        default=DEFAULT_MAX_UPLOAD_SIZE, gt=0, description="Maximum accepted upload size in bytes"
    )
    allowed_media_type: str = Field(
        default="video/mp4", description="The only media type accepted for uploads"
    )
    upload_field: str = Field(
        default="video", description="Form field name carrying the uploaded file"
    )
    temp_dir: str | None = Field(
        default=None,
        description="Directory for temporary artifacts. Falls back to VIDPIPE_TMPDIR, then the system temp dir.",
    )
    ffprobe_path: str = Field(default="ffprobe", description="Path to the ffprobe binary")
    ffmpeg_path: str = Field(default="ffmpeg", description="Path to the ffmpeg binary")
    probe_timeout: float | None = Field(
        default=None, gt=0, description="Seconds to wait for ffprobe (None waits forever)"
    )
    remux_timeout: float | None = Field(
        default=None, gt=0, description="Seconds to wait for ffmpeg (None waits forever)"
    )
    show_progress: bool = Field(default=False, description="Show a tqdm progress bar per upload")
    thumbnail_field: str = Field(
        default="thumbnail", description="Form field name carrying an uploaded thumbnail"
    )
    max_thumbnail_size: int = Field(
        default=DEFAULT_MAX_THUMBNAIL_SIZE, gt=0, description="Maximum thumbnail size in bytes"
    )
    thumbnail_base_url: str = Field(
        default="http://localhost:8091/api/thumbnails",
        description="Base URL thumbnails are served from; the video id is appended",
    )
    storage: StorageConfig = Field(
        default_factory=StorageConfig, description="Object storage settings"
    )

    def get_temp_dir(self) -> Path:
        """Get the temporary artifact directory, creating it if needed."""
        raw = self.temp_dir or os.environ.get("VIDPIPE_TMPDIR") or tempfile.gettempdir()
        path = Path(raw)
        path.mkdir(parents=True, exist_ok=True)
        return path
