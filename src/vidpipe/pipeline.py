"""Main ingestion pipeline for vidpipe."""

from __future__ import annotations

import logging
import secrets
import time
from contextlib import ExitStack
from pathlib import Path
from typing import Any, BinaryIO, Mapping

from tqdm import tqdm

from vidpipe.config import PipelineConfig
from vidpipe.errors import Forbidden, IngestionError, InvalidInput
from vidpipe.models.schema import UploadedFile, UploadRequest, VideoRecord
from vidpipe.stages.orientation import classify
from vidpipe.stages.probe import FFprobeInspector, MediaInspector
from vidpipe.stages.remux import FFmpegRemuxer, MediaTranscoder, output_path_for
from vidpipe.store import Publisher, build_publisher
from vidpipe.store.records import VideoRepository

logger = logging.getLogger(__name__)

VIDEO_SUFFIX = ".mp4"
MB = 1024 * 1024
CHUNK_SIZE = MB
# 32 random bytes, URL-safe base64
TOKEN_BYTES = 32


def format_size(num_bytes: int) -> str:
    """Render a byte limit as whole megabytes, or as bytes when not a whole MB."""
    if num_bytes >= MB and num_bytes % MB == 0:
        return f"{num_bytes // MB} MB"
    return f"{num_bytes} bytes"


def generate_token() -> str:
    """Return a random URL-safe token shared by the temp file and storage key."""
    return secrets.token_urlsafe(TOKEN_BYTES)


def require_upload_part(parts: Mapping[str, Any], field_name: str) -> UploadedFile:
    """Return the uploaded file under ``field_name``.

    Raises:
        InvalidInput: If the part is missing or is not a file.
    """
    part = parts.get(field_name)
    if not isinstance(part, UploadedFile):
        raise InvalidInput(f"Missing or malformed '{field_name}' file part")
    return part


def authorize_owner(
    records: VideoRepository, video_id: str, authorized_owner_id: str
) -> VideoRecord:
    """Look up a record and check that the caller owns it.

    A missing record and a record owned by someone else produce the same
    error so callers cannot probe for existing ids.

    Raises:
        Forbidden: If the record is missing or owned by another user.
    """
    record = records.get(video_id)
    if record is None or record.owner_id != authorized_owner_id:
        raise Forbidden("You are not allowed to modify this video")
    return record


def _create_pipeline_progress(total_stages: int, desc: str, disable: bool) -> tqdm:
    """Create a progress bar for pipeline stages."""
    return tqdm(
        total=total_stages,
        desc=desc,
        unit="stage",
        bar_format="{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt} stages [{elapsed}<{remaining}]",
        leave=True,
        disable=disable,
    )


def _remove_artifact(path: Path) -> None:
    """Delete a temporary artifact, logging instead of raising on failure."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Failed to remove temporary file {path.name}: {e.strerror}")


def _copy_limited(src: BinaryIO, dst: BinaryIO, limit: int) -> int:
    """Copy ``src`` to ``dst`` in chunks, refusing more than ``limit`` bytes.

    Returns:
        Number of bytes written.

    Raises:
        InvalidInput: If the stream is longer than ``limit``.
    """
    written = 0
    while chunk := src.read(CHUNK_SIZE):
        written += len(chunk)
        if written > limit:
            raise InvalidInput(f"Video exceeds {format_size(limit)}")
        dst.write(chunk)
    return written


class IngestionPipeline:
    """Video ingestion pipeline.

    Buffers an upload to a temporary file, probes its geometry, remuxes it
    for fast start and publishes it under an orientation-prefixed key. The
    updated record is returned for the caller to persist.

    Example:
        >>> records = InMemoryVideoRepository([VideoRecord(id="v1", owner_id="u1")])
        >>> pipeline = IngestionPipeline(records, PipelineConfig())
        >>> request = UploadRequest("v1", {"video": UploadedFile(f, size, "video/mp4")})
        >>> pipeline.ingest(request, authorized_owner_id="u1").video_url
        'https://bucket.s3.us-east-1.amazonaws.com/landscape/3q2-....mp4'
    """

    def __init__(
        self,
        records: VideoRepository,
        config: PipelineConfig | None = None,
        inspector: MediaInspector | None = None,
        transcoder: MediaTranscoder | None = None,
        publisher: Publisher | None = None,
    ) -> None:
        """Initialize an ingestion pipeline.

        Args:
            records: Store used to look up (and, via ingest_and_save, persist)
                video records.
            config: Pipeline configuration. Defaults to PipelineConfig().
            inspector: Geometry probe. Defaults to ffprobe.
            transcoder: Fast-start remuxer. Defaults to ffmpeg.
            publisher: Object storage publisher. Built from config.storage
                when omitted.

        Raises:
            ValueError: If no publisher is given and the storage config is
                incomplete.
        """
        self.config = config or PipelineConfig()
        self.records = records
        self.inspector = inspector or FFprobeInspector(
            self.config.ffprobe_path, timeout=self.config.probe_timeout
        )
        self.transcoder = transcoder or FFmpegRemuxer(
            self.config.ffmpeg_path, timeout=self.config.remux_timeout
        )
        self.publisher = publisher or build_publisher(self.config.storage)
        self._temp_dir = self.config.get_temp_dir()

        logger.info(f"Ingestion pipeline initialized (temp_dir={self._temp_dir})")

    def _validate_upload(self, upload: UploadedFile) -> None:
        """Check declared size and media type before touching the disk."""
        if upload.size > self.config.max_upload_size:
            raise InvalidInput(
                f"Video exceeds {format_size(self.config.max_upload_size)}"
            )
        if upload.media_type != self.config.allowed_media_type:
            raise InvalidInput(
                f"Unsupported media type '{upload.media_type}', "
                f"expected '{self.config.allowed_media_type}'"
            )

    def ingest(self, request: UploadRequest, authorized_owner_id: str) -> VideoRecord:
        """Process one upload and return the record with its new video URL.

        Args:
            request: The upload, with the file under ``config.upload_field``.
            authorized_owner_id: Owner identity resolved from the caller's
                credentials.

        Returns:
            A copy of the target record with ``video_url`` set. It is not
            persisted here.

        Raises:
            InvalidInput: Missing file part, oversized upload or wrong type.
            Forbidden: Target record missing or owned by someone else.
            ProbeFailed: ffprobe failed or reported no usable video stream.
            RemuxFailed: ffmpeg failed.
            PublishFailed: The storage write failed.
            IngestionError: The upload could not be buffered to disk.
        """
        upload = require_upload_part(request.parts, self.config.upload_field)
        self._validate_upload(upload)
        record = authorize_owner(self.records, request.target_video_id, authorized_owner_id)

        filename = f"{generate_token()}{VIDEO_SUFFIX}"
        raw_path = self._temp_dir / filename
        start_time = time.perf_counter()

        logger.info(f"Ingesting video {record.id} ({upload.size} bytes) as {filename}")

        with ExitStack() as stack:
            pbar = _create_pipeline_progress(
                3, f"Ingesting {record.id}", disable=not self.config.show_progress
            )
            stack.callback(pbar.close)

            try:
                with open(raw_path, "xb") as f:
                    stack.callback(_remove_artifact, raw_path)
                    _copy_limited(upload.content, f, self.config.max_upload_size)
            except OSError as e:
                raise IngestionError(f"Could not buffer upload: {e.strerror}") from e

            # Stage 1: Geometry -> storage key
            pbar.set_description("Stage 1: Probing geometry")
            geometry = self.inspector.probe(raw_path)
            orientation = classify(geometry)
            key = f"{orientation.value}/{filename}"
            logger.info(f"{filename}: {geometry.width}x{geometry.height} -> {orientation.value}")
            pbar.update(1)

            # Stage 2: Fast-start remux
            pbar.set_description("Stage 2: Remuxing for fast start")
            stack.callback(_remove_artifact, output_path_for(raw_path))
            processed_path = self.transcoder.fast_start(raw_path)
            if processed_path != output_path_for(raw_path):
                stack.callback(_remove_artifact, processed_path)
            pbar.update(1)

            # Stage 3: Publish
            pbar.set_description(f"Stage 3: Publishing {key}")
            url = self.publisher.publish(processed_path, key, upload.media_type)
            pbar.update(1)

        elapsed = time.perf_counter() - start_time
        logger.info(f"Ingestion of video {record.id} complete in {elapsed:.2f}s: {key}")

        return record.with_video_url(url)

    def ingest_and_save(self, request: UploadRequest, authorized_owner_id: str) -> VideoRecord:
        """Run ingest() and persist the updated record.

        If persistence fails after the object was published, the object is
        left in storage and only logged; nothing reconciles it.

        Raises:
            Everything ingest() raises, plus whatever the record store raises.
        """
        record = self.ingest(request, authorized_owner_id)
        try:
            self.records.update(record)
        except Exception:
            logger.error(
                f"Persisting video {record.id} failed; object at {record.video_url} is orphaned"
            )
            raise
        return record
