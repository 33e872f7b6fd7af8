"""Thumbnail uploads backed by an explicit in-memory store.

The store is an ordinary object handed to whoever needs it, so its lifetime
is the lifetime of that reference rather than the process.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from vidpipe.config import PipelineConfig
from vidpipe.errors import IngestionError, InvalidInput, NotFound
from vidpipe.models.schema import UploadRequest, VideoRecord
from vidpipe.pipeline import authorize_owner, format_size, require_upload_part
from vidpipe.store.records import VideoRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Thumbnail:
    """Raw image bytes and their media type."""

    data: bytes
    media_type: str


class ThumbnailStore:
    """Thread-safe keyed store of thumbnails, keyed by video id."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: dict[str, Thumbnail] = {}

    def put(self, video_id: str, thumbnail: Thumbnail) -> None:
        with self._lock:
            self._items[video_id] = thumbnail

    def get(self, video_id: str) -> Thumbnail | None:
        with self._lock:
            return self._items.get(video_id)

    def delete(self, video_id: str) -> bool:
        """Remove a thumbnail. Returns True if one was stored."""
        with self._lock:
            return self._items.pop(video_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __contains__(self, video_id: object) -> bool:
        with self._lock:
            return video_id in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


def upload_thumbnail(
    request: UploadRequest,
    authorized_owner_id: str,
    *,
    records: VideoRepository,
    store: ThumbnailStore,
    config: PipelineConfig | None = None,
) -> VideoRecord:
    """Store a thumbnail for a video and return the record with its URL.

    Args:
        request: The upload, with the image under ``config.thumbnail_field``.
        authorized_owner_id: Owner identity resolved from the caller's
            credentials.
        records: Record store used for the ownership check.
        store: Destination thumbnail store.
        config: Limits and URL settings. Defaults to PipelineConfig().

    Returns:
        A copy of the record with ``thumbnail_url`` set; not persisted here.

    Raises:
        InvalidInput: Missing part, oversized image or non-image media type.
        Forbidden: Target record missing or owned by someone else.
        IngestionError: The image body could not be read.
    """
    config = config or PipelineConfig()

    upload = require_upload_part(request.parts, config.thumbnail_field)
    if upload.size > config.max_thumbnail_size:
        raise InvalidInput(
            f"Thumbnail exceeds {format_size(config.max_thumbnail_size)}"
        )
    if not upload.media_type.startswith("image/"):
        raise InvalidInput(f"Unsupported thumbnail type '{upload.media_type}'")

    record = authorize_owner(records, request.target_video_id, authorized_owner_id)

    # Read one byte past the limit to catch understated sizes
    try:
        data = upload.content.read(config.max_thumbnail_size + 1)
    except OSError as e:
        raise IngestionError(f"Could not read thumbnail: {e.strerror}") from e
    if len(data) > config.max_thumbnail_size:
        raise InvalidInput(
            f"Thumbnail exceeds {format_size(config.max_thumbnail_size)}"
        )

    store.put(record.id, Thumbnail(data=data, media_type=upload.media_type))
    logger.info(f"Stored thumbnail for video {record.id} ({len(data)} bytes)")

    return record.with_thumbnail_url(f"{config.thumbnail_base_url.rstrip('/')}/{record.id}")


def get_thumbnail(video_id: str, *, records: VideoRepository, store: ThumbnailStore) -> Thumbnail:
    """Return the stored thumbnail for a video.

    Raises:
        NotFound: If the video or its thumbnail does not exist.
    """
    if records.get(video_id) is None:
        raise NotFound("Couldn't find video")

    thumbnail = store.get(video_id)
    if thumbnail is None:
        raise NotFound("Thumbnail not found")
    return thumbnail
