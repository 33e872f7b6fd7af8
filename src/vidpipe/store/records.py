"""Video record store interface.

The canonical store is external; the pipeline only needs to look records up
and hand back updated copies. InMemoryVideoRepository backs the CLI and tests.
"""

from __future__ import annotations

import threading
from typing import Iterable, Protocol

from vidpipe.models.schema import VideoRecord


class RecordNotFound(Exception):
    """Raised when updating a record the store does not know."""

    pass


class VideoRepository(Protocol):
    """Lookup and persistence of video records."""

    def get(self, video_id: str) -> VideoRecord | None: ...

    def update(self, record: VideoRecord) -> None: ...


class InMemoryVideoRepository:
    """Thread-safe dict-backed VideoRepository."""

    def __init__(self, records: Iterable[VideoRecord] = ()) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, VideoRecord] = {r.id: r for r in records}

    def add(self, record: VideoRecord) -> None:
        with self._lock:
            self._records[record.id] = record

    def get(self, video_id: str) -> VideoRecord | None:
        with self._lock:
            return self._records.get(video_id)

    def update(self, record: VideoRecord) -> None:
        with self._lock:
            if record.id not in self._records:
                raise RecordNotFound(f"Video record not found: {record.id}")
            self._records[record.id] = record

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
