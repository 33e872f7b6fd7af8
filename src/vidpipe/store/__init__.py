"""Storage backends for published videos and video records."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from vidpipe.config import StorageConfig
from vidpipe.store.local import LocalPublisher
from vidpipe.store.records import InMemoryVideoRepository, RecordNotFound, VideoRepository
from vidpipe.store.s3 import S3Publisher


class Publisher(Protocol):
    """Anything that can publish a local file under a key and return its URL."""

    def publish(self, local_path: Path, key: str, media_type: str) -> str: ...


def build_publisher(config: StorageConfig) -> Publisher:
    """Instantiate a publisher for the configured backend.

    Raises:
        ValueError: If the S3 backend is selected without a bucket.
    """
    if config.backend == "local":
        return LocalPublisher(config.local_root, public_base_url=config.get_public_base_url())

    config.validate_for_s3()
    return S3Publisher(
        bucket=str(config.get_bucket()),
        region=config.get_region(),
        endpoint_url=config.endpoint_url,
        public_base_url=config.get_public_base_url(),
    )


__all__ = [
    "InMemoryVideoRepository",
    "LocalPublisher",
    "Publisher",
    "RecordNotFound",
    "S3Publisher",
    "VideoRepository",
    "build_publisher",
]
