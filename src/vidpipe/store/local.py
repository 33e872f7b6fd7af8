"""Local filesystem publishing, for development and the CLI."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from vidpipe.errors import PublishFailed

logger = logging.getLogger(__name__)


class LocalPublisher:
    """Publish files by copying them under a root directory."""

    def __init__(self, root: str | Path, public_base_url: str | None = None) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url

    def path_for(self, key: str) -> Path:
        return self.root / key

    def url_for(self, key: str) -> str:
        """Return the public URL for a key (a file:// URI without a base URL)."""
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        return self.path_for(key).absolute().as_uri()

    def publish(self, local_path: Path, key: str, media_type: str) -> str:
        dest = self.path_for(key)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(local_path, dest)
        except OSError as e:
            raise PublishFailed(f"Could not store {key}: {e.strerror}") from e

        logger.info(f"Stored {key} ({media_type}) under {self.root}")
        return self.url_for(key)
