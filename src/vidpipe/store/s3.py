"""S3 publishing for processed videos.

Works against AWS S3 and S3-compatible services (MinIO, R2) through a
boto3 client. Credentials come from boto3's default provider chain.
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from vidpipe.errors import PublishFailed

logger = logging.getLogger(__name__)


class S3Publisher:
    """Publish local files to an S3 bucket and derive their public URLs.

    Example:
        >>> publisher = S3Publisher(bucket="videos", region="us-east-2")
        >>> publisher.publish(Path("/tmp/abc.mp4"), "landscape/abc.mp4", "video/mp4")
        'https://videos.s3.us-east-2.amazonaws.com/landscape/abc.mp4'
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        public_base_url: str | None = None,
        client: Any | None = None,
    ) -> None:
        """Initialize the publisher.

        Args:
            bucket: Target bucket name.
            region: Bucket region, used for the client and the default URL.
            endpoint_url: Custom endpoint for S3-compatible storage.
            public_base_url: Base URL objects are served from (e.g. a CDN
                distribution). Defaults to the bucket endpoint.
            client: Pre-built boto3 S3 client. Created lazily when omitted.
        """
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        self.public_base_url = public_base_url
        self._client = client

    def _get_client(self) -> Any:
        """Get or create the S3 client."""
        if self._client is None:
            client_kwargs: dict[str, Any] = {"region_name": self.region}
            if self.endpoint_url:
                client_kwargs["endpoint_url"] = self.endpoint_url
            self._client = boto3.client("s3", **client_kwargs)
            logger.info(f"Initialized S3 client for bucket {self.bucket} ({self.region})")
        return self._client

    def base_url(self) -> str:
        """Return the URL prefix keys are appended to."""
        if self.public_base_url:
            return self.public_base_url.rstrip("/")
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com"

    def url_for(self, key: str) -> str:
        """Return the public URL for an object key."""
        return f"{self.base_url()}/{key}"

    def publish(self, local_path: Path, key: str, media_type: str) -> str:
        """Upload a file under ``key`` and return its public URL.

        Failures are not retried here; boto3's own retry policy applies.

        Args:
            local_path: File to upload.
            key: Object key, e.g. 'landscape/<token>.mp4'.
            media_type: Content-Type stored with the object.

        Returns:
            Public URL of the uploaded object.

        Raises:
            PublishFailed: On any storage or local read error.
        """
        start_time = time.perf_counter()

        try:
            client = self._get_client()
            with open(local_path, "rb") as f:
                client.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=f,
                    ContentType=media_type,
                )
        except (BotoCoreError, ClientError) as e:
            raise PublishFailed(f"Upload of {key} to bucket {self.bucket} failed: {e}") from e
        except OSError as e:
            raise PublishFailed(f"Could not read processed file for {key}: {e.strerror}") from e

        elapsed = time.perf_counter() - start_time
        size_mb = os.path.getsize(local_path) / (1024 * 1024)
        logger.info(f"Uploaded {key} ({size_mb:.1f} MB) in {elapsed:.2f}s")

        return self.url_for(key)
