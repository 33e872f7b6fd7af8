#!/usr/bin/env python3
"""vidpipe Quickstart Example.

This script runs a local MP4 through the ingestion pipeline and publishes
the fast-start copy into a local directory, so no bucket is needed.

Usage:
    python examples/quickstart.py path/to/video.mp4 [--s3]

Requirements:
    - ffmpeg and ffprobe on PATH
    - For --s3: set VIDPIPE_S3_BUCKET (and AWS credentials)
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    """Run the quickstart example."""
    import vidpipe

    # Check command line arguments
    if len(sys.argv) < 2:
        print("Usage: python quickstart.py <video_file> [--s3]")
        print("\nExample:")
        print("  python quickstart.py clip.mp4")
        print("  VIDPIPE_S3_BUCKET=my-videos python quickstart.py clip.mp4 --s3")
        sys.exit(1)

    video_path = Path(sys.argv[1])
    use_s3 = "--s3" in sys.argv

    if not video_path.exists():
        print(f"Error: File not found: {video_path}")
        sys.exit(1)

    print(f"vidpipe v{vidpipe.__version__}")
    print(f"Processing: {video_path}")
    print(f"Storage: {'s3' if use_s3 else 'local (./quickstart_storage)'}")
    print("-" * 50)

    storage = (
        vidpipe.StorageConfig()
        if use_s3
        else vidpipe.StorageConfig(backend="local", local_root="./quickstart_storage")
    )

    # The record store is normally an external database; seed one record
    records = vidpipe.InMemoryVideoRepository(
        [vidpipe.VideoRecord(id="quickstart", owner_id="me", title=video_path.stem)]
    )
    pipeline = vidpipe.IngestionPipeline(
        records, vidpipe.PipelineConfig(storage=storage, show_progress=True)
    )

    with open(video_path, "rb") as f:
        request = vidpipe.UploadRequest(
            target_video_id="quickstart",
            parts={
                "video": vidpipe.UploadedFile(
                    content=f,
                    size=video_path.stat().st_size,
                    media_type="video/mp4",
                    filename=video_path.name,
                )
            },
        )
        try:
            record = pipeline.ingest_and_save(request, authorized_owner_id="me")
        except vidpipe.IngestionError as e:
            print(f"Error: {e}")
            sys.exit(1)

    # Display results
    print(f"\nVideo id: {record.id}")
    print(f"Title: {record.title}")
    print(f"Video URL: {record.video_url}")
    print(f"Updated: {record.updated_at.isoformat()}")


if __name__ == "__main__":
    main()
