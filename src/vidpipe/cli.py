"""Command-line interface for vidpipe."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer

from vidpipe import __version__
from vidpipe.config import PipelineConfig, StorageConfig
from vidpipe.errors import IngestionError
from vidpipe.models.schema import UploadedFile, UploadRequest, VideoRecord
from vidpipe.pipeline import IngestionPipeline, format_size
from vidpipe.stages.orientation import classify
from vidpipe.stages.probe import probe_geometry
from vidpipe.stages.remux import remux_faststart
from vidpipe.store.records import InMemoryVideoRepository
from vidpipe.utils.tools import get_tool_info

app = typer.Typer(
    name="vidpipe",
    help="Fast-start video ingestion into object storage.",
    add_completion=False,
    no_args_is_help=True,
)

# Owner used for the one-off record the upload command creates
CLI_OWNER_ID = "cli"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"vidpipe {__version__}")
        raise typer.Exit()


def _fail(e: Exception) -> NoReturn:
    typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """vidpipe: fast-start video ingestion into object storage."""
    pass


@app.command()
def probe(
    source: Annotated[
        Path,
        typer.Argument(help="Path to a video file", exists=True, readable=True, dir_okay=False),
    ],
    ffprobe_path: Annotated[str, typer.Option("--ffprobe", help="ffprobe binary")] = "ffprobe",
) -> None:
    """Print the geometry and orientation bucket of a video."""
    try:
        geometry = probe_geometry(source, ffprobe_path=ffprobe_path)
    except IngestionError as e:
        _fail(e)

    typer.echo(f"{geometry.width}x{geometry.height} {classify(geometry).value}")


@app.command()
def remux(
    source: Annotated[
        Path,
        typer.Argument(help="Path to an MP4 file", exists=True, readable=True, dir_okay=False),
    ],
    ffmpeg_path: Annotated[str, typer.Option("--ffmpeg", help="ffmpeg binary")] = "ffmpeg",
) -> None:
    """Write a fast-start copy of an MP4 next to it."""
    try:
        output = remux_faststart(source, ffmpeg_path=ffmpeg_path)
    except IngestionError as e:
        _fail(e)

    typer.echo(f"Output written to: {output}")


@app.command()
def upload(
    source: Annotated[
        Path,
        typer.Argument(help="Path to an MP4 file", exists=True, readable=True, dir_okay=False),
    ],
    bucket: Annotated[
        Optional[str],
        typer.Option("--bucket", "-b", help="S3 bucket (default: $VIDPIPE_S3_BUCKET)"),
    ] = None,
    region: Annotated[
        Optional[str],
        typer.Option("--region", "-r", help="S3 region (default: $VIDPIPE_S3_REGION)"),
    ] = None,
    endpoint_url: Annotated[
        Optional[str],
        typer.Option("--endpoint-url", help="Endpoint for S3-compatible storage"),
    ] = None,
    public_base_url: Annotated[
        Optional[str],
        typer.Option("--public-base-url", help="Base URL objects are served from (e.g. a CDN)"),
    ] = None,
    local_dir: Annotated[
        Optional[Path],
        typer.Option("--local-dir", "-d", help="Publish into a local directory instead of S3"),
    ] = None,
    video_id: Annotated[
        str,
        typer.Option("--video-id", help="Id of the record to attach the upload to"),
    ] = "local-upload",
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress progress output"),
    ] = False,
) -> None:
    """Run the full ingestion pipeline on a local file and print the record.

    Example:
        vidpipe upload clip.mp4 --bucket my-videos --region us-east-2
    """
    import logging

    from vidpipe.utils.logging import get_logger

    get_logger(level=logging.WARNING if quiet else logging.INFO)

    if local_dir is not None:
        storage = StorageConfig(
            backend="local", local_root=str(local_dir), public_base_url=public_base_url
        )
    else:
        storage = StorageConfig(
            backend="s3",
            bucket=bucket,
            region=region,
            endpoint_url=endpoint_url,
            public_base_url=public_base_url,
        )

    records = InMemoryVideoRepository([VideoRecord(id=video_id, owner_id=CLI_OWNER_ID)])

    try:
        pipeline = IngestionPipeline(
            records, PipelineConfig(storage=storage, show_progress=not quiet)
        )
        with open(source, "rb") as f:
            request = UploadRequest(
                target_video_id=video_id,
                parts={
                    "video": UploadedFile(
                        content=f,
                        size=source.stat().st_size,
                        media_type="video/mp4",
                        filename=source.name,
                    )
                },
            )
            record = pipeline.ingest_and_save(request, CLI_OWNER_ID)
    except (IngestionError, ValueError) as e:
        _fail(e)

    typer.echo(record.model_dump_json(indent=2))


@app.command()
def info() -> None:
    """Show vidpipe version and external tool availability."""
    typer.echo(f"vidpipe v{__version__}")
    typer.echo("")

    typer.echo("External tools:")
    for tool in get_tool_info():
        if tool.is_available:
            typer.echo(f"  {tool.name}: {tool.version or 'unknown version'} ({tool.path})")
        else:
            typer.secho(f"  {tool.name}: not found", fg=typer.colors.YELLOW)

    typer.echo("")
    typer.echo("Accepted uploads:")
    config = PipelineConfig()
    typer.echo(f"  Media type: {config.allowed_media_type}")
    typer.echo(f"  Max size: {format_size(config.max_upload_size)}")


if __name__ == "__main__":
    app()
