"""vidpipe: fast-start video ingestion into object storage."""

from vidpipe.config import PipelineConfig, StorageConfig
from vidpipe.errors import (
    Forbidden,
    IngestionError,
    InvalidInput,
    NotFound,
    ProbeFailed,
    PublishFailed,
    RemuxFailed,
)
from vidpipe.models.schema import (
    Orientation,
    StreamGeometry,
    UploadedFile,
    UploadRequest,
    VideoRecord,
)
from vidpipe.pipeline import IngestionPipeline
from vidpipe.stages.orientation import classify
from vidpipe.store import InMemoryVideoRepository, LocalPublisher, S3Publisher
from vidpipe.thumbnails import ThumbnailStore, get_thumbnail, upload_thumbnail

__version__ = "0.1.0"

__all__ = [
    "IngestionPipeline",
    "PipelineConfig",
    "StorageConfig",
    "IngestionError",
    "InvalidInput",
    "Forbidden",
    "NotFound",
    "ProbeFailed",
    "RemuxFailed",
    "PublishFailed",
    "Orientation",
    "StreamGeometry",
    "UploadedFile",
    "UploadRequest",
    "VideoRecord",
    "classify",
    "InMemoryVideoRepository",
    "LocalPublisher",
    "S3Publisher",
    "ThumbnailStore",
    "get_thumbnail",
    "upload_thumbnail",
    "__version__",
]
