"""Error taxonomy for the ingestion pipeline.

Every failure surfaced to callers is a subclass of IngestionError, so a
caller only needs one ``except`` clause to map errors onto responses.
"""

from __future__ import annotations

from pathlib import Path

# Shown instead of the temporary directory in user-facing messages
REDACTED_PATH = "<tmp>"

FFMPEG_INSTALL_HINT = (
    "Please install FFmpeg:\n"
    "  Ubuntu/Debian: sudo apt install ffmpeg\n"
    "  macOS: brew install ffmpeg\n"
    "  Windows: choco install ffmpeg"
)


class IngestionError(Exception):
    """Base class for all pipeline errors.

    Attributes:
        message: Human-readable summary, safe to show to clients.
        diagnostics: Raw diagnostic output from an external tool, if any.
    """

    def __init__(self, message: str, diagnostics: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.diagnostics = diagnostics


class InvalidInput(IngestionError):
    """Malformed, oversized or wrongly typed upload."""

    pass


class Forbidden(IngestionError):
    """The caller does not own the target record (or it does not exist)."""

    pass


class NotFound(IngestionError):
    """A requested resource does not exist."""

    pass


class ProbeFailed(IngestionError):
    """ffprobe failed or produced unusable output."""

    pass


class RemuxFailed(IngestionError):
    """ffmpeg failed to remux the upload."""

    pass


class PublishFailed(IngestionError):
    """Writing the object to storage failed."""

    pass


def scrub_paths(text: str, *paths: Path | str) -> str:
    """Replace directory components of ``paths`` in ``text``.

    Only the parent directories are hidden; the random file name itself is
    kept so log lines can still be correlated with storage keys.
    """
    for path in paths:
        parent = str(Path(path).parent)
        # Root or "." parents would match every separator
        if len(parent) > 1:
            text = text.replace(parent, REDACTED_PATH)
    return text
