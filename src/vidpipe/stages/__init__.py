"""Processing stages for the vidpipe pipeline.

Each stage handles a specific part of ingestion:
- probe: Stream geometry via ffprobe
- orientation: Aspect-ratio bucket for the storage key
- remux: Fast-start stream copy via ffmpeg
"""

__all__ = [
    "probe",
    "orientation",
    "remux",
]
