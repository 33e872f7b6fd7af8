"""Orientation stage: bucket a geometry into a storage key prefix."""

from __future__ import annotations

from vidpipe.models.schema import Orientation, StreamGeometry

# Keyed by the truncated width/height quotient
_ORIENTATION_BY_QUOTIENT = {
    1: Orientation.LANDSCAPE,
    0: Orientation.PORTRAIT,
}


def classify(geometry: StreamGeometry) -> Orientation:
    """Classify a geometry as landscape, portrait or other.

    The quotient ``width // height`` is used as-is, so anything from 1:1 up
    to (but excluding) 2:1 is landscape, anything taller than wide is
    portrait, and wider ratios fall into ``other``. Existing storage keys
    depend on these exact boundaries.

    Args:
        geometry: Dimensions of the primary video stream.

    Returns:
        The Orientation bucket.
    """
    quotient = geometry.width // geometry.height
    return _ORIENTATION_BY_QUOTIENT.get(quotient, Orientation.OTHER)
