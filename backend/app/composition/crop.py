"""Row-band cropping of the source image."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from PIL import Image

from ..exceptions import CompositionError
from ..models import SliceBoundary

logger = logging.getLogger("tapthepost.composition.crop")


def crop_band(source: Image.Image, boundary: SliceBoundary) -> Image.Image:
    """Copy one full-width band of rows into a new image.

    Pixels are copied as-is, no resampling. The source is not modified.

    Args:
        source: Decoded source image.
        boundary: Rows to copy.

    Returns:
        New image of size ``(source.width, boundary.height)``.

    Raises:
        CompositionError: If the boundary lies outside the source.
    """
    if boundary.height < 1 or boundary.start_row < 0 or boundary.end_row > source.height:
        raise CompositionError(
            f"Rows {boundary.start_row}..{boundary.end_row} outside "
            f"{source.width}x{source.height} image"
        )
    return source.crop(boundary.to_box(source.width))


def render_slices(
    source: Image.Image,
    boundaries: Sequence[SliceBoundary],
    max_workers: int = 1,
) -> list[Image.Image]:
    """Crop every boundary, in order.

    Bands are independent, so they can be cropped on a thread pool. The
    result order always follows ``boundaries``.
    """
    if max_workers <= 1 or len(boundaries) <= 1:
        return [crop_band(source, b) for b in boundaries]

    # Decode lazily-loaded data once, before workers share the source
    source.load()
    with ThreadPoolExecutor(max_workers=min(max_workers, len(boundaries))) as ex:
        return list(ex.map(lambda b: crop_band(source, b), boundaries))
