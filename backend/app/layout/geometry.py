"""Gap-aware slice geometry.

A 4-up post is shown as four stacked images separated by a fixed on-screen
gap. To make the picture read as continuous, the rows the gap hides are cut
out of the source: the gap is converted into source pixels through the
display scale, and the remaining content height is split into four bands.

Boundaries are rounded from the exact content position rather than by
accumulating rounded increments, so segment heights never drift. Slices that
collapse under extreme gap/scale ratios fall back to a plain quartile split.
"""

from __future__ import annotations

import logging
import math

from ..config import Config
from ..constants import GAP_COUNT, SLICE_COUNT
from ..exceptions import GeometryError
from ..models import SliceBoundary, SlicePlan
from ..validators import validate_dimensions

logger = logging.getLogger("tapthepost.layout.geometry")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    ``round()`` uses banker's rounding, which breaks
    ``round(x + n) == round(x) + n`` for integer ``n``.
    """
    return math.floor(value + 0.5)


def display_scale_for(image_width: float, assumed_display_width: float) -> float:
    """Ratio of on-screen pixels to source pixels, never upscaling."""
    if image_width <= 0:
        raise GeometryError(f"Image width must be positive, got {image_width}")
    if assumed_display_width <= 0:
        raise GeometryError(
            f"Display width must be positive, got {assumed_display_width}"
        )
    return min(1.0, assumed_display_width / image_width)


def plan_slices(
    image_width: int,
    image_height: int,
    gap_display_px: float = Config.GAP_DISPLAY_PX,
    assumed_display_width: float = Config.ASSUMED_DISPLAY_WIDTH,
) -> SlicePlan:
    """Compute the four row ranges for an image.

    Args:
        image_width: Source width in pixels.
        image_height: Source height in pixels.
        gap_display_px: Gap inserted by the display between images.
        assumed_display_width: Viewport width the post is shown at.

    Returns:
        SlicePlan with four boundaries, top to bottom.

    Raises:
        GeometryError: If either dimension is not positive.
    """
    validate_dimensions(image_width, image_height)
    if gap_display_px < 0:
        raise GeometryError(f"Gap must not be negative, got {gap_display_px}")

    height = int(image_height)
    scale = display_scale_for(image_width, assumed_display_width)
    gap = gap_display_px / scale
    content = max(float(SLICE_COUNT), height - gap * GAP_COUNT)
    base = content / SLICE_COUNT

    boundaries: list[SliceBoundary] = []

    if height < SLICE_COUNT:
        # Four disjoint bands cannot exist; share rows instead of failing
        boundaries = [_quartile(i, height, 0, height) for i in range(SLICE_COUNT)]
        logger.debug("Image only %d rows tall, using quartile split", height)
    else:
        cursor = 0.0
        prev_end = 0
        for i in range(SLICE_COUNT):
            target_start = round_half_up(i * base)
            if i == SLICE_COUNT - 1:
                target_end: float = content
            else:
                target_end = round_half_up((i + 1) * base)
            visible = max(1.0, target_end - target_start)

            start = _clamp(round_half_up(cursor), 0, height)
            end = _clamp(round_half_up(cursor + visible), 0, height)
            # Every later slice needs at least one row
            limit = height - (SLICE_COUNT - 1 - i)

            if end - start < 1 or start < prev_end or end > limit:
                boundary = _quartile(i, height, prev_end, limit)
                logger.debug(
                    "Slice %d collapsed (%d..%d of %d rows), fell back to %d..%d",
                    i, start, end, height, boundary.start_row, boundary.end_row,
                )
            else:
                boundary = SliceBoundary(start, end)

            boundaries.append(boundary)
            prev_end = boundary.end_row
            cursor = boundary.end_row + gap

    return SlicePlan(
        image_width=int(image_width),
        image_height=height,
        display_scale=scale,
        gap_source_px=gap,
        content_height=content,
        boundaries=tuple(boundaries),
    )


def compute_boundaries(
    image_width: int,
    image_height: int,
    gap_display_px: float = Config.GAP_DISPLAY_PX,
    assumed_display_width: float = Config.ASSUMED_DISPLAY_WIDTH,
) -> list[SliceBoundary]:
    """Return only the boundaries of :func:`plan_slices`."""
    plan = plan_slices(image_width, image_height, gap_display_px, assumed_display_width)
    return list(plan.boundaries)


def _quartile(index: int, height: int, lower: int, limit: int) -> SliceBoundary:
    """Untrimmed quarter of the image, kept within ``[lower, limit]``."""
    start = max((index * height) // SLICE_COUNT, lower)
    start = min(start, limit - 1)
    end = -(-(index + 1) * height // SLICE_COUNT)  # ceil
    end = max(start + 1, min(end, limit))
    return SliceBoundary(start, end, fallback=True)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))
