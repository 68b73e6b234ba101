"""Watermark badge layout.

Badge sizes are expressed in on-screen pixels and converted to source pixels
through the display scale, so the badge looks the same size on the phone
regardless of the source resolution.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from functools import lru_cache
from typing import NamedTuple

from PIL import ImageFont

from ..config import Config
from ..models import WatermarkMetrics
from .geometry import round_half_up

logger = logging.getLogger("tapthepost.layout.badge")

TextMeasure = Callable[[str, int], tuple[int, int]]

_SHRINK_PASSES = 8
_SHRINK_STEP = 0.98


class _BadgeBox(NamedTuple):
    font_size: float
    font_px: int
    padding_x: float
    padding_y: float
    spacing: float
    text_width: int
    text_height: int
    logo_width: float
    logo_height: float
    width: float
    height: float


@lru_cache(maxsize=64)
def load_font(
    size: int, font_path: str | None = None
) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load the badge font at a pixel size, falling back to Pillow's default."""
    if font_path:
        try:
            return ImageFont.truetype(font_path, size)
        except OSError as e:
            logger.warning("Could not load font '%s': %s. Using default.", font_path, e)
    return ImageFont.load_default(size=size)


def measure_text(
    text: str, font_px: int, font_path: str | None = Config.WATERMARK_FONT_PATH
) -> tuple[int, int]:
    """Return the ink box ``(width, height)`` of ``text`` at ``font_px``."""
    if not text:
        return (0, 0)
    left, top, right, bottom = load_font(font_px, font_path).getbbox(text)
    return (max(0, int(right - left)), max(0, int(bottom - top)))


def compute_watermark_metrics(
    slice_size: tuple[int, int],
    display_scale: float,
    label: str = Config.WATERMARK_LABEL,
    logo_size: tuple[int, int] | None = None,
    measure: TextMeasure | None = None,
    assumed_display_width: float = Config.ASSUMED_DISPLAY_WIDTH,
    fraction: float = Config.WATERMARK_FRACTION,
) -> WatermarkMetrics | None:
    """Fit the badge into the bottom-right corner of a slice.

    The starting font size is scaled once by the tightest of three ratios:
    target width, available width and available height. The metrics are then
    recomputed at the clamped font size. If the legibility clamp pushes the
    badge past the slice, it is shrunk until it fits. If the logo still does not
    fit, it is dropped, and a badge whose label alone overflows is skipped, so
    a drawn badge is always fully inside the slice with nothing clipped.

    Args:
        slice_size: Slice (width, height) in source pixels.
        display_scale: On-screen pixels per source pixel.
        label: Badge text.
        logo_size: Natural (width, height) of the logo, or None for text-only.
        measure: Text measuring function, defaults to :func:`measure_text`.
        assumed_display_width: Viewport width in on-screen pixels.
        fraction: Target badge width as a share of the viewport.

    Returns:
        WatermarkMetrics, or None if the slice has no room for a badge.
    """
    measure = measure or measure_text
    width, height = slice_size
    scale = display_scale

    desired_width = assumed_display_width * fraction / scale
    margin = max(Config.WATERMARK_MIN_MARGIN, Config.WATERMARK_MARGIN_DISPLAY / scale)
    margin = min(margin, min(width, height) / 4)
    avail_w = math.floor(width - 2 * margin)
    avail_h = math.floor(height - 2 * margin)
    if avail_w < 1 or avail_h < 1:
        logger.debug("Slice %dx%d too small for a badge", width, height)
        return None

    box = _layout(Config.WATERMARK_FONT_DISPLAY / scale, label, logo_size, measure)
    fit = min(desired_width / box.width, avail_w / box.width, avail_h / box.height)
    font_size = min(
        max(box.font_size * fit, Config.WATERMARK_MIN_FONT_DISPLAY / scale),
        Config.WATERMARK_MAX_FONT_DISPLAY / scale,
    )
    box = _layout(font_size, label, logo_size, measure)

    # Legibility floor may be too big for this slice; fitting wins
    box = _shrink_to_fit(box, label, logo_size, measure, avail_w, avail_h)

    if logo_size and not _fits(box, avail_w, avail_h):
        # Logo minimum size still overflows; keep the label only
        logger.debug("Dropping badge logo on %dx%d slice", width, height)
        box = _layout(box.font_size, label, None, measure)
        box = _shrink_to_fit(box, label, None, measure, avail_w, avail_h)

    if not _fits(box, avail_w, avail_h):
        logger.debug("Badge does not fit %dx%d slice, skipping it", width, height)
        return None

    block_w = max(1, math.ceil(box.width))
    block_h = max(1, math.ceil(box.height))

    return WatermarkMetrics(
        font_size=box.font_size,
        font_px=box.font_px,
        padding_x=box.padding_x,
        padding_y=box.padding_y,
        spacing=box.spacing,
        text_width=box.text_width,
        text_height=box.text_height,
        logo_width=round_half_up(box.logo_width),
        logo_height=round_half_up(box.logo_height),
        block_width=block_w,
        block_height=block_h,
        margin=margin,
        x=int(width - margin - block_w),
        y=int(height - margin - block_h),
        radius=int(min(block_h / 2, block_w / 2)),
    )


def _layout(
    font_size: float,
    label: str,
    logo_size: tuple[int, int] | None,
    measure: TextMeasure,
) -> _BadgeBox:
    """Badge block dimensions at one font size."""
    font_px = max(1, round_half_up(font_size))
    text_w, text_h = measure(label, font_px)
    pad_x = 0.75 * font_size
    pad_y = 0.6 * font_size

    logo_w = logo_h = spacing = 0.0
    if logo_size and logo_size[0] > 0 and logo_size[1] > 0:
        logo_h = max(1.35 * font_size, font_size + 2)
        logo_w = max(logo_h, logo_h * logo_size[0] / logo_size[1])
        spacing = 0.6 * font_size

    return _BadgeBox(
        font_size=font_size,
        font_px=font_px,
        padding_x=pad_x,
        padding_y=pad_y,
        spacing=spacing,
        text_width=text_w,
        text_height=text_h,
        logo_width=logo_w,
        logo_height=logo_h,
        width=2 * pad_x + text_w + spacing + logo_w,
        height=2 * pad_y + max(text_h, logo_h),
    )


def _fits(box: _BadgeBox, avail_w: int, avail_h: int) -> bool:
    return box.width <= avail_w and box.height <= avail_h


def _shrink_to_fit(
    box: _BadgeBox,
    label: str,
    logo_size: tuple[int, int] | None,
    measure: TextMeasure,
    avail_w: int,
    avail_h: int,
) -> _BadgeBox:
    """Shrink the font until the badge fits, or give up after a few passes.

    Rounded text sizes and the logo's minimum height do not scale with the
    font, so a single proportional shrink can still overflow.
    """
    for _ in range(_SHRINK_PASSES):
        if _fits(box, avail_w, avail_h):
            break
        shrink = min(avail_w / box.width, avail_h / box.height) * _SHRINK_STEP
        box = _layout(box.font_size * shrink, label, logo_size, measure)
    return box
