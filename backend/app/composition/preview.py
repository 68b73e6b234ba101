"""Preview of the slices as a 4-up post shows them."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from PIL import Image, ImageChops, ImageDraw

from ..config import Config
from ..layout.geometry import round_half_up
from .resize import high_quality_resize

logger = logging.getLogger("tapthepost.composition.preview")


def build_preview(
    slices: Sequence[Image.Image],
    display_width: int = Config.ASSUMED_DISPLAY_WIDTH,
    gap: int = Config.GAP_DISPLAY_PX,
    radius: int = Config.PREVIEW_RADIUS,
) -> Image.Image:
    """Stack the slices at display size with the post's gap between them.

    Slices wider than ``display_width`` are scaled down; narrower ones are
    shown at their own size, matching the display scale used for slicing.
    """
    if not slices:
        return Image.new("RGB", (display_width, 1), Config.PREVIEW_BACKGROUND[:3])

    tiles = [_scale_tile(s, display_width) for s in slices]
    width = max(t.width for t in tiles)
    height = sum(t.height for t in tiles) + gap * (len(tiles) - 1)

    canvas = Image.new("RGBA", (width, height), Config.PREVIEW_BACKGROUND)
    y = 0
    for tile in tiles:
        mask = Image.new("L", tile.size, 0)
        r = min(radius, tile.width // 2, tile.height // 2)
        ImageDraw.Draw(mask).rounded_rectangle(
            (0, 0, tile.width - 1, tile.height - 1), radius=r, fill=255
        )
        if tile.mode == "RGBA":
            mask = ImageChops.multiply(tile.getchannel("A"), mask)
        canvas.paste(tile.convert("RGB"), ((width - tile.width) // 2, y), mask)
        y += tile.height + gap

    logger.debug("Built %dx%d preview from %d slices", width, height, len(tiles))
    return canvas.convert("RGB")


def _scale_tile(image: Image.Image, display_width: int) -> Image.Image:
    if image.width <= display_width:
        return image.copy()
    height = max(1, round_half_up(image.height * display_width / image.width))
    return high_quality_resize(image, (display_width, height))
