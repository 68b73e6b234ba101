"""Watermark badge compositing."""

from __future__ import annotations

import logging
from functools import partial

from PIL import Image, ImageDraw

from ..config import Config
from ..exceptions import CompositionError
from ..layout.badge import compute_watermark_metrics, load_font, measure_text
from ..layout.geometry import round_half_up
from ..models import WatermarkMetrics
from .resize import high_quality_resize

logger = logging.getLogger("tapthepost.composition.watermark")


def apply_watermark(
    slice_image: Image.Image,
    display_scale: float,
    logo: Image.Image | None = None,
    label: str = Config.WATERMARK_LABEL,
    font_path: str | None = Config.WATERMARK_FONT_PATH,
) -> WatermarkMetrics | None:
    """Draw the badge into the bottom-right corner of ``slice_image``.

    The slice is modified in place. The badge is rendered on its own layer
    first, so nothing can be drawn outside the computed block.

    Args:
        slice_image: RGB or RGBA slice to mark.
        display_scale: On-screen pixels per source pixel of the source image.
        logo: Optional RGBA logo, drawn to the right of the label.
        label: Badge text.
        font_path: Optional TrueType font, Pillow's default when None.

    Returns:
        Metrics of the drawn badge, or None if the slice is too small.

    Raises:
        CompositionError: If the badge cannot be composited.
    """
    metrics = compute_watermark_metrics(
        slice_image.size,
        display_scale,
        label=label,
        logo_size=logo.size if logo is not None else None,
        measure=partial(measure_text, font_path=font_path),
    )
    if metrics is None:
        logger.debug("No room for a badge on %dx%d slice", *slice_image.size)
        return None

    badge = render_badge(metrics, label, display_scale, logo=logo, font_path=font_path)

    try:
        if slice_image.mode == "RGBA":
            slice_image.alpha_composite(badge, dest=(metrics.x, metrics.y))
        else:
            slice_image.paste(badge, (metrics.x, metrics.y), badge)
    except (ValueError, OSError) as e:
        raise CompositionError(f"Could not composite badge: {e}") from e

    return metrics


def render_badge(
    metrics: WatermarkMetrics,
    label: str,
    display_scale: float,
    logo: Image.Image | None = None,
    font_path: str | None = Config.WATERMARK_FONT_PATH,
) -> Image.Image:
    """Render the badge block as a transparent RGBA layer."""
    block_w, block_h = metrics.block_width, metrics.block_height
    layer = Image.new("RGBA", (block_w, block_h), (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)

    # Hairline: one on-screen pixel
    border = max(1, round_half_up(1 / display_scale))
    draw.rounded_rectangle(
        (0, 0, block_w - 1, block_h - 1),
        radius=metrics.radius,
        fill=Config.WATERMARK_FILL,
        outline=Config.WATERMARK_BORDER,
        width=border,
    )

    if label:
        font = load_font(metrics.font_px, font_path)
        left, top, _right, bottom = font.getbbox(label)
        text_x = metrics.padding_x - left
        text_y = (block_h - (bottom - top)) / 2 - top
        draw.text((text_x, text_y), label, font=font, fill=Config.WATERMARK_TEXT)

    if logo is not None and metrics.has_logo:
        _draw_logo(layer, logo, metrics)

    return layer


def _draw_logo(layer: Image.Image, logo: Image.Image, metrics: WatermarkMetrics) -> None:
    """Fit the logo inside its box, right of the label, vertically centered."""
    fit = min(metrics.logo_width / logo.width, metrics.logo_height / logo.height)
    size = (
        max(1, round_half_up(logo.width * fit)),
        max(1, round_half_up(logo.height * fit)),
    )
    scaled = high_quality_resize(logo, size).convert("RGBA")

    box_x = metrics.padding_x + metrics.text_width + metrics.spacing
    x = int(box_x + (metrics.logo_width - size[0]) / 2)
    y = max(0, (layer.height - size[1]) // 2)
    if x >= layer.width:
        return
    layer.alpha_composite(scaled, dest=(x, y))
