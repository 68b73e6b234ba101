"""Global configuration for Tap the Post."""

from __future__ import annotations

from PIL import Image


class Config:
    """Global configuration."""

    # Display model (4-up stacked post, phone-sized viewport)
    GAP_DISPLAY_PX = 12
    ASSUMED_DISPLAY_WIDTH = 390

    # Watermark badge
    WATERMARK_FRACTION = 0.06  # target badge width as share of the viewport
    WATERMARK_LABEL = "tap-the-post"
    WATERMARK_LOGO_PATH: str | None = None
    WATERMARK_FONT_PATH: str | None = None  # None = Pillow's bundled font
    WATERMARK_MIN_MARGIN = 8
    WATERMARK_MARGIN_DISPLAY = 12
    WATERMARK_FONT_DISPLAY = 12
    WATERMARK_MIN_FONT_DISPLAY = 10
    WATERMARK_MAX_FONT_DISPLAY = 18
    WATERMARK_FILL = (255, 255, 255, 200)
    WATERMARK_BORDER = (0, 0, 0, 48)
    WATERMARK_TEXT = (17, 17, 17, 255)

    # Output
    PNG_COMPRESS_LEVEL = 6

    # Processing
    SLICE_WORKERS = 4

    # Preview stack
    PREVIEW_RADIUS = 16
    PREVIEW_BACKGROUND = (255, 255, 255, 255)

    # Quality
    RESIZE_QUALITY = Image.Resampling.LANCZOS
    GAMMA = 2.2
