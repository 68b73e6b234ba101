"""Raster operations for Tap the Post."""

from .crop import crop_band, render_slices
from .encoder import encode_png, encode_slices
from .logo import clear_logo_cache, load_logo
from .preview import build_preview
from .watermark import apply_watermark, render_badge

__all__ = [
    "apply_watermark",
    "build_preview",
    "clear_logo_cache",
    "crop_band",
    "encode_png",
    "encode_slices",
    "load_logo",
    "render_badge",
    "render_slices",
]
