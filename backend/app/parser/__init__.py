"""Image decoding for Tap the Post."""

from __future__ import annotations

from .image_parser import ImageParser, decode_image

__all__ = ["ImageParser", "decode_image"]
